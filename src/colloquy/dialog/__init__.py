"""Dialogue contexts: the conversation state machine."""

from colloquy.dialog.action import ActionContext
from colloquy.dialog.base import DialogueContext
from colloquy.dialog.default import DefaultContext
from colloquy.dialog.initialization import InitializationContext

__all__ = ["ActionContext", "DefaultContext", "DialogueContext", "InitializationContext"]
