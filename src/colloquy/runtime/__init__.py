"""Conversation runtime: session manager and collaborators."""

from colloquy.runtime.manager import ConversationManager
from colloquy.runtime.services import SessionServices

__all__ = ["ConversationManager", "SessionServices"]
