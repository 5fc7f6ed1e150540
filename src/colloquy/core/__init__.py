"""Core domain types and infrastructure."""

from colloquy.core.commands import (
    ActionCommand,
    ActionTarget,
    Affirm,
    ClassifiedCommand,
    Constant,
    Deny,
    Input,
    ParameterSpec,
    Special,
    Value,
    parse_command,
)
from colloquy.core.constants import ParamType, SpecialName, ValueCategory
from colloquy.core.message_sink import BufferedMessageSink, MessageSink

__all__ = [
    "ActionCommand",
    "ActionTarget",
    "Affirm",
    "ClassifiedCommand",
    "Constant",
    "Deny",
    "Input",
    "ParameterSpec",
    "Special",
    "Value",
    "parse_command",
    "ParamType",
    "SpecialName",
    "ValueCategory",
    "MessageSink",
    "BufferedMessageSink",
]
