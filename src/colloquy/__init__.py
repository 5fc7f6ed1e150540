"""Colloquy - a command-driven virtual assistant core.

Parses lambda-calculus command forms, classifies them against an action
catalog and drives a dialogue state machine that elicits parameters,
confirms and executes device actions.

Quick start:
    from colloquy import ActionCatalog, ConversationManager, SessionServices

    manager = ConversationManager(services)
    await manager.attach(sink)
    await manager.handle_form("(tt:device.action.post)")
"""

from colloquy.__version__ import __version__
from colloquy.config.loader import ConfigLoader
from colloquy.core.commands import (
    ActionCommand,
    Affirm,
    ClassifiedCommand,
    Deny,
    Special,
    Value,
)
from colloquy.core.errors import (
    ColloquyError,
    ConfigError,
    DeviceResolutionError,
    ExecutionError,
    LambdaSyntaxError,
    SemanticError,
)
from colloquy.forms import parse, serialize
from colloquy.runtime import ConversationManager, SessionServices
from colloquy.semantics import ActionCatalog, SemanticAnalyzer

__all__ = [
    "__version__",
    # Runtime
    "ConversationManager",
    "SessionServices",
    "ConfigLoader",
    # Language
    "parse",
    "serialize",
    "ActionCatalog",
    "SemanticAnalyzer",
    # Commands
    "ClassifiedCommand",
    "ActionCommand",
    "Affirm",
    "Deny",
    "Special",
    "Value",
    # Errors
    "ColloquyError",
    "ConfigError",
    "LambdaSyntaxError",
    "SemanticError",
    "DeviceResolutionError",
    "ExecutionError",
]
