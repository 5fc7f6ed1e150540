"""Observability module for Colloquy."""

from colloquy.observability.logging import ContextLogger, setup_logging

__all__ = ["ContextLogger", "setup_logging"]
