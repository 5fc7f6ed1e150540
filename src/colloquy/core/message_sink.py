"""MessageSink interface for reply delivery.

This module defines the abstract interface for sending reply text to the
user, plus a buffering implementation for tests and batch delivery.
"""

from abc import ABC, abstractmethod


class MessageSink(ABC):
    """Interface for sending messages to the user (DIP)."""

    @abstractmethod
    async def send(self, message: str) -> None:
        """Send a message to the user immediately."""
        ...


class BufferedMessageSink(MessageSink):
    """Buffers messages for testing or batch delivery."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    async def send(self, message: str) -> None:
        """Append message to buffer."""
        self.messages.append(message)

    def clear(self) -> None:
        """Clear the message buffer."""
        self.messages.clear()
