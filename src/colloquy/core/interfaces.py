"""Collaborator interfaces (Protocols) consumed by the conversation core.

Concrete implementations live outside the core; in-memory versions for
tests and the CLI are in ``colloquy.runtime.memory``.
"""

from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class Device:
    """A configured device instance of some kind."""

    id: str
    display_name: str


@dataclass(frozen=True)
class InvocationResult:
    """Outcome of invoking a channel on one device."""

    ok: bool
    message: str | None = None

    @classmethod
    def success(cls) -> "InvocationResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, message: str) -> "InvocationResult":
        return cls(ok=False, message=message)


@runtime_checkable
class DeviceDirectory(Protocol):
    """Enumerates devices and invokes their channels."""

    async def devices_of_kind(self, kind: str) -> list[Device]:
        """Devices of the given kind, in a stable order."""
        ...

    async def invoke(self, device_id: str, channel: str, args: list[Any]) -> InvocationResult:
        """Invoke a channel; timeouts and cancellation are the directory's concern."""
        ...


class PreferenceStore(Protocol):
    """Persistent key-value preferences."""

    def get(self, key: str) -> Any:
        """Stored value or None."""
        ...

    def set(self, key: str, value: Any) -> None:
        ...


class KeywordHandle(Protocol):
    """An opened keyword observable."""

    @property
    def value(self) -> Any:
        ...

    async def change_value(self, value: Any) -> None:
        ...


class KeywordStore(Protocol):
    """Long-lived keyword observables.

    ``open`` returns an async context manager so the keyword is always
    closed after use:

        async with keywords.open("DateOfBirth") as kw:
            if kw.value is None:
                ...
    """

    def open(self, key: str) -> AbstractAsyncContextManager[KeywordHandle]:
        ...


class IdentityResolver(Protocol):
    """Looks up the user's own display name on the messaging platform."""

    async def resolve_self_display_name(self) -> str:
        """Raises IdentityUnavailableError when the name cannot be found."""
        ...


class AppRegistry(Protocol):
    """Installed apps: lookup for notifications and loading for onboarding."""

    def get_app_name(self, app_id: str) -> str | None:
        ...

    def has_app(self, app_id: str) -> bool:
        ...

    async def load_app(self, app_id: str, code: str, description: str) -> None:
        ...


class SemanticParser(Protocol):
    """External NLU turning free text into lambda form text."""

    async def analyze(self, text: str) -> str:
        ...
