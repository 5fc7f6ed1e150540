"""In-memory collaborators for interactive sessions and tests."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from colloquy.core.errors import IdentityUnavailableError
from colloquy.core.interfaces import Device, InvocationResult

logger = logging.getLogger(__name__)


class InMemoryDeviceDirectory:
    """Device directory backed by a dict of kind -> devices.

    Every invocation is recorded in ``invocations``; devices listed in
    ``failures`` report a failed invocation with the given message.
    """

    def __init__(
        self,
        devices: dict[str, list[Device]] | None = None,
        failures: dict[str, str] | None = None,
    ):
        self._devices = {kind: list(items) for kind, items in (devices or {}).items()}
        self.failures = dict(failures or {})
        self.invocations: list[tuple[str, str, list[Any]]] = []

    def add(self, kind: str, device: Device) -> None:
        self._devices.setdefault(kind, []).append(device)

    async def devices_of_kind(self, kind: str) -> list[Device]:
        return list(self._devices.get(kind, []))

    async def invoke(self, device_id: str, channel: str, args: list[Any]) -> InvocationResult:
        logger.info(f"Executing action {channel} on {device_id} with {args}")
        self.invocations.append((device_id, channel, list(args)))
        if device_id in self.failures:
            return InvocationResult.failure(self.failures[device_id])
        return InvocationResult.success()


class InMemoryPreferences:
    def __init__(self, values: dict[str, Any] | None = None):
        self.values: dict[str, Any] = dict(values or {})

    def get(self, key: str) -> Any:
        return self.values.get(key)

    def set(self, key: str, value: Any) -> None:
        self.values[key] = value


class InMemoryKeyword:
    """Keyword observable; counts how often it was opened and closed."""

    def __init__(self, value: Any = None):
        self.value = value
        self.open_count = 0
        self.close_count = 0

    async def change_value(self, value: Any) -> None:
        self.value = value


class InMemoryKeywordStore:
    def __init__(self, values: dict[str, Any] | None = None):
        self._keywords = {key: InMemoryKeyword(value) for key, value in (values or {}).items()}

    def get(self, key: str) -> InMemoryKeyword:
        return self._keywords.setdefault(key, InMemoryKeyword())

    @asynccontextmanager
    async def open(self, key: str) -> AsyncIterator[InMemoryKeyword]:
        keyword = self.get(key)
        keyword.open_count += 1
        try:
            yield keyword
        finally:
            keyword.close_count += 1


class StaticIdentity:
    """Identity resolver returning a fixed name, or failing when it has none."""

    def __init__(self, name: str | None = None):
        self.name = name
        self.calls = 0

    async def resolve_self_display_name(self) -> str:
        self.calls += 1
        if self.name is None:
            raise IdentityUnavailableError("No identity available")
        return self.name


class InMemoryAppRegistry:
    def __init__(self, apps: dict[str, str] | None = None):
        self.apps: dict[str, str] = dict(apps or {})
        self.loaded: list[tuple[str, str, str]] = []

    def get_app_name(self, app_id: str) -> str | None:
        return self.apps.get(app_id)

    def has_app(self, app_id: str) -> bool:
        return app_id in self.apps

    async def load_app(self, app_id: str, code: str, description: str) -> None:
        logger.info(f"Loading app {app_id}")
        self.loaded.append((app_id, code, description))
        self.apps[app_id] = description


class PassthroughNLU:
    """Treats the incoming text as lambda form text already."""

    async def analyze(self, text: str) -> str:
        return text
