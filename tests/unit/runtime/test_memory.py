"""Tests for the in-memory collaborators"""

import pytest

from colloquy.core.errors import IdentityUnavailableError
from colloquy.core.interfaces import Device, DeviceDirectory, InvocationResult
from colloquy.runtime.memory import (
    InMemoryAppRegistry,
    InMemoryDeviceDirectory,
    InMemoryKeywordStore,
    InMemoryPreferences,
    PassthroughNLU,
    StaticIdentity,
)


@pytest.mark.asyncio
async def test_device_directory_lists_and_records(devices):
    """Test devices come back in insertion order and invocations are recorded"""
    # Act
    tvs = await devices.devices_of_kind("tv")
    missing = await devices.devices_of_kind("toaster")
    result = await devices.invoke("tv-bedroom", "setpower", [True])

    # Assert
    assert [d.id for d in tvs] == ["tv-living-room", "tv-bedroom"]
    assert missing == []
    assert result == InvocationResult.success()
    assert devices.invocations == [("tv-bedroom", "setpower", [True])]


@pytest.mark.asyncio
async def test_device_directory_failures():
    directory = InMemoryDeviceDirectory(
        {"tv": [Device(id="tv-1", display_name="TV")]}, failures={"tv-1": "offline"}
    )

    result = await directory.invoke("tv-1", "setpower", [False])

    assert result.ok is False
    assert result.message == "offline"


@pytest.mark.asyncio
async def test_device_list_is_a_copy(devices):
    tvs = await devices.devices_of_kind("tv")
    tvs.clear()

    assert len(await devices.devices_of_kind("tv")) == 2


def test_device_directory_satisfies_protocol(devices):
    assert isinstance(devices, DeviceDirectory)


def test_preferences_get_and_set():
    preferences = InMemoryPreferences()

    assert preferences.get("sabrina-name") is None
    preferences.set("sabrina-name", "Alice")
    assert preferences.get("sabrina-name") == "Alice"


@pytest.mark.asyncio
async def test_keyword_open_closes_on_error():
    """Test an opened keyword is closed even when the body raises"""
    # Arrange
    store = InMemoryKeywordStore({"Gender": None})

    # Act
    with pytest.raises(ValueError):
        async with store.open("Gender") as keyword:
            await keyword.change_value("female")
            raise ValueError("interrupted")

    # Assert
    keyword = store.get("Gender")
    assert keyword.value == "female"
    assert keyword.open_count == keyword.close_count == 1


@pytest.mark.asyncio
async def test_static_identity():
    assert await StaticIdentity("Alice").resolve_self_display_name() == "Alice"

    anonymous = StaticIdentity()
    with pytest.raises(IdentityUnavailableError):
        await anonymous.resolve_self_display_name()
    assert anonymous.calls == 1


@pytest.mark.asyncio
async def test_app_registry_load():
    """Test loading an app makes it known by its description"""
    # Arrange
    registry = InMemoryAppRegistry()

    # Act
    await registry.load_app("app-PopulateDatabase", "code", "Populate Database")

    # Assert
    assert registry.has_app("app-PopulateDatabase")
    assert registry.get_app_name("app-PopulateDatabase") == "Populate Database"
    assert registry.get_app_name("app-other") is None
    assert registry.loaded == [("app-PopulateDatabase", "code", "Populate Database")]


@pytest.mark.asyncio
async def test_passthrough_nlu():
    assert await PassthroughNLU().analyze("(tt:root.special.yes)") == "(tt:root.special.yes)"
