"""Shared fixtures for Colloquy tests.

Every collaborator is an in-memory fake, so sessions run deterministically
without devices, storage or an NLU model.
"""

import pytest

from colloquy.core.interfaces import Device
from colloquy.core.message_sink import BufferedMessageSink
from colloquy.runtime.manager import ConversationManager
from colloquy.runtime.memory import (
    InMemoryAppRegistry,
    InMemoryDeviceDirectory,
    InMemoryKeywordStore,
    InMemoryPreferences,
    StaticIdentity,
)
from colloquy.runtime.services import SessionServices
from colloquy.semantics.catalog import ActionCatalog

LIVING_ROOM_TV = Device(id="tv-living-room", display_name="Living Room TV")
BEDROOM_TV = Device(id="tv-bedroom", display_name="Bedroom TV")
DESK_LAMP = Device(id="hue-1", display_name="Desk Lamp")
TWITTER = Device(id="twitter-account", display_name="Twitter")


@pytest.fixture
def catalog() -> ActionCatalog:
    """Catalog bundled with the package."""
    return ActionCatalog.default()


@pytest.fixture
def devices() -> InMemoryDeviceDirectory:
    """Two TVs, one lamp and a Twitter account; no Facebook."""
    return InMemoryDeviceDirectory(
        {
            "tv": [LIVING_ROOM_TV, BEDROOM_TV],
            "lightbulb": [DESK_LAMP],
            "twitter": [TWITTER],
        }
    )


@pytest.fixture
def preferences() -> InMemoryPreferences:
    """Preferences of a user who already finished onboarding."""
    return InMemoryPreferences({"sabrina-initialized": True, "sabrina-name": "Alice"})


@pytest.fixture
def keywords() -> InMemoryKeywordStore:
    return InMemoryKeywordStore()


@pytest.fixture
def identity() -> StaticIdentity:
    return StaticIdentity("Alice")


@pytest.fixture
def apps() -> InMemoryAppRegistry:
    return InMemoryAppRegistry({"app-weather": "Weather"})


@pytest.fixture
def services(catalog, devices, preferences, keywords, identity, apps) -> SessionServices:
    return SessionServices(
        catalog=catalog,
        devices=devices,
        preferences=preferences,
        keywords=keywords,
        identity=identity,
        apps=apps,
    )


@pytest.fixture
def sink() -> BufferedMessageSink:
    return BufferedMessageSink()


@pytest.fixture
async def manager(services, sink) -> ConversationManager:
    """Attached manager sitting in the default context, sink emptied."""
    manager = ConversationManager(services, session_id="test-session")
    await manager.attach(sink)
    sink.clear()
    return manager
