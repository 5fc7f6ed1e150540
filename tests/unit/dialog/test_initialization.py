"""Tests for the onboarding checklist"""

from datetime import date
from unittest.mock import AsyncMock

import pytest

from colloquy.core.commands import Affirm, Deny, Value
from colloquy.core.constants import ValueCategory
from colloquy.dialog.action import ActionContext
from colloquy.dialog.default import DefaultContext
from colloquy.dialog.initialization import InitializationContext
from colloquy.runtime.manager import ConversationManager
from colloquy.runtime.memory import InMemoryAppRegistry, InMemoryPreferences

GREETING = "Hello! My name is Sabrina, and I'm your virtual assistant."
READY = "Ok, now I'm ready to use all my magic powers to help you."
NOT_STORING = "It looks like you're not storing your personal information in the database yet."


@pytest.fixture
def preferences() -> InMemoryPreferences:
    """A user who has never been onboarded."""
    return InMemoryPreferences()


@pytest.fixture
def apps() -> InMemoryAppRegistry:
    return InMemoryAppRegistry()


@pytest.fixture
async def session(services, sink) -> ConversationManager:
    """Manager that has just started onboarding."""
    manager = ConversationManager(services)
    await manager.attach(sink)
    return manager


async def accept_name_and_app(manager: ConversationManager) -> None:
    await manager.dispatch(Affirm())
    await manager.dispatch(Affirm())


@pytest.mark.asyncio
async def test_first_attach_greets_and_proposes_name(session, sink, identity, preferences):
    """Test onboarding proposes the name from the identity collaborator"""
    # Assert
    assert sink.messages == [GREETING, "Can I call you Alice?"]
    assert isinstance(session.active_context, InitializationContext)
    assert session.active_context.expecting is ValueCategory.YES_NO
    assert preferences.get("sabrina-initialized") is True
    assert identity.calls == 1


@pytest.mark.asyncio
async def test_full_onboarding(session, sink, apps, keywords, preferences):
    """Test the whole checklist: name, app, birthday, gender, then default"""
    # Act
    await session.dispatch(Affirm())
    await session.dispatch(Affirm())
    await session.dispatch(Value(category=ValueCategory.DATE, payload=date(1990, 5, 17)))
    assert session.raw_mode is True
    await session.handle_text("female")

    # Assert
    assert sink.messages == [
        GREETING,
        "Can I call you Alice?",
        "Hi Alice, nice to meet you.",
        NOT_STORING,
        "Would you like me to do so?",
        "When were you born?",
        "(You can say no at any time and I will stop asking you questions)",
        "Are you male or female?",
        READY,
    ]
    assert preferences.get("sabrina-name") == "Alice"
    assert [app_id for app_id, _, _ in apps.loaded] == ["app-PopulateDatabase"]
    assert keywords.get("DateOfBirth").value == date(1990, 5, 17)
    assert keywords.get("Gender").value == "female"
    assert isinstance(session.active_context, DefaultContext)


@pytest.mark.asyncio
async def test_keywords_are_always_closed(session, keywords):
    """Test every keyword opened during onboarding is closed again"""
    # Act
    await accept_name_and_app(session)
    await session.dispatch(Value(category=ValueCategory.DATE, payload=date(1990, 5, 17)))
    await session.handle_text("male")

    # Assert
    for key in ("DateOfBirth", "Gender"):
        keyword = keywords.get(key)
        assert keyword.open_count > 0
        assert keyword.open_count == keyword.close_count


@pytest.mark.asyncio
async def test_advance_twice_asks_same_question(session, sink, identity, apps):
    """Test re-running the checklist without an answer repeats the question only"""
    # Arrange
    await session.dispatch(Affirm())
    context = session.active_context
    sink.clear()

    # Act
    await context.advance(session)
    first = (context.pending_question, list(sink.messages))
    sink.clear()
    await context.advance(session)
    second = (context.pending_question, list(sink.messages))

    # Assert
    assert first == second
    assert first == ("Would you like me to do so?", [NOT_STORING, "Would you like me to do so?"])
    assert apps.loaded == []
    assert identity.calls == 1


@pytest.mark.asyncio
async def test_advance_after_install_does_not_reinstall(session, sink, apps):
    """Test the app step is skipped once answered"""
    # Arrange
    await accept_name_and_app(session)
    context = session.active_context
    sink.clear()

    # Act
    await context.advance(session)

    # Assert
    assert len(apps.loaded) == 1
    assert context.pending_question == "When were you born?"


@pytest.mark.asyncio
async def test_name_question_repeats_identically(session, sink, identity):
    context = session.active_context
    sink.clear()

    await context.advance(session)
    await context.advance(session)

    assert sink.messages == ["Can I call you Alice?", "Can I call you Alice?"]
    assert identity.calls == 1


@pytest.mark.asyncio
async def test_declined_name_asks_for_raw_name(session, sink, preferences):
    """Test 'no' to the proposed name asks for free text"""
    # Act
    await session.dispatch(Deny())
    raw_mode_after_deny = session.raw_mode
    await session.handle_text("  Bob ")

    # Assert
    assert raw_mode_after_deny is True
    assert sink.messages[2:5] == [
        "Ok, what's your name then?",
        "Hi Bob, nice to meet you.",
        NOT_STORING,
    ]
    assert preferences.get("sabrina-name") == "Bob"


@pytest.mark.asyncio
async def test_unknown_identity_asks_for_name(services, sink, identity):
    """Test a failing identity lookup falls back to asking"""
    # Arrange
    identity.name = None
    manager = ConversationManager(services)

    # Act
    await manager.attach(sink)

    # Assert
    assert sink.messages == [GREETING, "What's your name?"]
    assert manager.raw_mode is True


@pytest.mark.asyncio
async def test_declining_app_skips_personal_questions(session, sink, apps):
    """Test 'no' to the app ends onboarding without asking birthday or gender"""
    # Act
    await session.dispatch(Affirm())
    await session.dispatch(Deny())

    # Assert
    assert sink.messages[-1] == READY
    assert apps.loaded == []
    assert isinstance(session.active_context, DefaultContext)


@pytest.mark.asyncio
async def test_satisfied_checklist_finishes_immediately(
    services, sink, preferences, apps, keywords
):
    """Test onboarding skips every step that is already satisfied"""
    # Arrange
    preferences.set("sabrina-name", "Alice")
    apps.apps["app-PopulateDatabase"] = "Populate Database"
    keywords.get("DateOfBirth").value = date(1990, 5, 17)
    keywords.get("Gender").value = "female"
    manager = ConversationManager(services)

    # Act
    await manager.attach(sink)

    # Assert
    assert sink.messages == [GREETING, READY]
    assert isinstance(manager.active_context, DefaultContext)


@pytest.mark.asyncio
async def test_already_initialized_goes_straight_to_default(services, sink, preferences):
    preferences.set("sabrina-initialized", True)
    manager = ConversationManager(services)

    await manager.attach(sink)

    assert sink.messages == []
    assert isinstance(manager.active_context, DefaultContext)


@pytest.mark.asyncio
async def test_action_interrupts_and_returns_to_onboarding(session, sink, devices):
    """Test an action mid-onboarding runs as a child, then the question is asked again"""
    # Arrange
    sink.clear()

    # Act
    await session.handle_form("(tt:device.action.turnon tt:device.lightbulb)")
    child = session.active_context.child
    await session.dispatch(Affirm())

    # Assert
    assert isinstance(child, ActionContext)
    assert sink.messages == [
        "Ok, so you want me to lightbulb setpower yes. Is that right?",
        "Consider it done.",
        "Can I call you Alice?",
    ]
    assert devices.invocations == [("hue-1", "setpower", [True])]
    assert isinstance(session.active_context, InitializationContext)
    assert session.active_context.child is None
    assert session.active_context.expecting is ValueCategory.YES_NO


@pytest.mark.asyncio
async def test_child_receives_raw_text(session, sink, devices):
    """Test raw answers reach the child context while it is asking"""
    # Arrange
    await session.handle_form("(tt:device.action.tweet)")

    # Act
    await session.handle_text("hello from onboarding")
    await session.dispatch(Affirm())

    # Assert
    assert devices.invocations == [("twitter-account", "sink", ["hello from onboarding"])]
    assert sink.messages[-1] == "Can I call you Alice?"


@pytest.mark.asyncio
async def test_child_failure_returns_to_parent(session, sink):
    """Test a child with no device ends and hands control back"""
    # Act
    await session.handle_form("(tt:device.action.post tt:device.facebook)")

    # Assert
    assert sink.messages[-2:] == ["You don't have a facebook", "Can I call you Alice?"]
    assert isinstance(session.active_context, InitializationContext)


@pytest.mark.parametrize("error", [TimeoutError("slow"), ConnectionError("down")])
@pytest.mark.asyncio
async def test_identity_outage_asks_for_name(services, sink, identity, error):
    """Test any failure of the identity lookup falls back to asking for the name"""
    # Arrange
    identity.resolve_self_display_name = AsyncMock(side_effect=error)
    manager = ConversationManager(services)

    # Act
    await manager.attach(sink)
    await manager.handle_text("Carol")

    # Assert
    assert sink.messages[:3] == [GREETING, "What's your name?", "Hi Carol, nice to meet you."]
    assert isinstance(manager.active_context, InitializationContext)
