"""Tests for the generic dispatch shared by all dialogue contexts"""

import pytest

from colloquy.core.commands import Affirm, Deny, Special, Value
from colloquy.core.constants import ValueCategory
from colloquy.dialog.action import ActionContext
from colloquy.dialog.base import HELP_TEXT, DialogueContext
from colloquy.dialog.default import DefaultContext

CONFUSED = "I'm a little confused, sorry. What were we talking about?"


class WaitingContext(DialogueContext):
    """Context that only ever waits for an answer of one category."""

    def __init__(self, category: ValueCategory, question: str = "Well?"):
        super().__init__()
        self.category = category
        self.question = question
        self.answers: list = []

    async def start(self, manager) -> None:
        await self.ask(manager, self.category, self.question)

    async def handle_command(self, manager, command) -> bool:
        self.answers.append(command)
        return True


@pytest.mark.asyncio
async def test_yes_no_rejects_values(manager, sink):
    """Test a Value while expecting yes/no gets a clarifying reply and keeps waiting"""
    # Arrange
    context = WaitingContext(ValueCategory.YES_NO, "Is that right?")
    await manager.set_context(context)
    sink.clear()

    # Act
    await manager.dispatch(Value(category=ValueCategory.NUMBER, payload=7))

    # Assert
    assert sink.messages == ["Just answer yes or no."]
    assert context.expecting is ValueCategory.YES_NO
    assert context.answers == []
    assert manager.active_context is context


@pytest.mark.asyncio
async def test_yes_no_passes_affirm_to_context(manager):
    context = WaitingContext(ValueCategory.YES_NO)
    await manager.set_context(context)

    await manager.dispatch(Affirm())

    assert context.answers == [Affirm()]


@pytest.mark.asyncio
async def test_category_mismatch_with_affirm(manager, sink):
    """Test 'yes' when a number is expected asks 'Yes what?'"""
    # Arrange
    context = WaitingContext(ValueCategory.NUMBER)
    await manager.set_context(context)
    sink.clear()

    # Act
    await manager.dispatch(Affirm())

    # Assert
    assert sink.messages == ["Yes what?"]
    assert manager.active_context is context


@pytest.mark.asyncio
async def test_category_mismatch_with_deny_resets(manager, sink):
    """Test 'no' when a date is expected abandons the context"""
    # Arrange
    await manager.set_context(WaitingContext(ValueCategory.DATE))
    sink.clear()

    # Act
    await manager.dispatch(Deny())

    # Assert
    assert sink.messages == ["Ok forget it"]
    assert isinstance(manager.active_context, DefaultContext)


@pytest.mark.asyncio
async def test_category_mismatch_with_other_value(manager, sink):
    context = WaitingContext(ValueCategory.DATE)
    await manager.set_context(context)
    sink.clear()

    await manager.dispatch(Value(category=ValueCategory.NUMBER, payload=3))

    assert sink.messages == ["That's not what I asked."]
    assert context.expecting is ValueCategory.DATE


@pytest.mark.asyncio
async def test_matching_value_reaches_context(manager):
    context = WaitingContext(ValueCategory.NUMBER)
    await manager.set_context(context)

    await manager.dispatch(Value(category=ValueCategory.NUMBER, payload=3))

    assert context.answers == [Value(category=ValueCategory.NUMBER, payload=3)]


@pytest.mark.asyncio
async def test_hello_uses_stored_name(manager, sink):
    await manager.dispatch(Special(name="hello"))
    assert sink.messages == ["Hi, Alice"]


@pytest.mark.asyncio
async def test_hello_without_name(manager, sink, preferences):
    preferences.values.pop("sabrina-name")

    await manager.dispatch(Special(name="hello"))

    assert sink.messages == ["Hi!"]


@pytest.mark.asyncio
async def test_debug_describes_state(manager, sink):
    """Test debug names the context and what it expects"""
    # Act
    await manager.dispatch(Special(name="debug"))
    await manager.set_context(WaitingContext(ValueCategory.RAW_STRING, "Name?"))
    sink.clear()
    await manager.dispatch(Special(name="debug"))

    # Assert
    assert sink.messages == ["This is a WaitingContext", "I'm expecting a free-form text"]


@pytest.mark.asyncio
async def test_debug_when_idle(manager, sink):
    await manager.dispatch(Special(name="debug"))
    assert sink.messages == ["This is a DefaultContext", "I'm not expecting anything"]


@pytest.mark.asyncio
async def test_help_repeats_pending_question(manager, sink):
    """Test help while waiting for a number repeats the question"""
    # Arrange
    await manager.set_context(WaitingContext(ValueCategory.NUMBER, "How many?"))
    sink.clear()

    # Act
    await manager.dispatch(Special(name="help"))

    # Assert
    assert sink.messages == ["Sure! How can I help you?", HELP_TEXT, "How many?"]


@pytest.mark.asyncio
async def test_help_while_expecting_yes_no(manager, sink):
    await manager.set_context(WaitingContext(ValueCategory.YES_NO))
    sink.clear()

    await manager.dispatch(Special(name="help"))

    assert sink.messages[-1] == "At this time, just a yes or no will be fine though."


@pytest.mark.parametrize(
    "name,replies",
    [
        ("thankyou", ["At your service."]),
        ("sorry", ["No need to be sorry.", "Unless you're Canadian. Then I won't stop you."]),
        ("cool", ["I know, right?"]),
        ("weird", ["I'm not sure what to say to that."]),
    ],
)
@pytest.mark.asyncio
async def test_fixed_special_replies(manager, sink, name, replies):
    await manager.dispatch(Special(name=name))
    assert sink.messages == replies


@pytest.mark.asyncio
async def test_nevermind_returns_to_default(manager, sink):
    """Test nevermind abandons whatever was pending"""
    # Arrange
    await manager.set_context(WaitingContext(ValueCategory.NUMBER))
    sink.clear()

    # Act
    await manager.dispatch(Special(name="nevermind"))

    # Assert
    assert sink.messages == ["Ok forget it"]
    assert isinstance(manager.active_context, DefaultContext)


@pytest.mark.asyncio
async def test_unhandled_command_confuses_and_resets(manager, sink):
    """Test a command no context handles is never dropped silently"""
    # Arrange
    context = ActionContext()
    await manager.set_context(context)

    # Act
    await manager.dispatch(Affirm())

    # Assert
    assert sink.messages == [CONFUSED]
    assert isinstance(manager.active_context, DefaultContext)


@pytest.mark.asyncio
async def test_raw_text_without_raw_handler_confuses(manager, sink):
    """Test raw text reaching a context that cannot take it resets to default"""
    # Arrange
    await manager.set_context(WaitingContext(ValueCategory.RAW_STRING))
    sink.clear()

    # Act
    await manager.handle_text("free text")

    # Assert
    assert sink.messages == [CONFUSED]
    assert isinstance(manager.active_context, DefaultContext)
