"""Base dialogue context with the generic waiting/expectation handling."""

import logging
from typing import TYPE_CHECKING, Any

from colloquy.core.commands import ActionCommand, Affirm, ClassifiedCommand, Deny, Special, Value
from colloquy.core.constants import SpecialName, ValueCategory

if TYPE_CHECKING:
    from colloquy.runtime.manager import ConversationManager

logger = logging.getLogger(__name__)

HELP_TEXT = (
    "If you're unsure what to say, I understand most actions and objects. "
    "You can ask me a question and I'll try to answer it. "
    "You can tell me to do something at a later time if you give me the condition or the time."
)


class DialogueContext:
    """One unit of conversation state.

    Every operation receives the ``ConversationManager`` explicitly. A
    context is either the session's active context or the single child of
    it (``descend``); the child sees every command first.

    Subclasses override ``handle_command`` for their own behaviour and may
    override ``start``, ``handle_raw``, ``notify``, ``interrupt`` and
    ``resume``.
    """

    def __init__(self) -> None:
        self.expecting: ValueCategory | None = None
        self.pending_question: str | None = None
        self.child: DialogueContext | None = None

    @property
    def name(self) -> str:
        return type(self).__name__

    # -- lifecycle hooks -------------------------------------------------

    async def start(self, manager: "ConversationManager") -> None:
        """Called once when the context becomes active."""

    async def notify(self, manager: "ConversationManager", source_id: str, event: Any) -> bool:
        """Deliver an out-of-band notification. False leaves it queued."""
        return False

    async def resume(self, manager: "ConversationManager") -> None:
        """Regain control after a child context ended."""
        if self.expecting is not None and self.pending_question is not None:
            await self.ask(manager, self.expecting, self.pending_question)
        else:
            manager.set_raw_mode(False)

    async def interrupt(self, manager: "ConversationManager", command: ActionCommand) -> bool:
        """Offered new action commands before expectation checks."""
        return False

    # -- dispatch --------------------------------------------------------

    async def handle(self, manager: "ConversationManager", command: ClassifiedCommand) -> bool:
        if await self.handle_generic(manager, command):
            return True
        if await self.handle_command(manager, command):
            return True
        return await self.confused(manager)

    async def handle_command(
        self, manager: "ConversationManager", command: ClassifiedCommand
    ) -> bool:
        return False

    async def handle_raw(self, manager: "ConversationManager", text: str) -> bool:
        if self.child is not None:
            return await self.child.handle_raw(manager, text)
        return await self.confused(manager)

    async def handle_generic(
        self, manager: "ConversationManager", command: ClassifiedCommand
    ) -> bool:
        if self.child is not None:
            if await self.child.handle(manager, command):
                return True

        if isinstance(command, Special):
            await self._handle_special(manager, command)
            return True

        if isinstance(command, ActionCommand) and await self.interrupt(manager, command):
            return True

        if self.expecting is ValueCategory.YES_NO:
            if isinstance(command, (Affirm, Deny)):
                return False
            return await self.reply(manager, "Just answer yes or no.")

        if self.expecting is not None and not (
            isinstance(command, Value) and command.category is self.expecting
        ):
            if isinstance(command, Affirm):
                return await self.reply(manager, "Yes what?")
            if isinstance(command, Deny):
                return await self.reset(manager)
            return await self.unexpected(manager)

        return False

    async def _handle_special(self, manager: "ConversationManager", command: Special) -> None:
        name = command.name
        if name == SpecialName.HELLO:
            key = manager.services.settings.preference_keys.name
            user = manager.services.preferences.get(key)
            await self.reply(manager, f"Hi, {user}" if user else "Hi!")
        elif name == SpecialName.DEBUG:
            await self.reply(manager, f"This is a {self.name}")
            if self.expecting is None:
                await self.reply(manager, "I'm not expecting anything")
            else:
                await self.reply(manager, f"I'm expecting a {self.expecting.label}")
        elif name == SpecialName.HELP:
            await self.reply(manager, "Sure! How can I help you?")
            await self.reply(manager, HELP_TEXT)
            if self.expecting is ValueCategory.YES_NO:
                await self.reply(manager, "At this time, just a yes or no will be fine though.")
            elif self.expecting is not None and self.pending_question is not None:
                await self.reply(manager, self.pending_question)
        elif name == SpecialName.THANKYOU:
            await self.reply(manager, "At your service.")
        elif name == SpecialName.SORRY:
            await self.reply(manager, "No need to be sorry.")
            await self.reply(manager, "Unless you're Canadian. Then I won't stop you.")
        elif name == SpecialName.COOL:
            await self.reply(manager, "I know, right?")
        elif name == SpecialName.NEVERMIND:
            await self.reset(manager)
        else:
            logger.debug(f"Unhandled special command {name}")
            await self.reply(manager, "I'm not sure what to say to that.")

    # -- expectation -----------------------------------------------------

    async def ask(
        self, manager: "ConversationManager", category: ValueCategory, question: str
    ) -> bool:
        self.pending_question = question
        self.expect(manager, category)
        return await self.reply(manager, question)

    def expect(self, manager: "ConversationManager", category: ValueCategory | None) -> None:
        self.expecting = category
        manager.set_raw_mode(category is ValueCategory.RAW_STRING)

    def clear_expectation(self, manager: "ConversationManager") -> None:
        self.pending_question = None
        self.expect(manager, None)

    # -- transitions -----------------------------------------------------

    async def switch_to(
        self,
        manager: "ConversationManager",
        context: "DialogueContext",
        command: ClassifiedCommand | None = None,
    ) -> bool:
        """Replace the whole active context (children included) with ``context``."""
        await manager.set_context(context)
        if command is not None:
            return await context.handle(manager, command)
        return True

    async def switch_to_default(self, manager: "ConversationManager") -> bool:
        await manager.reset_to_default()
        return True

    async def descend(
        self,
        manager: "ConversationManager",
        child: "DialogueContext",
        command: ClassifiedCommand | None = None,
    ) -> bool:
        """Nest ``child`` under this context; control returns here when it leaves."""
        return await manager.descend(self, child, command)

    async def leave(self, manager: "ConversationManager") -> bool:
        """End this context: a child returns to its parent, a root to the default."""
        await manager.end_context(self)
        return True

    # -- replies ---------------------------------------------------------

    async def reply(self, manager: "ConversationManager", message: str) -> bool:
        await manager.send_reply(message)
        return True

    async def reset(self, manager: "ConversationManager") -> bool:
        await self.reply(manager, "Ok forget it")
        return await self.leave(manager)

    async def done(self, manager: "ConversationManager") -> bool:
        await self.reply(manager, "Consider it done.")
        return await self.leave(manager)

    async def unexpected(self, manager: "ConversationManager") -> bool:
        return await self.reply(manager, "That's not what I asked.")

    async def fail(self, manager: "ConversationManager") -> bool:
        return await self.reply(manager, "Sorry, I did not understand that. Can you rephrase it?")

    async def fail_reset(self, manager: "ConversationManager") -> bool:
        """Fail and lose context."""
        await self.fail(manager)
        return await self.switch_to_default(manager)

    async def confused(self, manager: "ConversationManager") -> bool:
        await self.reply(manager, "I'm a little confused, sorry. What were we talking about?")
        return await self.switch_to_default(manager)
