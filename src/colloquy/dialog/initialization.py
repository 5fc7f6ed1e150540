"""Onboarding checklist run at the start of a session."""

import logging
from typing import TYPE_CHECKING

from colloquy.core.commands import ActionCommand, Affirm, ClassifiedCommand, Deny, Value
from colloquy.core.constants import ValueCategory
from colloquy.core.errors import IdentityUnavailableError
from colloquy.dialog.action import ActionContext
from colloquy.dialog.base import DialogueContext

if TYPE_CHECKING:
    from colloquy.runtime.manager import ConversationManager

logger = logging.getLogger(__name__)

NAME_STEP = "name"
APP_STEP = "app"
BIRTHDAY_STEP = "birthday"
GENDER_STEP = "gender"


class InitializationContext(DialogueContext):
    """Walks a fixed checklist until every item is satisfied.

    Items, in order: the user's display name, the data-collection
    companion app, then the birthday and gender keywords (only when the
    app is installed). ``advance`` skips satisfied items, so running it
    again without a new answer asks the same question and repeats no
    side effect.
    """

    def __init__(self) -> None:
        super().__init__()
        self.step: str | None = None

        self.user_name: str | None = None
        self.tentative_name: str | None = None
        self.identity_checked = False
        self.name_declined = False

        self.app_ok = False
        self.has_app = False
        self.birthday_ok = False
        self.gender_ok = False

    async def start(self, manager: "ConversationManager") -> None:
        settings = manager.services.settings
        prefs = manager.services.preferences
        if prefs.get(settings.preference_keys.initialized):
            await self.switch_to_default(manager)
            return

        prefs.set(settings.preference_keys.initialized, True)
        await self.reply(
            manager,
            f"Hello! My name is {settings.assistant_name}, and I'm your virtual assistant.",
        )
        await self.advance(manager)

    async def advance(self, manager: "ConversationManager") -> bool:
        """Ask about the first unsatisfied item, or finish."""
        for check in (self._check_name, self._check_app, self._check_birthday, self._check_gender):
            if await check(manager):
                return True

        self.step = None
        await self.reply(manager, "Ok, now I'm ready to use all my magic powers to help you.")
        return await self.switch_to_default(manager)

    async def interrupt(self, manager: "ConversationManager", command: ActionCommand) -> bool:
        logger.debug(f"Onboarding interrupted by action {command.kind} {command.channel}")
        return await self.descend(manager, ActionContext(), command)

    # -- checklist -------------------------------------------------------

    async def _check_name(self, manager: "ConversationManager") -> bool:
        if self.user_name is not None:
            return False

        key = manager.services.settings.preference_keys.name
        stored = manager.services.preferences.get(key)
        if stored is not None:
            self.user_name = stored
            return False

        self.step = NAME_STEP
        if self.name_declined:
            return await self.ask(manager, ValueCategory.RAW_STRING, "Ok, what's your name then?")

        if not self.identity_checked:
            self.identity_checked = True
            try:
                self.tentative_name = await manager.services.identity.resolve_self_display_name()
            except IdentityUnavailableError as e:
                logger.info(f"Failed to obtain user name: {e}")
            except Exception as e:
                logger.warning(f"Identity lookup failed, asking for the name: {e!r}")

        if self.tentative_name:
            return await self.ask(
                manager, ValueCategory.YES_NO, f"Can I call you {self.tentative_name}?"
            )
        return await self.ask(manager, ValueCategory.RAW_STRING, "What's your name?")

    async def _check_app(self, manager: "ConversationManager") -> bool:
        if self.app_ok:
            return False

        app_id = manager.services.settings.companion_app.app_id
        if manager.services.apps.has_app(app_id):
            self.app_ok = True
            self.has_app = True
            return False

        self.step = APP_STEP
        await self.reply(
            manager,
            "It looks like you're not storing your personal information in the database yet.",
        )
        return await self.ask(manager, ValueCategory.YES_NO, "Would you like me to do so?")

    async def _check_birthday(self, manager: "ConversationManager") -> bool:
        if self.birthday_ok or not self.has_app:
            return False

        key = manager.services.settings.personal_keywords.birthday
        async with manager.services.keywords.open(key) as keyword:
            if keyword.value is not None:
                self.birthday_ok = True
                return False

        self.step = BIRTHDAY_STEP
        await self.ask(manager, ValueCategory.DATE, "When were you born?")
        return await self.reply(
            manager, "(You can say no at any time and I will stop asking you questions)"
        )

    async def _check_gender(self, manager: "ConversationManager") -> bool:
        if self.gender_ok or not self.has_app:
            return False

        key = manager.services.settings.personal_keywords.gender
        async with manager.services.keywords.open(key) as keyword:
            if keyword.value is not None:
                self.gender_ok = True
                return False

        self.step = GENDER_STEP
        return await self.ask(manager, ValueCategory.RAW_STRING, "Are you male or female?")

    # -- answers ---------------------------------------------------------

    async def handle_command(
        self, manager: "ConversationManager", command: ClassifiedCommand
    ) -> bool:
        if self.step == NAME_STEP and self.expecting is ValueCategory.YES_NO:
            if isinstance(command, Affirm) and self.tentative_name:
                return await self._set_name(manager, self.tentative_name)
            if isinstance(command, Deny):
                self.name_declined = True
                return await self.advance(manager)
            return False

        if self.step == APP_STEP and self.expecting is ValueCategory.YES_NO:
            return await self._handle_app_response(manager, command)

        if self.step == BIRTHDAY_STEP and isinstance(command, Value):
            key = manager.services.settings.personal_keywords.birthday
            await self._store_keyword(manager, key, command.payload)
            self.birthday_ok = True
            self.clear_expectation(manager)
            return await self.advance(manager)

        if self.step == GENDER_STEP and isinstance(command, Value):
            return await self._set_gender(manager, str(command.payload))

        if self.step == NAME_STEP and isinstance(command, Value):
            return await self._set_name(manager, str(command.payload))

        return False

    async def handle_raw(self, manager: "ConversationManager", text: str) -> bool:
        if self.child is None and self.expecting is ValueCategory.RAW_STRING:
            if self.step == NAME_STEP:
                return await self._set_name(manager, text.strip())
            if self.step == GENDER_STEP:
                return await self._set_gender(manager, text.strip())
        return await super().handle_raw(manager, text)

    async def _handle_app_response(
        self, manager: "ConversationManager", command: ClassifiedCommand
    ) -> bool:
        if not isinstance(command, (Affirm, Deny)):
            return False

        self.app_ok = True
        self.clear_expectation(manager)
        if isinstance(command, Affirm):
            app = manager.services.settings.companion_app
            self.has_app = True
            await manager.services.apps.load_app(app.app_id, app.code, app.description)
            logger.info(f"Installed companion app {app.app_id}")
        else:
            self.has_app = False
        return await self.advance(manager)

    async def _set_name(self, manager: "ConversationManager", name: str) -> bool:
        self.user_name = name
        manager.services.preferences.set(manager.services.settings.preference_keys.name, name)
        self.clear_expectation(manager)
        await self.reply(manager, f"Hi {name}, nice to meet you.")
        return await self.advance(manager)

    async def _set_gender(self, manager: "ConversationManager", gender: str) -> bool:
        key = manager.services.settings.personal_keywords.gender
        await self._store_keyword(manager, key, gender)
        self.gender_ok = True
        self.clear_expectation(manager)
        return await self.advance(manager)

    @staticmethod
    async def _store_keyword(manager: "ConversationManager", key: str, value: object) -> None:
        async with manager.services.keywords.open(key) as keyword:
            await keyword.change_value(value)
