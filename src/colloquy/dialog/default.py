"""Idle context: waits for a new command."""

import logging
from typing import TYPE_CHECKING, Any

from colloquy.core.commands import ActionCommand, Affirm, ClassifiedCommand, Deny
from colloquy.dialog.action import ActionContext
from colloquy.dialog.base import DialogueContext

if TYPE_CHECKING:
    from colloquy.runtime.manager import ConversationManager

logger = logging.getLogger(__name__)


class DefaultContext(DialogueContext):
    """Nothing pending. Delivers notifications and starts actions."""

    async def notify(self, manager: "ConversationManager", source_id: str, event: Any) -> bool:
        app_name = manager.services.apps.get_app_name(source_id)
        if app_name is None:
            logger.warning(f"Dropping notification from unknown app {source_id}")
            return True
        items = event if isinstance(event, (list, tuple)) else [event]
        return await self.reply(
            manager, f"Notification from {app_name}: {', '.join(str(i) for i in items)}"
        )

    async def handle_command(
        self, manager: "ConversationManager", command: ClassifiedCommand
    ) -> bool:
        if isinstance(command, Affirm):
            return await self.reply(manager, "I agree, but to what?")
        if isinstance(command, Deny):
            return await self.reply(manager, "No way!")
        if isinstance(command, ActionCommand):
            return await self.switch_to(manager, ActionContext(), command)
        return False
