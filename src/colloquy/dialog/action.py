"""Action context: resolves the device, elicits parameters, confirms and executes."""

import asyncio
import logging
from datetime import date
from typing import TYPE_CHECKING, Any

from colloquy.core.commands import (
    ActionCommand,
    ActionTarget,
    Affirm,
    ClassifiedCommand,
    Constant,
    Deny,
    Input,
    LiteralValue,
    Value,
)
from colloquy.core.constants import ValueCategory
from colloquy.core.errors import DeviceResolutionError, ExecutionError
from colloquy.core.interfaces import Device
from colloquy.dialog.base import DialogueContext

if TYPE_CHECKING:
    from colloquy.runtime.manager import ConversationManager

logger = logging.getLogger(__name__)


def spoken(value: Any) -> str:
    """Render an argument the way it is read back to the user."""
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, date):
        return f"{value:%B} {value.day}, {value.year}"
    return str(value)


class ActionContext(DialogueContext):
    """Turns an ``ActionCommand`` into a device invocation.

    The first command handled must be the ``ActionCommand``. From there:

    1. Resolve devices: none ends the context, one is bound silently,
       several are offered as a numbered choice.
    2. Fill the schema in order: constants from the catalog, then the
       parameters supplied with the command, then questions for the rest.
    3. With ``confirm`` set, ask "Ok, so you want me to ... Is that right?".
    4. Invoke the channel on every resolved device concurrently.
    """

    def __init__(self, confirm: bool = True):
        super().__init__()
        self.confirm = confirm

        self.kind: str | None = None
        self.channel: str | None = None

        self.candidate_devices: list[Device] = []
        self.devices: list[Device] | None = None

        self.remaining_schema: list[Constant | Input] = []
        self.supplied: list[LiteralValue] = []
        self.current_param: Input | None = None
        self.resolved_args: list[Any] = []
        self.confirming = False

    def describe(self) -> str:
        parts = [self.kind or "", self.channel or "", *(spoken(a) for a in self.resolved_args)]
        return " ".join(p for p in parts if p)

    async def handle_command(
        self, manager: "ConversationManager", command: ClassifiedCommand
    ) -> bool:
        if self.kind is None:
            if not isinstance(command, ActionCommand):
                return False
            return await self._begin(manager, command)

        if isinstance(command, ActionCommand):
            return await self.reply(manager, "You already told me what to do.")

        if self.devices is None:
            return await self._handle_pick(manager, command)

        if self.confirming:
            return await self._handle_confirmation(manager, command)

        if self.current_param is not None:
            if isinstance(command, Affirm):
                answer: Any = True
            elif isinstance(command, Deny):
                answer = False
            elif isinstance(command, Value):
                answer = command.payload
            else:
                return False
            return await self._accept(manager, answer)

        return False

    async def handle_raw(self, manager: "ConversationManager", text: str) -> bool:
        if (
            self.child is None
            and self.current_param is not None
            and self.expecting is ValueCategory.RAW_STRING
        ):
            return await self._accept(manager, text)
        return await super().handle_raw(manager, text)

    # -- device resolution -----------------------------------------------

    async def _begin(self, manager: "ConversationManager", command: ActionCommand) -> bool:
        try:
            target, devices = await self._resolve_target(manager, command.targets)
        except DeviceResolutionError as e:
            logger.info(str(e))
            await self.reply(manager, f"You don't have a {' or '.join(e.kinds)}")
            return await self.leave(manager)

        self.kind = target.kind
        self.channel = target.channel
        self.remaining_schema = list(target.parameters)
        self.supplied = list(command.params)

        if len(devices) == 1:
            self.devices = [devices[0]]
            return await self._continue(manager)

        self.candidate_devices = devices
        await self.reply(manager, f"You have multiple {self.kind}s")
        choices = " or ".join(f"{i}) {d.display_name}" for i, d in enumerate(devices, start=1))
        return await self.ask(manager, ValueCategory.NUMBER, f"Do you mean {choices}?")

    @staticmethod
    async def _resolve_target(
        manager: "ConversationManager", targets: list[ActionTarget]
    ) -> tuple[ActionTarget, list[Device]]:
        for target in targets:
            devices = await manager.services.devices.devices_of_kind(target.kind)
            if devices:
                return target, devices
        raise DeviceResolutionError([t.kind for t in targets])

    async def _handle_pick(
        self, manager: "ConversationManager", command: ClassifiedCommand
    ) -> bool:
        if not isinstance(command, Value):
            return False

        count = len(self.candidate_devices)
        choice = command.payload
        if (
            not isinstance(choice, (int, float))
            or choice != int(choice)
            or not 1 <= choice <= count
        ):
            return await self.reply(manager, f"Please choose a number between 1 and {count}")

        device = self.candidate_devices[int(choice) - 1]
        await self.reply(manager, f"You chose {device.display_name}")
        self.devices = [device]
        self.candidate_devices = []
        self.clear_expectation(manager)
        return await self._continue(manager)

    # -- parameters ------------------------------------------------------

    async def _accept(self, manager: "ConversationManager", answer: Any) -> bool:
        self.resolved_args.append(answer)
        self.current_param = None
        self.clear_expectation(manager)
        return await self._continue(manager)

    async def _next_parameter(self, manager: "ConversationManager") -> bool:
        while self.remaining_schema:
            param = self.remaining_schema.pop(0)

            if isinstance(param, Constant):
                self.resolved_args.append(param.value)
                continue

            if self.supplied:
                self.resolved_args.append(self.supplied.pop(0))
                continue

            self.current_param = param
            return await self.ask(manager, param.category, param.question)

        if self.supplied:
            logger.warning(
                f"Ignoring extra parameters for {self.kind} {self.channel}: {self.supplied}"
            )
            self.supplied = []
        return False

    async def _continue(self, manager: "ConversationManager") -> bool:
        if await self._next_parameter(manager):
            return True

        if not self.confirm:
            return await self.execute(manager)

        self.confirming = True
        return await self._ask_confirmation(manager)

    async def _ask_confirmation(self, manager: "ConversationManager") -> bool:
        question = f"Ok, so you want me to {self.describe()}. Is that right?"
        return await self.ask(manager, ValueCategory.YES_NO, question)

    async def _handle_confirmation(
        self, manager: "ConversationManager", command: ClassifiedCommand
    ) -> bool:
        if isinstance(command, Affirm):
            self.confirming = False
            self.clear_expectation(manager)
            return await self.execute(manager)
        if isinstance(command, Deny):
            return await self.reset(manager)
        return await self._ask_confirmation(manager)

    # -- execution -------------------------------------------------------

    async def execute(self, manager: "ConversationManager") -> bool:
        devices = self.devices or []
        args = list(self.resolved_args)

        outcomes = await asyncio.gather(
            *(self._invoke(manager, device, args) for device in devices),
            return_exceptions=True,
        )
        failures = [o for o in outcomes if isinstance(o, Exception)]
        if failures:
            await self.reply(manager, f"Sorry, that did not work: {failures[0]}")
            return await self.leave(manager)

        return await self.done(manager)

    async def _invoke(
        self, manager: "ConversationManager", device: Device, args: list[Any]
    ) -> None:
        channel = self.channel or ""
        logger.info(f"Executing action {channel} on {device.id}")
        try:
            result = await manager.services.devices.invoke(device.id, channel, args)
        except Exception as e:
            logger.exception(f"Invocation of {channel} on {device.id} raised")
            raise ExecutionError(str(e)) from e
        if not result.ok:
            raise ExecutionError(result.message or f"{channel} failed on {device.display_name}")
