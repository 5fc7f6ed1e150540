"""Per-session conversation manager.

Owns the active dialogue context (plus at most one nested child), the
raw-input flag and the queue of notifications that could not be
delivered yet. Every inbound turn goes through one of ``handle_text``,
``handle_form`` or ``dispatch``; all of them share the same error
boundary, so no exception raised while handling a turn ends the session.
"""

import uuid
from collections import deque
from collections.abc import Awaitable
from typing import Any

from colloquy.core.commands import ClassifiedCommand
from colloquy.core.errors import LambdaSyntaxError, SemanticError
from colloquy.core.message_sink import MessageSink
from colloquy.dialog.base import DialogueContext
from colloquy.dialog.default import DefaultContext
from colloquy.dialog.initialization import InitializationContext
from colloquy.forms.parser import parse
from colloquy.observability.logging import ContextLogger
from colloquy.runtime.services import SessionServices
from colloquy.semantics.analyzer import SemanticAnalyzer


class ConversationManager:
    """Routes one user's turns to the active dialogue context."""

    def __init__(self, services: SessionServices, session_id: str | None = None):
        self._services = services
        self.session_id = session_id or f"session_{uuid.uuid4().hex[:6]}"
        self.log = ContextLogger(__name__).with_context(session_id=self.session_id)

        self._analyzer = SemanticAnalyzer(services.catalog)
        self._active: DialogueContext = DefaultContext()
        self._raw_mode = False
        self._queue: deque[tuple[str, Any]] = deque()
        self._sink: MessageSink | None = None
        self._started = False

    @property
    def services(self) -> SessionServices:
        return self._services

    @property
    def active_context(self) -> DialogueContext:
        return self._active

    @property
    def raw_mode(self) -> bool:
        return self._raw_mode

    @property
    def notification_queue(self) -> list[tuple[str, Any]]:
        """Snapshot of undelivered notifications, oldest first."""
        return list(self._queue)

    # -- output sink -----------------------------------------------------

    async def attach(self, sink: MessageSink) -> None:
        """Attach the output sink.

        The first attach starts the session with the onboarding context.
        Queued notifications are then delivered in arrival order.
        """
        self._sink = sink
        if not self._started:
            self._started = True
            self.log.info("Starting conversation")
            await self._guard(self.set_context(InitializationContext()))
        await self.flush_notifications()

    def detach(self) -> None:
        self.log.debug("Output sink detached")
        self._sink = None

    async def send_reply(self, message: str) -> None:
        if self._sink is None:
            self.log.warning(f"No output sink attached, dropping reply: {message}")
            return
        await self._sink.send(message)

    # -- transitions (called by contexts) --------------------------------

    async def set_context(self, context: DialogueContext) -> None:
        """Replace the active context, including any child."""
        self.log.debug(f"Switching context {self._active.name} -> {context.name}")
        self._raw_mode = False
        self._active = context
        await context.start(self)
        await self.flush_notifications()

    async def reset_to_default(self) -> None:
        await self.set_context(DefaultContext())

    async def descend(
        self,
        parent: DialogueContext,
        child: DialogueContext,
        command: ClassifiedCommand | None = None,
    ) -> bool:
        """Nest ``child`` under the active context.

        Only one level of nesting exists: ``parent`` must be the active
        context and must not already have a child.
        """
        if parent is not self._active or parent.child is not None:
            raise RuntimeError(f"{parent.name} cannot take child context {child.name}")

        self.log.debug(f"Descending from {parent.name} into {child.name}")
        parent.child = child
        self._raw_mode = False
        await child.start(self)
        if command is not None:
            return await child.handle(self, command)
        return True

    async def end_context(self, context: DialogueContext) -> None:
        """A child returns control to its parent; the root returns to the default."""
        if self._active.child is context:
            self.log.debug(f"{context.name} finished, resuming {self._active.name}")
            self._active.child = None
            await self._active.resume(self)
        elif self._active is context:
            await self.reset_to_default()
        else:
            self.log.debug(f"Ignoring end of inactive context {context.name}")

    def set_raw_mode(self, enabled: bool) -> None:
        self._raw_mode = enabled

    # -- notifications ---------------------------------------------------

    async def notify(self, source_id: str, event: Any) -> bool:
        """Offer a notification to the active context, queueing it if unhandled."""
        if self._sink is None:
            self._queue.append((source_id, event))
            return False

        try:
            delivered = await self._active.notify(self, source_id, event)
        except Exception:
            self.log.exception(f"Notification from {source_id} failed in {self._active.name}")
            return False

        if not delivered:
            self.log.debug(f"{self._active.name} deferred notification from {source_id}")
            self._queue.append((source_id, event))
        return delivered

    async def flush_notifications(self) -> None:
        if self._sink is None or not self._queue:
            return
        pending = list(self._queue)
        self._queue.clear()
        for source_id, event in pending:
            await self.notify(source_id, event)

    # -- inbound turns ---------------------------------------------------

    async def handle_text(self, text: str) -> bool:
        """Handle a line of user input.

        In raw mode the text goes to the context untouched. Otherwise the
        NLU collaborator turns it into a lambda form first.
        """
        if self._raw_mode:
            self.log.debug(f"Raw input for {self._active.name}")
            return await self._guard(self._active.handle_raw(self, text))
        return await self._guard(self._understand(text))

    async def handle_form(self, text: str) -> bool:
        """Handle an already-produced lambda form, skipping the NLU step."""
        return await self._guard(self._classify_and_dispatch(text))

    async def dispatch(self, command: ClassifiedCommand | str) -> bool:
        """Route a classified command, or raw text, to the active context."""
        if isinstance(command, str):
            return await self.handle_text(command)
        return await self._guard(self._active.handle(self, command))

    async def _understand(self, text: str) -> bool:
        form_text = await self._services.nlu.analyze(text)
        return await self._classify_and_dispatch(form_text)

    async def _classify_and_dispatch(self, text: str) -> bool:
        form = parse(text)
        command = self._analyzer.analyze(form)
        self.log.info(f"Dispatching {command.type} to {self._active.name}")
        return await self._active.handle(self, command)

    async def _guard(self, operation: Awaitable[Any]) -> bool:
        try:
            await operation
        except LambdaSyntaxError as e:
            self.log.info(f"Syntax error in lambda form: {e}")
            await self._active.fail(self)
            return False
        except SemanticError as e:
            self.log.info(f"Could not classify command: {e}")
            await self._active.fail(self)
            return False
        except Exception:
            self.log.exception(f"Unhandled error in {self._active.name}")
            await self._active.fail_reset(self)
            return False
        return True
