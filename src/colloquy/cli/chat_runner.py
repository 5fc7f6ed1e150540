"""Interactive chat runner for Colloquy CLI."""

from dataclasses import dataclass
from pathlib import Path

from rich.console import Console
from rich.prompt import Prompt

from colloquy.config.loader import ConfigLoader
from colloquy.config.models import ColloquyConfig
from colloquy.core.errors import ConfigError
from colloquy.core.interfaces import Device
from colloquy.core.message_sink import MessageSink
from colloquy.observability.logging import setup_logging
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

BANNER_ART = r"""
            _ _
  ___ ___ | | | ___   __ _ _   _ _   _
 / __/ _ \| | |/ _ \ / _` | | | | | | |
| (_| (_) | | | (_) | (_| | |_| | |_| |
 \___\___/|_|_|\___/ \__, |\__,_|\__, |
                        |_|      |___/
"""


class ConsoleMessageSink(MessageSink):
    """Sink that prints to rich console."""

    def __init__(self, console: Console, assistant_name: str = "Sabrina"):
        self.console = console
        self.assistant_name = assistant_name

    async def send(self, message: str) -> None:
        self.console.print(f"[bold blue]{self.assistant_name} > [/]{message}", highlight=False)


@dataclass
class ChatConfig:
    """Configuration for chat runner."""

    config_path: Path | None = None
    verbose: bool = False
    debug: bool = False


def build_sandbox_services(config: ColloquyConfig) -> SessionServices:
    """Wire in-memory collaborators from the ``sandbox`` config section."""
    devices = {
        kind: [Device(id=d.id, display_name=d.name) for d in items]
        for kind, items in config.sandbox.devices.items()
    }
    return SessionServices(
        catalog=ActionCatalog.from_config(config),
        devices=InMemoryDeviceDirectory(devices),
        preferences=InMemoryPreferences(),
        keywords=InMemoryKeywordStore(),
        identity=StaticIdentity(config.sandbox.identity),
        apps=InMemoryAppRegistry(config.sandbox.installed_apps),
        settings=config.settings,
    )


class ChatRunner:
    """Interactive chat session runner.

    Lines are read as lambda forms, except while the assistant waits for
    free text (raw mode), when they are passed through untouched.
    """

    def __init__(self, config: ChatConfig, console: Console | None = None):
        self.config = config
        self.console = console or Console()
        self.manager: ConversationManager | None = None
        self._running = False

    async def setup(self) -> None:
        """Load config and start the session.

        Raises:
            ConfigError: If config is invalid
        """
        try:
            if self.config.config_path is not None:
                colloquy_config = ConfigLoader.load(self.config.config_path)
            else:
                colloquy_config = ConfigLoader.load_default()
        except ConfigError as e:
            self.console.print(f"[red]Invalid config: {e}[/]")
            raise

        settings = colloquy_config.settings
        level = settings.log_level
        if self.config.debug:
            level = "DEBUG"
        elif self.config.verbose:
            level = "INFO"
        setup_logging(level, settings.log_file)

        self.manager = ConversationManager(build_sandbox_services(colloquy_config))
        self.console.print(BANNER_ART, style="bold blue")
        self.console.print(f"Session ID: [green]{self.manager.session_id}[/]")
        self.console.print("Type 'exit' or 'quit' to end session.\n")
        await self.manager.attach(ConsoleMessageSink(self.console, settings.assistant_name))

    async def handle_line(self, user_input: str) -> bool:
        """Process one input line. Returns False when the session should end."""
        if self._is_exit_command(user_input):
            self.console.print("\n[yellow]Goodbye![/]")
            return False
        if not user_input.strip() or self.manager is None:
            return True

        if self.manager.raw_mode:
            await self.manager.handle_text(user_input)
        else:
            await self.manager.handle_form(user_input.strip())
        return True

    async def start(self) -> None:
        """Start the interactive session."""
        if self.manager is None:
            await self.setup()

        self._running = True
        while self._running:
            try:
                prompt = "[bold green]You (text)[/]" if self._raw_mode() else "[bold green]You[/]"
                user_input = Prompt.ask(prompt, console=self.console)
                self._running = await self.handle_line(user_input)
            except (KeyboardInterrupt, EOFError):
                self.console.print("\n[yellow]Goodbye![/]")
                break
            except Exception as e:
                if self.config.debug:
                    self.console.print_exception()
                else:
                    self.console.print(f"[red]Error: {e}[/]")

    def _raw_mode(self) -> bool:
        return self.manager is not None and self.manager.raw_mode

    def _is_exit_command(self, user_input: str) -> bool:
        """Check if input is an exit command."""
        return user_input.strip().lower() in ("quit", "exit", "q", "/quit", "/exit")

    async def cleanup(self) -> None:
        """Clean up resources."""
        self._running = False
        if self.manager is not None:
            self.manager.detach()
            self.manager = None

    async def __aenter__(self) -> "ChatRunner":
        await self.setup()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.cleanup()


async def run_chat_session(config: ChatConfig) -> None:
    """Run an interactive chat session.

    Args:
        config: Chat configuration
    """
    async with ChatRunner(config) as runner:
        await runner.start()
