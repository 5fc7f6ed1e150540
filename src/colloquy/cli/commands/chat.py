"""Chat command for interactive sessions."""

import asyncio
from pathlib import Path

import typer

app = typer.Typer(help="Start an interactive session with the assistant")


@app.callback(invoke_without_command=True)
def run_chat(
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Path to colloquy.yaml or config directory"
    ),
    debug: bool = typer.Option(False, "--debug", help="Debug mode"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose mode"),
    ctx: typer.Context = typer.Option(None, hidden=True),  # Inject context
) -> None:
    """Start interactive chat session."""
    if ctx and ctx.invoked_subcommand:
        return

    from colloquy.cli.chat_runner import ChatConfig, run_chat_session

    chat_config = ChatConfig(config_path=config, debug=debug, verbose=verbose)

    try:
        asyncio.run(run_chat_session(chat_config))
    except KeyboardInterrupt:
        pass
    except Exception as e:
        typer.echo(f"Fatal error: {e}", err=True)
        raise typer.Exit(1)
