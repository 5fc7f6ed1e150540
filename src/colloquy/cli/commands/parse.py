"""Parse command: show how one lambda form is read and classified."""

import json
from pathlib import Path

import typer
from rich.console import Console

from colloquy.config.loader import ConfigLoader
from colloquy.core.errors import ColloquyError
from colloquy.forms.parser import parse
from colloquy.forms.serializer import serialize
from colloquy.semantics.analyzer import SemanticAnalyzer
from colloquy.semantics.catalog import ActionCatalog


def run_parse(
    form: str = typer.Argument(..., help="Lambda form, e.g. '(tt:device.action.post)'"),
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Path to colloquy.yaml or config directory"
    ),
) -> None:
    """Print the parse tree and the classified command as JSON."""
    console = Console()
    try:
        loaded = ConfigLoader.load(config) if config else ConfigLoader.load_default()
        tree = parse(form)
        command = SemanticAnalyzer(ActionCatalog.from_config(loaded)).analyze(tree)
    except (ColloquyError, FileNotFoundError) as e:
        console.print(f"[red]Error: {e}[/]")
        raise typer.Exit(1)

    console.print(f"[bold]Form:[/] {serialize(tree)}", markup=True, highlight=False)
    typer.echo(json.dumps(command.model_dump(mode="json", by_alias=True), indent=2))
