"""Main CLI entry point for Colloquy"""

import typer

from colloquy.__version__ import __version__
from colloquy.cli.commands import chat as chat_module
from colloquy.cli.commands import parse as parse_module

app = typer.Typer(
    name="colloquy",
    help="Colloquy - command-driven virtual assistant",
    add_completion=False,
)

# Register subcommands
app.add_typer(chat_module.app, name="chat", help="Start an interactive session")
app.command(name="parse", help="Parse and classify one lambda form")(parse_module.run_parse)


def version_callback(value: bool) -> None:
    """Print version and exit"""
    if value:
        typer.echo(f"Colloquy version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Colloquy - command-driven virtual assistant"""
    pass


def cli() -> None:
    """Entry point for CLI"""
    app()


if __name__ == "__main__":
    cli()
