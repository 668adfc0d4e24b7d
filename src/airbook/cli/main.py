"""Main CLI entry point for airbook"""

import typer

from airbook import __version__
from airbook.cli.commands import book as book_module
from airbook.cli.commands import search as search_module

app = typer.Typer(
    name="airbook",
    help="airbook - flight booking workflow driver",
    add_completion=False,
)

app.command(name="validate-search", help="Validate a flight search request")(
    search_module.validate_search
)
app.command(name="book", help="Run a booking scenario through the workflow")(book_module.book)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"airbook version {__version__}")
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
    """airbook - flight booking workflow driver"""


def cli() -> None:
    """Entry point for CLI"""
    app()


if __name__ == "__main__":
    cli()
