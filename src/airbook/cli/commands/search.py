"""Search request validation command."""

import typer
from rich.console import Console

from airbook.core.constants import RuleSet
from airbook.core.models import SearchRequest
from airbook.validation.registry import ValidatorRegistry

console = Console()


def validate_search(
    origin: str = typer.Argument(..., help="Origin IATA code"),
    destination: str = typer.Argument(..., help="Destination IATA code"),
    departure: str = typer.Argument(..., help="Departure date (YYYY-MM-DD)"),
    return_date: str | None = typer.Option(None, "--return", "-r", help="Return date"),
    passengers: int = typer.Option(1, "--passengers", "-p", help="Passenger count"),
) -> None:
    """Validate a search request and list every problem found."""
    request = SearchRequest(
        origin=origin,
        destination=destination,
        departure=departure,
        return_date=return_date,
        passengers=passengers,
    )
    result = ValidatorRegistry.validate(RuleSet.search_request, request)
    if result.is_valid:
        console.print("[green]Search request is valid[/]")
        return
    for error in result.errors:
        console.print(f"[red]✗[/] {error}")
    raise typer.Exit(1)
