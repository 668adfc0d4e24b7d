"""Booking scenario command.

A scenario file describes one booking attempt:

    passenger_count: 1
    offer: {...}            # flight offer in the search service's shape
    passengers: [{...}]     # camelCase passenger records, in slot order
    payment: {...}
    special_requests: "Window seat"
"""

import asyncio
from pathlib import Path
from typing import Any

import typer
import yaml
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.table import Table

from airbook.config.loader import ConfigLoader
from airbook.config.settings import AirbookConfig
from airbook.core.errors import AirbookError
from airbook.core.models import BookingConfirmation
from airbook.flow.events import CommandResult
from airbook.flow.workflow import BookingWorkflow
from airbook.observability.logging import setup_logging_from_settings

console = Console()


def book(
    scenario: Path = typer.Argument(..., help="Path to a booking scenario YAML file"),
    config: Path | None = typer.Option(None, "--config", "-c", help="Path to airbook.yaml"),
) -> None:
    """Drive a booking scenario to confirmation."""
    try:
        settings = ConfigLoader.load(config) if config else AirbookConfig()
        setup_logging_from_settings(settings.logging)
        data = _load_scenario(scenario)
        confirmation = asyncio.run(run_scenario(data, settings))
    except (AirbookError, PydanticValidationError) as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1)

    if confirmation is None:
        raise typer.Exit(1)
    console.print(render_confirmation(confirmation))


def _load_scenario(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise AirbookError("Scenario file not found", path=str(path))
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict) or "offer" not in data:
        raise AirbookError("Scenario must be a mapping with an 'offer'", path=str(path))
    return data


async def run_scenario(data: dict[str, Any], settings: AirbookConfig) -> BookingConfirmation | None:
    """Apply the scenario's commands in order; stop at the first denial."""
    passengers = data.get("passengers") or []
    workflow = BookingWorkflow(
        data["offer"],
        data.get("passenger_count", len(passengers) or 1),
        settings=settings.booking,
    )

    summary = workflow.price_summary
    console.print(
        f"Base {summary.base} + taxes & fees {summary.taxes_and_fees} = "
        f"[bold]{summary.total} {summary.currency}[/]"
    )

    async def apply(operation: Any) -> bool:
        result = await operation if asyncio.iscoroutine(operation) else operation
        if not result.accepted:
            _print_denial(result)
        return result.accepted

    if not await apply(workflow.advance()):
        return None
    for index, passenger in enumerate(passengers):
        if not await apply(workflow.update_passenger(index, passenger)):
            return None
    if data.get("special_requests"):
        await apply(workflow.update_special_requests(data["special_requests"]))
    if not await apply(workflow.advance()):
        return None
    await apply(workflow.update_payment(data.get("payment") or {}))
    console.print("Submitting booking...")
    if not await apply(workflow.advance()):
        return None
    return workflow.confirmation


def _print_denial(result: CommandResult) -> None:
    console.print(f"[red]{result.message}[/] (step: {result.step.value})")
    for error in result.errors:
        console.print(f"  [red]✗[/] {error}")


def render_confirmation(confirmation: BookingConfirmation) -> Table:
    details = confirmation.flight_details
    table = Table(title="Booking Confirmed", show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Booking Reference", confirmation.booking_reference)
    table.add_row("Confirmation Number", confirmation.confirmation_number)
    table.add_row("Booking Date", confirmation.booking_date)
    table.add_row("Status", confirmation.status.value.upper())
    table.add_row("Total Amount", confirmation.total_amount)
    table.add_row("Flight", f"{details.flight_number} ({details.airline})")
    table.add_row(
        "Route",
        f"{details.from_airport} {details.departure_time} → {details.to_airport} {details.arrival_time}",
    )
    table.add_row("Date", details.departure_date)
    if details.duration:
        table.add_row("Duration", details.duration)
    for index, passenger in enumerate(confirmation.passengers, start=1):
        table.add_row(f"Passenger {index}", f"{passenger.title.value} {passenger.full_name}")
    return table
