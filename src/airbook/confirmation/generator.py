"""Booking confirmation generation.

The submission step is the only suspension point in the booking core. It is
modelled as an injected async callable so callers control its completion;
the default simulates a network round-trip with a fixed delay.
"""

import asyncio
import logging
import re
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Protocol

from airbook.config.settings import BookingSettings
from airbook.confirmation.tokens import TokenSource, random_token
from airbook.core.constants import BookingStatus
from airbook.core.errors import SubmissionFailure
from airbook.core.models import (
    BookingConfirmation,
    BookingData,
    ConfirmedPassenger,
    FlightDetails,
)
from airbook.core.offer import FlightOffer, FlightSegment

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

_ISO_DURATION = re.compile(r"^PT(?:(\d+)H)?(?:(\d+)M)?$")


class Submitter(Protocol):
    """Submits a validated booking; raises to signal failure."""

    def __call__(self, booking: BookingData, offer: FlightOffer) -> Awaitable[None]: ...


class SimulatedSubmitter:
    """Stands in for the reservation backend with a fixed latency."""

    def __init__(
        self,
        delay: float = 2.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.delay = delay
        self._sleep = sleep

    async def __call__(self, booking: BookingData, offer: FlightOffer) -> None:
        await self._sleep(self.delay)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 in UTC with milliseconds and a ``Z`` suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_clock_time(timestamp: str) -> str:
    """24h ``HH:MM`` wall-clock time as written in the offer timestamp."""
    return datetime.fromisoformat(timestamp).strftime("%H:%M")


def format_duration(duration: str | None) -> str:
    """Render ``PT5H30M`` as ``5h 30m``; unknown formats pass through."""
    if not duration:
        return ""
    match = _ISO_DURATION.match(duration)
    if not match:
        return duration
    hours, minutes = match.groups()
    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    return " ".join(parts)


class ConfirmationGenerator:
    """Turns a validated booking plus the selected offer into a confirmation.

    Args:
        submitter: Async submission step (default: SimulatedSubmitter)
        token_source: Random token provider
        clock: Returns the booking instant
        settings: Token lengths, reference prefix and airline labels
    """

    def __init__(
        self,
        submitter: Submitter | None = None,
        token_source: TokenSource | None = None,
        clock: Clock | None = None,
        settings: BookingSettings | None = None,
    ) -> None:
        self.settings = settings or BookingSettings()
        self.submitter = submitter or SimulatedSubmitter(delay=self.settings.submission_delay)
        self.token_source = token_source or random_token
        self.clock = clock or utc_now

    async def generate(self, booking: BookingData, offer: FlightOffer) -> BookingConfirmation:
        """Submit the booking and build its confirmation.

        Raises:
            SubmissionFailure: If the submission step raises. No
                confirmation is created in that case.
        """
        segment = offer.primary_segment
        logger.info(
            f"Submitting booking for {segment.carrier_code}{segment.number}",
            extra={"offer_id": offer.id, "passengers": len(booking.passengers)},
        )
        try:
            await self.submitter(booking, offer)
        except Exception as e:
            logger.warning(f"Booking submission failed: {e}", extra={"offer_id": offer.id})
            raise SubmissionFailure(str(e) or type(e).__name__, offer_id=offer.id) from e

        confirmation = BookingConfirmation(
            booking_reference=self.settings.reference_prefix
            + self.token_source(self.settings.reference_length),
            confirmation_number=segment.carrier_code
            + self.token_source(self.settings.confirmation_token_length),
            booking_date=format_timestamp(self.clock()),
            total_amount=offer.price.total,
            status=BookingStatus.confirmed,
            passengers=tuple(ConfirmedPassenger.snapshot(p) for p in booking.passengers),
            flight_details=self._flight_details(segment, offer),
        )
        logger.info(
            f"Booking confirmed: {confirmation.booking_reference}",
            extra={"confirmation_number": confirmation.confirmation_number},
        )
        return confirmation

    def _flight_details(self, segment: FlightSegment, offer: FlightOffer) -> FlightDetails:
        return FlightDetails(
            flight_number=f"{segment.carrier_code}{segment.number}",
            departure_date=segment.departure.at.split("T")[0],
            departure_time=format_clock_time(segment.departure.at),
            arrival_time=format_clock_time(segment.arrival.at),
            from_airport=segment.departure.iata_code,
            to_airport=segment.arrival.iata_code,
            airline=self.settings.airline_label(segment.carrier_code),
            duration=format_duration(offer.itineraries[0].duration or segment.duration),
        )
