"""Flight offer shape consumed from the external search service.

Only the fields the booking core reads are modelled; anything else in the
payload is ignored. Offers are read-only input.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation

from pydantic import Field, field_validator

from airbook.core.models import AirbookModel


class LocationInfo(AirbookModel):
    iata_code: str
    at: str
    terminal: str | None = None

    @field_validator("at")
    @classmethod
    def _iso_timestamp(cls, value: str) -> str:
        datetime.fromisoformat(value)
        return value


class FlightSegment(AirbookModel):
    departure: LocationInfo
    arrival: LocationInfo
    carrier_code: str
    number: str
    duration: str | None = None
    id: str | None = None
    number_of_stops: int = 0


class Itinerary(AirbookModel):
    duration: str | None = None
    segments: list[FlightSegment] = Field(min_length=1)


class Price(AirbookModel):
    currency: str = "USD"
    total: str
    base: str
    grand_total: str | None = None

    @field_validator("total", "base")
    @classmethod
    def _numeric_string(cls, value: str) -> str:
        try:
            Decimal(value)
        except InvalidOperation as e:
            raise ValueError(f"'{value}' is not a numeric amount") from e
        return value


class PriceSummary(AirbookModel):
    """Price breakdown shown before passenger details are collected."""

    currency: str
    base: str
    taxes_and_fees: str
    total: str


class FlightOffer(AirbookModel):
    id: str | None = None
    itineraries: list[Itinerary] = Field(min_length=1)
    price: Price
    validating_airline_codes: list[str] = Field(default_factory=list)

    @property
    def primary_segment(self) -> FlightSegment:
        """First segment of the first itinerary."""
        return self.itineraries[0].segments[0]

    def price_summary(self) -> PriceSummary:
        base = Decimal(self.price.base)
        total = Decimal(self.price.total)
        return PriceSummary(
            currency=self.price.currency,
            base=self.price.base,
            taxes_and_fees=f"{total - base:.2f}",
            total=self.price.total,
        )
