"""Booking records.

External shapes use camelCase keys (``firstName``, ``zipCode``); every model
also accepts the snake_case field names. Records are deliberately lenient:
blank values are allowed here and reported by the validators instead.
"""

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from airbook.core.constants import BookingStatus, Title, TravelerType

M = TypeVar("M", bound=BaseModel)


class AirbookModel(BaseModel):
    """Base model with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class InputRecord(AirbookModel):
    """Base for user-entered records.

    A null text field is read as blank, so the validators report it as a
    missing value instead of the model rejecting it.
    """

    @model_validator(mode="before")
    @classmethod
    def _null_text_is_blank(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        cleaned = dict(data)
        for name, field in cls.model_fields.items():
            if field.annotation is not str:
                continue
            for key in {name, to_camel(name), field.alias}:
                if key in cleaned and cleaned[key] is None:
                    cleaned[key] = ""
        return cleaned


class ValidationResult(AirbookModel):
    """Outcome of a validation call. Always built fresh per call."""

    is_valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] | None = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(is_valid=True, errors=[])

    @classmethod
    def fail(cls, *messages: str) -> "ValidationResult":
        return cls(is_valid=False, errors=list(messages))

    @classmethod
    def from_errors(
        cls, errors: list[str], warnings: list[str] | None = None
    ) -> "ValidationResult":
        """Build a result whose validity is the absence of errors."""
        return cls(is_valid=not errors, errors=list(errors), warnings=warnings)


class Passenger(InputRecord):
    id: str = ""
    first_name: str = ""
    last_name: str = ""
    date_of_birth: str = ""
    email: str | None = None
    phone: str | None = None
    title: Title = Title.mr
    traveler_type: TravelerType = Field(default=TravelerType.adult, alias="type")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class ConfirmedPassenger(Passenger):
    """Passenger as recorded on a confirmation. Read-only."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    @classmethod
    def snapshot(cls, passenger: Passenger) -> "ConfirmedPassenger":
        return cls.model_validate(passenger.model_dump())


class ContactInfo(InputRecord):
    email: str = ""
    phone: str = ""


class BillingAddress(InputRecord):
    street: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = ""


class PaymentDetails(InputRecord):
    card_number: str = ""
    expiry_month: str = ""
    expiry_year: str = ""
    cvv: str = ""
    cardholder_name: str = ""
    billing_address: BillingAddress = Field(default_factory=BillingAddress)


class BookingData(AirbookModel):
    """The booking-in-progress aggregate.

    ``contact_info`` always mirrors the email and phone of passenger 0.
    """

    passengers: list[Passenger] = Field(default_factory=list)
    contact_info: ContactInfo = Field(default_factory=ContactInfo)
    payment_details: PaymentDetails = Field(default_factory=PaymentDetails)
    special_requests: str | None = None
    seat_preferences: list[str] = Field(default_factory=list)


class FlightDetails(AirbookModel):
    """Summary of the canonical flight segment of a confirmed booking."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    flight_number: str
    departure_date: str
    departure_time: str
    arrival_time: str
    from_airport: str = Field(alias="from")
    to_airport: str = Field(alias="to")
    airline: str
    duration: str = ""


class BookingConfirmation(AirbookModel):
    """Terminal record produced once per successful booking."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    booking_reference: str
    confirmation_number: str
    booking_date: str
    total_amount: str
    status: BookingStatus
    passengers: tuple[ConfirmedPassenger, ...]
    flight_details: FlightDetails


def new_passenger_slots(count: int) -> list[Passenger]:
    """Create ``count`` empty passengers; only slot 0 carries contact fields."""
    return [
        Passenger(
            id=f"passenger-{index}",
            email="" if index == 0 else None,
            phone="" if index == 0 else None,
        )
        for index in range(count)
    ]


class SearchRequest(InputRecord):
    """Flight search input as entered by the user."""

    origin: str = Field(default="", alias="from")
    destination: str = Field(default="", alias="to")
    departure: str = ""
    return_date: str | None = Field(default=None, alias="return")
    passengers: int | float | str | None = 1
    cabin_class: str = "economy"


class FlightEndpoint(InputRecord):
    airport: str = ""
    time: str = ""


class FlightRecord(InputRecord):
    """A flight entered directly rather than taken from an offer."""

    flight_number: str = ""
    departure: FlightEndpoint = Field(default_factory=FlightEndpoint)
    arrival: FlightEndpoint = Field(default_factory=FlightEndpoint)
    price: float | str | None = None
    duration: str = ""


def field_errors(error: PydanticValidationError) -> list[str]:
    """Flatten a model error into ``"field: message"`` entries."""
    messages = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"])
        messages.append(f"{location}: {detail['msg']}" if location else detail["msg"])
    return messages


def parse_record(model: type[M], value: Any) -> tuple[M | None, list[str]]:
    """Validate ``value`` as ``model``; on failure return None and the field errors."""
    if isinstance(value, model):
        return value, []
    try:
        return model.model_validate(value), []
    except PydanticValidationError as e:
        return None, field_errors(e)
