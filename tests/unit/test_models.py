"""Unit tests for booking records and the flight offer shape."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from airbook.core.constants import (
    BookingStatus,
    BookingStep,
    DenialReason,
    RuleSet,
    Title,
    TravelerType,
)
from airbook.core.models import BookingConfirmation, Passenger, PaymentDetails, new_passenger_slots
from airbook.core.offer import FlightOffer
from tests.factories import make_offer, make_passenger, make_payment, make_segment


@pytest.mark.parametrize("count", range(1, 10))
def test_passenger_slots_unique_ids_and_primary_contact(count):
    slots = new_passenger_slots(count)

    assert len(slots) == count
    assert len({p.id for p in slots}) == count
    assert slots[0].email == "" and slots[0].phone == ""
    assert all(p.email is None and p.phone is None for p in slots[1:])


def test_passenger_accepts_camel_case_and_snake_case():
    from_camel = Passenger.model_validate(make_passenger(title="Dr", type="child"))
    from_snake = Passenger(first_name="John", last_name="Doe", traveler_type=TravelerType.child)

    assert from_camel.first_name == "John"
    assert from_camel.title is Title.dr
    assert from_camel.traveler_type is TravelerType.child
    assert from_snake.traveler_type is TravelerType.child
    assert from_camel.model_dump(by_alias=True)["firstName"] == "John"


def test_passenger_rejects_unknown_title():
    with pytest.raises(PydanticValidationError):
        Passenger.model_validate(make_passenger(title="Sir"))


def test_payment_details_nested_billing_address():
    payment = PaymentDetails.model_validate(make_payment())

    assert payment.billing_address.zip_code == "10001"
    assert payment.model_dump(by_alias=True)["billingAddress"]["zipCode"] == "10001"


def test_offer_parses_search_service_shape():
    offer = FlightOffer.model_validate(make_offer())

    segment = offer.primary_segment
    assert segment.carrier_code == "AA"
    assert segment.departure.iata_code == "JFK"
    assert offer.price.total == "450.00"


def test_offer_primary_segment_is_first_of_first_itinerary():
    second = make_segment(carrierCode="UA", number="9")
    offer = FlightOffer.model_validate(make_offer(segments=[make_segment(), second]))

    assert offer.primary_segment.carrier_code == "AA"


@pytest.mark.parametrize(
    "overrides",
    [
        {"itineraries": []},
        {"itineraries": [{"segments": []}]},
        {"price": {"total": "abc", "base": "1.00"}},
    ],
)
def test_offer_rejects_unusable_payloads(overrides):
    with pytest.raises(PydanticValidationError):
        FlightOffer.model_validate(make_offer(**overrides))


def test_offer_rejects_bad_timestamp():
    segment = make_segment(departure={"iataCode": "JFK", "at": "tomorrow morning"})

    with pytest.raises(PydanticValidationError):
        FlightOffer.model_validate(make_offer(segments=[segment]))


def test_price_summary_taxes_and_fees():
    offer = FlightOffer.model_validate(make_offer())

    summary = offer.price_summary()

    assert summary.base == "380.00"
    assert summary.taxes_and_fees == "70.00"
    assert summary.total == "450.00"
    assert summary.currency == "USD"


def test_confirmation_is_frozen(offer):
    confirmation = BookingConfirmation.model_validate(
        {
            "bookingReference": "ABCD1234",
            "confirmationNumber": "AAXYZ789",
            "bookingDate": "2025-01-10T09:30:00.000Z",
            "totalAmount": "450.00",
            "status": "confirmed",
            "passengers": [make_passenger()],
            "flightDetails": {
                "flightNumber": "AA123",
                "departureDate": "2025-01-15",
                "departureTime": "10:00",
                "arrivalTime": "14:00",
                "from": "JFK",
                "to": "LAX",
                "airline": "AA Airlines",
            },
        }
    )

    with pytest.raises(PydanticValidationError):
        confirmation.status = "failed"
    assert confirmation.flight_details.from_airport == "JFK"


@pytest.mark.parametrize(
    "enum", [BookingStep, BookingStatus, Title, TravelerType, DenialReason, RuleSet]
)
def test_enum_member_names_are_lowercase(enum):
    assert all(member.name == member.name.lower() for member in enum)
