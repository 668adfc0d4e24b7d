"""Airline domain validators.

Every validator runs all of its rules and returns the complete, ordered list
of violations so the caller can show them together.
"""

import re
from datetime import date, datetime, timezone
from typing import Any

from airbook.core.constants import RuleSet
from airbook.core.models import (
    FlightRecord,
    Passenger,
    PaymentDetails,
    SearchRequest,
    ValidationResult,
    parse_record,
)
from airbook.validation import rules
from airbook.validation.registry import ValidatorRegistry

MIN_CARD_DIGITS = 13
MIN_CVV_LENGTH = 3
MAX_AGE = 120

_CARD_SEPARATORS = re.compile(r"[\s\-]")


@ValidatorRegistry.register(RuleSet.search_request)
def validate_search_request(
    request: SearchRequest | dict[str, Any], today: date | None = None
) -> ValidationResult:
    """Validate a flight search form."""
    data, errors = parse_record(SearchRequest, request)
    if data is None:
        return ValidationResult.from_errors(errors)

    errors += rules.pattern(
        data.origin, rules.AIRPORT_CODE.pattern, "Origin: " + rules.AIRPORT_CODE.message
    ).errors
    errors += rules.pattern(
        data.destination,
        rules.AIRPORT_CODE.pattern,
        "Destination: " + rules.AIRPORT_CODE.message,
    ).errors

    if data.origin == data.destination:
        errors.append("Origin and destination airports cannot be the same")

    errors += rules.future_date(data.departure, today=today).errors

    if data.return_date:
        errors += rules.return_date(data.return_date, data.departure).errors

    passengers = rules.in_range(
        data.passengers,
        rules.PASSENGERS.min_value,
        rules.PASSENGERS.max_value,
        rules.PASSENGERS.message,
    )
    if passengers.is_valid and float(data.passengers) != int(float(data.passengers)):  # type: ignore[arg-type]
        passengers = ValidationResult.fail(rules.PASSENGERS.message)
    errors += passengers.errors

    return ValidationResult.from_errors(errors)


@ValidatorRegistry.register(RuleSet.passenger)
def validate_passenger(
    passenger: Passenger | dict[str, Any],
    require_email: bool = True,
    today: date | None = None,
) -> ValidationResult:
    """Validate one passenger.

    Args:
        passenger: Passenger record or its camelCase dict form
        require_email: When False, email is only checked if provided
            (secondary passengers carry no contact fields)
        today: Reference day for the age check
    """
    data, errors = parse_record(Passenger, passenger)
    if data is None:
        return ValidationResult.from_errors(errors)

    if not rules.required(data.first_name).is_valid:
        errors.append("First name is required")
    if not rules.required(data.last_name).is_valid:
        errors.append("Last name is required")

    if require_email or data.email:
        errors += rules.pattern(data.email, rules.EMAIL.pattern, rules.EMAIL.message).errors

    if data.phone:
        errors += rules.pattern(data.phone, rules.PHONE.pattern, rules.PHONE.message).errors

    dob = rules.calendar_date(data.date_of_birth)
    errors += dob.errors

    if dob.is_valid:
        birth = rules.parse_date(data.date_of_birth)
        today = today or date.today()
        age = today.year - birth.year  # type: ignore[union-attr]
        if age < 0 or age > MAX_AGE:
            errors.append("Please enter a valid date of birth")

    return ValidationResult.from_errors(errors)


def _parse_timestamp(value: str) -> datetime | None:
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@ValidatorRegistry.register(RuleSet.flight)
def validate_flight(record: FlightRecord | dict[str, Any]) -> ValidationResult:
    """Validate a directly entered flight record."""
    data, errors = parse_record(FlightRecord, record)
    if data is None:
        return ValidationResult.from_errors(errors)

    errors += rules.pattern(
        data.flight_number, rules.FLIGHT_NUMBER.pattern, rules.FLIGHT_NUMBER.message
    ).errors
    errors += rules.pattern(
        data.departure.airport,
        rules.AIRPORT_CODE.pattern,
        "Departure airport: " + rules.AIRPORT_CODE.message,
    ).errors
    errors += rules.pattern(
        data.arrival.airport,
        rules.AIRPORT_CODE.pattern,
        "Arrival airport: " + rules.AIRPORT_CODE.message,
    ).errors

    departure = _parse_timestamp(data.departure.time)
    arrival = _parse_timestamp(data.arrival.time)
    if departure is None:
        errors.append("Invalid departure time format")
    if arrival is None:
        errors.append("Invalid arrival time format")
    if departure is not None and arrival is not None and arrival <= departure:
        errors.append("Arrival time must be after departure time")

    errors += rules.in_range(data.price, rules.PRICE.min_value, None, rules.PRICE.message).errors

    return ValidationResult.from_errors(errors)


def card_digits(card_number: str) -> str:
    """Card number with display separators removed."""
    return _CARD_SEPARATORS.sub("", card_number or "")


@ValidatorRegistry.register(RuleSet.payment)
def validate_payment(payment: PaymentDetails | dict[str, Any]) -> ValidationResult:
    """Gate for leaving the payment step."""
    data, errors = parse_record(PaymentDetails, payment)
    if data is None:
        return ValidationResult.from_errors(errors)
    address = data.billing_address

    if len(card_digits(data.card_number)) < MIN_CARD_DIGITS:
        errors.append(f"Card number must have at least {MIN_CARD_DIGITS} digits")
    if not rules.required(data.expiry_month).is_valid:
        errors.append("Expiry month is required")
    if not rules.required(data.expiry_year).is_valid:
        errors.append("Expiry year is required")
    if len(data.cvv or "") < MIN_CVV_LENGTH:
        errors.append(f"CVV must have at least {MIN_CVV_LENGTH} digits")
    if not rules.required(data.cardholder_name).is_valid:
        errors.append("Cardholder name is required")

    for label, value in (
        ("Street", address.street),
        ("City", address.city),
        ("State", address.state),
        ("ZIP code", address.zip_code),
        ("Country", address.country),
    ):
        if not rules.required(value).is_valid:
            errors.append(f"{label} is required")

    return ValidationResult.from_errors(errors)
