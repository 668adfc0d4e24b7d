"""Primitive validation rules.

Each rule is a pure function returning a fresh ValidationResult. Domain
validators compose them and accumulate every error.
"""

import math
import re
from dataclasses import dataclass
from datetime import date
from typing import Any

from airbook.core.models import ValidationResult

MSG_REQUIRED = "This field is required"
MSG_INVALID_DATE = "Please enter a valid date"
MSG_FUTURE_DATE = "Please select a future date"
MSG_RETURN_DATE = "Return date must be after departure date"


@dataclass(frozen=True)
class PatternSchema:
    pattern: re.Pattern[str]
    message: str


@dataclass(frozen=True)
class RangeSchema:
    message: str
    min_value: float | None = None
    max_value: float | None = None


AIRPORT_CODE = PatternSchema(
    re.compile(r"^[A-Z]{3}$"),
    "Airport code must be a 3-letter IATA code (e.g., JFK, LAX)",
)
FLIGHT_NUMBER = PatternSchema(
    re.compile(r"^[A-Z]{2,3}\d{1,4}$"),
    "Flight number must be airline code followed by 1-4 digits (e.g., AA123)",
)
DATE = PatternSchema(re.compile(r"^\d{4}-\d{2}-\d{2}$"), "Date must be in YYYY-MM-DD format")
EMAIL = PatternSchema(re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$"), "Please enter a valid email address")
PHONE = PatternSchema(re.compile(r"^\+?[\d\s\-()]{10,}$"), "Please enter a valid phone number")
PASSENGERS = RangeSchema("Passenger count must be between 1 and 9", min_value=1, max_value=9)
PRICE = RangeSchema("Price must be a positive number", min_value=0)

SCHEMAS: dict[str, PatternSchema | RangeSchema] = {
    "airport_code": AIRPORT_CODE,
    "flight_number": FLIGHT_NUMBER,
    "date": DATE,
    "email": EMAIL,
    "phone": PHONE,
    "passengers": PASSENGERS,
    "price": PRICE,
}


def required(value: Any) -> ValidationResult:
    """Fail when value is None or blank after trimming."""
    if value is None or str(value).strip() == "":
        return ValidationResult.fail(MSG_REQUIRED)
    return ValidationResult.ok()


def pattern(value: Any, regex: re.Pattern[str] | str, message: str) -> ValidationResult:
    """Fail with ``message`` when ``regex`` does not match ``value``."""
    if value is None or re.fullmatch(regex, str(value)) is None:
        return ValidationResult.fail(message)
    return ValidationResult.ok()


def in_range(
    value: Any,
    min_value: float | None = None,
    max_value: float | None = None,
    message: str | None = None,
) -> ValidationResult:
    """Numeric range check; either bound may be omitted."""
    error = message or f"Value must be between {min_value} and {max_value}"
    if value is None or isinstance(value, bool):
        return ValidationResult.fail(error)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return ValidationResult.fail(error)
    if math.isnan(number) or math.isinf(number):
        return ValidationResult.fail(error)
    if min_value is not None and number < min_value:
        return ValidationResult.fail(error)
    if max_value is not None and number > max_value:
        return ValidationResult.fail(error)
    return ValidationResult.ok()


def parse_date(value: Any) -> date | None:
    """Return the calendar date for a valid ``YYYY-MM-DD`` string, else None."""
    if not isinstance(value, str) or DATE.pattern.fullmatch(value) is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def calendar_date(value: Any) -> ValidationResult:
    """Value must be ``YYYY-MM-DD`` and name a real calendar day."""
    shape = pattern(value, DATE.pattern, DATE.message)
    if not shape.is_valid:
        return shape
    if parse_date(value) is None:
        return ValidationResult.fail(MSG_INVALID_DATE)
    return ValidationResult.ok()


def future_date(value: Any, today: date | None = None) -> ValidationResult:
    """Value must be today or later; today counts as valid."""
    result = calendar_date(value)
    if not result.is_valid:
        return result
    today = today or date.today()
    if parse_date(value) < today:  # type: ignore[operator]
        return ValidationResult.fail(MSG_FUTURE_DATE)
    return ValidationResult.ok()


def return_date(value: Any, departure_date: Any) -> ValidationResult:
    """Value must be strictly after the departure date."""
    result = calendar_date(value)
    if not result.is_valid:
        return result
    departure = parse_date(departure_date)
    returning = parse_date(value)
    if departure is None or returning is None or returning <= departure:
        return ValidationResult.fail(MSG_RETURN_DATE)
    return ValidationResult.ok()
