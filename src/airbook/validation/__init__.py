"""Validation engine and airline domain validators"""

# Import domain validators to auto-register them
from airbook.validation import domain  # noqa: F401
from airbook.validation.domain import (
    validate_flight,
    validate_passenger,
    validate_payment,
    validate_search_request,
)
from airbook.validation.registry import ValidatorRegistry
from airbook.validation.rules import (
    calendar_date,
    future_date,
    in_range,
    pattern,
    required,
    return_date,
)

__all__ = [
    "ValidatorRegistry",
    "calendar_date",
    "future_date",
    "in_range",
    "pattern",
    "required",
    "return_date",
    "validate_flight",
    "validate_passenger",
    "validate_payment",
    "validate_search_request",
]
