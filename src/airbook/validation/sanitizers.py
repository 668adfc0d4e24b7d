"""Input sanitizers applied to raw form values before they reach the workflow."""

import re

MAX_CARD_DIGITS = 16
MAX_CVV_DIGITS = 4


def airport_code(value: str) -> str:
    return re.sub(r"[^A-Z]", "", value.upper())[:3]


def phone(value: str) -> str:
    return re.sub(r"[^\d+\-\s()]", "", value)


def name(value: str) -> str:
    return re.sub(r"[^a-zA-Z\s\-']", "", value).strip()


def numeric(value: str) -> str:
    return re.sub(r"[^\d.]", "", value)


def card_number(value: str) -> str:
    """Keep up to 16 digits, grouped by four for display."""
    digits = re.sub(r"\D", "", value)[:MAX_CARD_DIGITS]
    return " ".join(digits[i : i + 4] for i in range(0, len(digits), 4))


def cvv(value: str) -> str:
    return re.sub(r"\D", "", value)[:MAX_CVV_DIGITS]
