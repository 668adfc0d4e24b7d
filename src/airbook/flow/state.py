"""Workflow state record and transition table."""

from pydantic import BaseModel, Field

from airbook.core.constants import BookingStep
from airbook.core.errors import StateError
from airbook.core.models import BookingConfirmation, BookingData

STEP_ORDER: list[BookingStep] = [
    BookingStep.flight_selected,
    BookingStep.passenger_details,
    BookingStep.payment,
    BookingStep.confirmation,
]

# Forward moves happen through advance, backward moves through back.
VALID_TRANSITIONS: dict[BookingStep, list[BookingStep]] = {
    BookingStep.flight_selected: [BookingStep.passenger_details],
    BookingStep.passenger_details: [BookingStep.payment, BookingStep.flight_selected],
    BookingStep.payment: [BookingStep.confirmation, BookingStep.passenger_details],
    BookingStep.confirmation: [],
}


class WorkflowState(BaseModel):
    """Everything a booking attempt knows, in one serializable record."""

    step: BookingStep = BookingStep.flight_selected
    passenger_count: int
    booking: BookingData = Field(default_factory=BookingData)
    processing: bool = False
    confirmation: BookingConfirmation | None = None
    last_error: str | None = None

    @property
    def is_terminal(self) -> bool:
        return not VALID_TRANSITIONS[self.step]


def next_step(step: BookingStep) -> BookingStep | None:
    index = STEP_ORDER.index(step)
    return STEP_ORDER[index + 1] if index + 1 < len(STEP_ORDER) else None


def previous_step(step: BookingStep) -> BookingStep | None:
    """Immediate predecessor, or None when ``step`` cannot go back."""
    if step in (BookingStep.flight_selected, BookingStep.confirmation):
        return None
    return STEP_ORDER[STEP_ORDER.index(step) - 1]


def validate_transition(current: BookingStep, target: BookingStep) -> None:
    """
    Validate a step transition is allowed.

    Raises:
        StateError: If the transition table has no such edge
    """
    allowed = VALID_TRANSITIONS.get(current, [])
    if target not in allowed:
        raise StateError(
            f"Invalid step transition: {current.value} → {target.value}",
            current=current.value,
            target=target.value,
        )
