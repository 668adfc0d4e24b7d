"""Results and events emitted by the booking workflow."""

from pydantic import BaseModel, Field

from airbook.core.constants import BookingStep, DenialReason
from airbook.core.errors import TransitionDenied
from airbook.flow.state import WorkflowState

EVENT_STEP_CHANGED = "step_changed"
EVENT_PASSENGER_UPDATED = "passenger_updated"
EVENT_PAYMENT_UPDATED = "payment_updated"
EVENT_SPECIAL_REQUESTS_UPDATED = "special_requests_updated"
EVENT_TRANSITION_DENIED = "transition_denied"
EVENT_SUBMISSION_STARTED = "submission_started"
EVENT_SUBMISSION_FAILED = "submission_failed"
EVENT_BOOKING_CONFIRMED = "booking_confirmed"


class GuardResult(BaseModel):
    """Outcome of the synchronous guard for leaving the current step."""

    allowed: bool
    message: str | None = None
    errors: list[str] = Field(default_factory=list)


class CommandResult(BaseModel):
    """Answer to a workflow command.

    A denied command leaves the workflow state unchanged, except for a
    failed submission which records ``last_error``.
    """

    accepted: bool
    step: BookingStep
    reason: DenialReason | None = None
    message: str | None = None
    errors: list[str] = Field(default_factory=list)

    def raise_for_denial(self) -> "CommandResult":
        """Raise TransitionDenied if the command was refused."""
        if not self.accepted:
            raise TransitionDenied(
                self.message or "Operation denied",
                reason=self.reason.value if self.reason else "unknown",
                errors=self.errors,
                step=self.step.value,
            )
        return self


class WorkflowEvent(BaseModel):
    """Notification delivered to workflow observers."""

    type: str
    step: BookingStep
    snapshot: WorkflowState
    message: str | None = None
    errors: list[str] = Field(default_factory=list)
