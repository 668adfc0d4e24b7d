"""airbook - multi-step flight booking core.

Validation engine, booking workflow state machine and confirmation
generation for a flight booking front end.

Quick start:
    from airbook import BookingWorkflow

    workflow = BookingWorkflow(offer, passenger_count=1)
    await workflow.advance()
    workflow.update_passenger(0, {...})
    await workflow.advance()
    workflow.update_payment({...})
    result = await workflow.advance()
"""

__version__ = "0.1.0"

from airbook.confirmation import ConfirmationGenerator, SimulatedSubmitter
from airbook.core.constants import BookingStatus, BookingStep, DenialReason, RuleSet
from airbook.core.errors import (
    AirbookError,
    ConfigError,
    StateError,
    SubmissionFailure,
    TransitionDenied,
    ValidationError,
)
from airbook.core.models import (
    BillingAddress,
    BookingConfirmation,
    BookingData,
    ConfirmedPassenger,
    Passenger,
    PaymentDetails,
    ValidationResult,
)
from airbook.core.offer import FlightOffer
from airbook.flow import BookingWorkflow, CommandResult, WorkflowEvent, WorkflowState

__all__ = [
    "__version__",
    "AirbookError",
    "BillingAddress",
    "BookingConfirmation",
    "BookingData",
    "BookingStatus",
    "BookingStep",
    "BookingWorkflow",
    "CommandResult",
    "ConfigError",
    "ConfirmationGenerator",
    "ConfirmedPassenger",
    "DenialReason",
    "FlightOffer",
    "Passenger",
    "PaymentDetails",
    "RuleSet",
    "SimulatedSubmitter",
    "StateError",
    "SubmissionFailure",
    "TransitionDenied",
    "ValidationError",
    "ValidationResult",
    "WorkflowEvent",
    "WorkflowState",
]
