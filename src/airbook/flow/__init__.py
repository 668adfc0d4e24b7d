"""Booking workflow state machine."""

from airbook.flow.commands import (
    Advance,
    Command,
    GoBack,
    UpdatePassenger,
    UpdatePayment,
    UpdateSpecialRequests,
)
from airbook.flow.events import CommandResult, GuardResult, WorkflowEvent
from airbook.flow.state import VALID_TRANSITIONS, WorkflowState
from airbook.flow.workflow import BookingWorkflow

__all__ = [
    "Advance",
    "BookingWorkflow",
    "Command",
    "CommandResult",
    "GoBack",
    "GuardResult",
    "UpdatePassenger",
    "UpdatePayment",
    "UpdateSpecialRequests",
    "VALID_TRANSITIONS",
    "WorkflowEvent",
    "WorkflowState",
]
