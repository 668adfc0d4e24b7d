"""Booking workflow state machine.

Drives one booking attempt through flight-selected → passenger-details →
payment → confirmation. Each step is left only through its guard; the
payment guard is followed by the asynchronous submission, which is the only
await in the machine. A boolean ``processing`` flag rejects any further
command while a submission is outstanding.

The workflow is meant to be driven from a single event loop: operations
are not thread-safe.
"""

import logging
import uuid
from collections.abc import Callable
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from airbook.config.settings import BookingSettings
from airbook.confirmation.generator import ConfirmationGenerator
from airbook.core.constants import (
    MSG_ALREADY_PROCESSING,
    MSG_INVALID_COMMAND,
    MSG_INVALID_PASSENGER,
    MSG_INVALID_PAYMENT,
    MSG_NO_PREVIOUS_STEP,
    MSG_PASSENGER_DETAILS_REQUIRED,
    MSG_PAYMENT_DETAILS_REQUIRED,
    MSG_SUBMISSION_FAILED,
    MSG_TERMINAL_STATE,
    PRIMARY_PASSENGER_INDEX,
    BookingStep,
    DenialReason,
    RuleSet,
)
from airbook.core.errors import SubmissionFailure, ValidationError
from airbook.core.models import (
    BookingConfirmation,
    BookingData,
    ContactInfo,
    Passenger,
    PaymentDetails,
    field_errors,
    new_passenger_slots,
    parse_record,
)
from airbook.core.offer import FlightOffer, PriceSummary
from airbook.flow.commands import (
    Advance,
    Command,
    GoBack,
    UpdatePassenger,
    UpdatePayment,
    UpdateSpecialRequests,
)
from airbook.flow.events import (
    EVENT_BOOKING_CONFIRMED,
    EVENT_PASSENGER_UPDATED,
    EVENT_PAYMENT_UPDATED,
    EVENT_SPECIAL_REQUESTS_UPDATED,
    EVENT_STEP_CHANGED,
    EVENT_SUBMISSION_FAILED,
    EVENT_SUBMISSION_STARTED,
    EVENT_TRANSITION_DENIED,
    CommandResult,
    GuardResult,
    WorkflowEvent,
)
from airbook.flow.state import (
    WorkflowState,
    next_step,
    previous_step,
    validate_transition,
)
from airbook.observability.logging import ContextLogger
from airbook.validation.registry import ValidatorRegistry

logger = logging.getLogger(__name__)

Observer = Callable[[WorkflowEvent], None]


class BookingWorkflow:
    """One booking attempt for a selected flight offer.

    Args:
        offer: The selected offer (model or camelCase dict); read-only
        passenger_count: Number of passenger slots, fixed for the attempt
        generator: Confirmation generator (default built from settings)
        settings: Booking settings

    Raises:
        ValidationError: If the passenger count is outside the allowed range
    """

    def __init__(
        self,
        offer: FlightOffer | dict[str, Any],
        passenger_count: int,
        *,
        generator: ConfirmationGenerator | None = None,
        settings: BookingSettings | None = None,
    ) -> None:
        self.settings = settings or BookingSettings()
        if (
            isinstance(passenger_count, bool)
            or not isinstance(passenger_count, int)
            or not self.settings.min_passengers <= passenger_count <= self.settings.max_passengers
        ):
            message = (
                f"Passenger count must be between {self.settings.min_passengers} "
                f"and {self.settings.max_passengers}"
            )
            raise ValidationError(message, errors=[message], passenger_count=passenger_count)

        self.offer = offer if isinstance(offer, FlightOffer) else FlightOffer.model_validate(offer)
        self.generator = generator or ConfirmationGenerator(settings=self.settings)
        self.workflow_id = uuid.uuid4().hex[:12]
        self._observers: list[Observer] = []
        self._log = ContextLogger(__name__).with_context(workflow_id=self.workflow_id)
        self._state = WorkflowState(
            passenger_count=passenger_count,
            booking=BookingData(passengers=new_passenger_slots(passenger_count)),
        )
        self._log.info(f"Booking workflow started with {passenger_count} passenger(s)")

    # --- read access ---------------------------------------------------

    @property
    def state(self) -> WorkflowState:
        """Deep copy of the current state record."""
        return self._state.model_copy(deep=True)

    @property
    def step(self) -> BookingStep:
        return self._state.step

    @property
    def processing(self) -> bool:
        return self._state.processing

    @property
    def confirmation(self) -> BookingConfirmation | None:
        return self._state.confirmation

    @property
    def price_summary(self) -> PriceSummary:
        return self.offer.price_summary()

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register an observer; returns a function that unregisters it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    # --- guards --------------------------------------------------------

    def check_guard(self) -> GuardResult:
        """Evaluate the guard for leaving the current step.

        Pure with respect to the current state; the aggregated error list is
        always returned alongside the user-facing message.
        """
        step = self._state.step
        if step == BookingStep.passenger_details:
            errors = self._passenger_errors()
            if errors:
                return GuardResult(allowed=False, message=MSG_PASSENGER_DETAILS_REQUIRED, errors=errors)
        elif step == BookingStep.payment:
            result = ValidatorRegistry.validate(RuleSet.payment, self._state.booking.payment_details)
            if not result.is_valid:
                return GuardResult(allowed=False, message=MSG_PAYMENT_DETAILS_REQUIRED, errors=result.errors)
        elif step == BookingStep.confirmation:
            return GuardResult(allowed=False, message=MSG_TERMINAL_STATE)
        return GuardResult(allowed=True)

    def _passenger_errors(self) -> list[str]:
        booking = self._state.booking
        errors = ValidatorRegistry.validate_each(
            RuleSet.passenger,
            booking.passengers,
            "Passenger",
            options_for=lambda index: {"require_email": index == PRIMARY_PASSENGER_INDEX},
        )
        if not booking.contact_info.email.strip():
            errors.append("Contact email is required")
        if not booking.contact_info.phone.strip():
            errors.append("Contact phone is required")
        return errors

    # --- transitions ---------------------------------------------------

    async def advance(self) -> CommandResult:
        """Move forward one step if the current guard passes.

        From ``payment`` this submits the booking and, on success, enters
        the terminal ``confirmation`` step.
        """
        if self._state.processing:
            return self._deny(DenialReason.already_processing, MSG_ALREADY_PROCESSING)
        if self._state.is_terminal:
            return self._deny(DenialReason.terminal_state, MSG_TERMINAL_STATE)

        guard = self.check_guard()
        if not guard.allowed:
            return self._deny(DenialReason.validation_failed, guard.message, guard.errors)

        if self._state.step == BookingStep.payment:
            return await self._submit()

        target = next_step(self._state.step)
        assert target is not None
        return self._move_to(target)

    def back(self) -> CommandResult:
        """Return to the immediate predecessor step. Never validated."""
        if self._state.processing:
            return self._deny(DenialReason.already_processing, MSG_ALREADY_PROCESSING)
        if self._state.is_terminal:
            return self._deny(DenialReason.terminal_state, MSG_TERMINAL_STATE)
        target = previous_step(self._state.step)
        if target is None:
            return self._deny(DenialReason.no_previous_step, MSG_NO_PREVIOUS_STEP)
        return self._move_to(target)

    async def _submit(self) -> CommandResult:
        if self._state.confirmation is not None:
            return self._deny(DenialReason.terminal_state, MSG_TERMINAL_STATE)

        self._replace(processing=True, last_error=None)
        self._emit(EVENT_SUBMISSION_STARTED)
        try:
            confirmation = await self.generator.generate(
                self._state.booking.model_copy(deep=True), self.offer
            )
        except SubmissionFailure as e:
            self._log.warning(f"Submission failed, staying on payment: {e.message}")
            self._replace(processing=False, last_error=MSG_SUBMISSION_FAILED)
            self._emit(EVENT_SUBMISSION_FAILED, MSG_SUBMISSION_FAILED, [e.message])
            return CommandResult(
                accepted=False,
                step=self._state.step,
                reason=DenialReason.submission_failed,
                message=MSG_SUBMISSION_FAILED,
                errors=[e.message],
            )
        except BaseException:
            self._replace(processing=False)
            raise

        validate_transition(self._state.step, BookingStep.confirmation)
        self._replace(
            processing=False,
            confirmation=confirmation,
            step=BookingStep.confirmation,
        )
        self._log.info(f"Booking confirmed with reference {confirmation.booking_reference}")
        self._emit(EVENT_BOOKING_CONFIRMED)
        return CommandResult(accepted=True, step=self._state.step)

    def _move_to(self, target: BookingStep) -> CommandResult:
        current = self._state.step
        validate_transition(current, target)
        self._replace(step=target, last_error=None)
        self._log.info(f"Step changed: {current.value} → {target.value}")
        self._emit(EVENT_STEP_CHANGED)
        return CommandResult(accepted=True, step=target)

    # --- aggregate updates ---------------------------------------------

    def update_passenger(self, index: int, passenger: Passenger | dict[str, Any]) -> CommandResult:
        """Replace the passenger at ``index``.

        The slot keeps its identifier. Updating passenger 0 re-derives the
        contact info in the same replacement; other slots carry no contact
        fields.
        """
        denied = self._check_mutable()
        if denied is not None:
            return denied
        passengers = self._state.booking.passengers
        if not 0 <= index < len(passengers):
            return self._deny(
                DenialReason.invalid_passenger_index,
                f"No passenger slot at index {index}",
            )

        record, errors = parse_record(Passenger, passenger)
        if record is None:
            return self._deny(DenialReason.validation_failed, MSG_INVALID_PASSENGER, errors)
        changes: dict[str, Any] = {"id": passengers[index].id}
        if index != PRIMARY_PASSENGER_INDEX:
            changes.update(email=None, phone=None)
        record = record.model_copy(update=changes, deep=True)

        updated = list(passengers)
        updated[index] = record
        booking_changes: dict[str, Any] = {"passengers": updated}
        if index == PRIMARY_PASSENGER_INDEX:
            booking_changes["contact_info"] = ContactInfo(
                email=record.email or "", phone=record.phone or ""
            )
        self._replace(booking=self._state.booking.model_copy(update=booking_changes))
        self._emit(EVENT_PASSENGER_UPDATED)
        return CommandResult(accepted=True, step=self._state.step)

    def update_payment(self, payment: PaymentDetails | dict[str, Any]) -> CommandResult:
        """Replace the payment details as a whole."""
        denied = self._check_mutable()
        if denied is not None:
            return denied
        record, errors = parse_record(PaymentDetails, payment)
        if record is None:
            return self._deny(DenialReason.validation_failed, MSG_INVALID_PAYMENT, errors)
        self._replace(
            booking=self._state.booking.model_copy(
                update={"payment_details": record.model_copy(deep=True)}
            )
        )
        self._emit(EVENT_PAYMENT_UPDATED)
        return CommandResult(accepted=True, step=self._state.step)

    def update_special_requests(self, text: str | None) -> CommandResult:
        denied = self._check_mutable()
        if denied is not None:
            return denied
        self._replace(
            booking=self._state.booking.model_copy(update={"special_requests": text or None})
        )
        self._emit(EVENT_SPECIAL_REQUESTS_UPDATED)
        return CommandResult(accepted=True, step=self._state.step)

    # --- message passing -----------------------------------------------

    async def dispatch(self, command: Command | dict[str, Any]) -> CommandResult:
        """Apply a command (or its dict form) and return the result."""
        if isinstance(command, dict):
            try:
                command = Command.parse(command)
            except PydanticValidationError as e:
                return self._deny(DenialReason.validation_failed, MSG_INVALID_COMMAND, field_errors(e))

        if isinstance(command, Advance):
            return await self.advance()
        if isinstance(command, GoBack):
            return self.back()
        if isinstance(command, UpdatePassenger):
            return self.update_passenger(command.index, command.passenger)
        if isinstance(command, UpdatePayment):
            return self.update_payment(command.payment)
        if isinstance(command, UpdateSpecialRequests):
            return self.update_special_requests(command.text)
        raise ValueError(f"Unsupported command type: {command.type}")

    # --- internals -----------------------------------------------------

    def _check_mutable(self) -> CommandResult | None:
        if self._state.processing:
            return self._deny(DenialReason.already_processing, MSG_ALREADY_PROCESSING)
        if self._state.is_terminal:
            return self._deny(DenialReason.terminal_state, MSG_TERMINAL_STATE)
        return None

    def _replace(self, **changes: Any) -> None:
        self._state = self._state.model_copy(update=changes)

    def _deny(
        self,
        reason: DenialReason,
        message: str | None,
        errors: list[str] | None = None,
    ) -> CommandResult:
        self._log.info(
            f"Denied on {self._state.step.value}: {reason.value}",
            extra={"error_count": len(errors or [])},
        )
        self._emit(EVENT_TRANSITION_DENIED, message, errors)
        return CommandResult(
            accepted=False,
            step=self._state.step,
            reason=reason,
            message=message,
            errors=list(errors or []),
        )

    def _emit(
        self,
        event_type: str,
        message: str | None = None,
        errors: list[str] | None = None,
    ) -> None:
        if not self._observers:
            return
        event = WorkflowEvent(
            type=event_type,
            step=self._state.step,
            snapshot=self.state,
            message=message,
            errors=list(errors or []),
        )
        for observer in list(self._observers):
            try:
                observer(event)
            except Exception:
                logger.exception(f"Workflow observer failed on '{event_type}'")
