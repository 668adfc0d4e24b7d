"""Unit tests for BookingWorkflow step progression and guards."""

import asyncio

import pytest
from pydantic import ValidationError as PydanticValidationError

from airbook.config.settings import BookingSettings
from airbook.confirmation.generator import ConfirmationGenerator
from airbook.core.constants import (
    MSG_PASSENGER_DETAILS_REQUIRED,
    MSG_PAYMENT_DETAILS_REQUIRED,
    MSG_SUBMISSION_FAILED,
    BookingStatus,
    BookingStep,
    DenialReason,
    RuleSet,
)
from airbook.core.errors import TransitionDenied, ValidationError
from airbook.core.models import ValidationResult
from airbook.flow.workflow import BookingWorkflow
from airbook.validation.registry import ValidatorRegistry
from tests.factories import make_offer, make_passenger, make_payment
from tests.mocks import GatedSubmitter, InstantSubmitter


async def _to_payment(workflow: BookingWorkflow) -> None:
    await workflow.advance()
    for index in range(workflow.state.passenger_count):
        workflow.update_passenger(index, make_passenger(firstName=f"P{index}"))
    result = await workflow.advance()
    assert result.accepted, result.errors
    workflow.update_payment(make_payment())


# === INITIALIZATION ===


@pytest.mark.parametrize("count", range(1, 10))
def test_initialization_creates_fixed_slots(create_workflow, count):
    workflow = create_workflow(passenger_count=count)

    state = workflow.state
    assert state.step is BookingStep.flight_selected
    assert state.passenger_count == count
    assert len(state.booking.passengers) == count
    assert len({p.id for p in state.booking.passengers}) == count
    assert state.booking.passengers[0].email == ""
    assert all(p.email is None for p in state.booking.passengers[1:])
    assert not state.processing


@pytest.mark.parametrize("count", [0, 10, -1, 2.0, True])
def test_initialization_rejects_invalid_passenger_count(offer_data, count):
    with pytest.raises(ValidationError) as exc_info:
        BookingWorkflow(offer_data, count)

    assert exc_info.value.errors == ["Passenger count must be between 1 and 9"]


def test_settings_bound_passenger_count(offer_data):
    settings = BookingSettings(max_passengers=4)

    with pytest.raises(ValidationError):
        BookingWorkflow(offer_data, 5, settings=settings)


def test_state_is_a_snapshot(create_workflow):
    workflow = create_workflow()

    snapshot = workflow.state
    snapshot.booking.passengers[0].first_name = "Mallory"

    assert workflow.state.booking.passengers[0].first_name == ""


def test_price_summary(create_workflow):
    summary = create_workflow().price_summary

    assert summary.taxes_and_fees == "70.00"


# === FORWARD PROGRESSION ===


@pytest.mark.asyncio
async def test_advance_from_flight_selected_is_unconditional(create_workflow):
    workflow = create_workflow()

    result = await workflow.advance()

    assert result.accepted
    assert workflow.step is BookingStep.passenger_details


@pytest.mark.asyncio
async def test_empty_passenger_names_block_payment(create_workflow):
    """Scenario: advancing with empty names stays on passenger details."""
    workflow = create_workflow(passenger_count=1)
    await workflow.advance()

    result = await workflow.advance()

    assert not result.accepted
    assert result.reason is DenialReason.validation_failed
    assert result.message == MSG_PASSENGER_DETAILS_REQUIRED
    assert any("First name is required" in e for e in result.errors)
    assert any("Last name is required" in e for e in result.errors)
    assert workflow.step is BookingStep.passenger_details


@pytest.mark.asyncio
async def test_passenger_guard_lists_errors_per_passenger(create_workflow):
    workflow = create_workflow(passenger_count=2)
    await workflow.advance()
    workflow.update_passenger(0, make_passenger())
    workflow.update_passenger(1, make_passenger(lastName="", dateOfBirth="bad"))

    guard = workflow.check_guard()

    assert not guard.allowed
    assert guard.errors == [
        "Passenger 2: Last name is required",
        "Passenger 2: Date must be in YYYY-MM-DD format",
    ]


@pytest.mark.asyncio
async def test_primary_contact_phone_required(create_workflow):
    workflow = create_workflow()
    await workflow.advance()
    workflow.update_passenger(0, make_passenger(phone=""))

    result = await workflow.advance()

    assert not result.accepted
    assert result.errors == ["Contact phone is required"]


@pytest.mark.asyncio
async def test_secondary_passengers_need_no_contact_fields(create_workflow):
    workflow = create_workflow(passenger_count=3)
    await workflow.advance()
    workflow.update_passenger(0, make_passenger())
    workflow.update_passenger(1, make_passenger(firstName="Jane", email=None, phone=None))
    workflow.update_passenger(2, make_passenger(firstName="Jim", type="child"))

    result = await workflow.advance()

    assert result.accepted
    assert workflow.step is BookingStep.payment


@pytest.mark.asyncio
async def test_payment_guard_blocks_incomplete_payment(create_workflow, submitter):
    workflow = create_workflow()
    await _to_payment(workflow)
    workflow.update_payment(make_payment(cvv="1"))

    result = await workflow.advance()

    assert not result.accepted
    assert result.message == MSG_PAYMENT_DETAILS_REQUIRED
    assert result.errors == ["CVV must have at least 3 digits"]
    assert workflow.step is BookingStep.payment
    assert submitter.calls == 0


@pytest.mark.asyncio
async def test_payment_guard_resolves_rule_set_on_each_check(create_workflow):
    workflow = create_workflow()
    await _to_payment(workflow)
    workflow.update_payment(make_payment(cvv=""))

    with ValidatorRegistry.replaced(RuleSet.payment, lambda payment: ValidationResult.ok()):
        relaxed = workflow.check_guard()

    assert relaxed.allowed
    assert not workflow.check_guard().allowed


@pytest.mark.asyncio
async def test_full_booking_produces_confirmation(create_workflow, submitter):
    workflow = create_workflow(passenger_count=2)
    await _to_payment(workflow)

    result = await workflow.advance()

    assert result.accepted
    assert workflow.step is BookingStep.confirmation
    confirmation = workflow.confirmation
    assert confirmation is not None
    assert confirmation.status is BookingStatus.confirmed
    assert confirmation.booking_reference == "ABCD1234"
    assert confirmation.confirmation_number == "AAXYZ789"
    assert confirmation.flight_details.flight_number == "AA123"
    assert confirmation.total_amount == "450.00"
    assert [p.first_name for p in confirmation.passengers] == ["P0", "P1"]
    assert submitter.calls == 1


@pytest.mark.asyncio
async def test_confirmation_is_terminal(create_workflow, submitter):
    workflow = create_workflow()
    await _to_payment(workflow)
    await workflow.advance()

    again = await workflow.advance()
    back = workflow.back()
    update = workflow.update_passenger(0, make_passenger(firstName="Late"))

    for result in (again, back, update):
        assert not result.accepted
        assert result.reason is DenialReason.terminal_state
    assert submitter.calls == 1
    assert workflow.confirmation.passengers[0].first_name == "P0"


@pytest.mark.asyncio
async def test_confirmed_passengers_cannot_be_changed(create_workflow):
    workflow = create_workflow(passenger_count=2)
    await _to_payment(workflow)
    await workflow.advance()
    confirmation = workflow.confirmation

    with pytest.raises(PydanticValidationError):
        confirmation.passengers[0].first_name = "Mallory"
    with pytest.raises(PydanticValidationError):
        workflow.state.confirmation.passengers[1].last_name = "Mallory"

    assert [p.first_name for p in workflow.confirmation.passengers] == ["P0", "P1"]


# === BACK ===


@pytest.mark.asyncio
async def test_back_moves_to_immediate_predecessor_without_validation(create_workflow):
    workflow = create_workflow()
    await _to_payment(workflow)
    workflow.update_payment({})

    assert workflow.back().step is BookingStep.passenger_details
    workflow.update_passenger(0, {})
    assert workflow.back().step is BookingStep.flight_selected


def test_back_from_first_step_is_denied(create_workflow):
    workflow = create_workflow()

    result = workflow.back()

    assert not result.accepted
    assert result.reason is DenialReason.no_previous_step
    assert workflow.step is BookingStep.flight_selected


@pytest.mark.asyncio
async def test_back_preserves_entered_data(create_workflow):
    workflow = create_workflow()
    await _to_payment(workflow)

    workflow.back()
    await workflow.advance()

    assert workflow.state.booking.payment_details.cvv == "123"


# === SUBMISSION ===


@pytest.mark.asyncio
async def test_submission_failure_stays_on_payment_and_keeps_data(offer_data):
    failing = InstantSubmitter(error=ConnectionError("gateway down"))
    workflow = BookingWorkflow(offer_data, 1, generator=ConfirmationGenerator(submitter=failing))
    await _to_payment(workflow)

    result = await workflow.advance()

    assert not result.accepted
    assert result.reason is DenialReason.submission_failed
    assert result.message == MSG_SUBMISSION_FAILED
    assert result.errors == ["gateway down"]
    state = workflow.state
    assert state.step is BookingStep.payment
    assert state.last_error == MSG_SUBMISSION_FAILED
    assert state.confirmation is None
    assert not state.processing
    assert state.booking.payment_details.card_number == "4111 1111 1111 1111"
    assert state.booking.passengers[0].first_name == "P0"


@pytest.mark.asyncio
async def test_retry_after_submission_failure(offer_data):
    flaky = InstantSubmitter(error=ConnectionError("gateway down"))
    workflow = BookingWorkflow(offer_data, 1, generator=ConfirmationGenerator(submitter=flaky))
    await _to_payment(workflow)
    await workflow.advance()

    flaky.error = None
    result = await workflow.advance()

    assert result.accepted
    assert workflow.state.last_error is None
    assert flaky.calls == 2


@pytest.mark.asyncio
async def test_no_double_submission_while_processing(offer_data):
    gated = GatedSubmitter()
    workflow = BookingWorkflow(offer_data, 1, generator=ConfirmationGenerator(submitter=gated))
    await _to_payment(workflow)
    before = workflow.state.booking

    first = asyncio.create_task(workflow.advance())
    await asyncio.sleep(0)
    assert workflow.processing

    second = await workflow.advance()
    back = workflow.back()
    update = workflow.update_passenger(0, make_passenger(firstName="Eve"))

    for result in (second, back, update):
        assert not result.accepted
        assert result.reason is DenialReason.already_processing
    assert workflow.state.booking == before
    assert gated.calls == 1

    gated.release.set()
    completed = await first

    assert completed.accepted
    assert not workflow.processing
    assert workflow.step is BookingStep.confirmation
    assert gated.calls == 1


@pytest.mark.asyncio
async def test_processing_flag_cleared_when_submission_rejects(offer_data):
    gated = GatedSubmitter(error=RuntimeError("declined"))
    workflow = BookingWorkflow(offer_data, 1, generator=ConfirmationGenerator(submitter=gated))
    await _to_payment(workflow)

    task = asyncio.create_task(workflow.advance())
    await asyncio.sleep(0)
    assert workflow.processing
    gated.release.set()
    result = await task

    assert result.reason is DenialReason.submission_failed
    assert not workflow.processing


@pytest.mark.asyncio
async def test_separate_workflows_get_distinct_references(offer_data):
    references = set()
    for _ in range(2):
        workflow = BookingWorkflow(
            offer_data, 1, generator=ConfirmationGenerator(submitter=InstantSubmitter())
        )
        await _to_payment(workflow)
        await workflow.advance()
        references.add(workflow.confirmation.booking_reference)

    assert len(references) == 2


@pytest.mark.asyncio
async def test_submitter_receives_copy_of_aggregate(create_workflow, submitter):
    workflow = create_workflow()
    await _to_payment(workflow)
    await workflow.advance()

    submitted = submitter.bookings[0]
    submitted.passengers[0].first_name = "Changed"

    assert workflow.confirmation.passengers[0].first_name == "P0"


# === DENIAL REPORTING ===


@pytest.mark.asyncio
async def test_raise_for_denial(create_workflow):
    workflow = create_workflow()
    await workflow.advance()

    result = await workflow.advance()

    with pytest.raises(TransitionDenied) as exc_info:
        result.raise_for_denial()
    assert exc_info.value.reason == "validation_failed"
    assert exc_info.value.errors == result.errors


@pytest.mark.asyncio
async def test_raise_for_denial_returns_accepted_result(create_workflow):
    result = await create_workflow().advance()

    assert result.raise_for_denial() is result


def test_offer_dict_without_segments_rejected():
    with pytest.raises(PydanticValidationError):
        BookingWorkflow(make_offer(itineraries=[]), 1)
