"""Shared fixtures for airbook tests.

Submission latency is never real: workflows get a generator whose
submitter completes immediately or when the test releases it.
"""

import logging

import pytest

from airbook.confirmation.generator import ConfirmationGenerator
from airbook.confirmation.tokens import SequenceTokenSource
from airbook.core.offer import FlightOffer
from airbook.flow.workflow import BookingWorkflow
from tests.factories import make_offer
from tests.mocks import FIXED_NOW, InstantSubmitter


@pytest.fixture
def offer_data() -> dict:
    return make_offer()


@pytest.fixture
def offer(offer_data) -> FlightOffer:
    return FlightOffer.model_validate(offer_data)


@pytest.fixture
def submitter() -> InstantSubmitter:
    return InstantSubmitter()


@pytest.fixture
def generator(submitter) -> ConfirmationGenerator:
    return ConfirmationGenerator(
        submitter=submitter,
        token_source=SequenceTokenSource(["ABCD1234", "XYZ789"]),
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def create_workflow(offer_data, generator):
    """
    Factory fixture for workflows sharing the deterministic generator.

    Usage:
        def test_something(create_workflow):
            workflow = create_workflow(passenger_count=2)
    """

    def _create(passenger_count: int = 1, **kwargs) -> BookingWorkflow:
        kwargs.setdefault("generator", generator)
        return BookingWorkflow(offer_data, passenger_count, **kwargs)

    return _create


@pytest.fixture(autouse=True)
def reset_airbook_logger():
    """Drop handlers installed by setup_logging (e.g. bound to CliRunner streams)."""
    yield
    airbook_logger = logging.getLogger("airbook")
    for handler in list(airbook_logger.handlers):
        airbook_logger.removeHandler(handler)
        handler.close()
    airbook_logger.setLevel(logging.NOTSET)
    airbook_logger.propagate = True
    root = logging.getLogger()
    for handler in [h for h in root.handlers if type(h) is logging.StreamHandler]:
        root.removeHandler(handler)
