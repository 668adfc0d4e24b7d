"""Booking confirmation generation."""

from airbook.confirmation.generator import (
    ConfirmationGenerator,
    SimulatedSubmitter,
    Submitter,
)
from airbook.confirmation.tokens import SequenceTokenSource, TokenSource, random_token

__all__ = [
    "ConfirmationGenerator",
    "SequenceTokenSource",
    "SimulatedSubmitter",
    "Submitter",
    "TokenSource",
    "random_token",
]
