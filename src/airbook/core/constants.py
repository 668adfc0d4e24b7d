"""Core constants and enums."""

from enum import Enum


class BookingStep(str, Enum):
    """Steps of the booking workflow, in order."""

    flight_selected = "flight-selected"
    passenger_details = "passenger-details"
    payment = "payment"
    confirmation = "confirmation"


class BookingStatus(str, Enum):
    """Status of a booking confirmation."""

    confirmed = "confirmed"
    pending = "pending"
    failed = "failed"


class Title(str, Enum):
    mr = "Mr"
    mrs = "Mrs"
    ms = "Ms"
    dr = "Dr"


class TravelerType(str, Enum):
    adult = "adult"
    child = "child"
    infant = "infant"


class RuleSet(str, Enum):
    """Names under which the domain validators are registered."""

    search_request = "search_request"
    passenger = "passenger"
    flight = "flight"
    payment = "payment"


class DenialReason(str, Enum):
    """Why the workflow refused an operation."""

    validation_failed = "validation_failed"
    already_processing = "already_processing"
    submission_failed = "submission_failed"
    terminal_state = "terminal_state"
    no_previous_step = "no_previous_step"
    invalid_passenger_index = "invalid_passenger_index"


PRIMARY_PASSENGER_INDEX = 0

MSG_PASSENGER_DETAILS_REQUIRED = "Please fill in all required passenger details"
MSG_PAYMENT_DETAILS_REQUIRED = "Please fill in all required payment details"
MSG_ALREADY_PROCESSING = "A booking submission is already in progress"
MSG_SUBMISSION_FAILED = "Booking failed. Please try again."
MSG_TERMINAL_STATE = "Booking is already confirmed"
MSG_NO_PREVIOUS_STEP = "There is no previous step"
MSG_INVALID_PASSENGER = "Passenger details could not be read"
MSG_INVALID_PAYMENT = "Payment details could not be read"
MSG_INVALID_COMMAND = "Command could not be read"
