"""Exception hierarchy for airbook.

Guards and validators never raise: they return ValidationResult values.
These exceptions mark construction-time misuse, opt-in denial reporting,
and the submission failure that the workflow converts back into state.
"""

from typing import Any


class AirbookError(Exception):
    """Base class for all airbook errors.

    Extra keyword arguments are kept on ``context`` and rendered after the
    message as ``key=value`` pairs.
    """

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(self._format())

    def _format(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{key}={value}" for key, value in self.context.items())
        return f"{self.message} ({details})"


class ConfigError(AirbookError):
    """Raised when configuration is missing or invalid."""


class StateError(AirbookError):
    """Raised when a step transition violates the transition table."""


class ValidationError(AirbookError):
    """Raised when input is rejected at a construction boundary.

    Carries the complete list of violated rules.
    """

    def __init__(self, message: str, errors: list[str] | None = None, **context: Any) -> None:
        self.errors = list(errors or [])
        super().__init__(message, **context)


class TransitionDenied(AirbookError):
    """An operation was refused by the booking workflow."""

    def __init__(
        self,
        message: str,
        reason: str,
        errors: list[str] | None = None,
        **context: Any,
    ) -> None:
        self.reason = reason
        self.errors = list(errors or [])
        super().__init__(message, reason=reason, **context)


class SubmissionFailure(AirbookError):
    """The asynchronous booking submission did not complete."""
