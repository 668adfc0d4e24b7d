"""Booking rule sets, looked up by name.

The step guards resolve the ``passenger`` and ``payment`` rule sets on every
check, so replacing one (a stricter payment check for a market, say) takes
effect on running workflows without rebuilding them.
"""

import logging
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from threading import Lock
from typing import Any, ClassVar

from airbook.core.constants import RuleSet
from airbook.core.models import ValidationResult

logger = logging.getLogger(__name__)

DomainValidator = Callable[..., ValidationResult]
OptionsFor = Callable[[int], dict[str, Any]]


def _key(rule_set: RuleSet | str) -> str:
    return rule_set.value if isinstance(rule_set, RuleSet) else rule_set


def _describe(func: DomainValidator) -> str:
    return getattr(func, "__qualname__", repr(func))


class ValidatorRegistry:
    """Thread-safe map from rule set to domain validator."""

    _validators: ClassVar[dict[str, DomainValidator]] = {}
    _lock: ClassVar[Lock] = Lock()

    @classmethod
    def register(cls, rule_set: RuleSet | str) -> Callable[[DomainValidator], DomainValidator]:
        """
        Register the validator for a rule set, replacing any previous one.

        Usage:
            @ValidatorRegistry.register(RuleSet.payment)
            def validate_payment(payment: PaymentDetails) -> ValidationResult:
                ...
        """
        name = _key(rule_set)

        def decorator(func: DomainValidator) -> DomainValidator:
            with cls._lock:
                previous = cls._validators.get(name)
                cls._validators[name] = func
            if previous is not None and previous is not func:
                logger.warning(
                    f"Rule set '{name}' replaced: {_describe(previous)} -> {_describe(func)}",
                    extra={"rule_set": name},
                )
            return func

        return decorator

    @classmethod
    def get(cls, rule_set: RuleSet | str) -> DomainValidator:
        """
        Look up the validator for a rule set.

        Raises:
            KeyError: If no validator is registered for the rule set
        """
        name = _key(rule_set)
        with cls._lock:
            validator = cls._validators.get(name)
            registered = sorted(cls._validators)
        if validator is None:
            raise KeyError(f"No validator registered for rule set '{name}'. Registered: {registered}")
        return validator

    @classmethod
    def validate(cls, rule_set: RuleSet | str, value: Any, **options: Any) -> ValidationResult:
        return cls.get(rule_set)(value, **options)

    @classmethod
    def validate_each(
        cls,
        rule_set: RuleSet | str,
        values: Sequence[Any],
        label: str,
        options_for: OptionsFor | None = None,
    ) -> list[str]:
        """Validate every item in order.

        Errors are prefixed with ``"<label> <n>: "``, ``n`` counting from 1.
        ``options_for(index)`` supplies per-item keyword options, e.g. only
        the primary passenger must have an email.
        """
        validator = cls.get(rule_set)
        errors: list[str] = []
        for index, value in enumerate(values):
            options = options_for(index) if options_for else {}
            result = validator(value, **options)
            errors += [f"{label} {index + 1}: {error}" for error in result.errors]
        return errors

    @classmethod
    @contextmanager
    def replaced(cls, rule_set: RuleSet | str, func: DomainValidator) -> Iterator[DomainValidator]:
        """Use ``func`` for a rule set inside the block, then restore the original."""
        name = _key(rule_set)
        with cls._lock:
            original = cls._validators.get(name)
            cls._validators[name] = func
        try:
            yield func
        finally:
            with cls._lock:
                if original is None:
                    cls._validators.pop(name, None)
                else:
                    cls._validators[name] = original

    @classmethod
    def list_validators(cls) -> list[str]:
        with cls._lock:
            return list(cls._validators)

    @classmethod
    def is_registered(cls, rule_set: RuleSet | str) -> bool:
        with cls._lock:
            return _key(rule_set) in cls._validators

    @classmethod
    def unregister(cls, rule_set: RuleSet | str) -> None:
        with cls._lock:
            cls._validators.pop(_key(rule_set), None)
