"""Observability module for airbook."""

from airbook.observability.logging import (
    ContextAdapter,
    ContextLogger,
    setup_logging,
    setup_logging_from_settings,
)

__all__ = ["ContextAdapter", "ContextLogger", "setup_logging", "setup_logging_from_settings"]
