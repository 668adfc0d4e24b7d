"""Settings models.

Runtime knobs for the booking workflow, confirmation generation and logging.
"""

from typing import Literal

from pydantic import BaseModel, Field, model_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class BookingSettings(BaseModel):
    """Booking workflow and confirmation settings."""

    min_passengers: int = Field(default=1, ge=1, description="Smallest bookable party")
    max_passengers: int = Field(default=9, ge=1, description="Largest bookable party")
    submission_delay: float = Field(
        default=2.0, ge=0, description="Simulated submission latency in seconds"
    )
    reference_length: int = Field(default=8, ge=4, description="Booking reference token length")
    confirmation_token_length: int = Field(
        default=6, ge=4, description="Token length appended to the carrier code"
    )
    reference_prefix: str = Field(default="", description="Optional booking reference prefix")
    airlines: dict[str, str] = Field(
        default_factory=dict,
        description="Carrier code to airline display label (default: '<code> Airlines')",
    )

    @model_validator(mode="after")
    def _check_bounds(self) -> "BookingSettings":
        if self.min_passengers > self.max_passengers:
            raise ValueError(
                f"min_passengers ({self.min_passengers}) > max_passengers ({self.max_passengers})"
            )
        return self

    def airline_label(self, carrier_code: str) -> str:
        return self.airlines.get(carrier_code, f"{carrier_code} Airlines")


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: LogLevel = "INFO"
    json_format: bool = Field(default=False, description="Emit JSON log records")
    file: str | None = Field(default=None, description="Optional rotating log file path")


class AirbookConfig(BaseModel):
    """Top-level configuration."""

    booking: BookingSettings = Field(default_factory=BookingSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
