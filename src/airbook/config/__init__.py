"""Configuration module for airbook."""

from airbook.config.loader import ConfigLoader
from airbook.config.settings import AirbookConfig, BookingSettings, LoggingSettings

__all__ = ["AirbookConfig", "BookingSettings", "ConfigLoader", "LoggingSettings"]
