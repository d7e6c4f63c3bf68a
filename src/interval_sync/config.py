"""Configuration settings for the interval step synchronizer."""
import logging
import os
from typing import Literal


EnvironmentType = Literal["development", "staging", "production"]
LocaleType = Literal["fr", "en"]


class Settings:
    """Application settings."""

    # Environment
    ENVIRONMENT: EnvironmentType = "development"

    # Feature flags
    DISABLE_AUTO_REGENERATION: bool = False

    # Display
    LABEL_LOCALE: LocaleType = "fr"

    # Logging
    LOG_LEVEL: str = "INFO"

    def __init__(self):
        # Environment
        env = os.getenv("ENVIRONMENT", "development").lower()
        if env in ("development", "staging", "production"):
            self.ENVIRONMENT = env  # type: ignore
        else:
            self.ENVIRONMENT = "development"

        # Feature flags
        self.DISABLE_AUTO_REGENERATION = (
            os.getenv("INTERVAL_SYNC_DISABLE_AUTO_REGENERATION", "false").lower() == "true"
        )

        # Display
        locale = os.getenv("INTERVAL_SYNC_LABEL_LOCALE", "fr").lower()
        self.LABEL_LOCALE = locale if locale in ("fr", "en") else "fr"  # type: ignore

        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()


def configure_logging(level: str | None = None) -> None:
    """Apply LOG_LEVEL to the package logger."""
    resolved = level or settings.LOG_LEVEL
    logging.getLogger("interval_sync").setLevel(getattr(logging, resolved.upper(), logging.INFO))
