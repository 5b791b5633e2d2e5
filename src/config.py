"""
Configuration for the payments engine.

Values come from environment variables prefixed with PAYMENTS_, e.g.
PAYMENTS_LOG_LEVEL=INFO shows every skipped record on stderr.
"""

from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]


class EngineSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="PAYMENTS_")

    # Logging goes to stderr; stdout carries only the account CSV
    log_level: LogLevel = "WARNING"
    log_format: str = "%(levelname)s: %(message)s"

    # Print applied/skipped/malformed counters to stderr after the run
    report_stats: bool = False

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, value):
        return value.strip().upper() if isinstance(value, str) else value


def get_settings() -> EngineSettings:
    return EngineSettings()
