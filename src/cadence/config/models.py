"""Configuration models using Pydantic."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from cadence.delays import validate_delays
from cadence.manager import DEFAULT_MAX_HANDLE


class SchedulerConfig(BaseModel):
    """Configuration for the interval manager.

    ``default_delays`` is used by CLI commands when no delays are given.
    """

    max_handle: int = Field(default=DEFAULT_MAX_HANDLE, ge=1)
    default_delays: list[float] | None = None

    @field_validator("default_delays")
    @classmethod
    def _check_delays(cls, value: list[float] | None) -> list[float] | None:
        if value is not None:
            validate_delays(value)
        return value


class LoggingConfig(BaseModel):
    """Configuration for log output."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_to_file: bool = False
    retention_days: int = Field(default=7, ge=1)


class CadenceConfig(BaseModel):
    """Root configuration model."""

    scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
