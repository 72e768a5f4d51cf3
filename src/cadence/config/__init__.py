"""Configuration module."""

from cadence.config.loader import (
    get_default_config,
    load_config,
    load_config_or_default,
)
from cadence.config.models import CadenceConfig, LoggingConfig, SchedulerConfig
from cadence.config.paths import get_cadence_home, get_config_path, get_logs_path
from cadence.errors import ConfigError

__all__ = [
    "CadenceConfig",
    "ConfigError",
    "LoggingConfig",
    "SchedulerConfig",
    "get_cadence_home",
    "get_config_path",
    "get_default_config",
    "get_logs_path",
    "load_config",
    "load_config_or_default",
]
