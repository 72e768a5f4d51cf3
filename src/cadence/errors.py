"""Error types raised by cadence."""


class CadenceError(Exception):
    """Base class for cadence errors."""


class InvalidArgument(CadenceError, ValueError):
    """A delay sequence or invocation count failed validation.

    Raised synchronously, before any timer is armed.
    """


class ConfigError(CadenceError):
    """Configuration error."""
