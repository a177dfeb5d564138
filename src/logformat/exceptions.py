"""Exceptions for logformat.

Rendering itself never raises; these cover the setup paths around it
(level parsing and logger derivation).

Example:
    >>> from logformat.exceptions import InvalidLevelError
    >>> raise InvalidLevelError("loud")
"""

from typing import Any


class LogFormatError(Exception):
    """Base exception for all logformat errors."""

    pass


class InvalidLevelError(LogFormatError, ValueError):
    """A level name could not be resolved.

    Example:
        >>> raise InvalidLevelError("loud")
    """

    def __init__(self, value: Any):
        """Initialize invalid level error.

        Args:
            value: The level name or code that was rejected.
        """
        self.value = value
        super().__init__(f"Unknown log level: {value!r}")


class UnsupportedLoggerError(LogFormatError, TypeError):
    """A logger cannot be derived because it is not a vault logger.

    Raised when derive_module_logger receives a logger that is not a
    VaultLogger, or whose formatter is not a VaultFormatter.
    """

    def __init__(self, obj: Any, what: str = "logger"):
        """Initialize unsupported logger error.

        Args:
            obj: The offending logger or formatter.
            what: Which part was unsupported ("logger" or "formatter").
        """
        self.obj = obj
        super().__init__(
            f"Cannot derive a module logger from {what} of type {type(obj).__name__}"
        )
