"""Vault logger wrapper.

A VaultLogger owns an output stream, a level threshold and a formatter.
Leveled calls that pass the threshold are handed to the formatter, which
does the rendering and the locking.

Example:
    >>> import sys
    >>> from logformat.logger import new_vault_logger_with_writer, derive_module_logger
    >>> root = new_vault_logger_with_writer(sys.stdout, "debug")
    >>> audit = derive_module_logger(root, "audit")
    >>> audit.debug("request received", "path", "sys/health", "bytes", 512)
"""

import logging
import sys
import traceback
from typing import IO, Any, Optional, Union

from logformat.exceptions import UnsupportedLoggerError
from logformat.formatter import VaultFormatter, create_formatter
from logformat.levels import Level, parse_level

DEFAULT_NAME = "vault"

LevelLike = Union[str, int, Level]


class VaultLogger:
    """Leveled logger that renders through a VaultFormatter.

    An event is emitted when its level code is less than or equal to the
    logger's level, so Level.OFF silences everything and Level.ALL lets
    everything through.
    """

    def __init__(
        self,
        writer: IO[str],
        name: str = DEFAULT_NAME,
        level: LevelLike = Level.INFO,
        formatter: Optional[VaultFormatter] = None,
    ) -> None:
        """Initialize the logger.

        Args:
            writer: Text stream records are written to.
            name: Logger name.
            level: Level threshold as a Level, code, or name.
            formatter: Formatter to render with; a new root formatter
                configured from the environment when omitted.

        Raises:
            InvalidLevelError: If level is an unknown name.
        """
        self.name = name
        self._writer = writer
        self._level = parse_level(level)
        self._formatter = formatter if formatter is not None else create_formatter()

    def __repr__(self) -> str:
        return f"VaultLogger(name={self.name!r}, level={self._level!r}, formatter={self._formatter!r})"

    @property
    def writer(self) -> IO[str]:
        return self._writer

    @property
    def level(self) -> int:
        return self._level

    def set_level(self, level: LevelLike) -> None:
        """Change the level threshold.

        Raises:
            InvalidLevelError: If level is an unknown name.
        """
        self._level = parse_level(level)

    @property
    def formatter(self) -> VaultFormatter:
        return self._formatter

    def set_formatter(self, formatter: VaultFormatter) -> None:
        self._formatter = formatter

    def is_enabled_for(self, level: int) -> bool:
        return level <= self._level

    def is_trace(self) -> bool:
        return self.is_enabled_for(Level.TRACE)

    def is_debug(self) -> bool:
        return self.is_enabled_for(Level.DEBUG)

    def is_info(self) -> bool:
        return self.is_enabled_for(Level.INFO)

    def is_warn(self) -> bool:
        return self.is_enabled_for(Level.WARN)

    def log(self, level: int, msg: Any, *args: Any) -> None:
        """Log msg at an arbitrary level code.

        Args:
            level: Level code.
            msg: Message; converted with str().
            *args: Alternating keys and values.
        """
        if not self.is_enabled_for(level):
            return
        try:
            self._formatter.format(self._writer, level, str(msg), args)
        except RecursionError:
            raise
        except Exception:
            self._handle_error()

    def trace(self, msg: Any, *args: Any) -> None:
        self.log(Level.TRACE, msg, *args)

    def debug(self, msg: Any, *args: Any) -> None:
        self.log(Level.DEBUG, msg, *args)

    def info(self, msg: Any, *args: Any) -> None:
        self.log(Level.INFO, msg, *args)

    def warn(self, msg: Any, *args: Any) -> None:
        self.log(Level.WARN, msg, *args)

    warning = warn

    def error(self, msg: Any, *args: Any) -> None:
        self.log(Level.ERROR, msg, *args)

    def critical(self, msg: Any, *args: Any) -> None:
        self.log(Level.CRITICAL, msg, *args)

    fatal = critical

    def with_module(self, fragment: str) -> "VaultLogger":
        """Shorthand for derive_module_logger(self, fragment)."""
        return derive_module_logger(self, fragment)

    def _handle_error(self) -> None:
        # Same policy as logging.Handler.handleError: report, never raise
        if logging.raiseExceptions and sys.stderr:
            sys.stderr.write(f"--- Logging error in {self.name} ---\n")
            traceback.print_exc(file=sys.stderr)


def new_vault_logger(level: LevelLike) -> VaultLogger:
    """Create a logger writing to stderr with a vault formatter.

    Args:
        level: Level threshold as a Level, code, or name.

    Returns:
        A new VaultLogger with its own formatter and lock.
    """
    return VaultLogger(sys.stderr, DEFAULT_NAME, level, create_formatter())


def new_vault_logger_with_writer(writer: IO[str], level: LevelLike) -> VaultLogger:
    """Create a logger writing to writer with a vault formatter.

    Args:
        writer: Text stream records are written to.
        level: Level threshold as a Level, code, or name.

    Returns:
        A new VaultLogger with its own formatter and lock.
    """
    return VaultLogger(writer, DEFAULT_NAME, level, create_formatter())


def derive_module_logger(parent: VaultLogger, module: str) -> VaultLogger:
    """Derive a logger for a module from an existing logger.

    The derived logger shares the parent's writer, level, style and lock;
    only the module differs. An empty module clears it rather than
    inheriting the parent's, and a module beginning with "/" is used as
    the full module name instead of being appended.

    Args:
        parent: Logger to derive from.
        module: Module name fragment.

    Returns:
        A new VaultLogger; parent is not modified.

    Raises:
        UnsupportedLoggerError: If parent is not a VaultLogger or does not
            use a VaultFormatter.
    """
    if not isinstance(parent, VaultLogger):
        raise UnsupportedLoggerError(parent)
    formatter = parent.formatter
    if not isinstance(formatter, VaultFormatter):
        raise UnsupportedLoggerError(formatter, what="formatter")

    return VaultLogger(
        parent.writer,
        DEFAULT_NAME,
        parent.level,
        formatter.derive(module),
    )
