"""Severity levels and their rendered names.

Level codes follow the logxi numbering, where a lower code is more severe.
Only six levels have a rendered tag; every other code renders as "all".

Example:
    >>> from logformat.levels import Level, parse_level
    >>> parse_level("warn")
    <Level.WARN: 4>
    >>> Level.tag_for(Level.INFO)
    'INF'
"""

import enum
import logging
from typing import Dict, Union

from logformat.exceptions import InvalidLevelError


class Level(enum.IntEnum):
    """Log severity codes.

    Attributes:
        OFF: Disables a logger entirely.
        EMERGENCY: System is unusable.
        ALERT: Action must be taken immediately.
        CRITICAL: Critical conditions (FATAL is an alias).
        ERROR: Error conditions.
        WARN: Warning conditions.
        NOTICE: Normal but significant condition.
        INFO: Informational messages.
        DEBUG: Debug-level messages.
        TRACE: Very verbose tracing.
        ALL: Enables every level.
    """

    OFF = -1000
    EMERGENCY = -1
    ALERT = 1
    CRITICAL = 2
    FATAL = 2
    ERROR = 3
    WARN = 4
    NOTICE = 5
    INFO = 6
    DEBUG = 7
    TRACE = 10
    ALL = 1000

    @staticmethod
    def tag_for(level: int) -> str:
        """Three-letter tag used by the plain renderer."""
        return _TAGS.get(level, "ALL")

    @staticmethod
    def name_for(level: int) -> str:
        """Lowercase name used by the JSON renderer."""
        return _NAMES.get(level, "all")

    @classmethod
    def from_stdlib(cls, levelno: int) -> "Level":
        """Map a stdlib logging level number to a Level.

        Anything below logging.DEBUG is treated as TRACE.
        """
        if levelno >= logging.CRITICAL:
            return cls.CRITICAL
        if levelno >= logging.ERROR:
            return cls.ERROR
        if levelno >= logging.WARNING:
            return cls.WARN
        if levelno >= logging.INFO:
            return cls.INFO
        if levelno >= logging.DEBUG:
            return cls.DEBUG
        return cls.TRACE


_TAGS: Dict[int, str] = {
    Level.CRITICAL: "CRT",
    Level.ERROR: "ERR",
    Level.WARN: "WRN",
    Level.INFO: "INF",
    Level.DEBUG: "DBG",
    Level.TRACE: "TRC",
}

_NAMES: Dict[int, str] = {
    Level.CRITICAL: "critical",
    Level.ERROR: "error",
    Level.WARN: "warn",
    Level.INFO: "info",
    Level.DEBUG: "debug",
    Level.TRACE: "trace",
}

# Accepted spellings for parse_level, including the rendered tags
_ALIASES: Dict[str, Level] = {
    "off": Level.OFF,
    "emergency": Level.EMERGENCY,
    "emerg": Level.EMERGENCY,
    "alert": Level.ALERT,
    "critical": Level.CRITICAL,
    "crit": Level.CRITICAL,
    "crt": Level.CRITICAL,
    "fatal": Level.FATAL,
    "error": Level.ERROR,
    "err": Level.ERROR,
    "warn": Level.WARN,
    "warning": Level.WARN,
    "wrn": Level.WARN,
    "notice": Level.NOTICE,
    "info": Level.INFO,
    "inf": Level.INFO,
    "debug": Level.DEBUG,
    "dbg": Level.DEBUG,
    "trace": Level.TRACE,
    "trc": Level.TRACE,
    "all": Level.ALL,
}


def parse_level(value: Union[str, int, Level]) -> int:
    """Resolve a level name or code.

    Integer codes are passed through unchanged (as a Level when they are
    one), so callers can use codes outside the enum.

    Args:
        value: Level name (case-insensitive), Level member, or integer code.

    Returns:
        The level code.

    Raises:
        InvalidLevelError: If a name is not recognized.
    """
    if isinstance(value, bool):
        raise InvalidLevelError(value)
    if isinstance(value, int):
        try:
            return Level(value)
        except ValueError:
            return value

    key = str(value).strip().lower()
    if key in _ALIASES:
        return _ALIASES[key]
    raise InvalidLevelError(value)
