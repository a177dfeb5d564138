"""Vault log formatter.

A VaultFormatter renders one log event per call, either as a plain text
line or as a JSON object, while holding a lock. Formatters derived from
one another share that lock so that a whole hierarchy of module loggers
can write to one stream without interleaving records.

Plain output:
    2024/01/15 10:30:45.123456 [INF] (core/policy) policy loaded: name=default

JSON output:
    {"@message": "policy loaded", "@timestamp": "2024-01-15T10:30:45.123456+01:00",
     "@level": "info", "@module": "core/policy", "name": "default"}
"""

import json
import logging
import threading
from datetime import datetime
from typing import IO, Any, Dict, List, Optional, Sequence

from logformat.config import LoggingConfig, Style, style_for
from logformat.levels import Level

logger = logging.getLogger(__name__)

# Value given to the last key of an odd-length argument list
UNKNOWN_VALUE = "[unknown!]"

PLAIN_TIME_FORMAT = "%Y/%m/%d %H:%M:%S.%f"
JSON_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S.%f"


def _now() -> datetime:
    """Current local time, offset-aware."""
    return datetime.now().astimezone()


def _rfc3339(moment: datetime) -> str:
    """Format a timestamp as RFC 3339 with microseconds.

    Args:
        moment: Offset-aware datetime.

    Returns:
        Timestamp ending in "Z" for a zero offset, "+HH:MM" otherwise.
    """
    stamp = moment.strftime(JSON_TIME_FORMAT)
    offset = moment.utcoffset()
    if not offset:
        return stamp + "Z"
    minutes = int(offset.total_seconds()) // 60
    sign = "+" if minutes >= 0 else "-"
    hours, minutes = divmod(abs(minutes), 60)
    return f"{stamp}{sign}{hours:02d}:{minutes:02d}"


def _pad_args(args: Optional[Sequence[Any]]) -> List[Any]:
    """Copy args, appending the unknown value when a key has no value."""
    padded = list(args or ())
    if len(padded) % 2 != 0:
        padded.append(UNKNOWN_VALUE)
    return padded


def _safe_str(obj: Any) -> str:
    """Stringify a key or value without letting its __str__ raise.

    Args:
        obj: Object to stringify.

    Returns:
        str(obj), or a placeholder naming the type when that fails.
    """
    try:
        return str(obj)
    except Exception:
        return f"<unserializable: {type(obj).__name__}>"


def derive_module_name(parent: str, fragment: str) -> str:
    """Compose a module name from a parent module and a fragment.

    An empty fragment clears the module. A fragment starting with "/"
    replaces the parent's module outright. Otherwise the fragment is
    appended to the parent with a "/" separator.

    Args:
        parent: Module name of the parent formatter, possibly empty.
        fragment: Module name fragment to apply.

    Returns:
        The new module name.

    Example:
        >>> derive_module_name("core", "policy")
        'core/policy'
        >>> derive_module_name("core", "/audit")
        'audit'
        >>> derive_module_name("core", "")
        ''
    """
    if fragment == "":
        return ""
    if fragment.startswith("/"):
        return fragment[1:]
    if parent == "":
        return fragment
    return f"{parent}/{fragment}"


class VaultFormatter:
    """Thread-safe formatter for vault loggers.

    The style is fixed for the lifetime of the formatter. The module name
    changes only through derive(), which returns a new formatter and
    leaves this one untouched.

    Attributes:
        style: Plain text or JSON output.
        module: Hierarchical module name, empty when unset.
        lock: Lock serializing writes; shared with derived formatters.
    """

    def __init__(
        self,
        style: Style = Style.PLAIN,
        module: str = "",
        lock: Optional[threading.Lock] = None,
    ) -> None:
        self._style = style
        self._module = module
        self._lock = lock if lock is not None else threading.Lock()

    @property
    def style(self) -> Style:
        """Rendering style, fixed at construction."""
        return self._style

    @property
    def module(self) -> str:
        """Hierarchical module name, empty when unset."""
        return self._module

    @property
    def lock(self) -> threading.Lock:
        """Write lock, shared with every formatter derived from this one."""
        return self._lock

    def __repr__(self) -> str:
        return f"VaultFormatter(style={self._style.value!r}, module={self._module!r})"

    def derive(self, fragment: str) -> "VaultFormatter":
        """Create a formatter for a sub-module.

        The new formatter shares this formatter's style and lock.

        Args:
            fragment: Module name fragment, see derive_module_name().

        Returns:
            A new VaultFormatter.
        """
        module = derive_module_name(self._module, fragment)
        logger.debug("Derived formatter module %r from %r", module, self._module)
        return VaultFormatter(style=self._style, module=module, lock=self._lock)

    def format(
        self,
        writer: IO[str],
        level: int,
        msg: str,
        args: Optional[Sequence[Any]] = None,
    ) -> None:
        """Write one log event to writer.

        The lock is held for the whole call. Errors raised by the writer
        propagate to the caller after the lock is released.

        Args:
            writer: Text stream to write to.
            level: Level code; unknown codes render as "all".
            msg: Message text, written as-is.
            args: Alternating keys and values.
        """
        with self._lock:
            if self._style is Style.JSON:
                self._format_json(writer, level, msg, args)
            else:
                self._format_plain(writer, level, msg, args)

    def _format_plain(
        self,
        writer: IO[str],
        level: int,
        msg: str,
        args: Optional[Sequence[Any]],
    ) -> None:
        try:
            writer.write(_now().strftime(PLAIN_TIME_FORMAT))
            writer.write(f" [{Level.tag_for(level)}] ")

            if self._module:
                writer.write(f"({self._module}) ")

            writer.write(msg)

            if args:
                pairs = _pad_args(args)
                writer.write(":")

                for i in range(0, len(pairs), 2):
                    key, value = pairs[i], pairs[i + 1]
                    quote = '"' if isinstance(value, str) and " " in value else ""
                    writer.write(f" {_safe_str(key)}={quote}{_safe_str(value)}{quote}")
        finally:
            writer.write("\n")

    def _format_json(
        self,
        writer: IO[str],
        level: int,
        msg: str,
        args: Optional[Sequence[Any]],
    ) -> None:
        vals: Dict[str, Any] = {
            "@message": msg,
            "@timestamp": _rfc3339(_now()),
            "@level": Level.name_for(level),
        }

        if self._module:
            vals["@module"] = self._module

        if args:
            pairs = _pad_args(args)
            for i in range(0, len(pairs), 2):
                key = pairs[i]
                # Nothing sensible to do with a non-string key from here
                if not isinstance(key, str):
                    continue
                vals[key] = pairs[i + 1]

        writer.write(json.dumps(vals, default=_safe_str, allow_nan=False) + "\n")


def create_formatter(format_value: Optional[str] = None) -> VaultFormatter:
    """Create a root formatter with a fresh lock and no module.

    Args:
        format_value: Format setting; read from LOGXI_FORMAT when None.

    Returns:
        A VaultFormatter in JSON style for the vault JSON aliases, plain
        style otherwise.
    """
    if format_value is None:
        format_value = LoggingConfig.from_env().format
    style = style_for(format_value)
    logger.debug("Created %s vault formatter", style.value)
    return VaultFormatter(style=style)


__all__ = [
    "Style",
    "UNKNOWN_VALUE",
    "VaultFormatter",
    "create_formatter",
    "derive_module_name",
]
