"""Stdlib logging bridge.

VaultHandler lets code that logs through the standard logging module
produce vault-formatted output. Fields passed with extra= become the
record's key/value pairs.

Example:
    >>> import logging, sys
    >>> from logformat.formatter import create_formatter
    >>> from logformat.handler import VaultHandler
    >>>
    >>> handler = VaultHandler(sys.stderr, create_formatter().derive("storage"))
    >>> log = logging.getLogger("storage")
    >>> log.addHandler(handler)
    >>> log.warning("slow write", extra={"path": "core/keyring", "ms": 812})
"""

import logging
import sys
from typing import IO, Any, List, Optional

from logformat.formatter import VaultFormatter, create_formatter
from logformat.levels import Level


class VaultHandler(logging.Handler):
    """Logging handler that renders records with a VaultFormatter.

    Locking is left to the VaultFormatter, so handlers sharing a formatter
    lineage never interleave output on a shared stream.
    """

    # LogRecord attributes that are never rendered as key/value pairs
    STANDARD_FIELDS = {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "taskName",
        "message",
    }

    def __init__(
        self,
        stream: Optional[IO[str]] = None,
        vault_formatter: Optional[VaultFormatter] = None,
        level: int = logging.NOTSET,
    ) -> None:
        """Initialize the handler.

        Args:
            stream: Text stream to write to (default: sys.stderr).
            vault_formatter: Formatter to render with; a new root formatter
                configured from the environment when omitted.
            level: Stdlib level threshold for the handler.
        """
        super().__init__(level)
        self.stream = stream if stream is not None else sys.stderr
        self.vault_formatter = (
            vault_formatter if vault_formatter is not None else create_formatter()
        )

    def emit(self, record: logging.LogRecord) -> None:
        """Render a record through the vault formatter."""
        try:
            self.vault_formatter.format(
                self.stream,
                Level.from_stdlib(record.levelno),
                record.getMessage(),
                self._extra_args(record),
            )
            self.flush()
        except RecursionError:
            raise
        except Exception:
            self.handleError(record)

    def flush(self) -> None:
        self.acquire()
        try:
            if self.stream and hasattr(self.stream, "flush"):
                self.stream.flush()
        finally:
            self.release()

    def _extra_args(self, record: logging.LogRecord) -> List[Any]:
        args: List[Any] = []
        for key, value in record.__dict__.items():
            if key not in self.STANDARD_FIELDS and not key.startswith("_"):
                args.extend((key, value))
        if record.exc_info and record.exc_info[0] is not None:
            args.extend(("error", repr(record.exc_info[1])))
        return args
