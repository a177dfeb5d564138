"""Vault-style log formatting.

This package renders log events either as human-readable lines or as
line-delimited JSON, with an optional hierarchical module tag and a write
lock shared across every logger derived from the same root.

Example:
    >>> from logformat import Level, new_vault_logger, derive_module_logger
    >>>
    >>> logger = new_vault_logger(Level.INFO)
    >>> core = derive_module_logger(logger, "core")
    >>> policy = derive_module_logger(core, "policy")
    >>> policy.info("policy loaded", "name", "default", "rules", 3)
"""

from logformat.config import LoggingConfig
from logformat.exceptions import (
    InvalidLevelError,
    LogFormatError,
    UnsupportedLoggerError,
)
from logformat.formatter import (
    Style,
    VaultFormatter,
    create_formatter,
    derive_module_name,
)
from logformat.handler import VaultHandler
from logformat.levels import Level, parse_level
from logformat.logger import (
    VaultLogger,
    derive_module_logger,
    new_vault_logger,
    new_vault_logger_with_writer,
)

__version__ = "0.1.0"

__all__ = [
    "InvalidLevelError",
    "Level",
    "LogFormatError",
    "LoggingConfig",
    "Style",
    "UnsupportedLoggerError",
    "VaultFormatter",
    "VaultHandler",
    "VaultLogger",
    "create_formatter",
    "derive_module_logger",
    "derive_module_name",
    "new_vault_logger",
    "new_vault_logger_with_writer",
    "parse_level",
]
