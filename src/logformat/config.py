"""Logging configuration.

Configuration is read once from the environment when a logger is built;
loggers never look at the environment again afterwards.

Environment Variables:
    LOGXI_FORMAT: "vault_json", "vault-json" or "vaultjson" selects JSON
        output; any other value (or none) selects plain text.
    VAULT_LOG_LEVEL: Default level name for new loggers (default: info).
"""

import enum
import os
from dataclasses import dataclass
from typing import FrozenSet, Optional

from logformat.levels import parse_level

FORMAT_ENV = "LOGXI_FORMAT"
LEVEL_ENV = "VAULT_LOG_LEVEL"

# Exact, case-sensitive matches only
JSON_STYLE_ALIASES: FrozenSet[str] = frozenset({"vault_json", "vault-json", "vaultjson"})


class Style(enum.Enum):
    """Rendering style of a formatter.

    Attributes:
        PLAIN: Human-readable single line.
        JSON: One JSON object per line.
    """

    PLAIN = "plain"
    JSON = "json"


def style_for(value: Optional[str]) -> Style:
    """Select a style from a format value; unknown values mean PLAIN."""
    if value in JSON_STYLE_ALIASES:
        return Style.JSON
    return Style.PLAIN


@dataclass
class LoggingConfig:
    """Configuration for vault loggers.

    Example:
        >>> config = LoggingConfig(format="vault_json", level="debug")
        >>> config.style
        <Style.JSON: 'json'>
    """

    format: str = ""
    level: str = "info"

    @property
    def style(self) -> Style:
        """Rendering style selected by the format value."""
        return style_for(self.format)

    @property
    def level_code(self) -> int:
        """Level code for the configured name.

        Raises:
            InvalidLevelError: If the level name is not recognized.
        """
        return parse_level(self.level)

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        """Create configuration from environment variables."""
        return cls(
            format=os.getenv(FORMAT_ENV, ""),
            level=os.getenv(LEVEL_ENV, "info").lower(),
        )
