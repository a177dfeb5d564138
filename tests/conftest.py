"""Pytest fixtures for logformat tests.

Provides a frozen clock, a clean environment and in-memory streams so
rendered output can be compared exactly.
"""

from datetime import datetime, timedelta, timezone
from io import StringIO

import pytest

from logformat.config import FORMAT_ENV, LEVEL_ENV

FROZEN_NOW = datetime(2024, 1, 15, 10, 30, 45, 123456, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove logformat environment variables for every test."""
    monkeypatch.delenv(FORMAT_ENV, raising=False)
    monkeypatch.delenv(LEVEL_ENV, raising=False)


@pytest.fixture
def frozen_now(monkeypatch):
    """Freeze the formatter clock at 2024-01-15 10:30:45.123456 UTC.

    Returns:
        Function that re-freezes the clock at another datetime.
    """

    def freeze(moment: datetime = FROZEN_NOW) -> datetime:
        monkeypatch.setattr("logformat.formatter._now", lambda: moment)
        return moment

    freeze()
    return freeze


@pytest.fixture
def stream() -> StringIO:
    """In-memory text stream."""
    return StringIO()


@pytest.fixture
def json_env(monkeypatch):
    """Select JSON output through the environment."""
    monkeypatch.setenv(FORMAT_ENV, "vault_json")


class FailingWriter:
    """Text stream whose writes fail, except for bare newlines."""

    def __init__(self):
        self.writes = []

    def write(self, data: str) -> int:
        self.writes.append(data)
        if data != "\n":
            raise OSError("disk full")
        return len(data)

    def flush(self) -> None:
        pass


@pytest.fixture
def failing_writer() -> FailingWriter:
    return FailingWriter()


@pytest.fixture
def utc_plus_530() -> datetime:
    return FROZEN_NOW.astimezone(timezone(timedelta(hours=5, minutes=30)))
