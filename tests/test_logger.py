"""Unit tests for vault loggers and module derivation."""

import json
import logging
import sys

import pytest

from logformat.config import Style
from logformat.exceptions import InvalidLevelError, UnsupportedLoggerError
from logformat.formatter import VaultFormatter
from logformat.levels import Level
from logformat.logger import (
    VaultLogger,
    derive_module_logger,
    new_vault_logger,
    new_vault_logger_with_writer,
)


class TestConstruction:
    """Tests for the logger constructors."""

    def test_new_vault_logger_writes_to_stderr(self):
        logger = new_vault_logger(Level.DEBUG)

        assert logger.writer is sys.stderr
        assert logger.level is Level.DEBUG
        assert logger.name == "vault"
        assert isinstance(logger.formatter, VaultFormatter)

    def test_new_vault_logger_with_writer(self, stream):
        logger = new_vault_logger_with_writer(stream, "warn")

        assert logger.writer is stream
        assert logger.level is Level.WARN
        assert logger.formatter.module == ""

    def test_style_from_environment(self, stream, json_env):
        logger = new_vault_logger_with_writer(stream, Level.INFO)
        assert logger.formatter.style is Style.JSON

    def test_style_fixed_after_construction(self, stream, monkeypatch):
        logger = new_vault_logger_with_writer(stream, Level.INFO)
        monkeypatch.setenv("LOGXI_FORMAT", "vault_json")

        assert logger.formatter.style is Style.PLAIN
        assert derive_module_logger(logger, "core").formatter.style is Style.PLAIN

    def test_separate_loggers_have_separate_locks(self, stream):
        a = new_vault_logger_with_writer(stream, Level.INFO)
        b = new_vault_logger_with_writer(stream, Level.INFO)
        assert a.formatter.lock is not b.formatter.lock

    def test_invalid_level_name(self, stream):
        with pytest.raises(InvalidLevelError):
            new_vault_logger_with_writer(stream, "chatty")


class TestLeveledCalls:
    """Tests for level filtering and the leveled helpers."""

    @pytest.fixture
    def logger(self, stream):
        return new_vault_logger_with_writer(stream, Level.INFO)

    def test_filters_below_threshold(self, logger, stream):
        logger.debug("hidden")
        logger.trace("hidden")
        assert stream.getvalue() == ""

    def test_emits_at_and_above_threshold(self, logger, stream, frozen_now):
        logger.info("i")
        logger.warn("w")
        logger.warning("w2")
        logger.error("e")
        logger.critical("c")
        logger.fatal("f")

        assert stream.getvalue().splitlines() == [
            "2024/01/15 10:30:45.123456 [INF] i",
            "2024/01/15 10:30:45.123456 [WRN] w",
            "2024/01/15 10:30:45.123456 [WRN] w2",
            "2024/01/15 10:30:45.123456 [ERR] e",
            "2024/01/15 10:30:45.123456 [CRT] c",
            "2024/01/15 10:30:45.123456 [CRT] f",
        ]

    def test_args_are_rendered(self, logger, stream):
        logger.error("failed", "reason", "disk full", "attempt", 3)
        assert stream.getvalue().endswith(' [ERR] failed: reason="disk full" attempt=3\n')

    def test_message_converted_to_str(self, logger, stream):
        logger.info(404)
        assert stream.getvalue().endswith(" [INF] 404\n")

    def test_set_level(self, logger, stream):
        logger.set_level("trace")
        logger.trace("now visible")
        assert "[TRC] now visible" in stream.getvalue()

    def test_off_silences_everything(self, logger, stream):
        logger.set_level(Level.OFF)
        logger.critical("nope")
        logger.log(Level.EMERGENCY, "nope")
        assert stream.getvalue() == ""

    def test_all_lets_everything_through(self, logger, stream):
        logger.set_level(Level.ALL)
        logger.log(Level.ALL, "everything")
        logger.log(500, "custom")

        lines = stream.getvalue().splitlines()
        assert lines[0].endswith("[ALL] everything")
        assert lines[1].endswith("[ALL] custom")

    def test_predicates(self, logger):
        assert logger.is_info()
        assert logger.is_warn()
        assert not logger.is_debug()
        assert not logger.is_trace()

        logger.set_level(Level.TRACE)
        assert logger.is_debug()
        assert logger.is_trace()

    def test_set_formatter(self, logger, stream):
        logger.set_formatter(VaultFormatter(Style.JSON))
        logger.info("m", "k", "v")

        data = json.loads(stream.getvalue())
        assert data["@level"] == "info"
        assert data["k"] == "v"

    def test_write_failure_does_not_raise(self, failing_writer, capsys):
        logger = new_vault_logger_with_writer(failing_writer, Level.INFO)

        logger.info("m")

        assert not logger.formatter.lock.locked()
        assert "Logging error" in capsys.readouterr().err

    def test_write_failure_silent_without_raise_exceptions(self, failing_writer, capsys, monkeypatch):
        monkeypatch.setattr(logging, "raiseExceptions", False)
        logger = new_vault_logger_with_writer(failing_writer, Level.INFO)

        logger.info("m")

        assert capsys.readouterr().err == ""

    def test_message_with_failing_str_does_not_raise(self, logger, stream, capsys):
        class Broken:
            def __str__(self):
                raise RuntimeError("str failed")

        logger.info(Broken())

        assert stream.getvalue() == ""
        assert "RuntimeError" in capsys.readouterr().err

    def test_arg_with_failing_str_is_rendered(self, logger, stream):
        class Broken:
            def __str__(self):
                raise RuntimeError("str failed")

        logger.info("m", "k", Broken())

        assert stream.getvalue().endswith(" [INF] m: k=<unserializable: Broken>\n")

    def test_non_finite_json_value_reported(self, stream, json_env, capsys):
        logger = new_vault_logger_with_writer(stream, Level.INFO)

        logger.info("m", "ratio", float("nan"))
        logger.info("after")

        err = capsys.readouterr().err
        assert "Logging error" in err
        assert "ValueError" in err
        lines = stream.getvalue().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["@message"] == "after"
        assert not logger.formatter.lock.locked()


class TestDeriveModuleLogger:
    """Tests for derive_module_logger."""

    @pytest.fixture
    def root(self, stream):
        return new_vault_logger_with_writer(stream, Level.DEBUG)

    def test_shares_writer_level_style_and_lock(self, root):
        child = derive_module_logger(root, "core")

        assert child is not root
        assert child.writer is root.writer
        assert child.level == root.level
        assert child.formatter.style is root.formatter.style
        assert child.formatter.lock is root.formatter.lock
        assert child.formatter.module == "core"

    def test_hierarchy(self, root, stream, frozen_now):
        core = derive_module_logger(root, "core")
        policy = derive_module_logger(core, "policy")
        audit = derive_module_logger(policy, "/audit")
        cleared = derive_module_logger(policy, "")

        root.info("root")
        core.info("core")
        policy.info("policy")
        audit.info("audit")
        cleared.info("cleared")

        assert stream.getvalue().splitlines() == [
            "2024/01/15 10:30:45.123456 [INF] root",
            "2024/01/15 10:30:45.123456 [INF] (core) core",
            "2024/01/15 10:30:45.123456 [INF] (core/policy) policy",
            "2024/01/15 10:30:45.123456 [INF] (audit) audit",
            "2024/01/15 10:30:45.123456 [INF] cleared",
        ]

    def test_parent_unchanged(self, root):
        core = derive_module_logger(root, "core")
        derive_module_logger(core, "policy")

        assert root.formatter.module == ""
        assert core.formatter.module == "core"

    def test_level_copied_not_linked(self, root):
        child = derive_module_logger(root, "core")
        root.set_level(Level.ERROR)

        assert child.level is Level.DEBUG

    def test_json_module(self, stream, json_env):
        root = new_vault_logger_with_writer(stream, Level.DEBUG)
        derive_module_logger(root, "core").debug("m", "k", "v")

        data = json.loads(stream.getvalue())
        assert data["@module"] == "core"
        assert data["@level"] == "debug"

    def test_with_module(self, root):
        assert root.with_module("core").with_module("policy").formatter.module == "core/policy"

    def test_rejects_stdlib_logger(self):
        with pytest.raises(UnsupportedLoggerError):
            derive_module_logger(logging.getLogger("other"), "core")

    def test_rejects_foreign_formatter(self, root):
        root.set_formatter(logging.Formatter())

        with pytest.raises(UnsupportedLoggerError) as exc_info:
            derive_module_logger(root, "core")

        assert isinstance(exc_info.value, TypeError)
