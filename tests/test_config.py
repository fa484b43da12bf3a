"""Tests for settings and logging setup."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError
from rich.logging import RichHandler

from pkgtrust.config import DEFAULT_LINT_COMMAND, DEFAULT_METRIC_TIMEOUT, Settings
from pkgtrust.log import LOGGER_NAME, clear_log, configure_logging


class TestSettingsFromEnv:
    def test_defaults(self):
        settings = Settings.from_env({})
        assert settings.github_token is None
        assert settings.log_file is None
        assert settings.log_level == 0
        assert settings.metric_timeout == DEFAULT_METRIC_TIMEOUT
        assert settings.lint_command == DEFAULT_LINT_COMMAND

    def test_reads_values(self, tmp_path: Path):
        settings = Settings.from_env(
            {
                "GITHUB_TOKEN": " ghp_abc ",
                "LOG_FILE": str(tmp_path / "run.log"),
                "LOG_LEVEL": "2",
                "PKGTRUST_METRIC_TIMEOUT": "15",
                "PKGTRUST_LINT_COMMAND": "npx eslint --format json",
            }
        )
        assert settings.github_token == "ghp_abc"
        assert settings.log_file == tmp_path / "run.log"
        assert settings.log_level == 2
        assert settings.metric_timeout == 15.0
        assert settings.lint_command == ("npx", "eslint", "--format", "json")

    def test_blank_token_is_none(self):
        assert Settings.from_env({"GITHUB_TOKEN": "  "}).github_token is None

    @pytest.mark.parametrize(("raw", "expected"), [("0", 0), ("1", 1), ("2", 2), ("3", 0), ("-1", 0), ("debug", 0)])
    def test_log_level(self, raw, expected):
        assert Settings.from_env({"LOG_LEVEL": raw}).log_level == expected

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("0", None), ("-5", None), ("2.5", 2.5), ("", DEFAULT_METRIC_TIMEOUT), ("soon", DEFAULT_METRIC_TIMEOUT)],
    )
    def test_metric_timeout(self, raw, expected):
        assert Settings.from_env({"PKGTRUST_METRIC_TIMEOUT": raw}).metric_timeout == expected

    def test_frozen(self):
        settings = Settings()
        with pytest.raises(ValidationError):
            settings.github_token = "changed"


class TestConfigureLogging:
    def test_silent_level(self, tmp_path: Path):
        log_file = tmp_path / "run.log"
        logger = configure_logging(Settings(log_file=log_file, log_level=0))

        logging.getLogger("pkgtrust.analyzers.scorer").critical("hidden")

        assert not logger.isEnabledFor(logging.CRITICAL)
        assert not log_file.exists()

    def test_info_to_file(self, tmp_path: Path):
        log_file = tmp_path / "run.log"
        configure_logging(Settings(log_file=log_file, log_level=1))

        child = logging.getLogger("pkgtrust.metrics.license")
        child.info("license checked")
        child.debug("debug detail")

        content = log_file.read_text()
        assert "license checked" in content
        assert "[INFO] pkgtrust.metrics.license" in content
        assert "debug detail" not in content

    def test_debug_level(self, tmp_path: Path):
        log_file = tmp_path / "run.log"
        configure_logging(Settings(log_file=log_file, log_level=2))
        logging.getLogger("pkgtrust").debug("debug detail")
        assert "debug detail" in log_file.read_text()

    def test_appends_by_default(self, tmp_path: Path):
        log_file = tmp_path / "run.log"
        log_file.write_text("previous run\n")
        configure_logging(Settings(log_file=log_file, log_level=1))
        logging.getLogger("pkgtrust").info("this run")

        content = log_file.read_text()
        assert content.startswith("previous run\n")
        assert "this run" in content

    def test_clear_truncates(self, tmp_path: Path):
        log_file = tmp_path / "run.log"
        log_file.write_text("previous run\n")
        configure_logging(Settings(log_file=log_file, log_level=1), clear=True)
        logging.getLogger("pkgtrust").info("this run")

        content = log_file.read_text()
        assert "previous run" not in content
        assert "this run" in content

    def test_stderr_without_file(self):
        logger = configure_logging(Settings(log_level=1))
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RichHandler)

    def test_reconfigure_replaces_handlers(self, tmp_path: Path):
        configure_logging(Settings(log_level=1))
        logger = configure_logging(Settings(log_file=tmp_path / "run.log", log_level=1))
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], logging.FileHandler)
        assert logger.name == LOGGER_NAME


class TestClearLog:
    def test_no_file_configured(self):
        assert clear_log(Settings()) is False

    def test_missing_file(self, tmp_path: Path):
        assert clear_log(Settings(log_file=tmp_path / "absent.log")) is False

    def test_truncates(self, tmp_path: Path):
        log_file = tmp_path / "run.log"
        log_file.write_text("old")
        assert clear_log(Settings(log_file=log_file)) is True
        assert log_file.read_text() == ""
