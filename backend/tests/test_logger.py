"""
Tests for structured logging setup.

Requires Python 3.11+.
"""

import importlib
import json
import logging
from pathlib import Path

import pytest
import structlog

from utils.config import get_settings
from utils.logger import close_logging, configure_logging, get_logger

# utils/__init__ re-exports `logger`, shadowing the submodule attribute.
logger_module = importlib.import_module("utils.logger")


@pytest.fixture
def restore_logging():
    """Undo configure_logging() after the test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    close_logging()
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


def log_to_file(monkeypatch: pytest.MonkeyPatch, path: Path, fmt: str = "json") -> None:
    monkeypatch.setenv("LOG_FORMAT", fmt)
    monkeypatch.setenv("LOG_FILE_PATH", str(path))
    get_settings.cache_clear()


class TestConfigureLogging:
    """Test cases for configure_logging."""

    def test_json_lines_written_to_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, restore_logging
    ):
        log_path = tmp_path / "logs" / "hashwatch.jsonl"
        log_to_file(monkeypatch, log_path)

        configure_logging()
        get_logger("test").warning("hello", key=1)
        close_logging()

        entry = json.loads(log_path.read_text().splitlines()[-1])
        assert entry["event"] == "hello"
        assert entry["level"] == "warning"
        assert entry["app"] == "hashwatch"
        assert entry["key"] == 1

    def test_level_filters_file_output(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, restore_logging
    ):
        log_path = tmp_path / "hashwatch.jsonl"
        log_to_file(monkeypatch, log_path)

        configure_logging(level="error")
        log = get_logger("test")
        log.warning("dropped")
        log.error("kept")
        close_logging()

        events = [json.loads(line)["event"] for line in log_path.read_text().splitlines()]
        assert events == ["kept"]

    def test_close_logging_closes_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, restore_logging
    ):
        log_to_file(monkeypatch, tmp_path / "hashwatch.log", fmt="console")

        configure_logging()
        opened = logger_module._log_file
        close_logging()

        assert opened is not None and opened.closed
        assert logger_module._log_file is None

    def test_reconfigure_closes_previous_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, restore_logging
    ):
        log_to_file(monkeypatch, tmp_path / "first.log")
        configure_logging()
        first = logger_module._log_file

        log_to_file(monkeypatch, tmp_path / "second.log")
        configure_logging()

        assert first is not None and first.closed
        assert logger_module._log_file is not None
        assert not logger_module._log_file.closed

    def test_unknown_level_rejected(self, restore_logging):
        with pytest.raises(ValueError, match="unknown log level"):
            configure_logging(level="verbose")

        assert logger_module._log_file is None
