"""Tests for logger setup and JSON lines formatting."""

import json
import logging
import sys
from pathlib import Path

from rego_loader.constants import LOGGER_NAMESPACE
from rego_loader.utils.logging import JsonLinesFormatter, get_logger, setup_logger


def _record(msg, level=logging.INFO, exc_info=None) -> logging.LogRecord:
    return logging.LogRecord("rego-loader.test", level, __file__, 1, msg, None, exc_info)


class TestJsonLinesFormatter:
    """Tests for JsonLinesFormatter."""

    def test_dict_payload_is_merged(self):
        """Dict messages become top-level fields."""
        line = JsonLinesFormatter().format(_record({"event": "rego_files_loaded", "count": 2}))

        data = json.loads(line)
        assert data["event"] == "rego_files_loaded"
        assert data["count"] == 2
        assert data["level"] == "INFO"
        assert data["time"].endswith("+00:00")

    def test_string_payload_goes_under_message(self):
        """Plain strings are stored under "message"."""
        data = json.loads(JsonLinesFormatter().format(_record("hello", level=logging.WARNING)))

        assert data["message"] == "hello"
        assert data["level"] == "WARNING"

    def test_exception_is_included(self):
        """Exception info is rendered as a stacktrace field."""
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = _record({"event": "failed"}, level=logging.ERROR, exc_info=sys.exc_info())

        data = json.loads(JsonLinesFormatter().format(record))

        assert "RuntimeError: boom" in data["stacktrace"]


class TestSetupLogger:
    """Tests for setup_logger()."""

    def test_writes_json_lines_to_file(self, tmp_path: Path):
        """Records below the level are dropped; the rest are JSON lines."""
        log_file = tmp_path / "logs" / "rego-loader.jsonl"
        setup_logger("INFO", log_file)

        logger = get_logger("loader")
        logger.debug({"event": "hidden"})
        logger.info({"event": "shown"})
        for handler in logging.getLogger(LOGGER_NAMESPACE).handlers:
            handler.flush()

        lines = log_file.read_text().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["event"] == "shown"

    def test_repeated_setup_does_not_duplicate_handlers(self, tmp_path: Path):
        """Calling setup twice leaves a single handler."""
        setup_logger("INFO", tmp_path / "a.jsonl")
        logger = setup_logger("INFO", tmp_path / "b.jsonl")

        assert len(logger.handlers) == 1
        assert logger.propagate is False

    def test_area_loggers_are_children(self):
        """get_logger() names loggers under the package namespace."""
        assert get_logger("collect").name == f"{LOGGER_NAMESPACE}.collect"
