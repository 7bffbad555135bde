"""Tests for logging configuration."""

import json
import logging
import sys

from aliasscan.utils.logging_setup import (
    ConsoleFormatter,
    JSONFormatter,
    get_logger,
    log_operation,
    setup_logging,
)


class TestSetupLogging:
    """Test handler configuration."""

    def test_console_handler(self):
        logger = setup_logging("aliasscan", level="INFO")
        assert logger.level == logging.INFO
        assert logger.propagate is False
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], logging.StreamHandler)

    def test_repeated_setup_replaces_handlers(self):
        setup_logging("aliasscan")
        logger = setup_logging("aliasscan")
        assert len(logger.handlers) == 1

    def test_no_outputs_gets_null_handler(self):
        logger = setup_logging("aliasscan", console=False)
        assert [type(h) for h in logger.handlers] == [logging.NullHandler]

    def test_json_file_log(self, tmp_path):
        log_file = tmp_path / "logs" / "scan.log"
        logger = setup_logging("aliasscan", level="DEBUG", log_file=log_file, console=False)
        log_operation(get_logger("aliasscan.core.walker"), "scan", target="pkg:obj")
        for handler in logger.handlers:
            handler.flush()

        record = json.loads(log_file.read_text().splitlines()[0])
        assert record["level"] == "DEBUG"
        assert record["operation"] == "scan"
        assert record["target"] == "pkg:obj"
        assert record["message"] == "Starting operation: scan"
        for handler in logger.handlers:
            handler.close()

    def test_file_records_debug_while_console_stays_quiet(self, tmp_path):
        logger = setup_logging("aliasscan", level="WARNING", log_file=tmp_path / "scan.log")
        console_handler, file_handler = logger.handlers
        assert logger.level == logging.DEBUG
        assert console_handler.level == logging.WARNING
        assert file_handler.level == logging.DEBUG


class TestConsoleFormatter:
    """Test level coloring."""

    def test_colors_a_copy(self):
        record = logging.makeLogRecord({"name": "aliasscan", "levelname": "ERROR", "msg": "bad"})
        text = ConsoleFormatter(use_color=True).format(record)
        assert "\033[31mERROR" in text
        assert record.levelname == "ERROR"

    def test_plain_without_color(self):
        record = logging.makeLogRecord({"name": "aliasscan", "levelname": "ERROR", "msg": "bad"})
        assert "[aliasscan] - bad" in ConsoleFormatter(use_color=False).format(record)


class TestJSONFormatter:
    """Test structured records."""

    def test_exception_included(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.getLogger("x").makeRecord(
                "x", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
            )
        data = json.loads(JSONFormatter().format(record))
        assert data["message"] == "failed"
        assert "RuntimeError: boom" in data["exception"]
