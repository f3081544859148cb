# tests/test_logging.py
"""Tests for logger configuration and structured crawl output."""
import json
import logging

from guideline_scraper.utils.config import LoggingConfig
from guideline_scraper.utils.logging import (
    LoggerFactory,
    StructuredLogFormatter,
    log_with_context,
)


def make_record(msg="Letter A: 2 guidelines saved", context=None):
    record = logging.LogRecord("guideline_scraper", logging.INFO, "", 0, msg, (), None)
    if context is not None:
        record.crawl = context
    return record


class TestStructuredLogFormatter:
    def test_writes_crawl_context_fields(self):
        record = make_record(context={"letter": "A", "found": 3, "saved": 2, "session": "x"})

        entry = json.loads(StructuredLogFormatter().format(record))

        assert entry["message"] == "Letter A: 2 guidelines saved"
        assert entry["level"] == "INFO"
        assert (entry["letter"], entry["found"], entry["saved"]) == ("A", 3, 2)
        assert "session" not in entry

    def test_plain_message_has_no_context(self):
        entry = json.loads(StructuredLogFormatter().format(make_record("Saved guideline!")))

        assert set(entry) == {"time", "level", "message"}


class TestLoggerFactory:
    def test_verbose_selects_debug(self):
        logger = LoggerFactory.create_logger(LoggingConfig(verbose=True, file=None))

        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_quiet_selects_info(self):
        logger = LoggerFactory.create_logger(LoggingConfig(verbose=False, file=None))

        assert logger.level == logging.INFO

    def test_reconfiguring_replaces_handlers(self):
        LoggerFactory.create_logger(LoggingConfig(file=None))
        logger = LoggerFactory.create_logger(LoggingConfig(file=None))

        assert len(logger.handlers) == 1

    def test_structured_file_output(self, tmp_path):
        config = LoggingConfig(structured=True, file="crawl.log", dir=str(tmp_path / "logs"))
        logger = LoggerFactory.create_logger(config, console_output=False)

        log_with_context(logger, logging.INFO, "Letter B: 1 guidelines saved",
                         {"letter": "B", "found": 4, "saved": 1})
        for handler in logger.handlers:
            handler.flush()

        lines = (tmp_path / "logs" / "crawl.log").read_text(encoding="utf-8").splitlines()
        entry = json.loads(lines[-1])
        assert entry["letter"] == "B"
        assert entry["saved"] == 1
