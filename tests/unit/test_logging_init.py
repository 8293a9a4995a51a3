from __future__ import annotations

import logging
from io import StringIO

from drawsheet.logging.init import (
    LOGGER_NAME,
    SUMMARY_LEVEL,
    LabeledFormatter,
    get_logger,
    log_summary,
    set_level,
    setup_logging,
)


def test_setup_logging_creates_logger_with_labeled_formatter():
    logger = setup_logging()
    assert logger.name == LOGGER_NAME
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, LabeledFormatter)
    assert logger.propagate is False


def test_setup_logging_is_idempotent():
    first = setup_logging()
    second = setup_logging(logging.DEBUG)
    assert first is second
    assert len(second.handlers) == 1
    assert get_logger() is first


def test_labeled_prefixes():
    stream = StringIO()
    logger = logging.getLogger("drawsheet_test_labels")
    logger.setLevel(logging.INFO)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    handler = logging.StreamHandler(stream)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    logger.info("info message")
    logger.warning("warning message")
    logger.error("error message")
    logger.log(SUMMARY_LEVEL, "files=1")

    lines = stream.getvalue().splitlines()
    assert lines == ["INFO info message", "WARN warning message", "ERROR error message", "SUMMARY files=1"]


def test_module_loggers_reach_application_handler(capsys):
    setup_logging()
    logging.getLogger("drawsheet.services.orchestrator").info("budget.xlsx detected")
    log_summary("files=0 success=0")
    out = capsys.readouterr().out
    assert "INFO budget.xlsx detected" in out
    assert "SUMMARY files=0 success=0" in out


def test_set_level_debug(capsys):
    setup_logging()
    logging.getLogger("drawsheet.services.row_range").debug("hidden")
    set_level(logging.DEBUG)
    logging.getLogger("drawsheet.services.row_range").debug("shown")
    out = capsys.readouterr().out
    assert "hidden" not in out
    assert "DEBUG shown" in out
    set_level("INFO")
    assert get_logger().level == logging.INFO
