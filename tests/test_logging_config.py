"""
Tests for logging setup.
"""

import logging

import pytest

from pipsync.infrastructure.logging_config import ColoredFormatter, setup_logging


@pytest.fixture(autouse=True)
def reset_root_logger():
    yield
    for handler in logging.getLogger().handlers:
        handler.close()
    logging.getLogger().handlers.clear()


def test_log_file_receives_debug(tmp_path):
    log_file = tmp_path / "logs" / "pipsync.log"
    setup_logging("warning", str(log_file))

    logging.getLogger("pipsync.test").debug("detail message")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert "detail message" in log_file.read_text(encoding="utf-8")


def test_console_level_from_name():
    setup_logging("warning")

    console_handler = logging.getLogger().handlers[0]
    assert console_handler.level == logging.WARNING


def test_colored_formatter_restores_record():
    formatter = ColoredFormatter("%(levelname)s %(name)s %(message)s", use_colors=True)
    record = logging.LogRecord("pipsync", logging.ERROR, __file__, 1, "boom", None, None)

    output = formatter.format(record)

    assert "boom" in output
    assert "\033[" in output
    assert record.levelname == "ERROR"
    assert record.name == "pipsync"
