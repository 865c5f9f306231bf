"""Tests for structured logging functionality."""

from __future__ import annotations

import json
import logging
import logging.handlers
import sys

import pytest

from habitat.logging_config import JSONFormatter, get_logger, setup_logging


def _record(**kwargs) -> logging.LogRecord:
    fields = {
        "name": "habitat.test",
        "level": logging.INFO,
        "pathname": "test.py",
        "lineno": 42,
        "msg": "Test message",
        "args": (),
        "exc_info": None,
    }
    fields.update(kwargs)
    record = logging.LogRecord(**fields)
    record.module = "test_module"
    record.funcName = "test_function"
    return record


@pytest.fixture
def habitat_logger():
    yield
    root = logging.getLogger("habitat")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


def test_json_formatter():
    """JSONFormatter emits the standard keys."""
    log_data = json.loads(JSONFormatter().format(_record()))

    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "habitat.test"
    assert log_data["message"] == "Test message"
    assert log_data["module"] == "test_module"
    assert log_data["function"] == "test_function"
    assert log_data["line"] == 42
    assert "timestamp" in log_data
    assert "extra" not in log_data


def test_json_formatter_with_exception():
    """Exceptions are serialised with type, message and traceback."""
    try:
        raise ValueError("Test error")
    except ValueError:
        exc_info = sys.exc_info()

    log_data = json.loads(
        JSONFormatter().format(_record(level=logging.ERROR, msg="Error occurred", exc_info=exc_info))
    )

    assert log_data["exception"]["type"] == "ValueError"
    assert "Test error" in log_data["exception"]["message"]
    assert "Traceback" in log_data["exception"]["traceback"]


def test_json_formatter_collects_extra_fields():
    record = _record()
    record.request_type = "GET_HABITS"
    record.elapsed_ms = 3

    log_data = json.loads(JSONFormatter().format(record))

    assert log_data["extra"] == {"request_type": "GET_HABITS", "elapsed_ms": 3}


def test_setup_logging(config, habitat_logger):
    """Logging setup creates a JSON log file under the data directory."""
    logger = setup_logging(config)

    assert logger.name == "habitat"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 2

    log_file = config.DATA_DIR / "logs" / "habitat.log"
    assert log_file.exists()

    logger.warning("Test warning message")
    for handler in logger.handlers:
        handler.flush()

    lines = [line for line in log_file.read_text(encoding="utf-8").splitlines() if line.strip()]
    entries = [json.loads(line) for line in lines]
    assert entries[0]["message"] == "Logging initialized"
    assert entries[0]["extra"]["dev_mode"] is False
    assert entries[-1]["message"] == "Test warning message"


def test_setup_logging_replaces_handlers(config, habitat_logger):
    setup_logging(config)
    logger = setup_logging(config)
    assert len(logger.handlers) == 2


def test_get_logger():
    """get_logger namespaces short names under ``habitat``."""
    assert get_logger("gate").name == "habitat.gate"
    assert get_logger("habitat.store").name == "habitat.store"
    assert get_logger("habitat").name == "habitat"


@pytest.mark.parametrize("dev_mode", [True, False])
def test_logging_levels_by_mode(config, habitat_logger, dev_mode):
    """Console logging level adjusts based on dev mode."""
    config.DEV_MODE = dev_mode

    logger = setup_logging(config)

    console_handler = next(
        handler
        for handler in logger.handlers
        if not isinstance(handler, logging.handlers.RotatingFileHandler)
    )
    assert console_handler.level == (logging.INFO if dev_mode else logging.WARNING)
    assert logger.level == (logging.DEBUG if dev_mode else logging.INFO)
