"""Unit tests for propspy.logging."""

import logging
from logging.handlers import MemoryHandler

import pytest
from rich.logging import RichHandler

from propspy import config
from propspy import logging as propspy_logging

# pylint: disable=magic-value-comparison


def _record(name: str) -> logging.LogRecord:
    return logging.LogRecord(name, logging.INFO, __file__, 1, "msg", None, None)


class TestConsoleHandler:
    """Tests for config_console_handler."""

    @staticmethod
    def test_default_handler():
        """The default handler is a RichHandler printing the bare message."""
        handler = propspy_logging.config_console_handler(level=logging.INFO)
        assert isinstance(handler, RichHandler)
        assert handler.level == logging.INFO
        assert handler.formatter.format(_record("propspy.service_layer")) == "msg"

    @staticmethod
    def test_debug_mode_forces_debug_level():
        """Debug mode lowers the level to DEBUG and names the logger."""
        handler = propspy_logging.config_console_handler(
            level=logging.ERROR, debug_mode=True, color=False
        )
        assert handler.level == logging.DEBUG
        formatted = handler.formatter.format(_record("propspy.service_layer"))
        assert formatted.endswith("propspy.service_layer: msg")


class TestFlightRecorder:
    """Tests for config_flight_recorder."""

    @staticmethod
    def test_flushes_on_warning(tmp_path):
        """Buffered records reach the file once a warning is logged."""
        path = tmp_path / "harness.log"
        recorder = propspy_logging.config_flight_recorder(path)
        assert isinstance(recorder, MemoryHandler)

        logger = logging.getLogger("propspy.test.flight")
        logger.propagate = False
        logger.setLevel(logging.DEBUG)
        logger.addHandler(recorder)
        try:
            logger.debug("wrapped something")
            assert "wrapped something" not in path.read_text(encoding="utf-8")
            logger.warning("left something wrapped")
            content = path.read_text(encoding="utf-8")
            assert "wrapped something" in content
            assert "left something wrapped" in content
        finally:
            logger.removeHandler(recorder)
            logger.propagate = True
            propspy_logging.detach_handlers([recorder])


class TestAttachDetach:
    """Tests for attach_handlers and detach_handlers."""

    @staticmethod
    def test_round_trip():
        """Handlers are added to and removed from the project logger."""
        handler = logging.NullHandler()
        project_logger = propspy_logging.attach_handlers([handler])
        try:
            assert project_logger.name == "propspy"
            assert handler in project_logger.handlers
            assert project_logger.level == logging.DEBUG
        finally:
            propspy_logging.detach_handlers([handler])
        assert handler not in project_logger.handlers
        assert project_logger.level == logging.NOTSET


def test_log_startup(caplog):
    """Startup logs a summary line and diagnostics."""
    logger = logging.getLogger("propspy.test.startup")
    with caplog.at_level("DEBUG"):
        propspy_logging.log_startup(
            logger,
            app_version="9.9.9",
            handlers=[logging.NullHandler()],
            log_path=None,
            leak_policy=config.LeakPolicy.ERROR,
        )
    messages = [rec.getMessage() for rec in caplog.records]
    assert "PROPSPY 9.9.9 - leak-policy=error, flight-recorder=OFF" in messages
    assert "Handlers: ['NullHandler']" in messages
    assert any(m.startswith("pytest: ") for m in messages)


@pytest.fixture(autouse=True)
def _reset_project_logger():
    yield
    logging.getLogger("propspy").setLevel(logging.NOTSET)
