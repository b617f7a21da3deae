"""
Tests for the structured logging setup

Covers console and JSON rendering, the rotating JSON log file and the
global logger accessors.
"""

import io
import json

import pytest
import structlog

from zone_liveness.config.schema import LoggingConfig
from zone_liveness.dns_logging import (
    StructuredLogger,
    get_logger,
    log_exception,
    setup_logging,
)


def read_json_lines(path):
    return [json.loads(line) for line in path.read_text().splitlines() if line.strip()]


class TestStructuredLogger:
    """Test structured logging framework."""

    def test_structured_logger_creation(self):
        config = LoggingConfig(level="INFO")

        logger = StructuredLogger(config)

        assert logger.config == config
        assert not logger._configured

    def test_structured_logger_configuration(self):
        logger = StructuredLogger(LoggingConfig(level="DEBUG"), stream=io.StringIO())
        logger.configure()

        assert logger._configured
        assert logger.logger is not None
        assert logger.file_handler is None

    def test_json_console_format(self):
        stream = io.StringIO()
        logger = StructuredLogger(LoggingConfig(format="json"), stream=stream)

        logger.get_logger("test").info("record created", zone="example.com")

        entry = json.loads(stream.getvalue().strip().splitlines()[-1])
        assert entry["event"] == "record created"
        assert entry["zone"] == "example.com"
        assert entry["level"] == "info"

    def test_console_renderer_for_console_format(self):
        logger = StructuredLogger(LoggingConfig(format="console"))

        processors = logger._console_processors()

        assert any(isinstance(p, structlog.dev.ConsoleRenderer) for p in processors)

    def test_level_filtering(self):
        stream = io.StringIO()
        logger = StructuredLogger(LoggingConfig(level="WARNING"), stream=stream)

        log = logger.get_logger("test")
        log.info("hidden")
        log.warning("shown")

        output = stream.getvalue()
        assert "hidden" not in output
        assert "shown" in output

    def test_file_logging(self, tmp_path):
        log_file = tmp_path / "logs" / "liveness.log"
        config = LoggingConfig(level="INFO", file=str(log_file))

        logger = StructuredLogger(config, stream=io.StringIO())
        logger.get_logger("test").warning("could not get record", attempt=3)
        logger.file_handler.flush()

        entries = read_json_lines(log_file)
        assert entries[-1]["event"] == "could not get record"
        assert entries[-1]["attempt"] == 3
        assert entries[-1]["logger"] == "test"


class TestGlobalLogger:
    """Test the module-level accessors."""

    def test_get_logger_requires_setup(self):
        with pytest.raises(RuntimeError, match="Logging not configured"):
            get_logger("zone_liveness")

    def test_setup_then_get_logger(self):
        stream = io.StringIO()
        setup_logging(LoggingConfig(format="json"), stream=stream)

        get_logger("zone_liveness.test").info("ready")

        assert json.loads(stream.getvalue().splitlines()[-1])["event"] == "ready"

    def test_log_exception(self):
        stream = io.StringIO()
        setup_logging(LoggingConfig(format="json"), stream=stream)
        logger = get_logger("zone_liveness.test")

        try:
            raise ValueError("bad zone")
        except ValueError as e:
            log_exception(logger, "check failed", e)

        entry = json.loads(stream.getvalue().splitlines()[-1])
        assert entry["event"] == "check failed"
        assert entry["exception_type"] == "ValueError"
        assert entry["exception_message"] == "bad zone"
        assert "Traceback" in entry["traceback"]

    def test_log_exception_without_exception(self):
        stream = io.StringIO()
        setup_logging(LoggingConfig(format="json"), stream=stream)

        log_exception(get_logger("zone_liveness.test"), "nothing raised")

        entry = json.loads(stream.getvalue().splitlines()[-1])
        assert entry["event"] == "nothing raised"
        assert "exception_type" not in entry
