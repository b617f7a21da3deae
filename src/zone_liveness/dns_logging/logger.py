"""
Structured Logging Framework

This module provides the core logging infrastructure using structlog, with a
human-readable or JSON console output and an optional rotating JSON log file.
"""

import logging
import logging.handlers
import sys
import traceback
from pathlib import Path
from typing import List, Optional

import structlog

from ..config.schema import LoggingConfig


class StructuredLogger:
    """Structured logger using structlog over the standard logging module."""

    def __init__(self, config: LoggingConfig, stream=None):
        """Initialize structured logger.

        Args:
            config: Logging configuration
            stream: Console stream, defaults to stderr
        """
        self.config = config
        self.stream = stream
        self._configured = False
        self.logger = None
        self.file_handler: Optional[logging.Handler] = None

    def _shared_processors(self) -> List:
        return [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
        ]

    def _get_renderer(self):
        if self.config.format == "json":
            return structlog.processors.JSONRenderer()
        return structlog.dev.ConsoleRenderer(colors=False)

    def _console_processors(self) -> List:
        """Processors run by the console handler formatter."""
        processors = [structlog.stdlib.ProcessorFormatter.remove_processors_meta]
        if self.config.format == "json":
            processors.append(structlog.processors.format_exc_info)
        processors.append(self._get_renderer())
        return processors

    def _get_processors(self) -> List:
        """Processors run on the structlog side before handing off to logging."""
        return self._shared_processors() + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ]

    def configure(self) -> None:
        """Configure structlog and the root logger handlers."""
        if self._configured:
            return

        log_level = getattr(logging, self.config.level.upper())

        root_logger = logging.getLogger()
        root_logger.handlers.clear()
        root_logger.setLevel(log_level)

        console_handler = logging.StreamHandler(self.stream or sys.stderr)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processors=self._console_processors(),
                foreign_pre_chain=self._shared_processors(),
            )
        )
        root_logger.addHandler(console_handler)

        if self.config.file:
            self._setup_file_logging(root_logger, log_level)

        structlog.configure(
            processors=self._get_processors(),
            wrapper_class=structlog.stdlib.BoundLogger,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=False,
        )

        self._configured = True
        self.logger = structlog.get_logger("zone_liveness")

    def _setup_file_logging(self, root_logger: logging.Logger, log_level: int) -> None:
        """Attach a rotating JSON file handler to the root logger."""
        log_path = Path(self.config.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            filename=self.config.file,
            maxBytes=self.config.max_size_mb * 1024 * 1024,
            backupCount=self.config.backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processors=[
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    structlog.processors.format_exc_info,
                    structlog.processors.JSONRenderer(),
                ],
                foreign_pre_chain=self._shared_processors(),
            )
        )
        root_logger.addHandler(file_handler)
        self.file_handler = file_handler

    def get_logger(self, name: str = "zone_liveness") -> structlog.stdlib.BoundLogger:
        """Get a structured logger instance.

        Args:
            name: Logger name

        Returns:
            Structured logger instance
        """
        if not self._configured:
            self.configure()

        return structlog.get_logger(name)


# Global logger instance
_logger_instance: Optional[StructuredLogger] = None


def setup_logging(config: LoggingConfig, stream=None) -> StructuredLogger:
    """Setup global logging configuration.

    Args:
        config: Logging configuration
        stream: Console stream, defaults to stderr
    """
    global _logger_instance
    _logger_instance = StructuredLogger(config, stream=stream)
    _logger_instance.configure()
    return _logger_instance


def get_logger(name: str = "zone_liveness") -> structlog.stdlib.BoundLogger:
    """Get a logger instance.

    Args:
        name: Logger name

    Returns:
        Structured logger instance

    Raises:
        RuntimeError: If logging hasn't been configured
    """
    if _logger_instance is None:
        raise RuntimeError("Logging not configured. Call setup_logging() first.")

    return _logger_instance.get_logger(name)


def log_exception(logger, message: str, exc: Optional[BaseException] = None) -> None:
    """Log an exception with detailed traceback information.

    Args:
        logger: Logger instance
        message: Log message
        exc: Exception instance (optional, will use current exception if None)
    """
    if exc is None:
        exc = sys.exc_info()[1]

    if exc is None:
        logger.error(message)
        return

    tb_str = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    logger.error(
        message,
        exception_type=type(exc).__name__,
        exception_message=str(exc),
        traceback=tb_str,
    )
