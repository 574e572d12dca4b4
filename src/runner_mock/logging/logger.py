"""Service logging.

Console output is colored text or JSON lines; the optional request log file
always gets plain timestamped, leveled lines such as::

    2026-10-17T12:00:00Z [INFO] GET /health -> 200 (87 bytes)

Usage:
    from runner_mock.logging import configure_logging, RequestLogger

    configure_logging(config.logging)
    RequestLogger().request("GET", "/health", 200, 87)
"""

import json
import logging
import re
import sys
import time
from datetime import datetime, timezone
from typing import Any, TextIO

from runner_mock.config.models import LoggingConfig
from runner_mock.types import LogFormat, LogLevel

from .colors import LEVEL_COLORS, MAGENTA, RESET

ROOT_LOGGER = "runner_mock"
REQUEST_LOGGER = "runner_mock.requests"

# Marks handlers installed by configure_logging so reconfiguring replaces them
_HANDLER_TAG = "_runner_mock_handler"

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")

_LEVELS = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}

_RESERVED_ATTRS = frozenset(
    (
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "pathname", "process", "processName", "relativeCreated",
        "stack_info", "exc_info", "exc_text", "thread", "threadName",
        "message", "taskName",
    )
)


def to_logging_level(level: LogLevel) -> int:
    """Map a config LogLevel to a stdlib logging level."""
    return _LEVELS.get(level, logging.INFO)


def escape_control(text: str) -> str:
    """Replace control characters with \\xNN escapes so one record stays one line."""
    return _CONTROL_CHARS.sub(lambda m: f"\\x{ord(m.group()):02x}", text)


class LineFormatter(logging.Formatter):
    """Timestamped, leveled single-line formatter (UTC)."""

    converter = time.gmtime

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s [%(levelname)s] %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%SZ",
        )


class ColoredFormatter(LineFormatter):
    """LineFormatter with the level and component colored for terminals."""

    def format(self, record: logging.LogRecord) -> str:
        color = LEVEL_COLORS.get(record.levelname, RESET)
        timestamp = self.formatTime(record, self.datefmt)
        component = record.name.rsplit(".", 1)[-1]
        line = (
            f"{timestamp} {color}[{record.levelname}]{RESET} "
            f"{MAGENTA}{component}{RESET} {record.getMessage()}"
        )
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class StructuredLogFormatter(logging.Formatter):
    """JSON formatter.

    Formats log records as JSON with:
    - timestamp (ISO 8601)
    - level
    - component (logger name)
    - message
    - Additional fields from extra
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc)
            .isoformat()
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "component": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def _console_formatter(log_format: LogFormat) -> logging.Formatter:
    if log_format == LogFormat.JSON:
        return StructuredLogFormatter()
    if log_format == LogFormat.TEXT:
        return LineFormatter()
    return ColoredFormatter()


def configure_logging(config: LoggingConfig, stream: TextIO | None = None) -> logging.Logger:
    """Apply logging configuration to the package logger.

    Replaces handlers from a previous call, so it is safe to call again
    when configuration changes.

    Args:
        config: Logging configuration
        stream: Console stream (default: sys.stderr)

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(ROOT_LOGGER)
    level = to_logging_level(config.level)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            logger.removeHandler(handler)
            handler.close()

    console = logging.StreamHandler(stream or sys.stderr)
    console.setFormatter(_console_formatter(config.format))
    setattr(console, _HANDLER_TAG, True)
    logger.addHandler(console)

    if config.file:
        file_handler = logging.FileHandler(config.file, mode="a", encoding="utf-8")
        file_handler.setFormatter(LineFormatter())
        setattr(file_handler, _HANDLER_TAG, True)
        logger.addHandler(file_handler)

    return logger


class RequestLogger:
    """Writes exactly one line per handled request.

    The level follows the outcome: 401 and 422 log at WARNING, 5xx at
    ERROR, everything else (including 404) at INFO.
    """

    def __init__(self, logger: logging.Logger | None = None):
        self._logger = logger or logging.getLogger(REQUEST_LOGGER)

    @staticmethod
    def level_for(status_code: int) -> int:
        """Return the log level used for a response status."""
        if status_code >= 500:
            return logging.ERROR
        if status_code in (401, 403, 422):
            return logging.WARNING
        return logging.INFO

    def request(
        self,
        method: str,
        path: str,
        status_code: int,
        length: int,
        duration_ms: float | None = None,
        error: str | None = None,
    ) -> None:
        """Log a handled request.

        Args:
            method: HTTP method
            path: Request path
            status_code: Response status
            length: Response body length in bytes
            duration_ms: Optional handling time
            error: Optional error message for failed requests
        """
        path = escape_control(path)
        message = f"{method} {path} -> {status_code} ({length} bytes)"
        if error:
            message += f": {escape_control(error)}"

        extra: dict[str, Any] = {
            "method": method,
            "path": path,
            "status_code": status_code,
            "length": length,
        }
        if duration_ms is not None:
            extra["duration_ms"] = round(duration_ms, 2)

        self._logger.log(self.level_for(status_code), message, extra=extra)
