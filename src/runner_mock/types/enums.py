"""Shared enumerations for the mock service."""

from enum import Enum


class LogLevel(str, Enum):
    """Log verbosity level."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


class LogFormat(str, Enum):
    """Console log output format."""

    COLORED = "colored"
    JSON = "json"
    TEXT = "text"


class RunnerStatus(str, Enum):
    """Status reported for a registered runner."""

    ONLINE = "online"
