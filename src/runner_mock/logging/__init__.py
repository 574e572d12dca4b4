"""Service logging - console and request-log configuration."""

from .logger import (
    REQUEST_LOGGER,
    ROOT_LOGGER,
    ColoredFormatter,
    LineFormatter,
    RequestLogger,
    StructuredLogFormatter,
    configure_logging,
    escape_control,
    to_logging_level,
)

__all__ = [
    "ROOT_LOGGER",
    "REQUEST_LOGGER",
    "ColoredFormatter",
    "LineFormatter",
    "StructuredLogFormatter",
    "RequestLogger",
    "configure_logging",
    "escape_control",
    "to_logging_level",
]
