"""Shared types.

Import from here rather than submodules:
    from runner_mock.types import LogLevel, ValidationResult
"""

from .enums import LogFormat, LogLevel, RunnerStatus
from .validation import ValidationIssue, ValidationResult

__all__ = [
    # Enums
    "LogLevel",
    "LogFormat",
    "RunnerStatus",
    # Validation
    "ValidationIssue",
    "ValidationResult",
]
