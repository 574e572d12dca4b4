"""Error types for the mock service."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Error source categories."""

    AUTH = "AUTH"
    ROUTING = "ROUTING"
    VALIDATION = "VALIDATION"
    CONFIG = "CONFIG"
    SYSTEM = "SYSTEM"


@dataclass
class MockServiceError(Exception):
    """Structured error with context. Base exception for all service errors."""

    # Identity
    code: str  # e.g., "BIND_FAILED"
    category: ErrorCategory

    # Messages
    message: str
    detail: str | None = None
    suggestion: str | None = None

    # For HTTP responses
    http_status: int = 500

    cause: BaseException | None = None

    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Set Exception message."""
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message}: {self.detail}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logs and CLI output.

        Returns:
            Dictionary representation of the error
        """
        return {
            "code": self.code,
            "category": self.category.value,
            "message": self.message,
            "detail": self.detail,
            "suggestion": self.suggestion,
            "timestamp": self.timestamp.isoformat(),
            "cause": repr(self.cause) if self.cause else None,
        }


@dataclass
class ErrorTemplate:
    """Template for creating errors."""

    code: str
    category: ErrorCategory
    message_template: str  # "Cannot bind to {host}:{port}"
    detail_template: str | None = None
    suggestion_template: str | None = None
    default_http_status: int = 500
