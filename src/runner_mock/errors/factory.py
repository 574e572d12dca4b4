"""Error factory for turning any exception into a MockServiceError."""

from typing import Any

from .errors import MockServiceError
from .registry import ErrorRegistry


class ErrorFactory:
    """Creates MockServiceErrors from codes or arbitrary exceptions."""

    def __init__(self, registry: ErrorRegistry | None = None):
        """Initialize error factory.

        Args:
            registry: Error registry (defaults to new ErrorRegistry())
        """
        self.registry = registry or ErrorRegistry()

    def from_exception(self, error: BaseException) -> MockServiceError:
        """Convert any exception to MockServiceError.

        Service errors pass through unchanged; anything else becomes
        INTERNAL_ERROR carrying the original message.
        """
        if isinstance(error, MockServiceError):
            return error

        return self.registry.create(
            code="INTERNAL_ERROR",
            context={"error": str(error) or type(error).__name__},
            cause=error,
        )

    def create(
        self,
        code: str,
        context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> MockServiceError:
        """Create MockServiceError directly from code.

        Args:
            code: Error code
            context: Context variables for template interpolation
            **kwargs: Additional context variables

        Returns:
            MockServiceError instance
        """
        merged_context = dict(context or {})
        merged_context.update(kwargs)
        cause = merged_context.pop("cause", None)

        return self.registry.create(code=code, context=merged_context, cause=cause)


# Convenience singleton
_default_factory: ErrorFactory | None = None


def get_error_factory() -> ErrorFactory:
    """Get default error factory singleton."""
    global _default_factory  # noqa: PLW0603
    if _default_factory is None:
        _default_factory = ErrorFactory()
    return _default_factory


def create_error(code: str, **context: Any) -> MockServiceError:
    """Convenience function to create error.

    Args:
        code: Error code
        **context: Context variables for template interpolation

    Returns:
        MockServiceError instance
    """
    return get_error_factory().create(code, context)
