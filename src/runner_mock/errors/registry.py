"""Error registry for creating errors from templates."""

from typing import Any

from .errors import ErrorCategory, ErrorTemplate, MockServiceError


class ErrorRegistry:
    """Registry of error templates. Creates errors from templates + context."""

    def __init__(self) -> None:
        """Initialize error registry with built-in templates."""
        self._templates: dict[str, ErrorTemplate] = {}
        self._load_builtin_templates()

    def get_template(self, code: str) -> ErrorTemplate | None:
        """Get template by error code."""
        return self._templates.get(code)

    def create(
        self,
        code: str,
        context: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> MockServiceError:
        """Create error instance from template + context.

        An explicit ``detail`` or ``suggestion`` in the context wins over the
        template text.

        Args:
            code: Error code
            context: Context variables for template interpolation
            cause: Optional underlying exception

        Returns:
            MockServiceError instance

        Raises:
            ValueError: If error code not found
        """
        template = self.get_template(code)
        if not template:
            msg = f"Unknown error code: {code}"
            raise ValueError(msg)

        context = context or {}

        message = self._interpolate(template.message_template, context) or f"Error {code}"
        detail = context.get("detail") or self._interpolate(template.detail_template, context)
        suggestion = context.get("suggestion") or self._interpolate(
            template.suggestion_template, context
        )

        return MockServiceError(
            code=template.code,
            category=template.category,
            message=message,
            detail=detail,
            suggestion=suggestion,
            http_status=template.default_http_status,
            cause=cause,
        )

    def _interpolate(self, template: str | None, context: dict[str, Any]) -> str | None:
        """Safe string interpolation.

        Returns the template as-is when a placeholder is missing from context.
        """
        if template is None:
            return None

        try:
            return template.format(**context)
        except KeyError:
            return template

    def _load_builtin_templates(self) -> None:
        """Load hardcoded built-in templates."""
        # CONFIG Errors
        self._templates["CONFIG_INVALID"] = ErrorTemplate(
            code="CONFIG_INVALID",
            category=ErrorCategory.CONFIG,
            message_template="Invalid configuration",
            suggestion_template="Check the configuration file and command-line flags",
        )

        # SYSTEM Errors
        self._templates["BIND_FAILED"] = ErrorTemplate(
            code="BIND_FAILED",
            category=ErrorCategory.SYSTEM,
            message_template="Cannot listen on {host}:{port}",
            detail_template="{reason}",
            suggestion_template="Stop the process holding the port or pick another one with --port",
        )

        self._templates["TOKEN_SOURCE_UNAVAILABLE"] = ErrorTemplate(
            code="TOKEN_SOURCE_UNAVAILABLE",
            category=ErrorCategory.SYSTEM,
            message_template="Secure random source is unavailable",
            detail_template="Registration tokens cannot be generated without os.urandom",
        )

        self._templates["INTERNAL_ERROR"] = ErrorTemplate(
            code="INTERNAL_ERROR",
            category=ErrorCategory.SYSTEM,
            message_template="Internal server error",
            detail_template="{error}",
            default_http_status=500,
        )

        # AUTH Errors
        self._templates["AUTH_REQUIRED"] = ErrorTemplate(
            code="AUTH_REQUIRED",
            category=ErrorCategory.AUTH,
            message_template="Requires authentication",
            default_http_status=401,
        )

        # ROUTING Errors
        self._templates["ROUTE_NOT_FOUND"] = ErrorTemplate(
            code="ROUTE_NOT_FOUND",
            category=ErrorCategory.ROUTING,
            message_template="Not Found",
            detail_template="No route for {method} {path}",
            default_http_status=404,
        )

        # VALIDATION Errors
        self._templates["INVALID_REQUEST"] = ErrorTemplate(
            code="INVALID_REQUEST",
            category=ErrorCategory.VALIDATION,
            message_template="Validation Failed",
            default_http_status=422,
        )
