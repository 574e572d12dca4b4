"""Last-resort error handlers for the FastAPI app.

Handler failures are already turned into 500 responses by the dispatcher;
these cover anything that escapes the catch-all endpoint itself.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from runner_mock.errors import get_error_factory

from .models import InternalErrorResponse

logger = logging.getLogger(__name__)


def setup_error_handlers(app: FastAPI) -> None:
    """Configure error handlers for the FastAPI app."""

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        error = get_error_factory().from_exception(exc)
        message = str(exc) or type(exc).__name__
        logger.error(
            "%s %s failed outside the dispatcher: %s",
            request.method,
            request.url.path,
            error.detail,
        )

        dispatcher = getattr(request.app.state, "dispatcher", None)
        headers = dict(dispatcher.headers) if dispatcher is not None else {}
        headers.pop("Content-Type", None)

        return JSONResponse(
            status_code=500,
            content=InternalErrorResponse(error=message).model_dump(),
            headers=headers,
        )
