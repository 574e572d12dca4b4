"""REST API application factory.

All requests land on one catch-all endpoint that hands them to the
Dispatcher; FastAPI's own routing, docs and OpenAPI pages are not used.
"""

import time

from fastapi import FastAPI, Request
from starlette.requests import ClientDisconnect
from starlette.responses import Response

from runner_mock.logging import RequestLogger

from .errors import setup_error_handlers
from .routes import Dispatcher

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


async def forward_to_dispatcher(request: Request) -> Response:
    """Dispatch one request and log its outcome."""
    dispatcher: Dispatcher = request.app.state.dispatcher
    request_logger: RequestLogger = request.app.state.request_logger

    started = time.perf_counter()
    try:
        body = await request.body()
    except ClientDisconnect:
        body = None

    result = dispatcher.dispatch(
        request.method,
        request.url.path,
        request.headers.get("authorization"),
        body,
    )

    request_logger.request(
        request.method,
        request.url.path,
        result.status_code,
        result.length,
        duration_ms=(time.perf_counter() - started) * 1000,
        error=result.error,
    )

    return Response(
        content=result.body,
        status_code=result.status_code,
        headers=result.headers,
    )


def create_rest_app(
    dispatcher: Dispatcher,
    request_logger: RequestLogger | None = None,
    title: str = "runner-mock",
    version: str = "0.0.0",
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        dispatcher: Dispatcher that owns the route table and registry
        request_logger: Logger for per-request lines
        title: Application title
        version: Application version

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title=title,
        version=version,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    app.state.dispatcher = dispatcher
    app.state.request_logger = request_logger or RequestLogger()

    setup_error_handlers(app)

    app.add_api_route(
        "/{path:path}",
        forward_to_dispatcher,
        methods=ALL_METHODS,
        include_in_schema=False,
    )

    return app
