"""Route table and dispatcher.

Routes are an ordered list of (method, compiled path pattern, handler,
auth requirement) evaluated top to bottom; the first match wins and
anything unmatched falls through to a 404.

Every dispatched request is counted exactly once, before the response
is built, whatever its outcome.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from runner_mock.errors import create_error, get_error_factory

from . import handlers
from .models import InternalErrorResponse, MessageResponse, NotFoundResponse

if TYPE_CHECKING:
    from runner_mock.auth import AuthValidator
    from runner_mock.config import MockServiceConfig
    from runner_mock.registry import MockRegistry

logger = logging.getLogger(__name__)

API_VERSION_HEADER = "X-GitHub-Api-Version"

_SEGMENT = r"[^/]+"


class AuthRequirement(str, Enum):
    """What a route expects in the Authorization header."""

    NONE = "none"
    ACCESS_TOKEN = "access_token"  # Bearer ghp_ / github_pat_
    REGISTRATION_TOKEN = "registration_token"  # MOCK_REG_ token


@dataclass
class RequestContext:
    """Everything a handler needs to build its response."""

    method: str
    path: str
    params: dict[str, str]
    auth_header: str | None
    body: bytes | None
    registry: MockRegistry
    config: MockServiceConfig


HandlerResult = tuple[int, BaseModel]
Handler = Callable[[RequestContext], HandlerResult]


@dataclass
class Route:
    """Single entry of the route table."""

    method: str
    pattern: re.Pattern[str]
    handler: Handler
    auth: AuthRequirement = AuthRequirement.NONE
    name: str = ""

    def match(self, method: str, path: str) -> dict[str, str] | None:
        """Return path parameters if this route handles the request."""
        if method != self.method:
            return None
        matched = self.pattern.fullmatch(path)
        if matched is None:
            return None
        return matched.groupdict()


def compile_path(template: str) -> re.Pattern[str]:
    """Compile a path template like /orgs/{org}/actions into a regex."""
    parts = re.split(r"\{(\w+)\}", template)
    regex = ""
    for index, part in enumerate(parts):
        if index % 2:
            regex += f"(?P<{part}>{_SEGMENT})"
        else:
            regex += re.escape(part)
    return re.compile(regex)


def route(
    method: str,
    template: str,
    handler: Handler,
    auth: AuthRequirement = AuthRequirement.NONE,
) -> Route:
    """Build a Route from a path template."""
    return Route(
        method=method,
        pattern=compile_path(template),
        handler=handler,
        auth=auth,
        name=template,
    )


def default_routes() -> list[Route]:
    """The mocked control-plane API, in matching priority order."""
    return [
        route("GET", "/repos/actions/runner/releases/latest", handlers.latest_release),
        route(
            "POST",
            "/orgs/{org}/actions/runners/registration-token",
            handlers.registration_token,
            AuthRequirement.ACCESS_TOKEN,
        ),
        route(
            "POST",
            "/repos/{owner}/{repo}/actions/runners/registration-token",
            handlers.registration_token,
            AuthRequirement.ACCESS_TOKEN,
        ),
        route(
            "GET",
            "/orgs/{org}/actions/runners",
            handlers.list_runners,
            AuthRequirement.ACCESS_TOKEN,
        ),
        route(
            "GET",
            "/repos/{owner}/{repo}/actions/runners",
            handlers.list_runners,
            AuthRequirement.ACCESS_TOKEN,
        ),
        route("GET", "/health", handlers.health),
        route("POST", "/reset", handlers.reset),
        route(
            "POST",
            "/_mock/runners",
            handlers.register_runner,
            AuthRequirement.REGISTRATION_TOKEN,
        ),
    ]


@dataclass
class DispatchResult:
    """Status code and serialized JSON body of a dispatched request."""

    status_code: int
    body: str
    headers: dict[str, str] = field(default_factory=dict)
    route: str | None = None
    error: str | None = None

    def json(self) -> Any:
        """Parse the body."""
        return json.loads(self.body)

    @property
    def length(self) -> int:
        """Body length in bytes."""
        return len(self.body.encode("utf-8"))


class Dispatcher:
    """Maps (method, path) to a handler and turns its result into JSON."""

    def __init__(
        self,
        registry: MockRegistry,
        validator: AuthValidator,
        config: MockServiceConfig,
        routes: list[Route] | None = None,
    ) -> None:
        """Initialize dispatcher.

        Args:
            registry: Registry shared by all handlers
            validator: Authorization header validator
            config: Service configuration
            routes: Route table (defaults to default_routes())
        """
        self.registry = registry
        self.validator = validator
        self.config = config
        self.routes = routes if routes is not None else default_routes()

    @property
    def headers(self) -> dict[str, str]:
        """Headers sent with every response."""
        return {
            API_VERSION_HEADER: str(self.config.server.api_version),
            "Content-Type": "application/json",
        }

    def dispatch(
        self,
        method: str,
        path: str,
        auth_header: str | None = None,
        body: bytes | None = None,
    ) -> DispatchResult:
        """Route a request and build its response.

        Never raises: any failure while routing or handling becomes a 500
        response.

        Args:
            method: HTTP method
            path: Request path (a query string is ignored)
            auth_header: Value of the Authorization header, if any
            body: Raw request body

        Returns:
            DispatchResult
        """
        self.registry.count_request()

        try:
            return self._route(method.upper(), path.split("?", 1)[0], auth_header, body)
        except Exception as e:
            return self._internal_error(e, None)

    def _route(
        self,
        method: str,
        path: str,
        auth_header: str | None,
        body: bytes | None,
    ) -> DispatchResult:
        for entry in self.routes:
            params = entry.match(method, path)
            if params is None:
                continue

            if not self._is_allowed(entry.auth, auth_header):
                error = create_error("AUTH_REQUIRED")
                logger.debug("Rejected %s %s: missing or malformed credentials", method, path)
                return self._result(
                    error.http_status, MessageResponse(message=error.message), entry.name
                )

            context = RequestContext(
                method=method,
                path=path,
                params=params,
                auth_header=auth_header,
                body=body,
                registry=self.registry,
                config=self.config,
            )
            try:
                status_code, payload = entry.handler(context)
                return self._result(status_code, payload, entry.name)
            except Exception as e:
                return self._internal_error(e, entry.name)

        error = create_error("ROUTE_NOT_FOUND", method=method, path=path)
        logger.debug("%s", error.detail)
        return self._result(
            error.http_status,
            NotFoundResponse(
                message=error.message,
                documentation_url=self.config.release.documentation_url,
            ),
        )

    def _is_allowed(self, requirement: AuthRequirement, auth_header: str | None) -> bool:
        if requirement == AuthRequirement.ACCESS_TOKEN:
            return self.validator.is_authorized(auth_header)
        if requirement == AuthRequirement.REGISTRATION_TOKEN:
            return self.validator.is_registration_authorized(auth_header)
        return True

    def _internal_error(self, exc: Exception, route_name: str | None) -> DispatchResult:
        error = get_error_factory().from_exception(exc)
        message = str(exc) or type(exc).__name__
        # the listener logs the request line at ERROR
        logger.debug(
            "Request for %s failed: %s", route_name or "<routing>", error.detail, exc_info=exc
        )
        result = self._result(500, InternalErrorResponse(error=message), route_name)
        result.error = message
        return result

    def _result(
        self, status_code: int, payload: BaseModel, route_name: str | None = None
    ) -> DispatchResult:
        return DispatchResult(
            status_code=status_code,
            body=payload.model_dump_json(),
            headers=self.headers,
            route=route_name,
        )
