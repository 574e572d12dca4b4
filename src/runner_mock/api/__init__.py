"""Mock control-plane REST API."""

from runner_mock.api.app import create_rest_app
from runner_mock.api.routes import (
    API_VERSION_HEADER,
    AuthRequirement,
    Dispatcher,
    DispatchResult,
    RequestContext,
    Route,
    compile_path,
    default_routes,
    route,
)

__all__ = [
    "create_rest_app",
    "API_VERSION_HEADER",
    "AuthRequirement",
    "Dispatcher",
    "DispatchResult",
    "RequestContext",
    "Route",
    "compile_path",
    "default_routes",
    "route",
]
