"""Endpoint handlers.

Each handler takes a RequestContext and returns (status_code, model).
Authorization has already been checked by the dispatcher.
"""

from __future__ import annotations

import json
from datetime import timedelta
from typing import TYPE_CHECKING

from pydantic import ValidationError

from runner_mock.auth import new_token
from runner_mock.errors import create_error

from .models import (
    HealthResponse,
    MessageResponse,
    RegistrationTokenResponse,
    ReleaseAsset,
    ReleaseResponse,
    RunnerListResponse,
    RunnerModel,
    RunnerRegistrationRequest,
    ValidationErrorDetail,
    ValidationFailedResponse,
)

if TYPE_CHECKING:
    from .routes import HandlerResult, RequestContext

RELEASE_DOWNLOAD_URL = "https://github.com/actions/runner/releases/download"

# Approximate package sizes of the mocked release assets
WINDOWS_ASSET_SIZE = 89_734_112
LINUX_ASSET_SIZE = 145_891_012


def scope_from_params(params: dict[str, str]) -> str | None:
    """Return org or owner/repo from route parameters."""
    if "org" in params:
        return params["org"]
    if "owner" in params and "repo" in params:
        return f"{params['owner']}/{params['repo']}"
    return None


def format_uptime(uptime: timedelta) -> str:
    """Format uptime as [D day(s), ]H:MM:SS."""
    return str(timedelta(seconds=int(uptime.total_seconds())))


def latest_release(context: RequestContext) -> HandlerResult:
    version = context.config.release.version
    tag = f"v{version}"
    return 200, ReleaseResponse(
        tag_name=tag,
        name=tag,
        assets=[
            ReleaseAsset(
                name=f"actions-runner-win-x64-{version}.zip",
                browser_download_url=(
                    f"{RELEASE_DOWNLOAD_URL}/{tag}/actions-runner-win-x64-{version}.zip"
                ),
                size=WINDOWS_ASSET_SIZE,
            ),
            ReleaseAsset(
                name=f"actions-runner-linux-x64-{version}.tar.gz",
                browser_download_url=(
                    f"{RELEASE_DOWNLOAD_URL}/{tag}/actions-runner-linux-x64-{version}.tar.gz"
                ),
                size=LINUX_ASSET_SIZE,
            ),
        ],
    )


def registration_token(context: RequestContext) -> HandlerResult:
    """Issue a new registration token for an org or repository."""
    token = new_token()
    return 200, RegistrationTokenResponse(**token.to_dict())


def list_runners(context: RequestContext) -> HandlerResult:
    """List registered runners.

    All orgs and repos share one registry unless partitioning is enabled.
    """
    count, runners = context.registry.list(scope=scope_from_params(context.params))
    return 200, RunnerListResponse(
        total_count=count,
        runners=[RunnerModel(**runner.to_dict()) for runner in runners],
    )


def health(context: RequestContext) -> HandlerResult:
    snapshot = context.registry.snapshot()
    return 200, HealthResponse(
        status="healthy",
        uptime=format_uptime(context.registry.uptime()),
        request_count=snapshot["request_count"],
        registered_runners=snapshot["registered_runners"],
    )


def reset(context: RequestContext) -> HandlerResult:
    context.registry.reset()
    return 200, MessageResponse(message="Mock data reset successfully")


def register_runner(context: RequestContext) -> HandlerResult:
    """Register a runner the way a runner does after obtaining a token.

    Body: {"name": "...", "labels": "a,b" | ["a", "b"], "scope": "org"}
    """
    try:
        raw = json.loads(context.body or b"{}")
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        detail = ValidationErrorDetail(field="body", message=f"Invalid JSON: {e}")
        return _invalid_request([detail])

    try:
        request = RunnerRegistrationRequest.model_validate(raw)
    except ValidationError as e:
        return _invalid_request(
            [
                ValidationErrorDetail(
                    field=".".join(str(part) for part in error["loc"]) or "body",
                    message=error["msg"],
                )
                for error in e.errors()
            ]
        )

    runner = context.registry.register(request.name, request.labels, scope=request.scope)
    return 201, RunnerModel(**runner.to_dict())


def _invalid_request(errors: list[ValidationErrorDetail]) -> HandlerResult:
    error = create_error("INVALID_REQUEST")
    return error.http_status, ValidationFailedResponse(message=error.message, errors=errors)
