"""Response and request models for the mocked control-plane API."""

from pydantic import BaseModel, Field


# ─────────────────────────────────────────────────────────────────
# Releases
# ─────────────────────────────────────────────────────────────────


class ReleaseAsset(BaseModel):
    """Downloadable runner package."""

    name: str
    browser_download_url: str
    size: int


class ReleaseResponse(BaseModel):
    """Latest runner release."""

    tag_name: str
    name: str
    assets: list[ReleaseAsset]


# ─────────────────────────────────────────────────────────────────
# Registration tokens & runners
# ─────────────────────────────────────────────────────────────────


class RegistrationTokenResponse(BaseModel):
    """Freshly issued registration token."""

    token: str
    expires_at: str = Field(description="YYYY-MM-DDTHH:MM:SSZ")


class RunnerModel(BaseModel):
    """Registered runner as reported by the listing routes."""

    id: int
    name: str
    os: str
    status: str
    busy: bool
    labels: list[str]
    created_at: str


class RunnerListResponse(BaseModel):
    """Runner listing."""

    total_count: int
    runners: list[RunnerModel]


class RunnerRegistrationRequest(BaseModel):
    """Body of the out-of-band runner registration call."""

    name: str = Field(min_length=1, max_length=256)
    labels: str | list[str] = ""
    scope: str | None = None


# ─────────────────────────────────────────────────────────────────
# Health & reset
# ─────────────────────────────────────────────────────────────────


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    uptime: str
    request_count: int
    registered_runners: int


class MessageResponse(BaseModel):
    """Plain message body (reset, 401)."""

    message: str


# ─────────────────────────────────────────────────────────────────
# Errors
# ─────────────────────────────────────────────────────────────────


class NotFoundResponse(BaseModel):
    """Body for unmatched routes."""

    message: str = "Not Found"
    documentation_url: str


class InternalErrorResponse(BaseModel):
    """Body for handler failures."""

    message: str = "Internal server error"
    error: str


class ValidationErrorDetail(BaseModel):
    """Single invalid field of a request body."""

    field: str
    message: str


class ValidationFailedResponse(BaseModel):
    """Body for rejected request payloads."""

    message: str = "Validation Failed"
    errors: list[ValidationErrorDetail]
