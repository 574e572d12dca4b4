"""Registration token generation.

Token format: MOCK_REG_<base64 of 32 random bytes>
- 256 bits from the OS CSPRNG
- the MOCK_REG_ prefix keeps mock tokens visually distinct from real ones
- expires one hour after issuance

Issued tokens are not stored; every request mints a fresh one.
"""

from __future__ import annotations

import base64
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from runner_mock.errors import create_error

TOKEN_PREFIX = "MOCK_REG_"
TOKEN_BYTES = 32
TOKEN_LIFETIME = timedelta(hours=1)
EXPIRY_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


@dataclass(frozen=True)
class RegistrationToken:
    """A freshly issued registration token."""

    token: str
    expires_at: datetime

    def to_dict(self) -> dict[str, str]:
        """Convert to the registration-token response body."""
        return {
            "token": self.token,
            "expires_at": format_timestamp(self.expires_at),
        }


def format_timestamp(value: datetime) -> str:
    """Format a datetime as YYYY-MM-DDTHH:MM:SSZ in UTC."""
    return value.astimezone(UTC).strftime(EXPIRY_FORMAT)


def _random_bytes(count: int) -> bytes:
    try:
        return secrets.token_bytes(count)
    except NotImplementedError as e:
        # os.urandom raises this when no entropy source exists
        raise create_error("TOKEN_SOURCE_UNAVAILABLE", cause=e) from e


def new_token(now: datetime | None = None) -> RegistrationToken:
    """Generate a registration token valid for one hour.

    Args:
        now: Issuance time (defaults to the current UTC time)

    Returns:
        RegistrationToken

    Raises:
        MockServiceError: TOKEN_SOURCE_UNAVAILABLE if the secure random
            source cannot be used
    """
    issued_at = (now or datetime.now(UTC)).replace(microsecond=0)
    random_part = base64.b64encode(_random_bytes(TOKEN_BYTES)).decode("ascii")
    return RegistrationToken(
        token=f"{TOKEN_PREFIX}{random_part}",
        expires_at=issued_at + TOKEN_LIFETIME,
    )


def check_token_source() -> None:
    """Fail fast at startup if tokens cannot be generated.

    Raises:
        MockServiceError: TOKEN_SOURCE_UNAVAILABLE
    """
    _random_bytes(1)
