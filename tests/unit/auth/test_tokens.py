"""Tests for registration token generation."""

import base64
import re
from datetime import UTC, datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from runner_mock.auth import (
    TOKEN_LIFETIME,
    TOKEN_PREFIX,
    check_token_source,
    format_timestamp,
    new_token,
)
from runner_mock.errors import MockServiceError

EXPIRY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z$")


class TestNewToken:
    """Tests for new_token()."""

    def test_token_has_prefix(self):
        """Test that tokens start with MOCK_REG_."""
        token = new_token()
        assert token.token.startswith(TOKEN_PREFIX)

    def test_token_encodes_32_bytes(self):
        """Test that the random part is base64 of 32 bytes."""
        token = new_token()
        decoded = base64.b64decode(token.token[len(TOKEN_PREFIX) :], validate=True)
        assert len(decoded) == 32

    def test_tokens_are_unique(self):
        """Test that consecutive tokens differ."""
        tokens = {new_token().token for _ in range(100)}
        assert len(tokens) == 100

    def test_expires_one_hour_after_issue(self):
        """Test expiry is exactly one hour after the issuance second."""
        now = datetime(2026, 10, 17, 12, 0, 0, 500_000, tzinfo=UTC)
        token = new_token(now)
        assert token.expires_at == datetime(2026, 10, 17, 13, 0, 0, tzinfo=UTC)
        assert TOKEN_LIFETIME == timedelta(hours=1)

    def test_expiry_format(self):
        """Test to_dict renders expires_at without fractional seconds."""
        token = new_token(datetime(2026, 10, 17, 23, 30, 15, tzinfo=UTC))
        data = token.to_dict()
        assert data["expires_at"] == "2026-10-18T00:30:15Z"
        assert EXPIRY_PATTERN.match(data["expires_at"])
        assert set(data) == {"token", "expires_at"}

    def test_expiry_is_within_an_hour_of_now(self):
        """Test default issuance time is the current time."""
        before = datetime.now(UTC).replace(microsecond=0)
        token = new_token()
        after = datetime.now(UTC)
        assert before + TOKEN_LIFETIME <= token.expires_at <= after + TOKEN_LIFETIME

    def test_unavailable_random_source(self):
        """Test failure of the secure random source is reported."""
        with patch("runner_mock.auth.tokens.secrets.token_bytes", side_effect=NotImplementedError):
            with pytest.raises(MockServiceError) as exc_info:
                new_token()
        assert exc_info.value.code == "TOKEN_SOURCE_UNAVAILABLE"


class TestCheckTokenSource:
    """Tests for check_token_source()."""

    def test_passes_with_working_source(self):
        """Test no error when os randomness works."""
        check_token_source()

    def test_raises_without_source(self):
        """Test startup check surfaces a missing random source."""
        with patch("runner_mock.auth.tokens.secrets.token_bytes", side_effect=NotImplementedError):
            with pytest.raises(MockServiceError) as exc_info:
                check_token_source()
        assert exc_info.value.code == "TOKEN_SOURCE_UNAVAILABLE"


class TestHelpers:
    """Tests for format_timestamp."""

    def test_format_timestamp_converts_to_utc(self):
        """Test non-UTC datetimes are converted before formatting."""
        offset = datetime(2026, 10, 17, 16, 0, 0, tzinfo=timezone(timedelta(hours=2)))
        assert format_timestamp(offset) == "2026-10-17T14:00:00Z"

