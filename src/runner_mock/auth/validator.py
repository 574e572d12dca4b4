"""Authorization header validation.

This is a format check only: no signature, expiry or revocation lookup
happens anywhere in the service.

- Control-plane routes accept ``Bearer ghp_...`` (classic personal access
  token) or ``Bearer github_pat_...`` (fine-grained / app token).
- The out-of-band runner registration accepts a token issued by this
  service: ``Bearer``, ``Token`` or ``RemoteAuth`` followed by ``MOCK_REG_``.
"""

from __future__ import annotations

import re

from .tokens import TOKEN_PREFIX

ACCESS_TOKEN_REGEX = re.compile(r"^Bearer (ghp_|github_pat_)")
REGISTRATION_TOKEN_REGEX = re.compile(rf"^(Bearer|Token|RemoteAuth) {TOKEN_PREFIX}")


class AuthValidator:
    """Checks Authorization headers against the accepted token formats."""

    def __init__(self, enabled: bool = True):
        """Initialize validator.

        Args:
            enabled: When False every header (including none) is accepted
        """
        self.enabled = enabled

    def is_authorized(self, header: str | None) -> bool:
        """Check a header for a personal-access or app token."""
        if not self.enabled:
            return True
        if not header:
            return False
        return ACCESS_TOKEN_REGEX.match(header) is not None

    def is_registration_authorized(self, header: str | None) -> bool:
        """Check a header for a registration token minted by this service."""
        if not self.enabled:
            return True
        if not header:
            return False
        return REGISTRATION_TOKEN_REGEX.match(header) is not None


def is_authorized(header: str | None, enabled: bool = True) -> bool:
    """Functional form of AuthValidator.is_authorized."""
    return AuthValidator(enabled=enabled).is_authorized(header)
