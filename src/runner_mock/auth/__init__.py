"""Authorization and registration tokens.

- Token generation: cryptographically random MOCK_REG_ tokens with expiry
- Header validation: format check for access and registration tokens

When auth is disabled in configuration every request is allowed.
"""

from .tokens import (
    TOKEN_LIFETIME,
    TOKEN_PREFIX,
    RegistrationToken,
    check_token_source,
    format_timestamp,
    new_token,
)
from .validator import AuthValidator, is_authorized

__all__ = [
    # Tokens
    "TOKEN_PREFIX",
    "TOKEN_LIFETIME",
    "RegistrationToken",
    "new_token",
    "check_token_source",
    "format_timestamp",
    # Validation
    "AuthValidator",
    "is_authorized",
]
