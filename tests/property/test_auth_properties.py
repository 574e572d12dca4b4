"""Property-based tests for header validation and token issuance."""

import base64

import pytest
from hypothesis import given, settings, strategies as st

from runner_mock.auth import TOKEN_PREFIX, AuthValidator, new_token
from runner_mock.registry import split_labels


# =============================================================================
# Strategies
# =============================================================================

token_body = st.text(
    alphabet=st.characters(whitelist_categories=("L", "N"), whitelist_characters="_-"),
    max_size=40,
)

headers = st.one_of(st.none(), st.text(max_size=60))

labels = st.lists(
    st.text(
        alphabet=st.characters(blacklist_characters=",", blacklist_categories=("Cs",)),
        min_size=1,
        max_size=12,
    ),
    min_size=1,
    max_size=8,
)


# =============================================================================
# Property Tests
# =============================================================================


@pytest.mark.property
class TestHeaderProperties:
    """Accepted headers are exactly those with a known prefix."""

    @given(st.sampled_from(["ghp_", "github_pat_"]), token_body)
    @settings(max_examples=100)
    def test_known_prefixes_always_accepted(self, prefix, body):
        assert AuthValidator().is_authorized(f"Bearer {prefix}{body}")

    @given(headers)
    @settings(max_examples=200)
    def test_acceptance_matches_prefix_rule(self, header):
        expected = header is not None and (
            header.startswith("Bearer ghp_") or header.startswith("Bearer github_pat_")
        )
        assert AuthValidator().is_authorized(header) == expected

    @given(headers)
    @settings(max_examples=100)
    def test_disabled_accepts_everything(self, header):
        validator = AuthValidator(enabled=False)
        assert validator.is_authorized(header)
        assert validator.is_registration_authorized(header)


@pytest.mark.property
class TestTokenProperties:
    """Issued tokens are always well formed and accepted for registration."""

    @given(st.integers(min_value=0, max_value=20))
    @settings(max_examples=20)
    def test_issued_tokens_are_well_formed(self, _):
        token = new_token().token
        assert token.startswith(TOKEN_PREFIX)
        assert len(base64.b64decode(token[len(TOKEN_PREFIX) :])) == 32
        for scheme in ("Bearer", "Token", "RemoteAuth"):
            assert AuthValidator().is_registration_authorized(f"{scheme} {token}")


@pytest.mark.property
class TestLabelProperties:
    """Joining and splitting labels preserves order and content."""

    @given(labels)
    @settings(max_examples=100)
    def test_split_inverts_join(self, items):
        assert split_labels(",".join(items)) == items
