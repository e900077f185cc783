"""
Unit tests for authentication utilities and the authorization gate.

Tests JWT token creation and validation, and the caller/role/active checks
every workflow runs before touching the store.
"""

import logging
from datetime import datetime, timedelta, timezone

import jwt
import pytest
from jwt.exceptions import InvalidTokenError

from playbook.auth import (
    create_access_token,
    decode_token,
    subject_from_token,
    require_caller,
    require_active,
    require_role,
    require_member,
    require_identity
)
from playbook.auth.jwt import JWT_ALGORITHM, JWT_SECRET
from playbook.errors import Forbidden, Unauthorized
from playbook.models.profile import Profile

USER_ID = "123e4567-e89b-12d3-a456-426614174000"


def make_profile(role="player", is_active=True) -> Profile:
    return Profile(
        user_id=USER_ID,
        team_id="223e4567-e89b-12d3-a456-426614174000",
        role=role,
        display_name="Test User",
        is_active=is_active
    )


@pytest.mark.unit
class TestJWTTokens:
    """Test JWT token creation and validation."""

    def test_create_access_token(self):
        """Test creating an access token."""
        token = create_access_token(USER_ID)

        assert isinstance(token, str)
        assert len(token) > 0

    def test_decode_access_token(self):
        """Test decoding a valid access token."""
        token = create_access_token(USER_ID)
        payload = decode_token(token)

        assert payload["sub"] == USER_ID
        assert payload["type"] == "access"
        assert "exp" in payload
        assert "iat" in payload

    def test_token_carries_no_role(self):
        """Role comes from the stored profile, never from the token."""
        payload = decode_token(create_access_token(USER_ID))

        assert "role" not in payload

    def test_decode_invalid_token(self):
        """Test decoding an invalid token raises."""
        with pytest.raises(InvalidTokenError):
            decode_token("invalid.token.here")

    def test_subject_from_valid_token(self):
        assert subject_from_token(create_access_token(USER_ID)) == USER_ID

    def test_subject_from_garbage_token(self):
        assert subject_from_token("not-a-jwt") is None

    def test_subject_from_non_access_token(self):
        """Tokens of another type are not accepted as access tokens."""
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"sub": USER_ID, "type": "refresh", "exp": now + timedelta(hours=1), "iat": now},
            JWT_SECRET,
            algorithm=JWT_ALGORITHM
        )

        assert subject_from_token(token) is None

    def test_subject_from_expired_token(self):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"sub": USER_ID, "type": "access", "exp": now - timedelta(hours=1), "iat": now - timedelta(hours=2)},
            JWT_SECRET,
            algorithm=JWT_ALGORITHM
        )

        assert subject_from_token(token) is None

    def test_subject_from_token_signed_with_other_secret(self):
        token = jwt.encode(
            {"sub": USER_ID, "type": "access"},
            "some-other-secret",
            algorithm=JWT_ALGORITHM
        )

        assert subject_from_token(token) is None


@pytest.mark.unit
class TestAuthorizationGate:
    """Test caller, active-status and role checks."""

    def test_missing_caller_is_unauthorized(self):
        with pytest.raises(Unauthorized):
            require_caller(None)

    def test_resolved_caller_passes(self):
        caller = make_profile()

        assert require_caller(caller) is caller

    def test_inactive_caller_is_forbidden(self):
        with pytest.raises(Forbidden):
            require_active(make_profile(is_active=False))

    def test_wrong_role_is_forbidden(self):
        with pytest.raises(Forbidden) as exc_info:
            require_role(make_profile(role="player"), "coach")

        assert exc_info.value.message == "Requires coach role"

    def test_any_listed_role_passes(self):
        caller = make_profile(role="coach")

        assert require_role(caller, "player", "coach") is caller

    def test_member_checks_unauthorized_first(self):
        """No caller is reported as Unauthorized, never Forbidden."""
        with pytest.raises(Unauthorized):
            require_member(None, "coach")

    def test_member_checks_active_before_role(self):
        with pytest.raises(Forbidden) as exc_info:
            require_member(make_profile(role="player", is_active=False), "coach")

        assert exc_info.value.message == "Forbidden"

    def test_member_without_role_requirement(self):
        caller = make_profile(role="player")

        assert require_member(caller) is caller

    def test_missing_identity_is_unauthorized(self):
        with pytest.raises(Unauthorized):
            require_identity(None)

        with pytest.raises(Unauthorized):
            require_identity("")

    def test_authorization_failures_are_audited(self, caplog):
        with caplog.at_level(logging.INFO, logger="audit"):
            with pytest.raises(Forbidden):
                require_role(make_profile(role="player"), "coach", action="rotate_team_access_code")

        assert "AUTHZ_FAILURE" in caplog.text
        assert "action=rotate_team_access_code" in caplog.text
