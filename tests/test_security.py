"""
Security Unit Tests

Tests for password hashing and JWT helpers.
"""

import uuid
from datetime import timedelta

from app.core.security import (
    Identity,
    create_access_token,
    decode_access_token,
    extract_token,
    hash_password,
    user_id_from_payload,
    verify_password,
)
from app.models.enums import UserRole


class TestPasswordHashing:
    """Tests for bcrypt hashing."""

    def test_hash_verifies(self):
        hashed = hash_password("s3cret-pass")

        assert hashed != "s3cret-pass"
        assert verify_password("s3cret-pass", hashed)

    def test_wrong_password_rejected(self):
        hashed = hash_password("s3cret-pass")

        assert not verify_password("other-pass", hashed)

    def test_malformed_hash_rejected(self):
        """A corrupt stored hash must not raise."""
        assert not verify_password("anything", "not-a-bcrypt-hash")


class TestAccessTokens:
    """Tests for token creation and decoding."""

    def test_payload_carries_user_claim(self):
        user_id = uuid.uuid4()
        token = create_access_token(user_id, UserRole.INSTRUCTOR)

        payload = decode_access_token(token)

        assert payload["user"] == {"id": str(user_id), "role": "instructor"}
        assert "exp" in payload

    def test_login_token_includes_name(self):
        token = create_access_token(uuid.uuid4(), UserRole.STUDENT, name="Ada")

        assert decode_access_token(token)["user"]["name"] == "Ada"

    def test_expired_token_is_rejected(self):
        token = create_access_token(
            uuid.uuid4(),
            UserRole.STUDENT,
            expires_delta=timedelta(seconds=-10),
        )

        assert decode_access_token(token) is None

    def test_tampered_token_is_rejected(self):
        token = create_access_token(uuid.uuid4(), UserRole.STUDENT)

        assert decode_access_token(token + "x") is None

    def test_user_id_from_payload(self):
        user_id = uuid.uuid4()
        payload = decode_access_token(create_access_token(user_id, UserRole.ADMIN))

        assert user_id_from_payload(payload) == user_id
        assert user_id_from_payload({"user": {"id": "nope"}}) is None
        assert user_id_from_payload({"sub": "legacy"}) is None


class TestExtractToken:
    """Tests for header parsing."""

    def test_bearer_prefix_is_stripped(self):
        assert extract_token("Bearer abc.def") == "abc.def"
        assert extract_token("bearer abc.def") == "abc.def"

    def test_raw_token_passes_through(self):
        assert extract_token("abc.def") == "abc.def"

    def test_empty_values(self):
        assert extract_token(None) is None
        assert extract_token("") is None
        assert extract_token("Bearer ") is None


def test_identity_is_admin():
    assert Identity(id=uuid.uuid4(), role=UserRole.ADMIN).is_admin
    assert not Identity(id=uuid.uuid4(), role=UserRole.STUDENT).is_admin
