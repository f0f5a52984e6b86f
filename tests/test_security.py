"""Tests for password hashing and JWT helpers."""

from datetime import timedelta

from jose import jwt

from components.core.config import get_settings
from components.core.security import (
    create_access_token,
    get_password_hash,
    verify_password,
    verify_token,
)


class TestPasswordHashing:
    """Tests for get_password_hash and verify_password."""

    def test_hash_is_salted(self) -> None:
        first = get_password_hash("secret123")
        second = get_password_hash("secret123")

        assert first != second
        assert first.count(":") == 1
        assert "secret123" not in first

    def test_verify(self) -> None:
        hashed = get_password_hash("secret123")

        assert verify_password("secret123", hashed)
        assert not verify_password("secret124", hashed)

    def test_same_salt_same_hash(self) -> None:
        assert get_password_hash("pw", salt="abc") == get_password_hash("pw", salt="abc")

    def test_malformed_hash_does_not_verify(self) -> None:
        assert not verify_password("secret123", "not-a-hash")


class TestTokens:
    """Tests for create_access_token and verify_token."""

    def test_round_trip(self) -> None:
        token = create_access_token({"sub": "7", "email": "a@example.com"})
        payload = verify_token(token)

        assert payload["sub"] == "7"
        assert payload["email"] == "a@example.com"
        assert "exp" in payload

    def test_default_expiry_is_seven_days(self) -> None:
        settings = get_settings()
        payload = jwt.get_unverified_claims(create_access_token({"sub": "1"}))
        issued = jwt.get_unverified_claims(
            create_access_token({"sub": "1"}, expires_delta=timedelta(days=7))
        )

        assert abs(payload["exp"] - issued["exp"]) <= 2
        assert settings.ACCESS_TOKEN_EXPIRE_MINUTES == 7 * 24 * 60

    def test_expired_token(self) -> None:
        token = create_access_token({"sub": "1"}, expires_delta=timedelta(seconds=-10))
        assert verify_token(token) is None

    def test_foreign_signature(self) -> None:
        token = jwt.encode({"sub": "1"}, "some-other-secret", algorithm="HS256")
        assert verify_token(token) is None

    def test_garbage(self) -> None:
        assert verify_token("garbage") is None
