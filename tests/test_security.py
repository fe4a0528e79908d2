from datetime import timedelta

import pytest
from jose import jwt
from starlette.requests import Request

from contracthub.core.config import settings
from contracthub.core.errors import AuthenticationInvalid
from contracthub.core.security import (
    create_access_token,
    decode_access_token,
    extract_credential,
    hash_password,
    validate_password_strength,
    verify_password,
)


def _request(cookie: str | None = None) -> Request:
    headers = []
    if cookie is not None:
        headers.append((b"cookie", f"{settings.AUTH_COOKIE_NAME}={cookie}".encode()))
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers})


class TestPasswords:
    def test_hash_and_verify(self):
        hashed = hash_password("Passw0rd!")
        assert hashed != "Passw0rd!"
        assert verify_password("Passw0rd!", hashed)
        assert not verify_password("wrong", hashed)

    def test_verify_against_missing_or_malformed_hash(self):
        assert verify_password("anything", None) is False
        assert verify_password("anything", "") is False
        assert verify_password("anything", "not-a-bcrypt-hash") is False

    def test_strong_password_passes(self):
        assert validate_password_strength("Str0ng!pass") == []

    def test_weak_password_lists_every_rule(self):
        assert validate_password_strength("abc") == [
            "Password must be at least 8 characters long",
            "Password must contain at least one uppercase letter",
            "Password must contain at least one number",
            "Password must contain at least one special character",
        ]


class TestTokens:
    def test_round_trip(self):
        token = create_access_token(42, "manager")
        claims = decode_access_token(token)
        assert claims.principal_id == 42
        assert claims.role == "manager"
        assert claims.issued_at is not None
        assert claims.expires_at > claims.issued_at

    def test_expired_token_rejected(self):
        token = create_access_token(1, "admin", expires_delta=timedelta(seconds=-10))
        with pytest.raises(AuthenticationInvalid):
            decode_access_token(token)

    def test_wrong_signature_rejected(self):
        token = jwt.encode({"sub": "1", "role": "admin"}, "another-secret", algorithm="HS256")
        with pytest.raises(AuthenticationInvalid):
            decode_access_token(token)

    def test_non_numeric_subject_rejected(self):
        token = jwt.encode({"sub": "alice"}, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
        with pytest.raises(AuthenticationInvalid):
            decode_access_token(token)

    def test_garbage_rejected(self):
        with pytest.raises(AuthenticationInvalid):
            decode_access_token("not.a.jwt")


class TestCredentialExtraction:
    def test_bearer_wins_over_cookie(self):
        assert extract_credential(_request(cookie="from-cookie"), "from-header") == "from-header"

    def test_cookie_fallback(self):
        assert extract_credential(_request(cookie="from-cookie"), None) == "from-cookie"

    def test_nothing_supplied(self):
        assert extract_credential(_request(), None) is None
