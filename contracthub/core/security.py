"""
Password hashing & JWT helpers.

- Passwords are hashed with bcrypt directly (passlib is unmaintained
  and broken with bcrypt>=4.1).
- JWTs carry only the subject (user id), the role at issue time and the
  iat/exp timestamps.  The role claim is informational: authorization
  always re-reads the stored user.
- The credential is taken from the `Authorization: Bearer` header, or
  from the auth cookie when no header is sent.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from fastapi import Request
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt

from contracthub.core.config import settings
from contracthub.core.errors import AuthenticationInvalid

# ── Password hashing ────────────────────────────────────────────────


def hash_password(plain: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # malformed hash in storage
        return False


_PASSWORD_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"[A-Z]"), "Password must contain at least one uppercase letter"),
    (re.compile(r"[a-z]"), "Password must contain at least one lowercase letter"),
    (re.compile(r"\d"), "Password must contain at least one number"),
    (re.compile(r"[!@#$%^&*(),.?\":{}|<>]"), "Password must contain at least one special character"),
]


def validate_password_strength(password: str) -> list[str]:
    """Return the list of violated rules.  Empty list means the password is acceptable."""
    errors = []
    if len(password) < 8:
        errors.append("Password must be at least 8 characters long")
    for pattern, message in _PASSWORD_RULES:
        if not pattern.search(password):
            errors.append(message)
    return errors


# ── JWT ──────────────────────────────────────────────────────────────
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


@dataclass(frozen=True)
class TokenClaims:
    principal_id: int
    role: str | None
    issued_at: datetime | None
    expires_at: datetime | None


def create_access_token(
    user_id: int,
    role: str,
    expires_delta: timedelta | None = None,
) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode: dict[str, Any] = {
        "sub": str(user_id),
        "role": role,
        "iat": int(now.timestamp()),
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def _timestamp(value: Any) -> datetime | None:
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    return None


def decode_access_token(token: str) -> TokenClaims:
    """Decode & validate a JWT.  Raises AuthenticationInvalid on failure."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise AuthenticationInvalid("Invalid or expired token")

    subject = payload.get("sub")
    try:
        principal_id = int(subject)
    except (TypeError, ValueError):
        raise AuthenticationInvalid("Invalid or expired token")

    return TokenClaims(
        principal_id=principal_id,
        role=payload.get("role"),
        issued_at=_timestamp(payload.get("iat")),
        expires_at=_timestamp(payload.get("exp")),
    )


def extract_credential(request: Request, bearer: str | None) -> str | None:
    """Bearer header wins; the auth cookie is the fallback."""
    if bearer:
        return bearer
    return request.cookies.get(settings.AUTH_COOKIE_NAME) or None
