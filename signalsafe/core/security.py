"""Password hashing, JWT creation/verification and credential input validation."""

import re
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from signalsafe.core.config import Settings

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

# Same rule at sign-up and password reset; the identity provider does not re-check it.
PASSWORD_MIN_LEN = 6

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# Token purposes: "access" for bearer sessions, "recovery" for password-reset links.
TOKEN_PURPOSE_ACCESS = "access"
TOKEN_PURPOSE_RECOVERY = "recovery"


def is_valid_email(email: str) -> bool:
    """One '@', non-whitespace on both sides and a '.' after the '@' segment."""
    return bool(EMAIL_PATTERN.fullmatch(email or ""))


def is_valid_password(password: str) -> bool:
    return len(password or "") >= PASSWORD_MIN_LEN


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors.
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_token(
    sub: str,
    settings: Settings,
    purpose: str = TOKEN_PURPOSE_ACCESS,
    expire_minutes: int | None = None,
) -> tuple[str, int]:
    """Create a signed JWT for sub; returns (token, lifetime in seconds)."""
    minutes = expire_minutes if expire_minutes is not None else settings.JWT_EXPIRE_MINUTES
    now = datetime.now(UTC)
    payload: dict[str, Any] = {
        "sub": str(sub),
        "purpose": purpose,
        "exp": now + timedelta(minutes=minutes),
        "iat": now,
    }
    token = jwt.encode(
        payload,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )
    return token, minutes * 60


def decode_token(token: str, settings: Settings, purposes: tuple[str, ...]) -> dict[str, Any]:
    """
    Decode and validate JWT; return payload (sub, purpose, exp, iat).
    Raises jwt.PyJWTError on invalid or expired token, or a purpose not in purposes.
    """
    payload = jwt.decode(
        token,
        settings.JWT_SECRET.get_secret_value(),
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": ["sub", "exp"]},
    )
    if payload.get("purpose") not in purposes:
        raise jwt.InvalidTokenError("Token purpose not accepted here")
    return payload
