"""Identity providers: sign-up, sign-in, password reset and bearer token resolution.

Two implementations share the IdentityProvider protocol:

- LocalIdentityProvider keeps credentials in our database (bcrypt hashes) and
  issues its own JWTs.
- GoTrueIdentityProvider delegates to a hosted GoTrue-compatible auth service
  over HTTP (the auth API behind Supabase projects).
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol
from urllib.parse import urlencode

import httpx
import jwt
from sqlalchemy.orm import Session

from signalsafe.core.security import (
    TOKEN_PURPOSE_ACCESS,
    TOKEN_PURPOSE_RECOVERY,
    create_token,
    decode_token,
    hash_password,
    verify_password,
)
from signalsafe.models import AuthIdentity
from signalsafe.schemas.auth import AuthSession, Identity

if TYPE_CHECKING:
    from signalsafe.core.config import Settings

logger = logging.getLogger(__name__)


class IdentityProviderError(Exception):
    """Raised when the identity provider rejects a request or fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class EmailAlreadyRegisteredError(IdentityProviderError):
    """Raised by sign_up when the email already has an identity."""


class InvalidCredentialsError(IdentityProviderError):
    """Raised by sign_in on unknown email or wrong password."""


class TokenRejectedError(IdentityProviderError):
    """Raised when a token is invalid, malformed or expired."""


class IdentityProvider(Protocol):
    def sign_up(self, email: str, password: str) -> Identity: ...

    def sign_in(self, email: str, password: str) -> AuthSession: ...

    def request_password_reset(self, email: str, redirect_to: str) -> None: ...

    def apply_new_password(self, access_token: str, new_password: str) -> None: ...

    def resolve(self, token: str) -> Identity: ...


ResetLinkSender = Callable[[str, str], None]


def log_reset_link(email: str, link: str) -> None:
    """Default reset-link delivery: write it to the debug log (no mail transport)."""
    logger.debug("Password reset link for %s: %s", email, link)


def build_reset_link(redirect_to: str, token: str) -> str:
    """Redirect URL with the recovery token in the fragment, as GoTrue does."""
    fragment = urlencode({"access_token": token, "type": "recovery"})
    return f"{redirect_to}#{fragment}"


class LocalIdentityProvider:
    """Identity provider backed by the auth_identities table and local JWTs."""

    def __init__(
        self,
        session: Session,
        settings: Settings,
        send_reset_link: ResetLinkSender = log_reset_link,
    ) -> None:
        self.session = session
        self.settings = settings
        self.send_reset_link = send_reset_link

    def _by_email(self, email: str) -> AuthIdentity | None:
        return self.session.query(AuthIdentity).filter(AuthIdentity.email == email).first()

    def _identity_from_token(self, token: str, purposes: tuple[str, ...]) -> AuthIdentity:
        try:
            payload = decode_token(token, self.settings, purposes)
        except jwt.PyJWTError as e:
            raise TokenRejectedError("Invalid or expired token", 401) from e
        row = (
            self.session.query(AuthIdentity)
            .filter(AuthIdentity.id == str(payload["sub"]))
            .first()
        )
        if row is None:
            raise TokenRejectedError("Identity not found", 401)
        return row

    def sign_up(self, email: str, password: str) -> Identity:
        if self._by_email(email) is not None:
            raise EmailAlreadyRegisteredError("User already registered", 422)
        row = AuthIdentity(
            id=str(uuid.uuid4()),
            email=email,
            password_hash=hash_password(password),
        )
        self.session.add(row)
        self.session.commit()
        logger.info("Identity created", extra={"identity_id": row.id})
        return Identity(id=row.id, email=row.email)

    def sign_in(self, email: str, password: str) -> AuthSession:
        row = self._by_email(email)
        if row is None or not verify_password(password, row.password_hash):
            raise InvalidCredentialsError("Invalid login credentials", 400)
        token, expires_in = create_token(row.id, self.settings, TOKEN_PURPOSE_ACCESS)
        return AuthSession(
            access_token=token,
            token_type="bearer",
            expires_in=expires_in,
            user=Identity(id=row.id, email=row.email),
        )

    def request_password_reset(self, email: str, redirect_to: str) -> None:
        row = self._by_email(email)
        if row is None:
            # Unknown emails are accepted silently.
            return
        token, _ = create_token(
            row.id,
            self.settings,
            TOKEN_PURPOSE_RECOVERY,
            expire_minutes=self.settings.RESET_TOKEN_EXPIRE_MINUTES,
        )
        self.send_reset_link(row.email, build_reset_link(redirect_to, token))
        logger.info("Password reset link issued", extra={"identity_id": row.id})

    def apply_new_password(self, access_token: str, new_password: str) -> None:
        row = self._identity_from_token(
            access_token, (TOKEN_PURPOSE_RECOVERY, TOKEN_PURPOSE_ACCESS)
        )
        row.password_hash = hash_password(new_password)
        self.session.commit()
        logger.info("Password updated", extra={"identity_id": row.id})

    def resolve(self, token: str) -> Identity:
        row = self._identity_from_token(token, (TOKEN_PURPOSE_ACCESS,))
        return Identity(id=row.id, email=row.email)


def _error_detail(resp: httpx.Response) -> str:
    """Best-effort human-readable message from a GoTrue error response."""
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:500] if resp.text else "Unknown error"
    if isinstance(body, dict):
        for key in ("msg", "message", "error_description", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value[:500]
    return str(body)[:500]


def _identity_from_user(data: Any) -> Identity:
    if not isinstance(data, dict) or not data.get("id"):
        raise IdentityProviderError("Auth service response missing user.")
    return Identity(id=str(data["id"]), email=str(data.get("email") or ""))


class GoTrueIdentityProvider:
    """Identity provider delegating to a GoTrue-compatible REST API via httpx."""

    def __init__(self, client: httpx.Client) -> None:
        self.client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> GoTrueIdentityProvider:
        if not settings.GOTRUE_URL or settings.GOTRUE_API_KEY is None:
            raise IdentityProviderError(
                "GoTrue is not configured; set GOTRUE_URL and GOTRUE_API_KEY."
            )
        api_key = settings.GOTRUE_API_KEY.get_secret_value()
        client = httpx.Client(
            base_url=settings.GOTRUE_URL,
            headers={"apikey": api_key, "Authorization": f"Bearer {api_key}"},
            timeout=settings.GOTRUE_REQUEST_TIMEOUT_SEC,
        )
        return cls(client)

    def close(self) -> None:
        self.client.close()

    def _raise_for_status(self, resp: httpx.Response) -> None:
        if resp.status_code < 400:
            return
        detail = _error_detail(resp)
        if resp.status_code >= 500:
            raise IdentityProviderError(
                f"Auth service returned {resp.status_code}: {detail}", resp.status_code
            )
        raise IdentityProviderError(detail, resp.status_code)

    def sign_up(self, email: str, password: str) -> Identity:
        resp = self.client.post("/signup", json={"email": email, "password": password})
        if resp.status_code in (400, 422) and "already registered" in _error_detail(resp).lower():
            raise EmailAlreadyRegisteredError(_error_detail(resp), resp.status_code)
        self._raise_for_status(resp)
        data = resp.json()
        # With email confirmation on, the user object is the body itself.
        return _identity_from_user(data.get("user") or data)

    def sign_in(self, email: str, password: str) -> AuthSession:
        resp = self.client.post(
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        if resp.status_code in (400, 401):
            raise InvalidCredentialsError(_error_detail(resp), resp.status_code)
        self._raise_for_status(resp)
        data = resp.json()
        return AuthSession(
            access_token=data["access_token"],
            token_type=data.get("token_type", "bearer"),
            expires_in=data.get("expires_in"),
            refresh_token=data.get("refresh_token"),
            user=_identity_from_user(data.get("user")),
        )

    def request_password_reset(self, email: str, redirect_to: str) -> None:
        resp = self.client.post(
            "/recover",
            params={"redirect_to": redirect_to},
            json={"email": email},
        )
        self._raise_for_status(resp)

    def apply_new_password(self, access_token: str, new_password: str) -> None:
        resp = self.client.put(
            "/user",
            headers={"Authorization": f"Bearer {access_token}"},
            json={"password": new_password},
        )
        if resp.status_code in (401, 403):
            raise TokenRejectedError(_error_detail(resp), resp.status_code)
        self._raise_for_status(resp)

    def resolve(self, token: str) -> Identity:
        resp = self.client.get("/user", headers={"Authorization": f"Bearer {token}"})
        if 400 <= resp.status_code < 500:
            raise TokenRejectedError(_error_detail(resp), resp.status_code)
        self._raise_for_status(resp)
        return _identity_from_user(resp.json())
