"""Request/response schemas for authentication endpoints and resolved identities."""

from pydantic import BaseModel, Field


class Identity(BaseModel):
    """Stable identity as issued by the identity provider."""

    id: str
    email: str


class Principal(Identity):
    """Identity resolved from the request's bearer token."""

    pass


class AuthSession(BaseModel):
    """Session returned by the identity provider after sign-in."""

    access_token: str = Field(..., description="Bearer access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int | None = Field(default=None, description="Lifetime in seconds")
    refresh_token: str | None = Field(default=None, description="Refresh token, if issued")
    user: Identity


# Request bodies keep every field optional so that missing fields are reported
# with the same messages as malformed ones, not as generic 422s.
class SignupRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class ForgotPasswordRequest(BaseModel):
    email: str | None = None


class ResetPasswordRequest(BaseModel):
    access_token: str | None = None
    new_password: str | None = None


class MessageResponse(BaseModel):
    message: str


class SignupResponse(BaseModel):
    message: str
    userId: str


class LoginUser(Identity):
    """Identity merged with the profile row (display name and admin flag)."""

    user_name: str | None = None
    is_admin: bool = False


class LoginResponse(BaseModel):
    message: str
    session: AuthSession
    user: LoginUser


class VerifySessionResponse(BaseModel):
    user: Principal
