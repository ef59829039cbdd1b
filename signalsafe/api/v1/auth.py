"""Sign-up, login, password reset and session verification."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from signalsafe.api.deps import CurrentPrincipal, Provider, Store
from signalsafe.api.responses import respond
from signalsafe.core.config import get_settings
from signalsafe.core.result import Ok
from signalsafe.schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    ResetPasswordRequest,
    SignupRequest,
    SignupResponse,
    VerifySessionResponse,
)
from signalsafe.services import accounts

router = APIRouter()


@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
)
def signup(body: SignupRequest, provider: Provider, store: Store) -> JSONResponse:
    """Register with email and password (min. 6 characters); creates the user profile."""
    return respond(accounts.sign_up(body, provider, store), status.HTTP_201_CREATED)


@router.post("/login", response_model=LoginResponse)
def login(body: LoginRequest, provider: Provider, store: Store) -> JSONResponse:
    """
    Authenticate with email and password; returns the session and the user profile.
    Include session.access_token in the Authorization header as: Bearer <access_token>
    """
    return respond(accounts.login(body, provider, store))


@router.post("/forgot-password", response_model=MessageResponse)
def forgot_password(body: ForgotPasswordRequest, provider: Provider) -> JSONResponse:
    redirect_to = get_settings().PASSWORD_RESET_REDIRECT_URL
    return respond(accounts.forgot_password(body, provider, redirect_to))


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(body: ResetPasswordRequest, provider: Provider) -> JSONResponse:
    return respond(accounts.reset_password(body, provider))


@router.get("/verify-session", response_model=VerifySessionResponse)
def verify_session(principal: CurrentPrincipal) -> JSONResponse:
    """Return the identity behind the bearer token; 401 if missing, invalid or expired."""
    return respond(Ok(VerifySessionResponse(user=principal)))
