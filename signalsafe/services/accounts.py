"""Account operations: sign-up, login, password reset and session verification."""

import logging

from signalsafe.core.result import (
    Ok,
    Result,
    conflict,
    internal_error,
    unauthenticated,
    validation_error,
)
from signalsafe.core.security import PASSWORD_MIN_LEN, is_valid_email, is_valid_password
from signalsafe.schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    LoginUser,
    MessageResponse,
    ResetPasswordRequest,
    SignupRequest,
    SignupResponse,
)
from signalsafe.services.identity import (
    EmailAlreadyRegisteredError,
    IdentityProvider,
    IdentityProviderError,
    InvalidCredentialsError,
)
from signalsafe.services.store import RelationalStore

logger = logging.getLogger(__name__)

MSG_CREDENTIALS_REQUIRED = "E-mail e senha são obrigatórios."
MSG_INVALID_EMAIL = "E-mail inválido."
MSG_PASSWORD_TOO_SHORT = f"A senha deve ter no mínimo {PASSWORD_MIN_LEN} caracteres."
MSG_EMAIL_TAKEN = "E-mail já está cadastrado."
MSG_SIGNUP_OK = "Usuário cadastrado com sucesso."
MSG_BAD_CREDENTIALS = "E-mail ou senha incorretos."
MSG_LOGIN_OK = "Login realizado com sucesso."
MSG_EMAIL_REQUIRED = "O e-mail é obrigatório."
MSG_RESET_SENT = (
    "Se o e-mail estiver registrado, você receberá um link de redefinição em sua caixa de entrada."
)
MSG_RESET_FIELDS_REQUIRED = "Token e nova senha são obrigatórios."
MSG_RESET_FAILED = "Erro ao atualizar senha."
MSG_RESET_OK = "Senha atualizada com sucesso."


def _provider_failure(e: IdentityProviderError) -> Result:
    """Client-side provider rejections keep their message; the rest are internal errors."""
    if e.status_code is not None and 400 <= e.status_code < 500:
        return validation_error(e.message)
    logger.error("Identity provider failure: %s", e.message)
    return internal_error()


def sign_up(body: SignupRequest, provider: IdentityProvider, store: RelationalStore) -> Result[SignupResponse]:
    """Validate input, register the identity and create the users row."""
    email = (body.email or "").strip()
    password = body.password or ""
    if not email or not password:
        return validation_error(MSG_CREDENTIALS_REQUIRED)
    if not is_valid_email(email):
        return validation_error(MSG_INVALID_EMAIL)
    if not is_valid_password(password):
        return validation_error(MSG_PASSWORD_TOO_SHORT)

    if store.find_user_by_email(email) is not None:
        return conflict(MSG_EMAIL_TAKEN)

    try:
        identity = provider.sign_up(email, password)
    except EmailAlreadyRegisteredError:
        return conflict(MSG_EMAIL_TAKEN)
    except IdentityProviderError as e:
        return _provider_failure(e)

    store.insert_user(identity.id, email, user_name=email, is_admin=False)
    logger.info("User signed up", extra={"user_id": identity.id})
    return Ok(SignupResponse(message=MSG_SIGNUP_OK, userId=identity.id))


def login(body: LoginRequest, provider: IdentityProvider, store: RelationalStore) -> Result[LoginResponse]:
    email = (body.email or "").strip()
    password = body.password or ""
    if not email or not password:
        return validation_error(MSG_CREDENTIALS_REQUIRED)

    try:
        session = provider.sign_in(email, password)
    except InvalidCredentialsError:
        return unauthenticated(MSG_BAD_CREDENTIALS)
    except IdentityProviderError as e:
        return _provider_failure(e)

    profile = store.get_user(session.user.id)
    user = LoginUser(
        id=session.user.id,
        email=session.user.email,
        user_name=profile.user_name if profile is not None else None,
        is_admin=bool(profile.is_admin) if profile is not None else False,
    )
    return Ok(LoginResponse(message=MSG_LOGIN_OK, session=session, user=user))


def forgot_password(
    body: ForgotPasswordRequest, provider: IdentityProvider, redirect_to: str
) -> Result[MessageResponse]:
    """Ask the provider to deliver a reset link; the answer never reveals whether the email exists."""
    email = (body.email or "").strip()
    if not email:
        return validation_error(MSG_EMAIL_REQUIRED)
    if not is_valid_email(email):
        return validation_error(MSG_INVALID_EMAIL)

    try:
        provider.request_password_reset(email, redirect_to)
    except IdentityProviderError as e:
        logger.warning("Password reset request failed: %s", e.message)
    return Ok(MessageResponse(message=MSG_RESET_SENT))


def reset_password(body: ResetPasswordRequest, provider: IdentityProvider) -> Result[MessageResponse]:
    access_token = (body.access_token or "").strip()
    new_password = body.new_password or ""
    if not access_token or not new_password:
        return validation_error(MSG_RESET_FIELDS_REQUIRED)
    if not is_valid_password(new_password):
        return validation_error(MSG_PASSWORD_TOO_SHORT)

    try:
        provider.apply_new_password(access_token, new_password)
    except IdentityProviderError as e:
        if e.status_code is not None and e.status_code >= 500:
            logger.error("Identity provider failure: %s", e.message)
            return internal_error()
        return validation_error(MSG_RESET_FAILED)
    return Ok(MessageResponse(message=MSG_RESET_OK))
