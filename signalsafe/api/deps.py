"""Request-scoped dependencies: store, identity provider, access gate and route guards."""

from collections.abc import Callable, Generator
from typing import Annotated, Any, TypeVar

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from signalsafe.api.responses import MSG_INVALID_REQUEST, invalid_request_message
from signalsafe.core.config import Settings, get_settings
from signalsafe.core.database import get_db
from signalsafe.core.result import Err, GuardRejected, validation_error
from signalsafe.schemas.auth import Principal
from signalsafe.services.access import AccessGate
from signalsafe.services.identity import (
    GoTrueIdentityProvider,
    IdentityProvider,
    LocalIdentityProvider,
)
from signalsafe.services.store import RelationalStore

security = HTTPBearer(auto_error=False)

ModelT = TypeVar("ModelT", bound=BaseModel)


def get_store(db: Annotated[Session, Depends(get_db)]) -> RelationalStore:
    return RelationalStore(db)


def get_identity_provider(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> Generator[IdentityProvider, None, None]:
    """Identity provider selected by IDENTITY_PROVIDER; one instance per request."""
    if settings.IDENTITY_PROVIDER == "gotrue":
        provider = GoTrueIdentityProvider.from_settings(settings)
        try:
            yield provider
        finally:
            provider.close()
    else:
        yield LocalIdentityProvider(db, settings)


def get_access_gate(
    provider: Annotated[IdentityProvider, Depends(get_identity_provider)],
    store: Annotated[RelationalStore, Depends(get_store)],
) -> AccessGate:
    return AccessGate(provider, store)


def require_authenticated(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    gate: Annotated[AccessGate, Depends(get_access_gate)],
) -> Principal:
    """Guard: resolve the bearer token or stop the request with 401."""
    token = credentials.credentials if credentials is not None else None
    result = gate.resolve(token)
    if isinstance(result, Err):
        raise GuardRejected(result)
    return result.value


def require_admin(
    principal: Annotated[Principal, Depends(require_authenticated)],
    gate: Annotated[AccessGate, Depends(get_access_gate)],
) -> Principal:
    """Guard: require an admin-flagged principal, otherwise stop with 403."""
    result = gate.authorize_admin(principal)
    if isinstance(result, Err):
        raise GuardRejected(result)
    return result.value


CurrentPrincipal = Annotated[Principal, Depends(require_authenticated)]
Gate = Annotated[AccessGate, Depends(get_access_gate)]
Store = Annotated[RelationalStore, Depends(get_store)]
Provider = Annotated[IdentityProvider, Depends(get_identity_provider)]


def json_body(
    model: type[ModelT], guard: Callable[..., Principal] = require_authenticated
) -> Callable[..., Any]:
    """Body dependency that decodes the JSON payload only after the guard has passed.

    A body parameter declared on the route is parsed before any dependency runs,
    so a request with no token and a broken body would be answered with 400.
    """

    async def dependency(
        request: Request, _principal: Annotated[Principal, Depends(guard)]
    ) -> ModelT:
        try:
            payload = await request.json()
        except ValueError:
            raise GuardRejected(validation_error(MSG_INVALID_REQUEST)) from None
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            raise GuardRejected(validation_error(invalid_request_message(exc.errors()))) from None

    return dependency
