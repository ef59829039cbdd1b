"""Access control gate: bearer token resolution and ownership/role checks.

Request lifecycle:

    Unauthenticated -> (token resolved) -> Authenticated -> Authorized | Forbidden

NotFound is reachable only once authenticated, when the target resource is
absent; it is always reported before any ownership comparison. An admin-flagged
principal bypasses resource ownership comparisons; self-path routes admit only
the user named in the path.
"""

import logging

from signalsafe.core.result import (
    Ok,
    Result,
    forbidden,
    not_found,
    unauthenticated,
)
from signalsafe.models import Establishment, Jammer
from signalsafe.schemas.auth import Principal
from signalsafe.services.identity import IdentityProvider, TokenRejectedError
from signalsafe.services.store import RelationalStore

logger = logging.getLogger(__name__)

MSG_TOKEN_MISSING = "Token não fornecido."
MSG_TOKEN_INVALID = "Token inválido ou sessão expirada."
MSG_FORBIDDEN_USER_DATA = "Você não tem permissão para acessar estes dados."
MSG_FORBIDDEN_ESTABLISHMENT = "Você não tem permissão para acessar este estabelecimento."
MSG_FORBIDDEN_JAMMER = "Você não tem permissão para alterar este jammer."
MSG_ADMIN_ONLY = "Acesso negado. Apenas administradores."
MSG_ESTABLISHMENT_NOT_FOUND = "Estabelecimento não encontrado."
MSG_JAMMER_NOT_FOUND = "Jammer não encontrado."


class AccessGate:
    """Decides ALLOW / DENY for a request before any read or mutation happens."""

    def __init__(self, identity_provider: IdentityProvider, store: RelationalStore) -> None:
        self.identity_provider = identity_provider
        self.store = store

    def resolve(self, token: str | None) -> Result[Principal]:
        """Resolve a bearer token to the request principal. Never retried."""
        if not token or not token.strip():
            return unauthenticated(MSG_TOKEN_MISSING)
        try:
            identity = self.identity_provider.resolve(token.strip())
        except TokenRejectedError as e:
            logger.info("Bearer token rejected: %s", e.message)
            return unauthenticated(MSG_TOKEN_INVALID)
        return Ok(Principal(id=identity.id, email=identity.email))

    def is_admin(self, principal: Principal) -> bool:
        return self.store.is_admin(principal.id)

    def authorize_admin(self, principal: Principal) -> Result[Principal]:
        """Admin mode: allowed iff the principal's user record is admin-flagged."""
        if not self.is_admin(principal):
            return forbidden(MSG_ADMIN_ONLY)
        return Ok(principal)

    def authorize_self(self, principal: Principal, user_id: str) -> Result[Principal]:
        """Self-path mode: the path user id must be the principal's own id, admins included."""
        if principal.id == user_id:
            return Ok(principal)
        return forbidden(MSG_FORBIDDEN_USER_DATA)

    def authorize_establishment(
        self, principal: Principal, establishment_id: int
    ) -> Result[Establishment]:
        """Resource-ownership mode for an establishment (owner is one join away)."""
        establishment = self.store.get_establishment(establishment_id)
        if establishment is None:
            return not_found(MSG_ESTABLISHMENT_NOT_FOUND)
        return self._owned(
            principal, establishment.user_id, establishment, MSG_FORBIDDEN_ESTABLISHMENT
        )

    def authorize_jammer(self, principal: Principal, jammer_id: int) -> Result[Jammer]:
        """Resource-ownership mode for a jammer (owner is two joins away)."""
        jammer = self.store.get_jammer(jammer_id)
        if jammer is None:
            return not_found(MSG_JAMMER_NOT_FOUND)
        owner_id = jammer.establishment.user_id if jammer.establishment is not None else None
        return self._owned(principal, owner_id, jammer, MSG_FORBIDDEN_JAMMER)

    def _owned(self, principal: Principal, owner_id: str | None, resource, message: str) -> Result:
        if owner_id == principal.id or self.is_admin(principal):
            return Ok(resource)
        logger.warning(
            "Ownership check failed",
            extra={"principal_id": principal.id, "owner_id": owner_id},
        )
        return forbidden(message)
