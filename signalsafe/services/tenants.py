"""Tenant-facing reads and jammer state updates, scoped by the access gate."""

import logging

from signalsafe.core.result import Ok, Result, not_found, validation_error
from signalsafe.models import Establishment, Jammer
from signalsafe.schemas.auth import Principal
from signalsafe.schemas.resources import (
    EstablishmentOut,
    EstablishmentsCompleteResponse,
    EstablishmentsListResponse,
    EstablishmentWithJammers,
    JammerOut,
    JammerResponse,
    JammersListResponse,
    JammerStateRequest,
)
from signalsafe.services.access import MSG_JAMMER_NOT_FOUND, AccessGate

logger = logging.getLogger(__name__)

MSG_STATE_REQUIRED = "estado_jammer é obrigatório."
MSG_JAMMER_UPDATED = "Jammer atualizado com sucesso."


def list_establishments(
    gate: AccessGate, principal: Principal, user_id: str
) -> Result[EstablishmentsListResponse]:
    allowed = gate.authorize_self(principal, user_id)
    if not allowed.ok:
        return allowed
    rows = gate.store.list_establishments(user_id=user_id)
    items = [EstablishmentOut.model_validate(e) for e in rows]
    return Ok(EstablishmentsListResponse(estabelecimentos=items, total=len(items)))


def group_jammers(
    establishments: list[Establishment], jammers: list[Jammer]
) -> list[EstablishmentWithJammers]:
    """Attach jammers to their establishments, keeping the establishments' order."""
    by_establishment: dict[int, list[JammerOut]] = {e.id: [] for e in establishments}
    for jammer in jammers:
        bucket = by_establishment.get(jammer.id_estabelecimento)
        if bucket is not None:
            bucket.append(JammerOut.model_validate(jammer))
    result = []
    for establishment in establishments:
        nested = by_establishment[establishment.id]
        base = EstablishmentOut.model_validate(establishment)
        result.append(
            EstablishmentWithJammers(
                **base.model_dump(),
                jammers=nested,
                total_jammers=len(nested),
            )
        )
    return result


def list_establishments_complete(
    gate: AccessGate, principal: Principal, user_id: str
) -> Result[EstablishmentsCompleteResponse]:
    """Establishments of a user with their jammers nested; jammers fetched in one batch."""
    allowed = gate.authorize_self(principal, user_id)
    if not allowed.ok:
        return allowed
    establishments = gate.store.list_establishments(user_id=user_id)
    jammers = gate.store.list_jammers(establishment_ids=[e.id for e in establishments])
    items = group_jammers(establishments, jammers)
    return Ok(
        EstablishmentsCompleteResponse(
            estabelecimentos=items,
            total_estabelecimentos=len(items),
            total_jammers=sum(e.total_jammers for e in items),
        )
    )


def list_jammers(
    gate: AccessGate, principal: Principal, establishment_id: int
) -> Result[JammersListResponse]:
    allowed = gate.authorize_establishment(principal, establishment_id)
    if not allowed.ok:
        return allowed
    rows = gate.store.list_jammers(establishment_ids=[allowed.value.id])
    items = [JammerOut.model_validate(j) for j in rows]
    return Ok(JammersListResponse(jammers=items, total=len(items)))


def set_jammer_state(
    gate: AccessGate, principal: Principal, jammer_id: int, body: JammerStateRequest
) -> Result[JammerResponse]:
    """Set the operating state. Repeating the same state is a no-op, not an error."""
    if body.estado_jammer is None:
        return validation_error(MSG_STATE_REQUIRED)
    allowed = gate.authorize_jammer(principal, jammer_id)
    if not allowed.ok:
        return allowed
    updated = gate.store.update_jammer_state(jammer_id, body.estado_jammer)
    if updated is None:
        return not_found(MSG_JAMMER_NOT_FOUND)
    logger.info(
        "Jammer state updated",
        extra={"jammer_id": updated.id, "estado_jammer": updated.estado_jammer},
    )
    return Ok(JammerResponse(message=MSG_JAMMER_UPDATED, jammer=JammerOut.model_validate(updated)))
