"""Administrative operations over the full resource space (no ownership checks)."""

import logging

from signalsafe.core.result import Ok, Result, not_found, validation_error
from signalsafe.schemas.resources import (
    AdminEstablishmentsListResponse,
    AdminJammersListResponse,
    CreatedJammerResponse,
    CreateEstablishmentRequest,
    CreateJammerRequest,
    EstablishmentOut,
    EstablishmentResponse,
    EstablishmentWithOwner,
    JammerOut,
    JammerResponse,
    JammerWithEstablishment,
    UserOut,
    UsersListResponse,
)
from signalsafe.services.access import MSG_ESTABLISHMENT_NOT_FOUND, MSG_JAMMER_NOT_FOUND
from signalsafe.services.store import RelationalStore

logger = logging.getLogger(__name__)

MSG_USER_NOT_FOUND = "Usuário não encontrado."
MSG_ESTABLISHMENT_FIELDS_REQUIRED = "user_id, nome e cep são obrigatórios."
MSG_ESTABLISHMENT_ID_REQUIRED = "id_estabelecimento é obrigatório."
MSG_ESTABLISHMENT_DELETED = "Estabelecimento e seus jammers deletados com sucesso."
MSG_JAMMER_DELETED = "Jammer deletado com sucesso."


def list_users(store: RelationalStore) -> Result[UsersListResponse]:
    users = [UserOut.model_validate(u) for u in store.list_users()]
    return Ok(UsersListResponse(usuarios=users, total=len(users)))


def create_establishment(
    store: RelationalStore, body: CreateEstablishmentRequest
) -> Result[EstablishmentResponse]:
    """Create an establishment for an existing user."""
    user_id = (body.user_id or "").strip()
    nome = (body.nome or "").strip()
    cep = (body.cep or "").strip()
    if not user_id or not nome or not cep:
        return validation_error(MSG_ESTABLISHMENT_FIELDS_REQUIRED)

    owner = store.get_user(user_id)
    if owner is None:
        return not_found(MSG_USER_NOT_FOUND)

    establishment = store.insert_establishment(user_id=user_id, nome=nome, cep=cep)
    logger.info(
        "Establishment created",
        extra={"establishment_id": establishment.id, "user_id": user_id},
    )
    return Ok(
        EstablishmentResponse(
            message=f'Estabelecimento "{nome}" criado com sucesso para {owner.email}.',
            estabelecimento=EstablishmentOut.model_validate(establishment),
        )
    )


def create_jammer(store: RelationalStore, body: CreateJammerRequest) -> Result[CreatedJammerResponse]:
    """Attach a new jammer (off unless stated otherwise) to an existing establishment."""
    if not body.id_estabelecimento:
        return validation_error(MSG_ESTABLISHMENT_ID_REQUIRED)

    establishment = store.get_establishment(body.id_estabelecimento)
    if establishment is None:
        return not_found(MSG_ESTABLISHMENT_NOT_FOUND)
    parent = EstablishmentWithOwner.model_validate(establishment)

    jammer = store.insert_jammer(
        establishment_id=establishment.id,
        estado_jammer=bool(body.estado_jammer) if body.estado_jammer is not None else False,
    )
    logger.info(
        "Jammer created",
        extra={"jammer_id": jammer.id, "establishment_id": establishment.id},
    )
    return Ok(
        CreatedJammerResponse(
            message=f'Jammer criado com sucesso para "{parent.nome}".',
            jammer=JammerOut.model_validate(jammer),
            estabelecimento=parent,
        )
    )


def list_all_establishments(store: RelationalStore) -> Result[AdminEstablishmentsListResponse]:
    items = [EstablishmentWithOwner.model_validate(e) for e in store.list_establishments()]
    return Ok(AdminEstablishmentsListResponse(estabelecimentos=items, total=len(items)))


def list_all_jammers(store: RelationalStore) -> Result[AdminJammersListResponse]:
    items = [JammerWithEstablishment.model_validate(j) for j in store.list_jammers()]
    return Ok(AdminJammersListResponse(jammers=items, total=len(items)))


def delete_establishment(store: RelationalStore, establishment_id: int) -> Result[EstablishmentResponse]:
    """
    Delete an establishment and its jammers.

    Jammers go first, then the establishment, as two separate store calls with
    no transaction around them; a failure in between leaves orphaned jammers.
    """
    store.delete_jammers_of(establishment_id)
    deleted = store.delete_establishment(establishment_id)
    if deleted is None:
        return not_found(MSG_ESTABLISHMENT_NOT_FOUND)
    logger.info("Establishment deleted", extra={"establishment_id": establishment_id})
    return Ok(
        EstablishmentResponse(
            message=MSG_ESTABLISHMENT_DELETED,
            estabelecimento=EstablishmentOut.model_validate(deleted),
        )
    )


def delete_jammer(store: RelationalStore, jammer_id: int) -> Result[JammerResponse]:
    deleted = store.delete_jammer(jammer_id)
    if deleted is None:
        return not_found(MSG_JAMMER_NOT_FOUND)
    logger.info("Jammer deleted", extra={"jammer_id": jammer_id})
    return Ok(JammerResponse(message=MSG_JAMMER_DELETED, jammer=JammerOut.model_validate(deleted)))
