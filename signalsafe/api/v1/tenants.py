"""Tenant routes: a user's establishments and jammers, scoped by ownership."""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from signalsafe.api.deps import CurrentPrincipal, Gate, json_body
from signalsafe.api.responses import respond
from signalsafe.schemas.resources import (
    EstablishmentsCompleteResponse,
    EstablishmentsListResponse,
    JammerResponse,
    JammersListResponse,
    JammerStateRequest,
)
from signalsafe.services import tenants

router = APIRouter()


@router.get("/user/{user_id}/estabelecimentos", response_model=EstablishmentsListResponse)
def get_user_establishments(user_id: str, principal: CurrentPrincipal, gate: Gate) -> JSONResponse:
    """Establishments of the calling user, ordered by name."""
    return respond(tenants.list_establishments(gate, principal, user_id))


@router.get(
    "/user/{user_id}/estabelecimentos-completo",
    response_model=EstablishmentsCompleteResponse,
)
def get_user_establishments_complete(
    user_id: str, principal: CurrentPrincipal, gate: Gate
) -> JSONResponse:
    """Establishments of the calling user with their jammers and jammer counts."""
    return respond(tenants.list_establishments_complete(gate, principal, user_id))


@router.get("/estabelecimento/{establishment_id}/jammers", response_model=JammersListResponse)
def get_establishment_jammers(
    establishment_id: int, principal: CurrentPrincipal, gate: Gate
) -> JSONResponse:
    return respond(tenants.list_jammers(gate, principal, establishment_id))


@router.patch("/jammer/{jammer_id}", response_model=JammerResponse)
def patch_jammer(
    jammer_id: int,
    body: Annotated[JammerStateRequest, Depends(json_body(JammerStateRequest))],
    principal: CurrentPrincipal,
    gate: Gate,
) -> JSONResponse:
    """Turn a jammer on or off. Only the owner of its establishment (or an admin) may."""
    return respond(tenants.set_jammer_state(gate, principal, jammer_id, body))
