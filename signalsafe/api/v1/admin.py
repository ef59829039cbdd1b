"""Admin routes: full access to users, establishments and jammers (require_admin)."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from signalsafe.api.deps import Store, json_body, require_admin
from signalsafe.api.responses import respond
from signalsafe.schemas.resources import (
    AdminEstablishmentsListResponse,
    AdminJammersListResponse,
    CreatedJammerResponse,
    CreateEstablishmentRequest,
    CreateJammerRequest,
    EstablishmentResponse,
    JammerResponse,
    UsersListResponse,
)
from signalsafe.services import admin

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/usuarios", response_model=UsersListResponse)
def list_users(store: Store) -> JSONResponse:
    return respond(admin.list_users(store))


@router.post(
    "/estabelecimento",
    response_model=EstablishmentResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_establishment(
    body: Annotated[
        CreateEstablishmentRequest, Depends(json_body(CreateEstablishmentRequest, require_admin))
    ],
    store: Store,
) -> JSONResponse:
    return respond(admin.create_establishment(store, body), status.HTTP_201_CREATED)


@router.post(
    "/jammer",
    response_model=CreatedJammerResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_jammer(
    body: Annotated[CreateJammerRequest, Depends(json_body(CreateJammerRequest, require_admin))],
    store: Store,
) -> JSONResponse:
    return respond(admin.create_jammer(store, body), status.HTTP_201_CREATED)


@router.get("/estabelecimentos", response_model=AdminEstablishmentsListResponse)
def list_establishments(store: Store) -> JSONResponse:
    """All establishments with their owner's email and name."""
    return respond(admin.list_all_establishments(store))


@router.get("/jammers", response_model=AdminJammersListResponse)
def list_jammers(store: Store) -> JSONResponse:
    """All jammers with their establishment and its owner."""
    return respond(admin.list_all_jammers(store))


@router.delete("/estabelecimento/{establishment_id}", response_model=EstablishmentResponse)
def delete_establishment(establishment_id: int, store: Store) -> JSONResponse:
    """Delete an establishment together with its jammers."""
    return respond(admin.delete_establishment(store, establishment_id))


@router.delete("/jammer/{jammer_id}", response_model=JammerResponse)
def delete_jammer(jammer_id: int, store: Store) -> JSONResponse:
    return respond(admin.delete_jammer(store, jammer_id))
