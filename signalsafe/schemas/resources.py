"""Schemas for users, establishments and jammers (requests, rows and list envelopes)."""

from pydantic import BaseModel, ConfigDict, Field, StrictBool


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    user_name: str
    is_admin: bool


class OwnerSummary(BaseModel):
    """Owner fields embedded in establishment rows on admin listings."""

    model_config = ConfigDict(from_attributes=True)

    email: str
    user_name: str | None = None


class EstablishmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    nome: str
    cep: str


class EstablishmentWithOwner(EstablishmentOut):
    owner: OwnerSummary | None = Field(default=None, serialization_alias="users")


class JammerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    id_estabelecimento: int
    estado_jammer: bool


class JammerWithEstablishment(JammerOut):
    establishment: EstablishmentWithOwner | None = Field(
        default=None, serialization_alias="estabelecimento"
    )


class EstablishmentWithJammers(EstablishmentOut):
    jammers: list[JammerOut]
    total_jammers: int


# Requests


class JammerStateRequest(BaseModel):
    estado_jammer: StrictBool | None = None


class CreateEstablishmentRequest(BaseModel):
    user_id: str | None = None
    nome: str | None = None
    cep: str | None = None


class CreateJammerRequest(BaseModel):
    id_estabelecimento: int | None = None
    estado_jammer: StrictBool | None = None


# Responses


class UsersListResponse(BaseModel):
    usuarios: list[UserOut]
    total: int


class EstablishmentsListResponse(BaseModel):
    estabelecimentos: list[EstablishmentOut]
    total: int


class AdminEstablishmentsListResponse(BaseModel):
    estabelecimentos: list[EstablishmentWithOwner]
    total: int


class EstablishmentsCompleteResponse(BaseModel):
    estabelecimentos: list[EstablishmentWithJammers]
    total_estabelecimentos: int
    total_jammers: int


class JammersListResponse(BaseModel):
    jammers: list[JammerOut]
    total: int


class AdminJammersListResponse(BaseModel):
    jammers: list[JammerWithEstablishment]
    total: int


class JammerResponse(BaseModel):
    message: str
    jammer: JammerOut


class EstablishmentResponse(BaseModel):
    message: str
    estabelecimento: EstablishmentOut


class CreatedJammerResponse(BaseModel):
    message: str
    jammer: JammerOut
    estabelecimento: EstablishmentWithOwner
