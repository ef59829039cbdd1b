"""Pydantic request/response schemas."""

from signalsafe.schemas.auth import AuthSession, Identity, Principal
from signalsafe.schemas.health import HealthResponse
from signalsafe.schemas.resources import (
    EstablishmentOut,
    EstablishmentWithJammers,
    EstablishmentWithOwner,
    JammerOut,
    JammerWithEstablishment,
    OwnerSummary,
    UserOut,
)

__all__ = [
    "AuthSession",
    "EstablishmentOut",
    "EstablishmentWithJammers",
    "EstablishmentWithOwner",
    "HealthResponse",
    "Identity",
    "JammerOut",
    "JammerWithEstablishment",
    "OwnerSummary",
    "Principal",
    "UserOut",
]
