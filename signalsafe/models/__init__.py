"""SQLAlchemy ORM models."""

from signalsafe.models.auth_identity import AuthIdentity
from signalsafe.models.base import Base
from signalsafe.models.establishment import Establishment
from signalsafe.models.jammer import Jammer
from signalsafe.models.user import User

__all__ = ["AuthIdentity", "Base", "Establishment", "Jammer", "User"]
