"""ORM model for application users (tenants and administrators)."""

from sqlalchemy import Boolean, Column, String, false
from sqlalchemy.orm import relationship

from signalsafe.models.base import Base


class User(Base):
    """
    Tenant account. The id is issued by the identity provider at sign-up.

    is_admin is changed only by direct data administration; when true the
    user bypasses every ownership check.
    """

    __tablename__ = "users"

    id = Column(String(64), primary_key=True)
    email = Column(String(320), nullable=False, unique=True, index=True)
    user_name = Column(String(255), nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False, server_default=false())

    establishments = relationship(
        "Establishment",
        back_populates="owner",
        order_by="Establishment.nome",
    )
