"""ORM model for credentials held by the built-in identity provider."""

from sqlalchemy import Column, DateTime, String, func

from signalsafe.models.base import Base


class AuthIdentity(Base):
    """
    Login identity (email + bcrypt hash). Only LocalIdentityProvider reads it;
    the application itself works with the users table.
    """

    __tablename__ = "auth_identities"

    id = Column(String(64), primary_key=True)
    email = Column(String(320), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
