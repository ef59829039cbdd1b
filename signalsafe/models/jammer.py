"""ORM model for jammers (remotely toggled devices)."""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, false
from sqlalchemy.orm import relationship

from signalsafe.models.base import Base


class Jammer(Base):
    """
    Device attached to one establishment.

    Its effective owner is the owner of that establishment.
    """

    __tablename__ = "jammers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    id_estabelecimento = Column(
        Integer,
        ForeignKey("establishment.id"),
        nullable=False,
        index=True,
    )
    estado_jammer = Column(Boolean, nullable=False, default=False, server_default=false())

    establishment = relationship("Establishment", back_populates="jammers")
