"""ORM model for establishments (tenant-owned sites holding jammers)."""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from signalsafe.models.base import Base


class Establishment(Base):
    """Site owned by exactly one user for its whole lifetime."""

    __tablename__ = "establishment"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    nome = Column(String(255), nullable=False)
    cep = Column(String(16), nullable=False)

    owner = relationship("User", back_populates="establishments")
    jammers = relationship(
        "Jammer",
        back_populates="establishment",
        order_by="Jammer.id",
    )
