"""Relational store: filtered reads, inserts, updates, deletes and single-hop joins.

Thin wrapper over a SQLAlchemy session for the users, establishment and jammers
tables. Every mutation commits on its own; nothing spans more than one call.
"""

import logging
from collections.abc import Iterable

from sqlalchemy.orm import Session, joinedload

from signalsafe.models import Establishment, Jammer, User

logger = logging.getLogger(__name__)


class RelationalStore:
    """Data access for the access-control core and the route services."""

    def __init__(self, session: Session) -> None:
        self.session = session

    # Users

    def get_user(self, user_id: str) -> User | None:
        return self.session.query(User).filter(User.id == user_id).first()

    def find_user_by_email(self, email: str) -> User | None:
        return self.session.query(User).filter(User.email == email).first()

    def is_admin(self, user_id: str) -> bool:
        """Admin flag of the user record; a missing record is never admin."""
        row = self.session.query(User.is_admin).filter(User.id == user_id).first()
        return bool(row and row.is_admin)

    def insert_user(self, user_id: str, email: str, user_name: str, is_admin: bool = False) -> User:
        user = User(id=user_id, email=email, user_name=user_name, is_admin=is_admin)
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return user

    def set_admin(self, user_id: str, is_admin: bool) -> User | None:
        user = self.get_user(user_id)
        if user is None:
            return None
        user.is_admin = is_admin
        self.session.commit()
        self.session.refresh(user)
        return user

    def list_users(self) -> list[User]:
        return self.session.query(User).order_by(User.email).all()

    # Establishments

    def get_establishment(self, establishment_id: int) -> Establishment | None:
        """Establishment joined with its owning user (one hop)."""
        return (
            self.session.query(Establishment)
            .options(joinedload(Establishment.owner))
            .filter(Establishment.id == establishment_id)
            .first()
        )

    def list_establishments(self, user_id: str | None = None) -> list[Establishment]:
        """Establishments ordered by name; all of them when user_id is None."""
        query = self.session.query(Establishment).options(joinedload(Establishment.owner))
        if user_id is not None:
            query = query.filter(Establishment.user_id == user_id)
        return query.order_by(Establishment.nome, Establishment.id).all()

    def insert_establishment(self, user_id: str, nome: str, cep: str) -> Establishment:
        establishment = Establishment(user_id=user_id, nome=nome, cep=cep)
        self.session.add(establishment)
        self.session.commit()
        self.session.refresh(establishment)
        return establishment

    def delete_establishment(self, establishment_id: int) -> Establishment | None:
        """Delete one establishment; returns the deleted row or None if absent."""
        establishment = (
            self.session.query(Establishment)
            .filter(Establishment.id == establishment_id)
            .first()
        )
        if establishment is None:
            return None
        self.session.delete(establishment)
        self.session.commit()
        return establishment

    # Jammers

    def get_jammer(self, jammer_id: int) -> Jammer | None:
        """Jammer joined with its establishment and that establishment's owner."""
        return (
            self.session.query(Jammer)
            .options(joinedload(Jammer.establishment).joinedload(Establishment.owner))
            .filter(Jammer.id == jammer_id)
            .first()
        )

    def list_jammers(self, establishment_ids: Iterable[int] | None = None) -> list[Jammer]:
        """Jammers ordered by id, optionally restricted to some establishments."""
        query = self.session.query(Jammer).options(
            joinedload(Jammer.establishment).joinedload(Establishment.owner)
        )
        if establishment_ids is not None:
            ids = list(establishment_ids)
            if not ids:
                return []
            query = query.filter(Jammer.id_estabelecimento.in_(ids))
        return query.order_by(Jammer.id).all()

    def insert_jammer(self, establishment_id: int, estado_jammer: bool = False) -> Jammer:
        jammer = Jammer(id_estabelecimento=establishment_id, estado_jammer=estado_jammer)
        self.session.add(jammer)
        self.session.commit()
        self.session.refresh(jammer)
        return jammer

    def update_jammer_state(self, jammer_id: int, estado_jammer: bool) -> Jammer | None:
        jammer = self.session.query(Jammer).filter(Jammer.id == jammer_id).first()
        if jammer is None:
            return None
        jammer.estado_jammer = estado_jammer
        self.session.commit()
        self.session.refresh(jammer)
        return jammer

    def delete_jammer(self, jammer_id: int) -> Jammer | None:
        jammer = self.session.query(Jammer).filter(Jammer.id == jammer_id).first()
        if jammer is None:
            return None
        self.session.delete(jammer)
        self.session.commit()
        return jammer

    def delete_jammers_of(self, establishment_id: int) -> int:
        """Delete every jammer of an establishment; returns how many were removed."""
        deleted = (
            self.session.query(Jammer)
            .filter(Jammer.id_estabelecimento == establishment_id)
            .delete(synchronize_session=False)
        )
        self.session.commit()
        if deleted:
            logger.info(
                "Deleted jammers of establishment",
                extra={"establishment_id": establishment_id, "jammer_count": deleted},
            )
        return deleted
