"""Shared fixtures for tests: in-memory SQLite sessions and seeded rows."""

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from signalsafe.models import Base, Establishment, Jammer, User


def make_session() -> Session:
    """Fresh in-memory database with every table created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)()


def seed_user(db: Session, user_id: str, email: str, is_admin: bool = False) -> User:
    user = User(id=user_id, email=email, user_name=email, is_admin=is_admin)
    db.add(user)
    db.commit()
    return user


def seed_establishment(db: Session, user_id: str, nome: str, cep: str = "01000-000") -> Establishment:
    establishment = Establishment(user_id=user_id, nome=nome, cep=cep)
    db.add(establishment)
    db.commit()
    return establishment


def seed_jammer(
    db: Session, establishment_id: int, estado_jammer: bool = False, jammer_id: int | None = None
) -> Jammer:
    jammer = Jammer(id=jammer_id, id_estabelecimento=establishment_id, estado_jammer=estado_jammer)
    db.add(jammer)
    db.commit()
    return jammer
