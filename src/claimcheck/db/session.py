"""Engine, session factory and the request-scoped session dependency."""

from __future__ import annotations

from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from claimcheck.core.settings import settings


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Registers every claimcheck table on Base.metadata for Alembic autogenerate.
import claimcheck.models  # noqa: E402,F401

_database_url = settings.effective_database_url
# SEO write-back runs in a worker thread, so SQLite connections cross threads.
_connect_args = {"check_same_thread": False} if _database_url.startswith("sqlite") else {}

engine = create_engine(
    _database_url,
    pool_pre_ping=True,
    echo=settings.sql_debug,
    connect_args=_connect_args,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a session per request; handlers commit their own work."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
