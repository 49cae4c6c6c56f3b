"""Engine, session factory and declarative base."""

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from receipt_tracker.config import get_settings


def make_engine(database_url: str) -> Engine:
    """Create an engine for PostgreSQL, or for SQLite in local runs and tests.

    SQLite connections are shared between the request thread and the test
    client, so the same-thread check is turned off and no pool sizing is set.
    """
    if database_url.startswith("sqlite"):
        return create_engine(database_url, connect_args={"check_same_thread": False})
    return create_engine(database_url, pool_pre_ping=True, pool_size=5, max_overflow=10)


engine = make_engine(get_settings().database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base: Any = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Yield a session per request; closed when the request finishes."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

