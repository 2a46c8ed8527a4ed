"""
Database connection management for the enrichment store.

Environment variables:
    - DATABASE_URL: SQLAlchemy URL (defaults to a SQLite file at the project root)
"""

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

from .config import DATABASE_URL
from .models import Base

_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    DATABASE_URL,
    pool_pre_ping=True,
    echo=False,
    connect_args=_connect_args,
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


def init_db() -> None:
    """Create tables that don't exist yet."""
    Base.metadata.create_all(bind=engine)


@contextmanager
def session_scope(factory: sessionmaker | None = None) -> Iterator[Session]:
    """Transactional scope: commit on success, roll back on error."""
    db = (factory or SessionLocal)()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
