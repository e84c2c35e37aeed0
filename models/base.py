"""
Database configuration and base model.

Uses SQLAlchemy 2.0 declarative style with SQLite by default.
"""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from config import DATABASE_SETTINGS, PATHS


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


DATABASE_URL = DATABASE_SETTINGS.url(PATHS)
engine = create_engine(
    DATABASE_URL,
    echo=DATABASE_SETTINGS.echo,
    connect_args={"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {},
)

# Session factory
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Context manager for database sessions."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db() -> None:
    """Initialize the database, creating all tables."""
    if DATABASE_URL.startswith("sqlite:///"):
        PATHS.data_dir.mkdir(parents=True, exist_ok=True)
    Base.metadata.create_all(bind=engine)


def reset_db() -> None:
    """Drop and recreate all tables. USE WITH CAUTION."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
