"""Database initialization and utilities."""

from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from scale_scheduler.log import get_logger

from .models import Base

DEFAULT_DB_URL = "sqlite:///scales.db"

logger = get_logger(__name__)


def create_db_engine(db_url: str = DEFAULT_DB_URL, echo: bool = False):
    """Create SQLAlchemy engine."""
    return create_engine(db_url, echo=echo)


def init_database(db_url: str = DEFAULT_DB_URL) -> None:
    """Initialize database and create all tables."""
    engine = create_db_engine(db_url)
    Base.metadata.create_all(engine)
    logger.info("Database initialized: %s", db_url)


def get_session_factory(db_url: str = DEFAULT_DB_URL):
    """Get a session factory for the database."""
    engine = create_db_engine(db_url)
    return sessionmaker(bind=engine)


def get_session(db_url: str = DEFAULT_DB_URL) -> Session:
    """Get a new database session."""
    SessionFactory = get_session_factory(db_url)
    return SessionFactory()


def reset_database(db_url: str = DEFAULT_DB_URL) -> None:
    """Recreate the schema empty; members, scales and templates are lost."""
    engine = create_db_engine(db_url)
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    logger.warning("Dropped all members, scales and templates in %s", db_url)
