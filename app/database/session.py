"""
Database session management.
"""
import logging
from typing import Callable, Generator
from sqlalchemy.orm import sessionmaker, Session
from contextlib import contextmanager

from app.database.engine import engine

logger = logging.getLogger("app.database")

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_session() -> Generator[Session, None, None]:
    """
    Dependency to get database session.

    Yields:
        Database session
    """
    session = SessionLocal()
    try:
        logger.debug("Database session created")
        yield session
    except Exception as e:
        logger.error(f"Database session error: {e}")
        session.rollback()
        raise
    finally:
        logger.debug("Database session closed")
        session.close()


def get_session_factory() -> Callable[[], Session]:
    """
    Dependency returning the session factory.

    Bulk jobs open one session per student so work can run in parallel.
    """
    return SessionLocal


@contextmanager
def get_db_session():
    """
    Context manager for database session.
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
