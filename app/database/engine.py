"""
Database engine configuration.
"""
import os
import logging
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

logger = logging.getLogger("app.database")

DEFAULT_DATABASE_URL = "sqlite:///./retentionpulse.db"


def create_database_engine(database_url: str = None) -> Engine:
    """
    Create and configure SQLAlchemy engine.

    PostgreSQL is used in deployments; SQLite is the local default.

    Args:
        database_url: Database URL, defaults to DB_URL from the environment

    Returns:
        Configured SQLAlchemy engine
    """
    database_url = database_url or os.getenv("DB_URL", DEFAULT_DATABASE_URL)
    echo = os.getenv("DB_ECHO", "false").lower() == "true"

    logger.info(f"Creating database engine for: {database_url.split('@')[1] if '@' in database_url else database_url}")

    if database_url.startswith("sqlite"):
        # Bulk recalculation uses one session per worker thread
        return create_engine(database_url, connect_args={"check_same_thread": False}, echo=echo)

    return create_engine(
        database_url,
        # Connection pool settings
        pool_size=10,
        max_overflow=20,
        pool_pre_ping=True,
        pool_recycle=3600,
        echo=echo
    )


# Global engine instance
engine = create_database_engine()
