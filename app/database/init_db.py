"""
Database initialization script.
"""
import logging

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel

from app.database.engine import engine as default_engine

logger = logging.getLogger("app.database")


def init_database(bind: Engine = None) -> None:
    """
    Create all tables.

    Args:
        bind: Engine to create tables on, defaults to the application engine
    """
    logger.info("Initializing database...")

    # Register table models on the metadata
    from app.models.student import Student  # noqa: F401
    from app.models.risk import RiskAssessment  # noqa: F401
    from app.models.intervention import Intervention  # noqa: F401
    from app.models.teacher import Teacher  # noqa: F401

    SQLModel.metadata.create_all(bind or default_engine)
    logger.info("Database tables created")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_database()
