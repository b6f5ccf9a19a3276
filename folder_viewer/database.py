"""
Central SQLAlchemy models and session utilities.

These definitions power both Alembic migrations and runtime ORM queries.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from sqlalchemy import (
    Column,
    ForeignKey,
    Index,
    String,
    Text,
    TIMESTAMP,
    create_engine,
    event,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

logger = logging.getLogger(__name__)

Base = declarative_base()


class Folder(Base):
    """
    Folders table. A NULL parent_id marks the root.

    The self-referencing foreign key refuses to delete a folder that still has
    children, so the store itself never holds an orphan. The partial unique
    index admits at most one row with a NULL parent_id.
    """
    __tablename__ = "folders"

    id = Column(String(36), primary_key=True)
    name = Column(Text, nullable=False)
    parent_id = Column(
        String(36),
        ForeignKey("folders.id", ondelete="RESTRICT"),
        nullable=True,
    )
    created_at = Column(TIMESTAMP, nullable=False, server_default=func.now())

    __table_args__ = (
        Index("idx_folders_parent_id", "parent_id"),
        Index("idx_folders_created", "created_at"),
        Index(
            "uq_folders_single_root",
            parent_id.is_(None),
            unique=True,
            sqlite_where=parent_id.is_(None),
            postgresql_where=parent_id.is_(None),
        ),
    )


def get_database_url() -> str:
    """
    Get database URL from environment, defaulting to SQLite.

    Returns:
        Database connection string
    """
    database_url = os.getenv("DATABASE_URL")

    if database_url:
        # PostgreSQL
        return database_url

    flask_env = os.getenv("FLASK_ENV", "development")
    if flask_env == "production":
        # In production, we must have DATABASE_URL. Do not fallback to SQLite.
        raise ValueError("DATABASE_URL environment variable is not set in production environment!")

    # SQLite (development)
    db_path = Path(__file__).parent.parent / ".folders.db"
    logger.warning("Using SQLite database at %s", db_path)
    return f"sqlite:///{db_path}"


def create_engine_for_url(database_url: Optional[str] = None) -> Engine:
    """Build a SQLAlchemy engine for the given URL (or default environment)."""
    url = database_url or get_database_url()
    engine = create_engine(
        url,
        future=True,
        echo=False,
        pool_pre_ping=True,
    )

    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _set_sqlite_pragmas)

    return engine


def _set_sqlite_pragmas(dbapi_connection, connection_record):
    """
    Apply SQLite pragmas for better consistency (WAL, foreign keys).

    Foreign keys are off by default in SQLite; the folders table relies on them.
    """
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()
