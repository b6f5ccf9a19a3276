"""
SQLAlchemy-backed storage service for folders.

Single-record operations over the `folders` table. Every method runs in its
own transaction; database failures are re-raised as StoreError so the API
layer can answer with a 500 without knowing about SQLAlchemy.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Generator, List, Optional
from uuid import uuid4

from sqlalchemy import exists, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, aliased, sessionmaker

from ..database import (
    Base,
    Folder as FolderORM,
    create_engine_for_url,
)
from ..errors import ConflictError, StoreError
from .models import Folder as FolderDTO

logger = logging.getLogger(__name__)


def _folder_to_dto(folder: FolderORM) -> FolderDTO:
    return FolderDTO(
        id=folder.id,
        name=folder.name,
        parent_id=folder.parent_id,
        created_at=folder.created_at,
    )


class FolderStorage:
    """
    SQLAlchemy-based folder store used by the hierarchy service.

    Each instance owns its engine: acquired at construction, released by dispose().
    """

    def __init__(self, db_path: Optional[Path] = None, database_url: Optional[str] = None):
        self.engine, self.session_factory = self._configure_engine(db_path, database_url)
        self.dialect = self.engine.dialect.name

        if self.dialect == "sqlite":
            # Development and tests run without Alembic.
            Base.metadata.create_all(bind=self.engine)

    def insert(self, name: str, parent_id: Optional[str] = None) -> FolderDTO:
        db_folder = FolderORM(
            id=str(uuid4()),
            name=name,
            parent_id=parent_id,
            created_at=datetime.utcnow(),
        )

        with self._session_scope() as session:
            session.add(db_folder)

        return _folder_to_dto(db_folder)

    def list_all(self) -> List[FolderDTO]:
        with self._session_scope() as session:
            folders = (
                session.query(FolderORM)
                .order_by(FolderORM.created_at, FolderORM.id)
                .all()
            )
            return [_folder_to_dto(folder) for folder in folders]

    def get(self, folder_id: str) -> Optional[FolderDTO]:
        with self._session_scope() as session:
            folder = session.get(FolderORM, folder_id)
            return _folder_to_dto(folder) if folder else None

    def find_root(self) -> Optional[FolderDTO]:
        with self._session_scope() as session:
            folder = (
                session.query(FolderORM)
                .filter(FolderORM.parent_id.is_(None))
                .order_by(FolderORM.created_at, FolderORM.id)
                .first()
            )
            return _folder_to_dto(folder) if folder else None

    def has_children(self, folder_id: str) -> bool:
        with self._session_scope() as session:
            return session.query(
                exists().where(FolderORM.parent_id == folder_id)
            ).scalar()

    def delete_leaf(self, folder_id: str) -> bool:
        """
        Delete a folder only if no other folder points at it.

        The childless check and the delete are one statement, so a child
        inserted concurrently either blocks the delete or is rejected by the
        foreign key. Returns False when nothing was deleted.
        """
        child = aliased(FolderORM)
        with self._session_scope() as session:
            result = (
                session.query(FolderORM)
                .filter(
                    FolderORM.id == folder_id,
                    ~exists().where(child.parent_id == folder_id),
                )
                .delete(synchronize_session=False)
            )
            return result > 0

    def ping(self) -> None:
        """Round-trip to the database; raises StoreError when unreachable."""
        with self._session_scope() as session:
            session.execute(text("SELECT 1"))

    def dispose(self) -> None:
        self.engine.dispose()

    def _configure_engine(
        self,
        db_path: Optional[Path],
        database_url: Optional[str],
    ) -> tuple[Engine, sessionmaker]:
        if not database_url and db_path:
            database_url = f"sqlite:///{Path(db_path).resolve()}"

        # Falls back to DATABASE_URL / the development SQLite file.
        engine = create_engine_for_url(database_url)
        factory = sessionmaker(
            bind=engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            future=True,
        )
        return engine, factory

    @contextmanager
    def _session_scope(self) -> Generator[Session, None, None]:
        session = self.session_factory()
        try:
            yield session
            session.commit()
        except IntegrityError as e:
            session.rollback()
            # Foreign key or single-root index rejected the write.
            logger.warning("Integrity error on folders table: %s", e.orig)
            raise ConflictError("Folder hierarchy changed concurrently; please retry.") from e
        except SQLAlchemyError as e:
            session.rollback()
            logger.exception("Folder store error")
            raise StoreError("Folder store is unavailable.") from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
