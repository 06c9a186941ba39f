"""
Merge record database.

Engine and session handling for the merge_records table. One manager is
shared per process; the API, the CLI and init_db.py all go through it.
"""
import logging
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from config.settings import settings
from .db_models import Base, MergeRecord

logger = logging.getLogger(__name__)


def build_engine(database_url: str) -> Engine:
    """Create an engine for database_url."""
    connect_args = {}
    if database_url.startswith('sqlite'):
        # Sessions are used from FastAPI's threadpool
        connect_args['check_same_thread'] = False
    return create_engine(database_url, connect_args=connect_args, echo=False)


class DatabaseManager:
    """Owns the engine and session factory for one database URL."""

    def __init__(self, database_url: Optional[str] = None):
        """
        Args:
            database_url: SQLAlchemy URL (default: settings.database_url)
        """
        self.database_url = database_url or settings.database_url
        self.engine = build_engine(self.database_url)
        self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False)

    def has_tables(self) -> bool:
        """Check whether the merge_records table exists."""
        return inspect(self.engine).has_table(MergeRecord.__tablename__)

    def create_tables(self):
        Base.metadata.create_all(bind=self.engine)
        logger.info(f"Merge record tables ready at {self.database_url}")

    def drop_tables(self):
        Base.metadata.drop_all(bind=self.engine)
        logger.warning(f"Merge record tables dropped from {self.database_url}")

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Transactional scope: commit on success, roll back on error."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


_db_manager: Optional[DatabaseManager] = None


def get_db_manager(database_url: Optional[str] = None) -> DatabaseManager:
    """Process-wide manager; database_url only applies to the first call."""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager(database_url)
    return _db_manager


def init_database(database_url: Optional[str] = None) -> DatabaseManager:
    """Create the merge record tables if they are missing."""
    manager = get_db_manager(database_url)
    manager.create_tables()
    return manager


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """
    Session on the process-wide manager.

    Usage:
        with session_scope() as session:
            MergeStorageService(session).list_records()
    """
    with get_db_manager().session() as session:
        yield session
