"""
FastAPI dependencies for the merge endpoints.
"""
from typing import Generator

from sqlalchemy.orm import Session

from data.database import get_db_manager
from services.merge_service import MergeService


def get_db() -> Generator[Session, None, None]:
    """Request-scoped session on the merge record database."""
    with get_db_manager().session() as session:
        yield session


def get_merge_service() -> MergeService:
    """Merge service configured from settings (compression, limits, titles)."""
    return MergeService()
