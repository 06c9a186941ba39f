"""Data access layer - Merge record model and database sessions."""

from .db_models import Base, MergeRecord, generate_uuid
from .database import (
    DatabaseManager,
    build_engine,
    get_db_manager,
    init_database,
    session_scope
)

__all__ = [
    # Models
    'Base',
    'MergeRecord',
    'generate_uuid',

    # Database
    'DatabaseManager',
    'build_engine',
    'get_db_manager',
    'init_database',
    'session_scope'
]
