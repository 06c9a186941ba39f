"""
Database models for merge job records.

Stores which files were merged, how many pages the output has and which
bookmarks were generated.
"""
import uuid
from datetime import datetime

from sqlalchemy import Column, String, Integer, DateTime, JSON
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def generate_uuid():
    """Generate UUID string for primary keys."""
    return str(uuid.uuid4())


class MergeRecord(Base):
    """One completed merge."""

    __tablename__ = 'merge_records'

    id = Column(String, primary_key=True, default=generate_uuid)
    filenames = Column(JSON, nullable=False)  # Input filenames in merge order
    input_count = Column(Integer, nullable=False)
    total_pages = Column(Integer, nullable=False)
    bookmark_titles = Column(JSON, default=list)
    output_size = Column(Integer, nullable=False)  # Bytes
    created_at = Column(DateTime, default=datetime.utcnow)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'id': self.id,
            'filenames': list(self.filenames or []),
            'input_count': self.input_count,
            'total_pages': self.total_pages,
            'bookmark_titles': list(self.bookmark_titles or []),
            'output_size': self.output_size,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }

    def __repr__(self):
        return f"<MergeRecord(id={self.id}, inputs={self.input_count}, pages={self.total_pages})>"
