"""
Merge Record Storage Service

Handles CRUD operations for merge records.
"""
from typing import List, Optional

from sqlalchemy.orm import Session

from data.db_models import MergeRecord


class MergeStorageService:
    """Service for storing and retrieving merge records."""

    def __init__(self, session: Session):
        """
        Initialize storage service.

        Args:
            session: SQLAlchemy database session
        """
        self.session = session

    def create_record(
        self,
        filenames: List[str],
        total_pages: int,
        bookmark_titles: List[str],
        output_size: int
    ) -> MergeRecord:
        """
        Create a new merge record.

        Args:
            filenames: Input filenames in merge order
            total_pages: Page count of the merged output
            bookmark_titles: Titles of the generated bookmarks
            output_size: Size of the merged PDF in bytes

        Returns:
            Created MergeRecord object
        """
        record = MergeRecord(
            filenames=list(filenames),
            input_count=len(filenames),
            total_pages=total_pages,
            bookmark_titles=list(bookmark_titles),
            output_size=output_size
        )
        self.session.add(record)
        self.session.commit()
        self.session.refresh(record)
        return record

    def get_record(self, record_id: str) -> Optional[MergeRecord]:
        """Get merge record by ID."""
        return self.session.query(MergeRecord).filter(
            MergeRecord.id == record_id
        ).first()

    def list_records(self, limit: int = 50, offset: int = 0) -> List[MergeRecord]:
        """List merge records, newest first."""
        return self.session.query(MergeRecord)\
            .order_by(MergeRecord.created_at.desc())\
            .limit(limit)\
            .offset(offset)\
            .all()

    def count_records(self) -> int:
        """Number of stored merge records."""
        return self.session.query(MergeRecord).count()

    def delete_record(self, record_id: str) -> bool:
        """Delete a merge record."""
        record = self.get_record(record_id)
        if record:
            self.session.delete(record)
            self.session.commit()
            return True
        return False
