"""
Merge Service - Merges uploaded PDF files into one document.

This service sits between the host surfaces (HTTP API, CLI) and the merge
engine: it validates the request, parses the inputs, runs the merge,
serializes the result and optionally records it in the database.
"""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from codec import load, save
from config.settings import settings
from core.exceptions import MergeError, MergeInputError
from core.models import Document
from merge import MergeEngine
from serving.storage_service import MergeStorageService

logger = logging.getLogger(__name__)


@dataclass
class MergeOutcome:
    """Result of merging a set of files."""
    pdf_bytes: bytes
    page_count: int
    filenames: List[str] = field(default_factory=list)
    bookmark_titles: List[str] = field(default_factory=list)
    record_id: Optional[str] = None

    @property
    def input_count(self) -> int:
        return len(self.filenames)

    def to_dict(self) -> dict:
        """Convert to dictionary (without the PDF payload)."""
        return {
            'filenames': self.filenames,
            'input_count': self.input_count,
            'page_count': self.page_count,
            'bookmark_titles': self.bookmark_titles,
            'output_size': len(self.pdf_bytes),
            'record_id': self.record_id
        }


class MergeService:
    """Service for merging PDF files."""

    def __init__(
        self,
        compress: Optional[bool] = None,
        bookmark_title: Optional[str] = None,
        max_inputs: Optional[int] = None,
        max_upload_bytes: Optional[int] = None
    ):
        """
        Initialize merge service.

        Args:
            compress: Compress output streams (default: settings)
            bookmark_title: Bookmark title template (default: settings)
            max_inputs: Maximum files per merge (default: settings)
            max_upload_bytes: Maximum size per file (default: settings)
        """
        config = settings.get_merge_config()
        self.compress = config['compress'] if compress is None else compress
        self.bookmark_title = bookmark_title or config['bookmark_title']
        self.max_inputs = max_inputs or config['max_inputs']
        self.max_upload_bytes = max_upload_bytes or config['max_upload_bytes']

        self.engine = MergeEngine(
            compress=self.compress,
            bookmark_title=self.bookmark_title
        )

    def _validate(self, files: Sequence[Tuple[str, bytes]]):
        """Check file count and sizes before parsing anything."""
        if not files:
            raise MergeInputError("At least one PDF file is required")
        if len(files) > self.max_inputs:
            raise MergeInputError(
                f"Too many files: {len(files)} (maximum {self.max_inputs})"
            )
        for index, (filename, data) in enumerate(files):
            if len(data) > self.max_upload_bytes:
                raise MergeInputError(
                    f"File exceeds {self.max_upload_bytes} bytes",
                    input_index=index,
                    filename=filename
                )

    def load_inputs(self, files: Sequence[Tuple[str, bytes]]) -> List[Document]:
        """
        Parse named PDF buffers into documents.

        Args:
            files: (filename, bytes) pairs in merge order

        Returns:
            Parsed documents in the same order
        """
        self._validate(files)

        documents = []
        for index, (filename, data) in enumerate(files):
            try:
                documents.append(load(data, input_index=index))
            except MergeError as e:
                e.filename = filename
                raise
        return documents

    def merge_files(
        self,
        files: Sequence[Tuple[str, bytes]],
        session: Optional[Session] = None,
        store_to_db: bool = False
    ) -> MergeOutcome:
        """
        Merge named PDF buffers.

        Args:
            files: (filename, bytes) pairs in merge order
            session: Database session used when store_to_db is set
            store_to_db: Persist a MergeRecord for this merge

        Returns:
            MergeOutcome with the merged PDF bytes

        Raises:
            MergeError: Any merge failure, annotated with the offending filename
        """
        filenames = [filename for filename, _ in files]
        documents = self.load_inputs(files)

        try:
            result = self.engine.run(documents)
            pdf_bytes = save(result.document)
        except MergeError as e:
            if e.input_index is not None and e.filename is None:
                e.filename = filenames[e.input_index]
            raise

        outcome = MergeOutcome(
            pdf_bytes=pdf_bytes,
            page_count=result.page_count,
            filenames=filenames,
            bookmark_titles=[bookmark.title for bookmark in result.bookmarks]
        )

        if store_to_db and session is not None:
            record = MergeStorageService(session).create_record(
                filenames=filenames,
                total_pages=outcome.page_count,
                bookmark_titles=outcome.bookmark_titles,
                output_size=len(pdf_bytes)
            )
            outcome.record_id = record.id

        logger.info(
            f"Merged {outcome.input_count} files into {outcome.page_count} pages "
            f"({len(pdf_bytes)} bytes)"
        )
        return outcome

    def merge_paths(
        self,
        paths: Sequence[str],
        session: Optional[Session] = None,
        store_to_db: bool = False
    ) -> MergeOutcome:
        """Merge PDF files from disk, in the given order."""
        files = [(Path(path).name, Path(path).read_bytes()) for path in paths]
        return self.merge_files(files, session=session, store_to_db=store_to_db)
