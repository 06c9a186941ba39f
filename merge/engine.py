"""
Merge Engine.

High-level orchestrator for the page-merge pipeline: identity renumbering,
classification, tree reattachment, outline synthesis and finalization.
"""
import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence, Tuple

from codec import compress_streams, load, save
from core.constants import DEFAULT_BOOKMARK_COLOR, DEFAULT_BOOKMARK_TITLE, KEY_OUTLINES
from core.exceptions import MergeInputError
from core.models import Bookmark, Document
from .classifier import ObjectClassifier
from .outline_builder import OutlineBuilder
from .renumber import renumber, renumber_with_map
from .tree_reattach import TreeReattacher

logger = logging.getLogger(__name__)


@dataclass
class MergeResult:
    """Merged document plus the bookmarks materialized in its outline."""
    document: Document
    bookmarks: List[Bookmark] = field(default_factory=list)
    page_count: int = 0
    input_count: int = 0


class MergeEngine:
    """
    Merges page-structured documents into one.

    The engine keeps no state between calls; every merge works on deep
    copies of its inputs, so callers' documents are never modified.
    """

    def __init__(
        self,
        compress: bool = True,
        bookmark_title: str = DEFAULT_BOOKMARK_TITLE,
        bookmark_color: Tuple[float, float, float] = DEFAULT_BOOKMARK_COLOR
    ):
        """
        Initialize merge engine.

        Args:
            compress: Flate-compress unfiltered streams of the output
            bookmark_title: Bookmark title template (n = 1-based input counter)
            bookmark_color: RGB color of synthesized bookmarks
        """
        self.compress = compress
        self.classifier = ObjectClassifier(bookmark_title, bookmark_color)

    def run(self, documents: Sequence[Document]) -> MergeResult:
        """
        Merge documents and report what was produced.

        Args:
            documents: Input documents; order sets page order and bookmark numbering

        Returns:
            MergeResult with the compacted merged document

        Raises:
            MergeInputError: If no documents are given
            StructuralError: If an input has no discoverable page
            MissingRootError: If no Catalog or Pages object exists
        """
        if not documents:
            raise MergeInputError("At least one document is required")

        # Pass 1: disjoint id ranges per input
        inputs = [doc.copy() for doc in documents]
        next_id = 1
        for doc in inputs:
            next_id = renumber(doc, next_id)

        # Pass 2: classification & collection
        collection = self.classifier.collect(inputs)

        # Pass 3: tree reattachment
        document = TreeReattacher.reattach(collection)

        # Pass 4: outline synthesis & finalization
        bookmarks = OutlineBuilder.adjust_zero_pages(
            document, collection.bookmarks, collection.first_pages
        )
        catalog_id = document.catalog_id()
        outlines_id = OutlineBuilder.build_outline(document, bookmarks)
        if outlines_id is not None:
            document.get_dictionary(catalog_id)[KEY_OUTLINES] = outlines_id

        document.max_id = len(document.objects)
        _, mapping = renumber_with_map(document, 1)
        bookmarks = [replace(b, target=mapping[b.target]) for b in bookmarks]

        if self.compress:
            compress_streams(document)

        logger.info(
            f"Merged {len(documents)} documents: {collection.page_count} pages, "
            f"{len(document.objects)} objects, {len(bookmarks)} bookmarks"
        )

        return MergeResult(
            document=document,
            bookmarks=bookmarks,
            page_count=collection.page_count,
            input_count=len(documents)
        )

    def merge(self, documents: Sequence[Document]) -> Document:
        """Merge documents into one newly built Document."""
        return self.run(documents).document

    def merge_to_bytes(self, documents: Sequence[Document]) -> bytes:
        """Merge documents and serialize the result."""
        return save(self.merge(documents))


def merge_pdf_bytes(
    buffers: Sequence[bytes],
    compress: bool = True,
    bookmark_title: str = DEFAULT_BOOKMARK_TITLE,
    engine: Optional[MergeEngine] = None
) -> bytes:
    """
    Merge whole-PDF byte buffers into one PDF.

    Args:
        buffers: PDF files in merge order
        compress: Flate-compress unfiltered streams
        bookmark_title: Bookmark title template
        engine: Pre-configured engine (overrides compress/bookmark_title)

    Returns:
        Merged PDF bytes

    Raises:
        ParseError: With the index of an unreadable buffer
        StructuralError, MissingRootError: See MergeEngine.run
        SerializationError: If the output cannot be written
    """
    if not buffers:
        raise MergeInputError("At least one PDF buffer is required")

    documents = [load(data, input_index=index) for index, data in enumerate(buffers)]
    engine = engine or MergeEngine(compress=compress, bookmark_title=bookmark_title)
    return engine.merge_to_bytes(documents)
