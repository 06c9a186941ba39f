"""
Classification & Collection Component.

Partitions the objects of renumbered input documents by role, collapses
the singleton roles (Catalog, Pages) into one object each, gathers pages
in contribution order and synthesizes one bookmark per input.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from core.constants import (
    DEFAULT_BOOKMARK_COLOR,
    DEFAULT_BOOKMARK_LEVEL,
    DEFAULT_BOOKMARK_TITLE,
    DEFAULT_PDF_VERSION,
    KEY_INFO,
    KEY_PAGES,
    KEY_TYPE,
    TYPE_PAGE,
)
from core.exceptions import MergeInputError, StructuralError
from core.models import (
    Bookmark,
    Document,
    Name,
    ObjectId,
    ObjectRole,
    object_dictionary,
)

logger = logging.getLogger(__name__)


@dataclass
class Collection:
    """Result of classifying all input documents."""
    objects: Dict[ObjectId, Any] = field(default_factory=dict)
    catalog: Optional[Tuple[ObjectId, Dict[str, Any]]] = None
    pages_root: Optional[Tuple[ObjectId, Dict[str, Any]]] = None
    pages: List[Tuple[ObjectId, Dict[str, Any]]] = field(default_factory=list)
    bookmarks: List[Bookmark] = field(default_factory=list)
    first_pages: List[Optional[ObjectId]] = field(default_factory=list)
    info: Optional[ObjectId] = None
    version: str = DEFAULT_PDF_VERSION

    @property
    def page_count(self) -> int:
        return len(self.pages)


def update_merge(
    existing: Optional[Tuple[ObjectId, Dict[str, Any]]],
    object_id: ObjectId,
    dictionary: Dict[str, Any]
) -> Tuple[ObjectId, Dict[str, Any]]:
    """
    Superimpose a duplicate singleton over the first-seen one.

    The first-seen object keeps its id and its own values; it only absorbs
    keys it does not have yet.
    """
    if existing is None:
        return object_id, dict(dictionary)

    base_id, base = existing
    for key, value in dictionary.items():
        base.setdefault(key, value)
    return base_id, base


def _version_key(version: str):
    try:
        return tuple(int(part) for part in version.split('.'))
    except ValueError:
        return (0,)


class ObjectClassifier:
    """
    Collects the renumbered object graphs of all inputs into one mapping.

    Pages are taken from each input's own page-tree walk; Outlines/Outline
    objects are dropped since the outline is regenerated after merging.
    """

    def __init__(
        self,
        bookmark_title: str = DEFAULT_BOOKMARK_TITLE,
        bookmark_color: Tuple[float, float, float] = DEFAULT_BOOKMARK_COLOR
    ):
        """
        Initialize classifier.

        Args:
            bookmark_title: Title template, formatted with n (1-based input counter)
            bookmark_color: RGB color of synthesized bookmarks
        """
        self.bookmark_title = bookmark_title
        self.bookmark_color = tuple(bookmark_color)

    def format_title(self, number: int) -> str:
        """Bookmark title for the number-th input (1-based)."""
        try:
            return self.bookmark_title.format(n=number)
        except (KeyError, IndexError, ValueError, AttributeError) as e:
            raise MergeInputError(
                f"Invalid bookmark title template {self.bookmark_title!r}: "
                f"only {{n}} is available ({type(e).__name__}: {e})"
            ) from e

    def collect(self, documents: Sequence[Document]) -> Collection:
        """
        Classify and collect all objects of the given documents.

        Args:
            documents: Inputs already renumbered into disjoint id ranges

        Returns:
            Collection with merged objects, singletons, pages and bookmarks

        Raises:
            MergeInputError: If the title template cannot be formatted
            StructuralError: If an input has no page under its own root
        """
        self.format_title(1)
        collection = Collection()
        bookmark_number = 1

        for index, doc in enumerate(documents):
            page_tree = doc.iter_page_tree()
            if not page_tree:
                raise StructuralError(
                    f"Input {index} has no page reachable from its catalog",
                    input_index=index
                )

            page_ids = {page_id for page_id, _ in page_tree}
            for page_id, inherited in page_tree:
                collection.pages.append(
                    (page_id, self._materialize_page(doc, page_id, inherited))
                )

            first_page = page_tree[0][0]
            collection.first_pages.append(first_page)
            collection.bookmarks.append(Bookmark(
                title=self.format_title(bookmark_number),
                target=first_page,
                level=DEFAULT_BOOKMARK_LEVEL,
                color=self.bookmark_color,
                input_index=index
            ))
            bookmark_number += 1

            self._collect_objects(collection, doc, page_ids)

            info = doc.trailer.get(KEY_INFO)
            if collection.info is None and isinstance(info, ObjectId) and info in doc.objects:
                collection.info = info

            if index == 0 or _version_key(doc.version) > _version_key(collection.version):
                collection.version = doc.version

            logger.debug(
                f"Input {index}: {len(page_tree)} pages, "
                f"{len(doc.objects)} objects, first page {first_page}"
            )

        return collection

    def _collect_objects(self, collection: Collection, doc: Document, page_ids: set):
        """Route every non-page object of one input by its role."""
        catalog = doc.get_dictionary(doc.catalog_id()) if doc.catalog_id() is not None else None
        root_pages = catalog.get(KEY_PAGES) if catalog else None

        # The input's own page-tree root is seen before its intermediate nodes
        ordered_ids = sorted(doc.objects, key=lambda oid: (oid != root_pages, oid))

        for object_id in ordered_ids:
            if object_id in page_ids:
                continue

            obj = doc.objects[object_id]
            role = ObjectRole.of(obj)

            if role is ObjectRole.CATALOG:
                collection.catalog = update_merge(
                    collection.catalog, object_id, object_dictionary(obj)
                )
            elif role is ObjectRole.PAGES:
                collection.pages_root = update_merge(
                    collection.pages_root, object_id, object_dictionary(obj)
                )
            elif role is ObjectRole.PAGE:
                # Not reachable from the page tree
                logger.debug(f"Dropping orphan page {object_id}")
            elif role in (ObjectRole.OUTLINES, ObjectRole.OUTLINE):
                continue
            else:
                collection.objects[object_id] = obj

    @staticmethod
    def _materialize_page(
        doc: Document,
        page_id: ObjectId,
        inherited: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Copy a page dictionary, filling inheritable keys from its ancestors."""
        page = dict(doc.get_dictionary(page_id))
        page[KEY_TYPE] = Name(TYPE_PAGE)
        for key, value in inherited.items():
            page.setdefault(key, value)
        return page
