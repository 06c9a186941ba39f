"""
Tree Reattachment Component.

Rewires every collected page under the single merged page-tree root and
links that root from the merged catalog.
"""
import logging

from core.constants import (
    INHERITABLE_PAGE_KEYS,
    KEY_COUNT,
    KEY_INFO,
    KEY_KIDS,
    KEY_OUTLINES,
    KEY_PAGES,
    KEY_PARENT,
    KEY_ROOT,
    TYPE_CATALOG,
    TYPE_PAGES,
)
from core.exceptions import MissingRootError
from core.models import Document
from .classifier import Collection

logger = logging.getLogger(__name__)


class TreeReattacher:
    """Builds the merged document from a Collection."""

    @staticmethod
    def reattach(collection: Collection) -> Document:
        """
        Attach all pages to the merged Pages root and link it from the Catalog.

        Args:
            collection: Output of ObjectClassifier.collect

        Returns:
            Merged Document whose trailer /Root references the catalog

        Raises:
            MissingRootError: If no Pages or no Catalog object was collected
        """
        if collection.pages_root is None:
            raise MissingRootError(TYPE_PAGES)
        if collection.catalog is None:
            raise MissingRootError(TYPE_CATALOG)

        document = Document(version=collection.version)
        for object_id, obj in collection.objects.items():
            document.insert(object_id, obj)

        pages_id, pages_dict = collection.pages_root
        kids = []
        for page_id, page in collection.pages:
            page = dict(page)
            page[KEY_PARENT] = pages_id
            document.insert(page_id, page)
            kids.append(page_id)

        pages_dict = dict(pages_dict)
        pages_dict.pop(KEY_PARENT, None)
        # Pages already carry their materialized attributes; anything left
        # here may come from another input or subtree
        for key in INHERITABLE_PAGE_KEYS:
            pages_dict.pop(key, None)
        pages_dict[KEY_COUNT] = len(kids)
        pages_dict[KEY_KIDS] = kids
        document.insert(pages_id, pages_dict)

        catalog_id, catalog_dict = collection.catalog
        catalog_dict = dict(catalog_dict)
        catalog_dict[KEY_PAGES] = pages_id
        catalog_dict.pop(KEY_OUTLINES, None)
        document.insert(catalog_id, catalog_dict)

        document.trailer[KEY_ROOT] = catalog_id
        if collection.info is not None and collection.info in document.objects:
            document.trailer[KEY_INFO] = collection.info

        logger.debug(
            f"Reattached {len(kids)} pages under {pages_id}, catalog {catalog_id}"
        )
        return document
