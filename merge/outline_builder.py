"""
Outline Synthesis Component.

Turns the flat list of synthesized bookmarks into an /Outlines tree whose
items point at their target pages.
"""
import logging
from dataclasses import replace
from typing import Dict, List, Optional

from core.constants import KEY_COUNT, KEY_PARENT, KEY_TYPE, OUTLINE_DEST_FIT, TYPE_OUTLINES
from core.models import Bookmark, Document, Name, ObjectId, ObjectRole, PdfString

logger = logging.getLogger(__name__)


class OutlineBuilder:
    """
    Builds outline trees from bookmarks.

    Bookmark levels nest an item under the nearest preceding item with a
    lower level; all top-level items hang off the /Outlines root.
    """

    @staticmethod
    def is_page(document: Document, object_id: ObjectId) -> bool:
        """Check whether object_id names a page in the document."""
        return ObjectRole.of(document.get(object_id)) is ObjectRole.PAGE

    @staticmethod
    def adjust_zero_pages(
        document: Document,
        bookmarks: List[Bookmark],
        first_pages: List[Optional[ObjectId]]
    ) -> List[Bookmark]:
        """
        Retarget bookmarks whose page is missing from the document.

        An orphaned bookmark moves to the first page of the nearest
        following input that still has one; it is dropped when no such
        input exists.

        Args:
            document: Merged document
            bookmarks: Bookmarks in input order
            first_pages: First page id per input (None when absent)

        Returns:
            Bookmarks that all target existing pages
        """
        adjusted = []
        for bookmark in bookmarks:
            if OutlineBuilder.is_page(document, bookmark.target):
                adjusted.append(bookmark)
                continue

            replacement = next(
                (
                    page_id for page_id in first_pages[bookmark.input_index + 1:]
                    if page_id is not None and OutlineBuilder.is_page(document, page_id)
                ),
                None
            )

            if replacement is None:
                logger.warning(f"Dropping bookmark '{bookmark.title}': no page to target")
                continue

            logger.warning(
                f"Retargeting bookmark '{bookmark.title}' from {bookmark.target} to {replacement}"
            )
            adjusted.append(replace(bookmark, target=replacement))

        return adjusted

    @staticmethod
    def build_outline(document: Document, bookmarks: List[Bookmark]) -> Optional[ObjectId]:
        """
        Materialize bookmarks as outline objects inside the document.

        Args:
            document: Document receiving the new objects
            bookmarks: Bookmarks in display order

        Returns:
            Id of the /Outlines root, or None when there are no bookmarks
        """
        if not bookmarks:
            return None

        outlines_id = document.new_object_id()

        # Create nodes and track parent-child relationships
        root_nodes = []
        stack = []
        for bookmark in bookmarks:
            node = {'bookmark': bookmark, 'id': document.new_object_id(), 'children': []}

            while stack and stack[-1]['bookmark'].level >= bookmark.level:
                stack.pop()

            if stack:
                stack[-1]['children'].append(node)
            else:
                root_nodes.append(node)
            stack.append(node)

        visible = OutlineBuilder._link_items(document, root_nodes, outlines_id)

        document.insert(outlines_id, {
            KEY_TYPE: Name(TYPE_OUTLINES),
            'First': root_nodes[0]['id'],
            'Last': root_nodes[-1]['id'],
            KEY_COUNT: visible,
        })

        logger.debug(f"Built outline {outlines_id} with {len(bookmarks)} items")
        return outlines_id

    @staticmethod
    def _link_items(document: Document, nodes: List[Dict], parent_id: ObjectId) -> int:
        """Insert sibling items with Prev/Next links; returns visible descendants."""
        visible = 0
        for i, node in enumerate(nodes):
            bookmark = node['bookmark']
            item = {
                'Title': PdfString.from_text(bookmark.title),
                KEY_PARENT: parent_id,
                'Dest': [bookmark.target, Name(OUTLINE_DEST_FIT)],
                'C': [float(c) for c in bookmark.color],
                'F': 0,
            }
            if i > 0:
                item['Prev'] = nodes[i - 1]['id']
            if i < len(nodes) - 1:
                item['Next'] = nodes[i + 1]['id']

            if node['children']:
                item['First'] = node['children'][0]['id']
                item['Last'] = node['children'][-1]['id']
                item[KEY_COUNT] = OutlineBuilder._link_items(
                    document, node['children'], node['id']
                )
                visible += item[KEY_COUNT]

            document.insert(node['id'], item)
            visible += 1

        return visible
