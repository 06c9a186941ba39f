"""
Identity renumbering.

Relabels every object of a document to a dense id range while keeping all
reference edges intact.
"""
import logging
from typing import Any, Dict, Tuple

from core.models import Document, ObjectId, Stream

logger = logging.getLogger(__name__)


def rewrite_references(value: Any, mapping: Dict[ObjectId, ObjectId], dangling: set) -> Any:
    """
    Rebuild a value with every reference replaced through mapping.

    References missing from mapping become null and are recorded in dangling.
    """
    if isinstance(value, ObjectId):
        new_id = mapping.get(value)
        if new_id is None:
            dangling.add(value)
        return new_id
    if isinstance(value, list):
        return [rewrite_references(item, mapping, dangling) for item in value]
    if isinstance(value, dict):
        return {
            key: rewrite_references(item, mapping, dangling)
            for key, item in value.items()
        }
    if isinstance(value, Stream):
        return Stream(
            dictionary=rewrite_references(value.dictionary, mapping, dangling),
            data=value.data
        )
    return value


def renumber_with_map(doc: Document, starting_at: int = 1) -> Tuple[int, Dict[ObjectId, ObjectId]]:
    """
    Renumber all objects densely from starting_at, in ascending id order.

    Args:
        doc: Document to relabel in place
        starting_at: First object number to assign

    Returns:
        Tuple of (next free object number, old id -> new id mapping)
    """
    mapping = {
        old_id: ObjectId(starting_at + offset, 0)
        for offset, old_id in enumerate(sorted(doc.objects))
    }

    dangling = set()
    doc.objects = {
        mapping[old_id]: rewrite_references(doc.objects[old_id], mapping, dangling)
        for old_id in sorted(doc.objects)
    }
    doc.trailer = rewrite_references(doc.trailer, mapping, dangling)
    doc.max_id = starting_at + len(mapping) - 1

    if dangling:
        logger.debug(f"Nulled {len(dangling)} dangling references: {sorted(dangling)[:10]}")

    return doc.max_id + 1, mapping


def renumber(doc: Document, starting_at: int = 1) -> int:
    """Renumber doc from starting_at and return the next free object number."""
    next_free, _ = renumber_with_map(doc, starting_at)
    return next_free
