"""
Core domain models for the page-merge engine.

A document is an arena of indirect objects keyed by ObjectId. Graph edges
are ObjectId values stored inside dictionaries and arrays, so any graph
shape (cycles included) is walked by id lookup rather than by ownership.

Value mapping:
    null -> None, boolean -> bool, integer -> int, real -> float,
    string -> PdfString, name -> Name, array -> list,
    dictionary -> dict (keys are names without the leading slash),
    stream -> Stream, reference -> ObjectId
"""
import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from core.constants import (
    DEFAULT_BOOKMARK_COLOR,
    INHERITABLE_PAGE_KEYS,
    KEY_KIDS,
    KEY_PAGES,
    KEY_ROOT,
    KEY_TYPE,
    TYPE_CATALOG,
    TYPE_OUTLINE,
    TYPE_OUTLINES,
    TYPE_PAGE,
    TYPE_PAGES,
)


@dataclass(frozen=True, order=True)
class ObjectId:
    """Identifier of one indirect object (object number + generation)."""
    num: int
    gen: int = 0

    def __str__(self) -> str:
        return f"{self.num} {self.gen} R"


class Name(str):
    """PDF name object, stored without the leading slash."""

    def __repr__(self) -> str:
        return f"Name({str.__repr__(self)})"


class PdfString(bytes):
    """PDF string object, kept as raw bytes."""

    def __repr__(self) -> str:
        return f"PdfString({bytes.__repr__(self)})"

    @classmethod
    def from_text(cls, text: str) -> "PdfString":
        """Encode text as ASCII when possible, otherwise UTF-16BE with BOM."""
        try:
            return cls(text.encode('ascii'))
        except UnicodeEncodeError:
            return cls(b'\xfe\xff' + text.encode('utf-16-be'))

    def to_text(self) -> str:
        """Decode as a text string (UTF-16BE with BOM, else latin-1)."""
        raw = bytes(self)
        if raw.startswith(b'\xfe\xff'):
            return raw[2:].decode('utf-16-be', errors='replace')
        if raw.startswith(b'\xef\xbb\xbf'):
            return raw[3:].decode('utf-8', errors='replace')
        return raw.decode('latin-1')


@dataclass
class Stream:
    """Stream object: a dictionary plus an opaque (possibly encoded) payload."""
    dictionary: Dict[str, Any] = field(default_factory=dict)
    data: bytes = b""


class ObjectRole(Enum):
    """Role of an object, derived from its declared /Type."""
    CATALOG = TYPE_CATALOG
    PAGES = TYPE_PAGES
    PAGE = TYPE_PAGE
    OUTLINES = TYPE_OUTLINES
    OUTLINE = TYPE_OUTLINE
    OTHER = "Other"

    @classmethod
    def of(cls, obj: Any) -> "ObjectRole":
        """Classify an object by its /Type entry."""
        type_name = object_type(obj)
        if type_name is None:
            return cls.OTHER
        try:
            return cls(str(type_name))
        except ValueError:
            return cls.OTHER


def object_dictionary(obj: Any) -> Optional[Dict[str, Any]]:
    """Return the dictionary of a dict or stream object, else None."""
    if isinstance(obj, Stream):
        return obj.dictionary
    if isinstance(obj, dict):
        return obj
    return None


def object_type(obj: Any) -> Optional[str]:
    """Return the /Type name of a dictionary-like object, if any."""
    dictionary = object_dictionary(obj)
    if dictionary is None:
        return None
    value = dictionary.get(KEY_TYPE)
    if isinstance(value, str):
        return str(value)
    return None


@dataclass
class Document:
    """
    In-memory object graph of one document.

    Attributes:
        objects: Arena mapping ObjectId -> object
        trailer: Trailer dictionary (Root, Info, ...)
        max_id: Watermark used to mint fresh object numbers
        version: Header version, e.g. "1.7"
    """
    objects: Dict[ObjectId, Any] = field(default_factory=dict)
    trailer: Dict[str, Any] = field(default_factory=dict)
    max_id: int = 0
    version: str = "1.7"

    def get(self, object_id: ObjectId) -> Any:
        """Get an object by id (None when absent)."""
        return self.objects.get(object_id)

    def insert(self, object_id: ObjectId, obj: Any):
        """Insert or replace an object, keeping max_id current."""
        self.objects[object_id] = obj
        if object_id.num > self.max_id:
            self.max_id = object_id.num

    def remove(self, object_id: ObjectId) -> Any:
        """Remove and return an object (None when absent)."""
        return self.objects.pop(object_id, None)

    def new_object_id(self) -> ObjectId:
        """Mint the next free object id."""
        self.max_id += 1
        return ObjectId(self.max_id, 0)

    def add_object(self, obj: Any) -> ObjectId:
        """Store an object under a freshly minted id and return the id."""
        object_id = self.new_object_id()
        self.objects[object_id] = obj
        return object_id

    def resolve(self, value: Any) -> Any:
        """Follow references until a direct value is reached."""
        seen = set()
        while isinstance(value, ObjectId):
            if value in seen:
                return None
            seen.add(value)
            value = self.objects.get(value)
        return value

    def get_dictionary(self, object_id: ObjectId) -> Optional[Dict[str, Any]]:
        """Dictionary of the object at object_id (stream dicts included)."""
        return object_dictionary(self.objects.get(object_id))

    def catalog_id(self) -> Optional[ObjectId]:
        """Id of the catalog referenced by trailer /Root."""
        root = self.trailer.get(KEY_ROOT)
        if isinstance(root, ObjectId) and root in self.objects:
            return root
        return None

    def iter_page_tree(self) -> List[Tuple[ObjectId, Dict[str, Any]]]:
        """
        Walk the page tree from the catalog in page order.

        Returns:
            List of (page_id, inherited) tuples where inherited holds the
            inheritable attributes (Resources, MediaBox, ...) collected from
            the page's ancestors, nearest ancestor winning.
        """
        catalog_id = self.catalog_id()
        catalog = self.get_dictionary(catalog_id) if catalog_id is not None else None
        if catalog is None:
            return []

        root = catalog.get(KEY_PAGES)
        if not isinstance(root, ObjectId):
            return []

        pages = []
        visited = set()
        # Iterative: malformed page trees can be arbitrarily deep
        stack = [(root, {})]

        while stack:
            node_id, inherited = stack.pop()
            if node_id in visited:
                continue
            visited.add(node_id)

            node = self.get_dictionary(node_id)
            if node is None:
                continue

            node_type = node.get(KEY_TYPE)
            kids = self.resolve(node.get(KEY_KIDS))
            is_tree_node = node_type == TYPE_PAGES or (
                node_type is None and isinstance(kids, list)
            )

            if not is_tree_node:
                pages.append((node_id, inherited))
                continue

            scope = dict(inherited)
            for key in INHERITABLE_PAGE_KEYS:
                if key in node:
                    scope[key] = node[key]

            kid_ids = [kid for kid in kids if isinstance(kid, ObjectId)] \
                if isinstance(kids, list) else []
            # Reversed so the first kid is popped first
            stack.extend((kid, scope) for kid in reversed(kid_ids))

        return pages

    def get_pages(self) -> List[ObjectId]:
        """Page ids in page order, discovered through the page tree."""
        return [page_id for page_id, _ in self.iter_page_tree()]

    def copy(self) -> "Document":
        """Deep copy, independent of the original."""
        return copy.deepcopy(self)


@dataclass
class Bookmark:
    """Outline entry synthesised for one input document."""
    title: str
    target: ObjectId
    level: int = 0
    color: Tuple[float, float, float] = DEFAULT_BOOKMARK_COLOR
    input_index: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'title': self.title,
            'target': str(self.target),
            'level': self.level,
            'color': list(self.color),
            'input_index': self.input_index
        }
