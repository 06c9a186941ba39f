"""Core package - Object model, constants and errors."""

from .models import (
    ObjectId,
    Name,
    PdfString,
    Stream,
    ObjectRole,
    Document,
    Bookmark,
    object_dictionary,
    object_type
)
from .exceptions import (
    MergeError,
    MergeInputError,
    ParseError,
    StructuralError,
    MissingRootError,
    SerializationError
)

__all__ = [
    'ObjectId',
    'Name',
    'PdfString',
    'Stream',
    'ObjectRole',
    'Document',
    'Bookmark',
    'object_dictionary',
    'object_type',
    'MergeError',
    'MergeInputError',
    'ParseError',
    'StructuralError',
    'MissingRootError',
    'SerializationError'
]
