"""Codec package - PDF bytes <-> Document conversion."""

from .reader import load, convert_pypdf_object
from .writer import save, compress_streams, serialize_value, serialize_object

__all__ = [
    'load',
    'save',
    'compress_streams',
    'convert_pypdf_object',
    'serialize_value',
    'serialize_object'
]
