"""
PDF Reader.

Loads a PDF byte buffer with pypdf and converts every indirect object into
the merge object model (core.models).
"""
import logging
from io import BytesIO
from typing import Any, Optional

from pypdf import PdfReader
from pypdf.generic import (
    ArrayObject,
    BooleanObject,
    ByteStringObject,
    DictionaryObject,
    FloatObject,
    IndirectObject,
    NameObject,
    NullObject,
    NumberObject,
    StreamObject,
    TextStringObject,
)

from core.constants import CONTAINER_TYPES, DEFAULT_PDF_VERSION, TRAILER_GRAPH_KEYS
from core.exceptions import ParseError
from core.models import Document, Name, ObjectId, PdfString, Stream, object_type

logger = logging.getLogger(__name__)


def convert_pypdf_object(value: Any) -> Any:
    """
    Convert a pypdf generic object into the merge object model.

    References are kept as ObjectId values, never dereferenced.
    """
    if value is None or isinstance(value, NullObject):
        return None
    if isinstance(value, IndirectObject):
        return ObjectId(value.idnum, value.generation)
    if isinstance(value, BooleanObject):
        return bool(value.value)
    if isinstance(value, NameObject):
        return Name(str(value)[1:])
    if isinstance(value, TextStringObject):
        return PdfString(value.original_bytes)
    if isinstance(value, ByteStringObject):
        return PdfString(bytes(value))
    if isinstance(value, NumberObject):
        return int(value)
    if isinstance(value, FloatObject):
        return float(value)
    if isinstance(value, ArrayObject):
        return [convert_pypdf_object(item) for item in list.__iter__(value)]
    if isinstance(value, StreamObject):
        # _data holds the still-encoded payload, matching the /Filter entry
        return Stream(
            dictionary=_convert_dictionary(value),
            data=bytes(value._data or b"")
        )
    if isinstance(value, DictionaryObject):
        return _convert_dictionary(value)
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float):
        return float(value)
    if isinstance(value, str):
        return PdfString(value.encode('latin-1', errors='replace'))
    if isinstance(value, bytes):
        return PdfString(value)

    logger.debug(f"Unsupported pypdf value {type(value).__name__}, mapped to null")
    return None


def _convert_dictionary(value: DictionaryObject) -> dict:
    """Convert dictionary entries without dereferencing values."""
    return {
        str(key)[1:]: convert_pypdf_object(item)
        for key, item in dict.items(value)
    }


def _open_reader(data: bytes, input_index: Optional[int]) -> PdfReader:
    """Open a reader, decrypting with an empty password when needed."""
    try:
        reader = PdfReader(BytesIO(data), strict=False)
    except Exception as e:
        raise ParseError(f"Cannot parse PDF: {e}", input_index=input_index) from e

    if reader.is_encrypted:
        try:
            decrypted = reader.decrypt("")
        except Exception as e:
            raise ParseError(
                f"Cannot decrypt encrypted PDF: {e}", input_index=input_index
            ) from e
        if not decrypted:
            raise ParseError(
                "PDF is encrypted with a non-empty password", input_index=input_index
            )
    return reader


def _list_object_ids(reader: PdfReader):
    """Collect ids of all in-use objects listed in the cross-reference data."""
    free_entries = getattr(reader, 'xref_free_entry', {}) or {}
    ids = set()

    for generation, entries in reader.xref.items():
        free = free_entries.get(generation, {})
        for num in entries:
            if num == 0 or free.get(num):
                continue
            ids.add(ObjectId(num, generation))

    for num in reader.xref_objStm:
        ids.add(ObjectId(num, 0))

    return sorted(ids)


def _detect_version(reader: PdfReader) -> str:
    header = getattr(reader, 'pdf_header', '') or ''
    if header.startswith('%PDF-'):
        return header[5:].strip() or DEFAULT_PDF_VERSION
    return DEFAULT_PDF_VERSION


def load(data: bytes, input_index: Optional[int] = None) -> Document:
    """
    Parse a PDF byte buffer into a Document.

    Args:
        data: Complete PDF file contents
        input_index: Position of the buffer in a merge call (for errors)

    Returns:
        Document holding every in-use indirect object

    Raises:
        ParseError: If the buffer is not a readable PDF
    """
    if not data:
        raise ParseError("Empty input buffer", input_index=input_index)

    reader = _open_reader(data, input_index)

    try:
        object_ids = _list_object_ids(reader)
        trailer = {
            key: convert_pypdf_object(value)
            for key, value in (
                (str(k)[1:], v) for k, v in dict.items(reader.trailer)
            )
            if key in TRAILER_GRAPH_KEYS
        }
    except Exception as e:
        raise ParseError(f"Cannot read cross-reference data: {e}", input_index=input_index) from e

    document = Document(trailer=trailer, version=_detect_version(reader))

    for object_id in object_ids:
        try:
            raw = IndirectObject(object_id.num, object_id.gen, reader).get_object()
        except Exception as e:
            logger.warning(f"Skipping unreadable object {object_id} (input {input_index}): {e}")
            continue

        obj = convert_pypdf_object(raw)
        if obj is None:
            continue
        if isinstance(obj, Stream) and object_type(obj) in CONTAINER_TYPES:
            continue
        document.insert(object_id, obj)

    logger.debug(
        f"Loaded input {input_index}: {len(document.objects)} objects, "
        f"max_id={document.max_id}, version={document.version}"
    )
    return document
