"""
PDF Writer.

Serializes a Document into a PDF file with a classic cross-reference table.
"""
import logging
import math
import zlib
from decimal import Decimal
from io import BytesIO
from typing import Any, Dict, List, Tuple

from core.constants import (
    FLATE_DECODE,
    KEY_DECODE_PARMS,
    KEY_FILTER,
    KEY_INFO,
    KEY_LENGTH,
    KEY_ROOT,
    KEY_TYPE,
    MIN_COMPRESS_SIZE,
    PDF_BINARY_MARKER,
)
from core.exceptions import SerializationError
from core.models import Document, Name, ObjectId, PdfString, Stream

logger = logging.getLogger(__name__)

# Characters that must be #xx-escaped inside a name
_NAME_DELIMITERS = b'()<>[]{}/%#'

_STRING_ESCAPES = {
    ord('\\'): b'\\\\',
    ord('('): b'\\(',
    ord(')'): b'\\)',
    ord('\r'): b'\\r',
    ord('\n'): b'\\n',
}


def _encode_name(name: str) -> bytes:
    """Encode a name with #xx escapes for delimiters and non-printables."""
    out = bytearray(b'/')
    for byte in name.encode('utf-8'):
        if byte < 0x21 or byte > 0x7e or byte in _NAME_DELIMITERS:
            out += b'#%02X' % byte
        else:
            out.append(byte)
    return bytes(out)


def _encode_string(raw: bytes) -> bytes:
    """Encode raw bytes as a literal string."""
    out = bytearray(b'(')
    for byte in raw:
        out += _STRING_ESCAPES.get(byte, bytes((byte,)))
    out += b')'
    return bytes(out)


def _encode_text(text: str) -> bytes:
    """Encode a Python text string (ASCII as-is, otherwise UTF-16BE + BOM)."""
    try:
        return _encode_string(text.encode('ascii'))
    except UnicodeEncodeError:
        return _encode_string(b'\xfe\xff' + text.encode('utf-16-be'))


def _format_real(value: float) -> bytes:
    """Format a real number without exponent notation, keeping every digit of repr."""
    if math.isnan(value) or math.isinf(value):
        raise SerializationError(f"Cannot serialize non-finite real {value!r}")
    text = format(Decimal(repr(float(value))), 'f')
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    if text in ('', '-0'):
        text = '0'
    return text.encode('ascii')


def serialize_value(value: Any) -> bytes:
    """
    Serialize a direct value.

    Raises:
        SerializationError: For values outside the object model
    """
    if value is None:
        return b'null'
    if isinstance(value, bool):
        return b'true' if value else b'false'
    if isinstance(value, ObjectId):
        return b'%d %d R' % (value.num, value.gen)
    if isinstance(value, Name):
        return _encode_name(value)
    if isinstance(value, PdfString):
        return _encode_string(bytes(value))
    if isinstance(value, str):
        return _encode_text(value)
    if isinstance(value, (bytes, bytearray)):
        return _encode_string(bytes(value))
    if isinstance(value, int):
        return b'%d' % value
    if isinstance(value, float):
        return _format_real(value)
    if isinstance(value, (list, tuple)):
        return b'[' + b' '.join(serialize_value(item) for item in value) + b']'
    if isinstance(value, dict):
        return _serialize_dictionary(value)
    if isinstance(value, Stream):
        raise SerializationError("Streams can only be serialized as indirect objects")

    raise SerializationError(f"Cannot serialize value of type {type(value).__name__}")


def _serialize_dictionary(dictionary: Dict[str, Any]) -> bytes:
    parts = [b'<<']
    for key, item in dictionary.items():
        parts.append(_encode_name(str(key)) + b' ' + serialize_value(item))
    parts.append(b'>>')
    return b' '.join(parts)


def serialize_object(object_id: ObjectId, obj: Any) -> bytes:
    """Serialize one indirect object including its obj/endobj framing."""
    header = b'%d %d obj\n' % (object_id.num, object_id.gen)

    if isinstance(obj, Stream):
        dictionary = dict(obj.dictionary)
        dictionary[KEY_LENGTH] = len(obj.data)
        body = (
            _serialize_dictionary(dictionary)
            + b'\nstream\n' + obj.data + b'\nendstream'
        )
    else:
        body = serialize_value(obj)

    return header + body + b'\nendobj\n'


def _xref_sections(offsets: List[Tuple[ObjectId, int]]) -> List[List[Tuple[ObjectId, int]]]:
    """Split sorted (id, offset) pairs into runs of consecutive object numbers."""
    sections = []
    for object_id, offset in offsets:
        if sections and sections[-1][-1][0].num + 1 == object_id.num:
            sections[-1].append((object_id, offset))
        else:
            sections.append([(object_id, offset)])
    return sections


def compress_streams(doc: Document, min_size: int = MIN_COMPRESS_SIZE) -> int:
    """
    Flate-compress stream payloads that carry no filter yet.

    Metadata streams are left as they are.

    Returns:
        Number of streams compressed
    """
    compressed = 0
    for obj in doc.objects.values():
        if not isinstance(obj, Stream):
            continue
        if KEY_FILTER in obj.dictionary or len(obj.data) < min_size:
            continue
        if obj.dictionary.get(KEY_TYPE) == 'Metadata':
            continue

        obj.data = zlib.compress(obj.data)
        obj.dictionary[KEY_FILTER] = Name(FLATE_DECODE)
        obj.dictionary.pop(KEY_DECODE_PARMS, None)
        compressed += 1

    logger.debug(f"Compressed {compressed} streams")
    return compressed


def save(doc: Document) -> bytes:
    """
    Serialize a document to PDF bytes.

    Args:
        doc: Document whose trailer references its catalog via /Root

    Returns:
        Complete PDF file contents

    Raises:
        SerializationError: If the document cannot be written
    """
    if not isinstance(doc.trailer.get(KEY_ROOT), ObjectId):
        raise SerializationError("Trailer has no /Root reference")

    buf = BytesIO()
    try:
        buf.write(b'%PDF-' + doc.version.encode('ascii') + b'\n')
        buf.write(PDF_BINARY_MARKER + b'\n')

        offsets = []
        for object_id in sorted(doc.objects):
            offsets.append((object_id, buf.tell()))
            buf.write(serialize_object(object_id, doc.objects[object_id]))

        xref_offset = buf.tell()
        buf.write(b'xref\n')
        buf.write(b'0 1\n0000000000 65535 f \n')
        for section in _xref_sections(offsets):
            buf.write(b'%d %d\n' % (section[0][0].num, len(section)))
            for object_id, offset in section:
                buf.write(b'%010d %05d n \n' % (offset, object_id.gen))

        size = max((object_id.num for object_id in doc.objects), default=0) + 1
        trailer = {'Size': size, KEY_ROOT: doc.trailer[KEY_ROOT]}
        if isinstance(doc.trailer.get(KEY_INFO), ObjectId):
            trailer[KEY_INFO] = doc.trailer[KEY_INFO]

        buf.write(b'trailer\n' + _serialize_dictionary(trailer) + b'\n')
        buf.write(b'startxref\n%d\n%%%%EOF\n' % xref_offset)
    except SerializationError:
        raise
    except (TypeError, ValueError, UnicodeError, OverflowError) as e:
        raise SerializationError(f"Failed to serialize document: {e}") from e

    return buf.getvalue()
