"""
Unit tests for codec.writer module.
"""
import re
import zlib

import pytest
from codec.writer import compress_streams, save, serialize_object, serialize_value
from core.exceptions import SerializationError
from core.models import Document, Name, ObjectId, PdfString, Stream


def xref_offsets(data: bytes) -> dict:
    """Parse the classic xref table of a written file into {num: offset}."""
    start = int(re.search(rb'startxref\n(\d+)\n', data).group(1))
    assert data[start:].startswith(b'xref\n')

    lines = data[start:].split(b'\n')[1:]
    offsets = {}
    i = 0
    while not lines[i].startswith(b'trailer'):
        first, count = (int(x) for x in lines[i].split())
        for n in range(count):
            entry = lines[i + 1 + n]
            if entry.endswith(b'n ') or entry.split()[-1] == b'n':
                offsets[first + n] = int(entry[:10])
        i += count + 1
    return offsets


class TestSerializeValue:
    """Tests for serialize_value."""

    @pytest.mark.parametrize("value,expected", [
        (None, b'null'),
        (True, b'true'),
        (False, b'false'),
        (42, b'42'),
        (-3, b'-3'),
        (0.5, b'0.5'),
        (2.0, b'2'),
        (-0.0, b'0'),
        (1e-7, b'0.0000001'),
        (-2.5e-5, b'-0.000025'),
        (1.5e20, b'150000000000000000000'),
        (1 / 3, b'0.3333333333333333'),
        (ObjectId(12, 0), b'12 0 R'),
        (Name('Page'), b'/Page'),
        ([1, Name('Fit')], b'[1 /Fit]'),
    ])
    def test_scalars(self, value, expected):
        """Test basic value encodings."""
        assert serialize_value(value) == expected

    def test_name_escapes(self):
        """Test delimiters and spaces in names are hex-escaped."""
        assert serialize_value(Name('A B#(x)')) == b'/A#20B#23#28x#29'

    def test_string_escapes(self):
        """Test parentheses, backslash and newlines are escaped."""
        value = PdfString(b'a(b)c\\d\n')

        assert serialize_value(value) == b'(a\\(b\\)c\\\\d\\n)'

    def test_binary_string_kept(self):
        """Test high bytes pass through literal strings."""
        assert serialize_value(PdfString(b'\xfe\xff\x00A')) == b'(\xfe\xff\x00A)'

    def test_plain_text_string(self):
        """Test Python text is written as a PDF text string."""
        assert serialize_value("Page_1") == b'(Page_1)'
        assert serialize_value("É").startswith(b'(\xfe\xff')

    def test_dictionary(self):
        """Test dictionaries keep key order."""
        value = {'Type': Name('Page'), 'Parent': ObjectId(2)}

        assert serialize_value(value) == b'<< /Type /Page /Parent 2 0 R >>'

    def test_non_finite_real(self):
        """Test NaN cannot be written."""
        with pytest.raises(SerializationError):
            serialize_value(float('nan'))

    def test_inline_stream_rejected(self):
        """Test streams are not direct values."""
        with pytest.raises(SerializationError):
            serialize_value([Stream({}, b'')])

    def test_unknown_type(self):
        """Test unsupported Python values are rejected."""
        with pytest.raises(SerializationError):
            serialize_value(object())


class TestSerializeObject:
    """Tests for serialize_object."""

    def test_framing(self):
        """Test obj/endobj framing."""
        result = serialize_object(ObjectId(3), 7)

        assert result == b'3 0 obj\n7\nendobj\n'

    def test_stream_length_recomputed(self):
        """Test a stale /Length is replaced by the payload size."""
        result = serialize_object(ObjectId(1), Stream({'Length': 999}, b'abc'))

        assert b'/Length 3' in result
        assert b'/Length 999' not in result
        assert b'stream\nabc\nendstream' in result


class TestCompressStreams:
    """Tests for compress_streams."""

    def test_compresses_unfiltered(self):
        """Test large unfiltered streams are flate-compressed."""
        payload = b'BT /F1 12 Tf (hello) Tj ET\n' * 20
        doc = Document()
        doc.insert(ObjectId(1), Stream({}, payload))

        count = compress_streams(doc)

        stream = doc.get(ObjectId(1))
        assert count == 1
        assert stream.dictionary['Filter'] == 'FlateDecode'
        assert zlib.decompress(stream.data) == payload

    def test_skips_filtered_small_and_metadata(self):
        """Test filtered, tiny and metadata streams are untouched."""
        doc = Document()
        doc.insert(ObjectId(1), Stream({'Filter': Name('DCTDecode')}, b'x' * 500))
        doc.insert(ObjectId(2), Stream({}, b'tiny'))
        doc.insert(ObjectId(3), Stream({'Type': Name('Metadata')}, b'<x/>' * 100))

        assert compress_streams(doc) == 0
        assert doc.get(ObjectId(1)).data == b'x' * 500
        assert doc.get(ObjectId(3)).data == b'<x/>' * 100


class TestSave:
    """Tests for save."""

    def test_header_and_trailer(self, document_factory):
        """Test file framing."""
        data = save(document_factory())

        assert data.startswith(b'%PDF-1.7\n%')
        assert data.endswith(b'%%EOF\n')
        assert b'/Root 1 0 R' in data
        assert b'/Size 8' in data

    def test_xref_offsets_point_at_objects(self, document_factory):
        """Test every xref entry points at its object header."""
        doc = document_factory(page_count=3, with_outline=True)

        data = save(doc)

        offsets = xref_offsets(data)
        assert set(offsets) == {object_id.num for object_id in doc.objects}
        for num, offset in offsets.items():
            assert data[offset:].startswith(b'%d 0 obj' % num)

    def test_sparse_ids_split_sections(self):
        """Test gaps in numbering produce separate xref subsections."""
        doc = Document()
        doc.insert(ObjectId(1), {'Type': Name('Catalog')})
        doc.insert(ObjectId(5), 3)
        doc.trailer['Root'] = ObjectId(1)

        data = save(doc)

        assert b'\n1 1\n' in data
        assert b'\n5 1\n' in data
        assert set(xref_offsets(data)) == {1, 5}

    def test_xref_entries_are_20_bytes(self, document_factory):
        """Test classic xref entries are fixed width."""
        data = save(document_factory())

        entries = re.findall(rb'\d{10} \d{5} [nf] \n', data)
        assert len(entries) == 8
        assert all(len(entry) == 20 for entry in entries)

    def test_version_written(self, document_factory):
        """Test the document version lands in the header."""
        doc = document_factory()
        doc.version = "1.4"

        assert save(doc).startswith(b'%PDF-1.4')

    def test_missing_root(self):
        """Test documents without /Root cannot be written."""
        doc = Document()
        doc.insert(ObjectId(1), 1)

        with pytest.raises(SerializationError):
            save(doc)

    def test_unserializable_object(self):
        """Test bad values surface as SerializationError."""
        doc = Document()
        doc.insert(ObjectId(1), {'Type': Name('Catalog'), 'Bad': object()})
        doc.trailer['Root'] = ObjectId(1)

        with pytest.raises(SerializationError):
            save(doc)
