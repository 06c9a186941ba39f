"""
Unit tests for merge.renumber module.
"""
from core.models import Document, Name, ObjectId, Stream
from merge.renumber import renumber, renumber_with_map, rewrite_references


class TestRewriteReferences:
    """Tests for rewrite_references."""

    def test_nested_values(self):
        """Test references inside arrays and dictionaries are rewritten."""
        mapping = {ObjectId(1): ObjectId(10), ObjectId(2): ObjectId(20)}
        value = {'A': [ObjectId(1), {'B': ObjectId(2)}], 'C': 5}

        result = rewrite_references(value, mapping, set())

        assert result == {'A': [ObjectId(10), {'B': ObjectId(20)}], 'C': 5}

    def test_dangling_becomes_null(self):
        """Test unmapped references are nulled and reported."""
        dangling = set()

        result = rewrite_references([ObjectId(99)], {}, dangling)

        assert result == [None]
        assert dangling == {ObjectId(99)}

    def test_stream_dictionary(self):
        """Test stream dictionaries are rewritten, payload kept."""
        stream = Stream({'Resources': ObjectId(1)}, b"payload")

        result = rewrite_references(stream, {ObjectId(1): ObjectId(4)}, set())

        assert result.dictionary == {'Resources': ObjectId(4)}
        assert result.data == b"payload"


class TestRenumber:
    """Tests for renumber / renumber_with_map."""

    def test_dense_range_from_start(self, document_factory):
        """Test ids become a dense range starting at the given number."""
        doc = document_factory(page_count=2)
        count = len(doc.objects)

        next_free = renumber(doc, 10)

        assert next_free == 10 + count
        assert sorted(doc.objects) == [ObjectId(n) for n in range(10, 10 + count)]
        assert doc.max_id == 10 + count - 1

    def test_edges_preserved(self, document_factory):
        """Test the page tree is still walkable after renumbering."""
        doc = document_factory(page_count=3)
        before = [doc.get(page_id)['Contents'] for page_id in doc.get_pages()]
        contents_before = [doc.get(ref).data for ref in before]

        renumber(doc, 100)

        pages = doc.get_pages()
        assert len(pages) == 3
        assert [doc.get(doc.get(p)['Contents']).data for p in pages] == contents_before
        assert doc.trailer['Root'] == ObjectId(100)

    def test_sparse_ids_keep_order(self):
        """Test sparse ids are compacted in ascending order."""
        doc = Document()
        doc.insert(ObjectId(3), {'Next': ObjectId(20)})
        doc.insert(ObjectId(7), 1)
        doc.insert(ObjectId(20), {'Type': Name('Font')})
        doc.trailer['Root'] = ObjectId(3)

        _, mapping = renumber_with_map(doc, 1)

        assert mapping == {
            ObjectId(3): ObjectId(1),
            ObjectId(7): ObjectId(2),
            ObjectId(20): ObjectId(3),
        }
        assert doc.get(ObjectId(1)) == {'Next': ObjectId(3)}

    def test_nonzero_generation_reset(self):
        """Test generations are reset to 0."""
        doc = Document()
        doc.insert(ObjectId(4, 2), {'Self': ObjectId(4, 2)})

        renumber(doc, 1)

        assert doc.objects == {ObjectId(1, 0): {'Self': ObjectId(1, 0)}}

    def test_dangling_reference_nulled(self):
        """Test references to missing objects become null."""
        doc = Document()
        doc.insert(ObjectId(1), {'Missing': ObjectId(50)})
        doc.trailer['Root'] = ObjectId(1)

        renumber(doc, 5)

        assert doc.get(ObjectId(5)) == {'Missing': None}

    def test_disjoint_ranges(self, document_factory):
        """Test sequential renumbering gives disjoint id ranges."""
        first = document_factory(label="A")
        second = document_factory(label="B")

        next_id = renumber(first, 1)
        renumber(second, next_id)

        assert not set(first.objects) & set(second.objects)
        assert min(second.objects).num == max(first.objects).num + 1
