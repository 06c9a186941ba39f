"""
Pytest configuration and global fixtures.
"""
import sys
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from codec import save
from core.models import Document, Name, ObjectId, PdfString, Stream
from data.db_models import Base


def build_document(
    page_count: int = 1,
    label: str = "A",
    nested: bool = False,
    with_outline: bool = False,
    with_info: bool = True
) -> Document:
    """
    Build a small, well-formed document graph.

    Layout (object numbers):
        1 Catalog, 2 Pages root (MediaBox + Resources inherited by pages),
        3 Resources, 4 Font, then per page a Page and its content stream,
        optionally an intermediate Pages node, outline objects and Info.

    Each page's content stream shows "(<label> page <n>)" so tests can tell
    pages apart after renumbering.
    """
    doc = Document()
    catalog_id, root_id = ObjectId(1), ObjectId(2)
    resources_id, font_id = ObjectId(3), ObjectId(4)
    doc.max_id = 4

    doc.insert(font_id, {
        'Type': Name('Font'),
        'Subtype': Name('Type1'),
        'BaseFont': Name('Helvetica'),
    })
    doc.insert(resources_id, {'Font': {'F1': font_id}})

    parent_id = root_id
    root_kids = []
    if nested:
        parent_id = doc.new_object_id()
        root_kids.append(parent_id)

    page_ids = []
    for number in range(1, page_count + 1):
        content = f"BT /F1 24 Tf 72 720 Td ({label} page {number}) Tj ET".encode('ascii')
        content_id = doc.add_object(Stream({}, content))
        page_id = doc.add_object({
            'Type': Name('Page'),
            'Parent': parent_id,
            'Contents': content_id,
        })
        page_ids.append(page_id)

    if nested:
        doc.insert(parent_id, {
            'Type': Name('Pages'),
            'Parent': root_id,
            'Kids': list(page_ids),
            'Count': page_count,
        })
    else:
        root_kids = list(page_ids)

    doc.insert(root_id, {
        'Type': Name('Pages'),
        'Kids': root_kids,
        'Count': page_count,
        'MediaBox': [0, 0, 612, 792],
        'Resources': resources_id,
    })

    catalog = {'Type': Name('Catalog'), 'Pages': root_id}

    if with_outline and page_ids:
        outlines_id = doc.new_object_id()
        item_id = doc.new_object_id()
        doc.insert(outlines_id, {
            'Type': Name('Outlines'),
            'First': item_id,
            'Last': item_id,
            'Count': 1,
        })
        doc.insert(item_id, {
            'Type': Name('Outline'),
            'Title': PdfString(f"Old {label}".encode('ascii')),
            'Parent': outlines_id,
            'Dest': [page_ids[0], Name('Fit')],
        })
        catalog['Outlines'] = outlines_id

    doc.insert(catalog_id, catalog)
    doc.trailer['Root'] = catalog_id

    if with_info:
        info_id = doc.add_object({'Producer': PdfString(f"builder {label}".encode('ascii'))})
        doc.trailer['Info'] = info_id

    return doc


def build_empty_document() -> Document:
    """Catalog plus an empty page-tree root: a well-formed zero-page input."""
    doc = Document()
    doc.insert(ObjectId(1), {'Type': Name('Catalog'), 'Pages': ObjectId(2)})
    doc.insert(ObjectId(2), {'Type': Name('Pages'), 'Kids': [], 'Count': 0})
    doc.trailer['Root'] = ObjectId(1)
    return doc


def content_label(doc: Document, page_id: ObjectId) -> bytes:
    """Return the (uncompressed) content stream bytes of a page."""
    page = doc.get_dictionary(page_id)
    stream = doc.get(page['Contents'])
    return stream.data


@pytest.fixture
def document_factory():
    """Factory building in-memory documents (see build_document)."""
    return build_document


@pytest.fixture
def empty_document():
    """Zero-page document (see build_empty_document)."""
    return build_empty_document()


@pytest.fixture
def page_content():
    """Helper returning a page's content stream bytes."""
    return content_label


@pytest.fixture
def pdf_factory():
    """Factory building PDF bytes from build_document arguments."""
    def _make(empty: bool = False, **kwargs):
        if empty:
            return save(build_empty_document())
        return save(build_document(**kwargs))
    return _make


@pytest.fixture
def fitz_pdf_factory():
    """Factory building PDF bytes with PyMuPDF, optionally with a TOC."""
    import fitz

    def _make(page_count: int = 1, toc=None, width: float = 595, height: float = 842):
        doc = fitz.open()
        for number in range(1, page_count + 1):
            page = doc.new_page(width=width, height=height)
            page.insert_text((72, 72), f"fitz page {number}")
        if toc:
            doc.set_toc(toc)
        data = doc.tobytes()
        doc.close()
        return data

    return _make


@pytest.fixture(scope="session")
def test_db_engine():
    """Create in-memory SQLite engine shared across threads."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
        echo=False
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)


@pytest.fixture
def test_db_session(test_db_engine):
    """Create fresh database session for each test."""
    Session = sessionmaker(bind=test_db_engine)
    session = Session()

    yield session

    # Rollback any uncommitted changes, clear committed rows and close
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture
def temp_dir(tmp_path):
    """Provide temporary directory for test files."""
    return tmp_path
