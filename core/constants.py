"""
Constants for the page-merge engine and the PDF codec.
"""

# Object roles (values of /Type)
TYPE_CATALOG = 'Catalog'
TYPE_PAGES = 'Pages'
TYPE_PAGE = 'Page'
TYPE_OUTLINES = 'Outlines'
TYPE_OUTLINE = 'Outline'

# Container types that only exist in the serialized cross-reference layer
CONTAINER_TYPES = ('XRef', 'ObjStm')

# Dictionary keys
KEY_TYPE = 'Type'
KEY_ROOT = 'Root'
KEY_INFO = 'Info'
KEY_PAGES = 'Pages'
KEY_KIDS = 'Kids'
KEY_COUNT = 'Count'
KEY_PARENT = 'Parent'
KEY_OUTLINES = 'Outlines'
KEY_LENGTH = 'Length'
KEY_FILTER = 'Filter'
KEY_DECODE_PARMS = 'DecodeParms'

# Page attributes a page inherits from its ancestors in the page tree
INHERITABLE_PAGE_KEYS = ('Resources', 'MediaBox', 'CropBox', 'Rotate')

# Trailer keys that belong to the object graph (Size, Prev, ID, Encrypt and
# cross-reference stream fields are regenerated or dropped on write)
TRAILER_GRAPH_KEYS = (KEY_ROOT, KEY_INFO)

# Bookmark defaults
DEFAULT_BOOKMARK_TITLE = 'Page_{n}'
DEFAULT_BOOKMARK_COLOR = (0.0, 0.0, 1.0)
DEFAULT_BOOKMARK_LEVEL = 0

# Outline destination fit mode
OUTLINE_DEST_FIT = 'Fit'

# Codec parameters
DEFAULT_PDF_VERSION = '1.7'
PDF_BINARY_MARKER = b'%\xe2\xe3\xcf\xd3'
MIN_COMPRESS_SIZE = 64  # Streams smaller than this stay uncompressed
FLATE_DECODE = 'FlateDecode'
