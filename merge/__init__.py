"""
Merge package - Multi-document page merging.

Passes run in order: renumbering, classification, tree reattachment,
outline synthesis.
"""

from .renumber import renumber, renumber_with_map, rewrite_references
from .classifier import ObjectClassifier, Collection, update_merge
from .tree_reattach import TreeReattacher
from .outline_builder import OutlineBuilder
from .engine import MergeEngine, MergeResult, merge_pdf_bytes

__all__ = [
    'renumber',
    'renumber_with_map',
    'rewrite_references',
    'ObjectClassifier',
    'Collection',
    'update_merge',
    'TreeReattacher',
    'OutlineBuilder',
    'MergeEngine',
    'MergeResult',
    'merge_pdf_bytes',
]
