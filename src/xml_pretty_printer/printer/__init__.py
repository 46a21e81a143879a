"""Transformation of syntax trees into layout documents.

Key Components:
    NodePrinter: Dispatches on node type and owns per-pass diagnostics
    ElementLayoutBuilder: Tag printing and the whitespace-driven child layout
    collect_fragments: Offset-ordered, printed children of an element
    EmbedRegistry: Embedded-language formatters keyed by element name
"""

from .attributes import compare_attribute_names, print_attribute, quote_attribute_value, sort_attributes
from .document import NodePrinter, print_document
from .elements import ElementLayoutBuilder
from .embed import EmbedRegistry, Embedder
from .fragments import Fragment, FragmentKind, collect_fragments
from .ignore_ranges import (
    IgnoreRange,
    find_ignore_ranges,
    has_ignore_ranges,
    scan_ignore_markers,
    splice_ignore_ranges,
)
from .text import SegmentKind, TextSegment, segment_text, text_to_doc
from .whitespace import is_whitespace_ignorable

__all__ = [
    "compare_attribute_names",
    "print_attribute",
    "quote_attribute_value",
    "sort_attributes",
    "NodePrinter",
    "print_document",
    "ElementLayoutBuilder",
    "EmbedRegistry",
    "Embedder",
    "Fragment",
    "FragmentKind",
    "collect_fragments",
    "IgnoreRange",
    "find_ignore_ranges",
    "has_ignore_ranges",
    "scan_ignore_markers",
    "splice_ignore_ranges",
    "SegmentKind",
    "TextSegment",
    "segment_text",
    "text_to_doc",
    "is_whitespace_ignorable",
]
