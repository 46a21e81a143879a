"""Word and line segmentation of significant text.

``segment_text`` is a pure function from a string to a token list; turning
the tokens into layout primitives happens separately in ``text_to_doc``.
"""

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, List

from xml_pretty_printer.layout import fill, group, line, literalline

XML_WHITESPACE = " \t\r\n"

# Whitespace between two word characters is a break opportunity. Runs touching
# punctuation stay attached so "a , b" never wraps before the comma.
_BREAKABLE_SPACE_RE = re.compile(r"\b([ \t\r]+)\b")


class SegmentKind(Enum):
    """Kinds of text segments."""

    WORD = auto()       # Text printed as-is, may contain unbreakable spaces
    SPACE = auto()      # Whitespace that may become a line break
    NEWLINE = auto()    # Source line break, always kept


@dataclass(frozen=True)
class TextSegment:
    """One token of segmented text."""

    kind: SegmentKind
    value: str


def trim_text(text: str) -> str:
    """Strip leading and trailing XML whitespace."""
    return text.strip(XML_WHITESPACE)


def segment_text(text: str) -> List[TextSegment]:
    """Split text into words, breakable spaces and forced newlines.

    Every source line yields an odd-length alternation of WORD and SPACE
    segments (starting and ending with a WORD, possibly empty); lines are
    separated by NEWLINE segments.

    Example:
        >>> [s.value for s in segment_text("a b\\nc")]
        ['a', ' ', 'b', '\\n', 'c']
    """
    segments: List[TextSegment] = []
    for index, source_line in enumerate(text.split("\n")):
        if index > 0:
            segments.append(TextSegment(SegmentKind.NEWLINE, "\n"))
        for position, chunk in enumerate(_BREAKABLE_SPACE_RE.split(source_line)):
            kind = SegmentKind.SPACE if position % 2 else SegmentKind.WORD
            segments.append(TextSegment(kind, chunk))
    return segments


def text_to_doc(segments: List[TextSegment]) -> Any:
    """Build a group of fills, one per source line, joined by literal lines."""
    parts: List[Any] = []
    current: List[Any] = []
    for segment in segments:
        if segment.kind is SegmentKind.NEWLINE:
            parts.extend([fill(current), literalline])
            current = []
        elif segment.kind is SegmentKind.SPACE:
            current.append(line)
        else:
            current.append(segment.value)
    parts.append(fill(current))
    return group(parts)
