"""Ignore ranges delimited by marker comments.

Content between a start marker comment and the next end marker comment is
reproduced byte-for-byte from the source, markers included.
"""

from bisect import bisect_left
from dataclasses import dataclass
from typing import List, Optional, Tuple

from xml_pretty_printer.layout import replace_end_of_line
from xml_pretty_printer.shared.config import (
    DEFAULT_IGNORE_END_MARKER,
    DEFAULT_IGNORE_START_MARKER,
)
from xml_pretty_printer.syntax import Token

from .fragments import Fragment, FragmentKind


@dataclass(frozen=True)
class IgnoreRange:
    """Inclusive source span from a start marker to an end marker."""

    start: int
    end: int
    start_line: int
    end_line: int

    def contains(self, offset: int) -> bool:
        """Check if ``offset`` lies inside the range."""
        return self.start <= offset <= self.end


def scan_ignore_markers(
    comments: List[Token],
    start_marker: str = DEFAULT_IGNORE_START_MARKER,
    end_marker: str = DEFAULT_IGNORE_END_MARKER,
) -> Tuple[List[IgnoreRange], Optional[Token]]:
    """Pair marker comments into ranges.

    ``comments`` is sorted in place by offset. A start marker is paired with
    the first end marker after it; a later start marker before that end
    replaces the pending one. End markers without a pending start are
    ignored.

    Returns:
        Ranges in source order and the start marker left unpaired, if any
    """
    comments.sort(key=lambda comment: comment.location.start_offset)

    ranges: List[IgnoreRange] = []
    pending: Optional[Token] = None
    for comment in comments:
        if comment.image == start_marker:
            pending = comment
        elif comment.image == end_marker and pending is not None:
            ranges.append(
                IgnoreRange(
                    start=pending.location.start_offset,
                    end=comment.location.end_offset,
                    start_line=pending.location.start_line,
                    end_line=comment.location.end_line,
                )
            )
            pending = None
    return ranges, pending


def find_ignore_ranges(
    comments: List[Token],
    start_marker: str = DEFAULT_IGNORE_START_MARKER,
    end_marker: str = DEFAULT_IGNORE_END_MARKER,
) -> List[IgnoreRange]:
    """Get the ignore ranges among ``comments`` in source order."""
    ranges, _ = scan_ignore_markers(comments, start_marker, end_marker)
    return ranges


def has_ignore_ranges(
    comments: List[Token],
    start_marker: str = DEFAULT_IGNORE_START_MARKER,
    end_marker: str = DEFAULT_IGNORE_END_MARKER,
) -> bool:
    """Check if a start marker is followed by an end marker."""
    started = False
    for comment in sorted(comments, key=lambda comment: comment.location.start_offset):
        if comment.image == start_marker:
            started = True
        elif comment.image == end_marker and started:
            return True
    return False


def splice_ignore_ranges(
    fragments: List[Fragment], ranges: List[IgnoreRange], source: str
) -> List[Fragment]:
    """Replace the fragments covered by ``ranges`` with verbatim source text.

    Whitespace placeholders are dropped along with covered fragments; each
    range becomes one fragment inserted at its offset position.
    """
    if not ranges:
        return fragments

    kept = [
        fragment
        for fragment in fragments
        if not fragment.is_whitespace
        and not any(ignore_range.contains(fragment.offset) for ignore_range in ranges)
    ]
    offsets = [fragment.offset for fragment in kept]

    for ignore_range in ranges:
        verbatim = Fragment(
            kind=FragmentKind.VERBATIM,
            offset=ignore_range.start,
            printed=replace_end_of_line(source[ignore_range.start:ignore_range.end + 1]),
            start_line=ignore_range.start_line,
            end_line=ignore_range.end_line,
        )
        index = bisect_left(offsets, ignore_range.start)
        kept.insert(index, verbatim)
        offsets.insert(index, ignore_range.start)

    return kept
