"""Collection of element content into an offset-ordered fragment list.

``Content`` stores children by kind; the element layout needs them in
document order, each already printed and annotated with what the layout
rules look at (line span, whitespace flags, closedness).
"""

from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, List, Optional

from xml_pretty_printer.layout import group, replace_end_of_line
from xml_pretty_printer.syntax import CharData, Content, SourceLocation, Token

from .text import XML_WHITESPACE, segment_text, text_to_doc, trim_text

if TYPE_CHECKING:
    from .document import NodePrinter


class FragmentKind(Enum):
    """Kinds of content fragments."""

    CDATA = auto()
    COMMENT = auto()
    CHAR_DATA = auto()
    ELEMENT = auto()
    PROCESSING_INSTRUCTION = auto()
    REFERENCE = auto()
    VERBATIM = auto()   # Source text of an ignore range


@dataclass(frozen=True)
class Fragment:
    """One printed child of an element's content.

    Attributes:
        kind: What produced the fragment
        offset: Start offset in the source, used for ordering
        printed: Layout document for the child
        start_line: First source line of the child
        end_line: Last source line of the child
        is_whitespace: Whitespace-only run kept only as a layout hint
        has_new_line: For whitespace runs, whether the run contains a newline
        preserve_whitespace: Character data printed exactly as written
        is_closed: For elements, whether the element was closed
        trailing_whitespace: For text, whether the source run ended in whitespace
    """

    kind: FragmentKind
    offset: int
    printed: Any
    start_line: int
    end_line: int
    is_whitespace: bool = False
    has_new_line: bool = False
    preserve_whitespace: bool = False
    is_closed: bool = True
    trailing_whitespace: bool = False

    @property
    def is_inline(self) -> bool:
        """Check if the fragment flows with surrounding text."""
        return self.kind in (FragmentKind.CHAR_DATA, FragmentKind.REFERENCE)


def _from_location(kind: FragmentKind, location: SourceLocation, printed: Any, **flags: Any) -> Fragment:
    return Fragment(
        kind=kind,
        offset=location.start_offset,
        printed=printed,
        start_line=location.start_line,
        end_line=location.end_line,
        **flags,
    )


def _token_fragments(tokens: List[Token], kind: FragmentKind) -> List[Fragment]:
    return [_from_location(kind, token.location, token.image) for token in tokens]


def _is_adjacent(previous: Optional[SourceLocation], current: SourceLocation) -> bool:
    """Check if ``current`` starts right after ``previous`` on the same line."""
    return (
        previous is not None
        and current.start_line == previous.end_line
        and current.start_column == previous.end_column + 1
    )


def _chardata_fragments(chardata: List[CharData], preserve: bool) -> List[Fragment]:
    fragments: List[Fragment] = []
    previous: Optional[SourceLocation] = None

    for run in chardata:
        location = run.location
        if preserve:
            printed = replace_end_of_line(run.image)
            if fragments and _is_adjacent(previous, location):
                last = fragments[-1]
                fragments[-1] = replace(
                    last,
                    end_line=location.end_line,
                    printed=group([last.printed, printed]),
                )
            else:
                fragments.append(
                    _from_location(
                        FragmentKind.CHAR_DATA, location, printed, preserve_whitespace=True
                    )
                )
        elif run.is_whitespace:
            fragments.append(
                _from_location(
                    FragmentKind.CHAR_DATA,
                    location,
                    run.image,
                    is_whitespace=True,
                    has_new_line="\n" in run.image,
                )
            )
        else:
            text = run.image
            fragments.append(
                _from_location(
                    FragmentKind.CHAR_DATA,
                    location,
                    text_to_doc(segment_text(trim_text(text))),
                    trailing_whitespace=text != text.rstrip(XML_WHITESPACE),
                )
            )
        previous = location

    return fragments


def collect_fragments(content: Content, printer: "NodePrinter", preserve: bool = False) -> List[Fragment]:
    """Print every child of ``content`` and order the results by offset.

    Character data is printed verbatim when ``preserve`` is set or when the
    configuration preserves whitespace and the content has text; adjacent
    verbatim runs are merged into one fragment. Otherwise whitespace runs
    become placeholders and text runs are trimmed and segmented.

    Args:
        content: Element content to collect
        printer: Printer used for nested elements and references
        preserve: Whether the surrounding element keeps whitespace as written

    Returns:
        Fragments sorted by source offset (stable for equal offsets)
    """
    preserve_chardata = preserve or (printer.preserves_whitespace and content.has_text)

    fragments: List[Fragment] = [
        *_token_fragments(content.cdata, FragmentKind.CDATA),
        *_token_fragments(content.comments, FragmentKind.COMMENT),
        *_chardata_fragments(content.chardata, preserve_chardata),
    ]
    for element in content.elements:
        fragments.append(
            _from_location(
                FragmentKind.ELEMENT,
                element.location,
                printer.print(element),
                is_closed=element.is_closed,
            )
        )
    fragments.extend(
        _token_fragments(content.processing_instructions, FragmentKind.PROCESSING_INSTRUCTION)
    )
    for reference in content.references:
        fragments.append(
            _from_location(FragmentKind.REFERENCE, reference.location, printer.print(reference))
        )

    fragments.sort(key=lambda fragment: fragment.offset)
    printer.metrics.fragments_collected += len(fragments)
    return fragments
