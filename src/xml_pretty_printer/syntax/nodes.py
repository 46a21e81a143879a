"""Annotated XML syntax tree.

Nodes are read-only records produced by ``XMLSyntaxParser``. Every node carries
a ``SourceLocation``; offsets index into the (line-ending normalized) source
text. ``Content`` groups its children by kind rather than by position, so
document order has to be recovered by sorting on offsets.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional


@dataclass(frozen=True)
class SourceLocation:
    """Position of a node in the source text.

    Lines and columns are 1-based. ``end_offset`` and ``end_column`` address
    the last character of the node (inclusive bounds).
    """

    start_offset: int
    end_offset: int
    start_line: int
    start_column: int
    end_line: int
    end_column: int

    def __post_init__(self) -> None:
        """Validate position values."""
        if self.start_line < 1 or self.end_line < 1:
            raise ValueError("Line numbers must be >= 1")
        if self.start_offset < 0:
            raise ValueError("Offset must be >= 0")


@dataclass(frozen=True)
class Token:
    """Literal source text of a comment, CData section or processing instruction."""

    image: str
    location: SourceLocation


@dataclass(frozen=True)
class Attribute:
    """Element or XML declaration attribute.

    ``value`` is the raw quoted literal, including its quote characters.
    """

    name: str
    value: str
    location: SourceLocation

    @property
    def quote(self) -> str:
        """Get the original quote character."""
        return self.value[:1]

    @property
    def inner_value(self) -> str:
        """Get the literal text between the quotes (entities left undecoded)."""
        return self.value[1:-1]


@dataclass(frozen=True)
class CharData:
    """A run of character data.

    Exactly one of ``text`` (significant text) or ``whitespace`` (a
    whitespace-only run) is set, mirroring the lexical class that produced it.
    """

    location: SourceLocation
    text: Optional[str] = None
    whitespace: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate that exactly one lexical class is present."""
        if (self.text is None) == (self.whitespace is None):
            raise ValueError("CharData needs exactly one of text or whitespace")

    @property
    def image(self) -> str:
        """Get the literal source text."""
        return self.text if self.text is not None else self.whitespace  # type: ignore[return-value]

    @property
    def is_whitespace(self) -> bool:
        """Check if this run is whitespace-only."""
        return self.text is None


class ReferenceKind(Enum):
    """Kinds of references appearing in content."""

    CHARACTER = auto()  # &#160; or &#xA0;
    ENTITY = auto()     # &amp;


@dataclass(frozen=True)
class Reference:
    """Character or entity reference held as its literal source text."""

    image: str
    kind: ReferenceKind
    location: SourceLocation


@dataclass(frozen=True)
class Content:
    """Children of an element, grouped by kind."""

    location: SourceLocation
    chardata: List[CharData] = field(default_factory=list)
    cdata: List[Token] = field(default_factory=list)
    comments: List[Token] = field(default_factory=list)
    elements: List["Element"] = field(default_factory=list)
    processing_instructions: List[Token] = field(default_factory=list)
    references: List[Reference] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """Check if the content has no children of any kind."""
        return not (
            self.chardata
            or self.cdata
            or self.comments
            or self.elements
            or self.processing_instructions
            or self.references
        )

    @property
    def has_text(self) -> bool:
        """Check if any character data run is significant text."""
        return any(not chardata.is_whitespace for chardata in self.chardata)


@dataclass(frozen=True)
class Element:
    """XML element.

    ``content`` is ``None`` for self-closed elements. ``end_name`` is the name
    written in the end tag and is ``None`` when there is no end tag.
    """

    name: str
    location: SourceLocation
    attributes: List[Attribute] = field(default_factory=list)
    content: Optional[Content] = None
    self_closing: bool = False
    end_name: Optional[str] = None

    @property
    def is_closed(self) -> bool:
        """Check if the element was self-closed or has an end tag."""
        return self.self_closing or self.end_name is not None


@dataclass(frozen=True)
class ExternalID:
    """``SYSTEM "..."`` or ``PUBLIC "..." "..."`` identifier of a doctype."""

    keyword: str
    location: SourceLocation
    public_literal: Optional[str] = None
    system_literal: Optional[str] = None


@dataclass(frozen=True)
class DocTypeDecl:
    """``<!DOCTYPE ...>`` declaration; the internal subset is kept verbatim."""

    name: str
    location: SourceLocation
    external_id: Optional[ExternalID] = None
    internal_subset: Optional[str] = None


@dataclass(frozen=True)
class Prolog:
    """``<?xml ...?>`` declaration with its pseudo-attributes."""

    location: SourceLocation
    attributes: List[Attribute] = field(default_factory=list)


class MiscKind(Enum):
    """Kinds of top-level miscellaneous nodes."""

    COMMENT = auto()
    PROCESSING_INSTRUCTION = auto()


@dataclass(frozen=True)
class Misc:
    """Top-level comment or processing instruction."""

    image: str
    kind: MiscKind
    location: SourceLocation


@dataclass(frozen=True)
class Document:
    """Root of the syntax tree."""

    location: SourceLocation
    prolog: Optional[Prolog] = None
    doc_type_decl: Optional[DocTypeDecl] = None
    misc: List[Misc] = field(default_factory=list)
    element: Optional[Element] = None

    def iter_elements(self) -> List[Element]:
        """Get all elements in document order (depth first)."""
        elements: List[Element] = []

        def collect(element: Element) -> None:
            elements.append(element)
            if element.content is not None:
                for child in sorted(
                    element.content.elements, key=lambda e: e.location.start_offset
                ):
                    collect(child)

        if self.element is not None:
            collect(self.element)
        return elements
