"""Concrete syntax parser producing the annotated XML tree.

The parser is strict: malformed markup raises ``XMLSyntaxError`` with the
line and column where scanning stopped. It performs no entity resolution and
no DTD processing; references and the doctype internal subset are kept as
literal text.
"""

import re
from bisect import bisect_right
from typing import List, Optional, Tuple

from xml_pretty_printer.shared import XMLSyntaxError, get_logger

from .nodes import (
    Attribute,
    CharData,
    Content,
    DocTypeDecl,
    Document,
    Element,
    ExternalID,
    Misc,
    MiscKind,
    Prolog,
    Reference,
    ReferenceKind,
    SourceLocation,
    Token,
)

_NAME_START_CHARS = (
    "A-Za-z_:"
    "\u00C0-\u00D6\u00D8-\u00F6\u00F8-\u02FF\u0370-\u037D\u037F-\u1FFF"
    "\u200C-\u200D\u2070-\u218F\u2C00-\u2FEF\u3001-\uD7FF\uF900-\uFDCF\uFDF0-\uFFFD"
)
_NAME_CHARS = _NAME_START_CHARS + "\\-.0-9\u00B7\u0300-\u036F\u203F-\u2040"
_NAME_PATTERN = f"[{_NAME_START_CHARS}][{_NAME_CHARS}]*"

NAME_RE = re.compile(_NAME_PATTERN)
WHITESPACE_RE = re.compile(r"[ \t\r\n]+")
CHAR_REF_RE = re.compile(r"&#(?:[0-9]+|x[0-9a-fA-F]+);")
ENTITY_REF_RE = re.compile(f"&{_NAME_PATTERN};")
ATTRIBUTE_VALUE_RE = re.compile(r"\"[^<\"]*\"|'[^<']*'")
QUOTED_LITERAL_RE = re.compile(r"\"[^\"]*\"|'[^']*'")
CHARDATA_END_RE = re.compile(r"[<&]")

XML_WHITESPACE = " \t\r\n"


class XMLSyntaxParser:
    """Parse XML text into a ``Document`` tree with source locations."""

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        """Initialize the parser.

        Args:
            correlation_id: Optional correlation ID for tracking requests
        """
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "syntax_parser")
        self._reset_state("")

    def _reset_state(self, text: str) -> None:
        """Reset scanner state for new input."""
        self._text = text
        self._pos = 0
        self._line_starts = [0] + [match.end() for match in re.finditer("\n", text)]
        self._element_count = 0

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _line_column(self, offset: int) -> Tuple[int, int]:
        """Convert an offset into a 1-based line and column."""
        index = bisect_right(self._line_starts, offset) - 1
        return index + 1, offset - self._line_starts[index] + 1

    def _location(self, start: int, end: int) -> SourceLocation:
        """Build a location for the half-open range ``[start, end)``."""
        last = max(end - 1, start)
        start_line, start_column = self._line_column(start)
        end_line, end_column = self._line_column(last)
        return SourceLocation(
            start_offset=start,
            end_offset=end - 1,
            start_line=start_line,
            start_column=start_column,
            end_line=end_line,
            end_column=end_column,
        )

    def _error(self, message: str, offset: Optional[int] = None) -> XMLSyntaxError:
        """Create a syntax error positioned at ``offset`` (default: scanner position)."""
        position = self._pos if offset is None else offset
        line, column = self._line_column(min(position, max(len(self._text) - 1, 0)))
        self.logger.debug(
            "Syntax error",
            extra={"reason": message, "line": line, "column": column},
        )
        return XMLSyntaxError(message, line, column, position)

    def _at_end(self) -> bool:
        return self._pos >= len(self._text)

    def _startswith(self, prefix: str) -> bool:
        return self._text.startswith(prefix, self._pos)

    def _expect(self, literal: str, what: str) -> None:
        if not self._startswith(literal):
            raise self._error(f"Expected {what}")
        self._pos += len(literal)

    def _skip_whitespace(self) -> bool:
        """Advance past XML whitespace, returning whether any was consumed."""
        match = WHITESPACE_RE.match(self._text, self._pos)
        if match is None:
            return False
        self._pos = match.end()
        return True

    def _expect_name(self, what: str) -> str:
        match = NAME_RE.match(self._text, self._pos)
        if match is None:
            raise self._error(f"Expected {what}")
        self._pos = match.end()
        return match.group()

    def _scan_until(self, terminator: str, what: str) -> Tuple[str, SourceLocation]:
        """Consume text up to and including ``terminator``."""
        start = self._pos
        end = self._text.find(terminator, start)
        if end == -1:
            raise self._error(f"Unterminated {what}", start)
        self._pos = end + len(terminator)
        return self._text[start:self._pos], self._location(start, self._pos)

    # ------------------------------------------------------------------
    # Grammar
    # ------------------------------------------------------------------

    def parse(self, text: str) -> Document:
        """Parse a complete document.

        Args:
            text: XML source with line endings already normalized

        Returns:
            Annotated document tree

        Raises:
            XMLSyntaxError: If the text is not well-formed enough to build a tree
        """
        self._reset_state(text)

        prolog: Optional[Prolog] = None
        doc_type_decl: Optional[DocTypeDecl] = None
        element: Optional[Element] = None
        misc: List[Misc] = []

        if self._startswith("<?xml") and text[5:6] and text[5] in XML_WHITESPACE:
            prolog = self._parse_prolog()

        while True:
            self._skip_whitespace()
            if self._at_end():
                break

            if self._startswith("<!--"):
                image, location = self._scan_until("-->", "comment")
                misc.append(Misc(image, MiscKind.COMMENT, location))
            elif self._startswith("<!DOCTYPE"):
                if doc_type_decl is not None or element is not None:
                    raise self._error("Unexpected DOCTYPE declaration")
                doc_type_decl = self._parse_doc_type_decl()
            elif self._startswith("<?"):
                token = self._parse_processing_instruction()
                misc.append(Misc(token.image, MiscKind.PROCESSING_INSTRUCTION, token.location))
            elif self._startswith("<"):
                if element is not None:
                    raise self._error("Only one root element is allowed")
                element = self._parse_element()
            else:
                raise self._error("Unexpected text outside of the root element")

        self.logger.debug(
            "Parsed document",
            extra={
                "characters": len(text),
                "elements": self._element_count,
                "misc_nodes": len(misc),
            },
        )

        return Document(
            location=self._location(0, len(text)),
            prolog=prolog,
            doc_type_decl=doc_type_decl,
            misc=misc,
            element=element,
        )

    def _parse_prolog(self) -> Prolog:
        start = self._pos
        self._pos += len("<?xml")
        attributes: List[Attribute] = []
        while True:
            had_whitespace = self._skip_whitespace()
            if self._startswith("?>"):
                self._pos += 2
                break
            if self._at_end():
                raise self._error("Unterminated XML declaration", start)
            if not had_whitespace:
                raise self._error("Expected whitespace in XML declaration")
            attributes.append(self._parse_attribute())
        return Prolog(location=self._location(start, self._pos), attributes=attributes)

    def _parse_processing_instruction(self) -> Token:
        start = self._pos
        image, location = self._scan_until("?>", "processing instruction")
        target = NAME_RE.match(image, 2)
        if target is None:
            raise self._error("Expected processing instruction target", start + 2)
        if target.group().lower() == "xml":
            raise self._error("XML declaration is only allowed at the start", start)
        return Token(image, location)

    def _parse_doc_type_decl(self) -> DocTypeDecl:
        start = self._pos
        self._pos += len("<!DOCTYPE")
        if not self._skip_whitespace():
            raise self._error("Expected whitespace after DOCTYPE")
        name = self._expect_name("doctype name")

        external_id: Optional[ExternalID] = None
        internal_subset: Optional[str] = None

        self._skip_whitespace()
        if self._startswith("SYSTEM") or self._startswith("PUBLIC"):
            external_id = self._parse_external_id()
            self._skip_whitespace()
        if self._startswith("["):
            internal_subset = self._scan_internal_subset()
            self._skip_whitespace()
        self._expect(">", "'>' to close DOCTYPE")

        return DocTypeDecl(
            name=name,
            location=self._location(start, self._pos),
            external_id=external_id,
            internal_subset=internal_subset,
        )

    def _parse_external_id(self) -> ExternalID:
        start = self._pos
        keyword = self._text[start:start + 6]
        self._pos += 6
        if not self._skip_whitespace():
            raise self._error(f"Expected whitespace after {keyword}")

        public_literal: Optional[str] = None
        system_literal: Optional[str] = None
        if keyword == "PUBLIC":
            public_literal = self._expect_quoted_literal("public identifier")
            end = self._pos
            if self._skip_whitespace() and QUOTED_LITERAL_RE.match(self._text, self._pos):
                system_literal = self._expect_quoted_literal("system literal")
            else:
                # Public identifier without system literal, rewind the whitespace
                self._pos = end
        else:
            system_literal = self._expect_quoted_literal("system literal")

        return ExternalID(
            keyword=keyword,
            location=self._location(start, self._pos),
            public_literal=public_literal,
            system_literal=system_literal,
        )

    def _expect_quoted_literal(self, what: str) -> str:
        match = QUOTED_LITERAL_RE.match(self._text, self._pos)
        if match is None:
            raise self._error(f"Expected {what}")
        self._pos = match.end()
        return match.group()

    def _scan_internal_subset(self) -> str:
        """Consume ``[ ... ]`` skipping over quoted literals and comments."""
        start = self._pos
        self._pos += 1
        text = self._text
        while not self._at_end():
            if self._startswith("<!--"):
                self._scan_until("-->", "comment")
                continue
            char = text[self._pos]
            if char in "\"'":
                closing = text.find(char, self._pos + 1)
                if closing == -1:
                    raise self._error("Unterminated literal in internal subset")
                self._pos = closing + 1
                continue
            self._pos += 1
            if char == "]":
                return text[start:self._pos]
        raise self._error("Unterminated DOCTYPE internal subset", start)

    def _parse_attribute(self) -> Attribute:
        start = self._pos
        name = self._expect_name("attribute name")
        self._skip_whitespace()
        self._expect("=", "'=' after attribute name")
        self._skip_whitespace()
        match = ATTRIBUTE_VALUE_RE.match(self._text, self._pos)
        if match is None:
            raise self._error(f"Expected quoted value for attribute '{name}'")
        self._pos = match.end()
        return Attribute(name=name, value=match.group(), location=self._location(start, self._pos))

    def _parse_element(self) -> Element:
        start = self._pos
        self._pos += 1
        name = self._expect_name("element name")
        self._element_count += 1

        attributes: List[Attribute] = []
        while True:
            had_whitespace = self._skip_whitespace()
            if self._startswith("/>"):
                self._pos += 2
                return Element(
                    name=name,
                    location=self._location(start, self._pos),
                    attributes=attributes,
                    self_closing=True,
                )
            if self._startswith(">"):
                self._pos += 1
                break
            if self._at_end():
                raise self._error(f"Unterminated start tag <{name}>", start)
            if not had_whitespace:
                raise self._error("Expected whitespace before attribute")
            attributes.append(self._parse_attribute())

        content = self._parse_content(name, start)

        end_tag = self._pos
        self._pos += 2
        end_name = self._expect_name("end tag name")
        if end_name != name:
            raise self._error(f"Mismatched end tag: expected </{name}>, found </{end_name}>", end_tag)
        self._skip_whitespace()
        self._expect(">", "'>' to close end tag")

        return Element(
            name=name,
            location=self._location(start, self._pos),
            attributes=attributes,
            content=content,
            end_name=end_name,
        )

    def _parse_content(self, parent: str, parent_start: int) -> Content:
        start = self._pos
        chardata: List[CharData] = []
        cdata: List[Token] = []
        comments: List[Token] = []
        elements: List[Element] = []
        processing_instructions: List[Token] = []
        references: List[Reference] = []

        while True:
            if self._at_end():
                raise self._error(f"Unclosed element <{parent}>", parent_start)
            if self._startswith("</"):
                break
            if self._startswith("<!--"):
                comments.append(Token(*self._scan_until("-->", "comment")))
            elif self._startswith("<![CDATA["):
                cdata.append(Token(*self._scan_until("]]>", "CDATA section")))
            elif self._startswith("<?"):
                processing_instructions.append(self._parse_processing_instruction())
            elif self._startswith("<!"):
                raise self._error("Unexpected markup declaration in content")
            elif self._startswith("<"):
                elements.append(self._parse_element())
            elif self._startswith("&"):
                references.append(self._parse_reference())
            else:
                chardata.extend(self._parse_chardata())

        return Content(
            location=self._location(start, self._pos),
            chardata=chardata,
            cdata=cdata,
            comments=comments,
            elements=elements,
            processing_instructions=processing_instructions,
            references=references,
        )

    def _parse_reference(self) -> Reference:
        start = self._pos
        for pattern, kind in (
            (CHAR_REF_RE, ReferenceKind.CHARACTER),
            (ENTITY_REF_RE, ReferenceKind.ENTITY),
        ):
            match = pattern.match(self._text, start)
            if match is not None:
                self._pos = match.end()
                return Reference(match.group(), kind, self._location(start, self._pos))
        raise self._error("Malformed character or entity reference")

    def _parse_chardata(self) -> List[CharData]:
        """Lex one run of character data.

        A leading whitespace-only run becomes its own ``CharData``; the rest
        of the run up to the next markup or reference is significant text,
        trailing whitespace included.
        """
        start = self._pos
        match = CHARDATA_END_RE.search(self._text, start)
        end = match.start() if match is not None else len(self._text)

        runs: List[CharData] = []
        leading = WHITESPACE_RE.match(self._text, start, end)
        text_start = start
        if leading is not None:
            text_start = leading.end()
            runs.append(
                CharData(
                    location=self._location(start, text_start),
                    whitespace=leading.group(),
                )
            )
        if text_start < end:
            runs.append(
                CharData(
                    location=self._location(text_start, end),
                    text=self._text[text_start:end],
                )
            )
        self._pos = end
        return runs


def parse_document(text: str, correlation_id: Optional[str] = None) -> Document:
    """Parse XML text into an annotated document tree."""
    return XMLSyntaxParser(correlation_id=correlation_id).parse(text)
