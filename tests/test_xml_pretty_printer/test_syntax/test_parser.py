"""Tests for the syntax parser."""

import pytest

from xml_pretty_printer.shared import XMLSyntaxError
from xml_pretty_printer.syntax import (
    CharData,
    MiscKind,
    ReferenceKind,
    SourceLocation,
    XMLSyntaxParser,
    parse_document,
)


class TestDocumentStructure:
    """Test top-level document parsing."""

    def test_minimal_document(self):
        """Test parsing a single empty element."""
        document = parse_document("<root/>")

        assert document.prolog is None
        assert document.doc_type_decl is None
        assert document.misc == []
        assert document.element.name == "root"
        assert document.element.self_closing is True
        assert document.element.content is None

    def test_prolog(self):
        """Test parsing the XML declaration."""
        document = parse_document('<?xml version="1.0" encoding=\'UTF-8\'?>\n<a/>')

        prolog = document.prolog
        assert [a.name for a in prolog.attributes] == ["version", "encoding"]
        assert prolog.attributes[1].value == "'UTF-8'"
        assert prolog.attributes[1].inner_value == "UTF-8"
        assert prolog.attributes[1].quote == "'"
        assert prolog.location.start_offset == 0

    def test_prolog_only_at_start(self):
        """Test that an XML declaration after other content is rejected."""
        with pytest.raises(XMLSyntaxError, match="only allowed at the start"):
            parse_document('\n<?xml version="1.0"?><a/>')

    def test_misc_nodes(self):
        """Test top-level comments and processing instructions."""
        document = parse_document('<!-- head --><?style href="a.css"?><a/><!-- tail -->')

        kinds = [misc.kind for misc in document.misc]
        assert kinds == [MiscKind.COMMENT, MiscKind.PROCESSING_INSTRUCTION, MiscKind.COMMENT]
        assert document.misc[0].image == "<!-- head -->"
        assert document.misc[1].image == '<?style href="a.css"?>'

    def test_doctype_with_public_id(self):
        """Test parsing a doctype with a public and system identifier."""
        document = parse_document(
            '<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.0 Strict//EN" '
            '"http://www.w3.org/TR/xhtml1/DTD/xhtml1-strict.dtd"><html/>'
        )

        decl = document.doc_type_decl
        assert decl.name == "html"
        assert decl.external_id.keyword == "PUBLIC"
        assert decl.external_id.public_literal == '"-//W3C//DTD XHTML 1.0 Strict//EN"'
        assert decl.external_id.system_literal.endswith('strict.dtd"')
        assert decl.internal_subset is None

    def test_doctype_with_internal_subset(self):
        """Test that the internal subset is kept verbatim."""
        source = '<!DOCTYPE note [\n  <!ENTITY writer "Don]">\n]>\n<note/>'
        decl = parse_document(source).doc_type_decl

        assert decl.external_id is None
        assert decl.internal_subset == '[\n  <!ENTITY writer "Don]">\n]'

    def test_doctype_system_id(self):
        """Test a SYSTEM identifier."""
        decl = parse_document('<!DOCTYPE note SYSTEM "note.dtd"><note/>').doc_type_decl

        assert decl.external_id.keyword == "SYSTEM"
        assert decl.external_id.public_literal is None
        assert decl.external_id.system_literal == '"note.dtd"'

    def test_iter_elements(self):
        """Test depth-first element iteration."""
        document = parse_document("<a><b><c/></b><d/></a>")
        assert [e.name for e in document.iter_elements()] == ["a", "b", "c", "d"]


class TestContent:
    """Test element content parsing."""

    def test_children_grouped_by_kind(self):
        """Test that content children are grouped by kind."""
        document = parse_document(
            "<a>text<!--c--><b/><![CDATA[x<y]]><?pi data?>&amp;&#65;</a>"
        )
        content = document.element.content

        assert [c.image for c in content.chardata] == ["text"]
        assert [c.image for c in content.comments] == ["<!--c-->"]
        assert [e.name for e in content.elements] == ["b"]
        assert [c.image for c in content.cdata] == ["<![CDATA[x<y]]>"]
        assert [p.image for p in content.processing_instructions] == ["<?pi data?>"]
        assert [(r.image, r.kind) for r in content.references] == [
            ("&amp;", ReferenceKind.ENTITY),
            ("&#65;", ReferenceKind.CHARACTER),
        ]

    def test_chardata_lexing(self):
        """Test that leading whitespace is split from text, trailing is kept."""
        content = parse_document("<a>\n  hello world  <b/></a>").element.content

        assert len(content.chardata) == 2
        whitespace, text = content.chardata
        assert whitespace.is_whitespace and whitespace.image == "\n  "
        assert not text.is_whitespace and text.image == "hello world  "
        assert content.has_text is True

    def test_whitespace_only_content(self):
        """Test content holding only whitespace."""
        content = parse_document("<a>\n  <b/>\n</a>").element.content

        assert all(c.is_whitespace for c in content.chardata)
        assert content.has_text is False
        assert content.is_empty is False

    def test_empty_content(self):
        """Test an element with an end tag but no content."""
        element = parse_document("<a></a>").element

        assert element.self_closing is False
        assert element.end_name == "a"
        assert element.is_closed is True
        assert element.content.is_empty is True

    def test_attributes(self):
        """Test attribute parsing."""
        element = parse_document('<a x = "1" y=\'2\' xml:space="preserve"/>').element

        assert [(a.name, a.value) for a in element.attributes] == [
            ("x", '"1"'),
            ("y", "'2'"),
            ("xml:space", '"preserve"'),
        ]


class TestLocations:
    """Test source locations."""

    def test_location_fields(self):
        """Test offsets, lines and inclusive end columns."""
        document = parse_document("<a>\n  <b>x</b>\n</a>")
        b = document.element.content.elements[0]

        assert b.location == SourceLocation(
            start_offset=6,
            end_offset=13,
            start_line=2,
            start_column=3,
            end_line=2,
            end_column=10,
        )

    def test_adjacent_runs(self):
        """Test that a text run starts right after the whitespace run."""
        content = parse_document("<a>  x</a>").element.content
        whitespace, text = content.chardata

        assert whitespace.location.end_line == text.location.start_line
        assert whitespace.location.end_column + 1 == text.location.start_column

    def test_invalid_location(self):
        """Test location validation."""
        with pytest.raises(ValueError, match="Line numbers"):
            SourceLocation(0, 0, 0, 1, 1, 1)

    def test_chardata_requires_one_class(self):
        """Test that CharData needs exactly one of text or whitespace."""
        location = SourceLocation(0, 0, 1, 1, 1, 1)
        with pytest.raises(ValueError):
            CharData(location)
        with pytest.raises(ValueError):
            CharData(location, text="a", whitespace=" ")


class TestErrors:
    """Test malformed input handling."""

    @pytest.mark.parametrize(
        "source, message",
        [
            ("<a>", "Unclosed element <a>"),
            ("<a></b>", "Mismatched end tag"),
            ("<a/><b/>", "Only one root element"),
            ("text<a/>", "Unexpected text"),
            ("<a><!-- open</a>", "Unterminated comment"),
            ("<a x=1/>", "Expected quoted value"),
            ("<a>&bogus</a>", "Malformed character or entity reference"),
            ("<a/><!DOCTYPE a>", "Unexpected DOCTYPE"),
            ("<a><!ELEMENT a ANY></a>", "Unexpected markup declaration"),
        ],
    )
    def test_malformed_input(self, source, message):
        """Test that malformed input raises XMLSyntaxError."""
        with pytest.raises(XMLSyntaxError, match=message):
            parse_document(source)

    def test_error_position(self):
        """Test that errors carry line and column."""
        with pytest.raises(XMLSyntaxError) as exc_info:
            parse_document("<a>\n  <b></c>\n</a>")

        assert exc_info.value.line == 2
        assert exc_info.value.column == 6

    def test_parser_reuse(self):
        """Test that a parser instance can parse several documents."""
        parser = XMLSyntaxParser(correlation_id="test")

        assert parser.parse("<a/>").element.name == "a"
        assert parser.parse("<b>x</b>").element.name == "b"
