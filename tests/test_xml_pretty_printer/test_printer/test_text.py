"""Tests for text segmentation."""

from xml_pretty_printer.layout import fill, group, line, literalline
from xml_pretty_printer.printer import SegmentKind, TextSegment, segment_text, text_to_doc
from xml_pretty_printer.printer.text import trim_text


class TestSegmentText:
    """Test splitting text into words, spaces and newlines."""

    def test_words_and_spaces(self):
        """Test whitespace between words becomes SPACE segments."""
        assert segment_text("hello  big world") == [
            TextSegment(SegmentKind.WORD, "hello"),
            TextSegment(SegmentKind.SPACE, "  "),
            TextSegment(SegmentKind.WORD, "big"),
            TextSegment(SegmentKind.SPACE, " "),
            TextSegment(SegmentKind.WORD, "world"),
        ]

    def test_newlines(self):
        """Test that newlines are kept as NEWLINE segments."""
        segments = segment_text("a b\nc")

        assert [s.value for s in segments] == ["a", " ", "b", "\n", "c"]
        assert segments[3].kind is SegmentKind.NEWLINE

    def test_space_next_to_punctuation_is_not_breakable(self):
        """Test that whitespace touching punctuation stays in the word."""
        assert segment_text("a , b") == [TextSegment(SegmentKind.WORD, "a , b")]

    def test_leading_indentation_kept(self):
        """Test that indentation after a newline stays with the word."""
        segments = segment_text("a\n  b")
        assert segments[-1] == TextSegment(SegmentKind.WORD, "  b")

    def test_no_break_space_is_not_breakable(self):
        """Test that U+00A0 never becomes a line break."""
        assert segment_text("a\u00a0b") == [TextSegment(SegmentKind.WORD, "a\u00a0b")]

    def test_empty_text(self):
        """Test segmentation of an empty string."""
        assert segment_text("") == [TextSegment(SegmentKind.WORD, "")]


class TestTextToDoc:
    """Test conversion of segments to layout documents."""

    def test_single_line(self):
        """Test a single line becomes one fill."""
        assert text_to_doc(segment_text("a b")) == group([fill(["a", line, "b"])])

    def test_multiple_lines(self):
        """Test lines are joined with literal lines."""
        assert text_to_doc(segment_text("a\nb c")) == group([
            fill(["a"]),
            literalline,
            fill(["b", line, "c"]),
        ])

    def test_trim_text(self):
        """Test that only XML whitespace is trimmed."""
        assert trim_text(" \t\r\nabc \n") == "abc"
        assert trim_text(" abc") == " abc"
