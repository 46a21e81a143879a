"""Element layout.

Builds the layout document for one element: the open tag with its
attributes, the children laid out according to the whitespace policy, and
the close tag.

When whitespace is ignorable the children are laid out one per line, except
that:

* a blank line in the source between two children is kept (collapsed to one);
* text and references that follow each other flow together in one fill;
* a comment written on the same line as what precedes it stays there, and a
  leading comment stays on the open tag's line.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, List, Optional, Tuple

from xml_pretty_printer.layout import (
    fill,
    group,
    hardline,
    if_break,
    indent,
    join,
    line,
    replace_end_of_line,
    softline,
)
from xml_pretty_printer.shared import DiagnosticSeverity, WhitespaceSensitivity
from xml_pretty_printer.syntax import Content, Element

from .attributes import print_attribute, sort_attributes
from .fragments import Fragment, FragmentKind, collect_fragments
from .ignore_ranges import scan_ignore_markers, splice_ignore_ranges
from .whitespace import is_whitespace_ignorable

if TYPE_CHECKING:
    from .document import NodePrinter


class UnitStyle(Enum):
    """How the parts of a layout unit are wrapped."""

    PLAIN = auto()   # Parts printed as-is
    GROUP = auto()   # Parts share one group
    FILL = auto()    # Parts alternate content and separators of a fill


@dataclass
class _LayoutUnit:
    """Children that are laid out together, preceded by forced breaks."""

    style: UnitStyle
    leading: List[Any] = field(default_factory=list)
    parts: List[Any] = field(default_factory=list)

    def to_doc(self) -> List[Any]:
        if self.style is UnitStyle.GROUP:
            body: Any = group(self.parts)
        elif self.style is UnitStyle.FILL:
            body = group(fill(self.parts))
        else:
            body = self.parts
        return [*self.leading, body]


class ElementLayoutBuilder:
    """Build layout documents for elements."""

    def __init__(self, printer: "NodePrinter") -> None:
        self.printer = printer
        self.config = printer.config
        self.logger = printer.logger

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    def _tag_head(self, element: Element) -> List[Any]:
        parts: List[Any] = ["<", element.name]
        if element.attributes:
            attributes = element.attributes
            if self.config.sort_attributes:
                attributes = sort_attributes(attributes)
            separator = hardline if self.config.single_attribute_per_line else line
            printed = [print_attribute(attribute, self.config.quote_attributes) for attribute in attributes]
            parts.append(indent([line, join(separator, printed)]))
        return parts

    def _self_closing_space(self) -> Any:
        if self.config.bracket_same_line:
            return " " if self.config.self_closing_space else ""
        return line if self.config.self_closing_space else softline

    def _self_closed(self, head: List[Any]) -> Any:
        return group([*head, self._self_closing_space(), "/>"])

    def _open_tag(self, head: List[Any], attached: Optional[List[Any]] = None) -> Any:
        bracket_space = "" if self.config.bracket_same_line else softline
        tag = group([*head, bracket_space, ">"])
        return group([tag, *attached]) if attached else tag

    @staticmethod
    def _close_tag(element: Element) -> Any:
        if element.end_name is None:
            return ""
        return group(["</", element.end_name, ">"])

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def build(self, element: Element) -> Any:
        """Build the layout document for ``element``."""
        self.printer.metrics.elements_printed += 1
        head = self._tag_head(element)
        content = element.content

        if element.self_closing or content is None or content.is_empty:
            return self._self_closed(head)

        embedded = self._embed(element, content)
        if embedded is not None:
            return group([self._open_tag(head), indent([hardline, embedded]), hardline, self._close_tag(element)])

        if is_whitespace_ignorable(self.config, element.name, element.attributes, content):
            return self._build_ignorable(element, head, content)

        return group([self._open_tag(head), indent(self.print_content(content)), self._close_tag(element)])

    def print_content(self, content: Content) -> Any:
        """Print content with whitespace kept exactly as written."""
        fragments = self._splice(content, collect_fragments(content, self.printer, preserve=True))
        return group([fragment.printed for fragment in fragments])

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _splice(self, content: Content, fragments: List[Fragment]) -> List[Fragment]:
        ranges, unpaired = scan_ignore_markers(
            content.comments, self.config.ignore_start_marker, self.config.ignore_end_marker
        )
        if unpaired is not None:
            location = unpaired.location
            self.printer.add_diagnostic(
                DiagnosticSeverity.INFO,
                "Ignore start marker has no matching end marker",
                position={"line": location.start_line, "column": location.start_column},
            )
        if ranges:
            self.printer.metrics.ignore_ranges_spliced += len(ranges)
            self.logger.debug("Splicing ignore ranges", extra={"ranges": len(ranges)})
        return splice_ignore_ranges(fragments, ranges, self.printer.source)

    def _embed(self, element: Element, content: Content) -> Optional[Any]:
        """Format the content with a registered embedder, if any applies."""
        embedder = self.printer.embedders.get(element.name)
        if embedder is None:
            return None
        if content.elements or content.comments or content.processing_instructions or content.references:
            return None

        location = content.location
        text = self.printer.source[location.start_offset:location.end_offset + 1]
        try:
            formatted = embedder(text, self.config)
        except Exception as e:
            self.logger.warning(
                "Embedded formatter failed, using regular layout",
                extra={"element": element.name, "error": str(e)},
            )
            self.printer.add_diagnostic(
                DiagnosticSeverity.WARNING,
                f"Embedded formatter for <{element.name}> failed: {e}",
                position={"line": element.location.start_line, "column": element.location.start_column},
                details={"exception_type": type(e).__name__},
            )
            return None

        formatted = formatted.strip("\n")
        if not formatted.strip():
            return None
        return replace_end_of_line(formatted, hardline)

    def _build_ignorable(self, element: Element, head: List[Any], content: Content) -> Any:
        fragments = self._splice(content, collect_fragments(content, self.printer))
        items = [fragment for fragment in fragments if not fragment.is_whitespace]
        close_tag = self._close_tag(element)

        if self.config.whitespace_sensitivity is WhitespaceSensitivity.PRESERVE and any(
            fragment.preserve_whitespace for fragment in fragments
        ):
            return group([self._open_tag(head), [fragment.printed for fragment in fragments], close_tag])

        if not items:
            return self._self_closed(head)

        text_runs = [chardata for chardata in content.chardata if not chardata.is_whitespace]
        if len(items) == 1 and len(text_runs) == 1:
            return group([self._open_tag(head), indent([softline, items[0].printed]), softline, close_tag])

        units, attached = self._layout_units(fragments)
        return group([
            self._open_tag(head, attached),
            indent([unit.to_doc() for unit in units]),
            hardline,
            close_tag,
        ])

    @staticmethod
    def _layout_units(fragments: List[Fragment]) -> Tuple[List[_LayoutUnit], List[Any]]:
        """Cluster fragments into layout units.

        Returns:
            The units in order and the comment docs attached to the open tag
        """
        units: List[_LayoutUnit] = []
        attached: List[Any] = []
        previous: Optional[Fragment] = None
        previous_emitted: Optional[Fragment] = None

        for fragment in fragments:
            if fragment.is_whitespace:
                previous = fragment
                continue

            separated = previous is not None and (previous.is_whitespace or previous.trailing_whitespace)
            delimiter = line if separated else softline
            inline_style = UnitStyle.FILL if fragment.is_inline else UnitStyle.PLAIN

            if previous_emitted is not None and fragment.start_line - previous_emitted.end_line >= 2:
                units.append(_LayoutUnit(inline_style, [hardline, hardline], [fragment.printed]))
            elif fragment.kind is FragmentKind.COMMENT:
                if previous is not None and previous.is_whitespace and previous.has_new_line:
                    units.append(_LayoutUnit(UnitStyle.PLAIN, [hardline], [fragment.printed]))
                elif previous_emitted is None:
                    comment = [delimiter, fragment.printed]
                    attached.append(if_break(group(indent(comment)), comment))
                elif previous_emitted.kind is FragmentKind.ELEMENT and not previous_emitted.is_closed:
                    unit = units[-1]
                    if unit.style is UnitStyle.PLAIN:
                        unit.style = UnitStyle.GROUP
                    unit.parts.extend([delimiter, fragment.printed])
                else:
                    units.append(_LayoutUnit(UnitStyle.GROUP, [], [delimiter, fragment.printed]))
            elif (
                fragment.is_inline
                and previous_emitted is not None
                and previous_emitted.is_inline
                and units[-1].style is UnitStyle.FILL
            ):
                units[-1].parts.extend([delimiter, fragment.printed])
            else:
                units.append(_LayoutUnit(inline_style, [hardline], [fragment.printed]))

            previous = fragment
            previous_emitted = fragment

        return units, attached
