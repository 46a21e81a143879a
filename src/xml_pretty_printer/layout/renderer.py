"""Width-aware rendering of layout documents.

Implements the Wadler-style algorithm used by Prettier: groups print flat when
their contents (plus whatever follows up to the next possible break) fit in
the remaining width, fills break separators pairwise, and forced breaks
propagate to every enclosing group before printing starts.
"""

import unicodedata
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

from xml_pretty_printer.shared import InvalidDocError, LayoutConfig

from .builders import BreakParent, Fill, Group, IfBreak, Indent, Line

MODE_BREAK = "break"
MODE_FLAT = "flat"


@dataclass(frozen=True)
class _Indentation:
    value: str
    length: int


@dataclass(frozen=True)
class _FillTail:
    """Remaining parts of a fill starting at ``start``."""

    parts: Sequence[Any]
    start: int


_Command = Tuple[_Indentation, str, Any]


def string_width(text: str) -> int:
    """Get the display width of ``text`` (wide East Asian characters count twice)."""
    if text.isascii():
        return len(text)
    width = 0
    for char in text:
        if unicodedata.combining(char):
            continue
        width += 2 if unicodedata.east_asian_width(char) in ("W", "F") else 1
    return width


def _children(doc: Any) -> Sequence[Any]:
    if isinstance(doc, list):
        return doc
    if isinstance(doc, (Group, Indent)):
        return [doc.contents]
    if isinstance(doc, Fill):
        return doc.parts
    if isinstance(doc, IfBreak):
        return [doc.break_contents, doc.flat_contents]
    return ()


def propagate_breaks(doc: Any) -> Set[int]:
    """Find the groups that must break.

    A group breaks when it was created with ``should_break`` or when it
    contains a ``BreakParent`` or another breaking group. The walk is
    iterative so deeply nested documents do not hit the recursion limit.

    Returns:
        Set of ``id()`` values of breaking groups
    """
    broken: Set[int] = set()
    forces_break: Dict[int, bool] = {}
    stack: List[Tuple[Any, bool]] = [(doc, False)]

    while stack:
        node, exiting = stack.pop()
        if isinstance(node, str):
            continue
        key = id(node)
        if key in forces_break:
            continue
        children = _children(node)

        if not exiting:
            stack.append((node, True))
            for child in children:
                stack.append((child, False))
            continue

        breaks = isinstance(node, BreakParent) or any(
            forces_break.get(id(child), False)
            for child in children
            if not isinstance(child, str)
        )
        if isinstance(node, Group):
            breaks = breaks or node.should_break
            if breaks:
                broken.add(key)
        forces_break[key] = breaks

    return broken


def _fits(
    next_command: _Command,
    rest_commands: List[_Command],
    width: int,
    broken: Set[int],
    must_be_flat: bool,
) -> bool:
    """Check whether ``next_command`` fits in ``width`` columns.

    Measurement continues into ``rest_commands`` (in their own modes) until the
    first line break, since text following the group shares its last line.
    """
    rest_index = len(rest_commands)
    commands: List[Tuple[str, Any]] = [(next_command[1], next_command[2])]
    while width >= 0:
        if not commands:
            if rest_index == 0:
                return True
            rest_index -= 1
            _, mode, doc = rest_commands[rest_index]
            commands.append((mode, doc))
            continue

        mode, doc = commands.pop()
        if isinstance(doc, str):
            width -= string_width(doc)
        elif isinstance(doc, list):
            for part in reversed(doc):
                commands.append((mode, part))
        elif isinstance(doc, Fill):
            for part in reversed(doc.parts):
                commands.append((mode, part))
        elif isinstance(doc, _FillTail):
            for part in reversed(doc.parts[doc.start:]):
                commands.append((mode, part))
        elif isinstance(doc, Indent):
            commands.append((mode, doc.contents))
        elif isinstance(doc, Group):
            breaks = id(doc) in broken
            if must_be_flat and breaks:
                return False
            commands.append((MODE_BREAK if breaks else mode, doc.contents))
        elif isinstance(doc, IfBreak):
            contents = doc.break_contents if mode == MODE_BREAK else doc.flat_contents
            if contents:
                commands.append((mode, contents))
        elif isinstance(doc, Line):
            if mode == MODE_BREAK or doc.hard:
                return True
            if not doc.soft:
                width -= 1
        elif not isinstance(doc, BreakParent):
            raise InvalidDocError(doc)
    return False


def _trim_trailing_whitespace(out: List[str]) -> None:
    """Remove spaces and tabs at the end of the output buffer."""
    while out:
        last = out[-1]
        stripped = last.rstrip(" \t")
        if stripped:
            out[-1] = stripped
            return
        out.pop()


class LayoutRenderer:
    """Render layout documents to text for a given layout configuration."""

    def __init__(self, config: Optional[LayoutConfig] = None) -> None:
        self.config = config or LayoutConfig()
        self._unit = self.config.indentation
        self._unit_width = self.config.tab_width if self.config.use_tabs else len(self._unit)

    def _make_indent(self, indentation: _Indentation) -> _Indentation:
        return _Indentation(
            indentation.value + self._unit,
            indentation.length + self._unit_width,
        )

    def render(self, doc: Any) -> str:
        """Render ``doc`` to a string.

        Raises:
            InvalidDocError: If ``doc`` contains a value that is not a doc
        """
        broken = propagate_breaks(doc)
        width = self.config.print_width

        commands: List[_Command] = [(_Indentation("", 0), MODE_BREAK, doc)]
        out: List[str] = []
        position = 0
        should_remeasure = False

        while commands:
            indentation, mode, doc = commands.pop()

            if isinstance(doc, str):
                out.append(doc)
                if "\n" in doc:
                    position = string_width(doc.rsplit("\n", 1)[1])
                else:
                    position += string_width(doc)

            elif isinstance(doc, list):
                for part in reversed(doc):
                    commands.append((indentation, mode, part))

            elif isinstance(doc, Indent):
                commands.append((self._make_indent(indentation), mode, doc.contents))

            elif isinstance(doc, Group):
                breaks = id(doc) in broken
                if mode == MODE_FLAT and not should_remeasure:
                    commands.append(
                        (indentation, MODE_BREAK if breaks else MODE_FLAT, doc.contents)
                    )
                else:
                    should_remeasure = False
                    next_command = (indentation, MODE_FLAT, doc.contents)
                    if not breaks and _fits(
                        next_command, commands, width - position, broken, False
                    ):
                        commands.append(next_command)
                    else:
                        commands.append((indentation, MODE_BREAK, doc.contents))

            elif isinstance(doc, (Fill, _FillTail)):
                parts = doc.parts
                start = doc.start if isinstance(doc, _FillTail) else 0
                self._render_fill(
                    parts, start, indentation, mode, commands, width - position, broken
                )

            elif isinstance(doc, IfBreak):
                contents = doc.break_contents if mode == MODE_BREAK else doc.flat_contents
                if contents:
                    commands.append((indentation, mode, contents))

            elif isinstance(doc, Line):
                if mode == MODE_FLAT and not doc.hard:
                    if not doc.soft:
                        out.append(" ")
                        position += 1
                    continue
                if mode == MODE_FLAT:
                    # A hard line inside a flat group: the next group must remeasure
                    should_remeasure = True
                if doc.literal:
                    out.append("\n")
                    position = 0
                else:
                    _trim_trailing_whitespace(out)
                    out.append("\n" + indentation.value)
                    position = indentation.length

            elif not isinstance(doc, BreakParent):
                raise InvalidDocError(doc)

        text = "".join(out)
        eol = self.config.end_of_line.sequence
        if eol != "\n":
            text = text.replace("\n", eol)
        return text

    @staticmethod
    def _render_fill(
        parts: Sequence[Any],
        start: int,
        indentation: _Indentation,
        mode: str,
        commands: List[_Command],
        remaining: int,
        broken: Set[int],
    ) -> None:
        """Schedule the next content/separator pair of a fill."""
        count = len(parts) - start
        if count <= 0:
            return

        content = parts[start]
        content_flat = (indentation, MODE_FLAT, content)
        content_break = (indentation, MODE_BREAK, content)
        content_fits = _fits(content_flat, [], remaining, broken, True)

        if count == 1:
            commands.append(content_flat if content_fits else content_break)
            return

        whitespace = parts[start + 1]
        whitespace_flat = (indentation, MODE_FLAT, whitespace)
        whitespace_break = (indentation, MODE_BREAK, whitespace)

        if count == 2:
            if content_fits:
                commands.extend([whitespace_flat, content_flat])
            else:
                commands.extend([whitespace_break, content_break])
            return

        rest = (indentation, mode, _FillTail(parts, start + 2))
        pair_flat = (indentation, MODE_FLAT, [content, whitespace, parts[start + 2]])
        if _fits(pair_flat, [], remaining, broken, True):
            commands.extend([rest, whitespace_flat, content_flat])
        elif content_fits:
            commands.extend([rest, whitespace_break, content_flat])
        else:
            commands.extend([rest, whitespace_break, content_break])


def print_doc_to_string(doc: Any, config: Optional[LayoutConfig] = None) -> str:
    """Render a layout document with the given configuration."""
    return LayoutRenderer(config).render(doc)
