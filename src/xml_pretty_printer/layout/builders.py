"""Layout document algebra.

A layout document ("doc") describes renderable structure without committing
to line widths. A doc is one of:

* ``str``: literal text, never broken;
* ``list``: concatenation of docs;
* ``Group``: print flat if it fits on the remaining line, else break its lines;
* ``Fill``: alternating ``[content, separator, content, ...]`` that breaks
  only the separators needed to keep each content within the width;
* ``Indent``: increase indentation of lines broken inside it;
* ``Line``: a space (or nothing, for soft lines) when flat, a newline when
  broken; hard lines always break, literal lines also drop indentation;
* ``IfBreak``: choose contents by the mode of the enclosing group;
* ``BreakParent``: force every enclosing group to break.

Docs are built once and never mutated; ``layout.renderer`` turns them into
text.
"""

from dataclasses import dataclass
from typing import Any, Iterable, List, Union

Doc = Union[str, List[Any], "Group", "Fill", "Indent", "Line", "IfBreak", "BreakParent"]


@dataclass(frozen=True)
class Group:
    """Break all lines or none of them, depending on what fits."""

    contents: Any
    should_break: bool = False


@dataclass(frozen=True)
class Fill:
    """Break separators one at a time, like words in a paragraph."""

    parts: List[Any]


@dataclass(frozen=True)
class Indent:
    """Indent lines broken inside ``contents`` by one level."""

    contents: Any


@dataclass(frozen=True)
class Line:
    """Possible line break."""

    hard: bool = False
    soft: bool = False
    literal: bool = False


@dataclass(frozen=True)
class IfBreak:
    """Pick ``break_contents`` when the enclosing group breaks, else ``flat_contents``."""

    break_contents: Any
    flat_contents: Any = ""


@dataclass(frozen=True)
class BreakParent:
    """Force enclosing groups into break mode."""


BREAK_PARENT = BreakParent()
break_parent = BREAK_PARENT

line = Line()
softline = Line(soft=True)
hardline_without_break_parent = Line(hard=True)
literalline_without_break_parent = Line(hard=True, literal=True)
hardline: List[Any] = [hardline_without_break_parent, BREAK_PARENT]
literalline: List[Any] = [literalline_without_break_parent, BREAK_PARENT]


def group(contents: Doc, should_break: bool = False) -> Group:
    """Create a group."""
    return Group(contents, should_break)


def fill(parts: Iterable[Doc]) -> Fill:
    """Create a fill from alternating content and separator parts."""
    return Fill(list(parts))


def indent(contents: Doc) -> Indent:
    """Indent ``contents`` by one level."""
    return Indent(contents)


def if_break(break_contents: Doc, flat_contents: Doc = "") -> IfBreak:
    """Choose contents by the break mode of the enclosing group."""
    return IfBreak(break_contents, flat_contents)


def join(separator: Doc, docs: Iterable[Doc]) -> List[Any]:
    """Concatenate ``docs`` with ``separator`` between each pair."""
    parts: List[Any] = []
    for index, doc in enumerate(docs):
        if index > 0:
            parts.append(separator)
        parts.append(doc)
    return parts


def replace_end_of_line(text: str, replacement: Doc = None) -> Doc:
    """Split ``text`` on newlines, joining the pieces with ``replacement``.

    Defaults to literal lines so that the text is reproduced verbatim,
    whatever the indentation at the point where it is printed.
    """
    if "\n" not in text:
        return text
    return join(literalline if replacement is None else replacement, text.split("\n"))
