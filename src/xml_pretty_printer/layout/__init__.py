"""Layout document algebra and renderer.

The printer describes output as a tree of layout primitives; the renderer
decides where lines break for a given print width.
"""

from .builders import (
    BREAK_PARENT,
    BreakParent,
    break_parent,
    Doc,
    Fill,
    Group,
    IfBreak,
    Indent,
    Line,
    fill,
    group,
    hardline,
    if_break,
    indent,
    join,
    line,
    literalline,
    replace_end_of_line,
    softline,
)
from .renderer import LayoutRenderer, print_doc_to_string, propagate_breaks, string_width

__all__ = [
    "BREAK_PARENT",
    "BreakParent",
    "break_parent",
    "Doc",
    "Fill",
    "Group",
    "IfBreak",
    "Indent",
    "Line",
    "fill",
    "group",
    "hardline",
    "if_break",
    "indent",
    "join",
    "line",
    "literalline",
    "replace_end_of_line",
    "softline",
    "LayoutRenderer",
    "print_doc_to_string",
    "propagate_breaks",
    "string_width",
]
