"""Decide whether an element's whitespace may be reflowed."""

from typing import List, Optional

from xml_pretty_printer.shared import PrintConfig, WhitespaceSensitivity
from xml_pretty_printer.syntax import Attribute, Content

from .ignore_ranges import has_ignore_ranges

# Elements whose text is significant whatever the configuration says.
WHITESPACE_SIGNIFICANT_ELEMENTS = frozenset({"xsl:text"})


def is_whitespace_ignorable(
    config: PrintConfig,
    name: str,
    attributes: List[Attribute],
    content: Optional[Content] = None,
) -> bool:
    """Check if whitespace inside an element may be discarded and reflowed.

    Whitespace is significant under strict sensitivity, inside ``xsl:text``,
    under an ``xml:space`` attribute with any value other than ``default``,
    and when the content holds an ignore range.
    """
    if config.whitespace_sensitivity is WhitespaceSensitivity.STRICT:
        return False
    if name in WHITESPACE_SIGNIFICANT_ELEMENTS:
        return False
    for attribute in attributes:
        if attribute.name == "xml:space" and attribute.inner_value != "default":
            return False
    if content is not None and has_ignore_ranges(
        content.comments, config.ignore_start_marker, config.ignore_end_marker
    ):
        return False
    return True
