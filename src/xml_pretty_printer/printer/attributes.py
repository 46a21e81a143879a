"""Attribute printing and ordering."""

from functools import cmp_to_key
from typing import Any, List

from xml_pretty_printer.shared import QuoteStyle
from xml_pretty_printer.syntax import Attribute


def quote_attribute_value(raw: str, style: QuoteStyle) -> str:
    """Requote a raw attribute literal.

    The inner text is kept as written apart from the new delimiter, which is
    escaped as ``&quot;`` or ``&apos;`` when it appears inside.

    Example:
        >>> quote_attribute_value("'say \\"hi\\"'", QuoteStyle.DOUBLE)
        '"say &quot;hi&quot;"'
    """
    if style is QuoteStyle.PRESERVE:
        return raw
    inner = raw[1:-1]
    if style is QuoteStyle.DOUBLE:
        return '"' + inner.replace('"', "&quot;") + '"'
    return "'" + inner.replace("'", "&apos;") + "'"


def print_attribute(attribute: Attribute, style: QuoteStyle = QuoteStyle.PRESERVE) -> List[Any]:
    """Print ``name=value`` with the configured quoting."""
    return [attribute.name, "=", quote_attribute_value(attribute.value, style)]


def _compare(left: str, right: str) -> int:
    return (left > right) - (left < right)


def compare_attribute_names(left: str, right: str) -> int:
    """Order attribute names for sorting.

    ``xmlns`` comes first, then prefixed names (``xmlns:*`` before other
    prefixes, prefixes compared lexicographically, then local names), then
    unprefixed names.
    """
    if left == right:
        return 0
    if left == "xmlns":
        return -1
    if right == "xmlns":
        return 1

    left_prefixed = ":" in left
    right_prefixed = ":" in right
    if left_prefixed and right_prefixed:
        left_prefix, left_local = left.split(":", 1)
        right_prefix, right_local = right.split(":", 1)
        if left_prefix == right_prefix:
            return _compare(left_local, right_local)
        if left_prefix == "xmlns":
            return -1
        if right_prefix == "xmlns":
            return 1
        return _compare(left_prefix, right_prefix)
    if left_prefixed:
        return -1
    if right_prefixed:
        return 1
    return _compare(left, right)


def sort_attributes(attributes: List[Attribute]) -> List[Attribute]:
    """Get ``attributes`` in canonical order (stable, input left untouched)."""
    return sorted(
        attributes,
        key=cmp_to_key(lambda left, right: compare_attribute_names(left.name, right.name)),
    )
