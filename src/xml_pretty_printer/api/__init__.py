"""Public formatting API."""

from .formatter import XMLFormatter, format_file, format_string, normalize_end_of_line

__all__ = [
    "XMLFormatter",
    "format_file",
    "format_string",
    "normalize_end_of_line",
]
