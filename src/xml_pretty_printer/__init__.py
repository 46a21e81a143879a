"""XML Pretty Printer.

An opinionated XML formatter: XML text is parsed into an annotated syntax
tree, the tree is transformed into a width-independent layout document, and
the layout document is rendered for a target print width.

Progressive API Disclosure:
- Level 1: Simple functions - format_string(), format_file()
- Level 2: Configured formatter - XMLFormatter class
- Level 3: Pipeline stages - parse_document(), NodePrinter, LayoutRenderer
"""

__version__ = "0.1.0"
__author__ = "XML Pretty Printer Team"

# Progressive API disclosure - Level 1 and Level 2
from .api import XMLFormatter, format_file, format_string

# Level 3: individual pipeline stages
from .layout import LayoutRenderer, print_doc_to_string
from .printer import EmbedRegistry, NodePrinter

# Configuration classes for advanced usage
from .shared.config import (
    EndOfLine,
    FormatterConfig,
    LayoutConfig,
    PrintConfig,
    QuoteStyle,
    WhitespaceSensitivity,
)
from .shared.errors import PrinterError, UnknownNodeError, XMLPrettyPrinterError, XMLSyntaxError

# Core result objects
from .shared.result import FormatResult
from .syntax import Document, parse_document

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple formatting functions
    "format_string",
    "format_file",

    # Level 2: Configured formatter
    "XMLFormatter",

    # Level 3: Pipeline stages
    "parse_document",
    "NodePrinter",
    "EmbedRegistry",
    "LayoutRenderer",
    "print_doc_to_string",

    # Result objects and data structures
    "FormatResult",
    "Document",

    # Configuration classes
    "FormatterConfig",
    "PrintConfig",
    "LayoutConfig",
    "QuoteStyle",
    "WhitespaceSensitivity",
    "EndOfLine",

    # Exceptions
    "XMLPrettyPrinterError",
    "XMLSyntaxError",
    "PrinterError",
    "UnknownNodeError",
]
