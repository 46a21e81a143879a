"""Shared utilities for XML pretty printing.

This module provides configuration objects, result types, the exception
hierarchy and logging helpers used across the syntax, layout and printer
layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    EndOfLine,
    FormatterConfig,
    LayoutConfig,
    PrintConfig,
    QuoteStyle,
    WhitespaceSensitivity,
)
from .errors import (
    InvalidDocError,
    PrinterError,
    UnknownNodeError,
    XMLPrettyPrinterError,
    XMLSyntaxError,
)
from .logging import (
    CorrelationLogger,
    configure_logging,
    get_logger,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    FormatMetrics,
    FormatResult,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "EndOfLine",
    "FormatterConfig",
    "LayoutConfig",
    "PrintConfig",
    "QuoteStyle",
    "WhitespaceSensitivity",
    "InvalidDocError",
    "PrinterError",
    "UnknownNodeError",
    "XMLPrettyPrinterError",
    "XMLSyntaxError",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "FormatMetrics",
    "FormatResult",
]
