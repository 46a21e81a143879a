"""Exception hierarchy for XML pretty printing."""

from typing import Any, Dict, Optional


class XMLPrettyPrinterError(Exception):
    """Base exception for all formatting failures."""


class XMLSyntaxError(XMLPrettyPrinterError):
    """Raised when the input cannot be parsed into a syntax tree."""

    def __init__(self, message: str, line: int, column: int, offset: int) -> None:
        super().__init__(f"{message} (line {line}, column {column})")
        self.reason = message
        self.line = line
        self.column = column
        self.offset = offset

    @property
    def position(self) -> Dict[str, int]:
        """Get the error position as a diagnostic-friendly mapping."""
        return {"line": self.line, "column": self.column, "offset": self.offset}


class PrinterError(XMLPrettyPrinterError):
    """Raised when a syntax tree cannot be transformed into a layout document."""


class UnknownNodeError(PrinterError):
    """Raised when the printer is handed a node type it has no rule for.

    This signals a mismatch between the parser and the printer and is never
    recovered from.
    """

    def __init__(self, node: Any, context: Optional[str] = None) -> None:
        name = type(node).__name__
        message = f"Unknown node type: {name}"
        if context:
            message = f"{message} ({context})"
        super().__init__(message)
        self.node = node


class InvalidDocError(PrinterError):
    """Raised when the renderer meets a value that is not a layout document."""

    def __init__(self, doc: Any) -> None:
        super().__init__(f"Unexpected layout document type: {type(doc).__name__}")
        self.doc = doc
