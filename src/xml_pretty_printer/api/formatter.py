"""Formatting API with progressive disclosure.

Module-level ``format_string`` / ``format_file`` cover the common cases;
``XMLFormatter`` keeps a configuration, a correlation ID and embedders
across calls and exposes the intermediate layout document.
"""

import time
from pathlib import Path
from typing import Any, Dict, Optional, Union

from xml_pretty_printer.layout import LayoutRenderer
from xml_pretty_printer.printer import EmbedRegistry, NodePrinter
from xml_pretty_printer.shared import FormatResult, FormatterConfig, get_logger
from xml_pretty_printer.syntax import Document, XMLSyntaxParser

BYTE_ORDER_MARK = "\ufeff"
MS_PER_SECOND = 1000  # Milliseconds per second conversion


def normalize_end_of_line(text: str) -> str:
    """Convert CRLF and lone CR line endings to LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def _prepare_source(text: str) -> str:
    """Drop a leading byte order mark and normalize line endings."""
    if text.startswith(BYTE_ORDER_MARK):
        text = text[1:]
    return normalize_end_of_line(text)


class XMLFormatter:
    """Reusable XML formatter.

    Examples:
        Basic usage with default configuration:
        >>> formatter = XMLFormatter()
        >>> formatter.format('<a  b="1"/>').formatted
        '<a b="1" />\\n'

        Reflowing whitespace:
        >>> formatter = XMLFormatter(FormatterConfig.readable())
        >>> formatter.format("<a>  text  </a>").formatted
        '<a>text</a>\\n'
    """

    def __init__(
        self,
        config: Optional[FormatterConfig] = None,
        correlation_id: Optional[str] = None,
        embedders: Optional[EmbedRegistry] = None,
    ) -> None:
        """Initialize formatter.

        Args:
            config: Formatter configuration (defaults to strict whitespace)
            correlation_id: Optional correlation ID for request tracking
            embedders: Embedded-language formatters keyed by element name
        """
        self.config = config or FormatterConfig()
        self.correlation_id = correlation_id
        self.embedders = embedders or EmbedRegistry()
        self.logger = get_logger(__name__, correlation_id, "formatter")

        self._parser = XMLSyntaxParser(correlation_id=correlation_id)
        self._renderer = LayoutRenderer(self.config.layout)

        self._format_count = 0
        self._changed_count = 0
        self._total_processing_time = 0.0

    def _printer(self, source: str) -> NodePrinter:
        return NodePrinter(
            self.config.printer,
            source,
            embedders=self.embedders,
            correlation_id=self.correlation_id,
        )

    def parse(self, text: str) -> Document:
        """Parse ``text`` after BOM removal and line-ending normalization.

        Raises:
            XMLSyntaxError: If the text is malformed
        """
        return self._parser.parse(_prepare_source(text))

    def to_layout(self, text: str) -> Any:
        """Get the layout document for ``text`` without rendering it.

        Raises:
            XMLSyntaxError: If the text is malformed
        """
        source = _prepare_source(text)
        document = self._parser.parse(source)
        return self._printer(source).print(document)

    def format(self, text: str) -> FormatResult:
        """Format XML text.

        Args:
            text: XML source

        Returns:
            FormatResult with the formatted text, diagnostics and metrics

        Raises:
            XMLSyntaxError: If the text is malformed
            PrinterError: If the tree cannot be laid out
        """
        start_time = time.time()

        source = _prepare_source(text)

        document = self._parser.parse(source)
        printer = self._printer(source)
        formatted = self._renderer.render(printer.print(document))
        if text.startswith(BYTE_ORDER_MARK):
            formatted = BYTE_ORDER_MARK + formatted

        result = FormatResult(
            formatted=formatted,
            original=text,
            document=document,
            diagnostics=printer.diagnostics,
            metrics=printer.metrics,
            correlation_id=self.correlation_id,
        )
        processing_time = (time.time() - start_time) * MS_PER_SECOND
        result.metrics.processing_time_ms = processing_time
        result.metrics.characters_processed = len(text)

        self._format_count += 1
        self._total_processing_time += processing_time
        if result.changed:
            self._changed_count += 1

        self.logger.debug(
            "Formatted document",
            extra={
                "changed": result.changed,
                "elements": result.metrics.elements_printed,
                "diagnostics": len(result.diagnostics),
                "processing_time_ms": processing_time,
            },
        )
        return result

    def format_file(self, file_path: Union[str, Path], encoding: str = "utf-8") -> FormatResult:
        """Format the XML file at ``file_path`` (the file is not modified).

        Raises:
            OSError: If the file cannot be read
            XMLSyntaxError: If the file is malformed
        """
        path = Path(file_path)
        self.logger.debug("Formatting file", extra={"file_path": str(path)})
        # newline="" keeps CRLF visible so `changed` reflects line-ending fixes
        with path.open(encoding=encoding, newline="") as file:
            text = file.read()
        return self.format(text)

    def check(self, text: str) -> bool:
        """Check if ``text`` is already formatted."""
        return not self.format(text).changed

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get formatter usage statistics."""
        return {
            "total_formats": self._format_count,
            "changed_documents": self._changed_count,
            "total_processing_time_ms": self._total_processing_time,
            "average_processing_time_ms": (
                self._total_processing_time / self._format_count
                if self._format_count > 0 else 0.0
            ),
            "correlation_id": self.correlation_id,
        }


def format_string(text: str, config: Optional[FormatterConfig] = None, **overrides: Any) -> str:
    """Format XML text and return the formatted string.

    Args:
        text: XML source
        config: Base configuration (defaults to ``FormatterConfig()``)
        **overrides: ``component__field`` overrides, e.g. ``layout__print_width=100``

    Examples:
        >>> format_string('<a b="1" xmlns="x"/>', printer__sort_attributes=True)
        '<a xmlns="x" b="1" />\\n'
    """
    config = config or FormatterConfig()
    if overrides:
        config = config.override(**overrides)
    return XMLFormatter(config).format(text).formatted


def format_file(
    file_path: Union[str, Path],
    config: Optional[FormatterConfig] = None,
    correlation_id: Optional[str] = None,
) -> FormatResult:
    """Format the XML file at ``file_path`` without modifying it."""
    return XMLFormatter(config, correlation_id=correlation_id).format_file(file_path)
