"""Syntax tree to layout document transformation.

``NodePrinter`` dispatches on node type. Each formatting pass gets its own
printer instance, which collects diagnostics and metrics for that pass.
"""

from operator import itemgetter
from typing import Any, Callable, Dict, List, Optional, Tuple

from xml_pretty_printer.layout import group, hardline, indent, join, line, replace_end_of_line, softline
from xml_pretty_printer.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    FormatMetrics,
    PrintConfig,
    UnknownNodeError,
    WhitespaceSensitivity,
    get_logger,
)
from xml_pretty_printer.syntax import (
    Attribute,
    CharData,
    Content,
    DocTypeDecl,
    Document,
    Element,
    ExternalID,
    Misc,
    Prolog,
    Reference,
    Token,
)

from .attributes import print_attribute
from .elements import ElementLayoutBuilder
from .embed import EmbedRegistry


class NodePrinter:
    """Transform syntax tree nodes into layout documents."""

    def __init__(
        self,
        config: Optional[PrintConfig] = None,
        source: str = "",
        embedders: Optional[EmbedRegistry] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize the printer.

        Args:
            config: Print options
            source: Normalized source text the tree was parsed from, needed
                to reproduce ignore ranges and embedded content verbatim
            embedders: Embedded-language formatters by element name
            correlation_id: Optional correlation ID for tracking requests
        """
        self.config = config or PrintConfig()
        self.source = source
        self.embedders = embedders or EmbedRegistry()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "node_printer")
        self.diagnostics: List[DiagnosticEntry] = []
        self.metrics = FormatMetrics()

        self._elements = ElementLayoutBuilder(self)
        self._handlers: Dict[type, Callable[[Any], Any]] = {
            Document: self._print_document,
            Prolog: self._print_prolog,
            DocTypeDecl: self._print_doc_type_decl,
            ExternalID: self._print_external_id,
            Misc: self._print_image,
            Element: self._elements.build,
            Content: self._elements.print_content,
            Attribute: self._print_attribute,
            CharData: self._print_chardata,
            Reference: self._print_image,
            Token: self._print_image,
        }

    @property
    def preserves_whitespace(self) -> bool:
        """Check if text runs are kept exactly as written."""
        return self.config.whitespace_sensitivity is WhitespaceSensitivity.PRESERVE

    def print(self, node: Any) -> Any:
        """Get the layout document for ``node``.

        Raises:
            UnknownNodeError: If there is no rule for the node's type
        """
        handler = self._handlers.get(type(node))
        if handler is None:
            raise UnknownNodeError(node)
        return handler(node)

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        position: Optional[Dict[str, int]] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Record a diagnostic for the current pass."""
        self.diagnostics.append(
            DiagnosticEntry(
                severity=severity,
                message=message,
                component="node_printer",
                position=position,
                details=details,
                correlation_id=self.correlation_id,
            )
        )

    # ------------------------------------------------------------------
    # Node rules
    # ------------------------------------------------------------------

    def _print_document(self, document: Document) -> Any:
        """Join top-level nodes in source order, one per line."""
        located: List[Tuple[int, Any]] = []
        if document.doc_type_decl is not None:
            located.append((document.doc_type_decl.location.start_offset, self.print(document.doc_type_decl)))
        if document.prolog is not None:
            located.append((document.prolog.location.start_offset, self.print(document.prolog)))
        for misc in document.misc:
            located.append((misc.location.start_offset, self.print(misc)))
        if document.element is not None:
            located.append((document.element.location.start_offset, self.print(document.element)))

        located.sort(key=itemgetter(0))
        return [join(hardline, [doc for _, doc in located]), hardline]

    def _print_prolog(self, prolog: Prolog) -> Any:
        parts: List[Any] = ["<?xml"]
        if prolog.attributes:
            parts.append(indent([line, join(line, [self.print(attribute) for attribute in prolog.attributes])]))
        parts.append(line if self.config.self_closing_space else softline)
        parts.append("?>")
        return group(parts)

    def _print_doc_type_decl(self, decl: DocTypeDecl) -> Any:
        parts: List[Any] = ["<!DOCTYPE", " ", decl.name]
        if decl.external_id is not None:
            parts.extend([" ", self.print(decl.external_id)])
        if decl.internal_subset is not None:
            parts.extend([" ", replace_end_of_line(decl.internal_subset)])
        parts.append(">")
        return group(parts)

    @staticmethod
    def _print_external_id(external_id: ExternalID) -> Any:
        if external_id.public_literal is None:
            return group([external_id.keyword, indent([line, external_id.system_literal or ""])])
        public = group([external_id.keyword, indent([line, external_id.public_literal])])
        if external_id.system_literal is None:
            return public
        return group([public, indent([line, external_id.system_literal])])

    def _print_attribute(self, attribute: Attribute) -> Any:
        return print_attribute(attribute, self.config.quote_attributes)

    @staticmethod
    def _print_chardata(chardata: CharData) -> Any:
        return replace_end_of_line(chardata.image)

    @staticmethod
    def _print_image(node: Any) -> str:
        return node.image


def print_document(
    document: Document,
    source: str,
    config: Optional[PrintConfig] = None,
    embedders: Optional[EmbedRegistry] = None,
) -> Any:
    """Transform a parsed document into a layout document."""
    return NodePrinter(config, source, embedders).print(document)
