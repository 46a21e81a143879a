"""Annotated XML syntax tree and its parser.

Key Components:
    XMLSyntaxParser: Strict parser producing nodes with source locations
    Document, Element, Content, ...: Read-only tree node records
    SourceLocation: Offsets, lines and columns of a node
"""

from .nodes import (
    Attribute,
    CharData,
    Content,
    DocTypeDecl,
    Document,
    Element,
    ExternalID,
    Misc,
    MiscKind,
    Prolog,
    Reference,
    ReferenceKind,
    SourceLocation,
    Token,
)
from .parser import XMLSyntaxParser, parse_document

__all__ = [
    "Attribute",
    "CharData",
    "Content",
    "DocTypeDecl",
    "Document",
    "Element",
    "ExternalID",
    "Misc",
    "MiscKind",
    "Prolog",
    "Reference",
    "ReferenceKind",
    "SourceLocation",
    "Token",
    "XMLSyntaxParser",
    "parse_document",
]
