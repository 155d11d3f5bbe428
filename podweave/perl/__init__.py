"""Perl source parsing: a tree-sitter parse rebuilt as a lossless PPI-style tree."""

from __future__ import annotations

from .elements import (
    LITERAL_KINDS,
    NON_CODE_KINDS,
    Category,
    Document,
    Element,
    HereDocToken,
    Node,
    NodeKind,
    Token,
    classify,
)
from .parser import parse_document, split_trailer

__all__ = [
    "Category",
    "Document",
    "Element",
    "HereDocToken",
    "LITERAL_KINDS",
    "NON_CODE_KINDS",
    "Node",
    "NodeKind",
    "Token",
    "classify",
    "parse_document",
    "split_trailer",
]
