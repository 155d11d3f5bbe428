"""Separate POD from code in a parsed Perl document."""

from __future__ import annotations

import re
from typing import List

from .perl import LITERAL_KINDS, NON_CODE_KINDS, Category, Document, Element, Token
from .pod import PodDocument, read_string

# A line that opens a POD directive: "=" followed by a lowercase letter.
_POD_DIRECTIVE = re.compile(r"^=[a-z]", re.M)


def is_code(element: Element) -> bool:
    return element.kind not in NON_CODE_KINDS


def code_elements(document: Document) -> List[Element]:
    """Return every element that is not a comment, POD, whitespace, separator or trailer."""
    return document.find(is_code)


def pod_fragments(document: Document) -> List[str]:
    """Return the raw text of each POD token in source order."""
    return [
        element.content
        for element in document.walk()
        if element.category is Category.DOCUMENTATION
    ]


def _is_contaminated_literal(element: Element) -> bool:
    if element.kind not in LITERAL_KINDS or not isinstance(element, Token):
        return False
    return _POD_DIRECTIVE.search(element.literal_text) is not None


def has_pod_in_literals(document: Document) -> bool:
    """Return True when a string, quote-like or here-document literal contains a POD directive line."""
    return document.find_first(_is_contaminated_literal) is not None


def assemble(fragments: List[str]) -> PodDocument:
    """Join POD fragments with newlines and parse them as one document."""
    return read_string("\n".join(fragments))


__all__ = [
    "assemble",
    "code_elements",
    "has_pod_in_literals",
    "is_code",
    "pod_fragments",
]
