"""POD document model, reader and serializer."""

from __future__ import annotations

from .elements import Command, Element, Nested, PodDocument, Region, Text, Verbatim, is_command
from .reader import SECTION_CONTENT_COMMANDS, nest, paragraphs_from_text, read_string

__all__ = [
    "Command",
    "Element",
    "Nested",
    "PodDocument",
    "Region",
    "SECTION_CONTENT_COMMANDS",
    "Text",
    "Verbatim",
    "is_command",
    "nest",
    "paragraphs_from_text",
    "read_string",
]
