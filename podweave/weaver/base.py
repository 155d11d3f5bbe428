"""Base classes for weaver plugins."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ..errors import PodweaveError
from ..models import WeaveMetadata
from ..perl import Document
from ..pod import PodDocument


class WeaverError(PodweaveError):
    """Raised by a plugin that cannot produce its part of the document."""


@dataclass
class WeaveInput:
    """Everything a plugin may consult while weaving one file."""

    pod_document: PodDocument
    source_document: Document
    metadata: WeaveMetadata
    filename: str = ""


class Plugin(ABC):
    """Contract shared by every weaver plugin."""

    plugin_name = ""

    def prepare_input(self, weave_input: WeaveInput) -> None:
        """Adjust the input before any section is woven."""


class SectionPlugin(Plugin):
    """Plugin that appends (or moves) content into the output document."""

    @abstractmethod
    def weave_section(self, document: PodDocument, weave_input: WeaveInput) -> None:
        """Add this plugin's section to ``document``."""
