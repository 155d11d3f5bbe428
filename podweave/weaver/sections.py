"""Built-in section plugins."""

from __future__ import annotations

import re
from typing import List, Optional

from jinja2 import Environment, StrictUndefined, TemplateError

from ..logging import get_logger
from ..perl import Document, Node, NodeKind, Token
from ..pod import Command, Element, Nested, PodDocument, Region, Text, nest, paragraphs_from_text
from .base import SectionPlugin, WeaveInput, WeaverError

_PODNAME = re.compile(r"#+\s*PODNAME:\s*(\S+)")
_ABSTRACT = re.compile(r"#+\s*ABSTRACT:\s*(.+?)\s*$")

_ENVIRONMENT = Environment(undefined=StrictUndefined)

logger = get_logger("weaver")


def document_name(source: Document) -> Optional[str]:
    """Return the ``# PODNAME:`` value or the first declared package name."""
    for token in source.tokens():
        if token.kind is NodeKind.COMMENT:
            match = _PODNAME.match(token.content)
            if match:
                return match.group(1)
    for element in source.walk():
        if element.kind is not NodeKind.STATEMENT or not isinstance(element, Node):
            continue
        words = list(element.significant_tokens())[:2]
        if len(words) == 2 and _is_word(words[0], "package") and words[1].kind is NodeKind.WORD:
            return words[1].content
    return None


def document_abstract(source: Document) -> Optional[str]:
    for token in source.tokens():
        if token.kind is NodeKind.COMMENT:
            match = _ABSTRACT.match(token.content)
            if match:
                return match.group(1)
    return None


def _is_word(token: Token, value: str) -> bool:
    return token.kind is NodeKind.WORD and token.content == value


class NameSection(SectionPlugin):
    """Adds ``=head1 NAME`` with ``Package - abstract``."""

    plugin_name = "Name"

    def __init__(self, header: str = "NAME") -> None:
        self.header = header

    def weave_section(self, document: PodDocument, weave_input: WeaveInput) -> None:
        name = document_name(weave_input.source_document)
        if not name:
            raise WeaverError(f"couldn't determine document name for {weave_input.filename or 'input'}")
        abstract = document_abstract(weave_input.source_document)
        if not abstract:
            logger.debug("No abstract found in %s", weave_input.filename)
        title = f"{name} - {abstract}" if abstract else name
        document.children.append(Nested("head1", self.header, [Text(title)]))


class VersionSection(SectionPlugin):
    """Adds ``=head1 VERSION`` when a version was supplied."""

    plugin_name = "Version"

    def __init__(self, header: str = "VERSION", format: str = "version {{ version }}") -> None:
        self.header = header
        try:
            self.template = _ENVIRONMENT.from_string(format)
        except TemplateError as exc:
            raise WeaverError(f"Invalid Version format {format!r}: {exc}") from exc

    def weave_section(self, document: PodDocument, weave_input: WeaveInput) -> None:
        version = weave_input.metadata.version
        if not version:
            return
        text = self.template.render(
            version=version,
            filename=weave_input.filename,
            module=document_name(weave_input.source_document) or "",
        )
        document.children.append(Nested("head1", self.header, paragraphs_from_text(text)))


class GenericSection(SectionPlugin):
    """Moves the input's ``=head1 HEADER`` section into the output."""

    plugin_name = "Generic"

    def __init__(self, header: str, required: bool = False) -> None:
        self.header = header
        self.required = required

    def weave_section(self, document: PodDocument, weave_input: WeaveInput) -> None:
        section = weave_input.pod_document.find_section(self.header)
        if section is None:
            if self.required:
                raise WeaverError(f"Required {self.header} section not found")
            return
        weave_input.pod_document.remove(section)
        document.children.append(section)


class CollectSection(SectionPlugin):
    """Gathers ``=COMMAND`` paragraphs into ``=head2`` entries under a new head1."""

    plugin_name = "Collect"

    def __init__(self, header: str, command: str) -> None:
        self.header = header
        self.command = command

    def prepare_input(self, weave_input: WeaveInput) -> None:
        pod = weave_input.pod_document
        pod.children = nest(pod.children, self.command)

    def weave_section(self, document: PodDocument, weave_input: WeaveInput) -> None:
        pod = weave_input.pod_document
        collected = [
            child
            for child in pod.children
            if isinstance(child, Nested) and child.command == self.command
        ]
        if not collected:
            return
        for child in collected:
            pod.remove(child)
        entries: List[Element] = [
            Nested("head2", child.content, list(child.children)) for child in collected
        ]
        document.children.append(Nested("head1", self.header, entries))


class RegionSection(SectionPlugin):
    """Moves ``=begin :REGION`` blocks into the output."""

    plugin_name = "Region"

    def __init__(self, region_name: str, flatten: bool = True, allow_nonpod: bool = False) -> None:
        self.region_name = region_name
        self.flatten = flatten
        self.allow_nonpod = allow_nonpod

    def _matches(self, element: Element) -> bool:
        if not isinstance(element, Region):
            return False
        if element.format_name == f":{self.region_name}":
            return True
        return self.allow_nonpod and element.format_name == self.region_name

    def weave_section(self, document: PodDocument, weave_input: WeaveInput) -> None:
        pod = weave_input.pod_document
        regions = [child for child in pod.children if self._matches(child)]
        for region in regions:
            pod.remove(region)
            if self.flatten and isinstance(region, Region) and region.is_pod:
                document.children.extend(region.children)
            else:
                document.children.append(region)


class LeftoversSection(SectionPlugin):
    """Moves whatever input POD no earlier section claimed."""

    plugin_name = "Leftovers"

    def weave_section(self, document: PodDocument, weave_input: WeaveInput) -> None:
        pod = weave_input.pod_document
        document.children.extend(pod.children)
        pod.children = []


class AuthorsSection(SectionPlugin):
    """Adds ``=head1 AUTHOR`` or ``=head1 AUTHORS``."""

    plugin_name = "Authors"

    def __init__(self, header: Optional[str] = None) -> None:
        self.header = header

    def weave_section(self, document: PodDocument, weave_input: WeaveInput) -> None:
        authors = [_escape(author) for author in weave_input.metadata.authors]
        if not authors:
            return
        header = self.header or ("AUTHOR" if len(authors) == 1 else "AUTHORS")
        if len(authors) == 1:
            body: List[Element] = [Text(authors[0])]
        else:
            body = [Command("over", "4")]
            for author in authors:
                body.extend([Command("item", "*"), Text(author)])
            body.append(Command("back"))
        document.children.append(Nested("head1", header, body))


class LegalSection(SectionPlugin):
    """Adds ``=head1 COPYRIGHT AND LICENSE`` from the declared license."""

    plugin_name = "Legal"

    def __init__(self, header: str = "COPYRIGHT AND LICENSE") -> None:
        self.header = header

    def weave_section(self, document: PodDocument, weave_input: WeaveInput) -> None:
        license = weave_input.metadata.license
        if license is None:
            return
        document.children.append(Nested("head1", self.header, paragraphs_from_text(license.notice())))


def _escape(text: str) -> str:
    return re.sub(r"[<>]", lambda match: "E<lt>" if match.group(0) == "<" else "E<gt>", text)


__all__ = [
    "AuthorsSection",
    "CollectSection",
    "GenericSection",
    "LeftoversSection",
    "LegalSection",
    "NameSection",
    "RegionSection",
    "VersionSection",
    "document_abstract",
    "document_name",
]
