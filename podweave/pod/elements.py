"""POD document model: paragraphs, nested sections and regions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Union


@dataclass
class Command:
    """A ``=command content`` paragraph."""

    command: str
    content: str = ""

    def pod_paragraphs(self) -> Iterator[str]:
        yield f"={self.command} {self.content}" if self.content else f"={self.command}"


@dataclass
class Text:
    """An ordinary paragraph."""

    content: str

    def pod_paragraphs(self) -> Iterator[str]:
        yield self.content


@dataclass
class Verbatim:
    """An indented paragraph reproduced as-is."""

    content: str

    def pod_paragraphs(self) -> Iterator[str]:
        yield self.content


@dataclass
class Nested(Command):
    """A command that owns the paragraphs following it, e.g. a ``=head1`` section."""

    children: List["Element"] = field(default_factory=list)

    def pod_paragraphs(self) -> Iterator[str]:
        yield from super().pod_paragraphs()
        for child in self.children:
            yield from child.pod_paragraphs()


@dataclass
class Region:
    """A ``=begin NAME`` … ``=end NAME`` block."""

    format_name: str
    parameter: str = ""
    children: List["Element"] = field(default_factory=list)

    @property
    def is_pod(self) -> bool:
        """Regions whose format starts with a colon hold POD rather than foreign text."""
        return self.format_name.startswith(":")

    def pod_paragraphs(self) -> Iterator[str]:
        header = f"{self.format_name} {self.parameter}".rstrip()
        yield f"=begin {header}"
        for child in self.children:
            yield from child.pod_paragraphs()
        yield f"=end {self.format_name}"


Element = Union[Command, Text, Verbatim, Nested, Region]


@dataclass
class PodDocument:
    """Ordered POD elements; serializes to a ``=pod`` … ``=cut`` string."""

    children: List[Element] = field(default_factory=list)

    def pod_paragraphs(self) -> Iterator[str]:
        for child in self.children:
            yield from child.pod_paragraphs()

    def as_pod_string(self) -> str:
        body = "".join(f"{paragraph}\n\n" for paragraph in self.pod_paragraphs())
        return f"=pod\n\n{body}=cut\n"

    def head1_sections(self) -> List[Nested]:
        return [child for child in self.children if is_command(child, "head1") and isinstance(child, Nested)]

    def find_section(self, title: str) -> Optional[Nested]:
        for section in self.head1_sections():
            if section.content.strip() == title:
                return section
        return None

    def remove(self, element: Element) -> None:
        for index, child in enumerate(self.children):
            if child is element:
                del self.children[index]
                return
        raise ValueError("element is not a child of this document")


def is_command(element: object, *commands: str) -> bool:
    """Return True for command paragraphs (nested or not) named in ``commands``."""
    return isinstance(element, Command) and (not commands or element.command in commands)


__all__ = [
    "Command",
    "Element",
    "Nested",
    "PodDocument",
    "Region",
    "Text",
    "Verbatim",
    "is_command",
]
