"""Parse POD text into a :class:`PodDocument`."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .elements import Command, Element, Nested, PodDocument, Region, Text, Verbatim

_COMMAND_LINE = re.compile(r"=([A-Za-z]\w*)[ \t]*(.*)", re.S)
_CUT = re.compile(r"=cut\b")

# Commands that may appear inside a nested section without ending it.
SECTION_CONTENT_COMMANDS = frozenset(
    {"head2", "head3", "head4", "over", "item", "back", "for", "encoding"}
)


@dataclass
class _RawParagraph:
    lines: List[str]
    is_command: bool


def read_string(text: str) -> PodDocument:
    """Parse POD text, dropping non-POD content and ``=pod``/``=cut`` markers."""
    elements = [_to_element(raw) for raw in _split_paragraphs(text)]
    elements = [
        element
        for element in elements
        if not (isinstance(element, Command) and element.command in ("pod", "cut"))
    ]
    elements = _collect_regions(elements)
    return PodDocument(children=nest(elements, "head1"))


def paragraphs_from_text(text: str) -> List[Element]:
    """Split plain text (e.g. a license notice) into ordinary and verbatim paragraphs."""
    elements: List[Element] = []
    for block in re.split(r"\n[ \t]*\n", text.strip("\n")):
        block = block.rstrip()
        if not block:
            continue
        if block[0] in " \t":
            elements.append(Verbatim(block))
        else:
            elements.append(Text(block))
    return elements


def nest(
    elements: Iterable[Element],
    command: str,
    content_commands: Iterable[str] = SECTION_CONTENT_COMMANDS,
) -> List[Element]:
    """Fold ``=command`` paragraphs together with the flat paragraphs that follow them."""
    allowed = frozenset(content_commands)
    result: List[Element] = []
    current: Optional[Nested] = None
    for element in elements:
        if isinstance(element, Command) and not isinstance(element, Nested) and element.command == command:
            current = Nested(command=element.command, content=element.content)
            result.append(current)
            continue
        if current is not None and _is_section_content(element, allowed):
            current.children.append(element)
            continue
        current = None
        result.append(element)
    return result


def _is_section_content(element: Element, allowed: frozenset[str]) -> bool:
    if isinstance(element, (Text, Verbatim)):
        return True
    if isinstance(element, (Nested, Region)):
        return False
    return element.command in allowed


def _split_paragraphs(text: str) -> List[_RawParagraph]:
    paragraphs: List[_RawParagraph] = []
    current: Optional[_RawParagraph] = None
    in_pod = False
    for line in text.split("\n"):
        if line.startswith("=") and len(line) > 1 and line[1].isalpha():
            if current is not None:
                paragraphs.append(current)
            current = _RawParagraph(lines=[line], is_command=True)
            in_pod = not _CUT.match(line)
            if not in_pod:
                paragraphs.append(current)
                current = None
            continue
        if not in_pod:
            continue
        if not line.strip():
            if current is not None:
                paragraphs.append(current)
                current = None
            continue
        if current is None:
            current = _RawParagraph(lines=[line], is_command=False)
        else:
            current.lines.append(line)
    if current is not None:
        paragraphs.append(current)
    return paragraphs


def _to_element(raw: _RawParagraph) -> Element:
    body = "\n".join(raw.lines)
    if raw.is_command:
        match = _COMMAND_LINE.match(body)
        assert match is not None
        return Command(command=match.group(1), content=match.group(2).rstrip())
    if body[0] in " \t":
        return Verbatim(body.rstrip())
    return Text(body.rstrip())


def _collect_regions(elements: List[Element]) -> List[Element]:
    root: List[Element] = []
    stack: List[Region] = []
    for element in elements:
        target = stack[-1].children if stack else root
        if isinstance(element, Command) and element.command == "begin":
            format_name, _, parameter = element.content.partition(" ")
            region = Region(format_name=format_name, parameter=parameter.strip())
            target.append(region)
            stack.append(region)
            continue
        if (
            isinstance(element, Command)
            and element.command == "end"
            and stack
            and element.content.strip() == stack[-1].format_name
        ):
            region = stack.pop()
            if region.is_pod:
                region.children = nest(region.children, "head1")
            continue
        target.append(element)
    # Regions left open at the end of the text close implicitly.
    for region in stack:
        if region.is_pod:
            region.children = nest(region.children, "head1")
    return root


__all__ = ["SECTION_CONTENT_COMMANDS", "nest", "paragraphs_from_text", "read_string"]
