"""Syntax tree elements for parsed Perl documents."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Dict, Iterator, List, Optional


class NodeKind(str, Enum):
    """Closed set of element kinds produced by the Perl parser."""

    DOCUMENT = "document"
    STATEMENT = "statement"
    BLOCK = "block"
    LIST = "list"
    CONSTRUCTOR = "constructor"
    SUBSCRIPT = "subscript"

    COMMENT = "comment"
    POD = "pod"
    WHITESPACE = "whitespace"
    SEPARATOR = "separator"
    DATA = "data"
    END = "end"

    QUOTE = "quote"
    QUOTE_LIKE = "quote_like"
    HEREDOC = "heredoc"

    PROTOTYPE = "prototype"
    WORD = "word"
    SYMBOL = "symbol"
    CAST = "cast"
    MAGIC = "magic"
    NUMBER = "number"
    OPERATOR = "operator"
    STRUCTURE = "structure"


class Category(str, Enum):
    """Extraction category of an element."""

    CODE = "code"
    DOCUMENTATION = "documentation"
    IGNORABLE = "ignorable"


_CATEGORIES: Dict[NodeKind, Category] = {
    NodeKind.DOCUMENT: Category.CODE,
    NodeKind.STATEMENT: Category.CODE,
    NodeKind.BLOCK: Category.CODE,
    NodeKind.LIST: Category.CODE,
    NodeKind.CONSTRUCTOR: Category.CODE,
    NodeKind.SUBSCRIPT: Category.CODE,
    NodeKind.COMMENT: Category.IGNORABLE,
    NodeKind.POD: Category.DOCUMENTATION,
    NodeKind.WHITESPACE: Category.IGNORABLE,
    NodeKind.SEPARATOR: Category.IGNORABLE,
    NodeKind.DATA: Category.IGNORABLE,
    NodeKind.END: Category.IGNORABLE,
    NodeKind.QUOTE: Category.CODE,
    NodeKind.QUOTE_LIKE: Category.CODE,
    NodeKind.HEREDOC: Category.CODE,
    NodeKind.PROTOTYPE: Category.CODE,
    NodeKind.WORD: Category.CODE,
    NodeKind.SYMBOL: Category.CODE,
    NodeKind.CAST: Category.CODE,
    NodeKind.MAGIC: Category.CODE,
    NodeKind.NUMBER: Category.CODE,
    NodeKind.OPERATOR: Category.CODE,
    NodeKind.STRUCTURE: Category.CODE,
}

_unmapped = set(NodeKind) - set(_CATEGORIES)
if _unmapped:  # pragma: no cover - guards edits to NodeKind
    raise RuntimeError(f"NodeKind values without a category: {sorted(k.value for k in _unmapped)}")

LITERAL_KINDS = frozenset({NodeKind.QUOTE, NodeKind.QUOTE_LIKE, NodeKind.HEREDOC})
NON_CODE_KINDS = frozenset(kind for kind, category in _CATEGORIES.items() if category is not Category.CODE)


def classify(kind: NodeKind) -> Category:
    """Return the extraction category for an element kind."""
    return _CATEGORIES[kind]


class Element(ABC):
    """Base class for every node in the syntax tree."""

    kind: NodeKind

    def __init__(self, kind: NodeKind) -> None:
        self.kind = kind
        self.parent: Optional[Node] = None

    @property
    def category(self) -> Category:
        return classify(self.kind)

    @property
    def significant(self) -> bool:
        return self.category is Category.CODE

    @property
    @abstractmethod
    def content(self) -> str:
        """Source text covered by the element."""


class Token(Element):
    """Leaf element holding a slice of source text."""

    def __init__(self, kind: NodeKind, content: str, line: int) -> None:
        super().__init__(kind)
        self._content = content
        self.line = line

    @property
    def content(self) -> str:
        return self._content

    @property
    def literal_text(self) -> str:
        """Text a string-like token carries, used for POD contamination checks."""
        return self._content

    def __str__(self) -> str:
        return self._content

    def __repr__(self) -> str:
        return f"Token({self.kind.value}, {self._content!r}, line={self.line})"


class HereDocToken(Token):
    """Here-document introducer such as ``<<"EOT"``.

    The body is a separate HEREDOC token further down the stream, starting
    with the newline that ends the introducer's line and running through the
    terminator line. ``body_token`` links the two.
    """

    def __init__(
        self,
        content: str,
        line: int,
        *,
        terminator: str,
        indented: bool = False,
        interpolated: bool = True,
    ) -> None:
        super().__init__(NodeKind.HEREDOC, content, line)
        self.terminator = terminator
        self.indented = indented
        self.interpolated = interpolated
        self.body_token: Optional[Token] = None

    def _body_text(self) -> str:
        if self.body_token is None:
            return ""
        text = self.body_token.content
        return text[1:] if text.startswith("\n") else text

    @property
    def body(self) -> str:
        head, newline, _ = self._body_text().rpartition("\n")
        return head + newline

    @property
    def terminator_line(self) -> str:
        return self._body_text().rpartition("\n")[2]

    @property
    def literal_text(self) -> str:
        return self.body

    def __repr__(self) -> str:
        return f"HereDocToken({self._content!r}, terminator={self.terminator!r}, line={self.line})"


class Node(Element):
    """Container element whose children appear in source order.

    ``grammar_type`` is the tree-sitter node type the container was built
    from, or None for statements grouped at block level.
    """

    def __init__(self, kind: NodeKind, grammar_type: Optional[str] = None) -> None:
        super().__init__(kind)
        self.grammar_type = grammar_type
        self.children: List[Element] = []

    def add(self, child: Element) -> None:
        child.parent = self
        self.children.append(child)

    @property
    def content(self) -> str:
        return "".join(token.content for token in self.tokens())

    def walk(self) -> Iterator[Element]:
        """Yield every descendant depth-first, left to right."""
        stack: List[Element] = list(reversed(self.children))
        while stack:
            element = stack.pop()
            yield element
            if isinstance(element, Node):
                stack.extend(reversed(element.children))

    def tokens(self) -> Iterator[Token]:
        for element in self.walk():
            if isinstance(element, Token):
                yield element

    def significant_tokens(self) -> Iterator[Token]:
        for token in self.tokens():
            if token.significant:
                yield token

    def find(self, predicate: Callable[[Element], bool]) -> List[Element]:
        return [element for element in self.walk() if predicate(element)]

    def find_first(self, predicate: Callable[[Element], bool]) -> Optional[Element]:
        for element in self.walk():
            if predicate(element):
                return element
        return None

    def __repr__(self) -> str:
        return f"Node({self.kind.value}, children={len(self.children)})"


class Document(Node):
    """Root of a parsed Perl source file."""

    def __init__(self) -> None:
        super().__init__(NodeKind.DOCUMENT)

    def serialize(self) -> str:
        """Reconstruct the original source text."""
        return self.content

    def __str__(self) -> str:
        return self.serialize()


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
]
