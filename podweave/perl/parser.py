"""Builds a :class:`Document` from the tree-sitter Perl grammar."""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

from tree_sitter import Node as SyntaxNode
from tree_sitter import Parser, Tree
from tree_sitter_languages import get_parser

from ..errors import ParseError
from .elements import Document, HereDocToken, Node, NodeKind, Token

_LANGUAGE = "perl"

# Grammar nodes kept whole as a single token.
_LEAF_KINDS: Dict[str, NodeKind] = {
    "pod_statement": NodeKind.POD,
    "comments": NodeKind.COMMENT,
    "heredoc_body_statement": NodeKind.HEREDOC,
    "string_single_quoted": NodeKind.QUOTE,
    "string_q_quoted": NodeKind.QUOTE,
    "string_double_quoted": NodeKind.QUOTE,
    "string_qq_quoted": NodeKind.QUOTE,
    "word_list_qw": NodeKind.QUOTE_LIKE,
    "command_qx_quoted": NodeKind.QUOTE_LIKE,
    "backtick_quoted": NodeKind.QUOTE_LIKE,
    "patter_matcher_m": NodeKind.QUOTE_LIKE,
    "pattern_matcher": NodeKind.QUOTE_LIKE,
    "regex_pattern_qr": NodeKind.QUOTE_LIKE,
    "substitution_pattern_s": NodeKind.QUOTE_LIKE,
    "transliteration_tr_or_y": NodeKind.QUOTE_LIKE,
    "standard_input": NodeKind.QUOTE_LIKE,
    "function_prototype": NodeKind.PROTOTYPE,
    "function_signature": NodeKind.PROTOTYPE,
    "scalar_variable": NodeKind.SYMBOL,
    "array_variable": NodeKind.SYMBOL,
    "hash_variable": NodeKind.SYMBOL,
    "type_glob": NodeKind.SYMBOL,
    "special_scalar_variable": NodeKind.MAGIC,
    "special_array_variable": NodeKind.MAGIC,
    "special_hash_variable": NodeKind.MAGIC,
    "integer": NodeKind.NUMBER,
    "floating_point": NodeKind.NUMBER,
    "scientific_notation": NodeKind.NUMBER,
    "hexadecimal": NodeKind.NUMBER,
    "octal": NodeKind.NUMBER,
    "version": NodeKind.NUMBER,
    "identifier": NodeKind.WORD,
    "bareword": NodeKind.WORD,
    "package_name": NodeKind.WORD,
    "module_name": NodeKind.WORD,
    "semi_colon": NodeKind.STRUCTURE,
    "arrow_operator": NodeKind.OPERATOR,
    "hash_arrow_operator": NodeKind.OPERATOR,
}

_CONTAINER_KINDS: Dict[str, NodeKind] = {
    "block": NodeKind.BLOCK,
    "standalone_block": NodeKind.BLOCK,
    "list_block": NodeKind.BLOCK,
    "array_ref": NodeKind.CONSTRUCTOR,
    "hash_ref": NodeKind.CONSTRUCTOR,
    "array_access_variable": NodeKind.SUBSCRIPT,
    "hash_access_variable": NodeKind.SUBSCRIPT,
    "function_definition": NodeKind.STATEMENT,
    "special_block": NodeKind.STATEMENT,
}

# Unnamed grammar nodes wrapped in a matching bracket pair.
_BRACKET_KINDS: Dict[Tuple[str, str], NodeKind] = {
    ("(", ")"): NodeKind.LIST,
    ("[", "]"): NodeKind.SUBSCRIPT,
    ("{", "}"): NodeKind.SUBSCRIPT,
}

# Never open a statement of their own at block level.
_INTERLUDE_TYPES = frozenset({"comments", "pod_statement", "heredoc_body_statement"})

_CAST_SIGILS = frozenset({"$", "@", "%", "&", "*", "$#"})
_STRUCTURE_TEXT = frozenset({";", ",", "(", ")", "[", "]", "{", "}"})
_WORD = re.compile(r"[A-Za-z_]\w*(?:::\w+)*\Z")
_GAP_PIECES = re.compile(r"\s+|\S+")

_HEREDOC = re.compile(r"<<(~?)\s*([\"'`]?)([A-Za-z_]\w*)")
_TRAILER = re.compile(r"(__(?:END|DATA)__)\b")
_POD_START = re.compile(r"(?<=\n)=[A-Za-z]")
_POD_CUT = re.compile(r"^=cut\b[^\n]*\n?", re.M)

_parsers: Dict[str, Parser] = {}


def _get_parser() -> Parser:
    parser = _parsers.get(_LANGUAGE)
    if parser is None:
        parser = get_parser(_LANGUAGE)
        _parsers[_LANGUAGE] = parser
    return parser


def _text_kind(text: str) -> NodeKind:
    if text in _STRUCTURE_TEXT:
        return NodeKind.STRUCTURE
    if _WORD.match(text):
        return NodeKind.WORD
    if text[:1].isdigit():
        return NodeKind.NUMBER
    return NodeKind.OPERATOR


def _is_statement_type(grammar_type: str) -> bool:
    if grammar_type in _LEAF_KINDS:
        return False
    return "_statement" in grammar_type or _CONTAINER_KINDS.get(grammar_type) is NodeKind.STATEMENT


def _container_kind(node: SyntaxNode) -> Optional[NodeKind]:
    kind = _CONTAINER_KINDS.get(node.type)
    if kind is not None:
        return kind
    if _is_statement_type(node.type):
        return NodeKind.STATEMENT
    children = node.children
    if len(children) >= 2 and not children[0].is_named and not children[-1].is_named:
        return _BRACKET_KINDS.get((children[0].type, children[-1].type))
    return None


def _is_brace(node: SyntaxNode) -> bool:
    return not node.is_named and node.type in ("{", "}")


def _is_terminator(node: SyntaxNode) -> bool:
    return node.type == "semi_colon" or (not node.is_named and node.type == ";")


def _first_error(root: SyntaxNode) -> Optional[SyntaxNode]:
    if not root.has_error:
        return None
    stack: List[SyntaxNode] = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        stack.extend(
            reversed([child for child in node.children if child.has_error or child.is_missing])
        )
    return root


def split_trailer(text: str) -> Tuple[str, str]:
    """Split source at its ``__END__`` or ``__DATA__`` line.

    Markers inside POD blocks do not count. A POD block opens only after a
    blank line, so ``=`` lines inside here-documents are skipped. Returns
    ``(code, trailer)`` where the trailer starts with the marker, or is empty.
    """
    offset = 0
    in_pod = False
    after_blank = True
    for line in text.split("\n"):
        if line.startswith("=") and line[1:2].isalpha() and (in_pod or after_blank):
            in_pod = not line.startswith("=cut")
        elif not in_pod and _TRAILER.match(line):
            return text[:offset], text[offset:]
        after_blank = not line.strip()
        offset += len(line) + 1
    return text, ""


class TreeBuilder:
    """Rebuilds a tree-sitter parse tree as a lossless element tree.

    Source bytes the grammar leaves between nodes become WHITESPACE tokens, so
    concatenating every token reproduces the input. Code outside brackets is
    grouped into STATEMENT nodes that end at ``;`` or at a statement the
    grammar names itself.
    """

    def __init__(self, source: bytes) -> None:
        self.source = source
        self.document = Document()
        self._cursor = 0
        self._line = 1
        self._pending_heredocs: List[HereDocToken] = []

    def build(self, tree: Tree) -> Document:
        error = _first_error(tree.root_node)
        if error is not None:
            raise ParseError(self._describe(error), error.start_point[0] + 1)
        self._visit_statements(tree.root_node, self.document)
        self._flush(len(self.source), self.document)
        return self.document

    def add_trailer(self, text: str) -> None:
        """Append the ``__END__``/``__DATA__`` marker and the text after it."""
        marker = _TRAILER.match(text).group(1)
        self._append(NodeKind.SEPARATOR, marker)
        rest = text[len(marker):]
        if marker == "__DATA__":
            if rest:
                self._append(NodeKind.DATA, rest)
            return
        position = 0
        while position < len(rest):
            start = _POD_START.search(rest, position)
            if start is None:
                self._append(NodeKind.END, rest[position:])
                break
            if start.start() > position:
                self._append(NodeKind.END, rest[position:start.start()])
            cut = _POD_CUT.search(rest, start.start())
            end = cut.end() if cut else len(rest)
            self._append(NodeKind.POD, rest[start.start():end])
            position = end

    def _describe(self, node: SyntaxNode) -> str:
        if node.is_missing:
            return f"Missing {node.type!r}"
        snippet = self.source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")
        snippet = snippet.split("\n", 1)[0][:40]
        return f"Syntax error near {snippet!r}"

    def _visit_statements(self, syntax_node: SyntaxNode, container: Node) -> None:
        statement: Optional[Node] = None
        for child in syntax_node.children:
            if _is_brace(child) or _is_statement_type(child.type):
                statement = None
                self._visit(child, container)
                continue
            if child.type in _INTERLUDE_TYPES:
                self._visit(child, statement or container)
                continue
            terminator = _is_terminator(child)
            if statement is None:
                previous = container.children[-1] if container.children else None
                if terminator and isinstance(previous, Node) and previous.kind is NodeKind.STATEMENT:
                    statement = previous
                else:
                    self._flush(child.start_byte, container)
                    statement = Node(NodeKind.STATEMENT)
                    container.add(statement)
            self._visit(child, statement)
            if terminator:
                statement = None

    def _visit(self, node: SyntaxNode, parent: Node) -> None:
        if node.end_byte <= self._cursor:
            return
        self._flush(node.start_byte, parent)

        if node.type == "heredoc_initializer":
            self._add_heredoc(node, parent)
            return
        kind = _LEAF_KINDS.get(node.type)
        if kind is not None or node.child_count == 0:
            token = self._add_token(parent, kind or self._leaf_kind(node), node.end_byte)
            if node.type == "heredoc_body_statement" and self._pending_heredocs:
                self._pending_heredocs.pop(0).body_token = token
            return

        container_kind = _container_kind(node)
        if container_kind is None:
            for child in node.children:
                self._visit(child, parent)
            return
        container = Node(container_kind, node.type)
        parent.add(container)
        if container_kind is NodeKind.BLOCK:
            self._visit_statements(node, container)
        else:
            for child in node.children:
                self._visit(child, container)
        self._flush(node.end_byte, container)

    def _leaf_kind(self, node: SyntaxNode) -> NodeKind:
        text = self._slice(node.start_byte, node.end_byte)
        parent = node.parent
        if (
            not node.is_named
            and text in _CAST_SIGILS
            and parent is not None
            and parent.type.endswith("_dereference")
        ):
            return NodeKind.CAST
        return _text_kind(text)

    def _add_heredoc(self, node: SyntaxNode, parent: Node) -> None:
        text = self._slice(self._cursor, node.end_byte)
        match = _HEREDOC.search(text)
        token = HereDocToken(
            text,
            self._line,
            terminator=match.group(3) if match else text,
            indented=bool(match and match.group(1)),
            interpolated=not (match and match.group(2) == "'"),
        )
        self._emit(parent, token, node.end_byte)
        self._pending_heredocs.append(token)

    def _add_token(self, parent: Node, kind: NodeKind, end: int) -> Token:
        if kind is NodeKind.POD and self.source[end - 1:end] != b"\n" and self.source[end:end + 1] == b"\n":
            # A POD token owns the newline after its last line.
            end += 1
        token = Token(kind, self._slice(self._cursor, end), self._line)
        self._emit(parent, token, end)
        return token

    def _flush(self, until: int, parent: Node) -> None:
        if until <= self._cursor:
            return
        for piece in _GAP_PIECES.findall(self._slice(self._cursor, until)):
            kind = NodeKind.WHITESPACE if piece.isspace() else _text_kind(piece)
            parent.add(Token(kind, piece, self._line))
            self._line += piece.count("\n")
        self._cursor = until

    def _emit(self, parent: Node, token: Token, end: int) -> None:
        parent.add(token)
        self._line += token.content.count("\n")
        self._cursor = end

    def _append(self, kind: NodeKind, text: str) -> None:
        self.document.add(Token(kind, text, self._line))
        self._line += text.count("\n")

    def _slice(self, start: int, end: int) -> str:
        return self.source[start:end].decode("utf-8")


def parse_document(text: str) -> Document:
    """Parse Perl source text into a :class:`Document`.

    Raises :class:`ParseError` with the line of the first syntax error the
    grammar reports.
    """
    code, trailer = split_trailer(text)
    source = code.encode("utf-8")
    builder = TreeBuilder(source)
    document = builder.build(_get_parser().parse(source))
    if trailer:
        builder.add_trailer(trailer)
    return document


__all__ = ["TreeBuilder", "parse_document", "split_trailer"]
