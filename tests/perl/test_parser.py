"""Tests for podweave.perl.parser."""

from __future__ import annotations

import pytest

from podweave.errors import ParseError
from podweave.perl import (
    Category,
    Document,
    HereDocToken,
    Node,
    NodeKind,
    Token,
    classify,
    parse_document,
    split_trailer,
)


def _kinds(node: Node) -> list[NodeKind]:
    return [child.kind for child in node.children]


def _significant(source: str) -> list[tuple[NodeKind, str]]:
    return [(token.kind, token.content) for token in parse_document(source).significant_tokens()]


def _contents(document: Document, kind: NodeKind) -> list[str]:
    return [token.content for token in document.tokens() if token.kind is kind]


@pytest.mark.parametrize(
    "source",
    [
        "my $half = ${$ref} / 2;\n",
        "my $n = @{$list} / 2;\n",
        "my $r = do { 4 } / 2;\n",
        "$obj->sub(foo(1), 2);\n",
        "package Foo::Bar;\n# a comment\nmy %h = (a => 1, b => [1, 2]);\n",
    ],
)
def test_valid_perl_parses_losslessly(source: str) -> None:
    document = parse_document(source)
    assert str(document) == source


def test_division_after_dereference_is_an_operator() -> None:
    tokens = _significant("my $half = ${$ref} / 2;\n")
    assert (NodeKind.OPERATOR, "/") in tokens
    assert (NodeKind.NUMBER, "2") in tokens
    assert all(kind is not NodeKind.QUOTE_LIKE for kind, _ in tokens)


def test_pod_block_is_a_single_token_with_its_newline() -> None:
    document = parse_document("1;\n\n=head1 NAME\n\nFoo\n\n=cut\n\n2;\n")
    pods = [token for token in document.tokens() if token.kind is NodeKind.POD]
    assert [token.content for token in pods] == ["=head1 NAME\n\nFoo\n\n=cut\n"]
    assert pods[0].line == 3


def test_pod_marker_inside_comment_is_not_pod() -> None:
    document = parse_document("# =head1 not pod\n1;\n")
    assert _contents(document, NodeKind.POD) == []
    assert [text.rstrip("\n") for text in _contents(document, NodeKind.COMMENT)] == ["# =head1 not pod"]


def test_quotes_are_kept_whole() -> None:
    tokens = _significant("my $s = 'a b';\nmy $t = q{lit};\nmy @w = qw(a b c);\n")
    assert (NodeKind.QUOTE, "'a b'") in tokens
    assert (NodeKind.QUOTE, "q{lit}") in tokens
    assert (NodeKind.QUOTE_LIKE, "qw(a b c)") in tokens


def test_heredoc_body_is_linked_to_its_introducer() -> None:
    source = 'print <<"EOT";\n=head1 Inside\nEOT\n\n=head1 Outside\n\n=cut\n'
    document = parse_document(source)
    heredoc = document.find_first(lambda element: isinstance(element, HereDocToken))
    assert isinstance(heredoc, HereDocToken)
    assert heredoc.terminator == "EOT"
    assert heredoc.interpolated is True
    assert heredoc.body == "=head1 Inside\n"
    assert heredoc.literal_text == "=head1 Inside\n"
    assert heredoc.terminator_line == "EOT"
    assert heredoc.body_token is not None and heredoc.body_token.kind is NodeKind.HEREDOC
    assert _contents(document, NodeKind.POD) == ["=head1 Outside\n\n=cut\n"]
    assert str(document) == source


def test_single_quoted_heredoc_is_not_interpolated() -> None:
    document = parse_document("my $t = <<'RAW';\n$x\nRAW\n")
    heredoc = document.find_first(lambda element: isinstance(element, HereDocToken))
    assert isinstance(heredoc, HereDocToken)
    assert heredoc.interpolated is False
    assert heredoc.body == "$x\n"


def test_end_section_keeps_pod_tokens() -> None:
    source = "1;\n__END__\nnotes\n=head1 LATE\n\nText\n\n=cut\nmore notes\n"
    document = parse_document(source)
    assert _contents(document, NodeKind.SEPARATOR) == ["__END__"]
    assert _contents(document, NodeKind.END) == ["\nnotes\n", "more notes\n"]
    assert _contents(document, NodeKind.POD) == ["=head1 LATE\n\nText\n\n=cut\n"]
    pod = next(token for token in document.tokens() if token.kind is NodeKind.POD)
    assert pod.line == 4
    assert str(document) == source


def test_data_section_is_opaque() -> None:
    document = parse_document("1;\n__DATA__\n=head1 DATA\n")
    last = document.children[-1]
    assert isinstance(last, Token)
    assert last.kind is NodeKind.DATA
    assert last.content == "\n=head1 DATA\n"
    assert _contents(document, NodeKind.POD) == []


def test_trailer_marker_inside_pod_is_ignored() -> None:
    source = "=pod\n\n__END__\n\n=cut\n\n1;\n"
    assert split_trailer(source) == (source, "")
    assert split_trailer("1;\n__DATA__\nx\n") == ("1;\n", "__DATA__\nx\n")


def test_top_level_statements() -> None:
    document = parse_document("sub foo { return 1; }\nbar();\n")
    statements = [child for child in document.children if child.kind is NodeKind.STATEMENT]
    assert [statement.content for statement in statements] == ["sub foo { return 1; }", "bar();"]


def test_block_groups_its_own_statements() -> None:
    document = parse_document("sub f {\n    my $x = 1;\n    return $x;\n}\n")
    block = document.find_first(lambda element: element.kind is NodeKind.BLOCK)
    assert isinstance(block, Node)
    inner = [child.content for child in block.children if child.kind is NodeKind.STATEMENT]
    assert inner == ["my $x = 1;", "return $x;"]


def test_brackets_become_container_nodes() -> None:
    document = parse_document("my $h = { list => [1, 2] };\n")
    constructors = document.find(lambda element: element.kind is NodeKind.CONSTRUCTOR)
    assert "[1, 2]" in [node.content for node in constructors]


def test_pod_between_statements_stays_at_top_level() -> None:
    source = "use strict;\n\n=head1 NAME\n\nFoo\n\n=cut\n\nsub foo { return 1; }\n"
    document = parse_document(source)
    assert NodeKind.POD in _kinds(document)
    assert str(document) == source


def test_walk_is_depth_first_in_source_order() -> None:
    document = parse_document("f(1, [2]);\n")
    numbers = [
        element.content for element in document.walk() if element.kind is NodeKind.NUMBER
    ]
    assert numbers == ["1", "2"]


def test_parent_links_are_set() -> None:
    document = parse_document("foo(1);\n")
    for element in document.walk():
        assert element.parent is not None
        assert any(child is element for child in element.parent.children)

    number = document.find_first(lambda element: element.kind is NodeKind.NUMBER)
    assert number is not None
    ancestors = []
    node = number.parent
    while node is not None:
        ancestors.append(node.kind)
        node = node.parent
    assert ancestors[-1] is NodeKind.DOCUMENT
    assert NodeKind.STATEMENT in ancestors


def test_every_kind_has_a_category() -> None:
    assert classify(NodeKind.POD) is Category.DOCUMENTATION
    assert classify(NodeKind.COMMENT) is Category.IGNORABLE
    assert classify(NodeKind.HEREDOC) is Category.CODE
    for kind in NodeKind:
        assert isinstance(classify(kind), Category)


@pytest.mark.parametrize(
    "source",
    [
        'my $x = "unterminated;\n',
        "sub f { 1;\n",
        "foo());\n",
    ],
)
def test_malformed_source_raises_parse_error(source: str) -> None:
    with pytest.raises(ParseError):
        parse_document(source)


def test_parse_error_reports_line() -> None:
    with pytest.raises(ParseError) as excinfo:
        parse_document("1;\n2;\nsub f {\n")
    assert excinfo.value.line is not None and excinfo.value.line >= 3
    assert f"line {excinfo.value.line}" in str(excinfo.value)
