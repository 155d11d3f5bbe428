"""Tests for podweave.perl.elements."""

from __future__ import annotations

import pytest

from podweave.perl import Document, Element, HereDocToken, Node, NodeKind, Token


def test_element_is_abstract() -> None:
    with pytest.raises(TypeError):
        Element(NodeKind.WORD)  # type: ignore[abstract]


def test_document_serializes_its_tokens_in_order() -> None:
    document = Document()
    statement = Node(NodeKind.STATEMENT)
    statement.add(Token(NodeKind.WORD, "print", 1))
    statement.add(Token(NodeKind.STRUCTURE, ";", 1))
    document.add(statement)
    document.add(Token(NodeKind.WHITESPACE, "\n", 1))
    assert str(document) == "print;\n"
    assert statement.parent is document


def test_heredoc_without_body_is_empty() -> None:
    heredoc = HereDocToken("<<EOT", 1, terminator="EOT")
    assert heredoc.body == ""
    assert heredoc.terminator_line == ""
    assert heredoc.literal_text == ""


def test_heredoc_body_excludes_terminator_line() -> None:
    heredoc = HereDocToken("<<~EOT", 1, terminator="EOT", indented=True)
    heredoc.body_token = Token(NodeKind.HEREDOC, "\n    one\n    two\n    EOT", 1)
    assert heredoc.body == "    one\n    two\n"
    assert heredoc.terminator_line == "    EOT"
