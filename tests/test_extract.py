"""Tests for POD extraction, contamination checks and assembly."""

from __future__ import annotations

import pytest

from podweave.extract import assemble, code_elements, has_pod_in_literals, pod_fragments
from podweave.perl import NodeKind, parse_document

from tests._fixtures.module_builder import CONTAMINATED_MODULE, SAMPLE_MODULE


def test_pod_fragments_follow_source_order() -> None:
    document = parse_document(
        "=head1 A\n\nFirst\n\n=cut\n\nsub a { 1; }\n\n=head1 B\n\nSecond\n\n=cut\n"
    )
    assert pod_fragments(document) == [
        "=head1 A\n\nFirst\n\n=cut\n",
        "=head1 B\n\nSecond\n\n=cut\n",
    ]


def test_code_elements_exclude_documentation_and_ignorable() -> None:
    document = parse_document("# comment\nmy $x = 1;\n\n=pod\n\nDocs\n\n=cut\n")
    kinds = {element.kind for element in code_elements(document)}
    assert NodeKind.STATEMENT in kinds
    assert kinds.isdisjoint({NodeKind.COMMENT, NodeKind.POD, NodeKind.WHITESPACE})


def test_assemble_keeps_fragment_order() -> None:
    document = assemble(["=head1 A\n\n=cut\n", "=head1 B\n\n=cut\n"])
    assert [section.content for section in document.head1_sections()] == ["A", "B"]


def test_assemble_bare_adjacent_commands() -> None:
    document = assemble(["=head1 A", "=head1 B"])
    assert len(document.children) == 2
    assert [section.content for section in document.head1_sections()] == ["A", "B"]


def test_assemble_without_fragments_is_empty() -> None:
    assert assemble([]).as_pod_string() == "=pod\n\n=cut\n"


def test_sample_module_is_clean() -> None:
    document = parse_document(SAMPLE_MODULE)
    assert not has_pod_in_literals(document)
    assert len(pod_fragments(document)) == 3


def test_heredoc_with_pod_is_contaminated() -> None:
    assert has_pod_in_literals(parse_document(CONTAMINATED_MODULE))


@pytest.mark.parametrize(
    "source",
    [
        'my $s = "\n=head1 X\n";\n',
        "my $s = q{\n=pod\n};\n",
        "my @w = qw(\n=item\n);\n",
        "my $t = <<'EOT';\n=over\nEOT\n",
    ],
)
def test_pod_directive_in_any_literal_is_detected(source: str) -> None:
    assert has_pod_in_literals(parse_document(source))


@pytest.mark.parametrize(
    "source",
    [
        'my $s = "a = b";\n',
        'my $s = "\n=1 not a directive\n";\n',
        'my $s = "\n=Head1 uppercase\n";\n',
        "# =head1 in a comment\n1;\n",
        "my $t = <<EOT;\n text =head1\nEOT\n",
    ],
)
def test_literals_without_directive_lines_are_clean(source: str) -> None:
    assert not has_pod_in_literals(parse_document(source))
