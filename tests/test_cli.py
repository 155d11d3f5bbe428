"""End-to-end tests for the podweave command line."""

from __future__ import annotations

from pathlib import Path

import pytest

from podweave import cli

from tests._fixtures.module_builder import CONTAMINATED_MODULE, SAMPLE_MODULE, ModuleBuilder


def test_help_exits_cleanly(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["-h"])
    assert excinfo.value.code == 0
    assert "--license" in capsys.readouterr().out


def test_missing_config_exits_with_resolved_root(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.chdir(tmp_path)
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["Foo.pm"])
    assert excinfo.value.code == 1
    err = capsys.readouterr().err
    assert f'Cannot find weaver config in "{tmp_path.resolve()}"' in err


def test_unknown_license_exits_before_reading_files(
    weaver_root: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--license", "NotARealLicense", "--author", "Jane", "does-not-exist.pm"])
    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    assert "Could not load license NotARealLicense" in captured.err
    assert "does-not-exist.pm" not in captured.err
    assert captured.out == ""


def test_weaves_sample_module(
    weaver_root: Path,
    module_builder: ModuleBuilder,
    capsys: pytest.CaptureFixture[str],
) -> None:
    path = module_builder.write("Module.pm", SAMPLE_MODULE)
    cli.main(["--version", "1.0", "--author", "Jane Doe", "--license", "MIT", str(path)])
    out = capsys.readouterr().out
    assert out.startswith("=pod\n\n=head1 NAME\n\nMy::Module - Does things\n\n=head1 VERSION\n\nversion 1.0\n")
    assert "=head1 AUTHOR\n\nJane Doe\n" in out
    assert "=head1 COPYRIGHT AND LICENSE\n\nThis software is Copyright (c)" in out
    assert out.endswith("=cut\n\n")


def test_rejected_file_prints_empty_line_and_continues(
    weaver_root: Path,
    module_builder: ModuleBuilder,
    capsys: pytest.CaptureFixture[str],
) -> None:
    good = module_builder.write("Good.pm", SAMPLE_MODULE)
    bad = module_builder.write("Bad.pm", CONTAMINATED_MODULE)

    cli.main([str(good), str(bad)])

    captured = capsys.readouterr()
    assert captured.out.endswith("=cut\n\n\n")
    assert captured.out.count("=pod") == 1
    assert f"can't weave '{bad}': There is POD in string literals" in captured.err


def test_fatal_error_stops_processing(
    weaver_root: Path,
    module_builder: ModuleBuilder,
    capsys: pytest.CaptureFixture[str],
) -> None:
    good = module_builder.write("Good.pm", SAMPLE_MODULE)
    broken = module_builder.write("Broken.pm", "sub f {\n")

    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(broken), str(good)])

    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert f'Cannot parse "{broken}"' in captured.err


def test_version_flag_without_value_omits_version_section(
    weaver_root: Path,
    module_builder: ModuleBuilder,
    capsys: pytest.CaptureFixture[str],
) -> None:
    path = module_builder.write("Module.pm", SAMPLE_MODULE)
    cli.main([str(path), "--version"])
    assert "=head1 VERSION" not in capsys.readouterr().out


def test_build_metadata_uses_first_author_as_holder() -> None:
    metadata = cli.build_metadata("Perl_5", "1.0", ["Jane Doe <jane@x.com>", "Joe"])
    assert metadata.license is not None
    assert metadata.license.holder == "Jane Doe <jane@x.com>"
    assert metadata.version == "1.0"
    assert metadata.authors == ("Jane Doe <jane@x.com>", "Joe")


def test_build_metadata_without_license() -> None:
    metadata = cli.build_metadata(None, "", [])
    assert metadata.license is None
    assert metadata.version is None
    assert metadata.authors == ()
