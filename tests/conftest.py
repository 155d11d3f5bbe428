from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from tests._fixtures.module_builder import ModuleBuilder


@pytest.fixture(autouse=True)
def reset_podweave_logger() -> Iterator[None]:
    """Undo configure_logging() so caplog sees podweave records in every test."""
    yield
    logger = logging.getLogger("podweave")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def module_builder(tmp_path: Path) -> ModuleBuilder:
    """Provide a helper that writes Perl sources under tmp_path."""
    return ModuleBuilder(tmp_path)


@pytest.fixture
def weaver_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run from a directory holding an empty weaver.yml (the default bundle)."""
    (tmp_path / "weaver.yml").write_text("", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    return tmp_path
