"""Entry-point lookup shared by the weaver plugin and license registries."""

from __future__ import annotations

from importlib import metadata
from typing import Iterable


def iter_entry_points(group: str) -> Iterable[metadata.EntryPoint]:
    """Return the installed entry points registered under ``group``."""
    try:
        return metadata.entry_points(group=group)
    except Exception:  # pragma: no cover - broken distribution metadata
        return []


__all__ = ["iter_entry_points"]
