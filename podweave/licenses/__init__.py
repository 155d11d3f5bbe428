"""License registry: short-name lookup, entry-point plugins and direct imports."""

from __future__ import annotations

import importlib
import re
from typing import Dict, Optional

from ..entry_points import iter_entry_points
from ..errors import LicenseResolutionError
from ..logging import get_logger
from .base import BUILTIN_LICENSES, License

_ENTRY_POINT_GROUP = "podweave.licenses"

logger = get_logger("licenses")


def normalize_license_name(name: str) -> str:
    """Fold case and treat ``-``, ``.`` and ``_`` as the same separator."""
    return re.sub(r"[-._\s]+", "_", name.strip()).lower()


def registered_licenses() -> Dict[str, type[License]]:
    """Return every known license class keyed by normalized short name and alias."""
    registry: Dict[str, type[License]] = {}
    for cls in BUILTIN_LICENSES:
        _register(registry, cls)
    for entry in iter_entry_points(_ENTRY_POINT_GROUP):
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover - broken plugin distribution
            raise RuntimeError(f"Failed to load license entry point '{entry.name}': {exc}") from exc
        if not (isinstance(loaded, type) and issubclass(loaded, License)):
            raise TypeError(f"License entry point '{entry.name}' must be a License subclass")
        registry.setdefault(normalize_license_name(entry.name), loaded)
        _register(registry, loaded)
    return registry


def _register(registry: Dict[str, type[License]], cls: type[License]) -> None:
    for key in (cls.short_name, cls.__name__, *cls.aliases):
        if key:
            registry.setdefault(normalize_license_name(key), cls)


def lookup_license(name: str) -> type[License]:
    """Return the license class registered under ``name``."""
    registry = registered_licenses()
    try:
        return registry[normalize_license_name(name)]
    except KeyError:
        raise KeyError(f"no license registered under short name {name!r}") from None


def load_license_class(path: str) -> type[License]:
    """Import a license class from ``module:Class`` or ``module.Class``."""
    if ":" in path:
        module_name, _, attribute = path.partition(":")
    elif "." in path:
        module_name, _, attribute = path.rpartition(".")
    else:
        raise ImportError(f"{path!r} is not an importable license path")
    module = importlib.import_module(module_name)
    loaded = getattr(module, attribute)
    if not (isinstance(loaded, type) and issubclass(loaded, License)):
        raise TypeError(f"{path!r} is not a License subclass")
    return loaded


def resolve_license(name: str, holder: Optional[str], year: Optional[int] = None) -> License:
    """Build the license named ``name`` for ``holder``.

    The short-name registry is consulted first; failing that ``name`` is imported
    as a class path. :class:`LicenseResolutionError` is raised when both fail.
    """
    if not holder:
        raise LicenseResolutionError(name, "a license holder is required (pass --author)")
    try:
        cls = lookup_license(name)
    except KeyError as lookup_error:
        logger.debug("License %s not registered (%s); trying import", name, lookup_error)
        try:
            cls = load_license_class(name)
        except (ImportError, AttributeError, TypeError, ValueError) as exc:
            raise LicenseResolutionError(name, exc) from exc
    return cls(holder=holder, year=year)


__all__ = [
    "License",
    "load_license_class",
    "lookup_license",
    "normalize_license_name",
    "registered_licenses",
    "resolve_license",
]
