"""Weaver plugin discovery and the weaving pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from ..config import ConfigError, PluginSpec, load_config
from ..entry_points import iter_entry_points
from ..logging import get_logger
from ..models import WeaveMetadata
from ..perl import Document
from ..pod import PodDocument
from .base import Plugin, SectionPlugin, WeaveInput, WeaverError
from .sections import (
    AuthorsSection,
    CollectSection,
    GenericSection,
    LeftoversSection,
    LegalSection,
    NameSection,
    RegionSection,
    VersionSection,
)

_ENTRY_POINT_GROUP = "podweave.plugins"

_BUILTIN_FACTORIES: Dict[str, Callable[..., Plugin]] = {
    "Name": NameSection,
    "Version": VersionSection,
    "Generic": GenericSection,
    "Collect": CollectSection,
    "Region": RegionSection,
    "Leftovers": LeftoversSection,
    "Authors": AuthorsSection,
    "Legal": LegalSection,
}


def available_plugins() -> Dict[str, Callable[..., Plugin]]:
    """Return plugin factories keyed by name, built-ins first."""
    factories: Dict[str, Callable[..., Plugin]] = dict(_BUILTIN_FACTORIES)
    for entry in iter_entry_points(_ENTRY_POINT_GROUP):
        if entry.name in factories:
            continue
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover - broken plugin distribution
            raise RuntimeError(f"Failed to load weaver plugin entry point '{entry.name}': {exc}") from exc
        factories[entry.name] = _coerce_factory(entry.name, loaded)
    return factories


def build_plugins(specs: Sequence[PluginSpec]) -> List[Plugin]:
    """Instantiate the configured plugins in order."""
    factories = available_plugins()
    plugins: List[Plugin] = []
    for spec in specs:
        factory = factories.get(spec.name)
        if factory is None:
            raise ConfigError(f"Unknown weaver plugin {spec.name!r}")
        try:
            instance = factory(**spec.options)
        except TypeError as exc:
            raise ConfigError(f"Invalid options for weaver plugin {spec.name!r}: {exc}") from exc
        if not isinstance(instance, Plugin):
            raise TypeError(f"Weaver plugin factory for '{spec.name}' did not return a Plugin instance")
        plugins.append(instance)
    return plugins


def _coerce_factory(name: str, obj: object) -> Callable[..., Plugin]:
    if isinstance(obj, type) and issubclass(obj, Plugin):
        return obj
    if callable(obj):
        return obj  # type: ignore[return-value]
    raise TypeError(f"Weaver plugin entry point '{name}' must be a Plugin subclass or factory")


class Weaver:
    """Runs section plugins over extracted POD to build the final document."""

    def __init__(self, plugins: Iterable[Plugin]) -> None:
        self.plugins = list(plugins)
        self.logger = get_logger("weaver")

    @classmethod
    def from_config(cls, root: Path) -> "Weaver":
        """Build a weaver from the weaver.yml found in ``root``."""
        config = load_config(root)
        return cls(build_plugins(config.plugins))

    def weave_document(
        self,
        pod_document: PodDocument,
        source_document: Document,
        metadata: Optional[WeaveMetadata] = None,
        *,
        filename: str = "",
    ) -> PodDocument:
        weave_input = WeaveInput(
            pod_document=pod_document,
            source_document=source_document,
            metadata=metadata or WeaveMetadata(),
            filename=filename,
        )
        for plugin in self.plugins:
            plugin.prepare_input(weave_input)

        document = PodDocument()
        for plugin in self.plugins:
            if isinstance(plugin, SectionPlugin):
                self.logger.debug("Weaving %s section for %s", plugin.plugin_name or type(plugin).__name__, filename)
                plugin.weave_section(document, weave_input)
        return document


__all__ = [
    "Plugin",
    "SectionPlugin",
    "WeaveInput",
    "Weaver",
    "WeaverError",
    "available_plugins",
    "build_plugins",
]
