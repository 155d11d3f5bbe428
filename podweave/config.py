"""Configuration loading for the weaver (weaver.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigMissingError, PodweaveError

CONFIG_FILENAME = "weaver.yml"
DEFAULT_BUNDLE = "@Default"


class ConfigError(PodweaveError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class PluginSpec:
    """A weaver plugin name plus the options it is constructed with."""

    name: str
    options: Dict[str, Any] = field(default_factory=dict)


@dataclass
class WeaverConfig:
    """Represents the plugin pipeline defined in weaver.yml."""

    root: Path
    plugins: List[PluginSpec] = field(default_factory=list)
    bundle: Optional[str] = None


_BUNDLES: Dict[str, List[PluginSpec]] = {
    DEFAULT_BUNDLE: [
        PluginSpec("Name"),
        PluginSpec("Version"),
        PluginSpec("Region", {"region_name": "prelude"}),
        PluginSpec("Generic", {"header": "SYNOPSIS"}),
        PluginSpec("Generic", {"header": "DESCRIPTION"}),
        PluginSpec("Generic", {"header": "OVERVIEW"}),
        PluginSpec("Collect", {"header": "ATTRIBUTES", "command": "attr"}),
        PluginSpec("Collect", {"header": "METHODS", "command": "method"}),
        PluginSpec("Collect", {"header": "FUNCTIONS", "command": "func"}),
        PluginSpec("Leftovers"),
        PluginSpec("Region", {"region_name": "postlude"}),
        PluginSpec("Authors"),
        PluginSpec("Legal"),
    ],
}


def config_path(root: Path) -> Path:
    return Path(root).expanduser() / CONFIG_FILENAME


def require_config(root: Path) -> Path:
    """Return the config file path, raising :class:`ConfigMissingError` if it is absent."""
    path = config_path(root)
    if not path.is_file():
        raise ConfigMissingError(Path(root).expanduser().resolve(), CONFIG_FILENAME)
    return path


def bundle_plugins(name: str) -> List[PluginSpec]:
    try:
        specs = _BUNDLES[name]
    except KeyError:
        raise ConfigError(f"Unknown plugin bundle {name!r}") from None
    return [PluginSpec(spec.name, dict(spec.options)) for spec in specs]


def load_config(root: Path) -> WeaverConfig:
    """Load the weaver configuration from ``root``."""
    config_file = require_config(root)
    resolved_root = config_file.parent.resolve()

    data = _read_config(config_file)
    if not data:
        return WeaverConfig(
            root=resolved_root, plugins=bundle_plugins(DEFAULT_BUNDLE), bundle=DEFAULT_BUNDLE
        )
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    unknown = set(data) - {"bundle", "plugins"}
    if unknown:
        raise ConfigError(f"Unknown keys in {CONFIG_FILENAME}: {', '.join(sorted(unknown))}")

    bundle = _as_str(data.get("bundle"))
    plugins: List[PluginSpec] = bundle_plugins(bundle) if bundle else []

    raw_plugins = data.get("plugins")
    if raw_plugins is not None:
        if not isinstance(raw_plugins, list):
            raise ConfigError("'plugins' must be a list")
        plugins.extend(_parse_plugin(entry) for entry in raw_plugins)

    if not plugins:
        raise ConfigError(f"{CONFIG_FILENAME} does not configure any plugins")

    return WeaverConfig(root=resolved_root, plugins=plugins, bundle=bundle)


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc


def _parse_plugin(entry: Any) -> PluginSpec:
    if isinstance(entry, str):
        return PluginSpec(entry)
    if isinstance(entry, dict) and len(entry) == 1:
        name, options = next(iter(entry.items()))
        if options is None:
            options = {}
        if not isinstance(name, str) or not isinstance(options, dict):
            raise ConfigError(f"Invalid plugin entry: {entry!r}")
        return PluginSpec(name, dict(options))
    raise ConfigError(f"Invalid plugin entry: {entry!r}")


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) else None


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "DEFAULT_BUNDLE",
    "PluginSpec",
    "WeaverConfig",
    "bundle_plugins",
    "config_path",
    "load_config",
    "require_config",
]
