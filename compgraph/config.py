"""Configuration loading for compgraph (.compgraph.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .builtins import VENDOR_DIR
from .paths import MARKUP_EXT

CONFIG_FILENAME = ".compgraph.yml"
DEFAULT_TAB_WIDTH = 2


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class CompGraphConfig:
    """Represents the settings defined in .compgraph.yml."""

    root: Path
    vendor_dir: str = VENDOR_DIR
    markup_ext: str = MARKUP_EXT
    prefixes: Dict[str, str] = field(default_factory=dict)
    exclude_paths: List[str] = field(default_factory=list)
    tab_width: int = DEFAULT_TAB_WIDTH
    max_workers: Optional[int] = None


def load_config(config_path: Path) -> CompGraphConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return CompGraphConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    markup_ext = _as_str(data.get("markup_ext")) or MARKUP_EXT
    if not markup_ext.startswith("."):
        markup_ext = "." + markup_ext

    tab_width = _as_int(data.get("tab_width"))
    max_workers = _as_int(data.get("max_workers"))

    return CompGraphConfig(
        root=root,
        vendor_dir=(_as_str(data.get("vendor_dir")) or VENDOR_DIR).strip("/"),
        markup_ext=markup_ext,
        prefixes=_as_str_dict(data.get("prefixes")),
        exclude_paths=_as_str_list(data.get("exclude_paths")),
        tab_width=tab_width if tab_width is not None and tab_width >= 0 else DEFAULT_TAB_WIDTH,
        max_workers=max_workers if max_workers and max_workers > 0 else None,
    )


def parse_prefix_overrides(values: Sequence[str]) -> Dict[str, str]:
    """Parse ``NAME=PREFIX`` pairs given on the command line."""
    overrides: Dict[str, str] = {}
    for value in values:
        name, sep, prefix = value.partition("=")
        if not sep or not name.strip():
            raise ConfigError(f"Invalid prefix override {value!r}; expected NAME=PREFIX")
        overrides[name.strip()] = prefix.strip()
    return overrides


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


def _as_str_dict(value: Any) -> Dict[str, str]:
    if not isinstance(value, dict):
        return {}
    result: Dict[str, str] = {}
    for key, item in value.items():
        if item is None:
            result[str(key)] = ""
        elif isinstance(item, (str, int, float)):
            result[str(key)] = str(item)
    return result


__all__ = [
    "CONFIG_FILENAME",
    "CompGraphConfig",
    "ConfigError",
    "load_config",
    "parse_prefix_overrides",
]
