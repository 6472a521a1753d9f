"""Configuration loading for uicontext (.uicontext.yml)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .logging import get_logger

CONFIG_FILENAME = ".uicontext.yml"

DEFAULT_IGNORE = (
    "**/*.test.tsx",
    "**/*.spec.tsx",
    "**/*.stories.tsx",
    "**/node_modules/**",
)

DEFAULT_OUTPUT = "context.json"

_LOGGER = get_logger("config")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class AnalyzerConfig:
    """Effective settings for one analysis run."""

    root: Path
    name: Optional[str] = None
    ignore: List[str] = field(default_factory=lambda: list(DEFAULT_IGNORE))
    tsconfig: Optional[Path] = None
    translations_dir: Optional[Path] = None
    output: Path = Path(DEFAULT_OUTPUT)

    @property
    def app_name(self) -> str:
        return self.name or self.root.name


def load_config(config_path: Path) -> AnalyzerConfig:
    """Load configuration from disk, falling back to defaults for missing keys."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return AnalyzerConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = AnalyzerConfig(root=root)
    config.name = _as_str(data.get("name"))

    ignore = _as_str_list(data.get("ignore"))
    if ignore:
        config.ignore = ignore

    tsconfig = _as_str(data.get("tsconfig"))
    if tsconfig:
        config.tsconfig = root / tsconfig

    translations_dir = _as_str(data.get("translations_dir"))
    if translations_dir:
        config.translations_dir = root / translations_dir

    output = _as_str(data.get("output"))
    if output:
        config.output = Path(output)

    return config


def load_config_or_default(root: Path) -> AnalyzerConfig:
    """Like :func:`load_config`, but an unusable file yields the defaults."""
    try:
        return load_config(root)
    except ConfigError as exc:
        _LOGGER.warning("Ignoring %s: %s", CONFIG_FILENAME, exc)
        return AnalyzerConfig(root=Path(root).expanduser().resolve())


def load_tsconfig_excludes(tsconfig: Optional[Path]) -> List[str]:
    """Return the ``exclude`` globs of a tsconfig file, or nothing if unusable."""
    if tsconfig is None:
        return []
    try:
        payload = json.loads(tsconfig.read_text(encoding="utf-8"))
    except FileNotFoundError:
        _LOGGER.warning("tsconfig not found at %s; using default settings", tsconfig)
        return []
    except (OSError, ValueError) as exc:
        _LOGGER.warning("Could not read tsconfig %s (%s); using default settings", tsconfig, exc)
        return []
    if not isinstance(payload, dict):
        return []
    return _as_str_list(payload.get("exclude"))


def _resolve_config_path(config_path: Path) -> Path:
    config_path = Path(config_path).expanduser()
    if config_path.name == CONFIG_FILENAME:
        return config_path.resolve()
    return (config_path / CONFIG_FILENAME).resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "AnalyzerConfig",
    "CONFIG_FILENAME",
    "ConfigError",
    "DEFAULT_IGNORE",
    "DEFAULT_OUTPUT",
    "load_config",
    "load_config_or_default",
    "load_tsconfig_excludes",
]
