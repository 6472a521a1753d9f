"""Translation key usage index and catalog loading."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .logging import get_logger
from .models import ComponentRecord

_LOGGER = get_logger("translations")


def build_translation_index(records: Iterable[ComponentRecord]) -> Dict[str, List[str]]:
    """Invert per-component keys into ``key -> [component ids]``.

    Only keys referenced from code appear; catalog entries nobody uses do not.
    """
    index: Dict[str, List[str]] = {}
    for record in records:
        for key in record.translations:
            ids = index.setdefault(key, [])
            if record.id not in ids:
                ids.append(record.id)
    return index


def locale_for(path: Path) -> str:
    """``en-translation.json`` -> ``en``; ``fr_FR.json`` -> ``fr_FR``."""
    return path.stem.split("-", 1)[0]


def load_translation_catalogs(directory: Optional[Path]) -> Dict[str, Dict[str, str]]:
    """Read ``*.json`` catalogs under ``directory`` into ``locale -> key -> value``."""
    if directory is None or not directory.is_dir():
        return {}

    catalogs: Dict[str, Dict[str, str]] = {}
    for path in sorted(directory.glob("*.json")):
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            _LOGGER.warning("Skipping translation catalog %s: %s", path, exc)
            continue
        if not isinstance(payload, dict):
            _LOGGER.warning("Skipping translation catalog %s: expected an object", path)
            continue
        values = catalogs.setdefault(locale_for(path), {})
        for key, value in payload.items():
            if isinstance(value, (str, int, float)):
                values[str(key)] = str(value)
    return catalogs


__all__ = ["build_translation_index", "load_translation_catalogs", "locale_for"]
