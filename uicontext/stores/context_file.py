"""Persistence of the analysis artifact (context.json)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from ..models import ContextApp


class ContextNotFoundError(RuntimeError):
    """Raised when the context artifact has not been built yet."""


def write_context(app: ContextApp, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(app.to_dict(), indent=2), encoding="utf-8")
    return path


def read_context(path: Path) -> Dict[str, Any]:
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ContextNotFoundError(
            f"{path.name} not found. Run 'uicontext build' first."
        ) from exc
    if not isinstance(data, dict) or not isinstance(data.get("components"), dict):
        raise ValueError(f"{path} is not a uicontext artifact")
    return data


__all__ = ["ContextNotFoundError", "read_context", "write_context"]
