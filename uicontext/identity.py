"""Deterministic, checkout-independent component identifiers."""

from __future__ import annotations

import hashlib
import os
from pathlib import Path


def relative_posix_path(root: str | Path, file_path: str | Path) -> str:
    """Return ``file_path`` relative to ``root`` using forward slashes."""
    relative = os.path.relpath(os.path.abspath(file_path), os.path.abspath(root))
    return relative.replace(os.sep, "/")


def component_id(root: str | Path, file_path: str | Path, name: str) -> str:
    """Build ``<name>_<first 8 hex digits of md5(relative path)>``.

    Hashing the root-relative path keeps ids identical across machines and
    checkout locations for the same source tree. Two declarations with the
    same name in the same file share an id.
    """
    digest = hashlib.md5(relative_posix_path(root, file_path).encode("utf-8")).hexdigest()
    return f"{name}_{digest[:8]}"


__all__ = ["component_id", "relative_posix_path"]
