"""Source file enumeration for the analysis root."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Sequence

from .logging import get_logger

_LOGGER = get_logger("scanner")

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "node_modules",
    "__pycache__",
    ".idea",
    ".uicontext",
    "dist",
    "build",
}

SOURCE_SUFFIXES = (".ts", ".tsx", ".jsx")


@dataclass
class IgnoreRule:
    """A single ignore pattern, either a glob (``**/*.test.tsx``) or a .gitignore line."""

    pattern: str
    directory_only: bool = False
    anchored: bool = False
    negate: bool = False

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False
        if self.anchored or "/" in self.pattern:
            return _glob_matches(rel_path, self.pattern)
        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def _glob_matches(rel_path: str, pattern: str) -> bool:
    if fnmatchcase(rel_path, pattern):
        return True
    # "**/" also matches at the top level.
    if pattern.startswith("**/") and _glob_matches(rel_path, pattern[3:]):
        return True
    # A directory is ignored when everything beneath it would be.
    if pattern.endswith("/**") and fnmatchcase(rel_path, pattern[:-3]):
        return True
    return False


def glob_rule(pattern: str) -> IgnoreRule:
    pattern = pattern.strip()
    if pattern.startswith("./"):
        pattern = pattern[2:]
    return IgnoreRule(pattern=pattern, anchored=True)


def _gitignore_rule(line: str) -> IgnoreRule | None:
    negate = line.startswith("!")
    if negate:
        line = line[1:]
    directory_only = line.endswith("/")
    if directory_only:
        line = line[:-1]
    anchored = line.startswith("/")
    if anchored:
        line = line[1:]
    if not line:
        return None
    return IgnoreRule(
        pattern=line, directory_only=directory_only, anchored=anchored, negate=negate
    )


def _parse_gitignore(path: Path) -> List[IgnoreRule]:
    if not path.exists():
        return []
    rules: List[IgnoreRule] = []
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        rule = _gitignore_rule(line)
        if rule is not None:
            rules.append(rule)
    return rules


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    ignored = False
    for rule in rules:
        if rule.matches(rel_path, is_dir):
            ignored = not rule.negate
    return ignored


class SourceScanner:
    """Walks the analysis root and yields the component source files to parse."""

    def __init__(self, ignore: Sequence[str] = (), suffixes: Sequence[str] = SOURCE_SUFFIXES) -> None:
        self._ignore = [glob_rule(pattern) for pattern in ignore if pattern.strip()]
        self._suffixes = tuple(suffix.lower() for suffix in suffixes)

    def scan(self, root: str | Path) -> List[Path]:
        """Return absolute paths of matching files, sorted for a stable pass order."""
        root_path = Path(root).expanduser().resolve()
        if not root_path.is_dir():
            reason = "is not a directory" if root_path.exists() else "not found"
            _LOGGER.warning("Analysis root %s %s; no sources to scan", root, reason)
            return []

        rules = _parse_gitignore(root_path / ".gitignore") + self._ignore
        return sorted(self._iter_files(root_path, rules))

    def _iter_files(self, root: Path, rules: Sequence[IgnoreRule]) -> Iterator[Path]:
        for dirpath, dirnames, filenames in os.walk(root):
            current = Path(dirpath)
            rel_dir = current.relative_to(root).as_posix() if current != root else ""

            kept = []
            for name in dirnames:
                if name in _EXCLUDED_DIRS:
                    continue
                rel_path = f"{rel_dir}/{name}" if rel_dir else name
                if _should_ignore(rel_path, True, rules):
                    continue
                kept.append(name)
            dirnames[:] = kept

            for filename in filenames:
                if not filename.lower().endswith(self._suffixes):
                    continue
                if filename.endswith(".d.ts"):
                    continue
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                if _should_ignore(rel_path, False, rules):
                    continue
                yield current / filename


__all__ = ["IgnoreRule", "SOURCE_SUFFIXES", "SourceScanner", "glob_rule"]
