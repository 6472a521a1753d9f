"""Tree-sitter powered syntax service for TypeScript and TSX sources."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

from .logging import get_logger

_LOGGER = get_logger("parsing")

_GRAMMAR_BY_SUFFIX = {
    ".ts": "typescript",
    ".tsx": "tsx",
    ".jsx": "tsx",
}


@dataclass
class ParsedFile:
    """A parsed source file together with the bytes its nodes point into."""

    path: Path
    source: bytes
    root: Node

    def text(self, node: Optional[Node]) -> str:
        if node is None:
            return ""
        return self.source[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")


class SyntaxService:
    """Parses files into tree-sitter syntax trees, one cached parser per grammar."""

    def __init__(self) -> None:
        self._parsers: Dict[str, Parser] = {}

    def parse_source(self, path: Path, source: str | bytes) -> ParsedFile:
        source_bytes = source.encode("utf-8") if isinstance(source, str) else source
        parser = self._get_parser(grammar_for(path))
        tree = parser.parse(source_bytes)
        return ParsedFile(path=Path(path), source=source_bytes, root=tree.root_node)

    def parse_file(self, path: Path) -> Optional[ParsedFile]:
        """Parse ``path``; unreadable files are logged and skipped."""
        try:
            source = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            _LOGGER.warning("Skipping unreadable source %s: %s", path, exc)
            return None
        return self.parse_source(path, source)

    def parse_files(self, paths: List[Path]) -> List[ParsedFile]:
        parsed: List[ParsedFile] = []
        for path in paths:
            result = self.parse_file(path)
            if result is not None:
                parsed.append(result)
        return parsed

    def _get_parser(self, grammar: str) -> Parser:
        parser = self._parsers.get(grammar)
        if parser is not None:
            return parser
        if grammar == "tsx":
            language = Language(tree_sitter_typescript.language_tsx())
        else:
            language = Language(tree_sitter_typescript.language_typescript())
        parser = Parser(language)
        self._parsers[grammar] = parser
        return parser


def grammar_for(path: Path) -> str:
    return _GRAMMAR_BY_SUFFIX.get(Path(path).suffix.lower(), "tsx")


def walk(node: Node) -> Iterator[Node]:
    """Yield ``node`` and all of its descendants in document order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def string_literal_value(parsed: ParsedFile, node: Optional[Node]) -> Optional[str]:
    """Return the contents of a plain string literal, or None for anything else."""
    if node is None or node.type != "string":
        return None
    parts: List[str] = []
    for child in node.named_children:
        text = parsed.text(child)
        parts.append(decode_escape(text) if child.type == "escape_sequence" else text)
    return "".join(parts)


_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}


def decode_escape(sequence: str) -> str:
    """Decode one JavaScript escape sequence such as ``\\n``, ``\\x41`` or ``\\u{1F600}``."""
    body = sequence[1:]
    if not body:
        return sequence
    if body in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[body]
    if body[0] in "\r\n\u2028\u2029":
        # Line continuation.
        return ""
    digits = None
    if body.startswith("u{") and body.endswith("}"):
        digits = body[2:-1]
    elif body[0] in "ux" and len(body) > 1:
        digits = body[1:]
    if digits is not None:
        try:
            return chr(int(digits, 16))
        except (ValueError, OverflowError):
            return body
    return body


__all__ = [
    "ParsedFile",
    "SyntaxService",
    "grammar_for",
    "decode_escape",
    "string_literal_value",
    "walk",
]
