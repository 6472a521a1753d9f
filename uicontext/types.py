"""Structural type resolution for component parameters.

The metadata extractor never resolves types itself. It hands a
:class:`TypeHandle` to a :class:`TypeResolver` and receives member names and
type strings back. :class:`DeclarationTypeResolver` answers those questions
from the ``interface``, ``type`` and ``enum`` declarations found across the
parsed batch; :class:`NullTypeResolver` knows nothing and makes every lookup
degrade to the unknown marker.
"""

from __future__ import annotations

import re
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, NamedTuple, Optional, Protocol, Set, Tuple

from tree_sitter import Node

from .models import UNKNOWN_TYPE, EnumValue
from .parsing import ParsedFile, string_literal_value, walk

_IDENTIFIER = re.compile(r"^[A-Za-z_$][\w$]*(\.[A-Za-z_$][\w$]*)*$")

_DECLARATION_TYPES = {"interface_declaration", "type_alias_declaration", "enum_declaration"}


@dataclass(frozen=True)
class TypeHandle:
    """Reference to a type as written in source: its text plus, when known, its node."""

    text: str
    node: Optional[Node] = None
    file: Optional[ParsedFile] = None


class StructuralMember(NamedTuple):
    name: str
    type: str
    handle: TypeHandle


class TypeResolver(Protocol):
    def resolve_structural_members(self, handle: TypeHandle) -> List[StructuralMember]:
        """Return the named members of ``handle`` with their rendered types."""

    def resolve_enum_values(self, handle: TypeHandle) -> Optional[Dict[str, EnumValue]]:
        """Return ``member -> value`` when ``handle`` names an enumeration."""

    def resolve_call_type(self, parsed: ParsedFile, call: Node) -> str:
        """Return the result type of a call expression."""


class NullTypeResolver:
    """Resolver with no type information at all."""

    def resolve_structural_members(self, handle: TypeHandle) -> List[StructuralMember]:
        return []

    def resolve_enum_values(self, handle: TypeHandle) -> Optional[Dict[str, EnumValue]]:
        return None

    def resolve_call_type(self, parsed: ParsedFile, call: Node) -> str:
        return UNKNOWN_TYPE


def normalise_type_text(text: str) -> str:
    return " ".join(text.split()) or UNKNOWN_TYPE


def annotation_type_node(annotation: Optional[Node]) -> Optional[Node]:
    """Return the type node inside a ``type_annotation`` (``: T``)."""
    if annotation is None:
        return None
    if annotation.type != "type_annotation":
        return annotation
    return annotation.named_children[0] if annotation.named_children else None


class DeclarationTypeResolver:
    """Resolves named types against the declarations of a parsed file set."""

    def __init__(self, files: Iterable[ParsedFile]) -> None:
        self._declarations: Dict[str, List[Tuple[ParsedFile, Node]]] = defaultdict(list)
        for parsed in files:
            for node in walk(parsed.root):
                if node.type not in _DECLARATION_TYPES:
                    continue
                name = parsed.text(node.child_by_field_name("name"))
                if name:
                    self._declarations[name].append((parsed, node))

    # ------------------------------------------------------------------
    # TypeResolver protocol

    def resolve_structural_members(self, handle: TypeHandle) -> List[StructuralMember]:
        return self._members(handle, set())

    def resolve_enum_values(self, handle: TypeHandle) -> Optional[Dict[str, EnumValue]]:
        found = self._lookup(handle, kinds={"enum_declaration"})
        if found is None:
            return None
        parsed, declaration = found
        return _enum_members(parsed, declaration)

    def resolve_call_type(self, parsed: ParsedFile, call: Node) -> str:
        parent = call.parent
        if parent is not None and parent.type == "variable_declarator":
            type_node = annotation_type_node(parent.child_by_field_name("type"))
            if type_node is not None:
                return normalise_type_text(parsed.text(type_node))
        return UNKNOWN_TYPE

    # ------------------------------------------------------------------
    # Internal helpers

    def _lookup(
        self, handle: TypeHandle, kinds: Set[str] = _DECLARATION_TYPES
    ) -> Optional[Tuple[ParsedFile, Node]]:
        name = _referenced_name(handle)
        if not name:
            return None
        # Qualified references (React.Props) resolve by their last segment.
        candidates = [
            entry for entry in self._declarations.get(name.split(".")[-1], []) if entry[1].type in kinds
        ]
        if not candidates:
            return None
        if handle.file is not None:
            for entry in candidates:
                if entry[0].path == handle.file.path:
                    return entry
        return candidates[0]

    def _members(self, handle: TypeHandle, seen: Set[Tuple[str, int]]) -> List[StructuralMember]:
        node = handle.node
        parsed = handle.file
        if node is not None and parsed is not None:
            if node.type in {"object_type", "interface_body"}:
                return _signature_members(parsed, node)
            if node.type == "intersection_type":
                members: List[StructuralMember] = []
                for part in node.named_children:
                    members.extend(self._members(TypeHandle(parsed.text(part), part, parsed), seen))
                return members
            if node.type == "parenthesized_type" and node.named_children:
                inner = node.named_children[0]
                return self._members(TypeHandle(parsed.text(inner), inner, parsed), seen)

        found = self._lookup(handle, kinds={"interface_declaration", "type_alias_declaration"})
        if found is None:
            return []
        decl_file, declaration = found
        key = (str(decl_file.path), declaration.start_byte)
        if key in seen:
            return []
        seen = seen | {key}

        if declaration.type == "type_alias_declaration":
            value = declaration.child_by_field_name("value")
            if value is None:
                return []
            return self._members(TypeHandle(decl_file.text(value), value, decl_file), seen)

        members = []
        for child in declaration.children:
            if child.type != "extends_type_clause":
                continue
            for base in child.named_children:
                members.extend(self._members(TypeHandle(decl_file.text(base), base, decl_file), seen))
        body = declaration.child_by_field_name("body")
        if body is not None:
            members.extend(_signature_members(decl_file, body))
        return members


def _referenced_name(handle: TypeHandle) -> Optional[str]:
    node = handle.node
    if node is not None and handle.file is not None:
        if node.type in {"type_identifier", "nested_type_identifier", "identifier"}:
            return handle.file.text(node)
        if node.type == "generic_type":
            return handle.file.text(node.child_by_field_name("name"))
        return None
    text = handle.text.strip()
    return text if _IDENTIFIER.match(text) else None


def _signature_members(parsed: ParsedFile, body: Node) -> List[StructuralMember]:
    members: List[StructuralMember] = []
    for child in body.named_children:
        if child.type not in {"property_signature", "method_signature"}:
            continue
        name_node = child.child_by_field_name("name")
        name = parsed.text(name_node)
        if name_node is not None and name_node.type == "string":
            name = string_literal_value(parsed, name_node) or ""
        if not name:
            continue
        if child.type == "method_signature":
            members.append(StructuralMember(name, "function", TypeHandle("function")))
            continue
        type_node = annotation_type_node(child.child_by_field_name("type"))
        if type_node is None:
            members.append(StructuralMember(name, UNKNOWN_TYPE, TypeHandle(UNKNOWN_TYPE)))
            continue
        text = normalise_type_text(parsed.text(type_node))
        members.append(StructuralMember(name, text, TypeHandle(text, type_node, parsed)))
    return members


def _enum_members(parsed: ParsedFile, declaration: Node) -> Dict[str, EnumValue]:
    values: Dict[str, EnumValue] = {}
    body = declaration.child_by_field_name("body")
    if body is None:
        return values
    next_value: Optional[float] = 0
    for child in body.named_children:
        if child.type == "enum_assignment":
            name_node = child.child_by_field_name("name")
            value = _literal(parsed, child.child_by_field_name("value"))
        elif child.type in {"property_identifier", "string"}:
            name_node = child
            value = next_value
        else:
            continue
        name = parsed.text(name_node)
        if name_node is not None and name_node.type == "string":
            name = string_literal_value(parsed, name_node) or ""
        if value is None:
            next_value = None
            continue
        values[name] = int(value) if isinstance(value, float) and value.is_integer() else value
        next_value = value + 1 if isinstance(value, (int, float)) else None
    return values


def _literal(parsed: ParsedFile, node: Optional[Node]) -> Optional[EnumValue]:
    if node is None:
        return None
    text = parsed.text(node).strip()
    if node.type == "string":
        return string_literal_value(parsed, node)
    try:
        return float(text)
    except ValueError:
        return None


__all__ = [
    "DeclarationTypeResolver",
    "NullTypeResolver",
    "StructuralMember",
    "TypeHandle",
    "TypeResolver",
    "annotation_type_node",
    "normalise_type_text",
]
