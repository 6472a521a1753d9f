"""Per-file component metadata extraction."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional, Set, Tuple

from tree_sitter import Node

from .identity import component_id
from .models import UNKNOWN_TYPE, ComponentRecord, HookCall, MarkupReference, PropDescriptor
from .parsing import ParsedFile, string_literal_value, walk
from .types import (
    NullTypeResolver,
    StructuralMember,
    TypeHandle,
    TypeResolver,
    annotation_type_node,
)

WRAPPER_NAMES = frozenset({"memo", "forwardRef", "observer", "React.memo", "React.forwardRef"})

HOOK_PREFIX = "use"

STYLE_SUFFIXES = (".css", ".scss", ".sass", ".less")

MAX_PROPERTY_DEPTH = 4

_FUNCTION_NODES = frozenset({"arrow_function", "function_expression", "function", "function_declaration"})
_CONDITIONAL_NODES = frozenset({"if_statement", "ternary_expression", "switch_statement"})
_MARKUP_NODES = frozenset({"jsx_opening_element", "jsx_self_closing_element"})

IdFactory = Callable[[Path, Path, str], str]


def is_component_name(name: str) -> bool:
    """Components are recognised purely by an uppercase first character."""
    return bool(name) and name[0].isupper()


def is_component_declaration(name: str, value_kind: Optional[str]) -> bool:
    """True when a binding named ``name`` whose value is ``value_kind`` declares a component."""
    return is_component_name(name) and value_kind in _FUNCTION_NODES


@dataclass
class FileExtraction:
    """Everything extracted from a single source file."""

    components: List[ComponentRecord] = field(default_factory=list)
    imports: Dict[str, str] = field(default_factory=dict)
    style_imports: List[str] = field(default_factory=list)


class MetadataExtractor:
    """Turns one parsed file into candidate component records."""

    def __init__(
        self,
        root: Path,
        resolver: Optional[TypeResolver] = None,
        id_factory: IdFactory = component_id,
    ) -> None:
        self._root = Path(root)
        self._resolver: TypeResolver = resolver or NullTypeResolver()
        self._id_factory = id_factory

    def extract(self, parsed: ParsedFile) -> FileExtraction:
        imports = extract_imports(parsed)
        style_imports = extract_style_imports(parsed)
        extraction = FileExtraction(imports=imports, style_imports=style_imports)

        for name, function, declarator in iter_component_declarations(parsed):
            record = ComponentRecord(
                id=self._id_factory(self._root, parsed.path, name),
                path=str(parsed.path),
                name=name,
                props=self.extract_props(parsed, function, declarator),
                hooks=self.extract_hooks(parsed, function),
                translations=extract_translation_keys(parsed, function),
                css_imports=list(style_imports),
                imports=dict(imports),
                markup=extract_markup(parsed, function),
            )
            extraction.components.append(record)
        return extraction

    # ------------------------------------------------------------------
    # Properties

    def extract_props(
        self, parsed: ParsedFile, function: Node, declarator: Optional[Node] = None
    ) -> List[PropDescriptor]:
        pattern, annotation = _first_parameter(function)
        if pattern is None:
            return []

        type_node = annotation_type_node(annotation)
        if type_node is None and declarator is not None:
            type_node = _declared_props_type(declarator)
        handle = TypeHandle(parsed.text(type_node), type_node, parsed) if type_node is not None else None

        if pattern.type == "object_pattern":
            members: Dict[str, StructuralMember] = {}
            if handle is not None:
                members = {member.name: member for member in self._resolver.resolve_structural_members(handle)}
            props: List[PropDescriptor] = []
            for name in _destructured_names(parsed, pattern):
                member = members.get(name)
                if member is None:
                    props.append(PropDescriptor(name=name, type=UNKNOWN_TYPE))
                else:
                    props.append(self._describe(member, 1))
            return props

        if handle is None:
            return []
        return [self._describe(member, 1) for member in self._resolver.resolve_structural_members(handle)]

    def _describe(self, member: StructuralMember, depth: int) -> PropDescriptor:
        descriptor = PropDescriptor(name=member.name, type=member.type or UNKNOWN_TYPE)
        enum_values = self._resolver.resolve_enum_values(member.handle)
        if enum_values:
            descriptor.enum_values = enum_values
            return descriptor
        if depth >= MAX_PROPERTY_DEPTH:
            return descriptor
        nested = self._resolver.resolve_structural_members(member.handle)
        if nested:
            descriptor.properties = [self._describe(child, depth + 1) for child in nested]
        return descriptor

    # ------------------------------------------------------------------
    # Hooks

    def extract_hooks(self, parsed: ParsedFile, function: Node) -> List[HookCall]:
        hooks: List[HookCall] = []
        seen: Set[str] = set()
        for node in walk(function):
            if node.type != "call_expression":
                continue
            callee = node.child_by_field_name("function")
            if callee is None or callee.type != "identifier":
                continue
            name = parsed.text(callee)
            if not name.startswith(HOOK_PREFIX) or name in seen:
                continue
            seen.add(name)
            hooks.append(HookCall(name=name, type=self._resolver.resolve_call_type(parsed, node)))
        return hooks


def iter_component_declarations(parsed: ParsedFile) -> Iterator[Tuple[str, Node, Optional[Node]]]:
    """Yield ``(name, function node, declarator)`` for every component declaration."""
    for node in walk(parsed.root):
        if node.type == "function_declaration" or (
            node.type in {"function_expression", "function"}
            and node.parent is not None
            and node.parent.type == "export_statement"
        ):
            name = parsed.text(node.child_by_field_name("name"))
            if is_component_declaration(name, node.type):
                yield name, node, None
        elif node.type == "variable_declarator":
            name_node = node.child_by_field_name("name")
            if name_node is None or name_node.type != "identifier":
                continue
            function = unwrap_component_value(parsed, node.child_by_field_name("value"))
            name = parsed.text(name_node)
            if function is not None and is_component_declaration(name, function.type):
                yield name, function, node


def unwrap_component_value(parsed: ParsedFile, value: Optional[Node]) -> Optional[Node]:
    """Return the function bound by a declarator, looking through one wrapper call."""
    if value is None:
        return None
    if value.type in _FUNCTION_NODES:
        return value
    if value.type != "call_expression":
        return None
    if parsed.text(value.child_by_field_name("function")) not in WRAPPER_NAMES:
        return None
    arguments = _call_arguments(value)
    if arguments and arguments[0].type in _FUNCTION_NODES:
        return arguments[0]
    return None


def extract_imports(parsed: ParsedFile) -> Dict[str, str]:
    """Map locally bound component names to the module they are imported from."""
    imports: Dict[str, str] = {}
    for node in walk(parsed.root):
        if node.type != "import_statement":
            continue
        source = string_literal_value(parsed, node.child_by_field_name("source"))
        if source is None:
            continue
        for clause in node.named_children:
            if clause.type != "import_clause":
                continue
            for name in _bound_import_names(parsed, clause):
                if is_component_name(name):
                    imports[name] = source
    return imports


def extract_style_imports(parsed: ParsedFile) -> List[str]:
    """Absolute paths of stylesheets pulled in by side-effect imports."""
    directory = os.path.dirname(os.path.abspath(parsed.path))
    styles: List[str] = []
    for node in walk(parsed.root):
        if node.type != "import_statement":
            continue
        if any(child.type == "import_clause" for child in node.named_children):
            continue
        source = string_literal_value(parsed, node.child_by_field_name("source"))
        if source is None or not source.lower().endswith(STYLE_SUFFIXES):
            continue
        styles.append(os.path.normpath(os.path.join(directory, source)))
    return styles


def extract_translation_keys(parsed: ParsedFile, function: Node) -> List[str]:
    """Literal ids passed to ``<expr>.formatMessage({ id: "..." })``."""
    keys: List[str] = []
    seen: Set[str] = set()
    for node in walk(function):
        if node.type != "call_expression":
            continue
        callee = node.child_by_field_name("function")
        if callee is None or callee.type != "member_expression":
            continue
        if parsed.text(callee.child_by_field_name("property")) != "formatMessage":
            continue
        arguments = _call_arguments(node)
        if not arguments or arguments[0].type != "object":
            continue
        for pair in arguments[0].named_children:
            if pair.type != "pair":
                continue
            key_node = pair.child_by_field_name("key")
            if key_node is None or key_node.type != "property_identifier" or parsed.text(key_node) != "id":
                continue
            value = string_literal_value(parsed, pair.child_by_field_name("value"))
            if value is not None and value not in seen:
                seen.add(value)
                keys.append(value)
    return keys


def extract_markup(parsed: ParsedFile, function: Node) -> List[MarkupReference]:
    """Component-like tags rendered by ``function`` with their rendering context."""
    references: List[MarkupReference] = []
    stack: List[Tuple[Node, bool, bool]] = [(function, False, False)]
    while stack:
        node, conditional, dynamic = stack.pop()
        conditional = conditional or node.type in _CONDITIONAL_NODES
        if node.type == "call_expression" and "map" in parsed.text(node.child_by_field_name("function")):
            dynamic = True
        if node.type in _MARKUP_NODES:
            tag = parsed.text(node.child_by_field_name("name"))
            if is_component_name(tag):
                references.append(
                    MarkupReference(tag_name=tag, is_conditional=conditional, is_dynamic=dynamic)
                )
        stack.extend((child, conditional, dynamic) for child in reversed(node.children))
    return references


def _call_arguments(call: Node) -> List[Node]:
    arguments = call.child_by_field_name("arguments")
    if arguments is None:
        return []
    return [child for child in arguments.named_children if child.type != "comment"]


def _first_parameter(function: Node) -> Tuple[Optional[Node], Optional[Node]]:
    parameters = function.child_by_field_name("parameters")
    if parameters is None:
        # Single unparenthesised arrow parameter: props => ...
        return function.child_by_field_name("parameter"), None
    for child in parameters.named_children:
        if child.type in {"required_parameter", "optional_parameter"}:
            return child.child_by_field_name("pattern"), child.child_by_field_name("type")
        if child.type in {"identifier", "object_pattern"}:
            return child, None
    return None, None


def _declared_props_type(declarator: Node) -> Optional[Node]:
    """First type argument of an annotation such as ``React.FC<Props>``."""
    type_node = annotation_type_node(declarator.child_by_field_name("type"))
    if type_node is None or type_node.type != "generic_type":
        return None
    for child in type_node.named_children:
        if child.type == "type_arguments" and child.named_children:
            return child.named_children[0]
    return None


def _destructured_names(parsed: ParsedFile, pattern: Node) -> List[str]:
    names: List[str] = []
    for element in pattern.named_children:
        if element.type == "shorthand_property_identifier_pattern":
            names.append(parsed.text(element))
        elif element.type == "pair_pattern":
            key = element.child_by_field_name("key")
            literal = string_literal_value(parsed, key)
            names.append(literal if literal is not None else parsed.text(key))
        elif element.type == "object_assignment_pattern":
            names.append(parsed.text(element.child_by_field_name("left")))
    return [name for name in names if name]


def _bound_import_names(parsed: ParsedFile, clause: Node) -> List[str]:
    names: List[str] = []
    for child in clause.named_children:
        if child.type == "identifier":
            names.append(parsed.text(child))
        elif child.type == "namespace_import":
            names.extend(parsed.text(ident) for ident in child.named_children if ident.type == "identifier")
        elif child.type == "named_imports":
            for specifier in child.named_children:
                if specifier.type != "import_specifier":
                    continue
                alias = specifier.child_by_field_name("alias")
                names.append(parsed.text(alias or specifier.child_by_field_name("name")))
    return names


__all__ = [
    "FileExtraction",
    "HOOK_PREFIX",
    "MetadataExtractor",
    "STYLE_SUFFIXES",
    "WRAPPER_NAMES",
    "extract_imports",
    "extract_markup",
    "extract_style_imports",
    "extract_translation_keys",
    "is_component_declaration",
    "is_component_name",
    "iter_component_declarations",
    "unwrap_component_value",
]
