"""Core data models shared across uicontext components."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

EnumValue = Union[str, int, float]

UNKNOWN_TYPE = "any"


@dataclass
class PropDescriptor:
    """A declared component property and what is known about its type."""

    name: str
    type: str = UNKNOWN_TYPE
    enum_values: Optional[Dict[str, EnumValue]] = None
    properties: Optional[List["PropDescriptor"]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name, "type": self.type}
        if self.enum_values:
            data["enumValues"] = dict(self.enum_values)
        if self.properties:
            data["properties"] = [prop.to_dict() for prop in self.properties]
        return data

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "PropDescriptor":
        nested = payload.get("properties")
        enum_values = payload.get("enumValues")
        return cls(
            name=str(payload.get("name", "")),
            type=str(payload.get("type", UNKNOWN_TYPE)),
            enum_values=dict(enum_values) if isinstance(enum_values, Mapping) else None,
            properties=[cls.from_dict(item) for item in nested if isinstance(item, Mapping)]
            if isinstance(nested, list)
            else None,
        )


@dataclass
class HookCall:
    """A hook-like call made from a component body."""

    name: str
    type: str = UNKNOWN_TYPE

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "type": self.type}


@dataclass
class MarkupReference:
    """A component-like tag rendered inside another component."""

    tag_name: str
    is_conditional: bool = False
    is_dynamic: bool = False
    # Lazily loaded components are not tracked; always False.
    is_lazy: bool = False


@dataclass
class ComponentRecord:
    """One discovered UI component and the metadata extracted for it."""

    id: str
    path: str
    name: str
    props: List[PropDescriptor] = field(default_factory=list)
    hooks: List[HookCall] = field(default_factory=list)
    translations: List[str] = field(default_factory=list)
    css_imports: List[str] = field(default_factory=list)
    children_ids: List[str] = field(default_factory=list)
    parent_ids: List[str] = field(default_factory=list)
    imports: Dict[str, str] = field(default_factory=dict)
    markup: List[MarkupReference] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "path": self.path,
            "name": self.name,
            "props": [prop.to_dict() for prop in self.props],
            "hooks": [hook.to_dict() for hook in self.hooks],
            "translations": list(self.translations),
            "childrenIds": list(self.children_ids),
            "parentIds": list(self.parent_ids),
            "cssImports": list(self.css_imports),
        }


@dataclass
class ContextApp:
    """The serialisable result of one analysis run."""

    name: str
    root_dir: str
    components: Mapping[str, ComponentRecord]
    root_components: List[str]
    translations: Dict[str, List[str]]
    translation_values: Dict[str, Dict[str, str]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "rootDir": self.root_dir,
            "components": {
                component_id: record.to_dict()
                for component_id, record in self.components.items()
            },
            "rootComponents": list(self.root_components),
            "translations": {key: list(ids) for key, ids in self.translations.items()},
        }
        if self.translation_values:
            data["translationValues"] = {
                locale: dict(values) for locale, values in self.translation_values.items()
            }
        return data
