"""Sample value synthesis for component properties.

Each descriptor is classified once into a :class:`TypeKind`; generation then
dispatches on that kind. Classification order matters and is fixed by
:func:`classify`:

1. union            ``A | B``            first non-null alternative
2. object           nested properties    built field by field
3. enum             enum values          random member of the same kind
4. array            ``T[]``/``Array<T>`` two or three elements
5. primitive        string/number/boolean, guided by the property name
6. function         ``=>`` or ``function``
7. date             ``Date``
8. object           ``object`` or inline ``{ ... }``
9. object           any other capitalised type name
10. unknown         placeholder string
"""

from __future__ import annotations

import random
import re
import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from .logging import get_logger
from .models import PropDescriptor

_LOGGER = get_logger("synth")

PLACEHOLDER_STRING = "random string"

_PRIMITIVES = {"string", "number", "boolean"}
_NULLISH = {"null", "undefined"}
_OPENERS = {"(": ")", "[": "]", "{": "}", "<": ">"}
_ARRAY_GENERIC = re.compile(r"^(?:readonly)?array\s*<(?P<inner>.*)>$", re.IGNORECASE | re.DOTALL)

# Checked in order against the lowercased property name; first match wins.
_STRING_RULES = (
    ("ip", "127.0.0.1"),
    ("port", "8080"),
    ("name", "John Doe"),
    ("age", "30"),
    ("email", "john.doe@example.com"),
    ("address", "123 Main St."),
    ("phone", "+1 (555) 555-5555"),
)


class TypeKind(Enum):
    UNION = "union"
    OBJECT = "object"
    ENUM = "enum"
    ARRAY = "array"
    PRIMITIVE = "primitive"
    FUNCTION = "function"
    DATE = "date"
    UNKNOWN = "unknown"


def split_union(type_text: str) -> List[str]:
    """Split ``type_text`` on ``|`` outside of brackets, generics and parentheses."""
    parts: List[str] = []
    depth = 0
    current: List[str] = []
    previous = ""
    for char in type_text:
        if char in _OPENERS:
            depth += 1
        elif char in _OPENERS.values() and not (char == ">" and previous == "="):
            depth = max(depth - 1, 0)
        if char == "|" and depth == 0:
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        previous = char
    parts.append("".join(current).strip())
    return [part for part in parts if part]


def array_element_type(type_text: str) -> Optional[str]:
    """Return the element type of an array type, or None if it is not one."""
    text = type_text.strip()
    if text.lower().startswith("readonly "):
        text = text[len("readonly ") :].strip()
    if text.endswith("[]"):
        inner = text[:-2].strip()
        if inner.startswith("(") and inner.endswith(")"):
            inner = inner[1:-1].strip()
        return inner
    match = _ARRAY_GENERIC.match(text)
    if match:
        return match.group("inner").strip()
    return None


def classify(descriptor: PropDescriptor) -> TypeKind:
    text = (descriptor.type or "").strip()
    lower = text.lower()
    if len(split_union(text)) > 1:
        return TypeKind.UNION
    if descriptor.properties:
        return TypeKind.OBJECT
    if descriptor.enum_values:
        return TypeKind.ENUM
    if array_element_type(text) is not None:
        return TypeKind.ARRAY
    if lower in _PRIMITIVES:
        return TypeKind.PRIMITIVE
    if "=>" in lower or "function" in lower:
        return TypeKind.FUNCTION
    if lower == "date":
        return TypeKind.DATE
    if lower == "object" or "{" in text:
        return TypeKind.OBJECT
    if text[:1].isupper():
        return TypeKind.OBJECT
    return TypeKind.UNKNOWN


class MockValueSynthesizer:
    """Generates plausible preview values; every call rolls fresh randomness."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()

    def generate_all(self, props: Iterable[Union[PropDescriptor, Mapping[str, Any]]]) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for prop in props:
            descriptor = prop if isinstance(prop, PropDescriptor) else PropDescriptor.from_dict(prop)
            result[descriptor.name] = self.generate(descriptor)
        return result

    def generate(self, descriptor: PropDescriptor) -> Any:
        kind = classify(descriptor)
        name = descriptor.name
        if kind is TypeKind.UNION:
            return self._union(descriptor)
        if kind is TypeKind.OBJECT:
            if descriptor.properties:
                return {prop.name: self.generate(prop) for prop in descriptor.properties}
            return self._object(name, descriptor.type)
        if kind is TypeKind.ENUM:
            return self._enum(descriptor)
        if kind is TypeKind.ARRAY:
            return self._array(name, array_element_type(descriptor.type) or "")
        if kind is TypeKind.PRIMITIVE:
            primitive = descriptor.type.strip().lower()
            if primitive == "number":
                return self._rng.randrange(100)
            if primitive == "boolean":
                return self._boolean(name)
            return self._string(name)
        if kind is TypeKind.FUNCTION:
            return _stub_callable(name)
        if kind is TypeKind.DATE:
            return datetime.now()
        return PLACEHOLDER_STRING

    def guid(self) -> str:
        return str(uuid.UUID(int=self._rng.getrandbits(128), version=4))

    def _union(self, descriptor: PropDescriptor) -> Any:
        alternatives = [
            part for part in split_union(descriptor.type) if part.strip().lower() not in _NULLISH
        ]
        if not alternatives:
            return None
        return self.generate(
            PropDescriptor(
                name=descriptor.name,
                type=alternatives[0],
                enum_values=descriptor.enum_values,
                properties=descriptor.properties,
            )
        )

    def _enum(self, descriptor: PropDescriptor) -> Any:
        values = list((descriptor.enum_values or {}).values())
        # Numeric enums also carry reverse value -> name entries; keep numbers only.
        numeric = [value for value in values if isinstance(value, (int, float)) and not isinstance(value, bool)]
        candidates = numeric or [value for value in values if isinstance(value, str)]
        if not candidates:
            return PLACEHOLDER_STRING
        return self._rng.choice(candidates)

    def _array(self, name: str, element_type: str) -> List[Any]:
        count = self._rng.randint(2, 3)
        return [
            self.generate(PropDescriptor(name=f"{name}_{index}", type=element_type))
            for index in range(count)
        ]

    def _string(self, name: str) -> str:
        lower = name.lower()
        for needle, value in _STRING_RULES:
            if needle in lower:
                return value
        if "id" in lower:
            return self.guid()
        return PLACEHOLDER_STRING

    def _boolean(self, name: str) -> bool:
        lower = name.lower()
        if any(needle in lower for needle in ("show", "activ", "enabl")):
            return True
        if any(needle in lower for needle in ("hide", "disabl")):
            return False
        return self._rng.random() > 0.5

    def _object(self, name: str, type_text: str) -> Dict[str, Any]:
        hint = f"{name} {type_text}".lower()
        if "address" in hint:
            return {"street": "123 Main St", "city": "New York", "state": "NY", "zip": "10001"}
        if "user" in hint or "person" in hint:
            return {"name": "John Doe", "email": "john.doe@example.com", "age": 30}
        return {"id": self.guid(), "name": self._string(name), "value": self._string(name)}


def _stub_callable(name: str) -> Callable[..., None]:
    def handler(*args: Any, **kwargs: Any) -> None:
        _LOGGER.info("%s called", name)

    handler.__name__ = name or "handler"
    return handler


def _noop(*args: Any, **kwargs: Any) -> None:
    return None


HOOK_MOCKS: Dict[str, Callable[[], Any]] = {
    "useForm": lambda: {
        "register": _noop,
        "handleSubmit": _noop,
        "formState": {
            "errors": {},
            "touchedFields": {},
            "isDirty": False,
            "isSubmitted": False,
            "isValid": True,
        },
    },
    "useQuery": lambda: {"queryKey": [], "queryFn": _noop, "queryOptions": {}},
    "useIntl": lambda: {"locale": "en", "formatMessage": lambda descriptor, *args: descriptor.get("id")},
    "useState": lambda: [None, _noop],
}


def mock_hook_value(name: str) -> Any:
    """Canned return value for a well-known hook, or None."""
    factory = HOOK_MOCKS.get(name)
    return factory() if factory is not None else None


def generate_props_data(
    props: Iterable[Union[PropDescriptor, Mapping[str, Any]]], rng: Optional[random.Random] = None
) -> Dict[str, Any]:
    """Synthesize one sample value per property, keyed by property name."""
    return MockValueSynthesizer(rng).generate_all(props)


def to_jsonable(value: Any) -> Any:
    """Make synthesized values safe for ``json.dumps``."""
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {str(key): to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    if callable(value):
        return f"[function {getattr(value, '__name__', 'anonymous')}]"
    return value


__all__ = [
    "HOOK_MOCKS",
    "MockValueSynthesizer",
    "PLACEHOLDER_STRING",
    "TypeKind",
    "array_element_type",
    "classify",
    "generate_props_data",
    "mock_hook_value",
    "split_union",
    "to_jsonable",
]
