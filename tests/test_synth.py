"""Tests for uicontext.synth."""

from __future__ import annotations

import random
import re
from datetime import datetime

import pytest

from uicontext.models import PropDescriptor
from uicontext.synth import (
    PLACEHOLDER_STRING,
    MockValueSynthesizer,
    TypeKind,
    array_element_type,
    classify,
    generate_props_data,
    mock_hook_value,
    split_union,
    to_jsonable,
)

_GUID = re.compile(r"^[a-f0-9]{8}-[a-f0-9]{4}-4[a-f0-9]{3}-[89ab][a-f0-9]{3}-[a-f0-9]{12}$")


def _one(name: str, type_text: str, **extra: object) -> object:
    return generate_props_data([{"name": name, "type": type_text, **extra}])[name]


@pytest.mark.parametrize(
    ("type_text", "expected"),
    [
        ("string", TypeKind.PRIMITIVE),
        ("  Boolean ", TypeKind.PRIMITIVE),
        ("string | null", TypeKind.UNION),
        ("(value: string | null) => void", TypeKind.FUNCTION),
        ("Array<string | number>", TypeKind.ARRAY),
        ("string[]", TypeKind.ARRAY),
        ("function", TypeKind.FUNCTION),
        ("Date", TypeKind.DATE),
        ("object", TypeKind.OBJECT),
        ("{ theme: string }", TypeKind.OBJECT),
        ("UnknownType", TypeKind.OBJECT),
        ("any", TypeKind.UNKNOWN),
        ("", TypeKind.UNKNOWN),
    ],
)
def test_classify_by_type_text(type_text: str, expected: TypeKind) -> None:
    assert classify(PropDescriptor(name="value", type=type_text)) is expected


def test_classify_order_nested_before_enum_before_text() -> None:
    nested = [PropDescriptor(name="onClick", type="() => void")]
    assert classify(PropDescriptor(name="a", type="{ onClick: () => void }", properties=nested)) is TypeKind.OBJECT
    assert classify(PropDescriptor(name="a", type="Rating", enum_values={"Bad": 0})) is TypeKind.ENUM
    assert classify(PropDescriptor(name="a", type="Rating | null", enum_values={"Bad": 0})) is TypeKind.UNION


def test_split_union_and_array_helpers() -> None:
    assert split_union("string | number | null") == ["string", "number", "null"]
    assert split_union("Array<A | B> | null") == ["Array<A | B>", "null"]
    assert split_union("(a: string) => void") == ["(a: string) => void"]
    assert array_element_type("(string | number)[]") == "string | number"
    assert array_element_type("ReadonlyArray<Item>") == "Item"
    assert array_element_type("readonly string[]") == "string"
    assert array_element_type("string") is None


def test_primitive_values_have_matching_kinds() -> None:
    result = generate_props_data(
        [
            {"name": "title", "type": "string"},
            {"name": "count", "type": "number"},
            {"name": "flag", "type": "boolean"},
        ]
    )

    assert isinstance(result["title"], str)
    assert isinstance(result["count"], int) and 0 <= result["count"] < 100
    assert isinstance(result["flag"], bool)


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("ipAddress", "127.0.0.1"),
        ("port", "8080"),
        ("userName", "John Doe"),
        ("age", "30"),
        ("address", "123 Main St."),
        ("phoneNumber", "+1 (555) 555-5555"),
        ("title", PLACEHOLDER_STRING),
    ],
)
def test_string_name_rules(name: str, expected: str) -> None:
    assert _one(name, "string") == expected


def test_email_strings_look_like_addresses() -> None:
    value = _one("email", "string")

    assert "@" in value
    assert value.endswith("example.com")


def test_id_strings_are_fresh_guids() -> None:
    result = generate_props_data([{"name": "id1", "type": "string"}, {"name": "id2", "type": "string"}])

    assert _GUID.match(result["id1"])
    assert _GUID.match(result["id2"])
    assert result["id1"] != result["id2"]


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("showModal", True),
        ("isActive", True),
        ("isEnabled", True),
        ("hideContent", False),
        ("isDisabled", False),
    ],
)
def test_boolean_name_rules(name: str, expected: bool) -> None:
    assert _one(name, "boolean") is expected


def test_arrays_have_two_or_three_typed_elements() -> None:
    for type_text, kind in (("string[]", str), ("number[]", int), ("Array<boolean>", bool)):
        for _ in range(10):
            values = _one("items", type_text)
            assert isinstance(values, list)
            assert 2 <= len(values) <= 3
            assert all(isinstance(value, kind) for value in values)


def test_array_elements_use_indexed_names() -> None:
    values = _one("userIds", "string[]")

    assert all(_GUID.match(value) for value in values)
    assert len(set(values)) == len(values)


@pytest.mark.parametrize(
    ("type_text", "kind"),
    [("string | null", str), ("number | undefined", int), ("Date | null", datetime)],
)
def test_unions_skip_nullish_alternatives(type_text: str, kind: type) -> None:
    assert isinstance(_one("value", type_text), kind)


def test_all_nullish_union_is_none() -> None:
    assert _one("value", "null | undefined") is None


def test_functions_are_callable_stubs(caplog: pytest.LogCaptureFixture) -> None:
    for type_text in ("() => void", "function", "(value: string) => void"):
        handler = _one("onChange", type_text)
        assert callable(handler)

    with caplog.at_level("INFO", logger="uicontext"):
        assert handler("x") is None
    assert "onChange called" in caplog.text


def test_dates() -> None:
    assert isinstance(_one("createdAt", "Date"), datetime)
    assert isinstance(_one("publishDate", "date"), datetime)


@pytest.mark.parametrize(
    ("name", "type_text", "keys"),
    [
        ("homeAddress", "object", {"street", "city", "state", "zip"}),
        ("location", "Address", {"street", "city", "state", "zip"}),
        ("currentUser", "object", {"name", "email", "age"}),
        ("person", "object", {"name", "email", "age"}),
        ("data", "object", {"id", "name", "value"}),
        ("settings", "{ theme: string }", {"id", "name", "value"}),
        ("custom", "UnknownType", {"id", "name", "value"}),
    ],
)
def test_object_heuristics(name: str, type_text: str, keys: set) -> None:
    value = _one(name, type_text)

    assert isinstance(value, dict)
    assert set(value) == keys


def test_nested_properties_take_precedence_over_text() -> None:
    value = _one(
        "address",
        "Address",
        properties=[
            {"name": "street", "type": "string"},
            {
                "name": "coordinates",
                "type": "{ latitude: number; metadata: { lastUpdated: Date; }; }",
                "properties": [
                    {"name": "latitude", "type": "number"},
                    {
                        "name": "metadata",
                        "type": "{ lastUpdated: Date; }",
                        "properties": [{"name": "lastUpdated", "type": "Date"}],
                    },
                ],
            },
        ],
    )

    assert set(value) == {"street", "coordinates"}
    assert isinstance(value["street"], str)
    assert isinstance(value["coordinates"]["latitude"], int)
    assert isinstance(value["coordinates"]["metadata"]["lastUpdated"], datetime)


def test_rating_enum_covers_every_member() -> None:
    seen = set()
    for _ in range(50):
        seen.add(_one("rating", "Rating", enumValues={"Bad": 0, "Ok": 1, "Good": 2}))

    assert seen == {0, 1, 2}


def test_numeric_enum_ignores_reverse_mapping() -> None:
    runtime_enum = {"0": "Low", "1": "High", "Low": 0, "High": 1}
    for _ in range(20):
        assert _one("priority", "Priority", enumValues=runtime_enum) in {0, 1}


def test_string_enum_values() -> None:
    values = {"Email": "email", "Phone": "phone", "InPerson": "in_person"}
    for _ in range(20):
        assert _one("contactMethod", "ContactMethod", enumValues=values) in set(values.values())


def test_capitalised_type_without_enum_values_is_an_object() -> None:
    assert isinstance(_one("contactMethod", "ContactMethod"), dict)


@pytest.mark.parametrize("type_text", ["", "any", "<<<", "|", "Array<", "[]", "unknown | never"])
def test_malformed_types_never_raise(type_text: str) -> None:
    _one("value", type_text)


def test_unknown_types_fall_back_to_placeholder() -> None:
    assert _one("value", "any") == PLACEHOLDER_STRING
    assert _one("value", "  String  ") == PLACEHOLDER_STRING


def test_seeded_synthesizers_are_reproducible() -> None:
    props = [PropDescriptor(name="id", type="string"), PropDescriptor(name="count", type="number[]")]

    first = MockValueSynthesizer(random.Random(7)).generate_all(props)
    second = MockValueSynthesizer(random.Random(7)).generate_all(props)

    assert first == second


def test_empty_props() -> None:
    assert generate_props_data([]) == {}


def test_hook_mocks_and_json_conversion() -> None:
    form = mock_hook_value("useForm")
    assert form["formState"]["isValid"] is True
    assert mock_hook_value("useSomethingElse") is None

    converted = to_jsonable({"when": datetime(2024, 1, 2), "hooks": [form], "n": 1})
    assert converted["when"] == "2024-01-02T00:00:00"
    assert converted["hooks"][0]["register"].startswith("[function")
    assert converted["n"] == 1
