from __future__ import annotations

import pytest

from uicontext.models import ComponentRecord
from uicontext.stores import ComponentStore, StoreFrozenError


def _record(component_id: str, name: str = "Card") -> ComponentRecord:
    return ComponentRecord(id=component_id, path=f"/app/{name}.tsx", name=name)


def test_later_record_with_same_id_replaces_earlier() -> None:
    store = ComponentStore()
    store.add(_record("Card_1", "Card"))
    store.add(_record("Card_1", "Card2"))

    assert len(store) == 1
    assert store.get("Card_1").name == "Card2"


def test_frozen_store_rejects_writes_and_exposes_read_only_view() -> None:
    store = ComponentStore()
    store.add(_record("Card_1"))
    store.freeze()

    assert store.frozen
    with pytest.raises(StoreFrozenError):
        store.add(_record("Card_2"))

    view = store.as_mapping()
    assert "Card_1" in view
    with pytest.raises(TypeError):
        view["Card_2"] = _record("Card_2")  # type: ignore[index]


def test_iteration_preserves_insertion_order() -> None:
    store = ComponentStore()
    for component_id in ("B_1", "A_1", "C_1"):
        store.add(_record(component_id))

    assert [record.id for record in store] == ["B_1", "A_1", "C_1"]
    assert [record.id for record in store.records()] == ["B_1", "A_1", "C_1"]
    assert "A_1" in store
    assert store.get("Z_1") is None
