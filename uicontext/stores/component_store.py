"""Run-scoped store of component records."""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional

from ..models import ComponentRecord


class StoreFrozenError(RuntimeError):
    """Raised when a record is written after the store has been frozen."""


class ComponentStore:
    """Holds every component record discovered during one analysis run.

    Records are added during extraction, edges are written during linking, and
    the store is frozen before anything outside the run reads it. A later
    record with an id already present replaces the earlier one.
    """

    def __init__(self) -> None:
        self._records: Dict[str, ComponentRecord] = {}
        self._frozen = False

    def add(self, record: ComponentRecord) -> None:
        if self._frozen:
            raise StoreFrozenError(f"Cannot add {record.id}: component store is frozen")
        self._records[record.id] = record

    def get(self, component_id: str) -> Optional[ComponentRecord]:
        return self._records.get(component_id)

    def records(self) -> List[ComponentRecord]:
        return list(self._records.values())

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def as_mapping(self) -> Mapping[str, ComponentRecord]:
        return MappingProxyType(self._records)

    def __contains__(self, component_id: object) -> bool:
        return component_id in self._records

    def __iter__(self) -> Iterator[ComponentRecord]:
        return iter(list(self._records.values()))

    def __len__(self) -> int:
        return len(self._records)


__all__ = ["ComponentStore", "StoreFrozenError"]
