"""Parent/child linking between component records."""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterator, List, Mapping, Set, Union

from .models import ComponentRecord
from .stores import ComponentStore


def build_name_index(store: ComponentStore) -> Dict[str, List[str]]:
    """Map each declared name to every record id carrying it."""
    index: Dict[str, List[str]] = defaultdict(list)
    for record in store:
        index[record.name].append(record.id)
    return dict(index)


def link_components(store: ComponentStore) -> None:
    """Turn markup references into parent/child edges.

    Must run after every record has been added so that references to
    components declared later in the pass still resolve. A tag links to every
    record sharing its name; the importing file is not consulted.
    """
    index = build_name_index(store)
    for record in store:
        for reference in record.markup:
            for child_id in index.get(reference.tag_name, ()):
                if child_id not in record.children_ids:
                    record.children_ids.append(child_id)
                child = store.get(child_id)
                if child is not None and record.id not in child.parent_ids:
                    child.parent_ids.append(record.id)


def root_component_ids(store: ComponentStore) -> List[str]:
    return [record.id for record in store if not record.parent_ids]


def walk_descendants(
    store: Union[ComponentStore, Mapping[str, ComponentRecord]], component_id: str
) -> Iterator[str]:
    """Yield descendant ids breadth-first, visiting each at most once.

    Composition cycles are legal in the source, so the walk tracks what it has
    already seen rather than relying on the graph being a tree.
    """
    seen: Set[str] = {component_id}
    queue = [component_id]
    while queue:
        current = store.get(queue.pop(0))
        if current is None:
            continue
        for child_id in current.children_ids:
            if child_id in seen:
                continue
            seen.add(child_id)
            queue.append(child_id)
            yield child_id


__all__ = ["build_name_index", "link_components", "root_component_ids", "walk_descendants"]
