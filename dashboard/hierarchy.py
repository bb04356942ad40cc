"""Two-level parent/child grouping over a flat agency collection.

The backend returns agencies as one flat list in which sub-agencies carry
a ``parent_id``.  ``build_hierarchy`` derives a disposable projection:

    top_level            rows with no resolvable parent, in fetch order
    children[parent_id]  rows grouped under each top-level row, in fetch order

The projection is rebuilt from the flat list after every fetch and never
cached separately.  Rows whose ``parent_id`` matches nothing (including a
row that names itself, or a parent cycle) are shown as top-level.  Rows
nested deeper than one level are listed under their top-level ancestor.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from dashboard.entities import Entity, EntityId


@dataclass
class Hierarchy:
    """Top-level rows plus the children grouped under each of them."""

    top_level: list[Entity] = field(default_factory=list)
    children: dict[EntityId, list[Entity]] = field(default_factory=dict)

    def children_of(self, entity_id: EntityId) -> list[Entity]:
        return self.children.get(entity_id, [])

    def has_children(self, entity_id: EntityId) -> bool:
        return bool(self.children.get(entity_id))

    def __len__(self) -> int:
        return len(self.top_level) + sum(len(c) for c in self.children.values())


def build_hierarchy(entities: Sequence[Entity]) -> Hierarchy:
    """Group *entities* into top-level rows and their children.

    Runs in linear time: one pass indexes rows by id, a second resolves
    each row's top-level ancestor (memoised) and appends it to that
    group.  *entities* is not modified.
    """
    by_id: dict[EntityId, Entity] = {}
    for entity in entities:
        by_id.setdefault(entity.id, entity)

    roots: dict[EntityId, EntityId] = {}

    def root_of(entity: Entity) -> EntityId:
        path: list[EntityId] = []
        position: dict[EntityId, int] = {}
        current = entity
        while True:
            if current.id in roots:
                root = roots[current.id]
                break
            if current.id in position:
                # Every row on a parent cycle stands on its own.
                start = position[current.id]
                for node in path[start:]:
                    roots[node] = node
                path = path[:start]
                root = current.id
                break
            position[current.id] = len(path)
            path.append(current.id)
            parent = by_id.get(current.parent_id) if current.parent_id is not None else None
            if parent is None or parent.id == current.id:
                root = current.id
                break
            current = parent
        for node in path:
            roots.setdefault(node, root)
        return roots[entity.id]

    result = Hierarchy()
    for entity in entities:
        root = root_of(entity)
        if root == entity.id:
            result.top_level.append(entity)
        else:
            result.children.setdefault(root, []).append(entity)
    return result
