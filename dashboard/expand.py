"""Which parent rows of the agency table are currently expanded."""

from __future__ import annotations

from typing import Iterator

from dashboard.entities import EntityId


class ExpandState:
    """A set of expanded parent ids.

    Kept across refetches; an id that is no longer in the collection simply
    matches no row.  The table is two levels deep, so collapsing a parent
    never has descendants to clear.
    """

    def __init__(self) -> None:
        self._expanded: set[EntityId] = set()

    def toggle(self, entity_id: EntityId) -> bool:
        """Flip *entity_id* and return whether it is now expanded."""
        if entity_id in self._expanded:
            self._expanded.remove(entity_id)
            return False
        self._expanded.add(entity_id)
        return True

    def is_expanded(self, entity_id: EntityId) -> bool:
        return entity_id in self._expanded

    def clear(self) -> None:
        self._expanded.clear()

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._expanded

    def __iter__(self) -> Iterator[EntityId]:
        return iter(self._expanded)

    def __len__(self) -> int:
        return len(self._expanded)
