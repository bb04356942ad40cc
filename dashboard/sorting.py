"""Column sort state for the agency table.

Clicking a column header calls ``SortState.set_sort_key``: the same column
flips direction, a new column starts descending.  ``sort_entities`` orders
top-level rows only; children stay in fetch order under their parent.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Sequence

from dashboard.entities import Entity

ASC = "asc"
DESC = "desc"

# field -> (kind, header label)
SORTABLE_FIELDS: dict[str, tuple[str, str]] = {
    "name":        ("text",    "Agency"),
    "total_words": ("numeric", "Total Words"),
    "avg_rscs":    ("numeric", "RSCS per 1K"),
    "lsa_counts":  ("numeric", "LSA Activity"),
}

DEFAULT_SORT_KEY = "total_words"
DEFAULT_DIRECTION = DESC


def _sort_value(field_name: str) -> Callable[[Entity], Any]:
    kind, _ = SORTABLE_FIELDS[field_name]
    if kind == "numeric":
        return lambda e: getattr(e, field_name) or 0
    return lambda e: getattr(e, field_name) or ""


@dataclass
class SortState:
    """Current sort column and direction."""

    key: str = DEFAULT_SORT_KEY
    direction: str = DEFAULT_DIRECTION

    def set_sort_key(self, field_name: str) -> None:
        """Apply a header click on *field_name*.

        Raises:
            ValueError: if *field_name* is not a sortable column.
        """
        if field_name not in SORTABLE_FIELDS:
            raise ValueError(f"Cannot sort by {field_name!r}")
        if field_name == self.key:
            self.direction = ASC if self.direction == DESC else DESC
        else:
            self.key = field_name
            self.direction = DESC

    @property
    def descending(self) -> bool:
        return self.direction == DESC

    def aria_sort(self, field_name: str) -> str:
        """Value for the ``aria-sort`` attribute of a header cell."""
        if field_name != self.key:
            return "none"
        return "descending" if self.descending else "ascending"


def sort_entities(entities: Sequence[Entity], state: SortState) -> list[Entity]:
    """Return *entities* ordered by *state*; equal keys keep input order."""
    # sorted() stays stable with reverse=True, so ties never swap.
    return sorted(entities, key=_sort_value(state.key), reverse=state.descending)
