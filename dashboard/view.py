"""
Page controller for the agency table on the dashboard index.

One ``AgencyTableView`` exists per rendered index page.  It owns the flat
agency collection and everything derived from it (hierarchy, summary), plus
the interactive state the user builds up: sort column, expanded rows and
the explainer's ``PageContext``.

Handlers for a view run one at a time under ``view.lock``.  A fetch is the
one slow step, so it runs outside the lock:

    token = view.begin_fetch()          # under the lock
    entities = client.list_agencies()   # no lock held
    view.apply_result(token, entities)  # under the lock

Every fetch takes a fresh sequence token and only the newest token may
apply its result.  A response for a superseded filter selection arriving
late is logged and dropped instead of overwriting newer data.
"""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Sequence

from dashboard.client import FetchError, RegulationsClient
from dashboard.entities import Entity, EntityId
from dashboard.expand import ExpandState
from dashboard.explainer import PageContext
from dashboard.hierarchy import Hierarchy, build_hierarchy
from dashboard.sorting import SortState, sort_entities
from dashboard.summary import CorpusSummary, summarize
from utils.cache import TTLCache
from utils.config import TITLE_NUMBERS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TableRow:
    """One rendered ``<tr>`` of the agency table."""

    entity: Entity
    kind: str                       # "parent" | "child"
    has_children: bool = False
    expanded: bool = False
    parent_id: EntityId | None = None

    @property
    def is_child(self) -> bool:
        return self.kind == "child"


def normalize_title(value: int | str | None) -> int | None:
    """Coerce a title filter value to a known title number or ``None``.

    Raises:
        ValueError: for a value that is not blank and not a title 1-50.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid title filter: {value!r}") from None
    if number not in TITLE_NUMBERS:
        raise ValueError(f"Title must be between {TITLE_NUMBERS[0]} and {TITLE_NUMBERS[-1]}")
    return number


class AgencyTableView:
    """State of one rendered dashboard index page."""

    def __init__(self, view_id: str, title: int | None = None,
                 include_checksum: bool = False) -> None:
        self.view_id = view_id
        self.title = title
        self.include_checksum = include_checksum

        self.entities: list[Entity] = []
        self.loading = True
        self.error: str | None = None
        self.loaded_at: datetime | None = None

        self.sort = SortState()
        self.expanded = ExpandState()
        self.context = PageContext()
        self.lock = threading.RLock()

        self._issued = 0
        self._hierarchy = Hierarchy()
        self._summary = CorpusSummary()

    # ── Fetch lifecycle ───────────────────────────────────────────────────────

    def begin_fetch(self) -> int:
        """Enter the loading state and return the token for this fetch."""
        self._issued += 1
        self.loading = True
        return self._issued

    def _is_current(self, token: int) -> bool:
        if token != self._issued:
            logger.info("view=%s discarding stale response (token %d, newest %d)",
                        self.view_id, token, self._issued)
            return False
        return True

    def apply_result(self, token: int, entities: Sequence[Entity]) -> bool:
        """Replace the collection and its derived views in one step."""
        if not self._is_current(token):
            return False
        collection = list(entities)
        hierarchy = build_hierarchy(collection)
        summary = summarize(collection, hierarchy)
        self.entities, self._hierarchy, self._summary = collection, hierarchy, summary
        self.error = None
        self.loading = False
        self.loaded_at = datetime.now(timezone.utc)
        return True

    def apply_error(self, token: int, message: str) -> bool:
        """Record a failed fetch; the collection is emptied."""
        if not self._is_current(token):
            return False
        self.entities, self._hierarchy, self._summary = [], Hierarchy(), CorpusSummary()
        self.error = message
        self.loading = False
        return True

    def load(self, client: RegulationsClient) -> bool:
        """Fetch agencies for the current filters and apply the outcome.

        Returns False if a newer fetch superseded this one.
        """
        with self.lock:
            token = self.begin_fetch()
            title, include_checksum = self.title, self.include_checksum
        try:
            entities = client.list_agencies(title=title, include_checksum=include_checksum)
        except FetchError as exc:
            logger.error("Error loading agencies: %s", exc.message)
            with self.lock:
                return self.apply_error(token, exc.message)
        with self.lock:
            return self.apply_result(token, entities)

    # ── User actions ──────────────────────────────────────────────────────────

    def set_filters(self, title: int | str | None, include_checksum: bool) -> bool:
        """Update the filters; return True if a refetch is needed."""
        new_title = normalize_title(title)
        changed = (new_title, include_checksum) != (self.title, self.include_checksum)
        self.title, self.include_checksum = new_title, include_checksum
        return changed

    def set_sort_key(self, field_name: str) -> None:
        self.sort.set_sort_key(field_name)

    def resolve_id(self, raw: str) -> EntityId:
        """Map an id taken from a URL back to the id used in the collection."""
        for entity in self.entities:
            if str(entity.id) == raw:
                return entity.id
        return raw

    def toggle_row(self, raw_id: str) -> bool:
        return self.expanded.toggle(self.resolve_id(raw_id))

    # ── Derived views ─────────────────────────────────────────────────────────

    @property
    def hierarchy(self) -> Hierarchy:
        return self._hierarchy

    @property
    def summary(self) -> CorpusSummary:
        return self._summary

    def rows(self) -> list[TableRow]:
        """Rows in display order: sorted parents, each followed by its
        children when expanded."""
        rows: list[TableRow] = []
        for parent in sort_entities(self._hierarchy.top_level, self.sort):
            children = self._hierarchy.children_of(parent.id)
            expanded = self.expanded.is_expanded(parent.id)
            rows.append(TableRow(parent, "parent", has_children=bool(children), expanded=expanded))
            if expanded:
                rows.extend(TableRow(child, "child", parent_id=parent.id) for child in children)
        return rows


class ViewRegistry:
    """Live page views keyed by an opaque id.

    A view is removed when its page unloads (``discard``) or after
    ``ttl_seconds`` without any interaction.
    """

    def __init__(self, maxsize: int = 1000, ttl_seconds: float = 1800.0) -> None:
        self._views = TTLCache(maxsize=maxsize, ttl_seconds=ttl_seconds,
                               on_evict=self._expired)

    def create(self, title: int | None = None, include_checksum: bool = False) -> AgencyTableView:
        view = AgencyTableView(uuid.uuid4().hex, title=title, include_checksum=include_checksum)
        self._views.set(view.view_id, view)
        return view

    def get(self, view_id: str) -> AgencyTableView | None:
        return self._views.get(view_id)

    def discard(self, view_id: str) -> bool:
        return self._views.pop(view_id) is not None

    def stats(self) -> dict[str, int]:
        return self._views.stats()

    def __len__(self) -> int:
        return len(self._views)

    @staticmethod
    def _expired(view_id: str, view: AgencyTableView) -> None:
        logger.debug("view=%s expired", view_id)
