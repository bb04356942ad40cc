"""Corpus-wide totals shown on the metric cards.

Only top-level rows are counted: a parent agency's ``total_words`` already
covers its sub-agencies, so adding children would count their words twice.
Rows whose parent is missing from the collection are top-level and count.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from dashboard.entities import Entity
from dashboard.hierarchy import Hierarchy, build_hierarchy
from utils.formatting import format_count, format_score, format_words


@dataclass(frozen=True)
class CorpusSummary:
    """Totals over the counted rows."""

    total_words: int = 0
    avg_rscs: float = 0.0
    entity_count: int = 0
    scored_count: int = 0

    @property
    def words_display(self) -> str:
        return format_words(self.total_words)

    @property
    def count_display(self) -> str:
        return format_count(self.total_words)

    @property
    def avg_display(self) -> str:
        return format_score(self.avg_rscs)


def summarize(entities: Sequence[Entity], hierarchy: Hierarchy | None = None) -> CorpusSummary:
    """Sum words and average RSCS over the top-level rows of *entities*.

    The average is a simple mean (not weighted by words) over rows that
    carry a score; a score of 0 is counted.  An empty collection gives
    zero words and an average of 0.0.
    """
    tree = hierarchy if hierarchy is not None else build_hierarchy(entities)
    counted = tree.top_level

    total_words = sum(e.total_words for e in counted)
    scores = [e.avg_rscs for e in counted if e.avg_rscs is not None]
    avg = sum(scores) / len(scores) if scores else 0.0

    return CorpusSummary(
        total_words=total_words,
        avg_rscs=avg,
        entity_count=len(counted),
        scored_count=len(scores),
    )
