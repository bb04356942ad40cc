"""
Dashboard package -- agency table state and the backend client.

Re-exports key entry points so callers can do::

    from dashboard import RegulationsClient, ViewRegistry, build_hierarchy
"""

from dashboard.client import FetchError, RegulationsClient
from dashboard.entities import Entity, SectionDetail, TitleDetail
from dashboard.expand import ExpandState
from dashboard.explainer import PageContext, use_explainer
from dashboard.hierarchy import Hierarchy, build_hierarchy
from dashboard.sorting import SortState, sort_entities
from dashboard.summary import CorpusSummary, summarize
from dashboard.view import AgencyTableView, ViewRegistry

__all__ = [
    "FetchError",
    "RegulationsClient",
    "Entity",
    "SectionDetail",
    "TitleDetail",
    "ExpandState",
    "PageContext",
    "use_explainer",
    "Hierarchy",
    "build_hierarchy",
    "SortState",
    "sort_entities",
    "CorpusSummary",
    "summarize",
    "AgencyTableView",
    "ViewRegistry",
]
