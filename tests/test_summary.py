"""
Tests for dashboard/summary.py — metric-card totals.
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from dashboard.entities import Entity
from dashboard.hierarchy import build_hierarchy
from dashboard.summary import CorpusSummary, summarize


def _e(id, **kw):
    return Entity(id=id, name=f"Agency {id}", **kw)


class TestSummarize:
    def test_sum_of_words(self):
        s = summarize([_e(1, total_words=1000), _e(2, total_words=2000)])
        assert s.total_words == 3000
        assert s.words_display == "3,000 words"
        assert s.count_display == "3,000"

    def test_simple_mean_of_scores(self):
        s = summarize([
            _e(1, total_words=10, avg_rscs=10.0),
            _e(2, total_words=99999, avg_rscs=20.0),
        ])
        assert s.avg_rscs == 15.0
        assert s.avg_display == "15.0"

    def test_single_zero_score(self):
        s = summarize([_e(1, total_words=100, avg_rscs=0)])
        assert s.avg_display == "0.0"
        assert s.scored_count == 1

    def test_zero_score_counts_in_mean(self):
        s = summarize([_e(1, avg_rscs=0.0), _e(2, avg_rscs=30.0)])
        assert s.avg_rscs == 15.0

    def test_unscored_rows_skipped(self):
        s = summarize([_e(1, avg_rscs=None), _e(2, avg_rscs=12.0)])
        assert s.avg_rscs == 12.0
        assert s.scored_count == 1
        assert s.entity_count == 2

    def test_empty_collection(self):
        s = summarize([])
        assert s == CorpusSummary()
        assert s.words_display == "0 words"
        assert s.avg_display == "0.0"

    def test_children_excluded(self):
        rows = [_e(1, parent_id=None, total_words=1000),
                _e(2, parent_id=1, total_words=500)]
        s = summarize(rows)
        assert s.total_words == 1000
        assert s.entity_count == 1

    def test_orphans_counted(self):
        rows = [_e(1, total_words=1000), _e(2, parent_id=404, total_words=500)]
        assert summarize(rows).total_words == 1500

    def test_uses_given_hierarchy(self):
        rows = [_e(1, total_words=1), _e(2, parent_id=1, total_words=2)]
        assert summarize(rows, build_hierarchy(rows)).total_words == 1
