"""
Tests for dashboard/explainer.py — shared explainer store and deferred focus.
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from dashboard.explainer import (
    EXPLAINER_TRIGGERS,
    TRIGGER_METRIC_CARD,
    TRIGGER_NAV,
    TRIGGER_TABLE_HEADER,
    ExplainerStore,
    IsolatedExplainer,
    PageContext,
    RenderScheduler,
    clean_element_id,
    use_explainer,
)


# ── RenderScheduler ───────────────────────────────────────────────────────────

class TestRenderScheduler:
    def test_callbacks_wait_for_flush(self):
        sched = RenderScheduler()
        ran = []
        sched.next_tick(lambda: ran.append("a"))
        assert ran == []
        assert len(sched) == 1
        assert sched.flush() == 1
        assert ran == ["a"]
        assert len(sched) == 0

    def test_flush_runs_in_order_including_nested(self):
        sched = RenderScheduler()
        ran = []
        sched.next_tick(lambda: (ran.append(1), sched.next_tick(lambda: ran.append(3))))
        sched.next_tick(lambda: ran.append(2))
        assert sched.flush() == 3
        assert ran == [1, 2, 3]


# ── ExplainerStore ────────────────────────────────────────────────────────────

class TestExplainerStore:
    def test_starts_hidden(self):
        ctx = PageContext()
        assert ctx.explainer.visible is False

    def test_open_from_each_trigger(self):
        for trigger in EXPLAINER_TRIGGERS:
            ctx = PageContext()
            ctx.explainer.open(trigger)
            assert ctx.explainer.visible
            assert ctx.explainer.last_trigger == trigger

    def test_open_falls_back_to_focused_element(self):
        ctx = PageContext()
        ctx.active_element = "some-button"
        ctx.explainer.open()
        assert ctx.explainer.last_trigger == "some-button"

    def test_close_returns_focus_after_render(self):
        ctx = PageContext()
        ctx.explainer.open(TRIGGER_NAV)
        ctx.explainer.close()
        assert ctx.explainer.visible is False
        # Nothing is focused until the render pass has committed.
        assert ctx.take_focus_requests() == []
        ctx.scheduler.flush()
        assert ctx.take_focus_requests() == [TRIGGER_NAV]

    def test_focus_goes_to_most_recent_opener(self):
        ctx = PageContext()
        ctx.explainer.open(TRIGGER_NAV)
        ctx.explainer.close()
        ctx.explainer.open(TRIGGER_METRIC_CARD)
        ctx.explainer.close()
        ctx.scheduler.flush()
        assert ctx.take_focus_requests()[-1] == TRIGGER_METRIC_CARD

    def test_toggle(self):
        ctx = PageContext()
        ctx.explainer.toggle(TRIGGER_TABLE_HEADER)
        assert ctx.explainer.visible
        ctx.explainer.toggle(TRIGGER_TABLE_HEADER)
        assert not ctx.explainer.visible
        ctx.scheduler.flush()
        assert ctx.take_focus_requests() == [TRIGGER_TABLE_HEADER]

    def test_triggers_share_one_store(self):
        ctx = PageContext()
        header = use_explainer(ctx)
        nav = use_explainer(ctx)
        card = use_explainer(ctx)
        assert header is nav is card
        header.open(TRIGGER_TABLE_HEADER)
        assert nav.visible and card.visible
        card.toggle(TRIGGER_METRIC_CARD)
        assert not header.visible

    def test_close_without_opener_requests_no_focus(self):
        ctx = PageContext()
        ctx.explainer.close()
        ctx.scheduler.flush()
        assert ctx.take_focus_requests() == []


# ── Fallback without a page context ───────────────────────────────────────────

class TestUseExplainer:
    def test_returns_page_store(self):
        ctx = PageContext()
        assert isinstance(use_explainer(ctx), ExplainerStore)

    def test_missing_context_gets_private_instance(self):
        a = use_explainer(None)
        b = use_explainer(None)
        assert isinstance(a, IsolatedExplainer)
        assert a is not b
        a.open()
        assert a.visible
        assert not b.visible
        a.toggle()
        assert not a.visible


class TestCleanElementId:
    def test_accepts_dom_ids(self):
        assert clean_element_id("rscs-header-info") == "rscs-header-info"

    def test_rejects_other_values(self):
        assert clean_element_id(None) is None
        assert clean_element_id("") is None
        assert clean_element_id("1abc") is None
        assert clean_element_id("a b") is None
        assert clean_element_id("<script>") is None
