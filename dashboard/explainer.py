"""
Shared visibility state for the RSCS explainer dialog.

Three controls on the index page can open the explainer: the info button in
the "RSCS per 1K" table header, the "About RSCS" link in the top nav, and
the info button on the "Avg. RSCS Score" metric card.  They all act on the
one ``ExplainerStore`` held by the page's ``PageContext``, so only one
explainer can ever be open per page.

Focus handling mirrors what a browser user expects from a modal: ``open``
remembers which control opened it (or, failing that, whichever control
held focus), and ``close`` hands focus back to that control.  The hand-back
is deferred with ``RenderScheduler.next_tick`` so it runs only after the
page fragment has been re-rendered; the web layer then forwards the
request to the browser as an after-settle event.
"""

from __future__ import annotations

import re
from collections import deque
from typing import Callable

# Element ids of the three trigger controls.
TRIGGER_TABLE_HEADER = "rscs-header-info"
TRIGGER_NAV = "about-rscs-trigger"
TRIGGER_METRIC_CARD = "rscs-metric-info"
EXPLAINER_TRIGGERS = (TRIGGER_TABLE_HEADER, TRIGGER_NAV, TRIGGER_METRIC_CARD)

_ELEMENT_ID = re.compile(r"^[A-Za-z][A-Za-z0-9_-]{0,63}$")


def clean_element_id(value: str | None) -> str | None:
    """Return *value* if it looks like a DOM id, else ``None``."""
    if value and _ELEMENT_ID.match(value):
        return value
    return None


class RenderScheduler:
    """Callbacks deferred until the current render pass has committed."""

    def __init__(self) -> None:
        self._pending: deque[Callable[[], None]] = deque()

    def next_tick(self, callback: Callable[[], None]) -> None:
        self._pending.append(callback)

    def flush(self) -> int:
        """Run queued callbacks in order, including any they enqueue."""
        ran = 0
        while self._pending:
            self._pending.popleft()()
            ran += 1
        return ran

    def __len__(self) -> int:
        return len(self._pending)


class PageContext:
    """Per-page state handed explicitly to every component that needs it.

    ``active_element`` is the id of the control the browser last reported
    as focused.  ``focus()`` queues an element to receive focus once the
    browser has swapped in the new markup.
    """

    def __init__(self) -> None:
        self.scheduler = RenderScheduler()
        self.active_element: str | None = None
        self._focus_requests: list[str] = []
        self.explainer = ExplainerStore(self)

    def focus(self, element_id: str) -> None:
        self._focus_requests.append(element_id)

    def take_focus_requests(self) -> list[str]:
        requests, self._focus_requests = self._focus_requests, []
        return requests


class ExplainerStore:
    """Open/close/toggle state of the page's single explainer dialog."""

    def __init__(self, context: PageContext) -> None:
        self._context = context
        self.visible = False
        self.last_trigger: str | None = None

    def open(self, trigger: str | None = None) -> None:
        self.last_trigger = trigger or self._context.active_element
        self.visible = True

    def close(self) -> None:
        self.visible = False
        target = self.last_trigger
        if target:
            self._context.scheduler.next_tick(lambda: self._context.focus(target))

    def toggle(self, trigger: str | None = None) -> None:
        if self.visible:
            self.close()
        else:
            self.open(trigger)


class IsolatedExplainer:
    """Private explainer flag for a consumer rendered without a page context.

    Nothing else shares it and it does no focus bookkeeping.
    """

    def __init__(self) -> None:
        self.visible = False
        self.last_trigger: str | None = None

    def open(self, trigger: str | None = None) -> None:
        self.visible = True

    def close(self) -> None:
        self.visible = False

    def toggle(self, trigger: str | None = None) -> None:
        self.visible = not self.visible


def use_explainer(context: PageContext | None) -> ExplainerStore | IsolatedExplainer:
    """Return the page's shared store, or a private one if there is none."""
    store = getattr(context, "explainer", None)
    if store is None:
        return IsolatedExplainer()
    return store
