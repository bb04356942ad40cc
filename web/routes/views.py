"""
HTMX routes that act on one live dashboard view.

Routes:
    GET  /partials/dashboard?view=            → fetch agencies, render metrics + table
    POST /views/{id}/filters                  → change title / checksum filters, refetch
    POST /views/{id}/sort/{field}             → header click
    POST /views/{id}/rows/{entity_id}/toggle  → expand/collapse a parent row
    POST /views/{id}/explainer/{action}       → open | close | toggle the RSCS explainer
    POST /views/{id}/unmount                  → page unload; drop the view

Each handler runs under ``view.lock`` so actions on one page never
interleave; the agency fetch itself runs outside the lock (see
``AgencyTableView.load``).  After a fragment is rendered, callbacks deferred
with ``next_tick`` are flushed, and any focus they request is sent to the
browser in an ``HX-Trigger-After-Settle`` header.
"""

import json
import logging
from typing import Literal

from fastapi import APIRouter, Depends, Form, Query, Request, Response
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from dashboard.client import RegulationsClient
from dashboard.explainer import clean_element_id, use_explainer
from dashboard.sorting import SORTABLE_FIELDS
from dashboard.view import AgencyTableView, ViewRegistry
from web.deps import get_client, get_registry, get_view
from web.routes.pages import _tmpl

logger = logging.getLogger(__name__)

router = APIRouter(tags=["views"])

FOCUS_EVENT = "rscs-focus"


def _render(request: Request, view: AgencyTableView, template: str) -> HTMLResponse:
    """Render *template* for *view*, then run post-render callbacks."""
    templates: Jinja2Templates = _tmpl()
    response = templates.TemplateResponse(
        request,
        template,
        {
            "view":      view,
            "explainer": use_explainer(view.context),
            "columns":   SORTABLE_FIELDS,
        },
    )
    view.context.scheduler.flush()
    targets = view.context.take_focus_requests()
    if targets:
        response.headers["HX-Trigger-After-Settle"] = json.dumps(
            {FOCUS_EVENT: {"target": targets[-1]}}
        )
    return response


def _render_dashboard(request: Request, view: AgencyTableView) -> HTMLResponse:
    with view.lock:
        return _render(request, view, "partials/dashboard.html")


# ── Data ──────────────────────────────────────────────────────────────────────

@router.get("/partials/dashboard", response_class=HTMLResponse, include_in_schema=False)
def dashboard_partial(
    request: Request,
    view_id: str = Query(..., alias="view"),
    client: RegulationsClient = Depends(get_client),
) -> HTMLResponse:
    """Fetch the agency collection for the view's filters and render it."""
    view = get_view(view_id, request)
    view.load(client)
    return _render_dashboard(request, view)


@router.post("/views/{view_id}/filters", response_class=HTMLResponse, include_in_schema=False)
def update_filters(
    request: Request,
    title: str | None = Form(None),
    include_checksum: bool = Form(False),
    view: AgencyTableView = Depends(get_view),
    client: RegulationsClient = Depends(get_client),
) -> HTMLResponse:
    """Apply the filter form and refetch if anything changed."""
    with view.lock:
        changed = view.set_filters(title, include_checksum)
    if changed:
        logger.info("view=%s filters title=%s include_checksum=%s",
                    view.view_id, view.title, view.include_checksum)
        view.load(client)
    return _render_dashboard(request, view)


# ── Table interaction ─────────────────────────────────────────────────────────

@router.post("/views/{view_id}/sort/{field}", response_class=HTMLResponse, include_in_schema=False)
def sort_by(
    field: str,
    request: Request,
    view: AgencyTableView = Depends(get_view),
) -> HTMLResponse:
    with view.lock:
        view.set_sort_key(field)
        return _render(request, view, "partials/dashboard.html")


@router.post(
    "/views/{view_id}/rows/{entity_id}/toggle",
    response_class=HTMLResponse,
    include_in_schema=False,
)
def toggle_row(
    entity_id: str,
    request: Request,
    view: AgencyTableView = Depends(get_view),
) -> HTMLResponse:
    with view.lock:
        view.toggle_row(entity_id)
        return _render(request, view, "partials/dashboard.html")


# ── Explainer ─────────────────────────────────────────────────────────────────

@router.post(
    "/views/{view_id}/explainer/{action}",
    response_class=HTMLResponse,
    include_in_schema=False,
)
def explainer_action(
    action: Literal["open", "close", "toggle"],
    request: Request,
    trigger: str | None = Form(None),
    active_element: str | None = Form(None),
    view: AgencyTableView = Depends(get_view),
) -> HTMLResponse:
    """Drive the page's shared explainer from any of its trigger controls.

    The trigger is the posted ``trigger`` field or, failing that, the id
    HTMX reports in the ``HX-Trigger`` header.  ``active_element`` is the
    id of whatever held focus when the request was sent.
    """
    trigger_id = clean_element_id(trigger) or clean_element_id(request.headers.get("HX-Trigger"))
    with view.lock:
        view.context.active_element = clean_element_id(active_element)
        store = use_explainer(view.context)
        if action == "open":
            store.open(trigger_id)
        elif action == "close":
            store.close()
        else:
            store.toggle(trigger_id)
        return _render(request, view, "partials/explainer.html")


# ── Lifecycle ─────────────────────────────────────────────────────────────────

@router.post("/views/{view_id}/unmount", status_code=204, include_in_schema=False)
def unmount(view_id: str, registry: ViewRegistry = Depends(get_registry)) -> Response:
    """Drop a view when its page is unloaded (sent with ``navigator.sendBeacon``)."""
    registry.discard(view_id)
    return Response(status_code=204)
