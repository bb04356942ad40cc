"""
Full-page HTML routes.

Routes:
    GET /                  → index.html (hero, metric cards, filters, agency table shell)
    GET /title/{t}         → title.html (metrics accordion + summary for one title)
    GET /section/{id}      → section.html (excerpt, score and summary for one section)

The index page only renders a loading shell; the agency data arrives through
the ``/partials/dashboard`` swap in ``web/routes/views.py``.

Detail pages never fail the request: a backend error is logged with a fixed
prefix and the page renders without content.
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException

from dashboard.client import FetchError, RegulationsClient
from dashboard.entities import SectionDetail, TitleDetail
from dashboard.explainer import use_explainer
from dashboard.sorting import SORTABLE_FIELDS
from dashboard.view import ViewRegistry, normalize_title
from utils.config import TITLE_NUMBERS
from web.deps import get_client, get_registry

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pages"])

# Templates instance is set by create_app() after mounting.
_templates: Jinja2Templates | None = None

EXCERPT_LENGTH = 500


def set_templates(t: Jinja2Templates) -> None:
    global _templates
    _templates = t


def _tmpl() -> Jinja2Templates:
    if _templates is None:
        raise RuntimeError("Templates not initialised; call set_templates() first")
    return _templates


# ── Routes ────────────────────────────────────────────────────────────────────

@router.get("/", response_class=HTMLResponse, include_in_schema=False)
def index(
    request: Request,
    title: str | None = None,
    include_checksum: bool = False,
    registry: ViewRegistry = Depends(get_registry),
) -> HTMLResponse:
    """Dashboard landing page; creates the page view that later requests act on."""
    view = registry.create(title=normalize_title(title), include_checksum=include_checksum)
    return _tmpl().TemplateResponse(
        request,
        "index.html",
        {
            "view":          view,
            "explainer":     use_explainer(view.context),
            "titles":        TITLE_NUMBERS,
            "columns":       SORTABLE_FIELDS,
        },
    )


@router.get("/title/{t}", response_class=HTMLResponse, include_in_schema=False)
def title_page(
    t: str,
    request: Request,
    client: RegulationsClient = Depends(get_client),
) -> HTMLResponse:
    """Metrics and summary for one CFR title."""
    try:
        detail = client.get_title(t)
    except FetchError as exc:
        logger.error("Error loading title: %s", exc.message)
        detail = TitleDetail()
    return _tmpl().TemplateResponse(
        request, "title.html", {"t": t, "detail": detail},
    )


@router.get("/section/{section_id}", response_class=HTMLResponse, include_in_schema=False)
def section_page(
    section_id: str,
    request: Request,
    client: RegulationsClient = Depends(get_client),
) -> HTMLResponse:
    """Excerpt, score and summary for one CFR section."""
    try:
        detail = client.get_section(section_id)
    except FetchError as exc:
        logger.error("Error loading section: %s", exc.message)
        detail = SectionDetail()
    return _tmpl().TemplateResponse(
        request,
        "section.html",
        {"section_id": section_id, "detail": detail, "excerpt_length": EXCERPT_LENGTH},
    )


# ── Error pages ───────────────────────────────────────────────────────────────

def _wants_html(request: Request) -> bool:
    if request.headers.get("HX-Request"):
        return True
    return "text/html" in request.headers.get("accept", "")


def _error_response(request: Request, status_code: int, error: str, detail: str):
    if request.headers.get("HX-Request"):
        # HTMX only swaps 2xx/3xx by default; the client script opts 4xx/5xx in.
        return _tmpl().TemplateResponse(
            request, "partials/alert.html",
            {"heading": error, "message": detail}, status_code=status_code,
        )
    if _wants_html(request):
        return _tmpl().TemplateResponse(
            request, "error.html",
            {"status_code": status_code, "error": error, "message": detail},
            status_code=status_code,
        )
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "detail": detail, "status_code": status_code},
    )


def register_error_handlers(app) -> None:
    """Render HTML error pages/fragments for browser requests, JSON otherwise."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        error = "Not found" if exc.status_code == 404 else "Request failed"
        return _error_response(request, exc.status_code, error, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        first = exc.errors()[0] if exc.errors() else {}
        return _error_response(request, 422, "Invalid request", str(first.get("msg", "")))

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return _error_response(request, 400, "Bad request", str(exc))

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path)
        return _error_response(request, 500, "Internal server error", str(exc))
