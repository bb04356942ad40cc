"""
FastAPI application factory for the eCFR dashboard.

Usage:
    python -m web.app                                          # Dev server on port 3000
    ECFR_API_BASE_URL=http://backend:8080/api python -m web.app

Design record:
    Server-rendered Jinja2 pages with HTMX fragment swaps.  The RSCS
    scoring backend is the only source of data and is reached over
    JSON/HTTP with ``requests``; no database lives in this process.
    Interactive table state is held server-side per rendered page
    (``dashboard.view.AgencyTableView``).

APP-LOG: Structured JSON logging when APP_LOG_FORMAT=json.
APP-CORS: CORS middleware with configurable origins via APP_CORS_ORIGINS.
APP-SEC: Content-Security-Policy and framing headers on every response.
"""

import json
import logging
import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from dashboard.client import RegulationsClient
from dashboard.view import ViewRegistry
from utils.config import AppConfig
from utils.formatting import (
    format_count,
    format_score,
    format_words,
    truncate_checksum,
    truncate_text,
)
from web.routes import pages, views

# ── Configuration ─────────────────────────────────────────────────────────────
_cfg = AppConfig.from_env()

# ── APP-LOG: Structured JSON logging ──────────────────────────────────────────


class _JsonFormatter(logging.Formatter):
    """Emit log records as newline-delimited JSON."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Merge extra fields added via logger.info("...", extra={...})
        for key in ("method", "path", "status", "duration_ms", "request_id", "view_id"):
            if hasattr(record, key):
                data[key] = getattr(record, key)
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data)


_logger = logging.getLogger("ecfr_dashboard")
_handler = logging.StreamHandler()
if _cfg.log_format == "json":
    _handler.setFormatter(_JsonFormatter())
else:
    _handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    )
logging.basicConfig(handlers=[_handler], level=logging.INFO, force=True)

_SLOW_REQUEST_MS = 500


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log the backend target on startup and release pooled connections on exit."""
    _logger.info("Dashboard reading from %s", app.state.api_client.base_url)
    _logger.info("Settings: %s", _cfg.to_dict())
    yield
    app.state.api_client.close()


def create_app(api_client: RegulationsClient | None = None,
               registry: ViewRegistry | None = None) -> FastAPI:
    """Create and configure the dashboard application.

    Args:
        api_client: Override the backend client (tests pass a stub).
        registry: Override the page-view registry.

    Returns:
        Configured FastAPI application instance.
    """
    client = (api_client if api_client is not None
              else RegulationsClient.from_config(_cfg.client_config()))
    views_registry = registry if registry is not None else ViewRegistry(
        maxsize=_cfg.view_max_instances, ttl_seconds=_cfg.view_ttl_seconds,
    )

    app = FastAPI(
        title="eCFR Dashboard",
        summary="Browse federal regulations by agency with their RSCS complexity scores.",
        version="1.0.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
    )
    app.state.api_client = client
    app.state.views = views_registry

    # ── APP-CORS ──────────────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cfg.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "HEAD", "OPTIONS"],
        allow_headers=["*"],
    )

    # ── Request logging ───────────────────────────────────────────────────────

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log each request with a short request id and its duration."""
        request_id = str(uuid.uuid4())[:8]
        start = time.monotonic()
        path = request.url.path

        response = await call_next(request)
        duration_ms = (time.monotonic() - start) * 1000
        response.headers["X-Request-ID"] = request_id

        if _cfg.log_format == "json":
            _logger.info(
                "request",
                extra={
                    "method": request.method,
                    "path": path,
                    "status": response.status_code,
                    "duration_ms": round(duration_ms, 1),
                    "request_id": request_id,
                },
            )
        else:
            _logger.info(
                "method=%s path=%s status=%d duration_ms=%.1f rid=%s",
                request.method, path, response.status_code, duration_ms, request_id,
            )
        if duration_ms > _SLOW_REQUEST_MS:
            _logger.warning(
                "slow_request method=%s path=%s duration_ms=%.1f",
                request.method, path, duration_ms,
            )
        return response

    # ── APP-SEC: Content Security Policy + security headers ───────────────────

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        # HTMX and its extensions load from unpkg; templates carry no inline JS.
        response.headers["Content-Security-Policy"] = (
            "default-src 'self'; "
            "script-src 'self' unpkg.com; "
            "style-src 'self' 'unsafe-inline'; "
            "img-src 'self' data:; "
            "font-src 'self'; "
            "connect-src 'self';"
        )
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        return response

    # ── Health check ──────────────────────────────────────────────────────────

    @app.get("/health", tags=["meta"], summary="Health check")
    def health():
        """Return 200 if the scoring backend answers, 503 otherwise."""
        reachable = client.ping()
        body = {
            "status": "ok" if reachable else "degraded",
            "backend": client.base_url,
            "backend_reachable": reachable,
            "live_views": len(views_registry),
        }
        if not reachable:
            return JSONResponse(status_code=503, content=body)
        return body

    # ── Static files + Jinja2 templates ───────────────────────────────────────
    _here = Path(__file__).parent.parent  # project root

    static_dir = _here / "static"
    templates_dir = _here / "templates"

    if static_dir.exists():
        app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

    templates = Jinja2Templates(directory=str(templates_dir))
    templates.env.filters["fmt_count"] = format_count
    templates.env.filters["fmt_score"] = format_score
    templates.env.filters["fmt_words"] = format_words
    templates.env.filters["checksum"] = truncate_checksum
    templates.env.filters["excerpt"] = truncate_text

    pages.set_templates(templates)
    app.include_router(pages.router)
    app.include_router(views.router)

    pages.register_error_handlers(app)

    return app


# Singleton instance for uvicorn
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "web.app:app",
        host=_cfg.api_host,
        port=_cfg.api_port,
        reload=True,
        log_level="info",
    )
