"""
HTTP client for the RSCS scoring backend.

The dashboard owns no data; every agency row, title and section comes from
three JSON endpoints on the backend:

    GET {base}/agencies?title={n}&include_checksum=true   -> [Entity, ...]
    GET {base}/titles/{t}                                  -> TitleDetail
    GET {base}/sections/{id}                               -> SectionDetail

Transport failures and non-2xx responses raise ``FetchError`` carrying a
message meant to be shown to the user as-is.  A body that is empty or not
valid JSON is *not* an error: list calls return ``[]`` and detail calls
return an empty record.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from dashboard.entities import (
    Entity,
    SectionDetail,
    TitleDetail,
    parse_detail,
    parse_entities,
)
from utils.config import ClientConfig
from utils.http import RetryStrategy, SessionManager

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """A backend request could not be completed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class RegulationsClient:
    """Read-only client for the agency, title and section endpoints.

    Args:
        base_url: Backend API root, e.g. ``http://localhost:8080/api``.
        timeout: Per-request timeout in seconds.
        max_retries: Retry budget for idempotent GETs (default 0).
        session_manager: Pre-built session manager (tests inject a mocked
            session through this).
    """

    def __init__(self, base_url: str, timeout: float = 30.0, max_retries: int = 0,
                 session_manager: SessionManager | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._sessions = session_manager if session_manager is not None else SessionManager(
            retry_strategy=RetryStrategy(max_retries=max_retries),
        )

    @classmethod
    def from_config(cls, cfg: ClientConfig) -> "RegulationsClient":
        return cls(
            cfg.api_base_url,
            timeout=cfg.timeout_seconds,
            max_retries=cfg.max_retries,
            session_manager=SessionManager(
                retry_strategy=RetryStrategy(max_retries=cfg.max_retries),
                pool_connections=cfg.pool_connections,
                pool_maxsize=cfg.pool_maxsize,
            ),
        )

    # ── Transport ─────────────────────────────────────────────────────────────

    def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """GET ``{base_url}/{path}`` and decode the body.

        Returns ``None`` when the body is empty or not JSON.

        Raises:
            FetchError: on transport failure or a non-2xx status.
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            resp = self._sessions.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise FetchError(str(exc)) from exc

        if not resp.ok:
            raise FetchError(f"HTTP {resp.status_code}: {resp.reason}", status_code=resp.status_code)

        try:
            return resp.json()
        except ValueError:
            logger.warning("Non-JSON body from %s (%d bytes)", url, len(resp.content or b""))
            return None

    def close(self) -> None:
        self._sessions.close()

    # ── Endpoints ─────────────────────────────────────────────────────────────

    def list_agencies(self, title: int | str | None = None,
                      include_checksum: bool = False) -> list[Entity]:
        """Fetch the flat agency collection, optionally scoped to one title."""
        params: dict[str, Any] = {}
        if title not in (None, ""):
            params["title"] = title
        if include_checksum:
            params["include_checksum"] = "true"
        return parse_entities(self._get_json("agencies", params or None))

    def get_title(self, title: int | str) -> TitleDetail:
        """Fetch one title's metrics and summary."""
        return parse_detail(TitleDetail, self._get_json(f"titles/{title}"))

    def get_section(self, section_id: int | str) -> SectionDetail:
        """Fetch one section's text, score and summary."""
        return parse_detail(SectionDetail, self._get_json(f"sections/{section_id}"))

    def ping(self) -> bool:
        """Return True if the backend answers the summaries listing."""
        try:
            self._get_json("summaries")
        except FetchError as exc:
            logger.warning("Backend health probe failed: %s", exc)
            return False
        return True
