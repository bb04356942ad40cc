"""
Pytest fixtures for the eCFR dashboard tests.

Provides a stub backend client (no network), sample agency payloads in the
shape ``GET /agencies`` returns, and an app/TestClient pair wired to the
stub.
"""

import re
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from dashboard.client import FetchError  # noqa: E402
from dashboard.entities import (  # noqa: E402
    Entity,
    SectionDetail,
    TitleDetail,
    parse_entities,
)


# ── Sample payloads ───────────────────────────────────────────────────────────

AGENCY_ROWS = [
    {"id": 1, "name": "Agency A", "parent_id": None, "total_words": 1000,
     "avg_rscs": 10.0, "lsa_counts": 4, "content_checksum": "abcdef1234567890"},
    {"id": 2, "name": "Agency B", "parent_id": 1, "total_words": 500,
     "avg_rscs": 30.0, "lsa_counts": 1},
    {"id": 3, "name": "Agency C", "parent_id": None, "total_words": 2000,
     "avg_rscs": 20.0, "lsa_counts": 7, "content_checksum": "0123456789abcdef"},
]


def make_entity(id, name=None, **kw) -> Entity:
    """Build an Entity with a default display name."""
    return Entity(id=id, name=name if name is not None else f"Agency {id}", **kw)


# ── Stub backend ──────────────────────────────────────────────────────────────

class StubClient:
    """Stands in for ``RegulationsClient``; records every call it receives.

    Set ``error`` to make every call raise ``FetchError`` with that message.
    """

    base_url = "http://stub.invalid/api"

    def __init__(self, agencies=None, title=None, section=None):
        self.agencies = AGENCY_ROWS if agencies is None else agencies
        self.title = title or {}
        self.section = section or {}
        self.error: str | None = None
        self.reachable = True
        self.calls: list[tuple] = []
        self.closed = False

    def _maybe_fail(self):
        if self.error is not None:
            raise FetchError(self.error)

    def list_agencies(self, title=None, include_checksum=False):
        self.calls.append(("list_agencies", title, include_checksum))
        self._maybe_fail()
        return parse_entities(self.agencies)

    def get_title(self, t):
        self.calls.append(("get_title", t))
        self._maybe_fail()
        return TitleDetail.model_validate(self.title)

    def get_section(self, section_id):
        self.calls.append(("get_section", section_id))
        self._maybe_fail()
        return SectionDetail.model_validate(self.section)

    def ping(self):
        return self.reachable

    def close(self):
        self.closed = True


@pytest.fixture()
def stub_client():
    return StubClient()


@pytest.fixture()
def app(stub_client):
    from web.app import create_app
    return create_app(api_client=stub_client)


@pytest.fixture()
def client(app):
    from fastapi.testclient import TestClient
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture()
def view_id(client):
    """Render the index page and return the id of the view it created."""
    resp = client.get("/")
    assert resp.status_code == 200
    match = re.search(r'data-view-id="([0-9a-f]+)"', resp.text)
    assert match, "index page did not render a view id"
    return match.group(1)
