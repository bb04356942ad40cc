"""
Shared dependencies for the dashboard routes.

``create_app()`` stores the backend client and the view registry on
``app.state``; routes receive them through ``Depends()`` so every app
instance (and every test's stub client) stays isolated from the others.
"""

from fastapi import HTTPException, Request

from dashboard.client import RegulationsClient
from dashboard.view import AgencyTableView, ViewRegistry


def get_client(request: Request) -> RegulationsClient:
    """FastAPI dependency: the backend client of the running app."""
    return request.app.state.api_client


def get_registry(request: Request) -> ViewRegistry:
    """FastAPI dependency: the live page-view registry of the running app."""
    return request.app.state.views


def get_view(view_id: str, request: Request) -> AgencyTableView:
    """FastAPI dependency: resolve ``{view_id}`` to a live view or 404."""
    view = get_registry(request).get(view_id)
    if view is None:
        raise HTTPException(
            status_code=404,
            detail="This dashboard view has expired. Reload the page to continue.",
        )
    return view
