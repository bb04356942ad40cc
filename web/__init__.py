"""Web layer: FastAPI app, HTMX routes and shared dependencies."""
