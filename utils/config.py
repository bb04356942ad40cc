"""Configuration management for the eCFR dashboard.

Provides:
- A small ``Config`` base class that exposes settings as a dict
- ``ClientConfig`` for the scoring-backend HTTP client
- ``AppConfig`` loaded from environment variables for the web process
- Known values shared by the pages and the client (title range, backend URL)
"""

import os as _os
from typing import Any, Dict


# ── Known values ──────────────────────────────────────────────────────────────

# eCFR titles run 1-50; the title filter offers every one of them.
TITLE_NUMBERS = tuple(range(1, 51))

DEFAULT_API_BASE_URL = "http://localhost:8080/api"


class Config:
    """Base configuration class for organizing application settings."""

    def __init__(self):
        """Initialize configuration with default values."""
        pass

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary.

        Returns:
            Dictionary of all public config attributes
        """
        return {k: v for k, v in self.__dict__.items() if not k.startswith("_")}


class ClientConfig(Config):
    """Settings for talking to the RSCS scoring backend."""

    def __init__(self):
        super().__init__()
        self.api_base_url = DEFAULT_API_BASE_URL
        self.timeout_seconds = 30.0
        self.max_retries = 0
        self.pool_connections = 10
        self.pool_maxsize = 20


class AppConfig(Config):
    """Application-level configuration loaded from environment variables.

    All env vars have sensible defaults so the dashboard works out of the
    box against a backend on localhost:8080.

    Environment variables:
        APP_HOST: Bind address (default: 127.0.0.1)
        APP_PORT: Dashboard port (default: 3000)
        APP_LOG_FORMAT: Logging format, "text" or "json" (default: text)
        APP_CORS_ORIGINS: Comma-separated allowed origins (default: *)
        ECFR_API_BASE_URL: Scoring backend base URL (default: http://localhost:8080/api)
        ECFR_API_TIMEOUT: Backend request timeout in seconds (default: 30)
        ECFR_API_RETRIES: Retries for failed backend GETs (default: 0)
        VIEW_TTL_SECONDS: Idle lifetime of a rendered page view (default: 1800)
        VIEW_MAX_INSTANCES: Max live page views held in memory (default: 1000)
    """

    def __init__(self) -> None:
        super().__init__()
        self.api_host = _os.getenv("APP_HOST", "127.0.0.1")
        self.api_port = int(_os.getenv("APP_PORT", "3000"))
        self.log_format = _os.getenv("APP_LOG_FORMAT", "text")
        raw_origins = _os.getenv("APP_CORS_ORIGINS", "*")
        self.cors_origins: list[str] = (
            ["*"] if raw_origins == "*"
            else [o.strip() for o in raw_origins.split(",") if o.strip()]
        )
        self.api_base_url = _os.getenv("ECFR_API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/")
        self.api_timeout = float(_os.getenv("ECFR_API_TIMEOUT", "30"))
        self.api_retries = int(_os.getenv("ECFR_API_RETRIES", "0"))
        self.view_ttl_seconds = float(_os.getenv("VIEW_TTL_SECONDS", "1800"))
        self.view_max_instances = int(_os.getenv("VIEW_MAX_INSTANCES", "1000"))

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create an AppConfig instance populated from environment variables."""
        return cls()

    def client_config(self) -> ClientConfig:
        """Project the backend-related settings onto a ``ClientConfig``."""
        cc = ClientConfig()
        cc.api_base_url = self.api_base_url
        cc.timeout_seconds = self.api_timeout
        cc.max_retries = self.api_retries
        return cc
