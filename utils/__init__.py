"""Shared utilities for the eCFR dashboard."""

# Configuration
from utils.config import AppConfig, ClientConfig, Config, TITLE_NUMBERS

# Caching
from utils.cache import TTLCache

# HTTP
from utils.http import RetryStrategy, SessionManager

# Display formatting
from utils.formatting import (
    format_count,
    format_score,
    format_words,
    truncate_checksum,
    truncate_text,
)

__all__ = [
    "AppConfig",
    "ClientConfig",
    "Config",
    "TITLE_NUMBERS",
    "TTLCache",
    "RetryStrategy",
    "SessionManager",
    "format_count",
    "format_score",
    "format_words",
    "truncate_checksum",
    "truncate_text",
]
