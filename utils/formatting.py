"""Display formatting for dashboard values.

Every number the templates show passes through one of these helpers so the
page, the summary cards and the tests agree on a single rendering:

    format_count(3000)          -> "3,000"
    format_words(3000)          -> "3,000 words"
    format_score(15)            -> "15.0"
    truncate_checksum("abcdef123456") -> "abcdef12..."
"""

from typing import Optional

MISSING = "—"


def format_count(value: Optional[int]) -> str:
    """Format a count with thousands separators.

    Examples:
        format_count(1234567) -> "1,234,567"
        format_count(None) -> "—"
    """
    if value is None:
        return MISSING
    return f"{int(value):,d}"


def format_words(value: Optional[int]) -> str:
    """Format a word total, e.g. ``"3,000 words"``."""
    if value is None:
        return MISSING
    return f"{format_count(value)} words"


def format_score(value: Optional[float], precision: int = 1) -> str:
    """Format an RSCS score to a fixed number of decimals.

    A score of 0 is a real value and renders as ``"0.0"``; only a missing
    score renders as a dash.
    """
    if value is None:
        return MISSING
    return f"{float(value):.{precision}f}"


def truncate_text(text: Optional[str], max_length: int = 500, suffix: str = "...") -> str:
    """Cut *text* to its first *max_length* characters and append *suffix*.

    The suffix is always appended to non-empty text, matching how excerpts
    are presented on the section page.

    Examples:
        truncate_text("abcdef", 3) -> "abc..."
        truncate_text("", 3) -> ""
    """
    if not text:
        return ""
    return text[:max_length] + suffix


def truncate_checksum(checksum: Optional[str], keep: int = 8) -> str:
    """Shorten a content checksum for table display."""
    if not checksum:
        return ""
    if len(checksum) <= keep:
        return checksum
    return checksum[:keep] + "..."
