"""Timestamp formatting utilities."""

from datetime import datetime


def now() -> str:
    """Compact local timestamp for directory names, e.g. 20261019_142530."""
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def today() -> str:
    """Local date as YYYY-MM-DD."""
    return datetime.now().strftime("%Y-%m-%d")
