"""Utility helper functions."""

from app.utils.helpers import escape_markup, get_summary, host, uptime_seconds, utc_timestamp

__all__ = [
    "escape_markup",
    "get_summary",
    "host",
    "uptime_seconds",
    "utc_timestamp",
]
