"""Jinja2 filters shared by the templated reporters."""

import re
from datetime import UTC, datetime

SEVERITY_LABELS = {
    "error": "ERROR",
    "warning": "WARNING",
    "info": "INFO",
}

SEVERITY_ICONS = {
    "error": "🔴",
    "warning": "🟡",
    "info": "🔵",
}

_TABLE_UNSAFE = re.compile(r"[|\r\n]+")


def format_datetime(dt: datetime | str | None) -> str:
    """Format a timestamp for display in reports.

    Args:
        dt: Datetime object or ISO string

    Returns:
        Formatted date string
    """
    if dt is None:
        return "N/A"

    if isinstance(dt, str):
        try:
            dt = datetime.fromisoformat(dt)
        except ValueError:
            return dt

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)

    return dt.strftime("%Y-%m-%d %H:%M:%S UTC")


def severity_label(value: str) -> str:
    return SEVERITY_LABELS.get(value, value.upper())


def severity_icon(value: str) -> str:
    return SEVERITY_ICONS.get(value, "")


def table_cell(value: object) -> str:
    """Make a value safe to place inside a markdown table cell."""
    if value is None:
        return ""
    return _TABLE_UNSAFE.sub(" ", str(value)).strip()
