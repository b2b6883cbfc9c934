"""Aritmetica de fechas de calendario (sin hora ni zona horaria)."""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta

from dateutil import tz

_LOCAL_TZ = tz.tzlocal()
_ISO_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def today() -> date:
    """Current day from the local wall clock."""
    return datetime.now(tz=_LOCAL_TZ).date()


def shift(day: date, delta_days: int) -> date:
    """Move ``day`` by ``delta_days`` calendar days."""
    return day + timedelta(days=delta_days)


def is_future(day: date, reference: date | None = None) -> bool:
    """True when ``day`` is strictly after ``reference`` (default: today)."""
    return day > (reference if reference is not None else today())


def compare(a: date, b: date) -> int:
    return (a > b) - (a < b)


def parse_iso(text: str | None) -> date | None:
    """Parse a strict ``YYYY-MM-DD`` string.

    Returns:
        The calendar date, or None when the text is empty or malformed.
    """
    if not text:
        return None
    text = text.strip()
    if not _ISO_RE.match(text):
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def format_iso(day: date) -> str:
    return day.isoformat()


def format_label(day: date) -> str:
    """Display label ``MM.DD.YY``, always zero-padded."""
    return day.strftime("%m.%d.%y")
