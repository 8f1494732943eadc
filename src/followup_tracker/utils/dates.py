"""Local-time helpers for reminder scheduling and promise dates."""

from __future__ import annotations

from datetime import date, datetime, tzinfo
from zoneinfo import ZoneInfo

from tzlocal import get_localzone

from ..config import settings


def local_zone() -> tzinfo:
    """Zone used for reminders: the configured one, otherwise the system zone."""
    if settings.timezone:
        return ZoneInfo(settings.timezone)
    # A named zone, so DST rules apply to future dates
    return get_localzone()


def local_now() -> datetime:
    return datetime.now(local_zone())


def local_today() -> date:
    return local_now().date()


def format_date(value: date) -> str:
    return value.isoformat()


def parse_date(text: str) -> date:
    """Parse a YYYY-MM-DD calendar date; raises ValueError on anything else."""
    return date.fromisoformat(text.strip())
