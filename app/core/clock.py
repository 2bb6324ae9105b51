"""Clock helpers"""
from datetime import datetime, timezone
from typing import Callable
from zoneinfo import ZoneInfo

from app.config import settings


Clock = Callable[[], datetime]


def system_clock() -> datetime:
    """Current time in the configured timezone."""
    tz = timezone.utc if settings.TIMEZONE == "UTC" else ZoneInfo(settings.TIMEZONE)
    return datetime.now(tz)


def fixed_clock(moment: datetime) -> Clock:
    """Clock that always returns ``moment`` (made timezone-aware)."""
    aware = ensure_aware(moment)
    return lambda: aware


def ensure_aware(value: datetime) -> datetime:
    """Interpret naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
