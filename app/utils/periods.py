"""Calendar period boundaries"""
from datetime import datetime, timedelta

from app.schemas.statistics import StatisticsPeriod


def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_month(moment: datetime) -> datetime:
    return start_of_day(moment).replace(day=1)


def add_months(moment: datetime, months: int) -> datetime:
    """Shift a first-of-month datetime by ``months`` calendar months."""
    index = moment.year * 12 + (moment.month - 1) + months
    return moment.replace(year=index // 12, month=index % 12 + 1)


def resolve_date_range(
    period: StatisticsPeriod,
    now: datetime,
    first_weekday: int = 0,
) -> tuple[datetime, datetime]:
    """
    Half-open ``[start, end)`` range of the period containing ``now``.

    Boundaries are wall-clock times in ``now``'s timezone.

    Args:
        period: day, week, month or year
        now: Reference moment
        first_weekday: First day of the week (0 = Monday ... 6 = Sunday)

    Returns:
        (start, end) tuple
    """
    day = start_of_day(now)

    if period == StatisticsPeriod.DAY:
        return day, day + timedelta(days=1)

    if period == StatisticsPeriod.WEEK:
        start = day - timedelta(days=(day.weekday() - first_weekday) % 7)
        return start, start + timedelta(days=7)

    if period == StatisticsPeriod.MONTH:
        start = start_of_month(now)
        return start, add_months(start, 1)

    if period == StatisticsPeriod.YEAR:
        start = start_of_month(now).replace(month=1)
        return start, start.replace(year=start.year + 1)

    raise ValueError(f"Unsupported period: {period}")
