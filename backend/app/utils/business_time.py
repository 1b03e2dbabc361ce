"""Calendar helpers in the business timezone.

Bookings are stored in UTC, but "today", report periods and the drop-off
times in checkout metadata are all local to the luggage desk.
"""

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from app.config import settings


def business_zone() -> ZoneInfo:
    return ZoneInfo(settings.business_timezone)


def business_today() -> date:
    return datetime.now(business_zone()).date()


def local_to_utc(day: date, at: time = time.min) -> datetime:
    """Interpret ``day`` + ``at`` as business-local wall time and return UTC."""
    return datetime.combine(day, at, tzinfo=business_zone()).astimezone(timezone.utc)


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """UTC ``[start, end)`` covering one local calendar day."""
    return local_to_utc(day), local_to_utc(day + timedelta(days=1))


def period_bounds(mode: str, day: date) -> tuple[date, date]:
    """Local ``[start, end)`` dates of the day, month or year containing ``day``."""
    if mode == "day":
        return day, day + timedelta(days=1)
    if mode == "month":
        start = day.replace(day=1)
        end = start.replace(year=start.year + 1, month=1) if start.month == 12 else start.replace(month=start.month + 1)
        return start, end
    if mode == "year":
        start = day.replace(month=1, day=1)
        return start, start.replace(year=start.year + 1)
    raise ValueError(f"Unknown report mode: {mode}")


def parse_local_datetime(date_str: str | None, time_str: str | None) -> datetime | None:
    """Parse ``YYYY-MM-DD`` and ``HH:MM`` local strings into a UTC datetime.

    Returns ``None`` when either part is missing or malformed so that schema
    validation reports the field instead of a parser traceback.
    """
    if not date_str or not time_str:
        return None
    try:
        day = date.fromisoformat(date_str)
        at = time.fromisoformat(time_str)
    except ValueError:
        return None
    return local_to_utc(day, at)
