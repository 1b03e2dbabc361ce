"""Report service — booking counts and revenue across both stores."""

from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import store_operation
from app.domain.booking_state import BOOKING_STATUSES, CANCELLED
from app.models.booking import ArchivedBooking, Booking
from app.utils.business_time import local_to_utc, period_bounds


def _revenue(bookings: list) -> Decimal:
    return sum((b.total_paid for b in bookings if b.status != CANCELLED), Decimal("0"))


@store_operation
async def summarize(db: AsyncSession, mode: str, day: date) -> dict:
    """Aggregate bookings whose drop-off falls in the period containing ``day``."""
    period_start, period_end = period_bounds(mode, day)
    start, end = local_to_utc(period_start), local_to_utc(period_end)

    active_result = await db.execute(
        select(Booking).where(Booking.drop_off_at >= start, Booking.drop_off_at < end)
    )
    active = list(active_result.scalars().all())

    archived_result = await db.execute(
        select(ArchivedBooking).where(ArchivedBooking.drop_off_at >= start, ArchivedBooking.drop_off_at < end)
    )
    archived = list(archived_result.scalars().all())

    combined = active + archived
    by_status = {status: 0 for status in BOOKING_STATUSES}
    for booking in combined:
        by_status[booking.status] += 1

    return {
        "mode": mode,
        "period_start": period_start,
        "period_end": period_end,
        "total_bookings": len(combined),
        "revenue": _revenue(combined),
        "by_status": by_status,
        "breakdown": {
            "active": {"count": len(active), "revenue": _revenue(active)},
            "archived": {"count": len(archived), "revenue": _revenue(archived)},
        },
    }
