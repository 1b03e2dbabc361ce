"""Archive migrator — moves bookings from the active store to the archive.

Every migration is copy-then-delete inside one SAVEPOINT: the archive rows
are inserted first, then the active rows are deleted on the condition that
their status has not changed. Any failure rolls back both steps, so a
booking is never lost and never present in both stores.
"""

import logging
from datetime import timedelta

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError
from app.database import store_operation
from app.domain.booking_state import CANCELLED, PICKED_UP, SYSTEM_ACTOR, normalize_actor, utcnow
from app.models.booking import ArchivedBooking, Booking, booking_snapshot

logger = logging.getLogger(__name__)


async def _copy_to_archive(db: AsyncSession, records: list[dict]) -> list[ArchivedBooking]:
    """Insert archive rows. Raises ``IntegrityError`` on a duplicate ref."""
    copies = [ArchivedBooking(**record) for record in records]
    db.add_all(copies)
    await db.flush()
    return copies


async def _delete_active(db: AsyncSession, bookings: list[Booking], expected_status: str) -> int:
    """Delete active rows still in ``expected_status``; return how many went."""
    result = await db.execute(
        delete(Booking)
        .where(
            Booking.id.in_([b.id for b in bookings]),
            Booking.status == expected_status,
        )
        .execution_options(synchronize_session=False)
    )
    return result.rowcount


async def _migrate(
    db: AsyncSession,
    bookings: list[Booking],
    expected_status: str,
    actor: str,
    updates: dict | None = None,
) -> list[ArchivedBooking]:
    archived_at = utcnow()
    records = [
        {
            **booking_snapshot(booking),
            **(updates or {}),
            "archived_at": archived_at,
            "archived_by": actor,
        }
        for booking in bookings
    ]

    try:
        async with db.begin_nested():
            copies = await _copy_to_archive(db, records)
            deleted = await _delete_active(db, bookings, expected_status)
            if deleted != len(bookings):
                raise ConflictError(
                    f"{len(bookings) - deleted} booking(s) changed before they could be archived, reload and retry"
                )
    except IntegrityError as e:
        refs = ", ".join(b.booking_ref for b in bookings)
        logger.warning("Archive insert rejected for %s: %s", refs, e.orig)
        raise ConflictError(f"Booking already archived: {refs}") from e

    for booking in bookings:
        db.expunge(booking)
    return copies


@store_operation
async def migrate_booking(
    db: AsyncSession,
    booking: Booking,
    updates: dict,
    actor: str | None = None,
) -> ArchivedBooking:
    """Apply ``updates`` and move one booking to the archive atomically.

    Used by the lifecycle engine when a booking is picked up. ``updates`` are
    the transition fields; they land on the archive copy only.

    Raises:
        ConflictError: The active row changed or vanished concurrently, or
            the ref already exists in the archive.
    """
    actor = normalize_actor(actor)
    (archived,) = await _migrate(db, [booking], booking.status, actor, updates)
    logger.info("Archived booking %s (status=%s) by %s", archived.booking_ref, archived.status, actor)
    return archived


@store_operation
async def archive_stale(db: AsyncSession, cutoff_days: int, actor: str = SYSTEM_ACTOR) -> int:
    """Archive picked-up bookings older than ``cutoff_days`` in one batch.

    Catches up records that reached ``picked_up`` without being migrated.
    Running it again with nothing left to move returns 0.
    """
    cutoff = utcnow() - timedelta(days=cutoff_days)
    result = await db.execute(
        select(Booking).where(
            Booking.status == PICKED_UP,
            Booking.picked_up_at.is_not(None),
            Booking.picked_up_at <= cutoff,
        )
    )
    stale = list(result.scalars().all())
    if not stale:
        logger.info("No picked-up bookings older than %s days to archive", cutoff_days)
        return 0

    await _migrate(db, stale, PICKED_UP, normalize_actor(actor))
    logger.info("Archived %d picked-up booking(s) older than %s days", len(stale), cutoff_days)
    return len(stale)


@store_operation
async def archive_cancelled(db: AsyncSession, retention_days: int, actor: str = SYSTEM_ACTOR) -> int:
    """Archive cancelled bookings untouched for more than ``retention_days``."""
    cutoff = utcnow() - timedelta(days=retention_days)
    result = await db.execute(
        select(Booking).where(
            Booking.status == CANCELLED,
            Booking.updated_at <= cutoff,
        )
    )
    expired = list(result.scalars().all())
    if not expired:
        return 0

    await _migrate(db, expired, CANCELLED, normalize_actor(actor))
    logger.info("Archived %d cancelled booking(s) past %s days retention", len(expired), retention_days)
    return len(expired)
