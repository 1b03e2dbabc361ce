"""Booking service — payment intake, lookups, notes and lifecycle transitions."""

import logging
from datetime import date

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, NotFoundError
from app.database import store_operation
from app.domain.booking_state import PAID, apply_transition, normalize_actor, requires_archive, utcnow
from app.models.booking import ArchivedBooking, Booking
from app.schemas.booking import BookingCreate, normalize_booking_ref
from app.services.archive_service import migrate_booking
from app.utils.business_time import business_today, day_bounds

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


async def find_active_booking(db: AsyncSession, booking_ref: str) -> Booking | None:
    result = await db.execute(select(Booking).where(Booking.booking_ref == normalize_booking_ref(booking_ref)))
    return result.scalar_one_or_none()


async def find_archived_booking(db: AsyncSession, booking_ref: str) -> ArchivedBooking | None:
    result = await db.execute(
        select(ArchivedBooking).where(ArchivedBooking.booking_ref == normalize_booking_ref(booking_ref))
    )
    return result.scalar_one_or_none()


@store_operation
async def get_booking(db: AsyncSession, booking_ref: str) -> Booking:
    """Return the active booking for ``booking_ref`` or raise ``NotFoundError``."""
    booking = await find_active_booking(db, booking_ref)
    if booking is None:
        raise NotFoundError("Active booking", normalize_booking_ref(booking_ref))
    return booking


@store_operation
async def get_archived_booking(db: AsyncSession, booking_ref: str) -> ArchivedBooking:
    """Return the archived booking for ``booking_ref`` or raise ``NotFoundError``."""
    booking = await find_archived_booking(db, booking_ref)
    if booking is None:
        raise NotFoundError("Archived booking", normalize_booking_ref(booking_ref))
    return booking


def _search_clause(model: type[Booking] | type[ArchivedBooking], search: str):
    # Literal substring match; % and _ in the input are not wildcards.
    term = search.strip()
    return or_(
        model.booking_ref.icontains(term, autoescape=True),
        model.customer_name.icontains(term, autoescape=True),
        model.customer_email.icontains(term, autoescape=True),
        model.customer_phone.icontains(term, autoescape=True),
    )


@store_operation
async def list_bookings(
    db: AsyncSession,
    search: str | None = None,
    status: str | None = None,
    date_filter: str = "all",
    skip: int = 0,
    limit: int = 20,
    today: date | None = None,
) -> tuple[list[Booking], int]:
    """Filter active bookings in the store and return ``(page, total)``.

    ``date_filter`` compares the drop-off date with the local business day:
    ``today``, ``upcoming`` (after today) or ``past`` (before today).
    """
    conditions = []
    if search:
        conditions.append(_search_clause(Booking, search))
    if status is not None:
        conditions.append(Booking.status == status)
    if date_filter != "all":
        start, end = day_bounds(today or business_today())
        if date_filter == "today":
            conditions.extend([Booking.drop_off_at >= start, Booking.drop_off_at < end])
        elif date_filter == "upcoming":
            conditions.append(Booking.drop_off_at >= end)
        elif date_filter == "past":
            conditions.append(Booking.drop_off_at < start)
        else:
            raise ValueError(f"Unknown date filter: {date_filter}")

    total_result = await db.execute(select(func.count()).select_from(Booking).where(*conditions))
    total = total_result.scalar_one()

    result = await db.execute(
        select(Booking).where(*conditions).order_by(Booking.drop_off_at.desc()).offset(skip).limit(limit)
    )
    return list(result.scalars().all()), total


@store_operation
async def list_archived_bookings(
    db: AsyncSession,
    search: str | None = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[ArchivedBooking], int]:
    """Page through the archive, newest archived first."""
    conditions = [_search_clause(ArchivedBooking, search)] if search else []

    total_result = await db.execute(select(func.count()).select_from(ArchivedBooking).where(*conditions))
    total = total_result.scalar_one()

    result = await db.execute(
        select(ArchivedBooking)
        .where(*conditions)
        .order_by(ArchivedBooking.archived_at.desc())
        .offset(skip)
        .limit(limit)
    )
    return list(result.scalars().all()), total


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------


@store_operation
async def create_booking_from_payment(
    db: AsyncSession, payload: BookingCreate
) -> tuple[Booking | ArchivedBooking, bool]:
    """Insert a ``paid`` booking unless its ref already exists in either store.

    Returns ``(booking, created)``. Re-delivered confirmations return the
    existing record untouched.
    """
    existing = await find_active_booking(db, payload.booking_ref) or await find_archived_booking(
        db, payload.booking_ref
    )
    if existing is not None:
        if existing.stripe_session_id != payload.stripe_session_id:
            logger.warning(
                "Booking %s already exists for session %s, ignoring session %s",
                payload.booking_ref,
                existing.stripe_session_id,
                payload.stripe_session_id,
            )
        else:
            logger.info("Duplicate payment confirmation for booking %s ignored", payload.booking_ref)
        return existing, False

    booking = Booking(**payload.model_dump(), status=PAID)
    try:
        async with db.begin_nested():
            db.add(booking)
            await db.flush()
    except IntegrityError as e:
        # A concurrent delivery inserted the same ref first.
        existing = await find_active_booking(db, payload.booking_ref)
        if existing is None:
            raise ConflictError(f"Booking '{payload.booking_ref}' could not be created, retry") from e
        return existing, False

    await db.refresh(booking)
    logger.info("Created booking %s from payment session %s", booking.booking_ref, booking.stripe_session_id)
    return booking, True


@store_operation
async def update_notes(db: AsyncSession, booking_ref: str, notes: str, actor: str | None = None) -> Booking:
    """Replace the staff notes on an active booking."""
    booking = await get_booking(db, booking_ref)
    result = await db.execute(
        update(Booking)
        .where(Booking.id == booking.id)
        .values(notes=notes, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise ConflictError(f"Booking '{booking.booking_ref}' was archived while saving notes")

    await db.refresh(booking)
    logger.info("Notes updated on booking %s by %s", booking.booking_ref, normalize_actor(actor))
    return booking


@store_operation
async def transition_booking(
    db: AsyncSession,
    booking_ref: str,
    target: str,
    actor: str | None = None,
) -> Booking | ArchivedBooking:
    """Move a booking to ``target`` and persist the side effects atomically.

    The update is conditional on the status that was read, so of two
    concurrent transitions on the same booking only one lands; the other
    gets ``ConflictError``. Entering ``picked_up`` migrates the booking to
    the archive and returns the archived record.

    Raises:
        NotFoundError: No active booking has this ref.
        InvalidTransitionError: ``target`` is not reachable from the current status.
        ConflictError: The booking changed between read and write.
    """
    booking = await get_booking(db, booking_ref)
    current = booking.status
    fields = apply_transition(current, target, actor)

    if requires_archive(target):
        archived = await migrate_booking(db, booking, fields, actor)
        logger.info("Booking %s: %s -> %s by %s", archived.booking_ref, current, target, normalize_actor(actor))
        return archived

    result = await db.execute(
        update(Booking)
        .where(Booking.id == booking.id, Booking.status == current)
        .values(**fields)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        logger.warning("Lost update on booking %s: %s -> %s", booking.booking_ref, current, target)
        raise ConflictError(f"Booking '{booking.booking_ref}' changed while moving to {target}, reload and retry")

    await db.refresh(booking)
    logger.info("Booking %s: %s -> %s by %s", booking.booking_ref, current, target, normalize_actor(actor))
    return booking
