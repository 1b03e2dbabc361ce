"""Archive API router — reporting reads and housekeeping migrations."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_staff, get_db
from app.config import settings
from app.models.booking import ArchivedBooking
from app.models.staff import StaffMember
from app.schemas.archive import ArchiveRequest, ArchiveResult
from app.schemas.booking import BookingListResponse, BookingResponse
from app.services import archive_service, booking_service

router = APIRouter(prefix="/api/v1/archive", tags=["archive"])


@router.get("", response_model=BookingListResponse, summary="List archived bookings")
async def list_archived_bookings(
    search: str | None = Query(None, max_length=100, description="Match ref, name, email or phone"),
    skip: int = Query(0, ge=0, description="Pagination offset"),
    limit: int = Query(20, ge=1, le=100, description="Pagination limit"),
    db: AsyncSession = Depends(get_db),
    staff: StaffMember = Depends(get_current_staff),
) -> dict:
    items, total = await booking_service.list_archived_bookings(db, search=search, skip=skip, limit=limit)
    return {"items": items, "total": total}


@router.get("/{booking_ref}", response_model=BookingResponse, summary="Get an archived booking")
async def get_archived_booking(
    booking_ref: str,
    db: AsyncSession = Depends(get_db),
    staff: StaffMember = Depends(get_current_staff),
) -> ArchivedBooking:
    return await booking_service.get_archived_booking(db, booking_ref)


@router.post("/stale", response_model=ArchiveResult, summary="Archive old picked-up bookings")
async def archive_stale(
    body: ArchiveRequest,
    db: AsyncSession = Depends(get_db),
    staff: StaffMember = Depends(get_current_staff),
) -> ArchiveResult:
    """Move every picked-up booking older than ``days`` into the archive."""
    days = body.days if body.days is not None else settings.archive_cutoff_days
    count = await archive_service.archive_stale(db, days, actor=staff.email)
    if count == 0:
        return ArchiveResult(count=0, message="No bookings match criteria.")
    return ArchiveResult(count=count, message=f"Archived {count} booking(s) picked up more than {days} day(s) ago.")


@router.post("/cancelled", response_model=ArchiveResult, summary="Archive expired cancelled bookings")
async def archive_cancelled(
    body: ArchiveRequest,
    db: AsyncSession = Depends(get_db),
    staff: StaffMember = Depends(get_current_staff),
) -> ArchiveResult:
    """Apply the cancelled-booking retention rule.

    Without ``days`` in the request or ``CANCELLED_RETENTION_DAYS`` in the
    environment, cancelled bookings stay in the active store.
    """
    days = body.days if body.days is not None else settings.cancelled_retention_days
    if days is None:
        return ArchiveResult(count=0, message="No retention configured; cancelled bookings are kept.")

    count = await archive_service.archive_cancelled(db, days, actor=staff.email)
    return ArchiveResult(count=count, message=f"Archived {count} cancelled booking(s) older than {days} day(s).")
