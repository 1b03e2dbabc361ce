"""Active bookings API router — dashboard list, detail, transitions and notes.

Every endpoint requires an active staff member; their email is recorded as
the actor of any change.
"""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_staff, get_db
from app.models.booking import ArchivedBooking, Booking
from app.models.staff import StaffMember
from app.schemas.booking import (
    BookingListResponse,
    BookingResponse,
    BookingStatusLiteral,
    NotesUpdate,
    TransitionRequest,
)
from app.services import booking_service

router = APIRouter(prefix="/api/v1/bookings", tags=["bookings"])


@router.get(
    "",
    response_model=BookingListResponse,
    summary="List active bookings",
)
async def list_bookings(
    search: str | None = Query(None, max_length=100, description="Match ref, name, email or phone"),
    status_filter: BookingStatusLiteral | None = Query(None, alias="status", description="Filter by status"),
    date_filter: Literal["all", "today", "upcoming", "past"] = Query("all", description="Drop-off date window"),
    skip: int = Query(0, ge=0, description="Pagination offset"),
    limit: int = Query(20, ge=1, le=100, description="Pagination limit"),
    db: AsyncSession = Depends(get_db),
    staff: StaffMember = Depends(get_current_staff),
) -> dict:
    """Return a page of active bookings filtered in the store."""
    items, total = await booking_service.list_bookings(
        db,
        search=search,
        status=status_filter,
        date_filter=date_filter,
        skip=skip,
        limit=limit,
    )
    return {"items": items, "total": total}


@router.get(
    "/{booking_ref}",
    response_model=BookingResponse,
    summary="Get an active booking by reference",
)
async def get_booking(
    booking_ref: str,
    db: AsyncSession = Depends(get_db),
    staff: StaffMember = Depends(get_current_staff),
) -> Booking:
    return await booking_service.get_booking(db, booking_ref)


@router.post(
    "/{booking_ref}/transition",
    response_model=BookingResponse,
    summary="Change a booking's status",
)
async def transition_booking(
    booking_ref: str,
    body: TransitionRequest,
    db: AsyncSession = Depends(get_db),
    staff: StaffMember = Depends(get_current_staff),
) -> Booking | ArchivedBooking:
    """Apply a lifecycle transition.

    Moving to ``picked_up`` archives the booking; the response is then the
    archived record with ``archived_at`` set.
    """
    return await booking_service.transition_booking(db, booking_ref, body.status, actor=staff.email)


@router.patch(
    "/{booking_ref}/notes",
    response_model=BookingResponse,
    summary="Update staff notes",
)
async def update_notes(
    booking_ref: str,
    body: NotesUpdate,
    db: AsyncSession = Depends(get_db),
    staff: StaffMember = Depends(get_current_staff),
) -> Booking:
    return await booking_service.update_notes(db, booking_ref, body.notes, actor=staff.email)
