"""QR check-in API router — used by the kiosk scanner.

No staff session is required; the signed token is the authorization. When a
staff bearer token is present its email is recorded as the actor.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_optional_staff
from app.models.staff import StaffMember
from app.schemas.checkin import CheckInConfirmResponse, CheckInTokenRequest, CheckInVerifyResponse
from app.services import checkin_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/checkin", tags=["checkin"])


@router.post("/verify", response_model=CheckInVerifyResponse, summary="Preview the booking behind a QR code")
async def verify_check_in(
    body: CheckInTokenRequest,
    db: AsyncSession = Depends(get_db),
) -> dict:
    booking = await checkin_service.verify_check_in(db, body.token)
    return {"booking": booking}


@router.post("/confirm", response_model=CheckInConfirmResponse, summary="Check a booking in from its QR code")
async def confirm_check_in(
    body: CheckInTokenRequest,
    db: AsyncSession = Depends(get_db),
    staff: StaffMember | None = Depends(get_optional_staff),
) -> dict:
    actor = staff.email if staff is not None else None
    booking = await checkin_service.confirm_check_in(db, body.token, actor=actor)
    return {"success": True, "booking": booking}
