"""Token-gated check-in — the only transition a kiosk may trigger."""

import logging

from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.checkin_token import CHECKIN_TOKEN_TYPE, decode_checkin_token
from app.core.exceptions import UnauthorizedError
from app.database import store_operation
from app.domain.booking_state import CHECKED_IN
from app.models.booking import Booking
from app.services.booking_service import find_active_booking, transition_booking

logger = logging.getLogger(__name__)


def _reject(reason: str, *args: object) -> UnauthorizedError:
    logger.warning("Check-in token rejected: " + reason, *args)
    return UnauthorizedError()


async def _authorized_booking(db: AsyncSession, token: str) -> Booking:
    """Return the active booking a check-in token grants.

    Checks signature, expiry, purpose and that the booking is still active.
    Every failure raises the same ``UnauthorizedError``; the reason is only
    logged. Does not modify anything.
    """
    try:
        payload = decode_checkin_token(token)
    except JWTError as e:
        raise _reject("%s", e) from None

    if payload.get("type") != CHECKIN_TOKEN_TYPE:
        raise _reject("wrong purpose %r", payload.get("type"))

    booking_ref = payload.get("bookingRef")
    if not isinstance(booking_ref, str) or not booking_ref:
        raise _reject("missing bookingRef claim")

    booking = await find_active_booking(db, booking_ref)
    if booking is None:
        raise _reject("booking %s is not in the active store", booking_ref)

    return booking


@store_operation
async def authorize_check_in(db: AsyncSession, token: str) -> str:
    """Verify a check-in token and return the booking ref it grants."""
    booking = await _authorized_booking(db, token)
    return booking.booking_ref


@store_operation
async def verify_check_in(db: AsyncSession, token: str) -> Booking:
    """Return the booking behind a valid token for the kiosk preview."""
    return await _authorized_booking(db, token)


@store_operation
async def confirm_check_in(db: AsyncSession, token: str, actor: str | None = None) -> Booking:
    """Authorize the token, then apply ``paid -> checked_in``."""
    booking_ref = await authorize_check_in(db, token)
    return await transition_booking(db, booking_ref, CHECKED_IN, actor)
