"""Stripe webhook event handlers — turn paid checkouts into bookings."""

import logging
from decimal import Decimal

import stripe
from sqlalchemy.ext.asyncio import AsyncSession

from app.schemas.booking import BookingCreate
from app.services.booking_service import create_booking_from_payment
from app.utils.business_time import parse_local_datetime

logger = logging.getLogger(__name__)


def _amount_from_minor(amount: int | None) -> Decimal | None:
    """Convert Stripe minor units (cents) to a decimal amount."""
    if amount is None:
        return None
    return Decimal(amount) / Decimal(100)


def booking_payload_from_session(session) -> BookingCreate:
    """Build a validated booking payload from a Checkout Session.

    Raises:
        pydantic.ValidationError: Metadata or customer details are missing
            or malformed.
    """
    metadata = session.metadata or {}
    details = session.customer_details

    data = {
        "booking_ref": metadata.get("bookingRef"),
        "stripe_session_id": session.id,
        "customer_name": getattr(details, "name", None),
        "customer_email": getattr(details, "email", None),
        "customer_phone": getattr(details, "phone", None) or "",
        "drop_off_at": parse_local_datetime(metadata.get("dropOffDate"), metadata.get("dropOffTime")),
        "pick_up_at": parse_local_datetime(metadata.get("pickUpDate"), metadata.get("pickUpTime")),
        "billable_days": metadata.get("billableDays"),
        "total_paid": _amount_from_minor(session.amount_total),
        "currency": session.currency or "eur",
    }
    for field, key in (("bags_small", "bagsSmall"), ("bags_medium", "bagsMedium"), ("bags_large", "bagsLarge")):
        if metadata.get(key) not in (None, ""):
            data[field] = metadata.get(key)

    return BookingCreate.model_validate(data)


async def handle_checkout_session_completed(db: AsyncSession, event: stripe.Event) -> str:
    """Handle a completed (or asynchronously paid) checkout session.

    Returns ``processed`` for a new booking, ``duplicate`` for a re-delivery
    and ``ignored`` when the session is not paid yet.
    """
    session = event.data.object

    if session.payment_status != "paid":
        logger.info("Checkout session %s not paid (%s), skipping", session.id, session.payment_status)
        return "ignored"

    payload = booking_payload_from_session(session)
    booking, created = await create_booking_from_payment(db, payload)
    if not created:
        return "duplicate"

    logger.info("Checkout %s created booking %s", session.id, booking.booking_ref)
    return "processed"
