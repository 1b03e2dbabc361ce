"""Seed the database with a staff member and sample luggage bookings.

Creates missing tables, then inserts bookings through the same payment
intake used by the Stripe webhook, so re-running the script is harmless.
Prints a staff bearer token and a QR check-in token for local testing.

Run from the backend directory:
    python -m scripts.seed_data
"""

import asyncio
import sys
from datetime import time, timedelta
from decimal import Decimal
from pathlib import Path

# Add backend to path so imports work when run as a script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import select

import app.models  # noqa: F401  (registers every table on Base.metadata)
from app.auth.checkin_token import create_checkin_token
from app.auth.jwt import create_access_token
from app.core.exceptions import InvalidTransitionError
from app.database import Base, async_session_factory, engine
from app.domain.booking_state import CANCELLED, CHECKED_IN
from app.models.staff import StaffMember
from app.schemas.booking import BookingCreate
from app.services.booking_service import create_booking_from_payment, transition_booking
from app.utils.business_time import business_today, local_to_utc

DEMO_STAFF = {
    "email": "desk@luggagedesk.test",
    "name": "Front Desk",
}

# (ref, name, email, phone, days from today, billable days, small, medium, large, amount)
BOOKINGS = [
    ("RM7K2QX9", "Giulia Rossi", "giulia.rossi@example.com", "+393331234567", 0, 1, 1, 1, 0, "12.00"),
    ("RM4HZ81T", "Liam O'Brien", "liam.obrien@example.com", "+353871112223", 0, 2, 0, 2, 1, "36.00"),
    ("RM9PW3LC", "Sofia Almeida", "sofia.almeida@example.com", "", 1, 1, 2, 0, 0, "10.00"),
    ("RM2DF6YA", "Kenji Sato", "kenji.sato@example.com", "+81901234567", 3, 3, 0, 0, 2, "54.00"),
    ("RM5NB0VE", "Amelia Clarke", "amelia.clarke@example.com", "+447700900123", -2, 1, 1, 0, 0, "5.00"),
]

# Refs moved along the lifecycle after creation.
TRANSITIONS = {
    "RM7K2QX9": [CHECKED_IN],
    "RM5NB0VE": [CANCELLED],
}


def _payload(row: tuple) -> BookingCreate:
    ref, name, email, phone, offset, days, small, medium, large, amount = row

    day = business_today() + timedelta(days=offset)
    return BookingCreate(
        booking_ref=ref,
        stripe_session_id=f"cs_test_seed_{ref.lower()}",
        customer_name=name,
        customer_email=email,
        customer_phone=phone,
        drop_off_at=local_to_utc(day, time(9, 30)),
        pick_up_at=local_to_utc(day + timedelta(days=days - 1), time(18, 0)),
        billable_days=days,
        bags_small=small,
        bags_medium=medium,
        bags_large=large,
        total_paid=Decimal(amount),
        currency="eur",
    )


async def seed() -> None:
    """Create tables, the demo staff member and the sample bookings."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session_factory() as session:
        result = await session.execute(select(StaffMember).where(StaffMember.email == DEMO_STAFF["email"]))
        if result.scalar_one_or_none() is None:
            session.add(StaffMember(**DEMO_STAFF, is_active=True))
            await session.flush()
            print(f"✅ Created staff member: {DEMO_STAFF['email']}")

        created = 0
        for row in BOOKINGS:
            booking, was_created = await create_booking_from_payment(session, _payload(row))
            created += int(was_created)
            print(f"   🧳 {booking.booking_ref} — {booking.customer_name} ({booking.status})")

        for ref, targets in TRANSITIONS.items():
            for target in targets:
                try:
                    await transition_booking(session, ref, target, actor=DEMO_STAFF["email"])
                except InvalidTransitionError:
                    # Already moved on a previous run.
                    pass

        await session.commit()

    print(f"✅ Created {created} bookings")
    print()
    print("=" * 60)
    print("Staff token:   ", create_access_token({"sub": DEMO_STAFF["email"]}, expires_delta=timedelta(days=1)))
    print("Check-in token:", create_checkin_token("RM9PW3LC"))
    print("=" * 60)

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed())
