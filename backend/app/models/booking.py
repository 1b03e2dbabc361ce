"""Booking models — the active store and the archive store.

Both tables share one column layout. An archived row is the active row
copied verbatim plus ``archived_at`` / ``archived_by``.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base, UUIDPrimaryKeyMixin
from app.domain.booking_state import BOOKING_STATUSES, PAID

_STATUS_CHECK = "status IN ({})".format(", ".join(f"'{s}'" for s in BOOKING_STATUSES))


class BookingFieldsMixin:
    """Columns shared by active and archived bookings."""

    booking_ref: Mapped[str] = mapped_column(String(12), unique=True, index=True, nullable=False)
    stripe_session_id: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default=PAID, index=True, nullable=False)

    # Customer contact
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_email: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_phone: Mapped[str] = mapped_column(String(50), nullable=False)

    # Logistics
    drop_off_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    pick_up_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    billable_days: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    bags_small: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    bags_medium: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    bags_large: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    notes: Mapped[str] = mapped_column(Text, default="", nullable=False)
    wallet_issued: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Payment
    total_paid: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), default="eur", nullable=False)

    # Lifecycle
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )
    checked_in_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    checked_in_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    picked_up_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, index=True)
    picked_up_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    cancelled_by: Mapped[str | None] = mapped_column(String(255), nullable=True)

    @property
    def total_bags(self) -> int:
        return self.bags_small + self.bags_medium + self.bags_large


class Booking(UUIDPrimaryKeyMixin, BookingFieldsMixin, Base):
    """A booking that has not been picked up yet (the active store)."""

    __tablename__ = "bookings"
    __table_args__ = (CheckConstraint(_STATUS_CHECK, name="ck_bookings_status"),)

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, ref={self.booking_ref}, status={self.status})>"


class ArchivedBooking(UUIDPrimaryKeyMixin, BookingFieldsMixin, Base):
    """A read-only booking moved out of the active store."""

    __tablename__ = "bookings_archive"
    __table_args__ = (CheckConstraint(_STATUS_CHECK, name="ck_bookings_archive_status"),)

    archived_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    archived_by: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<ArchivedBooking(id={self.id}, ref={self.booking_ref}, status={self.status})>"


def booking_snapshot(booking: Booking) -> dict:
    """Return every column of an active booking as a plain dict."""
    return {column.key: getattr(booking, column.key) for column in Booking.__table__.columns}
