"""Pydantic v2 request/response schemas for booking endpoints."""

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

BOOKING_REF_PATTERN = r"^[A-Z0-9]{6,12}$"

BookingStatusLiteral = Literal["paid", "checked_in", "picked_up", "cancelled"]


def normalize_booking_ref(ref: str) -> str:
    """Booking refs are matched case-insensitively and stored uppercase."""
    return ref.strip().upper()


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class BookingCreate(BaseModel):
    """A confirmed payment, ready to become a ``paid`` booking.

    Every field is validated; nothing is defaulted from a missing value except
    the bag counts, which the checkout omits when zero.
    """

    booking_ref: str = Field(..., pattern=BOOKING_REF_PATTERN)
    stripe_session_id: str = Field(..., min_length=1, max_length=255)
    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_email: EmailStr
    customer_phone: str = Field("", max_length=50)
    drop_off_at: datetime
    pick_up_at: datetime
    billable_days: int = Field(..., ge=1)
    bags_small: int = Field(0, ge=0)
    bags_medium: int = Field(0, ge=0)
    bags_large: int = Field(0, ge=0)
    total_paid: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    currency: str = Field("eur", min_length=3, max_length=3)

    @field_validator("booking_ref", mode="before")
    @classmethod
    def _normalize_ref(cls, value: object) -> object:
        return normalize_booking_ref(value) if isinstance(value, str) else value

    @field_validator("currency")
    @classmethod
    def _lower_currency(cls, value: str) -> str:
        return value.lower()

    @field_validator("drop_off_at", "pick_up_at")
    @classmethod
    def _require_timezone(cls, value: datetime) -> datetime:
        """Store times in UTC; naive values are ambiguous and rejected."""
        if value.tzinfo is None:
            raise ValueError("datetime must include a timezone")
        return value.astimezone(timezone.utc)

    @model_validator(mode="after")
    def _check_window(self) -> "BookingCreate":
        if self.pick_up_at <= self.drop_off_at:
            raise ValueError("pick_up_at must be after drop_off_at")
        if self.bags_small + self.bags_medium + self.bags_large < 1:
            raise ValueError("booking must include at least one bag")
        return self


class TransitionRequest(BaseModel):
    """Requested status change for a booking."""

    status: BookingStatusLiteral


class NotesUpdate(BaseModel):
    """Replace the staff notes on an active booking."""

    notes: str = Field(..., max_length=5000)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BookingResponse(BaseModel):
    """A booking from either store; ``archived_at`` is set only for archived ones."""

    id: uuid.UUID
    booking_ref: str
    stripe_session_id: str
    status: BookingStatusLiteral
    customer_name: str
    customer_email: str
    customer_phone: str
    drop_off_at: datetime
    pick_up_at: datetime
    billable_days: int
    bags_small: int
    bags_medium: int
    bags_large: int
    total_bags: int
    notes: str
    wallet_issued: bool
    total_paid: Decimal
    currency: str
    created_at: datetime
    updated_at: datetime
    checked_in_at: datetime | None = None
    checked_in_by: str | None = None
    picked_up_at: datetime | None = None
    picked_up_by: str | None = None
    cancelled_by: str | None = None
    archived_at: datetime | None = None
    archived_by: str | None = None

    model_config = ConfigDict(from_attributes=True)


class BookingListResponse(BaseModel):
    """Paginated list of bookings."""

    items: list[BookingResponse]
    total: int
