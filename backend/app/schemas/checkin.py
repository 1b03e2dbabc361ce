"""Pydantic v2 schemas for the QR check-in kiosk endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.booking import BookingStatusLiteral


class CheckInTokenRequest(BaseModel):
    """A scanned QR code payload."""

    token: str = Field(..., min_length=1)


class CheckInBookingSummary(BaseModel):
    """What the kiosk shows after a successful scan."""

    booking_ref: str
    customer_name: str
    bags_small: int
    bags_medium: int
    bags_large: int
    drop_off_at: datetime
    status: BookingStatusLiteral

    model_config = ConfigDict(from_attributes=True)


class CheckInVerifyResponse(BaseModel):
    booking: CheckInBookingSummary


class CheckInConfirmResponse(BaseModel):
    success: bool
    booking: CheckInBookingSummary
