"""Pydantic v2 schemas for the reports endpoint."""

from datetime import date
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel

ReportMode = Literal["day", "month", "year"]


class StatusCounts(BaseModel):
    paid: int = 0
    checked_in: int = 0
    picked_up: int = 0
    cancelled: int = 0


class StoreBreakdown(BaseModel):
    """Bookings and revenue coming from one store."""

    count: int
    revenue: Decimal


class ReportBreakdown(BaseModel):
    active: StoreBreakdown
    archived: StoreBreakdown


class ReportSummaryResponse(BaseModel):
    """Totals for bookings whose drop-off falls inside the period."""

    mode: ReportMode
    period_start: date
    period_end: date  # exclusive
    total_bookings: int
    revenue: Decimal  # cancelled bookings excluded
    by_status: StatusCounts
    breakdown: ReportBreakdown
