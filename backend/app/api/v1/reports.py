"""Reports API router — totals per day, month or year."""

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_staff, get_db
from app.models.staff import StaffMember
from app.schemas.report import ReportMode, ReportSummaryResponse
from app.services import report_service
from app.utils.business_time import business_today

router = APIRouter(prefix="/api/v1/reports", tags=["reports"])


@router.get("/summary", response_model=ReportSummaryResponse)
async def get_summary(
    mode: ReportMode = Query("day", description="Period length"),
    on: date | None = Query(None, alias="date", description="Any date inside the period; defaults to today"),
    db: AsyncSession = Depends(get_db),
    staff: StaffMember = Depends(get_current_staff),
) -> dict:
    """Count active and archived bookings dropped off in the period.

    Revenue excludes cancelled bookings.
    """
    return await report_service.summarize(db, mode, on or business_today())
