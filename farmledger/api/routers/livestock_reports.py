from datetime import date
from fastapi import APIRouter, Depends, Query
from typing import Optional

from farmledger.api.repositories.livestock_report import (
    LivestockReportRepository,
    get_livestock_report_repository,
)
from farmledger.api.schemas.common import Envelope

router = APIRouter()


@router.get("/comprehensive", response_model=Envelope[dict])
async def get_comprehensive_report(
    flock_id: Optional[int] = Query(None, alias="flockId"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    reports: LivestockReportRepository = Depends(get_livestock_report_repository),
):
    """
    Flock finances, production totals and expense breakdown side by side

    The date window applies to production records and livestock expenses.
    """
    report = await reports.comprehensive(flock_id, start_date, end_date)
    return Envelope(data=report, message="Comprehensive livestock report generated successfully")


@router.get("/roi-analysis", response_model=Envelope[list[dict]])
async def get_livestock_roi(
    flock_id: Optional[int] = Query(None, alias="flockId"),
    reports: LivestockReportRepository = Depends(get_livestock_report_repository),
):
    return Envelope(
        data=await reports.roi_analysis(flock_id),
        message="ROI analysis retrieved successfully",
    )
