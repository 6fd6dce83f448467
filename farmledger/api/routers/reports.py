from datetime import date
from fastapi import APIRouter, Depends, Query
from typing import Optional

from farmledger.api.core.errors import NotFoundError
from farmledger.api.repositories.report import ReportRepository, get_report_repository
from farmledger.api.schemas.common import Envelope

router = APIRouter()


@router.get("/analytics", response_model=Envelope[dict])
async def get_farm_analytics(reports: ReportRepository = Depends(get_report_repository)):
    """Crop totals, type/status distribution, monthly expenses and top spenders"""
    return Envelope(data=await reports.analytics(), message="Farm analytics retrieved successfully")


@router.get("/crop-performance/{crop_id}", response_model=Envelope[dict])
async def get_crop_performance(
    crop_id: int,
    reports: ReportRepository = Depends(get_report_repository),
):
    performance = await reports.crop_performance(crop_id)
    if performance is None:
        raise NotFoundError("Crop")
    return Envelope(data=performance, message="Crop performance retrieved successfully")


@router.get("/financial", response_model=Envelope[dict])
async def get_financial_report(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    reports: ReportRepository = Depends(get_report_repository),
):
    return Envelope(
        data=await reports.financial(start_date, end_date),
        message="Financial report retrieved successfully",
    )
