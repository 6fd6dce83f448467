from datetime import date
from fastapi import APIRouter, Depends, Query
from typing import Optional

from farmledger.api.repositories.finance import FinanceRepository, get_finance_repository
from farmledger.api.schemas.common import Envelope
from farmledger.api.schemas.finance import ProfitLossReport, RoiAnalysis

router = APIRouter()


@router.get("/profit-loss", response_model=Envelope[ProfitLossReport])
async def get_profit_loss(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    finance: FinanceRepository = Depends(get_finance_repository),
):
    """
    Crop profit/loss report

    Revenue counts sold crops planted inside the window; expenses count
    expense rows dated inside it. Either bound may be omitted.
    """
    report = await finance.profit_loss(start_date, end_date)
    return Envelope(data=report, message="Profit/loss report generated successfully")


@router.get("/roi-analysis", response_model=Envelope[RoiAnalysis])
async def get_roi_analysis(
    period: str = Query("monthly"),
    finance: FinanceRepository = Depends(get_finance_repository),
):
    """ROI per planting week, month or quarter (period=weekly|monthly|quarterly)"""
    rows = await finance.roi_analysis(period)
    return Envelope(
        data=RoiAnalysis(period=period, analysis=rows),
        message="ROI analysis retrieved successfully",
    )


@router.get("/livestock-profit-loss", response_model=Envelope[dict])
async def get_livestock_profit_loss(
    flock_id: Optional[int] = Query(None, alias="flockId"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    finance: FinanceRepository = Depends(get_finance_repository),
):
    report = await finance.livestock_profit_loss(flock_id, start_date, end_date)
    return Envelope(data=report, message="Livestock profit/loss calculated successfully")
