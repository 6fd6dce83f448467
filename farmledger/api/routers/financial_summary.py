from fastapi import APIRouter, Depends, Query
from typing import Optional

from farmledger.api.core.errors import NotFoundError
from farmledger.api.repositories.financial_summary import (
    FinancialSummaryRepository,
    get_financial_summary_repository,
)
from farmledger.api.schemas.common import Envelope

router = APIRouter()


@router.get("/flocks", response_model=Envelope[list[dict]])
async def get_flock_summaries(
    flock_id: Optional[int] = Query(None, alias="flockId"),
    summaries: FinancialSummaryRepository = Depends(get_financial_summary_repository),
):
    """Financial rollup per flock, most profitable first"""
    return Envelope(
        data=await summaries.flocks(flock_id),
        message="Flock financial summaries retrieved successfully",
    )


@router.get("/animals", response_model=Envelope[list[dict]])
async def get_animal_summaries(
    animal_id: Optional[int] = Query(None, alias="animalId"),
    summaries: FinancialSummaryRepository = Depends(get_financial_summary_repository),
):
    return Envelope(
        data=await summaries.animals(animal_id),
        message="Animal financial summaries retrieved successfully",
    )


@router.get("/flocks/{flock_id}/metrics", response_model=Envelope[dict])
async def get_flock_metrics(
    flock_id: int,
    summaries: FinancialSummaryRepository = Depends(get_financial_summary_repository),
):
    """Flock rollup with average purchase price, sale price and days owned"""
    metrics = await summaries.flock_metrics(flock_id)
    if metrics is None:
        raise NotFoundError("Flock")
    return Envelope(data=metrics, message="Flock metrics retrieved successfully")


@router.get("/overall-metrics", response_model=Envelope[dict])
async def get_overall_metrics(
    summaries: FinancialSummaryRepository = Depends(get_financial_summary_repository),
):
    return Envelope(
        data=await summaries.overall_metrics(),
        message="Overall financial metrics retrieved successfully",
    )
