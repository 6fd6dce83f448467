"""
Response schemas for the crop profit/loss report

These fields are published in camelCase; every other payload in the API uses
snake_case column names.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProfitLossSummary(CamelModel):
    total_revenue: float = 0.0
    total_expenses: float = 0.0
    net_profit: float = 0.0
    roi: float = 0.0
    sold_crops_count: int = 0
    expense_count: int = 0


class CropRoi(CamelModel):
    id: int
    name: str
    type: Optional[str] = None
    revenue: float
    total_expenses: float
    net_profit: float
    roi_percentage: float


class Timeframe(CamelModel):
    start_date: str
    end_date: str


class ProfitLossReport(CamelModel):
    """Crop profit/loss for a date window"""
    summary: ProfitLossSummary
    roi_by_crop: list[CropRoi]
    timeframe: Timeframe


class RoiAnalysis(BaseModel):
    """ROI buckets for one period granularity"""
    period: str
    analysis: list[dict]
