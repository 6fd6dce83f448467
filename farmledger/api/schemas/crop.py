from pydantic import BaseModel, Field
from typing import Optional, Literal
from datetime import date, datetime

CropStatus = Literal[
    "PLANNED", "PLANTED", "GROWING", "READY_FOR_HARVEST", "HARVESTED", "SOLD", "FAILED"
]
AreaUnit = Literal["ACRES", "HECTARES", "SQUARE_METERS"]
YieldUnit = Literal["TONS", "KILOGRAMS", "POUNDS", "BUSHELS"]


class CropCreate(BaseModel):
    """Schema for creating a crop"""
    name: str = Field(..., min_length=1, max_length=255)
    type: str = Field(..., min_length=1, max_length=100)
    variety: Optional[str] = None
    planting_date: date
    expected_harvest_date: Optional[date] = None
    actual_harvest_date: Optional[date] = None
    area: float = Field(0, ge=0)
    area_unit: AreaUnit = "ACRES"
    expected_yield: float = Field(0, ge=0)
    actual_yield: Optional[float] = Field(None, ge=0)
    yield_unit: YieldUnit = "KILOGRAMS"
    market_price: float = Field(0, ge=0)
    status: CropStatus = "PLANNED"
    field_location: Optional[str] = None
    notes: Optional[str] = None


class CropUpdate(BaseModel):
    """Schema for updating a crop; total_expenses is maintained server side"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[str] = Field(None, min_length=1, max_length=100)
    variety: Optional[str] = None
    planting_date: Optional[date] = None
    expected_harvest_date: Optional[date] = None
    actual_harvest_date: Optional[date] = None
    area: Optional[float] = Field(None, ge=0)
    area_unit: Optional[AreaUnit] = None
    expected_yield: Optional[float] = Field(None, ge=0)
    actual_yield: Optional[float] = Field(None, ge=0)
    yield_unit: Optional[YieldUnit] = None
    market_price: Optional[float] = Field(None, ge=0)
    status: Optional[CropStatus] = None
    field_location: Optional[str] = None
    notes: Optional[str] = None


class CropStatusUpdate(BaseModel):
    status: CropStatus


class CropResponse(BaseModel):
    """Schema for crop response"""
    id: int
    name: str
    type: str
    variety: Optional[str] = None
    planting_date: date
    expected_harvest_date: Optional[date] = None
    actual_harvest_date: Optional[date] = None
    area: float
    area_unit: str
    expected_yield: float
    actual_yield: Optional[float] = None
    yield_unit: Optional[str] = None
    market_price: float
    total_expenses: float
    status: str
    field_location: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
