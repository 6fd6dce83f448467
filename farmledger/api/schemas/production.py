from pydantic import BaseModel, Field
from typing import Optional, Literal
from datetime import date, datetime

ProductType = Literal["eggs", "milk", "meat", "wool", "other"]


class ProductionRecordCreate(BaseModel):
    """Schema for logging production"""
    flock_id: int
    livestock_id: Optional[int] = None
    product_type: ProductType
    quantity: float = Field(..., ge=0)
    unit: str = Field(..., min_length=1, max_length=20)
    record_date: date
    quality_notes: Optional[str] = None
    sale_price: Optional[float] = Field(None, ge=0)


class ProductionRecordResponse(BaseModel):
    """Schema for production record response"""
    id: int
    flock_id: int
    livestock_id: Optional[int] = None
    product_type: str
    quantity: float
    unit: str
    record_date: date
    quality_notes: Optional[str] = None
    sale_price: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
