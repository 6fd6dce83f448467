from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime


class FlockCreate(BaseModel):
    """Schema for creating a flock"""
    name: str = Field(..., min_length=1, max_length=255)
    breed: Optional[str] = None
    description: Optional[str] = None
    purchase_date: Optional[date] = None
    total_purchase_cost: Optional[float] = Field(None, ge=0)


class FlockUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    breed: Optional[str] = None
    description: Optional[str] = None
    purchase_date: Optional[date] = None
    total_purchase_cost: Optional[float] = Field(None, ge=0)


class FlockResponse(BaseModel):
    """Schema for flock response"""
    id: int
    name: str
    breed: Optional[str] = None
    description: Optional[str] = None
    purchase_date: Optional[date] = None
    total_purchase_cost: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class FlockStats(BaseModel):
    """Headcount and spend for one flock"""
    flock_id: int
    animal_count: int
    active_count: int
    total_expenses: float
