import datetime
from pydantic import BaseModel, Field, model_validator
from typing import Optional


class LivestockExpenseCreate(BaseModel):
    """Schema for recording a livestock expense against a flock or animal"""
    flock_id: Optional[int] = None
    livestock_id: Optional[int] = None
    description: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1, max_length=50)
    amount: float = Field(..., ge=0)
    date: datetime.date
    notes: Optional[str] = None

    @model_validator(mode="after")
    def require_owner(self):
        if self.flock_id is None and self.livestock_id is None:
            raise ValueError("flock_id or livestock_id is required")
        return self


class LivestockExpenseUpdate(BaseModel):
    flock_id: Optional[int] = None
    livestock_id: Optional[int] = None
    description: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1, max_length=50)
    amount: Optional[float] = Field(None, ge=0)
    date: Optional[datetime.date] = None
    notes: Optional[str] = None


class LivestockExpenseResponse(BaseModel):
    """Schema for livestock expense response"""
    id: int
    flock_id: Optional[int] = None
    livestock_id: Optional[int] = None
    description: str
    category: str
    amount: float
    date: datetime.date
    notes: Optional[str] = None
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None

    class Config:
        from_attributes = True
