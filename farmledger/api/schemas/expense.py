import datetime
from pydantic import BaseModel, Field
from typing import Optional, Literal

ExpenseCategory = Literal[
    "SEEDS", "FERTILIZERS", "PESTICIDES", "LABOR", "EQUIPMENT", "WATER", "OTHER"
]


class CropExpenseCreate(BaseModel):
    """Schema for an expense posted under /crops/{id}/expenses"""
    description: str = Field(..., min_length=1, max_length=255)
    category: ExpenseCategory = "OTHER"
    amount: float = Field(..., ge=0)
    date: datetime.date
    notes: Optional[str] = None


class ExpenseCreate(CropExpenseCreate):
    """Schema for creating an expense"""
    crop_id: int


class ExpenseUpdate(BaseModel):
    """Schema for updating an expense"""
    crop_id: Optional[int] = None
    description: Optional[str] = Field(None, min_length=1, max_length=255)
    category: Optional[ExpenseCategory] = None
    amount: Optional[float] = Field(None, ge=0)
    date: Optional[datetime.date] = None
    notes: Optional[str] = None


class ExpenseResponse(BaseModel):
    """Schema for expense response"""
    id: int
    crop_id: int
    description: str
    category: str
    amount: float
    date: datetime.date
    notes: Optional[str] = None
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None

    class Config:
        from_attributes = True


class ExpenseWithCrop(ExpenseResponse):
    """Expense row joined with its crop"""
    crop_name: Optional[str] = None
    crop_type: Optional[str] = None
