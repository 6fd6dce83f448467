from pydantic import BaseModel, Field
from typing import Optional, Literal
from datetime import date, datetime

LivestockStatus = Literal["active", "sold", "deceased", "transferred"]
# Only the sale transaction moves an animal to sold
UnsoldStatus = Literal["active", "deceased", "transferred"]
Gender = Literal["male", "female", "unknown"]
PaymentMethod = Literal["cash", "check", "bank_transfer", "mobile_money", "credit", "other"]


class LivestockCreate(BaseModel):
    """Schema for registering an animal"""
    tag_id: str = Field(..., min_length=1, max_length=100)
    species: str = Field(..., min_length=1, max_length=100)
    flock_id: Optional[int] = None
    breed: Optional[str] = None
    gender: Gender = "unknown"
    date_of_birth: Optional[date] = None
    status: UnsoldStatus = "active"
    purchase_price: Optional[float] = Field(None, ge=0)
    purchase_date: Optional[date] = None
    weight_at_purchase: Optional[float] = Field(None, ge=0)
    current_weight: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None


class LivestockUpdate(BaseModel):
    """
    Schema for updating an animal

    Sale columns are not accepted here; selling goes through
    POST /livestock/{id}/sale so the sales ledger stays in step.
    """
    tag_id: Optional[str] = Field(None, min_length=1, max_length=100)
    species: Optional[str] = Field(None, min_length=1, max_length=100)
    flock_id: Optional[int] = None
    breed: Optional[str] = None
    gender: Optional[Gender] = None
    date_of_birth: Optional[date] = None
    status: Optional[UnsoldStatus] = None
    purchase_price: Optional[float] = Field(None, ge=0)
    purchase_date: Optional[date] = None
    weight_at_purchase: Optional[float] = Field(None, ge=0)
    current_weight: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None


class LivestockSaleRequest(BaseModel):
    """Schema for selling one animal"""
    sale_price: float = Field(..., ge=0)
    sale_date: date
    sale_reason: Optional[str] = None
    customer_name: Optional[str] = None
    customer_contact: Optional[str] = None
    payment_method: PaymentMethod = "cash"
    notes: Optional[str] = None


class WeightUpdate(BaseModel):
    current_weight: float = Field(..., gt=0)


class LivestockResponse(BaseModel):
    """Schema for livestock response"""
    id: int
    flock_id: Optional[int] = None
    tag_id: str
    species: str
    breed: Optional[str] = None
    gender: str
    date_of_birth: Optional[date] = None
    status: str
    purchase_price: Optional[float] = None
    purchase_date: Optional[date] = None
    sale_price: Optional[float] = None
    sale_date: Optional[date] = None
    sale_reason: Optional[str] = None
    weight_at_purchase: Optional[float] = None
    current_weight: Optional[float] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
