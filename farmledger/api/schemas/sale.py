from pydantic import BaseModel, Field, model_validator
from typing import Optional, Literal
from datetime import date, datetime

from farmledger.api.schemas.livestock import PaymentMethod

SaleType = Literal["animal", "product"]


class SaleCreate(BaseModel):
    """
    Schema for recording a sale

    total_amount defaults to quantity * unit_price. An animal sale must name
    the animal being sold.
    """
    sale_type: SaleType
    livestock_id: Optional[int] = None
    flock_id: Optional[int] = None
    sale_date: date
    description: str = Field(..., min_length=1)
    quantity: float = Field(1, gt=0)
    unit_price: float = Field(..., ge=0)
    total_amount: Optional[float] = Field(None, ge=0)
    customer_name: Optional[str] = None
    customer_contact: Optional[str] = None
    payment_method: PaymentMethod = "cash"
    notes: Optional[str] = None

    @model_validator(mode="after")
    def fill_total(self):
        if self.total_amount is None:
            self.total_amount = round(self.quantity * self.unit_price, 2)
        return self


class SaleResponse(BaseModel):
    """Schema for sale response"""
    id: int
    livestock_id: Optional[int] = None
    flock_id: Optional[int] = None
    sale_type: str
    sale_date: date
    description: str
    quantity: float
    unit_price: float
    total_amount: float
    customer_name: Optional[str] = None
    customer_contact: Optional[str] = None
    payment_method: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
