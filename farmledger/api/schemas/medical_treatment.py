from pydantic import BaseModel, Field, model_validator
from typing import Optional
from datetime import date, datetime


class MedicalTreatmentCreate(BaseModel):
    """Schema for recording a treatment"""
    livestock_id: Optional[int] = None
    flock_id: Optional[int] = None
    treatment_type: str = Field(..., min_length=1, max_length=100)
    medication_name: Optional[str] = None
    dosage: Optional[str] = None
    administration_method: Optional[str] = None
    treatment_date: date
    next_treatment_date: Optional[date] = None
    veterinarian: Optional[str] = None
    cost: float = Field(0, ge=0)
    notes: Optional[str] = None

    @model_validator(mode="after")
    def require_subject(self):
        if self.livestock_id is None and self.flock_id is None:
            raise ValueError("livestock_id or flock_id is required")
        return self


class MedicalTreatmentUpdate(BaseModel):
    livestock_id: Optional[int] = None
    flock_id: Optional[int] = None
    treatment_type: Optional[str] = Field(None, min_length=1, max_length=100)
    medication_name: Optional[str] = None
    dosage: Optional[str] = None
    administration_method: Optional[str] = None
    treatment_date: Optional[date] = None
    next_treatment_date: Optional[date] = None
    veterinarian: Optional[str] = None
    cost: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None


class MedicalTreatmentResponse(BaseModel):
    """Schema for treatment response"""
    id: int
    livestock_id: Optional[int] = None
    flock_id: Optional[int] = None
    treatment_type: str
    medication_name: Optional[str] = None
    dosage: Optional[str] = None
    administration_method: Optional[str] = None
    treatment_date: date
    next_treatment_date: Optional[date] = None
    veterinarian: Optional[str] = None
    cost: float
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
