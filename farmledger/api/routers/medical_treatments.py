from fastapi import APIRouter, Depends, Query, status

from farmledger.api.core.errors import NotFoundError
from farmledger.api.repositories.medical_treatment import (
    MedicalTreatmentRepository,
    get_medical_treatment_repository,
)
from farmledger.api.schemas.common import Envelope
from farmledger.api.schemas.medical_treatment import (
    MedicalTreatmentCreate,
    MedicalTreatmentResponse,
    MedicalTreatmentUpdate,
)

router = APIRouter()


@router.get("/", response_model=Envelope[list[dict]])
async def list_treatments(
    treatments: MedicalTreatmentRepository = Depends(get_medical_treatment_repository),
):
    return Envelope(data=await treatments.list_all(), message="Medical treatments retrieved successfully")


@router.get("/livestock/{livestock_id}", response_model=Envelope[list[dict]])
async def list_animal_treatments(
    livestock_id: int,
    treatments: MedicalTreatmentRepository = Depends(get_medical_treatment_repository),
):
    return Envelope(
        data=await treatments.for_livestock(livestock_id),
        message="Medical treatments retrieved successfully",
    )


@router.get("/upcoming", response_model=Envelope[list[dict]])
async def upcoming_treatments(
    days: int = Query(7, ge=0, le=365),
    treatments: MedicalTreatmentRepository = Depends(get_medical_treatment_repository),
):
    """Follow-up treatments due within the next `days` days"""
    return Envelope(
        data=await treatments.upcoming(days),
        message="Upcoming treatments retrieved successfully",
    )


@router.post("/", response_model=Envelope[MedicalTreatmentResponse], status_code=status.HTTP_201_CREATED)
async def create_treatment(
    treatment_data: MedicalTreatmentCreate,
    treatments: MedicalTreatmentRepository = Depends(get_medical_treatment_repository),
):
    treatment = await treatments.create(treatment_data.model_dump())
    return Envelope(
        data=MedicalTreatmentResponse.model_validate(treatment),
        message="Medical treatment recorded successfully",
    )


@router.put("/{treatment_id}", response_model=Envelope[MedicalTreatmentResponse])
async def update_treatment(
    treatment_id: int,
    treatment_data: MedicalTreatmentUpdate,
    treatments: MedicalTreatmentRepository = Depends(get_medical_treatment_repository),
):
    treatment = await treatments.update(
        treatment_id, treatment_data.model_dump(exclude_unset=True)
    )
    if treatment is None:
        raise NotFoundError("Medical treatment")
    return Envelope(
        data=MedicalTreatmentResponse.model_validate(treatment),
        message="Medical treatment updated successfully",
    )


@router.delete("/{treatment_id}", response_model=Envelope[None])
async def delete_treatment(
    treatment_id: int,
    treatments: MedicalTreatmentRepository = Depends(get_medical_treatment_repository),
):
    if not await treatments.delete(treatment_id):
        raise NotFoundError("Medical treatment")
    return Envelope(message="Medical treatment deleted successfully")
