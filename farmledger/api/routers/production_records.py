from fastapi import APIRouter, Depends, Query, status
from typing import Optional

from farmledger.api.core.errors import NotFoundError
from farmledger.api.repositories.production import ProductionRepository, get_production_repository
from farmledger.api.schemas.common import Envelope
from farmledger.api.schemas.production import ProductionRecordCreate, ProductionRecordResponse

router = APIRouter()


@router.get("/", response_model=Envelope[list[dict]])
async def list_production_records(
    production: ProductionRepository = Depends(get_production_repository),
):
    return Envelope(data=await production.list_all(), message="Production records retrieved successfully")


@router.get("/flock/{flock_id}", response_model=Envelope[list[dict]])
async def list_flock_production(
    flock_id: int,
    production: ProductionRepository = Depends(get_production_repository),
):
    return Envelope(
        data=await production.list_all(flock_id=flock_id),
        message="Production records retrieved successfully",
    )


@router.get("/summary", response_model=Envelope[list[dict]])
async def production_summary(
    flock_id: Optional[int] = Query(None, alias="flockId"),
    production: ProductionRepository = Depends(get_production_repository),
):
    """Quantity, record count and revenue per product type"""
    return Envelope(
        data=await production.summary(flock_id),
        message="Production summary retrieved successfully",
    )


@router.post("/", response_model=Envelope[ProductionRecordResponse], status_code=status.HTTP_201_CREATED)
async def create_production_record(
    record_data: ProductionRecordCreate,
    production: ProductionRepository = Depends(get_production_repository),
):
    record = await production.create(record_data.model_dump())
    return Envelope(
        data=ProductionRecordResponse.model_validate(record),
        message="Production record created successfully",
    )


@router.delete("/{record_id}", response_model=Envelope[None])
async def delete_production_record(
    record_id: int,
    production: ProductionRepository = Depends(get_production_repository),
):
    if not await production.delete(record_id):
        raise NotFoundError("Production record")
    return Envelope(message="Production record deleted successfully")
