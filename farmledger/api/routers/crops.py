from fastapi import APIRouter, Depends, Query, status
from typing import Optional

from farmledger.api.core.errors import NotFoundError
from farmledger.api.repositories.crop import CropRepository, get_crop_repository
from farmledger.api.repositories.expense import ExpenseRepository, get_expense_repository
from farmledger.api.schemas.common import Envelope
from farmledger.api.schemas.crop import (
    CropCreate,
    CropResponse,
    CropStatus,
    CropStatusUpdate,
    CropUpdate,
)
from farmledger.api.schemas.expense import CropExpenseCreate, ExpenseResponse

router = APIRouter()


@router.get("/", response_model=Envelope[list[CropResponse]])
async def list_crops(
    status_filter: Optional[CropStatus] = Query(None, alias="status"),
    q: Optional[str] = Query(None, max_length=100),
    crops: CropRepository = Depends(get_crop_repository),
):
    """
    List crops, newest planting first

    Filters:
    - status: exact crop status (PLANNED, GROWING, SOLD, ...)
    - q: search in name, type and variety
    """
    rows = await crops.list_all(status=status_filter, q=q)
    return Envelope(
        data=[CropResponse.model_validate(c) for c in rows],
        message="Crops retrieved successfully",
    )


@router.get("/active", response_model=Envelope[list[CropResponse]])
async def list_active_crops(crops: CropRepository = Depends(get_crop_repository)):
    """Crops that are planted, growing or ready for harvest"""
    rows = await crops.list_active()
    return Envelope(
        data=[CropResponse.model_validate(c) for c in rows],
        message="Active crops retrieved successfully",
    )


@router.get("/{crop_id}", response_model=Envelope[CropResponse])
async def get_crop(crop_id: int, crops: CropRepository = Depends(get_crop_repository)):
    crop = await crops.get(crop_id)
    if crop is None:
        raise NotFoundError("Crop")
    return Envelope(data=CropResponse.model_validate(crop), message="Crop retrieved successfully")


@router.post("/", response_model=Envelope[CropResponse], status_code=status.HTTP_201_CREATED)
async def create_crop(
    crop_data: CropCreate,
    crops: CropRepository = Depends(get_crop_repository),
):
    crop = await crops.create(crop_data.model_dump())
    return Envelope(data=CropResponse.model_validate(crop), message="Crop created successfully")


@router.put("/{crop_id}", response_model=Envelope[CropResponse])
async def update_crop(
    crop_id: int,
    crop_data: CropUpdate,
    crops: CropRepository = Depends(get_crop_repository),
):
    """Update the supplied fields of a crop"""
    crop = await crops.update(crop_id, crop_data.model_dump(exclude_unset=True))
    if crop is None:
        raise NotFoundError("Crop")
    return Envelope(data=CropResponse.model_validate(crop), message="Crop updated successfully")


@router.patch("/{crop_id}/status", response_model=Envelope[CropResponse])
async def update_crop_status(
    crop_id: int,
    status_data: CropStatusUpdate,
    crops: CropRepository = Depends(get_crop_repository),
):
    crop = await crops.set_status(crop_id, status_data.status)
    if crop is None:
        raise NotFoundError("Crop")
    return Envelope(
        data=CropResponse.model_validate(crop),
        message="Crop status updated successfully",
    )


@router.delete("/{crop_id}", response_model=Envelope[None])
async def delete_crop(crop_id: int, crops: CropRepository = Depends(get_crop_repository)):
    """Delete a crop together with its expenses"""
    if not await crops.delete(crop_id):
        raise NotFoundError("Crop")
    return Envelope(message="Crop deleted successfully")


@router.get("/{crop_id}/expenses", response_model=Envelope[list[ExpenseResponse]])
async def list_crop_expenses(
    crop_id: int,
    crops: CropRepository = Depends(get_crop_repository),
):
    if await crops.get(crop_id) is None:
        raise NotFoundError("Crop")
    rows = await crops.list_expenses(crop_id)
    return Envelope(
        data=[ExpenseResponse.model_validate(e) for e in rows],
        message="Crop expenses retrieved successfully",
    )


@router.post(
    "/{crop_id}/expenses",
    response_model=Envelope[ExpenseResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_crop_expense(
    crop_id: int,
    expense_data: CropExpenseCreate,
    expenses: ExpenseRepository = Depends(get_expense_repository),
):
    """Record an expense against this crop and refresh its expense total"""
    expense = await expenses.create({**expense_data.model_dump(), "crop_id": crop_id})
    return Envelope(
        data=ExpenseResponse.model_validate(expense),
        message="Expense added successfully",
    )
