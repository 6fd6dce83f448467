from datetime import date
from fastapi import APIRouter, Depends, Query, status
from typing import Optional

from farmledger.api.core.errors import NotFoundError
from farmledger.api.repositories.livestock_expense import (
    LivestockExpenseRepository,
    get_livestock_expense_repository,
)
from farmledger.api.schemas.common import Envelope
from farmledger.api.schemas.livestock_expense import (
    LivestockExpenseCreate,
    LivestockExpenseResponse,
    LivestockExpenseUpdate,
)

router = APIRouter()


@router.get("/", response_model=Envelope[list[dict]])
async def list_livestock_expenses(
    expenses: LivestockExpenseRepository = Depends(get_livestock_expense_repository),
):
    return Envelope(data=await expenses.list_all(), message="Livestock expenses retrieved successfully")


@router.get("/flock/{flock_id}", response_model=Envelope[list[dict]])
async def list_flock_expenses(
    flock_id: int,
    expenses: LivestockExpenseRepository = Depends(get_livestock_expense_repository),
):
    """Expenses booked to the flock or to any of its animals"""
    return Envelope(
        data=await expenses.list_all(flock_id=flock_id),
        message="Flock expenses retrieved successfully",
    )


@router.get("/reports/summary", response_model=Envelope[list[dict]])
async def expense_category_summary(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    expenses: LivestockExpenseRepository = Depends(get_livestock_expense_repository),
):
    """Count, total, average, min and max per expense category"""
    return Envelope(
        data=await expenses.category_summary(start_date, end_date),
        message="Expense summary retrieved successfully",
    )


@router.get("/reports/flock-summary", response_model=Envelope[list[dict]])
async def expense_flock_summary(
    expenses: LivestockExpenseRepository = Depends(get_livestock_expense_repository),
):
    return Envelope(
        data=await expenses.flock_summary(),
        message="Flock expense summary retrieved successfully",
    )


@router.get("/{expense_id}", response_model=Envelope[LivestockExpenseResponse])
async def get_livestock_expense(
    expense_id: int,
    expenses: LivestockExpenseRepository = Depends(get_livestock_expense_repository),
):
    expense = await expenses.get(expense_id)
    if expense is None:
        raise NotFoundError("Livestock expense")
    return Envelope(
        data=LivestockExpenseResponse.model_validate(expense),
        message="Livestock expense retrieved successfully",
    )


@router.post("/", response_model=Envelope[LivestockExpenseResponse], status_code=status.HTTP_201_CREATED)
async def create_livestock_expense(
    expense_data: LivestockExpenseCreate,
    expenses: LivestockExpenseRepository = Depends(get_livestock_expense_repository),
):
    expense = await expenses.create(expense_data.model_dump())
    return Envelope(
        data=LivestockExpenseResponse.model_validate(expense),
        message="Livestock expense created successfully",
    )


@router.put("/{expense_id}", response_model=Envelope[LivestockExpenseResponse])
async def update_livestock_expense(
    expense_id: int,
    expense_data: LivestockExpenseUpdate,
    expenses: LivestockExpenseRepository = Depends(get_livestock_expense_repository),
):
    expense = await expenses.update(expense_id, expense_data.model_dump(exclude_unset=True))
    if expense is None:
        raise NotFoundError("Livestock expense")
    return Envelope(
        data=LivestockExpenseResponse.model_validate(expense),
        message="Livestock expense updated successfully",
    )


@router.delete("/{expense_id}", response_model=Envelope[None])
async def delete_livestock_expense(
    expense_id: int,
    expenses: LivestockExpenseRepository = Depends(get_livestock_expense_repository),
):
    if not await expenses.delete(expense_id):
        raise NotFoundError("Livestock expense")
    return Envelope(message="Livestock expense deleted successfully")
