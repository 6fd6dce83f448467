from fastapi import APIRouter, Depends, Query, status

from farmledger.api.config import settings
from farmledger.api.core.errors import NotFoundError
from farmledger.api.repositories.expense import ExpenseRepository, get_expense_repository
from farmledger.api.schemas.common import Envelope
from farmledger.api.schemas.expense import (
    ExpenseCreate,
    ExpenseResponse,
    ExpenseUpdate,
    ExpenseWithCrop,
)

router = APIRouter()


@router.get("/", response_model=Envelope[list[ExpenseWithCrop]])
async def list_expenses(expenses: ExpenseRepository = Depends(get_expense_repository)):
    """All crop expenses with their crop name, newest first"""
    return Envelope(data=await expenses.list_all(), message="Expenses retrieved successfully")


@router.get("/recent", response_model=Envelope[list[ExpenseWithCrop]])
async def recent_expenses(
    limit: int = Query(settings.RECENT_ITEMS_DEFAULT, ge=1, le=settings.RECENT_ITEMS_MAX),
    expenses: ExpenseRepository = Depends(get_expense_repository),
):
    return Envelope(
        data=await expenses.recent(limit),
        message="Recent expenses retrieved successfully",
    )


@router.post("/", response_model=Envelope[ExpenseResponse], status_code=status.HTTP_201_CREATED)
async def create_expense(
    expense_data: ExpenseCreate,
    expenses: ExpenseRepository = Depends(get_expense_repository),
):
    expense = await expenses.create(expense_data.model_dump())
    return Envelope(
        data=ExpenseResponse.model_validate(expense),
        message="Expense created successfully",
    )


@router.put("/{expense_id}", response_model=Envelope[ExpenseResponse])
async def update_expense(
    expense_id: int,
    expense_data: ExpenseUpdate,
    expenses: ExpenseRepository = Depends(get_expense_repository),
):
    """Update an expense; moving it to another crop refreshes both crops' totals"""
    expense = await expenses.update(expense_id, expense_data.model_dump(exclude_unset=True))
    if expense is None:
        raise NotFoundError("Expense")
    return Envelope(
        data=ExpenseResponse.model_validate(expense),
        message="Expense updated successfully",
    )


@router.delete("/{expense_id}", response_model=Envelope[None])
async def delete_expense(
    expense_id: int,
    expenses: ExpenseRepository = Depends(get_expense_repository),
):
    if not await expenses.delete(expense_id):
        raise NotFoundError("Expense")
    return Envelope(message="Expense deleted successfully")
