"""
Crop expense repository

Every write recomputes ``crops.total_expenses`` for the affected crop(s)
inside the same transaction as the expense change.
"""

from typing import Any, Mapping, Optional

from fastapi import Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from farmledger.api.core.database import get_db, transaction
from farmledger.api.models.crop import Crop
from farmledger.api.models.expense import Expense
from farmledger.api.repositories.base import Repository
from farmledger.utils.logger import get_logger

logger = get_logger(__name__)

EXPENSE_NUMERIC = ("amount",)

REFRESH_CROP_TOTAL = """
UPDATE crops
SET total_expenses = (
        SELECT COALESCE(SUM(amount), 0) FROM expenses WHERE crop_id = :crop_id
    ),
    updated_at = NOW()
WHERE id = :crop_id
"""

LIST_EXPENSES = """
SELECT e.*, c.name AS crop_name, c.type AS crop_type
FROM expenses e
LEFT JOIN crops c ON c.id = e.crop_id
ORDER BY e.date DESC, e.created_at DESC, e.id DESC
"""


class ExpenseRepository(Repository):
    model = Expense
    resource = "Expense"

    async def list_all(self) -> list[dict]:
        return await self.fetch_all(LIST_EXPENSES, numeric=EXPENSE_NUMERIC)

    async def recent(self, limit: int) -> list[dict]:
        return await self.fetch_all(
            LIST_EXPENSES + "LIMIT :limit",
            {"limit": limit},
            numeric=EXPENSE_NUMERIC,
        )

    async def refresh_crop_total(self, crop_id: int) -> None:
        await self.db.execute(text(REFRESH_CROP_TOTAL), {"crop_id": crop_id})

    async def create(self, values: Mapping[str, Any]) -> Expense:
        async with transaction(self.db):
            await self.require(Crop, values["crop_id"], "Crop")
            expense = Expense(**values)
            self.db.add(expense)
            await self.db.flush()
            await self.refresh_crop_total(expense.crop_id)
        await self.db.refresh(expense)
        logger.info(f"Expense {expense.id} recorded for crop {expense.crop_id}")
        return expense

    async def update(self, expense_id: int, values: Mapping[str, Any]) -> Optional[Expense]:
        async with transaction(self.db):
            expense = await self.get(expense_id)
            if expense is None:
                return None
            values = self.clean(values)
            old_crop_id = expense.crop_id
            new_crop_id = values.get("crop_id", old_crop_id)
            if new_crop_id != old_crop_id:
                await self.require(Crop, new_crop_id, "Crop")
            for field, value in values.items():
                setattr(expense, field, value)
            await self.db.flush()
            await self.refresh_crop_total(new_crop_id)
            if new_crop_id != old_crop_id:
                await self.refresh_crop_total(old_crop_id)
        await self.db.refresh(expense)
        return expense

    async def delete(self, expense_id: int) -> bool:
        async with transaction(self.db):
            expense = await self.get(expense_id)
            if expense is None:
                return False
            crop_id = expense.crop_id
            await self.db.delete(expense)
            await self.db.flush()
            await self.refresh_crop_total(crop_id)
        logger.info(f"Expense {expense_id} deleted from crop {crop_id}")
        return True


def get_expense_repository(db: AsyncSession = Depends(get_db)) -> ExpenseRepository:
    return ExpenseRepository(db)
