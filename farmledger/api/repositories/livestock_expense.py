from datetime import date
from typing import Any, Mapping, Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from farmledger.api.core.database import get_db
from farmledger.api.core.filters import QueryFilters
from farmledger.api.models.flock import Flock
from farmledger.api.models.livestock import Livestock
from farmledger.api.models.livestock_expense import LivestockExpense
from farmledger.api.repositories.base import Repository

LIST_SQL = """
SELECT e.*, l.tag_id, f.name AS flock_name
FROM livestock_expenses e
LEFT JOIN livestock l ON l.id = e.livestock_id
LEFT JOIN flocks f ON f.id = COALESCE(e.flock_id, l.flock_id)
{where}
ORDER BY e.date DESC, e.id DESC
"""

FLOCK_SUMMARY_SQL = """
WITH expense_totals AS (
    SELECT COALESCE(e.flock_id, l.flock_id) AS flock_id,
           COUNT(*) AS expense_count,
           SUM(e.amount) AS total_expenses
    FROM livestock_expenses e
    LEFT JOIN livestock l ON l.id = e.livestock_id
    GROUP BY COALESCE(e.flock_id, l.flock_id)
),
animal_counts AS (
    SELECT flock_id, COUNT(*) AS animal_count
    FROM livestock
    WHERE flock_id IS NOT NULL
    GROUP BY flock_id
)
SELECT f.id AS flock_id,
       f.name AS flock_name,
       COALESCE(ac.animal_count, 0) AS animal_count,
       COALESCE(et.expense_count, 0) AS expense_count,
       COALESCE(et.total_expenses, 0) AS total_expenses,
       CASE
           WHEN COALESCE(ac.animal_count, 0) > 0
               THEN ROUND(COALESCE(et.total_expenses, 0) / ac.animal_count, 2)
           ELSE 0
       END AS avg_cost_per_animal
FROM flocks f
LEFT JOIN expense_totals et ON et.flock_id = f.id
LEFT JOIN animal_counts ac ON ac.flock_id = f.id
ORDER BY total_expenses DESC, f.name
"""


class LivestockExpenseRepository(Repository):
    model = LivestockExpense
    resource = "Livestock expense"

    async def list_all(self, flock_id: Optional[int] = None) -> list[dict]:
        filters = QueryFilters()
        filters.add("COALESCE(e.flock_id, l.flock_id) = :flock_id", flock_id=flock_id)
        return await self.fetch_all(
            LIST_SQL.format(where=filters.where()),
            filters.params,
            numeric=("amount",),
        )

    async def _check_owner(self, values: Mapping[str, Any]) -> None:
        await self.require(Flock, values.get("flock_id"), "Flock")
        await self.require(Livestock, values.get("livestock_id"), "Livestock")

    async def create(self, values: Mapping[str, Any]) -> LivestockExpense:
        await self._check_owner(values)
        return await super().create(values)

    async def update(self, expense_id: int, values: Mapping[str, Any]) -> Optional[LivestockExpense]:
        await self._check_owner(values)
        return await super().update(expense_id, values)

    async def category_summary(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[dict]:
        filters = QueryFilters()
        filters.add("date >= :start_date", start_date=start_date)
        filters.add("date <= :end_date", end_date=end_date)
        return await self.fetch_all(
            f"""
            SELECT category,
                   COUNT(*) AS expense_count,
                   COALESCE(SUM(amount), 0) AS total_amount,
                   COALESCE(AVG(amount), 0) AS average_amount,
                   COALESCE(MIN(amount), 0) AS min_amount,
                   COALESCE(MAX(amount), 0) AS max_amount
            FROM livestock_expenses
            {filters.where()}
            GROUP BY category
            ORDER BY total_amount DESC
            """,
            filters.params,
            numeric=("total_amount", "average_amount", "min_amount", "max_amount"),
            integer=("expense_count",),
        )

    async def flock_summary(self) -> list[dict]:
        return await self.fetch_all(
            FLOCK_SUMMARY_SQL,
            numeric=("total_expenses", "avg_cost_per_animal"),
            integer=("animal_count", "expense_count"),
        )


def get_livestock_expense_repository(
    db: AsyncSession = Depends(get_db),
) -> LivestockExpenseRepository:
    return LivestockExpenseRepository(db)
