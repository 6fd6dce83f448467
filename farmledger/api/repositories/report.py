from datetime import date
from typing import Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from farmledger.api.core.database import get_db
from farmledger.api.core.filters import QueryFilters
from farmledger.api.repositories.base import Repository
from farmledger.api.repositories.finance import timeframe

CROP_TOTALS = """
SELECT COUNT(*) AS total_crops,
       COUNT(*) FILTER (WHERE status IN ('PLANTED', 'GROWING', 'READY_FOR_HARVEST')) AS active_crops,
       COALESCE(SUM(area), 0) AS total_area,
       COALESCE(SUM(total_expenses), 0) AS total_expenses,
       COALESCE(SUM(expected_yield * market_price), 0) AS projected_revenue
FROM crops
"""
CROP_TOTALS_NUMERIC = ("total_area", "total_expenses", "projected_revenue")
CROP_TOTALS_COUNTS = ("total_crops", "active_crops")


class ReportRepository(Repository):

    async def analytics(self) -> dict:
        """Farm-wide crop dashboard"""
        summary = await self.fetch_one(
            CROP_TOTALS, numeric=CROP_TOTALS_NUMERIC, integer=CROP_TOTALS_COUNTS
        )
        crop_distribution = await self.fetch_all(
            """
            SELECT type, COUNT(*) AS count, COALESCE(SUM(area), 0) AS total_area
            FROM crops
            GROUP BY type
            ORDER BY count DESC, type
            """,
            numeric=("total_area",),
            integer=("count",),
        )
        status_distribution = await self.fetch_all(
            """
            SELECT status, COUNT(*) AS count
            FROM crops
            GROUP BY status
            ORDER BY count DESC, status
            """,
            integer=("count",),
        )
        monthly_expenses = await self.fetch_all(
            """
            SELECT TO_CHAR(date, 'YYYY-MM') AS month,
                   COALESCE(SUM(amount), 0) AS total_expenses,
                   COUNT(*) AS expense_count
            FROM expenses
            GROUP BY 1
            ORDER BY 1 DESC
            LIMIT 12
            """,
            numeric=("total_expenses",),
            integer=("expense_count",),
        )
        top_crops = await self.fetch_all(
            """
            SELECT c.id, c.name, c.type, c.total_expenses,
                   COALESCE(e.expense_count, 0) AS expense_count
            FROM crops c
            LEFT JOIN (
                SELECT crop_id, COUNT(*) AS expense_count
                FROM expenses
                GROUP BY crop_id
            ) e ON e.crop_id = c.id
            ORDER BY c.total_expenses DESC, c.id
            LIMIT 10
            """,
            numeric=("total_expenses",),
            integer=("expense_count",),
        )
        return {
            "summary": summary,
            "crop_distribution": crop_distribution,
            "status_distribution": status_distribution,
            "monthly_expenses": monthly_expenses,
            "top_crops_by_expenses": top_crops,
        }

    async def crop_performance(self, crop_id: int) -> Optional[dict]:
        """Expense statistics for one crop; None when the crop does not exist"""
        performance = await self.fetch_one(
            """
            SELECT c.*,
                   COALESCE(e.expense_count, 0) AS expense_count,
                   COALESCE(e.avg_expense_amount, 0) AS avg_expense_amount,
                   c.expected_yield * c.market_price AS projected_revenue,
                   c.expected_yield * c.market_price - c.total_expenses AS projected_profit
            FROM crops c
            LEFT JOIN (
                SELECT crop_id, COUNT(*) AS expense_count, AVG(amount) AS avg_expense_amount
                FROM expenses
                WHERE crop_id = :crop_id
                GROUP BY crop_id
            ) e ON e.crop_id = c.id
            WHERE c.id = :crop_id
            """,
            {"crop_id": crop_id},
            numeric=(
                "area", "expected_yield", "actual_yield", "market_price", "total_expenses",
                "avg_expense_amount", "projected_revenue", "projected_profit",
            ),
            integer=("expense_count",),
        )
        if performance is None:
            return None
        breakdown = await self.fetch_all(
            """
            SELECT category,
                   COALESCE(SUM(amount), 0) AS total_amount,
                   COUNT(*) AS transaction_count
            FROM expenses
            WHERE crop_id = :crop_id
            GROUP BY category
            ORDER BY total_amount DESC
            """,
            {"crop_id": crop_id},
            numeric=("total_amount",),
            integer=("transaction_count",),
        )
        return {"performance": performance, "expense_breakdown": breakdown}

    async def financial(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> dict:
        """
        Projected revenue and profit per crop with yield statistics

        The date window narrows the per-crop expense counts only; projections
        always use the crop's cached expense total.
        """
        expense_filters = QueryFilters()
        expense_filters.add("date >= :start_date", start_date=start_date)
        expense_filters.add("date <= :end_date", end_date=end_date)

        crops = await self.fetch_all(
            f"""
            SELECT c.id,
                   c.name AS crop_name,
                   c.type AS crop_type,
                   c.expected_yield,
                   c.market_price,
                   c.expected_yield * c.market_price AS projected_revenue,
                   c.total_expenses,
                   c.expected_yield * c.market_price - c.total_expenses AS projected_profit,
                   COALESCE(e.expense_count, 0) AS expense_count
            FROM crops c
            LEFT JOIN (
                SELECT crop_id, COUNT(*) AS expense_count
                FROM expenses
                {expense_filters.where()}
                GROUP BY crop_id
            ) e ON e.crop_id = c.id
            ORDER BY projected_profit DESC, c.id
            """,
            expense_filters.params,
            numeric=(
                "expected_yield", "market_price", "projected_revenue",
                "total_expenses", "projected_profit",
            ),
            integer=("expense_count",),
        )
        totals = await self.fetch_one(
            CROP_TOTALS, numeric=CROP_TOTALS_NUMERIC, integer=CROP_TOTALS_COUNTS
        )
        yields = await self.fetch_one(
            """
            SELECT COALESCE(AVG(expected_yield), 0) AS avg_expected_yield,
                   COALESCE(AVG(actual_yield), 0) AS avg_actual_yield,
                   COUNT(actual_yield) AS harvested_crops_count,
                   COALESCE(SUM(actual_yield), 0) AS total_actual_yield
            FROM crops
            WHERE status IN ('HARVESTED', 'SOLD')
            """,
            numeric=("avg_expected_yield", "avg_actual_yield", "total_actual_yield"),
            integer=("harvested_crops_count",),
        )
        summary = {
            **totals,
            **yields,
            "total_projected_revenue": totals["projected_revenue"],
            "total_projected_profit": round(
                totals["projected_revenue"] - totals["total_expenses"], 2
            ),
        }
        return {
            "summary": summary,
            "crops": crops,
            "period": timeframe(start_date, end_date),
        }


def get_report_repository(db: AsyncSession = Depends(get_db)) -> ReportRepository:
    return ReportRepository(db)
