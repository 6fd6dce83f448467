"""
Flock and animal rollups read from the financial summary views
"""

from typing import Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from farmledger.api.core.database import get_db
from farmledger.api.core.filters import QueryFilters
from farmledger.api.core.shaping import percentage
from farmledger.api.repositories.base import Repository

FLOCK_NUMERIC = (
    "total_purchase_cost", "total_sale_revenue", "total_production_revenue",
    "total_expenses", "total_medical_costs", "net_profit_loss", "roi_percentage",
)
FLOCK_COUNTS = ("total_animals", "active_animals", "sold_animals")

ANIMAL_NUMERIC = (
    "purchase_price", "sale_price", "sale_revenue", "total_production_revenue",
    "total_expenses", "total_medical_costs", "net_profit_loss", "roi_percentage",
)


class FinancialSummaryRepository(Repository):

    async def flocks(self, flock_id: Optional[int] = None) -> list[dict]:
        filters = QueryFilters().add("flock_id = :flock_id", flock_id=flock_id)
        return await self.fetch_all(
            f"""
            SELECT *
            FROM flock_financial_summary
            {filters.where()}
            ORDER BY net_profit_loss DESC, flock_id
            """,
            filters.params,
            numeric=FLOCK_NUMERIC,
            integer=FLOCK_COUNTS,
        )

    async def animals(self, animal_id: Optional[int] = None) -> list[dict]:
        filters = QueryFilters().add("animal_id = :animal_id", animal_id=animal_id)
        return await self.fetch_all(
            f"""
            SELECT *
            FROM animal_financial_summary
            {filters.where()}
            ORDER BY net_profit_loss DESC, animal_id
            """,
            filters.params,
            numeric=ANIMAL_NUMERIC,
            integer=("days_owned",),
        )

    async def flock_metrics(self, flock_id: int) -> Optional[dict]:
        """Flock rollup plus per-animal averages; None when the flock is missing"""
        return await self.fetch_one(
            """
            SELECT v.*,
                   COALESCE(a.avg_purchase_price, 0) AS avg_purchase_price,
                   COALESCE(a.avg_sale_price, 0) AS avg_sale_price,
                   COALESCE(a.avg_days_owned, 0) AS avg_days_owned
            FROM flock_financial_summary v
            LEFT JOIN (
                SELECT flock_id,
                       AVG(purchase_price) FILTER (WHERE purchase_price > 0) AS avg_purchase_price,
                       AVG(sale_price) FILTER (WHERE status = 'sold') AS avg_sale_price,
                       AVG(days_owned) AS avg_days_owned
                FROM animal_financial_summary
                WHERE flock_id = :flock_id
                GROUP BY flock_id
            ) a ON a.flock_id = v.flock_id
            WHERE v.flock_id = :flock_id
            """,
            {"flock_id": flock_id},
            numeric=FLOCK_NUMERIC + ("avg_purchase_price", "avg_sale_price", "avg_days_owned"),
            integer=FLOCK_COUNTS,
        )

    async def overall_metrics(self) -> dict:
        """Totals across every flock with ROI on the same basis as a single flock"""
        row = await self.fetch_one(
            """
            SELECT COUNT(*) AS total_flocks,
                   COALESCE(SUM(total_animals), 0) AS total_animals,
                   COALESCE(SUM(active_animals), 0) AS active_animals,
                   COALESCE(SUM(sold_animals), 0) AS sold_animals,
                   COALESCE(SUM(total_purchase_cost), 0) AS total_purchase_cost,
                   COALESCE(SUM(total_sale_revenue), 0) AS total_sale_revenue,
                   COALESCE(SUM(total_production_revenue), 0) AS total_production_revenue,
                   COALESCE(SUM(total_expenses), 0) AS total_expenses,
                   COALESCE(SUM(total_medical_costs), 0) AS total_medical_costs,
                   COALESCE(SUM(net_profit_loss), 0) AS net_profit_loss
            FROM flock_financial_summary
            """,
            numeric=FLOCK_NUMERIC[:-1],
            integer=("total_flocks",) + FLOCK_COUNTS,
        )
        cost_basis = (
            row["total_purchase_cost"] + row["total_expenses"] + row["total_medical_costs"]
        )
        row["average_roi"] = percentage(
            row["net_profit_loss"], cost_basis, guard=row["total_purchase_cost"]
        )
        return row


def get_financial_summary_repository(
    db: AsyncSession = Depends(get_db),
) -> FinancialSummaryRepository:
    return FinancialSummaryRepository(db)
