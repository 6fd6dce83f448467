"""
Livestock reports that fan out into independent queries

Each query gets its own session from the factory so they can run
concurrently on separate pooled connections.
"""

import asyncio
from datetime import date, datetime, timezone
from typing import Any, Iterable, Mapping, Optional

from fastapi import Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import async_sessionmaker

from farmledger.api.core.database import get_session_factory
from farmledger.api.core.filters import QueryFilters
from farmledger.api.core.shaping import shape_rows
from farmledger.api.repositories.finance import timeframe
from farmledger.api.repositories.financial_summary import ANIMAL_NUMERIC
from farmledger.utils.logger import get_logger

logger = get_logger(__name__)


class LivestockReportRepository:

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    async def _fetch(
        self,
        sql: str,
        params: Mapping[str, Any],
        numeric: Iterable[str] = (),
        integer: Iterable[str] = (),
    ) -> list[dict]:
        async with self.session_factory() as session:
            result = await session.execute(text(sql), dict(params))
            return shape_rows(result.mappings().all(), numeric, integer)

    async def _financial_summary(self, flock_id: Optional[int]):
        filters = QueryFilters().add("flock_id = :flock_id", flock_id=flock_id)
        return await self._fetch(
            f"""
            SELECT flock_id,
                   flock_name,
                   total_animals,
                   active_animals,
                   sold_animals,
                   total_purchase_cost AS total_investment,
                   total_sale_revenue AS total_sales,
                   total_production_revenue,
                   total_expenses,
                   total_medical_costs,
                   net_profit_loss
            FROM flock_financial_summary
            {filters.where()}
            ORDER BY net_profit_loss DESC, flock_id
            """,
            filters.params,
            numeric=(
                "total_investment", "total_sales", "total_production_revenue",
                "total_expenses", "total_medical_costs", "net_profit_loss",
            ),
            integer=("total_animals", "active_animals", "sold_animals"),
        )

    async def _production_summary(self, flock_id, start_date, end_date):
        filters = QueryFilters()
        filters.add("flock_id = :flock_id", flock_id=flock_id)
        filters.add("record_date >= :start_date", start_date=start_date)
        filters.add("record_date <= :end_date", end_date=end_date)
        return await self._fetch(
            f"""
            SELECT product_type,
                   COALESCE(SUM(quantity), 0) AS total_quantity,
                   COUNT(*) AS record_count,
                   COALESCE(AVG(quantity), 0) AS average_yield,
                   COALESCE(SUM(sale_price), 0) AS total_revenue
            FROM production_records
            {filters.where()}
            GROUP BY product_type
            ORDER BY total_quantity DESC
            """,
            filters.params,
            numeric=("total_quantity", "average_yield", "total_revenue"),
            integer=("record_count",),
        )

    async def _expense_breakdown(self, flock_id, start_date, end_date):
        filters = QueryFilters()
        filters.add("COALESCE(e.flock_id, l.flock_id) = :flock_id", flock_id=flock_id)
        filters.add("e.date >= :start_date", start_date=start_date)
        filters.add("e.date <= :end_date", end_date=end_date)
        return await self._fetch(
            f"""
            SELECT e.category,
                   COALESCE(SUM(e.amount), 0) AS total_amount,
                   COUNT(*) AS expense_count
            FROM livestock_expenses e
            LEFT JOIN livestock l ON l.id = e.livestock_id
            {filters.where()}
            GROUP BY e.category
            ORDER BY total_amount DESC
            """,
            filters.params,
            numeric=("total_amount",),
            integer=("expense_count",),
        )

    async def comprehensive(
        self,
        flock_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> dict:
        financial, production, expenses = await asyncio.gather(
            self._financial_summary(flock_id),
            self._production_summary(flock_id, start_date, end_date),
            self._expense_breakdown(flock_id, start_date, end_date),
        )
        logger.debug(
            f"Comprehensive report: {len(financial)} flocks, "
            f"{len(production)} product types, {len(expenses)} expense categories"
        )
        return {
            "financial_summary": financial,
            "production_summary": production,
            "expense_breakdown": expenses,
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "period": timeframe(start_date, end_date),
        }

    async def roi_analysis(self, flock_id: Optional[int] = None) -> list[dict]:
        """Per-animal ROI, best first"""
        filters = QueryFilters().add("flock_id = :flock_id", flock_id=flock_id)
        return await self._fetch(
            f"""
            SELECT *
            FROM animal_financial_summary
            {filters.where()}
            ORDER BY roi_percentage DESC, animal_id
            """,
            filters.params,
            numeric=ANIMAL_NUMERIC,
            integer=("days_owned",),
        )


def get_livestock_report_repository(
    session_factory: async_sessionmaker = Depends(get_session_factory),
) -> LivestockReportRepository:
    return LivestockReportRepository(session_factory)
