from typing import Any, Mapping, Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from farmledger.api.core.database import get_db
from farmledger.api.core.filters import QueryFilters
from farmledger.api.models.flock import Flock
from farmledger.api.models.livestock import Livestock
from farmledger.api.models.production_record import ProductionRecord
from farmledger.api.repositories.base import Repository

PRODUCTION_NUMERIC = ("quantity", "sale_price")


class ProductionRepository(Repository):
    model = ProductionRecord
    resource = "Production record"

    async def list_all(self, flock_id: Optional[int] = None) -> list[dict]:
        filters = QueryFilters()
        filters.add("p.flock_id = :flock_id", flock_id=flock_id)
        return await self.fetch_all(
            f"""
            SELECT p.*, f.name AS flock_name, l.tag_id
            FROM production_records p
            LEFT JOIN flocks f ON f.id = p.flock_id
            LEFT JOIN livestock l ON l.id = p.livestock_id
            {filters.where()}
            ORDER BY p.record_date DESC, p.id DESC
            """,
            filters.params,
            numeric=PRODUCTION_NUMERIC,
        )

    async def summary(self, flock_id: Optional[int] = None) -> list[dict]:
        """Totals per product type, optionally for one flock"""
        filters = QueryFilters()
        filters.add("flock_id = :flock_id", flock_id=flock_id)
        return await self.fetch_all(
            f"""
            SELECT product_type,
                   unit,
                   COUNT(*) AS record_count,
                   COALESCE(SUM(quantity), 0) AS total_quantity,
                   COALESCE(AVG(quantity), 0) AS average_quantity,
                   COALESCE(SUM(sale_price), 0) AS total_revenue,
                   MIN(record_date) AS first_record,
                   MAX(record_date) AS last_record
            FROM production_records
            {filters.where()}
            GROUP BY product_type, unit
            ORDER BY total_quantity DESC
            """,
            filters.params,
            numeric=("total_quantity", "average_quantity", "total_revenue"),
            integer=("record_count",),
        )

    async def create(self, values: Mapping[str, Any]) -> ProductionRecord:
        await self.require(Flock, values["flock_id"], "Flock")
        await self.require(Livestock, values.get("livestock_id"), "Livestock")
        return await super().create(values)


def get_production_repository(db: AsyncSession = Depends(get_db)) -> ProductionRepository:
    return ProductionRepository(db)
