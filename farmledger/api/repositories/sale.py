"""
Sales ledger

Recording an animal sale and marking the animal sold happen in one
transaction, as do deleting an animal sale and putting the animal back to
active. The sales table is the only place sale revenue is read from.
"""

from datetime import date
from typing import Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from farmledger.api.core.database import get_db, transaction
from farmledger.api.core.errors import NotFoundError, ValidationError
from farmledger.api.core.filters import QueryFilters
from farmledger.api.models.flock import Flock
from farmledger.api.models.livestock import Livestock
from farmledger.api.models.sale import Sale
from farmledger.api.repositories.base import Repository
from farmledger.api.schemas.sale import SaleCreate
from farmledger.utils.logger import get_logger

logger = get_logger(__name__)

SALE_NUMERIC = ("quantity", "unit_price", "total_amount")


class SaleRepository(Repository):
    model = Sale
    resource = "Sale"

    async def record(self, data: SaleCreate, sale_reason: Optional[str] = None) -> Sale:
        """
        Insert a sale; for an animal sale also mark the animal sold

        Raises:
            ValidationError: animal sale without livestock_id, or animal not active
            NotFoundError: the animal or flock does not exist
        """
        if data.sale_type == "animal" and data.livestock_id is None:
            raise ValidationError("livestock_id is required for animal sales")

        values = data.model_dump()
        async with transaction(self.db):
            animal = None
            if data.livestock_id is not None:
                animal = await self.db.get(Livestock, data.livestock_id)
                if animal is None:
                    raise NotFoundError("Livestock")
                if data.sale_type == "animal" and animal.status != "active":
                    raise ValidationError(f"Livestock {animal.tag_id} is not active")
                if values["flock_id"] is None:
                    values["flock_id"] = animal.flock_id
            elif data.flock_id is not None:
                await self.require(Flock, data.flock_id, "Flock")

            sale = Sale(**values)
            self.db.add(sale)

            if data.sale_type == "animal":
                animal.status = "sold"
                animal.sale_price = data.unit_price
                animal.sale_date = data.sale_date
                if sale_reason is not None:
                    animal.sale_reason = sale_reason

            await self.db.flush()

        await self.db.refresh(sale)
        logger.info(
            f"Recorded {sale.sale_type} sale {sale.id} for {sale.total_amount}"
        )
        return sale

    async def delete(self, sale_id: int) -> bool:
        """Delete a sale, reverting the animal to active for animal sales"""
        async with transaction(self.db):
            sale = await self.db.get(Sale, sale_id)
            if sale is None:
                return False
            if sale.sale_type == "animal" and sale.livestock_id is not None:
                animal = await self.db.get(Livestock, sale.livestock_id)
                if animal is not None:
                    animal.status = "active"
                    animal.sale_price = None
                    animal.sale_date = None
                    animal.sale_reason = None
            await self.db.delete(sale)
        logger.info(f"Deleted sale {sale_id}")
        return True

    async def list_all(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        sale_type: Optional[str] = None,
    ) -> list[dict]:
        filters = QueryFilters()
        filters.add("s.sale_date >= :start_date", start_date=start_date)
        filters.add("s.sale_date <= :end_date", end_date=end_date)
        filters.add("s.sale_type = :sale_type", sale_type=sale_type)
        sql = f"""
            SELECT s.*, l.tag_id, f.name AS flock_name
            FROM sales s
            LEFT JOIN livestock l ON l.id = s.livestock_id
            LEFT JOIN flocks f ON f.id = COALESCE(s.flock_id, l.flock_id)
            {filters.where()}
            ORDER BY s.sale_date DESC, s.id DESC
        """
        return await self.fetch_all(sql, filters.params, numeric=SALE_NUMERIC)

    async def summary(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> dict:
        filters = QueryFilters()
        filters.add("sale_date >= :start_date", start_date=start_date)
        filters.add("sale_date <= :end_date", end_date=end_date)
        by_type = await self.fetch_all(
            f"""
            SELECT sale_type,
                   COUNT(*) AS sale_count,
                   COALESCE(SUM(total_amount), 0) AS total_revenue,
                   COALESCE(AVG(total_amount), 0) AS average_sale
            FROM sales
            {filters.where()}
            GROUP BY sale_type
            ORDER BY total_revenue DESC
            """,
            filters.params,
            numeric=("total_revenue", "average_sale"),
            integer=("sale_count",),
        )
        return {
            "by_type": by_type,
            "total_sales": sum(row["sale_count"] for row in by_type),
            "total_revenue": round(sum(row["total_revenue"] for row in by_type), 2),
        }


def get_sale_repository(db: AsyncSession = Depends(get_db)) -> SaleRepository:
    return SaleRepository(db)
