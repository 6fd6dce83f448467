from typing import Optional

from fastapi import Depends
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from farmledger.api.core.database import get_db
from farmledger.api.models.crop import Crop
from farmledger.api.models.expense import Expense
from farmledger.api.repositories.base import Repository, like_pattern
from farmledger.utils.logger import get_logger

logger = get_logger(__name__)

# Crops that are in the ground or about to be harvested
ACTIVE_STATUSES = ("PLANTED", "GROWING", "READY_FOR_HARVEST")


class CropRepository(Repository):
    model = Crop
    resource = "Crop"

    async def list_all(self, status: Optional[str] = None, q: Optional[str] = None) -> list[Crop]:
        """
        List crops, newest planting first

        Filters:
        - status: exact crop status
        - q: case-insensitive substring of name, type or variety
        """
        query = select(Crop)
        if status:
            query = query.where(Crop.status == status)
        if q:
            pattern = like_pattern(q)
            query = query.where(
                or_(
                    Crop.name.ilike(pattern),
                    Crop.type.ilike(pattern),
                    Crop.variety.ilike(pattern),
                )
            )
        query = query.order_by(Crop.planting_date.desc(), Crop.id.desc())
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def list_active(self) -> list[Crop]:
        query = (
            select(Crop)
            .where(Crop.status.in_(ACTIVE_STATUSES))
            .order_by(Crop.expected_harvest_date.asc().nulls_last(), Crop.id)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def set_status(self, crop_id: int, status: str) -> Optional[Crop]:
        crop = await self.update(crop_id, {"status": status})
        if crop is not None:
            logger.info(f"Crop {crop_id} moved to {status}")
        return crop

    async def list_expenses(self, crop_id: int) -> list[Expense]:
        result = await self.db.execute(
            select(Expense)
            .where(Expense.crop_id == crop_id)
            .order_by(Expense.date.desc(), Expense.id.desc())
        )
        return list(result.scalars().all())


def get_crop_repository(db: AsyncSession = Depends(get_db)) -> CropRepository:
    return CropRepository(db)
