from typing import Any, Mapping, Optional

from fastapi import Depends
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from farmledger.api.core.database import get_db
from farmledger.api.core.errors import ValidationError
from farmledger.api.models.flock import Flock
from farmledger.api.models.livestock import Livestock
from farmledger.api.repositories.base import Repository, like_pattern
from farmledger.api.repositories.financial_summary import ANIMAL_NUMERIC
from farmledger.utils.logger import get_logger

logger = get_logger(__name__)

ANIMAL_FINANCIALS = """
SELECT *
FROM animal_financial_summary
WHERE animal_id = :animal_id
"""


class LivestockRepository(Repository):
    model = Livestock
    resource = "Livestock"

    async def list_all(
        self,
        status: Optional[str] = None,
        flock_id: Optional[int] = None,
        q: Optional[str] = None,
    ) -> list[Livestock]:
        """
        List animals ordered by tag

        Filters:
        - status: active, sold, deceased or transferred
        - flock_id: animals of one flock
        - q: case-insensitive substring of tag, species or breed
        """
        query = select(Livestock)
        if status:
            query = query.where(Livestock.status == status)
        if flock_id is not None:
            query = query.where(Livestock.flock_id == flock_id)
        if q:
            pattern = like_pattern(q)
            query = query.where(
                or_(
                    Livestock.tag_id.ilike(pattern),
                    Livestock.species.ilike(pattern),
                    Livestock.breed.ilike(pattern),
                )
            )
        result = await self.db.execute(query.order_by(Livestock.tag_id))
        return list(result.scalars().all())

    async def get_by_tag(self, tag_id: str) -> Optional[Livestock]:
        result = await self.db.execute(select(Livestock).where(Livestock.tag_id == tag_id))
        return result.scalar_one_or_none()

    async def _check_tag(self, tag_id: Optional[str], animal_id: Optional[int] = None) -> None:
        if tag_id is None:
            return
        existing = await self.get_by_tag(tag_id)
        if existing is not None and existing.id != animal_id:
            raise ValidationError(f"Tag ID {tag_id} is already in use")

    async def _commit(self, tag_id: Optional[str]) -> None:
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent insert of the same tag
            await self.db.rollback()
            raise ValidationError(f"Tag ID {tag_id} is already in use")

    async def create(self, values: Mapping[str, Any]) -> Livestock:
        await self._check_tag(values["tag_id"])
        await self.require(Flock, values.get("flock_id"), "Flock")
        animal = Livestock(**values)
        self.db.add(animal)
        await self._commit(animal.tag_id)
        await self.db.refresh(animal)
        logger.info(f"Registered animal {animal.tag_id} (id={animal.id})")
        return animal

    async def update(self, animal_id: int, values: Mapping[str, Any]) -> Optional[Livestock]:
        animal = await self.get(animal_id)
        if animal is None:
            return None
        values = self.clean(values)
        await self._check_tag(values.get("tag_id"), animal_id)
        await self.require(Flock, values.get("flock_id"), "Flock")
        for field, value in values.items():
            setattr(animal, field, value)
        await self._commit(animal.tag_id)
        await self.db.refresh(animal)
        return animal

    async def update_weight(self, animal_id: int, weight: float) -> Optional[Livestock]:
        return await super().update(animal_id, {"current_weight": weight})

    async def financials(self, animal_id: int) -> Optional[dict]:
        return await self.fetch_one(
            ANIMAL_FINANCIALS,
            {"animal_id": animal_id},
            numeric=ANIMAL_NUMERIC,
            integer=("days_owned",),
        )


def get_livestock_repository(db: AsyncSession = Depends(get_db)) -> LivestockRepository:
    return LivestockRepository(db)
