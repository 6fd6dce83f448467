from typing import Optional

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from farmledger.api.core.database import get_db
from farmledger.api.models.flock import Flock
from farmledger.api.repositories.base import Repository

FLOCK_STATS = """
SELECT f.id AS flock_id,
       COALESCE(a.animal_count, 0) AS animal_count,
       COALESCE(a.active_count, 0) AS active_count,
       COALESCE(e.total_expenses, 0) AS total_expenses
FROM flocks f
LEFT JOIN (
    SELECT flock_id,
           COUNT(*) AS animal_count,
           COUNT(*) FILTER (WHERE status = 'active') AS active_count
    FROM livestock
    GROUP BY flock_id
) a ON a.flock_id = f.id
LEFT JOIN (
    SELECT COALESCE(x.flock_id, l.flock_id) AS flock_id, SUM(x.amount) AS total_expenses
    FROM livestock_expenses x
    LEFT JOIN livestock l ON l.id = x.livestock_id
    GROUP BY COALESCE(x.flock_id, l.flock_id)
) e ON e.flock_id = f.id
WHERE f.id = :flock_id
"""


class FlockRepository(Repository):
    model = Flock
    resource = "Flock"

    async def list_all(self) -> list[Flock]:
        result = await self.db.execute(select(Flock).order_by(Flock.name, Flock.id))
        return list(result.scalars().all())

    async def stats(self, flock_id: int) -> Optional[dict]:
        return await self.fetch_one(
            FLOCK_STATS,
            {"flock_id": flock_id},
            numeric=("total_expenses",),
            integer=("animal_count", "active_count"),
        )


def get_flock_repository(db: AsyncSession = Depends(get_db)) -> FlockRepository:
    return FlockRepository(db)
