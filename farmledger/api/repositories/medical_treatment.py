from datetime import date, timedelta
from typing import Any, Mapping, Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from farmledger.api.core.database import get_db
from farmledger.api.core.filters import QueryFilters
from farmledger.api.models.flock import Flock
from farmledger.api.models.livestock import Livestock
from farmledger.api.models.medical_treatment import MedicalTreatment
from farmledger.api.repositories.base import Repository

LIST_SQL = """
SELECT m.*, l.tag_id, f.name AS flock_name
FROM medical_treatments m
LEFT JOIN livestock l ON l.id = m.livestock_id
LEFT JOIN flocks f ON f.id = COALESCE(m.flock_id, l.flock_id)
{where}
ORDER BY {order}
"""


class MedicalTreatmentRepository(Repository):
    model = MedicalTreatment
    resource = "Medical treatment"

    async def _list(self, filters: QueryFilters, order: str) -> list[dict]:
        return await self.fetch_all(
            LIST_SQL.format(where=filters.where(), order=order),
            filters.params,
            numeric=("cost",),
        )

    async def list_all(self) -> list[dict]:
        return await self._list(QueryFilters(), "m.treatment_date DESC, m.id DESC")

    async def for_livestock(self, livestock_id: int) -> list[dict]:
        filters = QueryFilters().add("m.livestock_id = :livestock_id", livestock_id=livestock_id)
        return await self._list(filters, "m.treatment_date DESC, m.id DESC")

    async def upcoming(self, days: int, today: Optional[date] = None) -> list[dict]:
        """Treatments whose next dose falls within the next ``days`` days"""
        start = today or date.today()
        filters = QueryFilters()
        filters.add("m.next_treatment_date >= :start_date", start_date=start)
        filters.add("m.next_treatment_date <= :end_date", end_date=start + timedelta(days=days))
        return await self._list(filters, "m.next_treatment_date ASC, m.id")

    async def _check_subject(self, values: Mapping[str, Any]) -> None:
        await self.require(Livestock, values.get("livestock_id"), "Livestock")
        await self.require(Flock, values.get("flock_id"), "Flock")

    async def create(self, values: Mapping[str, Any]) -> MedicalTreatment:
        await self._check_subject(values)
        return await super().create(values)

    async def update(self, treatment_id: int, values: Mapping[str, Any]) -> Optional[MedicalTreatment]:
        await self._check_subject(values)
        return await super().update(treatment_id, values)


def get_medical_treatment_repository(
    db: AsyncSession = Depends(get_db),
) -> MedicalTreatmentRepository:
    return MedicalTreatmentRepository(db)
