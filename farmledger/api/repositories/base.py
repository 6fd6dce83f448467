"""
Shared plumbing for the per-entity repositories
"""

from typing import Any, Iterable, Mapping, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from farmledger.api.core.errors import NotFoundError
from farmledger.api.core.shaping import shape_row, shape_rows


def like_pattern(term: str) -> str:
    """Substring ILIKE pattern with the user's wildcards escaped"""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class Repository:
    """
    Base class for a repository bound to one AsyncSession

    Subclasses set ``model`` and ``resource``; plain CRUD works on ORM rows,
    aggregates go through :meth:`fetch_all` / :meth:`fetch_one`.
    """

    model: Any = None
    resource: str = "Record"

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, record_id: int):
        return await self.db.get(self.model, record_id)

    async def require(self, model: Any, record_id: Optional[int], resource: str):
        """Load a row that must exist; None ids pass through untouched"""
        if record_id is None:
            return None
        row = await self.db.get(model, record_id)
        if row is None:
            raise NotFoundError(resource)
        return row

    async def create(self, values: Mapping[str, Any]):
        row = self.model(**values)
        self.db.add(row)
        await self.db.commit()
        await self.db.refresh(row)
        return row

    def clean(self, values: Mapping[str, Any]) -> dict:
        """Drop explicit nulls aimed at NOT NULL columns"""
        columns = self.model.__table__.columns
        return {k: v for k, v in values.items() if v is not None or columns[k].nullable}

    async def update(self, record_id: int, values: Mapping[str, Any]):
        """Apply a partial update; returns None when the row does not exist"""
        row = await self.get(record_id)
        if row is None:
            return None
        for field, value in self.clean(values).items():
            setattr(row, field, value)
        await self.db.commit()
        await self.db.refresh(row)
        return row

    async def delete(self, record_id: int) -> bool:
        row = await self.get(record_id)
        if row is None:
            return False
        await self.db.delete(row)
        await self.db.commit()
        return True

    async def fetch_all(
        self,
        sql: str,
        params: Optional[Mapping[str, Any]] = None,
        numeric: Iterable[str] = (),
        integer: Iterable[str] = (),
    ) -> list[dict]:
        result = await self.db.execute(text(sql), dict(params or {}))
        return shape_rows(result.mappings().all(), numeric, integer)

    async def fetch_one(
        self,
        sql: str,
        params: Optional[Mapping[str, Any]] = None,
        numeric: Iterable[str] = (),
        integer: Iterable[str] = (),
    ) -> Optional[dict]:
        result = await self.db.execute(text(sql), dict(params or {}))
        return shape_row(result.mappings().first(), numeric, integer)
