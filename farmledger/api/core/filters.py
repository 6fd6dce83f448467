"""
Builder for optional WHERE clauses over text() SQL
"""

from typing import Any


class QueryFilters:
    """
    Collects SQL predicates whose values are optional

    Only fixed SQL fragments are ever concatenated; values travel as bound
    parameters. A predicate whose value is None is skipped entirely, so an
    omitted filter adds nothing to the query.

    Usage:
        filters = QueryFilters()
        filters.add("s.sale_date >= :start_date", start_date=start_date)
        sql = f"SELECT ... FROM sales s {filters.where()}"
        await db.execute(text(sql), filters.params)
    """

    def __init__(self, *always: str):
        self.clauses: list[str] = list(always)
        self.params: dict[str, Any] = {}

    def add(self, clause: str, **params: Any) -> "QueryFilters":
        if any(value is None for value in params.values()):
            return self
        self.clauses.append(clause)
        self.params.update(params)
        return self

    def sql(self, keyword: str) -> str:
        if not self.clauses:
            return ""
        return f"{keyword} " + " AND ".join(self.clauses)

    def where(self) -> str:
        return self.sql("WHERE")

    def and_(self) -> str:
        """Predicates for appending after an existing WHERE"""
        if not self.clauses:
            return ""
        return "AND " + " AND ".join(self.clauses)

    def __bool__(self) -> bool:
        return bool(self.clauses)
