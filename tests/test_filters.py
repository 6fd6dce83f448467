"""
Tests for the optional WHERE clause builder
Run with: pytest tests/test_filters.py -v
"""

from datetime import date

import pytest

from farmledger.api.core.filters import QueryFilters


def test_empty_filters_render_nothing():
    filters = QueryFilters()
    assert filters.where() == ""
    assert filters.and_() == ""
    assert filters.params == {}
    assert not filters


def test_none_values_add_no_predicate():
    filters = QueryFilters()
    filters.add("s.sale_date >= :start_date", start_date=None)
    filters.add("s.sale_date <= :end_date", end_date=date(2024, 12, 31))
    assert filters.where() == "WHERE s.sale_date <= :end_date"
    assert filters.params == {"end_date": date(2024, 12, 31)}


def test_always_clauses_are_kept():
    filters = QueryFilters("status = 'SOLD'")
    filters.add("planting_date >= :start_date", start_date=date(2024, 1, 1))
    assert filters.where() == "WHERE status = 'SOLD' AND planting_date >= :start_date"
    assert filters.and_() == "AND status = 'SOLD' AND planting_date >= :start_date"


def test_values_never_reach_sql_text():
    filters = QueryFilters().add("category = :category", category="'; DROP TABLE crops; --")
    assert "DROP" not in filters.where()
    assert filters.params["category"] == "'; DROP TABLE crops; --"


def test_add_is_chainable():
    filters = QueryFilters().add("a = :a", a=1).add("b = :b", b=None)
    assert filters.clauses == ["a = :a"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
