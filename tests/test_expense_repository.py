"""
Tests for crop expense writes keeping crops.total_expenses in step
Run with: pytest tests/test_expense_repository.py -v
"""

import asyncio
from datetime import date
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from farmledger.api.core.errors import NotFoundError
from farmledger.api.models.expense import Expense
from farmledger.api.repositories.expense import ExpenseRepository


def refreshed_crops(session):
    """crop ids passed to the total refresh statement, in order"""
    return [
        call.args[1]["crop_id"]
        for call in session.execute.await_args_list
        if "UPDATE crops" in str(call.args[0])
    ]


def new_expense_values(**overrides):
    values = dict(
        crop_id=1,
        description="Fertilizer",
        category="FERTILIZERS",
        amount=80,
        date=date(2024, 4, 1),
        notes=None,
    )
    values.update(overrides)
    return values


class TestCreateExpense:

    def test_create_refreshes_crop_total_in_same_transaction(self, fake_session):
        session = fake_session([])
        session.get.return_value = SimpleNamespace(id=1)
        repo = ExpenseRepository(session)

        expense = asyncio.run(repo.create(new_expense_values()))

        assert isinstance(expense, Expense)
        session.add.assert_called_once_with(expense)
        session.flush.assert_awaited_once()
        assert refreshed_crops(session) == [1]
        session.commit.assert_awaited_once()

    def test_create_for_missing_crop(self, fake_session):
        session = fake_session()
        repo = ExpenseRepository(session)

        with pytest.raises(NotFoundError):
            asyncio.run(repo.create(new_expense_values(crop_id=99)))

        session.add.assert_not_called()
        session.rollback.assert_awaited_once()

    def test_refresh_failure_rolls_back_insert(self, fake_session):
        session = fake_session()
        session.get.return_value = SimpleNamespace(id=1)
        session.execute = AsyncMock(side_effect=RuntimeError("deadlock"))
        repo = ExpenseRepository(session)

        with pytest.raises(RuntimeError):
            asyncio.run(repo.create(new_expense_values()))

        session.rollback.assert_awaited_once()
        session.commit.assert_not_awaited()


class TestUpdateExpense:

    def test_moving_expense_refreshes_both_crops(self, fake_session):
        expense = Expense(id=5, **new_expense_values())
        session = fake_session([], [])
        session.get = AsyncMock(side_effect=[expense, SimpleNamespace(id=2)])
        repo = ExpenseRepository(session)

        updated = asyncio.run(repo.update(5, {"crop_id": 2, "amount": 90}))

        assert updated.crop_id == 2
        assert updated.amount == 90
        assert refreshed_crops(session) == [2, 1]
        session.commit.assert_awaited_once()

    def test_update_same_crop_refreshes_once(self, fake_session):
        expense = Expense(id=5, **new_expense_values())
        session = fake_session([])
        session.get.return_value = expense
        repo = ExpenseRepository(session)

        asyncio.run(repo.update(5, {"amount": 100}))

        assert refreshed_crops(session) == [1]

    def test_explicit_null_crop_is_ignored(self, fake_session):
        expense = Expense(id=5, **new_expense_values())
        session = fake_session([])
        session.get.return_value = expense
        repo = ExpenseRepository(session)

        asyncio.run(repo.update(5, {"crop_id": None}))

        assert expense.crop_id == 1

    def test_update_missing_expense(self, fake_session):
        session = fake_session()
        repo = ExpenseRepository(session)
        assert asyncio.run(repo.update(5, {"amount": 1})) is None
        session.execute.assert_not_awaited()


class TestDeleteExpense:

    def test_delete_refreshes_total(self, fake_session):
        expense = Expense(id=5, **new_expense_values(crop_id=3))
        session = fake_session([])
        session.get.return_value = expense
        repo = ExpenseRepository(session)

        assert asyncio.run(repo.delete(5)) is True
        session.delete.assert_awaited_once_with(expense)
        assert refreshed_crops(session) == [3]
        session.commit.assert_awaited_once()

    def test_delete_missing(self, fake_session):
        session = fake_session()
        repo = ExpenseRepository(session)
        assert asyncio.run(repo.delete(5)) is False


class TestExpenseLists:

    def test_recent_binds_limit(self, fake_session):
        session = fake_session([{"id": 1, "amount": "12.50", "crop_name": "Maize"}])
        repo = ExpenseRepository(session)

        rows = asyncio.run(repo.recent(5))

        statement, params = session.execute.call_args.args
        assert "LIMIT :limit" in str(statement)
        assert params == {"limit": 5}
        assert rows[0]["amount"] == 12.5


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
