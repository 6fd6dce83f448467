"""
Financial rollups executed against a real PostgreSQL

Uses FARMLEDGER_TEST_DATABASE_URL (postgresql+asyncpg://...) when set,
otherwise starts a throwaway container through testcontainers. Skipped when
neither is available. The schema in that database is dropped and recreated.

Run with: pytest tests/test_views_postgres.py -v
"""

import asyncio
import os
from datetime import date

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from farmledger.api.core.database import Base
from farmledger.api.core.errors import NotFoundError
from farmledger.api.models.crop import Crop
from farmledger.api.models.flock import Flock
from farmledger.api.models.livestock import Livestock
from farmledger.api.models.livestock_expense import LivestockExpense
from farmledger.api.models.medical_treatment import MedicalTreatment
from farmledger.api.models.production_record import ProductionRecord
from farmledger.api.models.sale import Sale
from farmledger.api.models.views import VIEWS, create_views
from farmledger.api.repositories.finance import FinanceRepository
from farmledger.api.repositories.financial_summary import FinancialSummaryRepository
from farmledger.api.repositories.sale import SaleRepository
from farmledger.api.schemas.sale import SaleCreate

# Importing the remaining models registers their tables on Base.metadata
from farmledger.api.models import expense, user  # noqa: F401

pytestmark = pytest.mark.integration


@pytest.fixture(scope="module")
def database_url():
    url = os.getenv("FARMLEDGER_TEST_DATABASE_URL")
    if url:
        yield url
        return

    postgres = pytest.importorskip("testcontainers.postgres")
    container = postgres.PostgresContainer("postgres:16-alpine", driver="asyncpg")
    try:
        container.start()
    except Exception as e:
        pytest.skip(f"PostgreSQL container unavailable: {e}")
    try:
        yield container.get_connection_url()
    finally:
        container.stop()


def run(database_url, work):
    """Run ``work(session)`` on a fresh engine inside its own event loop"""
    async def _run():
        engine = create_async_engine(database_url, poolclass=NullPool)
        try:
            sessions = async_sessionmaker(engine, expire_on_commit=False)
            async with sessions() as session:
                return await work(session)
        finally:
            await engine.dispose()

    return asyncio.run(_run())


async def reset_schema(session):
    conn = await session.connection()
    for name in VIEWS:
        await conn.exec_driver_sql(f"DROP VIEW IF EXISTS {name}")
    await conn.run_sync(Base.metadata.drop_all)
    await conn.run_sync(Base.metadata.create_all)
    await create_views(conn)
    await session.commit()


async def seed(session):
    """
    Layers: flock cost 1000, expense 200, animal A-1 sold for 1500
    Broilers: no purchase cost anywhere; costs booked against animal B-1 only
    """
    await reset_schema(session)

    layers = Flock(name="Layers", total_purchase_cost=1000, purchase_date=date(2024, 1, 1))
    broilers = Flock(name="Broilers")
    session.add_all([layers, broilers])
    await session.flush()

    a1 = Livestock(tag_id="A-1", species="chicken", flock_id=layers.id,
                   purchase_date=date(2024, 1, 1))
    b1 = Livestock(tag_id="B-1", species="chicken", flock_id=broilers.id)
    session.add_all([a1, b1])
    await session.flush()

    session.add_all([
        LivestockExpense(flock_id=layers.id, description="Layer mash", category="feed",
                         amount=200, date=date(2024, 2, 1)),
        LivestockExpense(livestock_id=b1.id, description="Starter feed", category="feed",
                         amount=50, date=date(2024, 2, 1)),
        MedicalTreatment(livestock_id=b1.id, treatment_type="vaccination",
                         treatment_date=date(2024, 2, 2), cost=10),
        ProductionRecord(flock_id=broilers.id, livestock_id=b1.id, product_type="meat",
                         quantity=2, unit="kg", record_date=date(2024, 2, 3), sale_price=30),
        Crop(name="Maize A", type="Maize", planting_date=date(2024, 5, 10), status="SOLD",
             actual_yield=1000, market_price=5, total_expenses=2000),
        Crop(name="Maize B", type="Maize", planting_date=date(2024, 5, 20), status="HARVESTED",
             actual_yield=100, market_price=10, total_expenses=500),
        Crop(name="Beans", type="Beans", planting_date=date(2024, 8, 1), status="SOLD",
             actual_yield=10, market_price=10, total_expenses=0),
        Crop(name="Sorghum", type="Sorghum", planting_date=date(2024, 6, 1), status="GROWING"),
    ])
    await session.commit()

    await SaleRepository(session).record(SaleCreate(
        sale_type="animal",
        livestock_id=a1.id,
        sale_date=date(2024, 3, 1),
        description="Sale of chicken A-1",
        unit_price=1500,
    ))
    return {"layers": layers.id, "broilers": broilers.id}


@pytest.fixture(scope="module")
def farm(database_url):
    ids = run(database_url, seed)
    return database_url, ids


def by_name(rows, key, value):
    return next(row for row in rows if row[key] == value)


class TestFlockRollup:

    def test_purchase_expense_sale_scenario(self, farm):
        url, _ = farm
        rows = run(url, lambda s: FinancialSummaryRepository(s).flocks())
        layers = by_name(rows, "flock_name", "Layers")
        assert layers["total_purchase_cost"] == 1000.0
        assert layers["total_expenses"] == 200.0
        assert layers["total_sale_revenue"] == 1500.0
        assert layers["net_profit_loss"] == 300.0
        assert layers["roi_percentage"] == 25.0
        assert layers["sold_animals"] == 1

    def test_net_is_revenue_minus_costs_for_every_flock(self, farm):
        url, _ = farm
        rows = run(url, lambda s: FinancialSummaryRepository(s).flocks())
        assert len(rows) == 2
        for row in rows:
            expected = (
                row["total_sale_revenue"] + row["total_production_revenue"]
                - row["total_purchase_cost"] - row["total_expenses"] - row["total_medical_costs"]
            )
            assert row["net_profit_loss"] == pytest.approx(expected)

    def test_animal_costs_count_toward_its_flock(self, farm):
        url, _ = farm
        rows = run(url, lambda s: FinancialSummaryRepository(s).flocks())
        broilers = by_name(rows, "flock_name", "Broilers")
        assert broilers["total_expenses"] == 50.0
        assert broilers["total_medical_costs"] == 10.0
        assert broilers["total_production_revenue"] == 30.0
        assert broilers["net_profit_loss"] == -30.0

    def test_roi_zero_without_purchase_cost(self, farm):
        url, _ = farm
        rows = run(url, lambda s: FinancialSummaryRepository(s).flocks())
        assert by_name(rows, "flock_name", "Broilers")["roi_percentage"] == 0.0

    def test_overall_metrics(self, farm):
        url, _ = farm
        metrics = run(url, lambda s: FinancialSummaryRepository(s).overall_metrics())
        assert metrics["total_flocks"] == 2
        assert metrics["net_profit_loss"] == 270.0
        assert metrics["average_roi"] == round(270 / 1260 * 100, 2)


class TestAnimalRollup:

    def test_days_owned(self, farm):
        url, _ = farm
        rows = run(url, lambda s: FinancialSummaryRepository(s).animals())
        assert by_name(rows, "tag_id", "A-1")["days_owned"] == 60
        assert by_name(rows, "tag_id", "B-1")["days_owned"] == 0

    def test_animal_costs(self, farm):
        url, _ = farm
        rows = run(url, lambda s: FinancialSummaryRepository(s).animals())
        b1 = by_name(rows, "tag_id", "B-1")
        assert b1["total_expenses"] == 50.0
        assert b1["total_medical_costs"] == 10.0
        assert b1["net_profit_loss"] == -30.0
        assert b1["roi_percentage"] == 0.0

    def test_sold_animal_carries_sale(self, farm):
        url, _ = farm
        rows = run(url, lambda s: FinancialSummaryRepository(s).animals())
        a1 = by_name(rows, "tag_id", "A-1")
        assert a1["status"] == "sold"
        assert a1["sale_price"] == 1500.0
        assert a1["sale_revenue"] == 1500.0


class TestLivestockProfitLoss:

    def test_flock_cost_matches_rollup(self, farm):
        url, ids = farm
        report = run(url, lambda s: FinanceRepository(s).livestock_profit_loss(ids["layers"]))
        assert report["total_purchase_cost"] == 1000.0
        assert report["total_revenue"] == 1500.0
        assert report["net_profit_loss"] == 300.0
        assert report["roi_percentage"] == 25.0

    def test_flock_cost_outside_window(self, farm):
        url, ids = farm
        report = run(url, lambda s: FinanceRepository(s).livestock_profit_loss(
            ids["layers"], start_date=date(2024, 2, 1)
        ))
        assert report["total_purchase_cost"] == 0.0
        assert report["total_expenses"] == 200.0


class TestRoiBuckets:

    def test_monthly(self, farm):
        url, _ = farm
        rows = run(url, lambda s: FinanceRepository(s).roi_analysis("monthly"))
        assert [row["period"] for row in rows] == ["2024-08", "2024-05"]
        may = rows[1]
        assert may["crop_count"] == 2
        assert may["total_revenue"] == 6000.0
        assert may["total_expenses"] == 2500.0
        assert may["avg_roi_percentage"] == 140.0

    def test_quarterly(self, farm):
        url, _ = farm
        rows = run(url, lambda s: FinanceRepository(s).roi_analysis("quarterly"))
        assert [row["period"] for row in rows] == ["2024-Q3", "2024-Q2"]

    def test_weekly(self, farm):
        url, _ = farm
        rows = run(url, lambda s: FinanceRepository(s).roi_analysis("weekly"))
        assert [row["period"] for row in rows] == ["2024-W31", "2024-W21", "2024-W19"]


class TestSaleTransaction:

    def test_missing_animal_writes_nothing(self, farm):
        url, _ = farm

        async def attempt(session):
            before = await session.scalar(select(func.count()).select_from(Sale))
            with pytest.raises(NotFoundError):
                await SaleRepository(session).record(SaleCreate(
                    sale_type="animal",
                    livestock_id=999999,
                    sale_date=date(2024, 4, 1),
                    description="Ghost sale",
                    unit_price=10,
                ))
            after = await session.scalar(select(func.count()).select_from(Sale))
            return before, after

        before, after = run(url, attempt)
        assert before == after == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
