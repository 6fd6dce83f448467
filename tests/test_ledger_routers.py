"""
Tests for the sales, expenses, livestock expenses, finance and reports routers
Run with: pytest tests/test_ledger_routers.py -v
"""

from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest

from farmledger.api.core.errors import NotFoundError, ValidationError
from farmledger.api.repositories.expense import get_expense_repository
from farmledger.api.repositories.finance import FinanceRepository, get_finance_repository
from farmledger.api.repositories.livestock_expense import get_livestock_expense_repository
from farmledger.api.repositories.report import get_report_repository
from farmledger.api.repositories.sale import get_sale_repository
from farmledger.api.schemas.finance import (
    CropRoi,
    ProfitLossReport,
    ProfitLossSummary,
    Timeframe,
)


def mock_repo(*methods):
    repo = MagicMock()
    for name in methods:
        setattr(repo, name, AsyncMock())
    return repo


@pytest.fixture
def sales(override):
    return override(get_sale_repository, mock_repo("record", "list_all", "summary", "delete"))


@pytest.fixture
def expenses(override):
    return override(
        get_expense_repository,
        mock_repo("list_all", "recent", "create", "update", "delete"),
    )


@pytest.fixture
def livestock_expenses(override):
    return override(
        get_livestock_expense_repository,
        mock_repo("list_all", "category_summary", "flock_summary", "get", "create", "update", "delete"),
    )


@pytest.fixture
def finance(override):
    return override(
        get_finance_repository,
        mock_repo("profit_loss", "roi_analysis", "livestock_profit_loss"),
    )


@pytest.fixture
def reports(override):
    return override(
        get_report_repository,
        mock_repo("analytics", "crop_performance", "financial"),
    )


class TestSalesRouter:

    def test_product_sale_total_computed(self, client, auth_headers, sales, make_row):
        sales.record.return_value = make_row(
            id=3, livestock_id=None, flock_id=1, sale_type="product",
            sale_date=date(2024, 5, 2), description="Eggs, 10 trays", quantity=10,
            unit_price=4.5, total_amount=45.0, customer_name=None, customer_contact=None,
            payment_method="cash", notes=None, created_at=None,
        )
        response = client.post(
            "/api/sales/",
            json={
                "sale_type": "product",
                "flock_id": 1,
                "sale_date": "2024-05-02",
                "description": "Eggs, 10 trays",
                "quantity": 10,
                "unit_price": 4.5,
            },
            headers=auth_headers,
        )
        assert response.status_code == 201
        sale, = sales.record.call_args.args
        assert sale.total_amount == 45.0

    def test_zero_quantity_rejected(self, client, auth_headers, sales):
        response = client.post(
            "/api/sales/",
            json={
                "sale_type": "product",
                "sale_date": "2024-05-02",
                "description": "Eggs",
                "quantity": 0,
                "unit_price": 4.5,
            },
            headers=auth_headers,
        )
        assert response.status_code == 400
        sales.record.assert_not_awaited()

    def test_animal_sale_without_animal(self, client, auth_headers, sales):
        sales.record.side_effect = ValidationError("livestock_id is required for animal sales")
        response = client.post(
            "/api/sales/",
            json={
                "sale_type": "animal",
                "sale_date": "2024-05-02",
                "description": "Goat",
                "unit_price": 300,
            },
            headers=auth_headers,
        )
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_list_filters(self, client, auth_headers, sales):
        sales.list_all.return_value = []
        response = client.get(
            "/api/sales/?startDate=2024-01-01&saleType=animal", headers=auth_headers
        )
        assert response.status_code == 200
        sales.list_all.assert_awaited_once_with(
            start_date=date(2024, 1, 1), end_date=None, sale_type="animal"
        )

    def test_summary(self, client, auth_headers, sales):
        sales.summary.return_value = {"by_type": [], "total_sales": 0, "total_revenue": 0.0}
        response = client.get("/api/sales/summary", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["data"]["total_sales"] == 0

    def test_delete_missing(self, client, auth_headers, sales):
        sales.delete.return_value = False
        response = client.delete("/api/sales/4", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["message"] == "Sale not found"


class TestExpensesRouter:

    def test_recent_default_limit(self, client, auth_headers, expenses):
        expenses.recent.return_value = []
        response = client.get("/api/expenses/recent", headers=auth_headers)
        assert response.status_code == 200
        expenses.recent.assert_awaited_once_with(10)

    @pytest.mark.parametrize("limit", [0, 101, "ten"])
    def test_recent_limit_bounds(self, client, auth_headers, expenses, limit):
        response = client.get(f"/api/expenses/recent?limit={limit}", headers=auth_headers)
        assert response.status_code == 400
        expenses.recent.assert_not_awaited()

    def test_create_for_missing_crop(self, client, auth_headers, expenses):
        expenses.create.side_effect = NotFoundError("Crop")
        response = client.post(
            "/api/expenses/",
            json={
                "crop_id": 77,
                "description": "Fertilizer",
                "category": "FERTILIZERS",
                "amount": 90,
                "date": "2024-04-01",
            },
            headers=auth_headers,
        )
        assert response.status_code == 404
        assert response.json()["message"] == "Crop not found"

    def test_update_missing(self, client, auth_headers, expenses):
        expenses.update.return_value = None
        response = client.put("/api/expenses/5", json={"amount": 20}, headers=auth_headers)
        assert response.status_code == 404


class TestLivestockExpensesRouter:

    def test_requires_owner(self, client, auth_headers, livestock_expenses):
        response = client.post(
            "/api/livestock-expenses/",
            json={"description": "Feed", "category": "feed", "amount": 40, "date": "2024-04-01"},
            headers=auth_headers,
        )
        assert response.status_code == 400
        livestock_expenses.create.assert_not_awaited()

    def test_report_routes_not_shadowed_by_id(self, client, auth_headers, livestock_expenses):
        livestock_expenses.category_summary.return_value = []
        response = client.get(
            "/api/livestock-expenses/reports/summary?startDate=2024-01-01",
            headers=auth_headers,
        )
        assert response.status_code == 200
        livestock_expenses.category_summary.assert_awaited_once_with(date(2024, 1, 1), None)

    def test_flock_expenses(self, client, auth_headers, livestock_expenses):
        livestock_expenses.list_all.return_value = []
        response = client.get("/api/livestock-expenses/flock/2", headers=auth_headers)
        assert response.status_code == 200
        livestock_expenses.list_all.assert_awaited_once_with(flock_id=2)


class TestFinanceRouter:

    def test_profit_loss_is_camel_case(self, client, auth_headers, finance):
        finance.profit_loss.return_value = ProfitLossReport(
            summary=ProfitLossSummary(
                total_revenue=5000, total_expenses=2000, net_profit=3000, roi=150,
                sold_crops_count=1, expense_count=4,
            ),
            roi_by_crop=[CropRoi(
                id=1, name="Maize", type="Maize", revenue=5000, total_expenses=2000,
                net_profit=3000, roi_percentage=150,
            )],
            timeframe=Timeframe(start_date="All time", end_date="Present"),
        )
        response = client.get("/api/finance/profit-loss", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["summary"]["totalRevenue"] == 5000.0
        assert data["summary"]["soldCropsCount"] == 1
        assert data["roiByCrop"][0]["roiPercentage"] == 150.0
        assert data["timeframe"] == {"startDate": "All time", "endDate": "Present"}

    def test_profit_loss_dates_passed(self, client, auth_headers, finance):
        finance.profit_loss.return_value = ProfitLossReport(
            summary=ProfitLossSummary(),
            roi_by_crop=[],
            timeframe=Timeframe(start_date="2024-01-01", end_date="Present"),
        )
        client.get("/api/finance/profit-loss?startDate=2024-01-01", headers=auth_headers)
        finance.profit_loss.assert_awaited_once_with(date(2024, 1, 1), None)

    def test_roi_analysis_names_period(self, client, auth_headers, finance):
        finance.roi_analysis.return_value = [{"period": "2024-05", "crop_count": 1}]
        response = client.get("/api/finance/roi-analysis?period=monthly", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["period"] == "monthly"
        assert data["analysis"] == [{"period": "2024-05", "crop_count": 1}]
        finance.roi_analysis.assert_awaited_once_with("monthly")

    def test_roi_analysis_default_period(self, client, auth_headers, finance):
        finance.roi_analysis.return_value = []
        response = client.get("/api/finance/roi-analysis", headers=auth_headers)
        assert response.json()["data"] == {"period": "monthly", "analysis": []}

    def test_invalid_period(self, client, auth_headers, override, fake_session):
        session = fake_session()
        override(get_finance_repository, FinanceRepository(session))
        response = client.get("/api/finance/roi-analysis?period=daily", headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["message"] == (
            "Invalid period 'daily'. Use one of: weekly, monthly, quarterly"
        )
        session.execute.assert_not_awaited()

    def test_livestock_profit_loss(self, client, auth_headers, finance):
        finance.livestock_profit_loss.return_value = {"net_profit_loss": 300.0, "roi_percentage": 25.0}
        response = client.get(
            "/api/finance/livestock-profit-loss?flockId=1&endDate=2024-12-31",
            headers=auth_headers,
        )
        assert response.status_code == 200
        finance.livestock_profit_loss.assert_awaited_once_with(1, None, date(2024, 12, 31))


class TestReportsRouter:

    def test_crop_performance_missing(self, client, auth_headers, reports):
        reports.crop_performance.return_value = None
        response = client.get("/api/reports/crop-performance/4", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["message"] == "Crop not found"

    def test_analytics(self, client, auth_headers, reports):
        reports.analytics.return_value = {"summary": {"total_crops": 2}}
        response = client.get("/api/reports/analytics", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["data"]["summary"]["total_crops"] == 2

    def test_financial_window(self, client, auth_headers, reports):
        reports.financial.return_value = {}
        response = client.get(
            "/api/reports/financial?startDate=2024-01-01&endDate=2024-06-30",
            headers=auth_headers,
        )
        assert response.status_code == 200
        reports.financial.assert_awaited_once_with(date(2024, 1, 1), date(2024, 6, 30))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
