"""
Crop and livestock profit/loss queries

Every total is a COALESCE'd aggregate over a single table, so a missing row
reads as zero and one-to-many joins never inflate a sum.
"""

from datetime import date
from typing import Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from farmledger.api.core.database import get_db
from farmledger.api.core.errors import ValidationError
from farmledger.api.core.filters import QueryFilters
from farmledger.api.core.shaping import percentage
from farmledger.api.repositories.base import Repository
from farmledger.api.schemas.finance import (
    CropRoi,
    ProfitLossReport,
    ProfitLossSummary,
    Timeframe,
)

# Bucket label per period; request text never reaches the SQL
PERIOD_EXPRESSIONS = {
    "weekly": """TO_CHAR(planting_date, 'IYYY-"W"IW')""",
    "monthly": "TO_CHAR(planting_date, 'YYYY-MM')",
    "quarterly": """TO_CHAR(planting_date, 'YYYY-"Q"Q')""",
}

SOLD_CROP = (
    "status = 'SOLD'",
    "actual_yield IS NOT NULL",
    "market_price > 0",
)


def _date_range(column: str, start_date: Optional[date], end_date: Optional[date], *always: str) -> QueryFilters:
    filters = QueryFilters(*always)
    filters.add(f"{column} >= :start_date", start_date=start_date)
    filters.add(f"{column} <= :end_date", end_date=end_date)
    return filters


def timeframe(start_date: Optional[date], end_date: Optional[date]) -> dict:
    return {
        "start_date": start_date.isoformat() if start_date else "All time",
        "end_date": end_date.isoformat() if end_date else "Present",
    }


class FinanceRepository(Repository):

    async def profit_loss(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> ProfitLossReport:
        """
        Crop profit/loss for an optional planting/expense date window

        Revenue comes from sold crops planted inside the window, expenses from
        expense rows dated inside it. ROI is 0 when there are no expenses.
        """
        crops = _date_range("planting_date", start_date, end_date, *SOLD_CROP)
        revenue = await self.fetch_one(
            f"""
            SELECT COALESCE(SUM(actual_yield * market_price), 0) AS total_revenue,
                   COUNT(*) AS sold_crops_count
            FROM crops
            {crops.where()}
            """,
            crops.params,
            numeric=("total_revenue",),
            integer=("sold_crops_count",),
        )

        expenses = _date_range("date", start_date, end_date)
        spent = await self.fetch_one(
            f"""
            SELECT COALESCE(SUM(amount), 0) AS total_expenses,
                   COUNT(*) AS expense_count
            FROM expenses
            {expenses.where()}
            """,
            expenses.params,
            numeric=("total_expenses",),
            integer=("expense_count",),
        )

        roi_filters = _date_range(
            "planting_date", start_date, end_date, *SOLD_CROP, "total_expenses > 0"
        )
        roi_rows = await self.fetch_all(
            f"""
            SELECT id,
                   name,
                   type,
                   actual_yield * market_price AS revenue,
                   total_expenses,
                   actual_yield * market_price - total_expenses AS net_profit,
                   ROUND((actual_yield * market_price - total_expenses)
                         / total_expenses * 100, 2) AS roi_percentage
            FROM crops
            {roi_filters.where()}
            ORDER BY roi_percentage DESC
            """,
            roi_filters.params,
            numeric=("revenue", "total_expenses", "net_profit", "roi_percentage"),
        )

        total_revenue = revenue["total_revenue"]
        total_expenses = spent["total_expenses"]
        net_profit = round(total_revenue - total_expenses, 2)

        return ProfitLossReport(
            summary=ProfitLossSummary(
                total_revenue=total_revenue,
                total_expenses=total_expenses,
                net_profit=net_profit,
                roi=percentage(net_profit, total_expenses),
                sold_crops_count=revenue["sold_crops_count"],
                expense_count=spent["expense_count"],
            ),
            roi_by_crop=[CropRoi(**row) for row in roi_rows],
            timeframe=Timeframe(**timeframe(start_date, end_date)),
        )

    async def roi_analysis(self, period: str = "monthly") -> list[dict]:
        """
        Harvested/sold crops bucketed by planting week, month or quarter

        Raises:
            ValidationError: period is not weekly, monthly or quarterly
        """
        expression = PERIOD_EXPRESSIONS.get(period)
        if expression is None:
            raise ValidationError(
                f"Invalid period '{period}'. Use one of: {', '.join(PERIOD_EXPRESSIONS)}"
            )
        return await self.fetch_all(
            f"""
            SELECT {expression} AS period,
                   COUNT(*) AS crop_count,
                   COALESCE(SUM(actual_yield * market_price), 0) AS total_revenue,
                   COALESCE(SUM(total_expenses), 0) AS total_expenses,
                   CASE
                       WHEN COALESCE(SUM(total_expenses), 0) > 0 THEN ROUND(
                           (SUM(actual_yield * market_price) - SUM(total_expenses))
                           / SUM(total_expenses) * 100, 2)
                       ELSE 0
                   END AS avg_roi_percentage,
                   COALESCE(AVG(actual_yield * market_price - total_expenses), 0) AS avg_net_profit
            FROM crops
            WHERE status IN ('HARVESTED', 'SOLD')
              AND actual_yield IS NOT NULL
            GROUP BY 1
            ORDER BY 1 DESC
            """,
            numeric=("total_revenue", "total_expenses", "avg_roi_percentage", "avg_net_profit"),
            integer=("crop_count",),
        )

    async def livestock_profit_loss(
        self,
        flock_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> dict:
        """
        Livestock revenue and costs, each source filtered on its own date column
        """
        def scoped(flock_column: str, date_column: Optional[str], *always: str) -> QueryFilters:
            filters = QueryFilters(*always)
            filters.add(f"{flock_column} = :flock_id", flock_id=flock_id)
            if date_column:
                filters.add(f"{date_column} >= :start_date", start_date=start_date)
                filters.add(f"{date_column} <= :end_date", end_date=end_date)
            return filters

        sales = scoped("COALESCE(s.flock_id, l.flock_id)", "s.sale_date")
        flocks = scoped("f.id", None)
        animal_purchases = scoped("l.flock_id", "l.purchase_date")
        # Animals outside any flock only count toward the farm-wide figure
        loose_purchases = scoped("l.flock_id", "l.purchase_date", "l.flock_id IS NULL")
        flock_window = _date_range("f.purchase_date", start_date, end_date).clauses or ["TRUE"]
        expenses = scoped("COALESCE(e.flock_id, l.flock_id)", "e.date")
        medical = scoped("COALESCE(m.flock_id, l.flock_id)", "m.treatment_date")
        animals = scoped("l.flock_id", None)

        params = {}
        for filters in (sales, flocks, animal_purchases, loose_purchases, expenses, medical, animals):
            params.update(filters.params)

        row = await self.fetch_one(
            f"""
            WITH sale_totals AS (
                SELECT COALESCE(SUM(s.total_amount), 0) AS total_revenue,
                       COALESCE(SUM(s.total_amount) FILTER (WHERE s.sale_type = 'animal'), 0)
                           AS animal_sales_revenue,
                       COALESCE(SUM(s.total_amount) FILTER (WHERE s.sale_type = 'product'), 0)
                           AS product_sales_revenue
                FROM sales s
                LEFT JOIN livestock l ON l.id = s.livestock_id
                {sales.where()}
            ),
            flock_purchases AS (
                SELECT CASE
                           WHEN f.total_purchase_cost IS NOT NULL THEN
                               CASE WHEN {" AND ".join(flock_window)} THEN f.total_purchase_cost ELSE 0 END
                           ELSE COALESCE(a.animal_purchase_cost, 0)
                       END AS purchase_cost
                FROM flocks f
                LEFT JOIN (
                    SELECT l.flock_id, SUM(l.purchase_price) AS animal_purchase_cost
                    FROM livestock l
                    {animal_purchases.where()}
                    GROUP BY l.flock_id
                ) a ON a.flock_id = f.id
                {flocks.where()}
            ),
            loose_purchases AS (
                SELECT COALESCE(SUM(l.purchase_price), 0) AS purchase_cost
                FROM livestock l
                {loose_purchases.where()}
            ),
            purchase_totals AS (
                SELECT (SELECT COALESCE(SUM(purchase_cost), 0) FROM flock_purchases)
                       + (SELECT purchase_cost FROM loose_purchases) AS total_purchase_cost
            ),
            expense_totals AS (
                SELECT COALESCE(SUM(e.amount), 0) AS total_expenses
                FROM livestock_expenses e
                LEFT JOIN livestock l ON l.id = e.livestock_id
                {expenses.where()}
            ),
            medical_totals AS (
                SELECT COALESCE(SUM(m.cost), 0) AS total_medical_costs
                FROM medical_treatments m
                LEFT JOIN livestock l ON l.id = m.livestock_id
                {medical.where()}
            ),
            animal_counts AS (
                SELECT COUNT(*) AS total_animals,
                       COUNT(*) FILTER (WHERE l.status = 'sold') AS sold_animals,
                       COUNT(*) FILTER (WHERE l.status = 'active') AS active_animals
                FROM livestock l
                {animals.where()}
            )
            SELECT *
            FROM sale_totals
            CROSS JOIN purchase_totals
            CROSS JOIN expense_totals
            CROSS JOIN medical_totals
            CROSS JOIN animal_counts
            """,
            params,
            numeric=(
                "total_revenue", "animal_sales_revenue", "product_sales_revenue",
                "total_purchase_cost", "total_expenses", "total_medical_costs",
            ),
            integer=("total_animals", "sold_animals", "active_animals"),
        )

        costs = row["total_purchase_cost"] + row["total_expenses"] + row["total_medical_costs"]
        row["net_profit_loss"] = round(row["total_revenue"] - costs, 2)
        row["roi_percentage"] = percentage(
            row["net_profit_loss"], costs, guard=row["total_purchase_cost"]
        )
        row["flock_id"] = flock_id
        row["period"] = timeframe(start_date, end_date)
        return row


def get_finance_repository(db: AsyncSession = Depends(get_db)) -> FinanceRepository:
    return FinanceRepository(db)
