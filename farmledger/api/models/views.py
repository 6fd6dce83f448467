"""
Read-model views holding the livestock rollup formulas

Every per-table total is aggregated in its own CTE before being joined to the
parent row, so two one-to-many joins never multiply each other's sums.
Expenses, treatments and sales recorded against an animal count toward that
animal's flock when the row itself carries no flock_id.
"""

from sqlalchemy import text

FLOCK_FINANCIAL_SUMMARY = """
CREATE OR REPLACE VIEW flock_financial_summary AS
WITH animal_stats AS (
    SELECT flock_id,
           COUNT(*) AS total_animals,
           COUNT(*) FILTER (WHERE status = 'active') AS active_animals,
           COUNT(*) FILTER (WHERE status = 'sold') AS sold_animals,
           SUM(purchase_price) AS animal_purchase_cost
    FROM livestock
    WHERE flock_id IS NOT NULL
    GROUP BY flock_id
),
sale_totals AS (
    SELECT COALESCE(s.flock_id, l.flock_id) AS flock_id,
           SUM(s.total_amount) AS total_sale_revenue
    FROM sales s
    LEFT JOIN livestock l ON l.id = s.livestock_id
    GROUP BY COALESCE(s.flock_id, l.flock_id)
),
production_totals AS (
    SELECT flock_id, SUM(sale_price) AS total_production_revenue
    FROM production_records
    GROUP BY flock_id
),
expense_totals AS (
    SELECT COALESCE(e.flock_id, l.flock_id) AS flock_id,
           SUM(e.amount) AS total_expenses
    FROM livestock_expenses e
    LEFT JOIN livestock l ON l.id = e.livestock_id
    GROUP BY COALESCE(e.flock_id, l.flock_id)
),
medical_totals AS (
    SELECT COALESCE(m.flock_id, l.flock_id) AS flock_id,
           SUM(m.cost) AS total_medical_costs
    FROM medical_treatments m
    LEFT JOIN livestock l ON l.id = m.livestock_id
    GROUP BY COALESCE(m.flock_id, l.flock_id)
),
base AS (
    SELECT f.id AS flock_id,
           f.name AS flock_name,
           f.breed,
           f.purchase_date,
           COALESCE(f.total_purchase_cost, a.animal_purchase_cost, 0) AS total_purchase_cost,
           COALESCE(st.total_sale_revenue, 0) AS total_sale_revenue,
           COALESCE(pt.total_production_revenue, 0) AS total_production_revenue,
           COALESCE(et.total_expenses, 0) AS total_expenses,
           COALESCE(mt.total_medical_costs, 0) AS total_medical_costs,
           COALESCE(a.total_animals, 0) AS total_animals,
           COALESCE(a.active_animals, 0) AS active_animals,
           COALESCE(a.sold_animals, 0) AS sold_animals
    FROM flocks f
    LEFT JOIN animal_stats a ON a.flock_id = f.id
    LEFT JOIN sale_totals st ON st.flock_id = f.id
    LEFT JOIN production_totals pt ON pt.flock_id = f.id
    LEFT JOIN expense_totals et ON et.flock_id = f.id
    LEFT JOIN medical_totals mt ON mt.flock_id = f.id
)
SELECT b.*,
       (b.total_sale_revenue + b.total_production_revenue
        - b.total_purchase_cost - b.total_expenses - b.total_medical_costs) AS net_profit_loss,
       CASE
           WHEN b.total_purchase_cost > 0 THEN ROUND(
               (b.total_sale_revenue + b.total_production_revenue
                - b.total_purchase_cost - b.total_expenses - b.total_medical_costs)
               / (b.total_purchase_cost + b.total_expenses + b.total_medical_costs) * 100,
               2)
           ELSE 0
       END AS roi_percentage
FROM base b
"""

ANIMAL_FINANCIAL_SUMMARY = """
CREATE OR REPLACE VIEW animal_financial_summary AS
WITH sale_totals AS (
    SELECT livestock_id, SUM(total_amount) AS sale_revenue
    FROM sales
    WHERE livestock_id IS NOT NULL
    GROUP BY livestock_id
),
production_totals AS (
    SELECT livestock_id, SUM(sale_price) AS total_production_revenue
    FROM production_records
    WHERE livestock_id IS NOT NULL
    GROUP BY livestock_id
),
expense_totals AS (
    SELECT livestock_id, SUM(amount) AS total_expenses
    FROM livestock_expenses
    WHERE livestock_id IS NOT NULL
    GROUP BY livestock_id
),
medical_totals AS (
    SELECT livestock_id, SUM(cost) AS total_medical_costs
    FROM medical_treatments
    WHERE livestock_id IS NOT NULL
    GROUP BY livestock_id
),
base AS (
    SELECT l.id AS animal_id,
           l.tag_id,
           l.species,
           l.breed,
           l.status,
           l.flock_id,
           f.name AS flock_name,
           l.purchase_date,
           l.sale_date,
           COALESCE(l.purchase_price, 0) AS purchase_price,
           COALESCE(l.sale_price, 0) AS sale_price,
           COALESCE(st.sale_revenue, 0) AS sale_revenue,
           COALESCE(pt.total_production_revenue, 0) AS total_production_revenue,
           COALESCE(et.total_expenses, 0) AS total_expenses,
           COALESCE(mt.total_medical_costs, 0) AS total_medical_costs,
           CASE
               WHEN l.purchase_date IS NULL THEN 0
               ELSE COALESCE(l.sale_date, CURRENT_DATE) - l.purchase_date
           END AS days_owned
    FROM livestock l
    LEFT JOIN flocks f ON f.id = l.flock_id
    LEFT JOIN sale_totals st ON st.livestock_id = l.id
    LEFT JOIN production_totals pt ON pt.livestock_id = l.id
    LEFT JOIN expense_totals et ON et.livestock_id = l.id
    LEFT JOIN medical_totals mt ON mt.livestock_id = l.id
)
SELECT b.*,
       (b.sale_revenue + b.total_production_revenue
        - b.purchase_price - b.total_expenses - b.total_medical_costs) AS net_profit_loss,
       CASE
           WHEN b.purchase_price > 0 THEN ROUND(
               (b.sale_revenue + b.total_production_revenue
                - b.purchase_price - b.total_expenses - b.total_medical_costs)
               / (b.purchase_price + b.total_expenses + b.total_medical_costs) * 100,
               2)
           ELSE 0
       END AS roi_percentage
FROM base b
"""

VIEWS = {
    "flock_financial_summary": FLOCK_FINANCIAL_SUMMARY,
    "animal_financial_summary": ANIMAL_FINANCIAL_SUMMARY,
}


async def create_views(conn) -> None:
    """Drop and recreate every reporting view on an open connection"""
    for name, ddl in VIEWS.items():
        await conn.execute(text(f"DROP VIEW IF EXISTS {name}"))
        await conn.execute(text(ddl))
