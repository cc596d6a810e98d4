"""Example: Month-over-month and year-over-year revenue

This example runs both period comparisons through the request API and
prints the growth figures.

Prerequisites:
- A transactions export at data/transactions.json (a list of record objects)
"""

import json
from datetime import date
from pathlib import Path

from sales_analytics import AnalysisRequest, run_analysis
from sales_analytics.formatters import format_currency, format_percentage

json_path = Path("data/transactions.json")  # MODIFY AS NEEDED
today = date(2024, 12, 31)  # MODIFY AS NEEDED

transactions = json.loads(json_path.read_text(encoding="utf-8"))

# Last six months of revenue per category
mom = run_analysis(
    transactions,
    AnalysisRequest(dimension="category", period_mode="monthOverMonth"),
    today=today,
)
for row in mom:
    months = ", ".join(
        f"{month}: {format_currency(value)}" for month, value in row["values"].items()
    )
    print(f"{row['name']:<20} {months}")

# Calendar-year comparison, month by month
yoy = run_analysis(
    transactions,
    AnalysisRequest(period_mode="yearOverYear", comparison_years=(today.year - 1, today.year)),
)
for row in yoy:
    print(
        f"{row['month']:<10} {format_currency(row['value_a']):>10} "
        f"{format_currency(row['value_b']):>10} {format_percentage(row['growth']):>8}"
    )
