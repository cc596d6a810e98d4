"""Example: Top and bottom products with a growing page window

This example loads transactions from a CSV export, ranks products by revenue
and pages through the top/bottom performers the way a dashboard would.

Prerequisites:
- A transactions export at data/transactions.csv (any supported column spelling)
"""

from pathlib import Path

import pandas as pd

from sales_analytics import AnalyticsConfig, group_transactions
from sales_analytics.formatters import format_currency
from sales_analytics.ranking import PageWindow, build_ranked_view

csv_path = Path("data/transactions.csv")  # MODIFY AS NEEDED

config = AnalyticsConfig.from_env()
transactions = pd.read_csv(csv_path, dtype=str, keep_default_na=False)

products = group_transactions(transactions, "product")
window = PageWindow.starting_at(config.page_size, config.page_increment)

view = build_ranked_view(products, "active", window)
print(f"Active products: {view.total} (of {view.counts['all']})")
for row in view.top:
    print(f"  {row.name:<30} {format_currency(row.total_value, config.currency_symbol)}")

if view.has_more:
    print(f"\nShowing {window.next_increment(view.total)} more...")
    view = build_ranked_view(products, "active", window.show_more())
    for row in view.top[window.size :]:
        print(f"  {row.name:<30} {format_currency(row.total_value, config.currency_symbol)}")

print("\nLeast performing:")
for row in view.bottom:
    print(f"  {row.name:<30} {format_currency(row.total_value, config.currency_symbol)}")
