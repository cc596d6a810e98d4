"""Sales Analytics - grouped and period-over-period sales metrics.

This package turns a flat list of payment transactions into rows ready
for presentation:

- **Ingestion**: one canonical transaction shape from any field spelling
- **Grouping**: totals per product, category, member, seller or payment method
- **Metrics**: revenue, transactions, unique members, ATV, AUV, ASV, UPT
- **Periods**: month-over-month and year-over-year comparisons with growth
- **Ranking**: top/bottom performers, activity filter, growing page window

Module Structure:
    sales_analytics.transactions: Canonical Transaction and normalization
    sales_analytics.dates: Payment date parsing and month keys
    sales_analytics.grouping: Dimension and group_transactions
    sales_analytics.metrics: GroupAggregate, Metric, growth_rate
    sales_analytics.periods: Period buckets and comparisons
    sales_analytics.ranking: Ranking, quick filter, page window
    sales_analytics.kpis: Headline KPI summary
    sales_analytics.formatters: Currency/number/percentage display
    sales_analytics.api: AnalysisRequest and run_analysis

Quick Start:
    >>> from sales_analytics import AnalysisRequest, run_analysis
    >>> transactions = [
    ...     {"paymentValue": 100, "paymentDate": "1/1/2024", "memberId": "A", "product": "Mat"},
    ...     {"paymentValue": 200, "paymentDate": "1/1/2024", "memberId": "B", "product": "Class"},
    ... ]
    >>> rows = run_analysis(transactions, AnalysisRequest(dimension="product"))
    >>> [row["name"] for row in rows]
    ['Class', 'Mat']
"""

__version__ = "0.1.0"

from sales_analytics.api import AnalysisRequest, PeriodMode, run_analysis
from sales_analytics.config import AnalyticsConfig
from sales_analytics.exceptions import (
    ConfigError,
    DataQualityError,
    DateParseFailure,
    InvalidRequestError,
    SalesAnalyticsError,
)
from sales_analytics.grouping import Dimension, group_transactions
from sales_analytics.metrics import GroupAggregate, Metric, growth_rate
from sales_analytics.periods import (
    bucket_transactions,
    compare_month_over_month,
    compare_year_over_year,
)
from sales_analytics.transactions import Transaction, normalize_transactions

__all__ = [
    "AnalysisRequest",
    "AnalyticsConfig",
    "ConfigError",
    "DataQualityError",
    "DateParseFailure",
    "Dimension",
    "GroupAggregate",
    "InvalidRequestError",
    "Metric",
    "PeriodMode",
    "SalesAnalyticsError",
    "Transaction",
    "__version__",
    "bucket_transactions",
    "compare_month_over_month",
    "compare_year_over_year",
    "group_transactions",
    "growth_rate",
    "normalize_transactions",
    "run_analysis",
]
