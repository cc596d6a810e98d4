"""Headline KPI summary across all transactions."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any

from sales_analytics.dates import month_key, parse_date_column, trailing_month_keys
from sales_analytics.metrics import growth_rate, safe_divide
from sales_analytics.transactions import normalize_transactions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KPISummary:
    """Overall sales KPIs.

    Attributes:
        total_revenue: Sum of all payment values.
        total_transactions: Number of transactions.
        unique_members: Number of distinct member IDs.
        avg_transaction_value: total_revenue / total_transactions.
        revenue_per_member: total_revenue / unique_members.
        avg_unit_value: total_revenue / units sold (one unit per transaction).
        revenue_growth: Revenue growth of the current calendar month over the
            previous one, in percent.
    """

    total_revenue: float = 0.0
    total_transactions: int = 0
    unique_members: int = 0
    avg_transaction_value: float = 0.0
    revenue_per_member: float = 0.0
    avg_unit_value: float = 0.0
    revenue_growth: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def summarize_kpis(transactions: Any, today: date | None = None) -> KPISummary:
    """Compute headline KPIs over all transactions.

    Revenue growth compares the calendar month of ``today`` with the month
    before it; transactions with unparseable dates count toward every KPI
    except that growth figure.

    Args:
        transactions: Raw records, Transaction objects, or a DataFrame.
        today: Reference date. Defaults to date.today().

    Returns:
        KPISummary; all zeros for empty input.
    """
    if today is None:
        today = date.today()

    df = normalize_transactions(transactions)
    if df.empty:
        return KPISummary()

    total_revenue = float(df["payment_value"].sum())
    total_transactions = len(df)
    unique_members = int(df["member_id"].nunique())

    previous_month, current_month = trailing_month_keys(today, 2)
    months = parse_date_column(df["payment_date"]).map(
        lambda d: month_key(d) if isinstance(d, date) else None
    )
    current_revenue = float(df.loc[months == current_month, "payment_value"].sum())
    previous_revenue = float(df.loc[months == previous_month, "payment_value"].sum())

    summary = KPISummary(
        total_revenue=total_revenue,
        total_transactions=total_transactions,
        unique_members=unique_members,
        avg_transaction_value=safe_divide(total_revenue, total_transactions),
        revenue_per_member=safe_divide(total_revenue, unique_members),
        avg_unit_value=safe_divide(total_revenue, total_transactions),
        revenue_growth=growth_rate(current_revenue, previous_revenue),
    )
    logger.debug("KPI summary: %s", summary)
    return summary
