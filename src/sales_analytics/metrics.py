"""Metric calculator: aggregate totals and derived retail ratios.

Every grouped row carries the same metric vector:

- total_value: sum of payment values
- transaction_count: number of transactions
- units_sold: one unit per transaction, so equal to transaction_count
- unique_member_count: number of distinct member IDs
- atv: average transaction value (total_value / transaction_count)
- auv: average unit value (total_value / units_sold)
- asv: average spend per unique member (total_value / unique_member_count)
- upt: units per transaction (units_sold / transaction_count)

Ratios with a zero denominator are 0, as is growth from a zero baseline.
Nothing here raises on degenerate input or returns NaN/inf.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any

import numpy as np
import pandas as pd

from sales_analytics.exceptions import InvalidRequestError

logger = logging.getLogger(__name__)

TOTAL_COLUMNS = ["total_value", "transaction_count", "units_sold", "unique_member_count"]
RATIO_COLUMNS = ["atv", "auv", "asv", "upt"]


class Metric(str, Enum):
    """Metric selectable for comparison views."""

    REVENUE = "revenue"
    TRANSACTIONS = "transactions"
    MEMBERS = "members"
    ATV = "atv"
    AUV = "auv"
    ASV = "asv"
    UPT = "upt"

    @classmethod
    def parse(cls, value: Metric | str) -> Metric:
        """Resolve a metric from its name, raising InvalidRequestError if unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            valid = ", ".join(m.value for m in cls)
            raise InvalidRequestError(f"Invalid metric '{value}'. Must be one of: {valid}.") from e

    @property
    def column(self) -> str:
        """Name of the GroupAggregate field holding this metric."""
        return _METRIC_COLUMNS[self]

    @property
    def is_currency(self) -> bool:
        return self in (Metric.REVENUE, Metric.ATV, Metric.AUV, Metric.ASV)


_METRIC_COLUMNS = {
    Metric.REVENUE: "total_value",
    Metric.TRANSACTIONS: "transaction_count",
    Metric.MEMBERS: "unique_member_count",
    Metric.ATV: "atv",
    Metric.AUV: "auv",
    Metric.ASV: "asv",
    Metric.UPT: "upt",
}


def safe_divide(numerator: float, denominator: float) -> float:
    """Divide, returning 0.0 when the denominator is not positive."""
    if denominator > 0:
        return float(numerator) / float(denominator)
    return 0.0


def growth_rate(current: float, previous: float) -> float:
    """Percentage change from previous to current.

    Zero-baseline growth is defined as 0.0 rather than infinite.

    Examples:
        >>> growth_rate(1500, 1000)
        50.0
        >>> growth_rate(1500, 0)
        0.0
    """
    if previous > 0:
        return (float(current) - float(previous)) / float(previous) * 100
    return 0.0


def _safe_divide_array(numerator: np.ndarray, denominator: np.ndarray) -> np.ndarray:
    out = np.zeros(len(numerator), dtype=float)
    np.divide(numerator, denominator, out=out, where=denominator > 0)
    return out


def with_ratios(frame: pd.DataFrame) -> pd.DataFrame:
    """Add the atv/auv/asv/upt columns to a frame of summed totals.

    Args:
        frame: DataFrame with TOTAL_COLUMNS.

    Returns:
        Copy of frame with RATIO_COLUMNS added.
    """
    frame = frame.copy()
    total = frame["total_value"].to_numpy(dtype=float)
    transactions = frame["transaction_count"].to_numpy(dtype=float)
    units = frame["units_sold"].to_numpy(dtype=float)
    members = frame["unique_member_count"].to_numpy(dtype=float)

    frame["atv"] = _safe_divide_array(total, transactions)
    frame["auv"] = _safe_divide_array(total, units)
    frame["asv"] = _safe_divide_array(total, members)
    frame["upt"] = _safe_divide_array(units, transactions)
    return frame


def aggregate_frame(df: pd.DataFrame, by: list[str]) -> pd.DataFrame:
    """Sum normalized transactions per group and derive ratios.

    Groups keep first-seen order. Member IDs are collected per group only
    long enough to count them; the sets never leave this function.

    Args:
        df: Normalized transactions (see transactions.normalize_transactions).
        by: Columns to group by.

    Returns:
        DataFrame with the ``by`` columns, TOTAL_COLUMNS and RATIO_COLUMNS.
    """
    if df.empty:
        return pd.DataFrame(columns=[*by, *TOTAL_COLUMNS, *RATIO_COLUMNS])

    totals = (
        df.groupby(by, sort=False)
        .agg(
            total_value=("payment_value", "sum"),
            transaction_count=("payment_value", "size"),
            unique_member_count=("member_id", "nunique"),
        )
        .reset_index()
    )
    # one unit per transaction
    totals["units_sold"] = totals["transaction_count"]
    logger.debug("Aggregated %d transaction(s) into %d group(s) by %s", len(df), len(totals), by)
    return with_ratios(totals[[*by, *TOTAL_COLUMNS]])


@dataclass(frozen=True)
class GroupAggregate:
    """Totals and ratios for one group of transactions.

    Attributes:
        name: The group key.
        total_value: Sum of payment values.
        transaction_count: Number of transactions.
        units_sold: Units sold (one per transaction).
        unique_member_count: Number of distinct members.
        atv: Average transaction value.
        auv: Average unit value.
        asv: Average spend per unique member.
        upt: Units per transaction.
    """

    name: str
    total_value: float
    transaction_count: int
    units_sold: int
    unique_member_count: int
    atv: float
    auv: float
    asv: float
    upt: float

    @classmethod
    def from_record(cls, name: str, record: Mapping[str, Any]) -> GroupAggregate:
        """Build from one row of aggregate_frame output, as plain Python numbers."""
        return cls(
            name=str(name),
            total_value=float(record["total_value"]),
            transaction_count=int(record["transaction_count"]),
            units_sold=int(record["units_sold"]),
            unique_member_count=int(record["unique_member_count"]),
            atv=float(record["atv"]),
            auv=float(record["auv"]),
            asv=float(record["asv"]),
            upt=float(record["upt"]),
        )

    def metric(self, metric: Metric | str) -> float:
        """Return the value of one metric from this aggregate."""
        return float(getattr(self, Metric.parse(metric).column))

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
