"""Dimension grouper: partition transactions by a categorical key.

Each transaction maps to one group key taken from a single canonical
field. Missing or blank values fall back to the dimension's "Unknown"
label, so every transaction lands in exactly one group and group totals
sum to the input total.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

import pandas as pd

from sales_analytics.exceptions import InvalidRequestError
from sales_analytics.metrics import GroupAggregate, aggregate_frame
from sales_analytics.transactions import normalize_transactions

logger = logging.getLogger(__name__)

ALL_TRANSACTIONS_LABEL = "All Transactions"
GROUP_KEY_COLUMN = "group_key"


class Dimension(str, Enum):
    """Categorical field used to partition transactions."""

    PRODUCT = "product"
    CATEGORY = "category"
    MEMBER = "member"
    SELLER = "seller"
    PAYMENT_METHOD = "paymentMethod"

    @classmethod
    def parse(cls, value: Dimension | str) -> Dimension:
        """Resolve a dimension from its name, raising InvalidRequestError if unknown."""
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for dimension in cls:
            if text.lower() in (dimension.value.lower(), dimension.name.lower()):
                return dimension
        valid = ", ".join(d.value for d in cls)
        raise InvalidRequestError(f"Invalid dimension '{value}'. Must be one of: {valid}.")

    @property
    def column(self) -> str:
        """Canonical transaction column holding this dimension's key."""
        return _DIMENSION_COLUMNS[self]

    @property
    def unknown_label(self) -> str:
        """Group key used when the transaction has no value for this dimension."""
        return _UNKNOWN_LABELS[self]


_DIMENSION_COLUMNS = {
    Dimension.PRODUCT: "product",
    Dimension.CATEGORY: "category",
    Dimension.MEMBER: "customer_name",
    Dimension.SELLER: "sold_by",
    Dimension.PAYMENT_METHOD: "payment_method",
}

_UNKNOWN_LABELS = {
    Dimension.PRODUCT: "Unknown Product",
    Dimension.CATEGORY: "Unknown Category",
    Dimension.MEMBER: "Unknown Member",
    Dimension.SELLER: "Unknown Seller",
    Dimension.PAYMENT_METHOD: "Unknown Method",
}


def group_keys(df: pd.DataFrame, dimension: Dimension | None) -> pd.Series:
    """Compute the group key of every normalized transaction.

    Args:
        df: Normalized transactions.
        dimension: Dimension to key on. None puts every transaction in a
            single ALL_TRANSACTIONS_LABEL group.

    Returns:
        Series of string keys aligned with df.
    """
    if dimension is None:
        return pd.Series(ALL_TRANSACTIONS_LABEL, index=df.index, dtype=object)

    label = dimension.unknown_label

    def _key(value: Any) -> str:
        if value is None or (isinstance(value, float) and pd.isna(value)):
            return label
        text = str(value).strip()
        return text or label

    return df[dimension.column].map(_key).astype(object)


def group_transactions(
    transactions: Any,
    dimension: Dimension | str | None,
) -> list[GroupAggregate]:
    """Group transactions by a dimension and compute each group's metrics.

    Args:
        transactions: Raw records, Transaction objects, or a DataFrame.
        dimension: Dimension to group by, or None for a single overall group.

    Returns:
        One GroupAggregate per distinct key, in first-seen order.
        Empty input yields an empty list.

    Raises:
        InvalidRequestError: If dimension is not recognized.

    Examples:
        >>> rows = group_transactions(
        ...     [{"paymentValue": 10, "product": "Mat"}, {"paymentValue": 5}],
        ...     "product",
        ... )
        >>> [(r.name, r.total_value) for r in rows]
        [('Mat', 10.0), ('Unknown Product', 5.0)]
    """
    if dimension is not None:
        dimension = Dimension.parse(dimension)

    df = normalize_transactions(transactions)
    if df.empty:
        return []

    keyed = df.assign(**{GROUP_KEY_COLUMN: group_keys(df, dimension)})
    frame = aggregate_frame(keyed, [GROUP_KEY_COLUMN])
    rows = [
        GroupAggregate.from_record(record[GROUP_KEY_COLUMN], record)
        for record in frame.to_dict("records")
    ]

    logger.info(
        "Grouped %d transaction(s) into %d %s group(s)",
        len(df),
        len(rows),
        dimension.value if dimension is not None else "overall",
    )
    return rows
