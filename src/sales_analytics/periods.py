"""Period comparator: calendar buckets, month-over-month and year-over-year.

Transactions are bucketed by the calendar month (``YYYY-MM``) or year
(``YYYY``) of their payment date. Transactions whose date cannot be parsed
are left out of every bucket here; they still count in plain dimension
groupings.

Two comparison views are built on top of the buckets:

- Month over month: the trailing window of calendar months ending at the
  current month, one row per dimension value, with growth against the
  previous month and a running total per row.
- Year over year: January through December for two years, with growth per
  month and a totals row whose growth is computed from the yearly totals.

Both views end with a totals row flagged ``is_total``.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import date
from enum import Enum
from typing import Any

import pandas as pd

from sales_analytics.dates import MONTH_NAMES, month_key, parse_date_column, trailing_month_keys
from sales_analytics.exceptions import InvalidRequestError
from sales_analytics.grouping import GROUP_KEY_COLUMN, Dimension, group_keys
from sales_analytics.metrics import GroupAggregate, Metric, aggregate_frame, growth_rate
from sales_analytics.transactions import normalize_transactions

logger = logging.getLogger(__name__)

PERIOD_COLUMN = "period"
DAY_COLUMN = "payment_day"
TOTAL_LABEL = "Total"


class PeriodGranularity(str, Enum):
    """Calendar unit used for period buckets."""

    MONTH = "month"
    YEAR = "year"

    @classmethod
    def parse(cls, value: PeriodGranularity | str) -> PeriodGranularity:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            raise InvalidRequestError(
                f"Invalid granularity '{value}'. Must be 'month' or 'year'."
            ) from e

    def label(self, d: date) -> str:
        """Period label of a date: ``YYYY-MM`` or ``YYYY``."""
        if self is PeriodGranularity.MONTH:
            return month_key(d)
        return f"{d.year:04d}"


@dataclass(frozen=True)
class PeriodBucket:
    """Metrics for one (dimension key, period) pair."""

    key: str
    period: str
    aggregate: GroupAggregate

    def metric(self, metric: Metric | str) -> float:
        return self.aggregate.metric(metric)

    def to_dict(self) -> dict[str, Any]:
        data = self.aggregate.to_dict()
        data.pop("name")
        return {"key": self.key, "period": self.period, **data}


@dataclass(frozen=True)
class MonthOverMonthRow:
    """One dimension value across the trailing month window.

    Attributes:
        name: Dimension value, or "Total" for the totals row.
        values: Metric value per month key, oldest first. Months without
            transactions are 0.
        growth: Growth percentage of each month over the previous one;
            0 for the first month of the window.
        total: Sum of the month values.
        is_total: True only for the totals row.
    """

    name: str
    values: dict[str, float]
    growth: dict[str, float]
    total: float
    is_total: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "values": dict(self.values),
            "growth": dict(self.growth),
            "total": self.total,
            "is_total": self.is_total,
        }


@dataclass(frozen=True)
class YearOverYearRow:
    """One calendar month compared across two years.

    ``year_a`` is the baseline; growth is from value_a to value_b.
    """

    month: str
    year_a: int
    year_b: int
    value_a: float
    value_b: float
    growth: float
    is_total: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _dated_transactions(df: pd.DataFrame) -> pd.DataFrame:
    """Attach parsed payment days, dropping transactions that cannot be bucketed."""
    days = parse_date_column(df["payment_date"])
    dated = df.assign(**{DAY_COLUMN: days})
    return dated[dated[DAY_COLUMN].notna()]


def _sequential_growth(values: dict[str, float]) -> dict[str, float]:
    growth: dict[str, float] = {}
    previous: float | None = None
    for key, value in values.items():
        growth[key] = growth_rate(value, previous) if previous is not None else 0.0
        previous = value
    return growth


def bucket_transactions(
    transactions: Any,
    granularity: PeriodGranularity | str = PeriodGranularity.MONTH,
    dimension: Dimension | str | None = None,
) -> list[PeriodBucket]:
    """Bucket transactions by calendar period and optional dimension.

    Args:
        transactions: Raw records, Transaction objects, or a DataFrame.
        granularity: "month" or "year".
        dimension: Optional dimension to split each period by.

    Returns:
        PeriodBuckets in chronological order; within a period, keys keep
        first-seen order. Empty input yields an empty list.
    """
    granularity = PeriodGranularity.parse(granularity)
    if dimension is not None:
        dimension = Dimension.parse(dimension)

    df = normalize_transactions(transactions)
    if df.empty:
        return []
    dated = _dated_transactions(df)
    if dated.empty:
        return []

    keyed = dated.assign(
        **{
            GROUP_KEY_COLUMN: group_keys(dated, dimension),
            PERIOD_COLUMN: dated[DAY_COLUMN].map(granularity.label),
        }
    )
    frame = aggregate_frame(keyed, [GROUP_KEY_COLUMN, PERIOD_COLUMN])
    frame = frame.sort_values(PERIOD_COLUMN, kind="stable")

    buckets = [
        PeriodBucket(
            key=str(record[GROUP_KEY_COLUMN]),
            period=str(record[PERIOD_COLUMN]),
            aggregate=GroupAggregate.from_record(record[GROUP_KEY_COLUMN], record),
        )
        for record in frame.to_dict("records")
    ]
    logger.debug("Built %d %s bucket(s)", len(buckets), granularity.value)
    return buckets


def compare_month_over_month(
    transactions: Any,
    dimension: Dimension | str | None = Dimension.PRODUCT,
    metric: Metric | str = Metric.REVENUE,
    today: date | None = None,
    months: int = 6,
) -> list[MonthOverMonthRow]:
    """Compare a metric across the trailing calendar months per dimension value.

    The window runs from ``current month - (months - 1)`` to the current
    month, wrapping year boundaries. Every dimension value seen among
    date-parseable transactions gets a row, even if all its months are 0.

    Args:
        transactions: Raw records, Transaction objects, or a DataFrame.
        dimension: Secondary dimension for rows; None for a single overall row.
        metric: Metric to compare.
        today: Reference date for the window. Defaults to date.today().
        months: Window length in months.

    Returns:
        One MonthOverMonthRow per dimension value in first-seen order,
        followed by a totals row. Empty input yields an empty list.

    Raises:
        InvalidRequestError: If the metric, dimension or window is invalid.
    """
    metric = Metric.parse(metric)
    if dimension is not None:
        dimension = Dimension.parse(dimension)
    if months < 1:
        raise InvalidRequestError(f"months must be at least 1, got {months}")
    if today is None:
        today = date.today()

    window = trailing_month_keys(today, months)

    df = normalize_transactions(transactions)
    if df.empty:
        return []
    dated = _dated_transactions(df)
    if dated.empty:
        return []

    keyed = dated.assign(
        **{
            GROUP_KEY_COLUMN: group_keys(dated, dimension),
            PERIOD_COLUMN: dated[DAY_COLUMN].map(month_key),
        }
    )
    names = list(dict.fromkeys(keyed[GROUP_KEY_COLUMN]))
    frame = aggregate_frame(keyed[keyed[PERIOD_COLUMN].isin(window)], [GROUP_KEY_COLUMN, PERIOD_COLUMN])
    lookup = {
        (record[GROUP_KEY_COLUMN], record[PERIOD_COLUMN]): GroupAggregate.from_record(
            record[GROUP_KEY_COLUMN], record
        ).metric(metric)
        for record in frame.to_dict("records")
    }

    rows = []
    for name in names:
        values = {month: lookup.get((name, month), 0.0) for month in window}
        rows.append(
            MonthOverMonthRow(
                name=str(name),
                values=values,
                growth=_sequential_growth(values),
                total=sum(values.values()),
            )
        )

    column_totals = {month: sum(row.values[month] for row in rows) for month in window}
    rows.append(
        MonthOverMonthRow(
            name=TOTAL_LABEL,
            values=column_totals,
            growth=_sequential_growth(column_totals),
            total=sum(row.total for row in rows),
            is_total=True,
        )
    )

    logger.info(
        "Month-over-month %s for %d row(s) over %s..%s",
        metric.value,
        len(rows) - 1,
        window[0],
        window[-1],
    )
    return rows


def compare_year_over_year(
    transactions: Any,
    metric: Metric | str = Metric.REVENUE,
    year_a: int | None = None,
    year_b: int | None = None,
    today: date | None = None,
) -> list[YearOverYearRow]:
    """Compare a metric month by month between two calendar years.

    Args:
        transactions: Raw records, Transaction objects, or a DataFrame.
        metric: Metric to compare.
        year_a: Baseline year. Defaults to year_b - 1.
        year_b: Comparison year. Defaults to the current year.
        today: Reference date used for the default year_b.

    Returns:
        Twelve rows (January..December) followed by a totals row. The totals
        row sums the monthly values per year and takes its growth from
        those totals, not from the monthly growth figures. Empty input
        yields an empty list.

    Examples:
        >>> rows = compare_year_over_year(
        ...     [{"paymentValue": 1000, "paymentDate": "5/1/2024"},
        ...      {"paymentValue": 1500, "paymentDate": "5/1/2025"}],
        ...     year_a=2024, year_b=2025,
        ... )
        >>> rows[-1].growth
        50.0
    """
    metric = Metric.parse(metric)
    if year_b is None:
        year_b = (today or date.today()).year
    if year_a is None:
        year_a = year_b - 1
    year_a, year_b = int(year_a), int(year_b)

    df = normalize_transactions(transactions)
    if df.empty:
        return []
    dated = _dated_transactions(df)

    keyed = dated.assign(
        year=dated[DAY_COLUMN].map(lambda d: d.year),
        month=dated[DAY_COLUMN].map(lambda d: d.month),
    )
    keyed = keyed[keyed["year"].isin([year_a, year_b])]
    frame = aggregate_frame(keyed, ["year", "month"])
    lookup = {
        (int(record["year"]), int(record["month"])): GroupAggregate.from_record(
            MONTH_NAMES[int(record["month"]) - 1], record
        ).metric(metric)
        for record in frame.to_dict("records")
    }

    rows = []
    for index, month_name in enumerate(MONTH_NAMES, start=1):
        value_a = lookup.get((year_a, index), 0.0)
        value_b = lookup.get((year_b, index), 0.0)
        rows.append(
            YearOverYearRow(
                month=month_name,
                year_a=year_a,
                year_b=year_b,
                value_a=value_a,
                value_b=value_b,
                growth=growth_rate(value_b, value_a),
            )
        )

    total_a = sum(row.value_a for row in rows)
    total_b = sum(row.value_b for row in rows)
    rows.append(
        YearOverYearRow(
            month=TOTAL_LABEL,
            year_a=year_a,
            year_b=year_b,
            value_a=total_a,
            value_b=total_b,
            growth=growth_rate(total_b, total_a),
            is_total=True,
        )
    )

    logger.info(
        "Year-over-year %s: %d=%.2f, %d=%.2f",
        metric.value,
        year_a,
        total_a,
        year_b,
        total_b,
    )
    return rows
