"""Public API: run an analysis described by a request descriptor.

A presentation layer hands over the raw transactions plus a request and
gets back JSON-serializable rows, without knowing which pipeline built
them.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Optional

from sales_analytics.config import AnalyticsConfig
from sales_analytics.exceptions import InvalidRequestError
from sales_analytics.grouping import Dimension, group_transactions
from sales_analytics.metrics import Metric
from sales_analytics.periods import compare_month_over_month, compare_year_over_year
from sales_analytics.ranking import (
    QuickFilter,
    apply_quick_filter,
    rank_by_total_value,
    top_n,
)

logger = logging.getLogger(__name__)


class PeriodMode(str, Enum):
    """Which pipeline a request runs."""

    NONE = "none"
    MONTH_OVER_MONTH = "monthOverMonth"
    YEAR_OVER_YEAR = "yearOverYear"

    @classmethod
    def parse(cls, value: PeriodMode | str | None) -> PeriodMode:
        if value is None:
            return cls.NONE
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for mode in cls:
            if text in (mode.value.lower(), mode.name.lower()):
                return mode
        valid = ", ".join(m.value for m in cls)
        raise InvalidRequestError(f"Invalid period mode '{value}'. Must be one of: {valid}.")


@dataclass(frozen=True)
class AnalysisRequest:
    """Description of one analysis view.

    Attributes:
        dimension: Dimension to group by; None for a single overall row.
        metric: Metric used by period comparisons.
        period_mode: Plain grouping, month over month, or year over year.
        comparison_years: (baseline, comparison) years for year over year.
            Defaults to the previous and current year.
        top_n: Optional limit on the number of ranked rows returned.
        quick_filter: Activity filter for plain groupings.
    """

    dimension: Optional[Dimension] = None
    metric: Metric = Metric.REVENUE
    period_mode: PeriodMode = PeriodMode.NONE
    comparison_years: Optional[tuple[int, int]] = None
    top_n: Optional[int] = None
    quick_filter: QuickFilter = QuickFilter.ALL

    def __post_init__(self) -> None:
        # Accept plain strings and coerce them to the enums in place
        if self.dimension is not None:
            object.__setattr__(self, "dimension", Dimension.parse(self.dimension))
        object.__setattr__(self, "metric", Metric.parse(self.metric))
        object.__setattr__(self, "period_mode", PeriodMode.parse(self.period_mode))
        object.__setattr__(self, "quick_filter", QuickFilter.parse(self.quick_filter))
        if self.comparison_years is not None:
            try:
                years = tuple(int(y) for y in self.comparison_years)
            except (TypeError, ValueError) as e:
                raise InvalidRequestError(
                    f"comparison_years must hold two years, got {self.comparison_years!r}"
                ) from e
            if len(years) != 2:
                raise InvalidRequestError(
                    f"comparison_years must hold two years, got {self.comparison_years!r}"
                )
            object.__setattr__(self, "comparison_years", years)
        if self.top_n is not None:
            try:
                top = int(self.top_n)
            except (TypeError, ValueError) as e:
                raise InvalidRequestError(f"top_n must be an integer, got {self.top_n!r}") from e
            if top < 0:
                raise InvalidRequestError(f"top_n must be non-negative, got {top}")
            object.__setattr__(self, "top_n", top)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> AnalysisRequest:
        """Build a request from a camelCase descriptor.

        Examples:
            >>> AnalysisRequest.from_dict({"dimension": "seller", "topN": 3}).top_n
            3
        """
        return cls(
            dimension=payload.get("dimension"),
            metric=payload.get("metric", Metric.REVENUE),
            period_mode=payload.get("periodMode", PeriodMode.NONE),
            comparison_years=payload.get("comparisonYears"),
            top_n=payload.get("topN"),
            quick_filter=payload.get("quickFilter", QuickFilter.ALL),
        )


def run_analysis(
    transactions: Any,
    request: AnalysisRequest,
    today: date | None = None,
    config: AnalyticsConfig | None = None,
) -> list[dict[str, Any]]:
    """Run the pipeline selected by the request and return serializable rows.

    Args:
        transactions: Raw records, Transaction objects, or a DataFrame.
        request: What to compute.
        today: Reference date for period windows. Defaults to date.today().
        config: Analytics configuration. Defaults to AnalyticsConfig().

    Returns:
        List of plain dicts. For plain groupings: ranked GroupAggregate rows.
        For month over month: one row per dimension value ranked by total,
        then the totals row. For year over year: twelve month rows and the
        totals row. Empty input yields an empty list.
    """
    if config is None:
        config = AnalyticsConfig()

    logger.info(
        "Running %s analysis (dimension=%s, metric=%s)",
        request.period_mode.value,
        request.dimension.value if request.dimension else None,
        request.metric.value,
    )

    if request.period_mode is PeriodMode.MONTH_OVER_MONTH:
        rows = compare_month_over_month(
            transactions,
            dimension=request.dimension,
            metric=request.metric,
            today=today,
            months=config.trailing_months,
        )
        if not rows:
            return []
        body, totals = rows[:-1], rows[-1]
        body = sorted(body, key=lambda row: row.total, reverse=True)
        if request.top_n is not None:
            body = top_n(body, request.top_n)
        return [row.to_dict() for row in [*body, totals]]

    if request.period_mode is PeriodMode.YEAR_OVER_YEAR:
        year_a, year_b = request.comparison_years or (None, None)
        rows = compare_year_over_year(
            transactions,
            metric=request.metric,
            year_a=year_a,
            year_b=year_b,
            today=today,
        )
        return [row.to_dict() for row in rows]

    groups = rank_by_total_value(group_transactions(transactions, request.dimension))
    groups = apply_quick_filter(groups, request.quick_filter)
    if request.top_n is not None:
        groups = top_n(groups, request.top_n)
    return [group.to_dict() for group in groups]
