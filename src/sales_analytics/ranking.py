"""Result ranker/filter: order, filter and window grouped rows.

Everything here is a view operation over rows that were already
aggregated; nothing is recomputed when the filter or page size changes.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from enum import Enum
from operator import attrgetter
from typing import Any

from sales_analytics.exceptions import InvalidRequestError
from sales_analytics.metrics import GroupAggregate

logger = logging.getLogger(__name__)


class QuickFilter(str, Enum):
    """Tri-state filter on group activity."""

    ALL = "all"
    ACTIVE = "active"
    INACTIVE = "inactive"

    @classmethod
    def parse(cls, value: QuickFilter | str) -> QuickFilter:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            raise InvalidRequestError(
                f"Invalid quick filter '{value}'. Must be 'all', 'active', or 'inactive'."
            ) from e

    def matches(self, row: GroupAggregate) -> bool:
        if self is QuickFilter.ACTIVE:
            return row.total_value > 0
        if self is QuickFilter.INACTIVE:
            return row.total_value == 0
        return True


def rank_by_total_value(rows: Sequence[GroupAggregate]) -> list[GroupAggregate]:
    """Sort rows by total_value, highest first. Ties keep their input order."""
    return sorted(rows, key=attrgetter("total_value"), reverse=True)


def apply_quick_filter(
    rows: Sequence[GroupAggregate],
    quick_filter: QuickFilter | str = QuickFilter.ALL,
) -> list[GroupAggregate]:
    """Keep the rows matching the quick filter, preserving order."""
    quick_filter = QuickFilter.parse(quick_filter)
    return [row for row in rows if quick_filter.matches(row)]


def quick_filter_counts(rows: Sequence[GroupAggregate]) -> dict[str, int]:
    """Number of rows each quick filter would keep, keyed by filter value."""
    return {f.value: sum(1 for row in rows if f.matches(row)) for f in QuickFilter}


def _check_size(n: int) -> None:
    if n < 0:
        raise InvalidRequestError(f"Slice size must be non-negative, got {n}")


def top_n(rows: Sequence[Any], n: int) -> list[Any]:
    """First n rows of an already-ranked sequence."""
    _check_size(n)
    return list(rows[:n])


def bottom_n(rows: Sequence[Any], n: int) -> list[Any]:
    """Last n rows of a descending sequence, least-performing first.

    Examples:
        >>> bottom_n([5, 4, 3, 2, 1], 2)
        [1, 2]
    """
    _check_size(n)
    if n == 0:
        return []
    return list(reversed(rows[-n:]))


@dataclass(frozen=True)
class PageWindow:
    """Growing view window over a ranked sequence.

    Attributes:
        size: Number of rows currently shown.
        initial_size: Size restored by reset().
        increment: Rows added by each show_more() step.
    """

    size: int = 5
    initial_size: int = 5
    increment: int = 5

    def __post_init__(self) -> None:
        for name in ("size", "initial_size", "increment"):
            if getattr(self, name) < 1:
                raise InvalidRequestError(f"PageWindow.{name} must be positive")

    @classmethod
    def starting_at(cls, page_size: int, increment: int | None = None) -> PageWindow:
        if increment is None:
            increment = page_size
        return cls(size=page_size, initial_size=page_size, increment=increment)

    def has_more(self, total: int) -> bool:
        return total > self.size

    def next_increment(self, total: int) -> int:
        """How many rows the next show_more() would reveal."""
        return max(0, min(self.increment, total - self.size))

    def show_more(self) -> PageWindow:
        return replace(self, size=self.size + self.increment)

    def reset(self) -> PageWindow:
        return replace(self, size=self.initial_size)


@dataclass(frozen=True)
class RankedView:
    """Top and bottom slices of the filtered, ranked rows.

    Attributes:
        top: Best performers, highest total first.
        bottom: Least performers, lowest total first.
        total: Number of rows after filtering.
        counts: Row counts per quick filter before filtering.
        window: Page window the slices were cut with.
    """

    top: list[GroupAggregate]
    bottom: list[GroupAggregate]
    total: int
    counts: dict[str, int]
    window: PageWindow

    @property
    def has_more(self) -> bool:
        return self.window.has_more(self.total)

    def to_dict(self) -> dict[str, Any]:
        return {
            "top": [row.to_dict() for row in self.top],
            "bottom": [row.to_dict() for row in self.bottom],
            "total": self.total,
            "counts": dict(self.counts),
            "page_size": self.window.size,
            "has_more": self.has_more,
        }


def build_ranked_view(
    rows: Sequence[GroupAggregate],
    quick_filter: QuickFilter | str = QuickFilter.ALL,
    window: PageWindow | None = None,
) -> RankedView:
    """Rank, filter and slice grouped rows for a top/bottom performers view.

    Args:
        rows: GroupAggregates from the grouper.
        quick_filter: Activity filter applied after ranking.
        window: Current page window. Defaults to a 5-row window.

    Returns:
        RankedView with both slices taken from the same filtered sequence.
    """
    if window is None:
        window = PageWindow()
    ranked = rank_by_total_value(rows)
    filtered = apply_quick_filter(ranked, quick_filter)
    view = RankedView(
        top=top_n(filtered, window.size),
        bottom=bottom_n(filtered, window.size),
        total=len(filtered),
        counts=quick_filter_counts(ranked),
        window=window,
    )
    logger.debug(
        "Ranked %d row(s); showing %d of %d after filter", len(rows), len(view.top), view.total
    )
    return view
