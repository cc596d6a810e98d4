"""Payment date parsing and calendar month helpers.

Payment dates arrive as text in one of two layouts:

- ``D/M/YYYY`` (day first, 1-2 digit day and month)
- ``YYYY/M/D`` (year first)

The layouts are tried in that order and the first match wins. Anything
else raises DateParseFailure. Dates are day-granular and taken at face
value; no time-of-day or timezone normalization is applied.

Examples:
    >>> parse_payment_date("1/2/2024")
    datetime.date(2024, 2, 1)
    >>> parse_payment_date("2024/2/1")
    datetime.date(2024, 2, 1)
    >>> trailing_month_keys(date(2024, 2, 15), count=3)
    ['2023-12', '2024-01', '2024-02']
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime

import pandas as pd

from sales_analytics.exceptions import DateParseFailure

logger = logging.getLogger(__name__)

_DAY_FIRST_RE = re.compile(r"^(?P<day>\d{1,2})/(?P<month>\d{1,2})/(?P<year>\d{4})$")
_YEAR_FIRST_RE = re.compile(r"^(?P<year>\d{4})/(?P<month>\d{1,2})/(?P<day>\d{1,2})$")

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


def parse_payment_date(value: object) -> date:
    """Parse a payment date into a calendar date.

    Args:
        value: Date text, or an already-parsed date/datetime/Timestamp.

    Returns:
        Parsed date object.

    Raises:
        DateParseFailure: If the value is missing, not in a recognized
            layout, or has out-of-range components (e.g. "31/2/2024").
    """
    if isinstance(value, str):
        text = value.strip()
        for pattern in (_DAY_FIRST_RE, _YEAR_FIRST_RE):
            match = pattern.match(text)
            if match:
                try:
                    return date(
                        int(match.group("year")),
                        int(match.group("month")),
                        int(match.group("day")),
                    )
                except ValueError as e:
                    raise DateParseFailure(value) from e
        raise DateParseFailure(value)

    # datetime before date: datetime (and Timestamp, NaT) subclass date
    if isinstance(value, datetime):
        if pd.isna(value):
            raise DateParseFailure(value)
        return value.date()
    if isinstance(value, date):
        return value
    raise DateParseFailure(value)


def try_parse_payment_date(value: object) -> date | None:
    """Parse a payment date, returning None instead of raising."""
    try:
        return parse_payment_date(value)
    except DateParseFailure:
        return None


def month_key(d: date) -> str:
    """Format a date as its ``YYYY-MM`` month bucket label."""
    return f"{d.year:04d}-{d.month:02d}"


def trailing_month_keys(today: date, count: int = 6) -> list[str]:
    """Return month keys for the trailing window ending at today's month.

    Keys run oldest first, from ``current month - (count - 1)`` to the
    current month, wrapping year boundaries.

    Args:
        today: Reference date whose month closes the window.
        count: Number of months in the window.

    Returns:
        List of ``YYYY-MM`` keys.
    """
    current = today.year * 12 + (today.month - 1)
    keys = []
    for offset in range(count - 1, -1, -1):
        year, month_index = divmod(current - offset, 12)
        keys.append(f"{year:04d}-{month_index + 1:02d}")
    return keys


def parse_date_column(values: pd.Series) -> pd.Series:
    """Parse a column of payment dates, leaving None where parsing fails.

    Failures are counted and logged once per call; they never abort the
    computation.
    """
    parsed = pd.Series(
        [try_parse_payment_date(value) for value in values],
        index=values.index,
        dtype=object,
    )
    failures = int(parsed.isna().sum())
    if failures:
        logger.warning(
            "Excluded %d of %d transaction(s) with unparseable payment dates from period buckets",
            failures,
            len(values),
        )
    return parsed
