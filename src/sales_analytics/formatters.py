"""Display formatting for currency, counts and percentages.

Formatting is for presentation only; callers keep the raw numbers.
Amounts use Indian digit grouping and the crore/lakh/thousand short forms.

Examples:
    >>> format_currency(2_500_000)
    '₹25.0L'
    >>> format_number(1234567)
    '12,34,567'
    >>> format_percentage(12.345)
    '+12.3%'
"""

from __future__ import annotations

from sales_analytics.metrics import Metric

CRORE = 10_000_000
LAKH = 100_000
THOUSAND = 1_000


def _group_indian(integer: str) -> str:
    """Insert en-IN separators: last three digits, then pairs."""
    if len(integer) <= 3:
        return integer
    head, tail = integer[:-3], integer[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join([*groups, tail])


def format_number(value: float) -> str:
    """Format a number with en-IN grouping and at most three decimals."""
    text = f"{abs(value):.3f}".rstrip("0").rstrip(".")
    integer, _, fraction = text.partition(".")
    grouped = _group_indian(integer)
    if fraction:
        grouped = f"{grouped}.{fraction}"
    if value < 0 and text != "0":
        grouped = "-" + grouped
    return grouped


def format_currency(value: float, symbol: str = "₹") -> str:
    """Format an amount with crore (Cr), lakh (L) and thousand (K) short forms."""
    magnitude = abs(value)
    if magnitude >= CRORE:
        return f"{symbol}{value / CRORE:.1f}Cr"
    if magnitude >= LAKH:
        return f"{symbol}{value / LAKH:.1f}L"
    if magnitude >= THOUSAND:
        return f"{symbol}{value / THOUSAND:.1f}K"
    return f"{symbol}{format_number(value)}"


def format_percentage(value: float) -> str:
    """Format a growth percentage with an explicit sign for non-negative values."""
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.1f}%"


def format_metric_value(value: float, metric: Metric | str, symbol: str = "₹") -> str:
    """Format a metric value as currency or as a plain number, by metric."""
    if Metric.parse(metric).is_currency:
        return format_currency(value, symbol)
    return format_number(value)
