"""Ingestion: normalize raw transaction records into one canonical shape.

Source systems spell the same field several ways ("Payment Value",
``paymentValue``, ``payment_value``). This module holds the single alias
table that maps every known spelling to a canonical column, so the rest of
the package only ever reads canonical fields.

Canonical columns:
    payment_value   float, 0.0 when missing or non-numeric
    payment_date    raw text or date object, None when missing
    member_id       identifier used for unique-member counts
    customer_name   member display key (falls back to member_id)
    product         cleaned product, falling back to the raw payment item
    category        cleaned category, falling back to the payment category
    sold_by         seller name
    payment_method  payment method name
    payment_vat     optional float

Examples:
    >>> df = normalize_transactions([{"Payment Value": "100", "Member ID": "A"}])
    >>> float(df.loc[0, "payment_value"])
    100.0
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import asdict, dataclass
from typing import Any, Optional

import pandas as pd

from sales_analytics.exceptions import DataQualityError

logger = logging.getLogger(__name__)

# Canonical column -> source spellings, in precedence order
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "payment_value": ("payment_value", "paymentValue", "Payment Value"),
    "payment_date": ("payment_date", "paymentDate", "Payment Date"),
    "member_id": ("member_id", "memberId", "Member ID"),
    "customer_name": ("customer_name", "customerName", "Customer Name"),
    "product": (
        "product",
        "Product",
        "cleaned_product",
        "cleanedProduct",
        "Cleaned Product",
        "payment_item",
        "paymentItem",
        "Payment Item",
    ),
    "category": (
        "category",
        "Category",
        "cleaned_category",
        "cleanedCategory",
        "Cleaned Category",
        "payment_category",
        "paymentCategory",
        "Payment Category",
    ),
    "sold_by": ("sold_by", "soldBy", "Sold By"),
    "payment_method": ("payment_method", "paymentMethod", "Payment Method"),
    "payment_vat": ("payment_vat", "paymentVAT", "Payment VAT"),
}

CANONICAL_COLUMNS = list(FIELD_ALIASES)

_TEXT_COLUMNS = ["member_id", "customer_name", "product", "category", "sold_by", "payment_method"]


@dataclass(frozen=True)
class Transaction:
    """One payment event in canonical form.

    Attributes:
        payment_value: Amount paid.
        payment_date: Date text as received, or a date object.
        member_id: Member identifier, used for uniqueness counting.
        customer_name: Member display name.
        product: Product sold.
        category: Product category.
        sold_by: Seller who made the sale.
        payment_method: How the payment was made.
        payment_vat: VAT portion of the payment, if known.
    """

    payment_value: float = 0.0
    payment_date: Any = None
    member_id: Optional[str] = None
    customer_name: Optional[str] = None
    product: Optional[str] = None
    category: Optional[str] = None
    sold_by: Optional[str] = None
    payment_method: Optional[str] = None
    payment_vat: Optional[float] = None


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _clean_text(value: Any) -> Optional[str]:
    if _is_blank(value):
        return None
    # numeric ID columns with gaps arrive as floats: 1.0 -> "1"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _records_frame(data: Any) -> pd.DataFrame:
    """Build a raw DataFrame from the supported input containers."""
    if isinstance(data, pd.DataFrame):
        return data.reset_index(drop=True)
    if data is None:
        return pd.DataFrame()
    if isinstance(data, (str, bytes, Mapping)) or not isinstance(data, Iterable):
        raise DataQualityError(
            f"Expected a DataFrame or a sequence of records, got {type(data).__name__}"
        )

    records = []
    skipped = 0
    for item in data:
        if isinstance(item, Transaction):
            records.append(asdict(item))
        elif isinstance(item, Mapping):
            records.append(dict(item))
        else:
            skipped += 1
    if skipped:
        logger.warning("Skipped %d input item(s) that are not transaction records", skipped)
    return pd.DataFrame.from_records(records) if records else pd.DataFrame()


def _coalesce(raw: pd.DataFrame, aliases: tuple[str, ...]) -> pd.Series:
    """Take the first non-blank value across alias columns, row by row."""
    result = pd.Series([None] * len(raw), index=raw.index, dtype=object)
    for alias in aliases:
        if alias not in raw.columns:
            continue
        missing = result.map(_is_blank)
        result = result.where(~missing, raw[alias].astype(object))
    return result


def normalize_transactions(data: Any) -> pd.DataFrame:
    """Convert raw records into a DataFrame with the canonical columns.

    Field presence is soft: missing optional fields default to None,
    missing or non-numeric payment values default to 0.0.

    Args:
        data: A DataFrame, or an iterable of mappings / Transaction objects.

    Returns:
        DataFrame with exactly CANONICAL_COLUMNS, one row per record,
        in input order.

    Raises:
        DataQualityError: If data is not a collection of records.
    """
    raw = _records_frame(data)
    # records with no known fields still count as transactions
    if len(raw.index) == 0:
        return pd.DataFrame({col: pd.Series(dtype=object) for col in CANONICAL_COLUMNS}).astype(
            {"payment_value": float}
        )

    df = pd.DataFrame(index=raw.index)
    for column, aliases in FIELD_ALIASES.items():
        df[column] = _coalesce(raw, aliases)

    values = pd.to_numeric(df["payment_value"], errors="coerce")
    coerced = int((values.isna() & ~df["payment_value"].map(_is_blank)).sum())
    if coerced:
        logger.warning("Coerced %d non-numeric payment value(s) to 0", coerced)
    df["payment_value"] = values.fillna(0.0).astype(float)
    df["payment_vat"] = pd.to_numeric(df["payment_vat"], errors="coerce")

    for column in _TEXT_COLUMNS:
        df[column] = pd.Series(
            [_clean_text(v) for v in df[column]], index=df.index, dtype=object
        )
    unnamed = df["customer_name"].map(_is_blank).astype(bool)
    df["customer_name"] = df["customer_name"].where(~unnamed, df["member_id"])
    df["payment_date"] = df["payment_date"].map(lambda v: None if _is_blank(v) else v)

    logger.debug("Normalized %d transaction record(s)", len(df))
    return df[CANONICAL_COLUMNS].reset_index(drop=True)


def iter_transactions(frame: pd.DataFrame) -> Iterator[Transaction]:
    """Yield canonical Transaction objects from a normalized DataFrame."""
    for record in frame[CANONICAL_COLUMNS].to_dict("records"):
        vat = record["payment_vat"]
        yield Transaction(
            payment_value=float(record["payment_value"]),
            payment_date=None if _is_blank(record["payment_date"]) else record["payment_date"],
            payment_vat=None if _is_blank(vat) else float(vat),
            **{column: _clean_text(record[column]) for column in _TEXT_COLUMNS},
        )
