"""Tests for metric derivation and growth rates."""

import math

import pandas as pd
import pytest

from sales_analytics.exceptions import InvalidRequestError
from sales_analytics.metrics import (
    RATIO_COLUMNS,
    TOTAL_COLUMNS,
    GroupAggregate,
    Metric,
    aggregate_frame,
    growth_rate,
    safe_divide,
    with_ratios,
)
from sales_analytics.transactions import normalize_transactions


class TestGrowthRate:
    def test_positive_growth(self) -> None:
        """Test positive growth."""
        assert growth_rate(1500, 1000) == pytest.approx(50.0)

    def test_decline(self) -> None:
        """Test negative growth for a decline."""
        assert growth_rate(50, 100) == pytest.approx(-50.0)

    def test_zero_baseline_is_zero(self) -> None:
        """Test zero baseline is zero."""
        assert growth_rate(1500, 0) == 0.0
        assert growth_rate(0, 0) == 0.0

    def test_negative_baseline_is_zero(self) -> None:
        """Test negative baseline is zero."""
        assert growth_rate(10, -5) == 0.0


def test_safe_divide_guards_zero_denominator() -> None:
    """Test safe divide guards zero denominator."""
    assert safe_divide(300, 2) == 150.0
    assert safe_divide(300, 0) == 0.0


def test_with_ratios_is_zero_safe() -> None:
    """Test with_ratios returns 0 for zero denominators."""
    frame = pd.DataFrame(
        {
            "total_value": [300.0, 0.0, 120.0],
            "transaction_count": [2, 0, 3],
            "units_sold": [2, 0, 3],
            "unique_member_count": [2, 0, 0],
        }
    )

    result = with_ratios(frame)

    assert result["atv"].tolist() == pytest.approx([150.0, 0.0, 40.0])
    assert result["auv"].tolist() == pytest.approx([150.0, 0.0, 40.0])
    assert result["asv"].tolist() == pytest.approx([150.0, 0.0, 0.0])
    assert result["upt"].tolist() == pytest.approx([1.0, 0.0, 1.0])
    for column in RATIO_COLUMNS:
        assert all(math.isfinite(v) for v in result[column])


def test_with_ratios_leaves_input_untouched() -> None:
    """Test with_ratios does not modify its input."""
    frame = pd.DataFrame(
        {"total_value": [1.0], "transaction_count": [1], "units_sold": [1], "unique_member_count": [1]}
    )

    with_ratios(frame)

    assert "atv" not in frame.columns


def test_aggregate_frame_sums_counts_and_keeps_first_seen_order() -> None:
    """Test aggregate frame sums counts and keeps first seen order."""
    df = normalize_transactions(
        [
            {"paymentValue": 10, "memberId": "A", "product": "Zeta"},
            {"paymentValue": 20, "memberId": "B", "product": "Alpha"},
            {"paymentValue": 30, "memberId": "A", "product": "Zeta"},
            {"paymentValue": 5, "memberId": "A", "product": "Zeta"},
        ]
    )

    frame = aggregate_frame(df, ["product"])

    assert frame["product"].tolist() == ["Zeta", "Alpha"]
    assert frame["total_value"].tolist() == [45.0, 20.0]
    assert frame["transaction_count"].tolist() == [3, 1]
    assert frame["units_sold"].tolist() == [3, 1]
    assert frame["unique_member_count"].tolist() == [1, 1]
    assert frame.loc[0, "asv"] == pytest.approx(45.0)
    assert frame.loc[0, "atv"] == pytest.approx(15.0)


def test_aggregate_frame_empty_input_has_columns() -> None:
    """Test aggregate_frame keeps its columns for empty input."""
    frame = aggregate_frame(normalize_transactions([]), ["product"])

    assert frame.empty
    assert list(frame.columns) == ["product", *TOTAL_COLUMNS, *RATIO_COLUMNS]


class TestGroupAggregate:
    @pytest.fixture
    def aggregate(self) -> GroupAggregate:
        return GroupAggregate(
            name="Yoga Mat",
            total_value=300.0,
            transaction_count=2,
            units_sold=2,
            unique_member_count=2,
            atv=150.0,
            auv=150.0,
            asv=150.0,
            upt=1.0,
        )

    def test_metric_lookup(self, aggregate: GroupAggregate) -> None:
        """Test GroupAggregate.metric lookups."""
        assert aggregate.metric(Metric.REVENUE) == 300.0
        assert aggregate.metric("transactions") == 2.0
        assert aggregate.metric("members") == 2.0
        assert aggregate.metric("ATV") == 150.0
        assert aggregate.metric(Metric.UPT) == 1.0

    def test_unknown_metric_raises(self, aggregate: GroupAggregate) -> None:
        """Test unknown metric raises."""
        with pytest.raises(InvalidRequestError):
            aggregate.metric("conversion")

    def test_to_dict_is_plain_and_has_no_member_sets(self, aggregate: GroupAggregate) -> None:
        """Test to_dict holds plain values only."""
        data = aggregate.to_dict()

        assert data["name"] == "Yoga Mat"
        assert data["unique_member_count"] == 2
        assert all(not isinstance(v, (set, frozenset)) for v in data.values())

    def test_from_record_converts_numpy_scalars(self) -> None:
        """Test from record converts numpy scalars."""
        df = normalize_transactions([{"paymentValue": 10, "memberId": "A", "product": "Mat"}])
        record = aggregate_frame(df, ["product"]).to_dict("records")[0]

        aggregate = GroupAggregate.from_record(record["product"], record)

        assert type(aggregate.total_value) is float
        assert type(aggregate.transaction_count) is int
        assert type(aggregate.unique_member_count) is int


def test_metric_currency_flags() -> None:
    """Test which metrics are currency amounts."""
    assert Metric.REVENUE.is_currency
    assert Metric.ATV.is_currency
    assert not Metric.TRANSACTIONS.is_currency
    assert not Metric.UPT.is_currency
