"""Command-line entry point for running analyses over a transactions file.

USAGE
=====

Top five products by revenue:
    sales-analytics transactions.csv --dimension product --top 5

Month over month revenue per category (window ends at --today):
    sales-analytics transactions.json --dimension category \
        --period-mode monthOverMonth --today 2024-06-30

Year over year transaction counts:
    sales-analytics transactions.csv --period-mode yearOverYear \
        --metric transactions --years 2023 2024

Headline KPIs only:
    sales-analytics transactions.csv --kpis

Input files are CSV (header row, any supported field spelling) or JSON
(a list of record objects). Output is a formatted table, or the raw rows
with --format json.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Any, List, Optional

import pandas as pd

from sales_analytics.api import AnalysisRequest, PeriodMode, run_analysis
from sales_analytics.config import AnalyticsConfig
from sales_analytics.exceptions import DataQualityError, SalesAnalyticsError
from sales_analytics.formatters import (
    format_currency,
    format_metric_value,
    format_number,
    format_percentage,
)
from sales_analytics.grouping import Dimension
from sales_analytics.kpis import KPISummary, summarize_kpis
from sales_analytics.metrics import Metric
from sales_analytics.ranking import QuickFilter

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = "No data available."


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Aggregate sales transactions into grouped and period metrics."
    )
    p.add_argument("input", type=Path, help="Transactions file (.csv or .json)")
    p.add_argument(
        "--dimension",
        choices=[d.value for d in Dimension],
        help="Dimension to group by (default: overall)",
    )
    p.add_argument("--metric", choices=[m.value for m in Metric], default=Metric.REVENUE.value)
    p.add_argument(
        "--period-mode",
        choices=[m.value for m in PeriodMode],
        default=PeriodMode.NONE.value,
    )
    p.add_argument(
        "--years",
        type=int,
        nargs=2,
        metavar=("BASELINE", "COMPARISON"),
        help="Years compared in yearOverYear mode",
    )
    p.add_argument("--top", type=int, help="Only show the first N ranked rows")
    p.add_argument(
        "--quick-filter",
        choices=[f.value for f in QuickFilter],
        default=QuickFilter.ALL.value,
    )
    p.add_argument(
        "--today",
        type=date.fromisoformat,
        help="Reference date (YYYY-MM-DD) for period windows",
    )
    p.add_argument("--kpis", action="store_true", help="Print headline KPIs instead")
    p.add_argument("--format", choices=["table", "json"], default="table")
    p.add_argument("--quiet", action="store_true", help="Less logging")
    return p.parse_args(argv)


def read_transactions(path: Path) -> Any:
    """Load raw transaction records from a CSV or JSON file.

    Raises:
        DataQualityError: If the file cannot be parsed.
        SystemExit: If the file type is not supported.
    """
    suffix = path.suffix.lower()
    if suffix not in (".csv", ".json"):
        raise SystemExit(f"Unsupported input format: {path.suffix} (expected .csv or .json)")
    try:
        if suffix == ".csv":
            # keep every field as text; ingestion decides what is numeric
            return pd.read_csv(path, dtype=str, keep_default_na=False, encoding="utf-8-sig")
        return json.loads(path.read_text(encoding="utf-8"))
    except ValueError as e:
        raise DataQualityError(f"Could not parse {path}: {e}") from e


def _group_table(rows: List[dict], config: AnalyticsConfig) -> pd.DataFrame:
    symbol = config.currency_symbol
    return pd.DataFrame(
        {
            "Name": [r["name"] for r in rows],
            "Revenue": [format_currency(r["total_value"], symbol) for r in rows],
            "Transactions": [format_number(r["transaction_count"]) for r in rows],
            "Members": [format_number(r["unique_member_count"]) for r in rows],
            "ATV": [format_currency(r["atv"], symbol) for r in rows],
            "AUV": [format_currency(r["auv"], symbol) for r in rows],
            "ASV": [format_currency(r["asv"], symbol) for r in rows],
            "UPT": [f"{r['upt']:.2f}" for r in rows],
        }
    )


def _month_over_month_table(
    rows: List[dict], metric: Metric, config: AnalyticsConfig
) -> pd.DataFrame:
    def fmt(value: float) -> str:
        return format_metric_value(value, metric, config.currency_symbol)

    months = list(rows[0]["values"])
    table = {"Name": [r["name"] for r in rows]}
    for month in months:
        table[month] = [
            fmt(r["values"][month])
            + (f" ({format_percentage(r['growth'][month])})" if month != months[0] else "")
            for r in rows
        ]
    table["Total"] = [fmt(r["total"]) for r in rows]
    return pd.DataFrame(table)


def _year_over_year_table(
    rows: List[dict], metric: Metric, config: AnalyticsConfig
) -> pd.DataFrame:
    def fmt(value: float) -> str:
        return format_metric_value(value, metric, config.currency_symbol)

    year_a, year_b = rows[0]["year_a"], rows[0]["year_b"]
    return pd.DataFrame(
        {
            "Month": [r["month"] for r in rows],
            str(year_a): [fmt(r["value_a"]) for r in rows],
            str(year_b): [fmt(r["value_b"]) for r in rows],
            "Growth": [format_percentage(r["growth"]) for r in rows],
        }
    )


def render_table(rows: List[dict], request: AnalysisRequest, config: AnalyticsConfig) -> str:
    """Render analysis rows as a fixed-width text table."""
    if not rows:
        return NO_DATA_MESSAGE
    if request.period_mode is PeriodMode.MONTH_OVER_MONTH:
        table = _month_over_month_table(rows, request.metric, config)
    elif request.period_mode is PeriodMode.YEAR_OVER_YEAR:
        table = _year_over_year_table(rows, request.metric, config)
    else:
        table = _group_table(rows, config)
    return table.to_string(index=False)


def render_kpis(summary: KPISummary, config: AnalyticsConfig) -> str:
    if summary.total_transactions == 0:
        return NO_DATA_MESSAGE
    symbol = config.currency_symbol
    lines = [
        f"Total Revenue:          {format_currency(summary.total_revenue, symbol)}",
        f"Total Transactions:     {format_number(summary.total_transactions)}",
        f"Unique Members:         {format_number(summary.unique_members)}",
        f"Avg Transaction Value:  {format_currency(summary.avg_transaction_value, symbol)}",
        f"Revenue per Member:     {format_currency(summary.revenue_per_member, symbol)}",
        f"Revenue Growth (MoM):   {format_percentage(summary.revenue_growth)}",
    ]
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    if not args.input.exists():
        raise SystemExit(f"Input file not found: {args.input}")

    try:
        config = AnalyticsConfig.from_env()
        logger.info("Reading %s", args.input)
        data = read_transactions(args.input)

        if args.kpis:
            summary = summarize_kpis(data, today=args.today)
            if args.format == "json":
                print(json.dumps(summary.to_dict(), indent=2))
            else:
                print(render_kpis(summary, config))
            return 0

        request = AnalysisRequest(
            dimension=args.dimension,
            metric=args.metric,
            period_mode=args.period_mode,
            comparison_years=tuple(args.years) if args.years else None,
            top_n=args.top,
            quick_filter=args.quick_filter,
        )
        rows = run_analysis(data, request, today=args.today, config=config)
    except SalesAnalyticsError as e:
        logger.error("Analysis failed: %s", e)
        return 1

    if args.format == "json":
        print(json.dumps(rows, indent=2, ensure_ascii=False))
    else:
        print(render_table(rows, request, config))
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(130)
