"""Tests for the sales-analytics command-line entry point."""

import json
from pathlib import Path

import pytest

from sales_analytics.cli import NO_DATA_MESSAGE, main, parse_args


@pytest.fixture
def csv_file(tmp_path: Path) -> Path:
    path = tmp_path / "transactions.csv"
    path.write_text(
        "Payment Value,Payment Date,Member ID,Product,Sold By\n"
        "100,1/1/2024,A,Yoga Mat,Priya\n"
        "200,15/1/2024,B,Class Pack,Priya\n"
        "50,2024/2/3,A,Yoga Mat,Arjun\n"
        "75,,C,Water Bottle,\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def json_file(tmp_path: Path, sample_transactions: list[dict]) -> Path:
    path = tmp_path / "transactions.json"
    path.write_text(json.dumps(sample_transactions), encoding="utf-8")
    return path


def test_parse_args_defaults(csv_file: Path) -> None:
    """Test parse_args defaults."""
    args = parse_args([str(csv_file)])

    assert args.input == csv_file
    assert args.metric == "revenue"
    assert args.period_mode == "none"
    assert args.format == "table"
    assert args.today is None


def test_table_output_from_csv(csv_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test table output for a CSV input file."""
    assert main([str(csv_file), "--dimension", "product", "--quiet"]) == 0

    out = capsys.readouterr().out
    lines = out.strip().splitlines()
    assert "Revenue" in lines[0]
    assert "Class Pack" in lines[1]
    assert "₹200" in lines[1]


def test_json_output(json_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test --format json prints the ranked rows."""
    exit_code = main(
        [str(json_file), "--dimension", "seller", "--top", "2", "--format", "json", "--quiet"]
    )

    rows = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert [row["name"] for row in rows] == ["Priya", "Arjun"]


def test_year_over_year_table(json_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test year over year table."""
    main([str(json_file), "--period-mode", "yearOverYear", "--years", "2023", "2024", "--quiet"])

    out = capsys.readouterr().out
    assert "2023" in out
    assert "January" in out
    assert "Total" in out


def test_month_over_month_table(json_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test month over month table."""
    main(
        [
            str(json_file),
            "--dimension",
            "category",
            "--period-mode",
            "monthOverMonth",
            "--today",
            "2024-06-15",
            "--quiet",
        ]
    )

    out = capsys.readouterr().out
    assert "2024-01" in out
    assert "2024-06" in out
    assert "Classes" in out


def test_kpis_json(json_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test --kpis with JSON output."""
    main([str(json_file), "--kpis", "--format", "json", "--today", "2024-06-15", "--quiet"])

    summary = json.loads(capsys.readouterr().out)
    assert summary["total_revenue"] == pytest.approx(750.0)
    assert summary["total_transactions"] == 7


def test_kpis_table(csv_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test --kpis with table output."""
    main([str(csv_file), "--kpis", "--quiet"])

    out = capsys.readouterr().out
    assert "Total Revenue:" in out
    assert "₹425" in out


def test_empty_input_prints_no_data(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test empty input prints no data."""
    path = tmp_path / "empty.json"
    path.write_text("[]", encoding="utf-8")

    assert main([str(path), "--quiet"]) == 0
    assert capsys.readouterr().out.strip() == NO_DATA_MESSAGE


def test_missing_file_exits(tmp_path: Path) -> None:
    """Test missing file exits."""
    with pytest.raises(SystemExit, match="not found"):
        main([str(tmp_path / "missing.csv")])


def test_unsupported_format_exits(tmp_path: Path) -> None:
    """Test unsupported format exits."""
    path = tmp_path / "transactions.xlsx"
    path.write_bytes(b"")

    with pytest.raises(SystemExit, match="Unsupported input format"):
        main([str(path), "--quiet"])


def test_invalid_request_returns_error_code(csv_file: Path) -> None:
    """Test invalid request returns error code."""
    assert main([str(csv_file), "--top", "-1", "--quiet"]) == 1


def test_malformed_json_returns_error_code(tmp_path: Path) -> None:
    """Test an unparseable JSON file is reported instead of raising."""
    path = tmp_path / "broken.json"
    path.write_text("[{", encoding="utf-8")

    assert main([str(path), "--quiet"]) == 1
    assert main([str(path), "--kpis", "--quiet"]) == 1


def test_kpis_with_non_list_json_returns_error_code(tmp_path: Path) -> None:
    """Test a JSON object instead of a record list fails cleanly for KPIs."""
    path = tmp_path / "object.json"
    path.write_text('{"paymentValue": 1}', encoding="utf-8")

    assert main([str(path), "--kpis", "--quiet"]) == 1
