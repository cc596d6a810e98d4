"""Tests for AnalyticsConfig."""

import pytest

from sales_analytics.config import AnalyticsConfig
from sales_analytics.exceptions import ConfigError


def test_defaults() -> None:
    """Test default values when nothing is configured."""
    config = AnalyticsConfig()

    assert config.trailing_months == 6
    assert config.page_size == 5
    assert config.page_increment == 5
    assert config.currency_symbol == "₹"


@pytest.mark.parametrize("field", ["trailing_months", "page_size", "page_increment"])
def test_non_positive_values_rejected(field: str) -> None:
    """Test non-positive sizes raise ConfigError."""
    with pytest.raises(ConfigError, match=field):
        AnalyticsConfig(**{field: 0})


def test_from_env_overrides() -> None:
    """Test from_env applies overrides from a mapping."""
    config = AnalyticsConfig.from_env(
        {
            "SALES_ANALYTICS_TRAILING_MONTHS": "12",
            "SALES_ANALYTICS_PAGE_SIZE": "10",
            "SALES_ANALYTICS_CURRENCY_SYMBOL": "$",
        }
    )

    assert config.trailing_months == 12
    assert config.page_size == 10
    assert config.page_increment == 5
    assert config.currency_symbol == "$"


def test_from_env_reads_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test from_env reads os.environ by default."""
    monkeypatch.setenv("SALES_ANALYTICS_PAGE_INCREMENT", "3")

    assert AnalyticsConfig.from_env().page_increment == 3


def test_from_env_invalid_integer() -> None:
    """Test a non-integer override raises ConfigError."""
    with pytest.raises(ConfigError, match="SALES_ANALYTICS_PAGE_SIZE"):
        AnalyticsConfig.from_env({"SALES_ANALYTICS_PAGE_SIZE": "ten"})


def test_config_error_is_a_sales_analytics_error() -> None:
    """Test ConfigError belongs to the package hierarchy."""
    from sales_analytics.exceptions import SalesAnalyticsError

    assert issubclass(ConfigError, SalesAnalyticsError)
