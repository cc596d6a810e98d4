"""Configuration for the sales analytics core.

A single, simple configuration class shared by the period comparator,
the ranker and the formatting collaborator.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from sales_analytics.exceptions import ConfigError

ENV_PREFIX = "SALES_ANALYTICS_"


@dataclass(frozen=True)
class AnalyticsConfig:
    """Tunable defaults for analysis views.

    Attributes:
        trailing_months: Number of calendar months in the month-over-month
            window, ending at the current month.
        page_size: Number of rows initially shown in top/bottom views.
        page_increment: Rows added by each "show more" step.
        currency_symbol: Symbol prefixed by the currency formatter.
    """

    trailing_months: int = 6
    page_size: int = 5
    page_increment: int = 5
    currency_symbol: str = "₹"

    def __post_init__(self) -> None:
        for name in ("trailing_months", "page_size", "page_increment"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 1:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> AnalyticsConfig:
        """Create a config from SALES_ANALYTICS_* environment variables.

        Args:
            environ: Mapping to read from. Defaults to ``os.environ``.

        Returns:
            AnalyticsConfig with overrides applied over the defaults.

        Raises:
            ConfigError: If a numeric override is not an integer.

        Examples:
            >>> AnalyticsConfig.from_env({"SALES_ANALYTICS_PAGE_SIZE": "10"}).page_size
            10
        """
        if environ is None:
            environ = os.environ

        overrides: dict[str, object] = {}
        for name in ("trailing_months", "page_size", "page_increment"):
            raw = environ.get(ENV_PREFIX + name.upper())
            if raw is None:
                continue
            try:
                overrides[name] = int(raw)
            except ValueError as e:
                raise ConfigError(f"Invalid {ENV_PREFIX}{name.upper()}: {raw!r}") from e

        symbol = environ.get(ENV_PREFIX + "CURRENCY_SYMBOL")
        if symbol:
            overrides["currency_symbol"] = symbol

        return cls(**overrides)
