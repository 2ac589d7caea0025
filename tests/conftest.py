from __future__ import annotations

from typing import Callable

import numpy as np
import pandas as pd
import pytest


@pytest.fixture
def listing() -> Callable[..., pd.DataFrame]:
    """Build a scraper listing from (month, number, title, url) tuples."""
    def _make(rows: list[tuple[str, str, str, str]]) -> pd.DataFrame:
        return pd.DataFrame(rows, columns=["Month", "Number", "Title", "Url"])
    return _make


@pytest.fixture
def seasonal_series() -> Callable[..., pd.Series]:
    """Monthly series with a 12-month cycle around a constant level."""
    def _make(months: int = 72, level: float = 10.0, amplitude: float = 6.0) -> pd.Series:
        idx = pd.date_range("2010-01-01", periods=months, freq="MS")
        values = level + amplitude * np.sin(2 * np.pi * np.arange(months) / 12)
        return pd.Series(values, index=idx, name="Law")
    return _make
