"""Seasonal-trend decomposition of the monthly count series.

Each document type is decomposed on its own. Two strategies are available,
both additive (counts contain zero months, which rules out a multiplicative
model):

- ``stl``: STL (Seasonal-Trend decomposition using LOESS), optionally with
  robust weights that damp isolated spikes.
- ``classical``: moving-average decomposition with the trend extrapolated
  to the series ends from the last period of points.

SeasonalAdjusted is the observed series minus the seasonal component. Counts
cannot be negative, so SeasonalAdjusted and Trend are floored at zero after
the fit.
"""
from __future__ import annotations

import logging
from typing import Any, Protocol

import pandas as pd
from dask import compute, delayed  # type: ignore[attr-defined]
from statsmodels.tsa.seasonal import STL, seasonal_decompose

from legis_pipeline.errors import InsufficientHistoryError
from legis_pipeline.models import MONTHLY_COLUMNS, Component

log = logging.getLogger(__name__)

PERIOD = 12
MIN_HISTORY = 2 * PERIOD


class Decomposer(Protocol):
    """Strategy returning (seasonal_adjusted, trend) for a regular series."""

    name: str

    def decompose(self, series: pd.Series, period: int) -> tuple[pd.Series, pd.Series]:
        ...


class StlDecomposer:
    """STL decomposition (statsmodels)."""

    name = "stl"

    def __init__(self, robust: bool = False) -> None:
        self.robust = robust

    def decompose(self, series: pd.Series, period: int) -> tuple[pd.Series, pd.Series]:
        res = STL(series, period=period, robust=self.robust).fit()
        return series - res.seasonal, res.trend


class ClassicalDecomposer:
    """Additive moving-average decomposition (statsmodels)."""

    name = "classical"

    def decompose(self, series: pd.Series, period: int) -> tuple[pd.Series, pd.Series]:
        res = seasonal_decompose(
            series,
            model="additive",
            period=period,
            extrapolate_trend=period,
        )
        return series - res.seasonal, res.trend


def get_decomposer(name: str = "stl", robust: bool = False) -> Decomposer:
    """Return the decomposition strategy registered under `name`."""
    if name == "stl":
        return StlDecomposer(robust=robust)
    if name == "classical":
        return ClassicalDecomposer()
    raise ValueError(f"Unknown decomposition method: {name!r}")


def decompose_series(
    series: pd.Series,
    period: int = PERIOD,
    min_history: int = MIN_HISTORY,
    decomposer: Decomposer | None = None,
) -> tuple[pd.Series, pd.Series]:
    """Decompose one monthly series and clamp the results at zero.

    Args:
        series: Counts indexed by a gapless month-start DatetimeIndex.
        period: Seasonal periodicity (12 for monthly data).
        min_history: Minimum number of observations required.
        decomposer: Strategy to use (STL when omitted).

    Returns:
        Tuple (seasonal_adjusted, trend), both non-negative and aligned with
        `series`.

    Raises:
        InsufficientHistoryError: if the series is shorter than `min_history`.
    """
    if len(series) < min_history:
        raise InsufficientHistoryError(len(series), min_history, label=series.name)

    decomposer = decomposer or StlDecomposer()
    x = series.astype(float).asfreq("MS")
    sa, trend = decomposer.decompose(x, period)
    return sa.clip(lower=0.0), trend.clip(lower=0.0)


def _component_rows(values: pd.Series, doc_type: str, component: Component) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "Month": values.index,
            "Type": doc_type,
            "Count": values.to_numpy(dtype=float),
            "Component": component.value,
        }
    )


def _decompose_type(
    observed: pd.DataFrame,
    doc_type: str,
    period: int,
    min_history: int,
    decomposer: Decomposer,
    fallback: str,
) -> pd.DataFrame:
    """Runs inside a delayed task on one type's read-only Observed rows."""
    series = observed.set_index("Month")["Count"].sort_index().rename(doc_type)
    parts = [_component_rows(series.astype(float), doc_type, Component.OBSERVED)]

    try:
        sa, trend = decompose_series(series, period, min_history, decomposer)
    except InsufficientHistoryError as exc:
        if fallback == "raise":
            raise
        if fallback == "observed":
            log.warning("%s; using Observed as SeasonalAdjusted and Trend", exc)
            sa = trend = series.astype(float)
        else:
            log.warning("%s; keeping Observed only", exc)
            return parts[0]

    parts.append(_component_rows(sa, doc_type, Component.SEASONAL_ADJUSTED))
    parts.append(_component_rows(trend, doc_type, Component.TREND))
    return pd.concat(parts, ignore_index=True)


def decompose_counts(
    observed: pd.DataFrame,
    period: int = PERIOD,
    min_history: int = MIN_HISTORY,
    decomposer: Decomposer | None = None,
    fallback: str = "omit",
) -> pd.DataFrame:
    """Add SeasonalAdjusted and Trend rows to an Observed MonthlyCount table.

    Types are decomposed independently as Dask delayed tasks.

    Args:
        observed: MonthlyCount rows with Component 'Observed'.
        period: Seasonal periodicity.
        min_history: Minimum series length accepted by the decomposer.
        decomposer: Strategy to use (STL when omitted).
        fallback: Policy for a type with too little history: 'omit' keeps
            only its Observed rows, 'observed' copies Observed into the other
            components, 'raise' propagates InsufficientHistoryError.

    Returns:
        Long MonthlyCount table with columns `Month`, `Type`, `Count`,
        `Component`, sorted by Type, Component, Month.
    """
    if observed.empty:
        return pd.DataFrame(columns=MONTHLY_COLUMNS)

    decomposer = decomposer or StlDecomposer()
    log.info("Decomposing %d types with %s", observed["Type"].nunique(), decomposer.name)

    tasks = [
        delayed(_decompose_type)(
            group.copy(), str(doc_type), period, min_history, decomposer, fallback
        )
        for doc_type, group in observed.groupby("Type", sort=True)
    ]
    results: Any = compute(*tasks, scheduler="sync")

    out = pd.concat(results, ignore_index=True)
    order = {c.value: i for i, c in enumerate(Component)}
    out = (
        out.assign(_order=out["Component"].map(order))
        .sort_values(["Type", "_order", "Month"])
        .drop(columns="_order")
        .reset_index(drop=True)
    )
    return out[MONTHLY_COLUMNS]
