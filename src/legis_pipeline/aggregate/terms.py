"""Term alignment.

Administrative terms are fixed-length windows of months anchored at an epoch
month. Each (Type, Component) series is cut into terms and accumulated from
the start of each term, with elapsed days since the term start as the x
axis, so that terms beginning in different years can be overlaid.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

import pandas as pd

from legis_pipeline.models import ALIGNED_COLUMNS, SUMMARY_COLUMNS

log = logging.getLogger(__name__)

GROUP_KEYS = ["Type", "Component", "TermStart"]


@dataclass(frozen=True)
class TermWindow:
    """Half-open window of months [start, end).

    Attributes:
        start: First month of the term.
        end: First month after the term.
    """
    start: pd.Timestamp
    end: pd.Timestamp

    def contains(self, month: pd.Timestamp) -> bool:
        return self.start <= month < self.end


def _month_number(ts: pd.Series | pd.Timestamp) -> pd.Series | int:
    if isinstance(ts, pd.Series):
        return ts.dt.year * 12 + ts.dt.month - 1
    return ts.year * 12 + ts.month - 1


def term_start_of(months: pd.Series, epoch: pd.Timestamp, term_months: int) -> pd.Series:
    """Return the start month of the term containing each month."""
    offset = (_month_number(months) - _month_number(epoch)) // term_months
    start = _month_number(epoch) + offset * term_months
    parts = pd.DataFrame({"year": start // 12, "month": start % 12 + 1, "day": 1})
    return pd.to_datetime(parts)


def term_windows(
    epoch: pd.Timestamp,
    term_months: int,
    first: pd.Timestamp,
    last: pd.Timestamp,
) -> list[TermWindow]:
    """List the consecutive term windows covering months `first` to `last`.

    Windows are anchored at `epoch` and may start before it when `first`
    precedes the epoch.
    """
    if term_months <= 0:
        raise ValueError("term_months must be positive")
    if last < first:
        return []
    step = pd.DateOffset(months=term_months)
    start = term_start_of(pd.Series([first]), epoch, term_months).iloc[0]
    windows: list[TermWindow] = []
    while start <= last:
        windows.append(TermWindow(start=start, end=start + step))
        start = start + step
    return windows


def align_terms(
    counts: pd.DataFrame,
    epoch: pd.Timestamp,
    term_months: int,
    start_month: pd.Timestamp | None = None,
) -> pd.DataFrame:
    """Compute per-term cumulative counts on an elapsed-days axis.

    Args:
        counts: MonthlyCount table (`Month`, `Type`, `Count`, `Component`).
        epoch: Month at which term windows are anchored.
        term_months: Term length in months.
        start_month: If given, months strictly before it are excluded.

    Returns:
        pandas DataFrame with columns `Type`, `Component`, `TermStart`,
        `DaysSinceTermStart`, `CumulativeCount`, sorted by Type, Component,
        TermStart, DaysSinceTermStart. The cumulative sum restarts at each
        term.
    """
    if term_months <= 0:
        raise ValueError("term_months must be positive")

    x = counts
    if start_month is not None:
        x = x[x["Month"] >= start_month]
    if x.empty:
        return pd.DataFrame(columns=ALIGNED_COLUMNS)

    x = x.sort_values(["Type", "Component", "Month"]).copy()
    windows = term_windows(epoch, term_months, x["Month"].min(), x["Month"].max())
    x["TermStart"] = pd.NaT
    for window in windows:
        inside = (x["Month"] >= window.start) & (x["Month"] < window.end)
        x.loc[inside, "TermStart"] = window.start
    x["TermStart"] = pd.to_datetime(x["TermStart"])
    x["DaysSinceTermStart"] = (x["Month"] - x["TermStart"]).dt.days.astype(int)
    x["CumulativeCount"] = x.groupby(GROUP_KEYS, sort=False)["Count"].cumsum()

    log.info(
        "Aligned %d rows into %d terms", len(x), x["TermStart"].nunique()
    )
    return (
        x.sort_values(GROUP_KEYS + ["DaysSinceTermStart"])
        .reset_index(drop=True)[ALIGNED_COLUMNS]
    )


def term_summary(aligned: pd.DataFrame) -> pd.DataFrame:
    """Return the number of months and final cumulative total per term.

    Args:
        aligned: AlignedPoint table as returned by `align_terms`.

    Returns:
        pandas DataFrame with columns `Type`, `Component`, `TermStart`,
        `Months`, `Total`.
    """
    if aligned.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    ordered = aligned.sort_values(GROUP_KEYS + ["DaysSinceTermStart"])
    out = (
        ordered.groupby(GROUP_KEYS, sort=True)
        .agg(Months=("DaysSinceTermStart", "count"), Total=("CumulativeCount", "last"))
        .reset_index()
    )
    return out[SUMMARY_COLUMNS]
