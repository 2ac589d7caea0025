"""Monthly count series.

Builds the Observed component of the MonthlyCount table from the filtered
corpus.

Expectations:
- Input: the filtered DocumentRecord table and the (Month, Type) universe of
  the unfiltered corpus.
- Output: one row per (Month, Type) with columns `Month`, `Type`, `Count`,
  `Component`. Every type's months form a complete sequence from the first
  to the last month observed for any type, zero-filled where nothing
  survived filtering or nothing was published.
"""
from __future__ import annotations

import logging

import pandas as pd

from legis_pipeline.ingest.load_raw import is_placeholder
from legis_pipeline.models import MONTHLY_COLUMNS, Component

log = logging.getLogger(__name__)


def monthly_counts(
    filtered: pd.DataFrame,
    universe: pd.DataFrame,
    start_month: pd.Timestamp | None = None,
) -> pd.DataFrame:
    """Count substantive documents per month and type.

    Args:
        filtered: Filtered DocumentRecord table (`Month`, `Type`, ...).
            Placeholder rows (no number, title or url) are not counted.
        universe: Distinct (Month, Type) pairs of the unfiltered corpus, used
            to recover months whose documents were all filtered out.
        start_month: If given, months strictly before it are excluded.

    Returns:
        pandas DataFrame with columns `Month`, `Type`, `Count`, `Component`
        (always 'Observed'), sorted by Type then Month.
    """
    docs = filtered[~is_placeholder(filtered)]
    counts = docs.groupby(["Month", "Type"]).size()

    months = universe["Month"]
    if start_month is not None:
        months = months[months >= start_month]
    if months.empty:
        log.warning("No months at or after %s; monthly series is empty", start_month)
        return pd.DataFrame(columns=MONTHLY_COLUMNS)

    axis = pd.date_range(months.min(), months.max(), freq="MS")
    types = sorted(universe["Type"].unique())
    index = pd.MultiIndex.from_product([axis, types], names=["Month", "Type"])

    out = (
        counts.reindex(index, fill_value=0)
        .rename("Count")
        .reset_index()
        .sort_values(["Type", "Month"])
        .reset_index(drop=True)
    )
    out["Count"] = out["Count"].astype(int)
    out["Component"] = Component.OBSERVED.value

    gaps = len(index) - len(universe[universe["Month"].isin(axis)])
    if gaps:
        log.info("Filled %d (Month, Type) pairs missing from the listings", gaps)
    log.info("Built %d monthly counts over %d months", len(out), len(axis))
    return out[MONTHLY_COLUMNS]
