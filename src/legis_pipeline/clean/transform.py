"""Title filtering.

Classification is applied partition-wise using Dask. Each title is tested on
its own against the ordered exclusion list, so partitions share no state and
re-running the filter on its own output drops nothing further.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

import dask.dataframe as dd
import pandas as pd

from legis_pipeline.clean.patterns import ExclusionPattern, match_title

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilterResult:
    """Outcome of filtering a corpus.

    Attributes:
        kept: Records whose title matched no pattern (including placeholders).
        dropped: Number of records excluded as routine.
        dropped_by_pattern: Excluded records per pattern, attributed to the
            first pattern that matched, in exclusion-list order.
    """
    kept: pd.DataFrame
    dropped: int
    dropped_by_pattern: dict[str, int] = field(default_factory=dict)

    def report(self) -> pd.DataFrame:
        """Return the per-pattern drop counts as a table."""
        return pd.DataFrame(
            list(self.dropped_by_pattern.items()),
            columns=["Pattern", "Dropped"],
        )


def classify_titles(
    titles: pd.Series,
    exclusions: Sequence[ExclusionPattern],
    npartitions: int = 1,
) -> pd.Series:
    """Return, for each title, the first matching pattern text or None.

    Args:
        titles: Title column (missing titles allowed).
        exclusions: Compiled exclusion list.
        npartitions: Number of Dask partitions to classify in.

    Returns:
        pandas.Series aligned with `titles`.
    """
    def _classify_partition(part: pd.Series) -> pd.Series:
        """Partition-level classification applied via map_partitions."""
        return part.map(lambda t: match_title(t, exclusions)).astype("object")

    if titles.empty:
        return pd.Series([], index=titles.index, dtype="object", name="matched_pattern")

    ddf: Any = dd.from_pandas(
        titles.astype("object").rename("Title"),
        npartitions=max(1, npartitions),
        sort=False,
    )
    matched = ddf.map_partitions(
        _classify_partition,
        meta=pd.Series([], dtype="object", name="Title"),
    ).compute()
    matched = matched.astype("object").where(matched.notna(), None)
    return matched.rename("matched_pattern").reindex(titles.index)


def filter_titles(
    records: pd.DataFrame,
    exclusions: Sequence[ExclusionPattern],
    npartitions: int = 1,
) -> FilterResult:
    """Drop routine documents from a DocumentRecord table.

    Args:
        records: Table with at least a `Title` column.
        exclusions: Compiled exclusion list.
        npartitions: Number of Dask partitions to classify in.

    Returns:
        FilterResult with the surviving records and drop counts.
    """
    log.info("Filtering %d records against %d patterns", len(records), len(exclusions))
    records = records.reset_index(drop=True)
    matched = classify_titles(records["Title"], exclusions, npartitions)
    excluded = matched.notna()

    counts = matched[excluded].value_counts()
    by_pattern = {p.text: int(counts.get(p.text, 0)) for p in exclusions}

    kept = records[~excluded].reset_index(drop=True)
    dropped = int(excluded.sum())
    log.info("Kept %d records, dropped %d as routine", len(kept), dropped)
    return FilterResult(kept=kept, dropped=dropped, dropped_by_pattern=by_pattern)
