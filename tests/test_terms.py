from __future__ import annotations

import pandas as pd
import pytest

from legis_pipeline.aggregate.terms import TermWindow, align_terms, term_summary, term_windows


def _counts(start: str, values: list[float], doc_type: str = "Law", component: str = "Observed") -> pd.DataFrame:
    months = pd.date_range(start, periods=len(values), freq="MS")
    return pd.DataFrame({"Month": months, "Type": doc_type, "Count": values, "Component": component})


def test_cumulative_count_within_a_term() -> None:
    out = align_terms(_counts("2021-01-01", [10, 0, 5]), epoch=pd.Timestamp("2021-01-01"), term_months=60)
    assert list(out["CumulativeCount"]) == [10, 10, 15]
    assert list(out["DaysSinceTermStart"]) == [0, 31, 59]
    assert set(out["TermStart"]) == {pd.Timestamp("2021-01-01")}


def test_cumulative_count_resets_at_each_term() -> None:
    out = align_terms(_counts("2021-01-01", [1, 1, 1, 1, 1]), epoch=pd.Timestamp("2021-01-01"), term_months=2)
    assert list(out["CumulativeCount"]) == [1, 2, 1, 2, 1]
    assert list(out["DaysSinceTermStart"]) == [0, 31, 0, 31, 0]
    assert sorted(set(out["TermStart"])) == [
        pd.Timestamp("2021-01-01"),
        pd.Timestamp("2021-03-01"),
        pd.Timestamp("2021-05-01"),
    ]


def test_cumulative_counts_are_non_decreasing_per_group() -> None:
    counts = pd.concat(
        [
            _counts("2020-01-01", [3, 0, 2, 7, 1, 0, 4], component="Observed"),
            _counts("2020-01-01", [2.5, 1.2, 0.0, 3.3, 0.4, 0.0, 1.1], component="Trend"),
        ],
        ignore_index=True,
    )
    out = align_terms(counts, epoch=pd.Timestamp("2020-01-01"), term_months=3)
    for _, group in out.groupby(["Type", "Component", "TermStart"]):
        assert group["CumulativeCount"].is_monotonic_increasing
        assert group["DaysSinceTermStart"].iloc[0] == 0


def test_months_before_start_are_not_aligned() -> None:
    out = align_terms(
        _counts("2019-11-01", [5, 5, 1, 2]),
        epoch=pd.Timestamp("2020-01-01"),
        term_months=12,
        start_month=pd.Timestamp("2020-01-01"),
    )
    assert list(out["CumulativeCount"]) == [1, 3]


def test_terms_are_anchored_at_epoch_even_before_it() -> None:
    windows = term_windows(
        pd.Timestamp("2000-06-01"), 12, pd.Timestamp("2000-01-01"), pd.Timestamp("2001-06-01")
    )
    assert windows == [
        TermWindow(pd.Timestamp("1999-06-01"), pd.Timestamp("2000-06-01")),
        TermWindow(pd.Timestamp("2000-06-01"), pd.Timestamp("2001-06-01")),
        TermWindow(pd.Timestamp("2001-06-01"), pd.Timestamp("2002-06-01")),
    ]
    assert windows[1].contains(pd.Timestamp("2001-05-01"))
    assert not windows[1].contains(pd.Timestamp("2001-06-01"))


def test_invalid_term_length_raises() -> None:
    with pytest.raises(ValueError):
        align_terms(_counts("2021-01-01", [1]), epoch=pd.Timestamp("2021-01-01"), term_months=0)


def test_term_summary_reports_final_totals() -> None:
    aligned = align_terms(_counts("2021-01-01", [1, 2, 3, 4, 5]), epoch=pd.Timestamp("2021-01-01"), term_months=3)
    summary = term_summary(aligned)
    assert list(summary["Months"]) == [3, 2]
    assert list(summary["Total"]) == [6, 9]


def test_aligned_term_starts_come_from_term_windows() -> None:
    counts = _counts("2019-08-01", [1.0] * 30)
    epoch = pd.Timestamp("2020-01-01")
    out = align_terms(counts, epoch=epoch, term_months=12)

    windows = term_windows(epoch, 12, counts["Month"].min(), counts["Month"].max())
    assert sorted(set(out["TermStart"])) == [w.start for w in windows]
    months = counts["Month"].sort_values().reset_index(drop=True)
    for month, start in zip(months, out["TermStart"]):
        window = next(w for w in windows if w.start == start)
        assert window.contains(month)
