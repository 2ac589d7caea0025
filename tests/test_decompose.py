from __future__ import annotations

import warnings

import numpy as np
import pandas as pd
import pytest

from legis_pipeline.aggregate.decompose import (
    ClassicalDecomposer,
    StlDecomposer,
    decompose_counts,
    decompose_series,
    get_decomposer,
)
from legis_pipeline.errors import InsufficientHistoryError


def _observed(doc_type: str, values: pd.Series) -> pd.DataFrame:
    return pd.DataFrame(
        {"Month": values.index, "Type": doc_type, "Count": values.to_numpy(), "Component": "Observed"}
    )


def test_short_series_raises(seasonal_series) -> None:
    with pytest.raises(InsufficientHistoryError) as exc:
        decompose_series(seasonal_series(23))
    assert exc.value.length == 23
    assert exc.value.required == 24


def test_classical_removes_twelve_month_cycle(seasonal_series) -> None:
    series = seasonal_series(72)
    sa, trend = decompose_series(series, decomposer=ClassicalDecomposer())
    assert sa.std() < 0.05 * series.std()
    assert sa.mean() == pytest.approx(10.0, abs=0.1)
    assert trend.index.equals(series.index)


def test_stl_removes_most_of_the_cycle(seasonal_series) -> None:
    series = seasonal_series(72)
    sa, trend = decompose_series(series, decomposer=StlDecomposer())
    assert sa.std() < 0.25 * series.std()
    assert not trend.isna().any()


@pytest.mark.parametrize("decomposer", [StlDecomposer(), StlDecomposer(robust=True), ClassicalDecomposer()])
def test_outputs_are_clamped_at_zero(decomposer) -> None:
    idx = pd.date_range("2010-01-01", periods=60, freq="MS")
    rng = np.random.default_rng(7)
    values = np.where(rng.random(60) < 0.7, 0, rng.integers(20, 60, size=60))
    values[::12] = 80
    sa, trend = decompose_series(pd.Series(values, index=idx, name="Decree"), decomposer=decomposer)
    assert (sa >= 0).all()
    assert (trend >= 0).all()


def test_decompose_counts_adds_components_per_type(seasonal_series) -> None:
    observed = pd.concat(
        [_observed("Law", seasonal_series(36).round()), _observed("Decree", seasonal_series(36, level=20).round())],
        ignore_index=True,
    )
    out = decompose_counts(observed)

    sizes = out.groupby(["Type", "Component"]).size()
    assert sizes.to_dict() == {
        ("Decree", "Observed"): 36,
        ("Decree", "SeasonalAdjusted"): 36,
        ("Decree", "Trend"): 36,
        ("Law", "Observed"): 36,
        ("Law", "SeasonalAdjusted"): 36,
        ("Law", "Trend"): 36,
    }
    assert (out["Count"] >= 0).all()
    law_obs = out[(out["Type"] == "Law") & (out["Component"] == "Observed")]
    assert list(law_obs["Count"]) == list(seasonal_series(36).round())


def test_short_type_is_omitted_by_default(seasonal_series) -> None:
    observed = pd.concat(
        [_observed("Law", seasonal_series(36)), _observed("Decree", seasonal_series(12))],
        ignore_index=True,
    )
    out = decompose_counts(observed)
    decree = out[out["Type"] == "Decree"]
    assert set(decree["Component"]) == {"Observed"}
    assert set(out[out["Type"] == "Law"]["Component"]) == {"Observed", "SeasonalAdjusted", "Trend"}


def test_short_type_can_fall_back_to_observed(seasonal_series) -> None:
    observed = _observed("Decree", seasonal_series(12))
    out = decompose_counts(observed, fallback="observed")
    by_component = {c: list(g["Count"]) for c, g in out.groupby("Component")}
    assert by_component["Trend"] == by_component["Observed"]
    assert by_component["SeasonalAdjusted"] == by_component["Observed"]


def test_short_type_can_raise(seasonal_series) -> None:
    with pytest.raises(InsufficientHistoryError):
        decompose_counts(_observed("Decree", seasonal_series(12)), fallback="raise")


def test_get_decomposer_resolves_names() -> None:
    assert isinstance(get_decomposer("stl"), StlDecomposer)
    assert get_decomposer("stl", robust=True).robust is True  # type: ignore[attr-defined]
    assert isinstance(get_decomposer("classical"), ClassicalDecomposer)
    with pytest.raises(ValueError):
        get_decomposer("x13")


def test_classical_decomposition_emits_no_future_warnings(seasonal_series) -> None:
    with warnings.catch_warnings():
        warnings.simplefilter("error", FutureWarning)
        sa, trend = decompose_series(seasonal_series(24), decomposer=ClassicalDecomposer())
    assert len(sa) == 24
    assert not trend.isna().any()
