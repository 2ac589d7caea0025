from __future__ import annotations

from datetime import date

import pandas as pd
import pytest
from pydantic import ValidationError

from legis_pipeline.clean.validate import validate_rows
from legis_pipeline.models import (
    ALIGNED_COLUMNS,
    MONTHLY_COLUMNS,
    RECORD_COLUMNS,
    AlignedPoint,
    DocumentRecord,
    MonthlyCount,
)


def test_column_names_are_stable() -> None:
    assert RECORD_COLUMNS == ["Month", "Type", "Number", "Title", "Url"]
    assert MONTHLY_COLUMNS == ["Month", "Type", "Count", "Component"]
    assert ALIGNED_COLUMNS == [
        "Type", "Component", "TermStart", "DaysSinceTermStart", "CumulativeCount",
    ]


def test_document_record_allows_absent_fields() -> None:
    rec = DocumentRecord.model_validate({"Month": date(2020, 1, 1), "Type": "Decree"})
    assert rec.title is None and rec.number is None and rec.url is None


def test_monthly_count_rejects_negative_count() -> None:
    with pytest.raises(ValidationError):
        MonthlyCount.model_validate(
            {"Month": date(2020, 1, 1), "Type": "Law", "Count": -0.5, "Component": "Trend"}
        )


def test_aligned_point_rejects_unknown_component() -> None:
    with pytest.raises(ValidationError):
        AlignedPoint.model_validate(
            {
                "Type": "Law",
                "Component": "Residual",
                "TermStart": date(2020, 1, 1),
                "DaysSinceTermStart": 0,
                "CumulativeCount": 1,
            }
        )


def test_validate_rows_counts_bad_rows_and_serializes_dates() -> None:
    pdf = pd.DataFrame(
        [
            {"Month": pd.Timestamp("2020-01-01"), "Type": "Law", "Count": 3, "Component": "Observed"},
            {"Month": pd.Timestamp("2020-02-01"), "Type": "Law", "Count": -1, "Component": "Observed"},
        ]
    )
    good, bad = validate_rows(pdf, MonthlyCount)
    assert bad == 1
    assert good == [{"Month": "2020-01-01", "Type": "Law", "Count": 3.0, "Component": "Observed"}]
