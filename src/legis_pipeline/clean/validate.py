"""Validation utilities for output tables.

This module validates table rows against the Pydantic models in
`legis_pipeline.models`, converting pandas timestamps and missing values into
native Python types prior to validation.
"""
from __future__ import annotations

from typing import Any

import pandas as pd
from pydantic import BaseModel, ValidationError


def _native(value: Any) -> Any:
    if isinstance(value, pd.Timestamp):
        return value.date()
    if value is not None and not isinstance(value, (list, dict)) and pd.isna(value):
        return None
    return value


def validate_rows(pdf: pd.DataFrame, model: type[BaseModel]) -> tuple[list[dict[str, Any]], int]:
    """Validate the rows of a table using a Pydantic model.

    Args:
        pdf: pandas DataFrame whose columns are the model's aliases.
        model: Pydantic model class describing one row.

    Returns:
        A tuple of (list_of_validated_records, bad_count). Validated records
        are keyed by column name, with dates and enums in JSON form.
    """
    good: list[dict[str, Any]] = []
    bad = 0

    for rec in pdf.to_dict(orient="records"):
        rec = {k: _native(v) for k, v in rec.items()}
        try:
            m = model.model_validate(rec)
            good.append(m.model_dump(mode="json", by_alias=True))
        except ValidationError:
            bad += 1

    return good, bad
