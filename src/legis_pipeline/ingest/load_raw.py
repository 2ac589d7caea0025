"""Raw-layer loading utilities.

The scraper delivers one table per document type, each row holding a month,
and the number, title and url of one document. A month in which the search
returned nothing is still listed, with sentinel values in the other fields.
This module unifies both tables, tags the type, parses months and turns
sentinels into proper missing values.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

import pandas as pd

from legis_pipeline.errors import SchemaError
from legis_pipeline.models import RECORD_COLUMNS, DocType

log = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("Month", "Number", "Title", "Url")
TEXT_COLUMNS = ("Number", "Title", "Url")

# Values the scraper writes when a month returned no documents
DEFAULT_SENTINELS = ("-", "", "Sin resultados")


def read_listing(path: Path) -> pd.DataFrame:
    """Read one scraper listing (CSV) keeping every value as text.

    NA inference is disabled so that sentinel strings reach `load_documents`
    verbatim.

    Args:
        path: Path to the CSV file.

    Returns:
        pandas.DataFrame with one row per listed document or placeholder.
    """
    log.info("Reading listing %s", path)
    return pd.read_csv(path, dtype=str, keep_default_na=False, encoding="utf-8")


def _normalize_text(values: pd.Series, sentinels: set[str]) -> pd.Series:
    out = values.astype("object").where(values.notna(), None)
    out = out.map(lambda v: v.strip() if isinstance(v, str) else v)
    return out.map(lambda v: None if v is None or v in sentinels else v)


def _parse_months(values: pd.Series, doc_type: DocType) -> pd.Series:
    parsed = pd.to_datetime(values, errors="coerce", format="mixed")
    bad = parsed.isna()
    if bad.any():
        label = bad[bad].index[0]
        raise SchemaError(
            f"{doc_type.value} input row {label}: Month {values.loc[label]!r} "
            "is not a parseable date"
        )
    return parsed.dt.to_period("M").dt.to_timestamp()


def _prepare(pdf: pd.DataFrame, doc_type: DocType, sentinels: set[str]) -> pd.DataFrame:
    missing = [c for c in REQUIRED_COLUMNS if c not in pdf.columns]
    if missing:
        raise SchemaError(f"{doc_type.value} input is missing columns: {', '.join(missing)}")

    out = pd.DataFrame(index=pdf.index)
    out["Month"] = _parse_months(pdf["Month"], doc_type)
    out["Type"] = doc_type.value
    for col in TEXT_COLUMNS:
        out[col] = _normalize_text(pdf[col], sentinels)
    return out[RECORD_COLUMNS]


def load_documents(
    laws: pd.DataFrame,
    decrees: pd.DataFrame,
    sentinels: Iterable[str] = DEFAULT_SENTINELS,
) -> pd.DataFrame:
    """Unify the law and decree listings into one DocumentRecord table.

    Args:
        laws: Listing of laws with columns Month, Number, Title, Url.
        decrees: Listing of decrees with the same columns.
        sentinels: Values meaning "no document found this month".

    Returns:
        pandas.DataFrame with columns Month, Type, Number, Title, Url. Months
        are month-start timestamps; sentinel values are None.

    Raises:
        SchemaError: if a required column is missing or a Month cannot be parsed.
    """
    marks = set(sentinels)
    parts = [
        _prepare(laws, DocType.LAW, marks),
        _prepare(decrees, DocType.DECREE, marks),
    ]
    records = pd.concat(parts, ignore_index=True)
    placeholders = int(is_placeholder(records).sum())
    log.info(
        "Loaded %d rows (%d laws, %d decrees, %d empty-month placeholders)",
        len(records),
        len(parts[0]),
        len(parts[1]),
        placeholders,
    )
    return records


def is_placeholder(records: pd.DataFrame) -> pd.Series:
    """Return a mask of rows that stand for "no documents this month"."""
    return records[list(TEXT_COLUMNS)].isna().all(axis=1)


def month_universe(records: pd.DataFrame) -> pd.DataFrame:
    """Return the distinct (Month, Type) pairs present in the raw corpus."""
    return (
        records[["Month", "Type"]]
        .drop_duplicates()
        .sort_values(["Type", "Month"])
        .reset_index(drop=True)
    )
