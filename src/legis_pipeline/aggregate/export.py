"""CSV interchange for the result tables.

Every table is validated row by row against its Pydantic model before it is
written; a single invalid row aborts the export.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import pandas as pd
from pydantic import BaseModel

from legis_pipeline.clean.validate import validate_rows
from legis_pipeline.errors import SchemaError
from legis_pipeline.models import AlignedPoint, MonthlyCount, TermSummary

if TYPE_CHECKING:
    from legis_pipeline.pipeline import PipelineResult

log = logging.getLogger(__name__)

# table name -> (row model, date columns, upsert key)
TABLES: dict[str, tuple[type[BaseModel], list[str], list[str]]] = {
    "monthly_counts": (MonthlyCount, ["Month"], ["Month", "Type", "Component"]),
    "aligned_points": (
        AlignedPoint,
        ["TermStart"],
        ["Type", "Component", "TermStart", "DaysSinceTermStart"],
    ),
    "term_summary": (TermSummary, ["TermStart"], ["Type", "Component", "TermStart"]),
}


def check_table(pdf: pd.DataFrame, name: str) -> None:
    """Validate a result table against its row model.

    Raises:
        SchemaError: if any row fails validation.
    """
    model, _, _ = TABLES[name]
    _, bad = validate_rows(pdf, model)
    if bad:
        raise SchemaError(f"{name}: {bad} of {len(pdf)} rows failed validation")


def write_table(pdf: pd.DataFrame, name: str, out_dir: Path) -> Path:
    """Validate and write one result table as `<out_dir>/<name>.csv`."""
    check_table(pdf, name)
    _, date_cols, _ = TABLES[name]

    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / f"{name}.csv"
    x = pdf.copy()
    for col in date_cols:
        x[col] = pd.to_datetime(x[col]).dt.strftime("%Y-%m-%d")
    x.to_csv(path, index=False, encoding="utf-8")
    log.info("Wrote %s (%d rows)", path, len(x))
    return path


def read_table(name: str, out_dir: Path) -> pd.DataFrame:
    """Read a result table written by `write_table`, parsing its dates."""
    _, date_cols, _ = TABLES[name]
    return pd.read_csv(out_dir / f"{name}.csv", parse_dates=date_cols)


def write_tables(result: "PipelineResult", out_dir: Path) -> list[Path]:
    """Write all result tables of a pipeline run plus the filter report."""
    paths = [
        write_table(result.monthly, "monthly_counts", out_dir),
        write_table(result.aligned, "aligned_points", out_dir),
        write_table(result.summary, "term_summary", out_dir),
    ]
    report = out_dir / "filter_report.csv"
    result.filter_result.report().to_csv(report, index=False, encoding="utf-8")
    log.info("Wrote %s (%d records dropped)", report, result.filter_result.dropped)
    paths.append(report)
    return paths
