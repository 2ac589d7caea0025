"""Pydantic models and enums describing the pipeline's tables.

The DataFrames passed between stages use the column names given by each
model's aliases (`Month`, `Type`, `Count`, ...). The models validate rows
before they are written out.
"""

from __future__ import annotations

from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class DocType(str, Enum):
    """Kind of legal document listed by the source website."""
    LAW = "Law"
    DECREE = "Decree"


class Component(str, Enum):
    """Which view of a monthly count series a row belongs to."""
    OBSERVED = "Observed"
    SEASONAL_ADJUSTED = "SeasonalAdjusted"
    TREND = "Trend"


class DocumentRecord(BaseModel):
    """One listed document, or a placeholder for a month with none.

    Attributes:
        month: Month start of the listing.
        type: Document type.
        number: Official number, if any.
        title: Title text, if any.
        url: Link to the document, if any.
    """
    model_config = ConfigDict(extra="forbid", populate_by_name=True)
    month: date = Field(..., alias="Month")
    type: DocType = Field(..., alias="Type")
    number: str | None = Field(None, alias="Number")
    title: str | None = Field(None, alias="Title")
    url: str | None = Field(None, alias="Url")


class MonthlyCount(BaseModel):
    """Count of substantive documents for one month, type and component."""
    model_config = ConfigDict(extra="forbid", populate_by_name=True)
    month: date = Field(..., alias="Month")
    type: DocType = Field(..., alias="Type")
    count: float = Field(..., ge=0, alias="Count")
    component: Component = Field(..., alias="Component")


class AlignedPoint(BaseModel):
    """Cumulative count at a given distance from the start of a term."""
    model_config = ConfigDict(extra="forbid", populate_by_name=True)
    type: DocType = Field(..., alias="Type")
    component: Component = Field(..., alias="Component")
    term_start: date = Field(..., alias="TermStart")
    days_since_term_start: int = Field(..., ge=0, alias="DaysSinceTermStart")
    cumulative_count: float = Field(..., ge=0, alias="CumulativeCount")


class TermSummary(BaseModel):
    """Total for one term, type and component."""
    model_config = ConfigDict(extra="forbid", populate_by_name=True)
    type: DocType = Field(..., alias="Type")
    component: Component = Field(..., alias="Component")
    term_start: date = Field(..., alias="TermStart")
    months: int = Field(..., ge=0, alias="Months")
    total: float = Field(..., ge=0, alias="Total")


def columns_of(model: type[BaseModel]) -> list[str]:
    """Return the table column names (aliases) of a model, in field order."""
    return [f.alias or name for name, f in model.model_fields.items()]


RECORD_COLUMNS = columns_of(DocumentRecord)
MONTHLY_COLUMNS = columns_of(MonthlyCount)
ALIGNED_COLUMNS = columns_of(AlignedPoint)
SUMMARY_COLUMNS = columns_of(TermSummary)
