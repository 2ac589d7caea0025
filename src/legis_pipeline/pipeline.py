"""End-to-end pipeline run.

Loader → Filter → Aggregator → Decomposer → Aligner. Each stage is a pure
function of the previous stage's full table and the settings; `run_pipeline`
threads the tables through and returns them all.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import pandas as pd

from legis_pipeline.aggregate.decompose import decompose_counts, get_decomposer
from legis_pipeline.aggregate.monthly import monthly_counts
from legis_pipeline.aggregate.terms import align_terms, term_summary
from legis_pipeline.clean.patterns import (
    DEFAULT_EXCLUSIONS,
    ExclusionPattern,
    compile_exclusions,
    load_exclusions_file,
)
from legis_pipeline.clean.transform import FilterResult, filter_titles
from legis_pipeline.config import Settings
from legis_pipeline.ingest.load_raw import load_documents, month_universe

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    """Tables produced by one run.

    Attributes:
        records: Unified DocumentRecord table, unfiltered.
        filter_result: Surviving records and drop counts.
        monthly: MonthlyCount table, all components.
        aligned: AlignedPoint table.
        summary: Per-term totals.
    """
    records: pd.DataFrame
    filter_result: FilterResult
    monthly: pd.DataFrame
    aligned: pd.DataFrame
    summary: pd.DataFrame


def exclusions_for(settings: Settings) -> list[ExclusionPattern]:
    """Compile the exclusion list configured in `settings`.

    Uses the patterns file when one is configured, else the built-in list.
    """
    if settings.exclusions_path is not None:
        log.info("Loading exclusion patterns from %s", settings.exclusions_path)
        return compile_exclusions(load_exclusions_file(settings.exclusions_path))
    return compile_exclusions(DEFAULT_EXCLUSIONS)


def run_pipeline(
    laws: pd.DataFrame,
    decrees: pd.DataFrame,
    settings: Settings,
    exclusions: Sequence[ExclusionPattern] | None = None,
) -> PipelineResult:
    """Run every stage over the two scraper listings.

    Args:
        laws: Listing of laws (Month, Number, Title, Url).
        decrees: Listing of decrees, same columns.
        settings: Analysis parameters.
        exclusions: Compiled exclusion list; derived from `settings` if omitted.

    Returns:
        PipelineResult holding every intermediate and output table.
    """
    # Patterns are compiled before any data is touched.
    if exclusions is None:
        exclusions = exclusions_for(settings)

    records = load_documents(laws, decrees)
    universe = month_universe(records)

    filtered = filter_titles(records, exclusions)

    observed = monthly_counts(filtered.kept, universe, start_month=settings.start_month)

    decomposer = get_decomposer(settings.decomposition, robust=settings.robust)
    monthly = decompose_counts(
        observed,
        period=settings.period,
        min_history=settings.min_history,
        decomposer=decomposer,
        fallback=settings.fallback,
    )

    aligned = align_terms(
        monthly,
        epoch=settings.term_epoch,
        term_months=settings.term_months,
        start_month=settings.start_month,
    )
    summary = term_summary(aligned)

    log.info(
        "Pipeline complete: %d records, %d dropped, %d monthly rows, %d aligned points",
        len(records),
        filtered.dropped,
        len(monthly),
        len(aligned),
    )
    return PipelineResult(
        records=records,
        filter_result=filtered,
        monthly=monthly,
        aligned=aligned,
        summary=summary,
    )
