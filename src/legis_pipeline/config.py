"""Configuration helpers and Settings container.

This module provides a small `Settings` dataclass and `get_settings` which
reads the analysis parameters (start month, term epoch and length,
decomposition method) and storage locations from environment variables.
Values in a project-level `.env` are loaded first.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os

import pandas as pd
from dotenv import load_dotenv

# Explicitly load .env from project root
PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(PROJECT_ROOT / ".env")

DECOMPOSITION_METHODS = ("stl", "classical")
FALLBACK_POLICIES = ("omit", "observed", "raise")


def parse_month(value: str | pd.Timestamp) -> pd.Timestamp:
    """Parse a month such as '2000-01' or '2000-01-15' to its month start."""
    ts = pd.Timestamp(value)
    if pd.isna(ts):
        raise ValueError(f"{value!r} is not a month")
    return ts.to_period("M").to_timestamp()


@dataclass(frozen=True)
class Settings:
    """Container for pipeline configuration.

    Attributes:
        data_dir: Directory holding the scraper's `laws.csv` and `decrees.csv`.
        output_dir: Directory where result tables are written.
        start_month: Canonical first month of the observation window.
        term_epoch: Month at which term windows are anchored.
        term_months: Length of one administrative term, in months.
        period: Seasonal periodicity of the monthly series.
        min_history: Minimum series length accepted by the decomposer.
        decomposition: Decomposition method, 'stl' or 'classical'.
        robust: Use robust (outlier-resistant) STL fitting.
        fallback: What to do with a type whose history is too short.
        exclusions_path: Optional file with one exclusion pattern per line.
        mongo_uri: MongoDB connection URI, only needed for publishing.
        mongo_db: Target MongoDB database name.
    """
    data_dir: Path = Path("data/raw")
    output_dir: Path = Path("data/processed")
    start_month: pd.Timestamp = pd.Timestamp("2000-01-01")
    term_epoch: pd.Timestamp = pd.Timestamp("2000-01-01")
    term_months: int = 60
    period: int = 12
    min_history: int = 24
    decomposition: str = "stl"
    robust: bool = False
    fallback: str = "omit"
    exclusions_path: Path | None = None
    mongo_uri: str | None = None
    mongo_db: str = "legis"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_month(name: str, default: str) -> pd.Timestamp:
    raw = os.getenv(name, default).strip()
    try:
        return parse_month(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be a month like 2000-01, got {raw!r}") from exc


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, str(default)).strip()
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from exc


def get_settings() -> Settings:
    """Read environment variables and return a frozen `Settings` object.

    Raises:
        RuntimeError: if a value cannot be parsed or is out of range.
    """
    exclusions = os.getenv("LEGIS_EXCLUSIONS_PATH", "").strip()
    settings = Settings(
        data_dir=Path(os.getenv("LEGIS_DATA_DIR", "data/raw")),
        output_dir=Path(os.getenv("LEGIS_OUTPUT_DIR", "data/processed")),
        start_month=_env_month("LEGIS_START_MONTH", "2000-01"),
        term_epoch=_env_month("LEGIS_TERM_EPOCH", "2000-01"),
        term_months=_env_int("LEGIS_TERM_MONTHS", 60),
        period=_env_int("LEGIS_PERIOD", 12),
        min_history=_env_int("LEGIS_MIN_HISTORY", 24),
        decomposition=os.getenv("LEGIS_DECOMPOSITION", "stl").strip().lower(),
        robust=_env_bool("LEGIS_ROBUST", False),
        fallback=os.getenv("LEGIS_FALLBACK", "omit").strip().lower(),
        exclusions_path=Path(exclusions) if exclusions else None,
        mongo_uri=os.getenv("MONGO_URI", "").strip() or None,
        mongo_db=os.getenv("MONGO_DB", "legis"),
    )
    check_settings(settings)
    return settings


def check_settings(settings: Settings) -> None:
    """Reject parameter combinations the pipeline cannot run with.

    Raises:
        RuntimeError: describing the first invalid value found.
    """
    if settings.term_months <= 0:
        raise RuntimeError("LEGIS_TERM_MONTHS must be positive.")
    if settings.period < 2:
        raise RuntimeError("LEGIS_PERIOD must be at least 2.")
    if settings.min_history < 2 * settings.period:
        raise RuntimeError(
            "LEGIS_MIN_HISTORY must cover at least two full periods "
            f"({2 * settings.period} months)."
        )
    if settings.decomposition not in DECOMPOSITION_METHODS:
        raise RuntimeError(
            f"LEGIS_DECOMPOSITION must be one of {DECOMPOSITION_METHODS}, "
            f"got {settings.decomposition!r}."
        )
    if settings.fallback not in FALLBACK_POLICIES:
        raise RuntimeError(
            f"LEGIS_FALLBACK must be one of {FALLBACK_POLICIES}, got {settings.fallback!r}."
        )
