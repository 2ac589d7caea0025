"""Typed errors raised by the pipeline stages."""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for all pipeline failures."""


class SchemaError(PipelineError):
    """Input table is missing columns or holds an unparseable Month."""


class InsufficientHistoryError(PipelineError):
    """A series is too short to estimate seasonal factors."""

    def __init__(self, length: int, required: int, label: str | None = None) -> None:
        self.length = length
        self.required = required
        self.label = label
        where = f" for {label}" if label else ""
        super().__init__(
            f"Series{where} has {length} months; decomposition needs at least {required}"
        )


class PatternCompilationError(PipelineError):
    """An exclusion pattern is empty or not a valid expression."""
