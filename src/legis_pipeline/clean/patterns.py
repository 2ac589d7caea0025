"""Exclusion patterns for routine documents.

Each pattern is compiled on its own, case-insensitively, and anchored so that
it can neither begin nor end inside a word: "COMISION" matches
"Se designa la COMISION Nacional" but not "COMISIONADO". Pattern text is
literal (periods and other metacharacters are escaped) and any whitespace
inside a phrase matches any run of whitespace. A pattern written as
``re:<expression>`` is used as a regular expression, still word-anchored.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from legis_pipeline.errors import PatternCompilationError

log = logging.getLogger(__name__)

REGEX_PREFIX = "re:"

# Administrative routine: appointments, resignations, leave, salary updates.
DEFAULT_EXCLUSIONS: tuple[str, ...] = (
    "ACEPTA RENUNCIA",
    "DESIGNA",
    "DESIGNACION",
    "NOMBRA",
    "NOMBRAMIENTO",
    "COMISION",
    "LICENCIA",
    "REAJUSTA",
    "REAJUSTE",
    "PRORROGA",
    "TRASLADO",
    "ASIGNACION",
    "MODIFICA PLANTA",
    "FIJA ESCALA",
)


@dataclass(frozen=True)
class ExclusionPattern:
    """A configured pattern and its compiled, word-anchored expression."""
    text: str
    regex: re.Pattern[str]

    def matches(self, title: str) -> bool:
        return self.regex.search(title) is not None


def _body(text: str) -> str:
    if text.startswith(REGEX_PREFIX):
        return text[len(REGEX_PREFIX):].strip()
    return r"\s+".join(re.escape(word) for word in text.split())


def compile_pattern(text: str) -> ExclusionPattern:
    """Compile one exclusion pattern.

    Raises:
        PatternCompilationError: if the pattern is not a string, is blank,
            or is an invalid ``re:`` expression.
    """
    if not isinstance(text, str):
        raise PatternCompilationError(f"Exclusion pattern must be text, got {text!r}")
    text = text.strip()
    body = _body(text)
    if not body:
        raise PatternCompilationError(f"Exclusion pattern {text!r} is empty")
    try:
        regex = re.compile(rf"(?<!\w)(?:{body})(?!\w)", re.IGNORECASE)
    except re.error as exc:
        raise PatternCompilationError(f"Exclusion pattern {text!r} is invalid: {exc}") from exc
    if re.fullmatch(body, "", re.IGNORECASE):
        raise PatternCompilationError(f"Exclusion pattern {text!r} matches empty text")
    return ExclusionPattern(text=text, regex=regex)


def compile_exclusions(patterns: Iterable[str] = DEFAULT_EXCLUSIONS) -> list[ExclusionPattern]:
    """Compile an ordered exclusion list, failing on the first bad pattern."""
    compiled = [compile_pattern(p) for p in patterns]
    log.info("Compiled %d exclusion patterns", len(compiled))
    return compiled


def load_exclusions_file(path: Path) -> list[str]:
    """Read exclusion patterns from a text file, one per line.

    Blank lines and lines starting with '#' are ignored.
    """
    patterns: list[str] = []
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        patterns.append(line)
    return patterns


def match_title(title: object, exclusions: Iterable[ExclusionPattern]) -> str | None:
    """Return the text of the first pattern matching `title`, else None.

    An absent title means there was no document that month, so it never
    matches.
    """
    if not isinstance(title, str):
        return None
    for pattern in exclusions:
        if pattern.matches(title):
            return pattern.text
    return None
