"""
Boundary Scanner

Line-oriented state machine over normalized text. A line starting with an
enumeration marker closes the open exercise (if any) and opens a new one;
other lines are appended to the open exercise's body. Lines before the
first marker are ignored.

The scanner is a fold over lines with pure transition functions:

    step(state, line)  -> (emitted candidate or None, new state)
    flush(state)       -> emitted candidate or None

Also contains extract_with_patterns(), a single-line pattern extractor that
serves as a cheaper alternative when line structure is unreliable.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from typing import Optional

from .markers import MarkerKind, MarkerMatch, match_marker
from .models import ExerciseCandidate, StrategyTag
from .validation import is_educational

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanState:
    """Open exercise of the scanner; marker is None before the first marker."""

    marker: Optional[MarkerMatch] = None
    body: str = ""


def step(state: ScanState, line: str) -> tuple[Optional[ExerciseCandidate], ScanState]:
    stripped = line.strip()
    if not stripped:
        return None, state

    marker = match_marker(stripped)
    if marker is not None:
        return flush(state), ScanState(marker=marker, body=marker.body)

    if state.marker is None:
        return None, state

    body = f"{state.body} {stripped}" if state.body else stripped
    return None, replace(state, body=body)


def flush(state: ScanState) -> Optional[ExerciseCandidate]:
    """Emit the open exercise if its body is worth keeping."""
    if state.marker is None:
        return None
    body = state.body.strip()
    if not (is_educational(body) or len(body) > 2):
        return None

    marker = state.marker
    return ExerciseCandidate(
        identifier=marker.token,
        marker_kind=marker.kind,
        question=marker.kind.render(marker.token, body),
        answer="",
        provenance=StrategyTag.BOUNDARY_SCAN,
    )


def scan_boundaries(text: str) -> list[ExerciseCandidate]:
    """
    Split normalized text into exercises at enumeration markers.

    Args:
        text: Normalized text (one marker per line at most).

    Returns:
        Candidates in document order, provenance BOUNDARY_SCAN.
    """
    if not text:
        return []

    candidates = []
    state = ScanState()
    for line in text.split("\n"):
        emitted, state = step(state, line)
        if emitted is not None:
            candidates.append(emitted)

    last = flush(state)
    if last is not None:
        candidates.append(last)

    logger.debug("Boundary scan emitted %d candidates", len(candidates))
    return candidates


# =============================================================================
# PATTERN FALLBACK
# =============================================================================

# Bodies are capped at 150 characters and end at the next marker or line end
_NEXT_MARKER = r"(?=\s+(?:[a-h]|\d{1,3})[.)]\s|\n|$)"

SINGLE_LINE_PATTERNS: list[tuple[MarkerKind, re.Pattern]] = [
    (MarkerKind.LETTERED, re.compile(r"(?<!\S)([a-h])\.\s+(.{3,150}?)" + _NEXT_MARKER, re.MULTILINE)),
    (MarkerKind.NUMBERED, re.compile(r"(?<!\S)(\d{1,3})\.\s+(.{3,150}?)" + _NEXT_MARKER, re.MULTILINE)),
    (MarkerKind.LETTERED, re.compile(r"(?<!\S)([a-h])\)\s*(.{3,150}?)" + _NEXT_MARKER, re.MULTILINE)),
    (MarkerKind.NUMBERED, re.compile(r"(?<!\S)(\d{1,3})\)\s*(.{3,150}?)" + _NEXT_MARKER, re.MULTILINE)),
]


def extract_with_patterns(text: str) -> list[ExerciseCandidate]:
    """
    Extract "a. ...", "1. ...", "a) ..." and "1) ..." exercises line by line.

    The first pattern family that yields validated content wins.
    """
    if not text:
        return []

    for kind, pattern in SINGLE_LINE_PATTERNS:
        candidates = []
        for match in pattern.finditer(text):
            token, body = match.group(1), match.group(2).strip()
            if not is_educational(body):
                continue
            candidates.append(
                ExerciseCandidate(
                    identifier=token,
                    marker_kind=kind,
                    question=kind.render(token, body),
                    answer="",
                    provenance=StrategyTag.PATTERN_SCAN,
                )
            )
        if candidates:
            logger.debug("Pattern scan matched %d %s exercises", len(candidates), kind.value)
            return candidates

    return []
