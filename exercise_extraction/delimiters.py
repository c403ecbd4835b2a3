"""
Delimiter Extractor

Upstream vision prompts can ask the model to bracket every exercise with
sentinels. When they are present this is the most reliable strategy.

Sentinel families, tried in order (first family with validated content wins):

    EXERCISE_START ... EXERCISE_END
    ||| ... |||
    ### ... ###
    --- ... ---
"""

from __future__ import annotations

import logging
import re

from .markers import match_marker
from .models import ExerciseCandidate, StrategyTag
from .validation import is_educational

logger = logging.getLogger(__name__)

# Interior spans are lazy and capped so unpaired sentinels cannot backtrack far
DELIMITER_PATTERNS: list[tuple[str, re.Pattern]] = [
    (
        "exercise_start_end",
        re.compile(r"EXERCISE_START\s*(.{1,2000}?)\s*EXERCISE_END", re.DOTALL | re.IGNORECASE),
    ),
    ("triple_pipe", re.compile(r"\|\|\|([^|]{1,2000}?)\|\|\|")),
    ("triple_hash", re.compile(r"###([^#]{1,2000}?)###")),
    ("triple_dash", re.compile(r"---([^-]{1,2000}?)---")),
]


def extract_delimited(text: str) -> list[ExerciseCandidate]:
    """
    Extract exercises bracketed by sentinel markers.

    Args:
        text: Normalized text.

    Returns:
        One candidate per paired occurrence with validated interior content,
        answer empty, provenance DELIMITER. Empty if no family matches.
    """
    if not text:
        return []

    for family, pattern in DELIMITER_PATTERNS:
        candidates = [
            _to_candidate(content)
            for content in _interiors(text, pattern)
            if is_educational(content)
        ]
        if candidates:
            logger.debug("Delimiter family %s matched %d spans", family, len(candidates))
            return candidates

    return []


def _interiors(text: str, pattern: re.Pattern) -> list[str]:
    return [" ".join(match.group(1).split()) for match in pattern.finditer(text)]


def _to_candidate(content: str) -> ExerciseCandidate:
    marker = match_marker(content)
    return ExerciseCandidate(
        identifier=marker.token if marker else None,
        marker_kind=marker.kind if marker else None,
        question=content,
        answer="",
        provenance=StrategyTag.DELIMITER,
    )
