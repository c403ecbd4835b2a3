"""
Content Clusterer

Last resort before the whole-document fallback, for text with no usable
markers at all:

1. Math clustering: sentence-like spans that carry math (a fraction, an
   operation between numbers, or "=") become numbered exercises.
2. Separator split: the first separator that cuts the text into 2+
   substantial parts. Blank lines are tried first, on the original text
   (normalization drops them), then ". ", "? " and "! ".
"""

from __future__ import annotations

import logging
import re
from typing import Iterator, Optional

from .markers import MarkerKind
from .models import ExerciseCandidate, ExtractionConfig, StrategyTag
from .normalizer import normalize
from .validation import is_educational

logger = logging.getLogger(__name__)

SENTENCE_SPAN = re.compile(r"[^.!?\n]+[.!?]?")
MATH_SIGNAL = re.compile(r"(?<!\d)\d+/\d+|(?<!\d)\d+\s*[-+×÷*x]\s*\d+|=")
PARAGRAPH_BREAK = re.compile(r"\n[^\S\n]*\n")
SENTENCE_SEPARATORS = (". ", "? ", "! ")


def extract_clusters(
    text: str,
    config: Optional[ExtractionConfig] = None,
    raw: Optional[str] = None,
) -> list[ExerciseCandidate]:
    """
    Group math-bearing spans into exercises.

    Args:
        text: Normalized text.
        config: Thresholds (defaults from ExtractionConfig).
        raw: Original text, used to find paragraphs separated by blank
            lines. Defaults to text.

    Returns:
        Numbered candidates with provenance CLUSTERING, or [] when the text
        cannot be split into at least two parts.
    """
    if not text or not text.strip():
        return []
    config = config or ExtractionConfig()

    clusters = _math_clusters(text, config)
    if len(clusters) >= config.min_cluster_results:
        logger.debug("Clustered %d math spans", len(clusters))
        return _numbered(clusters)

    parts = _separator_parts(text, config, raw if raw is not None else text)
    if parts:
        logger.debug("Separator split produced %d parts", len(parts))
        return _numbered(parts)

    return []


def _math_clusters(text: str, config: ExtractionConfig) -> list[str]:
    clusters = []
    for match in SENTENCE_SPAN.finditer(text):
        span = match.group(0).strip()
        if len(span) > config.max_cluster_chars:
            continue
        if not MATH_SIGNAL.search(span):
            continue
        if len(span) > config.min_cluster_chars and is_educational(span):
            clusters.append(span)
    return clusters


def _separator_parts(text: str, config: ExtractionConfig, raw: str) -> list[str]:
    for parts in _splits(text, raw):
        parts = [
            part.strip()
            for part in parts
            if len(part.strip()) > config.min_separator_part_chars and is_educational(part)
        ]
        if len(parts) >= config.min_cluster_results:
            return parts
    return []


def _splits(text: str, raw: str) -> Iterator[list[str]]:
    raw = raw.replace("\r\n", "\n").replace("\r", "\n")
    # Each paragraph is normalized on its own and read as one line
    yield [" ".join(normalize(paragraph).split("\n")) for paragraph in PARAGRAPH_BREAK.split(raw)]
    for separator in SENTENCE_SEPARATORS:
        yield text.split(separator)


def _numbered(spans: list[str]) -> list[ExerciseCandidate]:
    return [
        ExerciseCandidate(
            identifier=str(number),
            marker_kind=MarkerKind.NUMBERED,
            question=MarkerKind.NUMBERED.render(str(number), span),
            answer="",
            provenance=StrategyTag.CLUSTERING,
        )
        for number, span in enumerate(spans, start=1)
    ]
