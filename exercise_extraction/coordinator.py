"""
Extraction Coordinator

Runs the extraction cascade over one transcription:

1. Normalize the raw text once
2. Try each strategy of config.strategy_order in turn
   (smart math gets the original text, the others the normalized text)
3. Keep only candidates whose question passes the content validator
4. The first strategy with a non-empty result wins; results are never merged
5. Nothing won and the text is not blank: one whole-document candidate

A strategy that raises is logged and skipped, so extract() never fails on
any input string.

Usage:
    from exercise_extraction import ExerciseExtractor, ExtractionConfig

    extractor = ExerciseExtractor(ExtractionConfig())
    result = extractor.extract(ocr_text)
    if result.is_fallback:
        print("Could not find distinct exercises")
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from .boundary import extract_with_patterns, scan_boundaries
from .clustering import extract_clusters
from .delimiters import extract_delimited
from .exceptions import StrategyError, format_error_chain
from .models import (
    ExerciseCandidate,
    ExtractionConfig,
    ExtractionResult,
    ExtractionStats,
    StrategyFailure,
    StrategyName,
    StrategyTag,
)
from .normalizer import normalize
from .smart_math import (
    count_fraction_duplicates,
    extract_smart_math,
    reconcile_fraction_duplicates,
)
from .validation import is_educational

logger = logging.getLogger(__name__)

# (raw text, normalized text, config) -> candidates
Strategy = Callable[[str, str, ExtractionConfig], list[ExerciseCandidate]]

FALLBACK_QUESTION = "Document Content"


# =============================================================================
# STRATEGY REGISTRY
# =============================================================================


def _smart_math(raw: str, normalized: str, config: ExtractionConfig) -> list[ExerciseCandidate]:
    return extract_smart_math(raw, skip_error_text=config.skip_error_text)


def _delimiter(raw: str, normalized: str, config: ExtractionConfig) -> list[ExerciseCandidate]:
    return extract_delimited(normalized)


def _boundary_scan(raw: str, normalized: str, config: ExtractionConfig) -> list[ExerciseCandidate]:
    return scan_boundaries(normalized)


def _pattern_scan(raw: str, normalized: str, config: ExtractionConfig) -> list[ExerciseCandidate]:
    return extract_with_patterns(normalized)


def _clustering(raw: str, normalized: str, config: ExtractionConfig) -> list[ExerciseCandidate]:
    return extract_clusters(normalized, config, raw=raw)


STRATEGY_REGISTRY: dict[StrategyName, Strategy] = {
    StrategyName.SMART_MATH: _smart_math,
    StrategyName.DELIMITER: _delimiter,
    StrategyName.BOUNDARY_SCAN: _boundary_scan,
    StrategyName.PATTERN_SCAN: _pattern_scan,
    StrategyName.CLUSTERING: _clustering,
}


# =============================================================================
# COORDINATOR
# =============================================================================


class ExerciseExtractor:
    """
    Ordered strategy dispatcher.

    Args:
        config: Strategy order and thresholds
        registry: Strategy implementations by name (defaults to STRATEGY_REGISTRY)
    """

    def __init__(
        self,
        config: Optional[ExtractionConfig] = None,
        registry: Optional[dict[StrategyName, Strategy]] = None,
    ):
        self.config = config or ExtractionConfig()
        self.registry = registry if registry is not None else STRATEGY_REGISTRY

    def extract(
        self,
        raw: Optional[str],
        source: str = "inline",
        document_id: str = "inline",
    ) -> ExtractionResult:
        """
        Extract exercises from one transcription.

        Args:
            raw: OCR / vision transcription (None is treated as empty)
            source: Origin of the text, recorded in the result
            document_id: Identifier recorded in the result

        Returns:
            ExtractionResult. Empty or whitespace-only input gives no
            exercises; any other input gives at least one.
        """
        raw = raw or ""
        result = ExtractionResult(
            source=source,
            document_id=document_id,
            stats=ExtractionStats(input_chars=len(raw)),
        )
        stats = result.stats

        if not raw.strip():
            logger.info("Empty transcription, nothing to extract")
            return result

        normalized = normalize(raw)
        stats.normalized_chars = len(normalized)

        for name in self.config.strategy_order:
            result.attempted.append(name)
            stats.strategies_attempted += 1

            try:
                candidates = self.registry[name](raw, normalized, self.config)
                if name == StrategyName.SMART_MATH:
                    candidates = self._handle_duplicates(candidates, stats)
            except Exception as e:
                error = StrategyError(name.value, e)
                logger.error("Trying next strategy after:\n%s", format_error_chain(error), exc_info=e)
                result.failed_strategies.append(
                    StrategyFailure(strategy=name, error=str(error))
                )
                continue

            accepted = [c for c in candidates if is_educational(c.question)]
            stats.candidates_rejected += len(candidates) - len(accepted)

            if accepted:
                logger.info("Strategy %s produced %d exercises", name.value, len(accepted))
                result.exercises = accepted
                result.strategy = name
                return result

            logger.debug("Strategy %s produced nothing", name.value)

        logger.info("No strategy found distinct exercises, using whole document")
        result.exercises = [self._fallback(raw)]
        return result

    def _handle_duplicates(
        self,
        candidates: list[ExerciseCandidate],
        stats: ExtractionStats,
    ) -> list[ExerciseCandidate]:
        """Count fractions found by both smart math passes, reconcile if configured."""
        duplicates = count_fraction_duplicates(candidates)
        stats.duplicate_fractions = duplicates
        if not duplicates:
            return candidates

        if self.config.reconcile_duplicates:
            logger.warning("Reconciling %d fraction(s) found as both markup and plain text", duplicates)
            return reconcile_fraction_duplicates(candidates)

        logger.warning("%d fraction(s) found as both markup and plain text, keeping both", duplicates)
        return candidates

    def _fallback(self, raw: str) -> ExerciseCandidate:
        return ExerciseCandidate(
            identifier=None,
            question=FALLBACK_QUESTION,
            answer=raw.strip()[: self.config.fallback_answer_chars],
            provenance=StrategyTag.WHOLE_DOCUMENT_FALLBACK,
        )


def extract(raw: Optional[str], config: Optional[ExtractionConfig] = None) -> list[ExerciseCandidate]:
    """Extract exercises and return only the candidate list."""
    return ExerciseExtractor(config).extract(raw).exercises
