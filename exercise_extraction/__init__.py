"""
Exercise Extraction - Gradeable exercises from worksheet OCR text

Turns the noisy OCR / vision transcription of a scanned French elementary
maths worksheet into a list of exercises (question + optional answer) by
running an ordered cascade of independent strategies over normalized text.

Quick Start:
    from exercise_extraction import ExerciseExtractor, ExtractionConfig

    extractor = ExerciseExtractor(ExtractionConfig())
    result = extractor.extract("a) 2/4  b) résoudre x+5=10")
    for exercise in result.exercises:
        print(exercise.question, exercise.answer)
    result.save("exercises.json")
"""

__version__ = "1.0.0"

from .coordinator import STRATEGY_REGISTRY, ExerciseExtractor, extract
from .service import ExtractionService
from .config import ExtractionServiceConfig
from .markers import MarkerKind, match_marker
from .models import (
    DEFAULT_STRATEGY_ORDER,
    LEGACY_STRATEGY_ORDER,
    ExerciseCandidate,
    ExtractionConfig,
    ExtractionResult,
    ExtractionStats,
    StrategyName,
    StrategyTag,
)
from .normalizer import normalize
from .validation import is_educational

__all__ = [
    "__version__",
    "ExerciseExtractor",
    "ExtractionService",
    "ExtractionServiceConfig",
    "STRATEGY_REGISTRY",
    "DEFAULT_STRATEGY_ORDER",
    "LEGACY_STRATEGY_ORDER",
    "ExerciseCandidate",
    "ExtractionConfig",
    "ExtractionResult",
    "ExtractionStats",
    "MarkerKind",
    "StrategyName",
    "StrategyTag",
    "extract",
    "match_marker",
    "normalize",
    "is_educational",
]
