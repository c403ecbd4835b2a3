"""
Data Models for the Exercise Extraction Cascade

Defines:
1. StrategyName / StrategyTag - Orderable strategies and candidate provenance
2. FractionToken - A fraction located in the original text (smart math)
3. ExerciseCandidate - The unit every strategy produces
4. ExtractionConfig - Strategy order and tuning knobs
5. ExtractionResult - Complete extraction output with statistics
6. ExtractRequest / ExtractResponse - HTTP API payloads

Design Principles:
- Pydantic v2 for validation and serialization
- Value objects are frozen; everything is created fresh per extraction call
- answer is always a string; "" means "needs student input"
- Save/load pattern matching the other result models of the pipeline

Usage:
    from exercise_extraction import ExerciseExtractor, ExtractionConfig

    result = ExerciseExtractor(ExtractionConfig()).extract(ocr_text)
    for exercise in result.exercises:
        print(exercise.question, "->", exercise.answer or "(empty)")
    result.save("exercises.json")
"""

from __future__ import annotations

import json
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator

from .markers import MarkerKind


# =============================================================================
# ENUMS
# =============================================================================


class StrategyName(str, Enum):
    """Strategies the coordinator can be configured to try, by name."""

    SMART_MATH = "smart_math"
    DELIMITER = "delimiter"
    BOUNDARY_SCAN = "boundary_scan"
    PATTERN_SCAN = "pattern_scan"
    CLUSTERING = "clustering"


class StrategyTag(str, Enum):
    """
    Provenance of a candidate. Diagnostics only, never used for branching
    downstream.
    """

    DELIMITER = "delimiter"
    SMART_MATH_LATEX = "smart_math_latex"
    SMART_MATH_OCR = "smart_math_ocr"
    BOUNDARY_SCAN = "boundary_scan"
    PATTERN_SCAN = "pattern_scan"
    CLUSTERING = "clustering"
    WHOLE_DOCUMENT_FALLBACK = "whole_document_fallback"


class FractionForm(str, Enum):
    """Surface form a fraction was written in."""

    LATEX = "latex"
    OCR = "ocr"


DEFAULT_STRATEGY_ORDER = [
    StrategyName.SMART_MATH,
    StrategyName.DELIMITER,
    StrategyName.BOUNDARY_SCAN,
    StrategyName.CLUSTERING,
]

# Two-phase policy: fraction extraction, then sentinel delimiters.
LEGACY_STRATEGY_ORDER = (
    StrategyName.SMART_MATH,
    StrategyName.DELIMITER,
)


# =============================================================================
# CANDIDATES
# =============================================================================


class FractionToken(BaseModel):
    """
    A fraction found in the original text, kept with its span so the
    answer search can look right next to it.
    """

    numerator: str = Field(..., pattern=r"^\d+$")
    denominator: str = Field(..., pattern=r"^\d+$")
    start: int = Field(..., ge=0, description="Span start in the original text")
    end: int = Field(..., ge=0, description="Span end in the original text (exclusive)")
    surface: str = Field(..., description="Text exactly as it appeared")
    form: FractionForm

    model_config = {"frozen": True}

    @property
    def text(self) -> str:
        return f"{self.numerator}/{self.denominator}"


class ExerciseCandidate(BaseModel):
    """
    One extracted exercise.

    Example:
        {"identifier": "a", "question": "a. Simplifiez la fraction 30/63",
         "answer": "10/21", "provenance": "smart_math_latex"}
    """

    identifier: Optional[str] = Field(
        None,
        description="Enumeration token (letter, number, roman numeral, keyword) if any",
    )
    marker_kind: Optional[MarkerKind] = Field(
        None,
        description="Marker family of the identifier",
    )
    question: str = Field(
        ...,
        min_length=1,
        description="Prompt text, including the identifier prefix when one exists",
    )
    answer: str = Field(
        "",
        description="Associated answer; empty string means the student still has to answer",
    )
    provenance: StrategyTag = Field(
        ...,
        description="Strategy that produced this candidate",
    )
    fraction: Optional[str] = Field(
        None,
        description="Question fraction N/D for smart math candidates",
    )

    model_config = {"frozen": True}

    @field_validator("answer", mode="before")
    @classmethod
    def _answer_never_none(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def needs_answer(self) -> bool:
        return not self.answer

    def to_record(self) -> dict[str, Any]:
        """Output-boundary record handed to the grading layer."""
        record: dict[str, Any] = {"question": self.question, "answer": self.answer}
        if self.identifier is not None:
            record["identifier"] = self.identifier
        return record


# =============================================================================
# CONFIGURATION
# =============================================================================


class ExtractionConfig(BaseModel):
    """
    Configuration for the extraction cascade.

    The strategy order is data: the coordinator tries each named strategy
    in turn and stops at the first one that yields validated candidates.
    """

    strategy_order: list[StrategyName] = Field(
        default_factory=lambda: list(DEFAULT_STRATEGY_ORDER),
        description="Strategies to try, highest priority first",
        min_length=1,
    )
    fallback_answer_chars: int = Field(
        300,
        description="Characters of the trimmed document kept in the fallback candidate",
        ge=1,
    )
    min_cluster_chars: int = Field(
        10,
        description="A math cluster must be longer than this",
        ge=0,
    )
    max_cluster_chars: int = Field(
        300,
        description="Sentence spans longer than this are never clustered",
        ge=20,
    )
    min_separator_part_chars: int = Field(
        10,
        description="Separator-split parts must be longer than this",
        ge=0,
    )
    min_cluster_results: int = Field(
        2,
        description="The clusterer only answers with at least this many parts",
        ge=1,
    )
    reconcile_duplicates: bool = Field(
        False,
        description="Collapse fractions found by both smart math passes (latex wins)",
    )
    skip_error_text: bool = Field(
        True,
        description="Return nothing from smart math for upstream OCR failure notices",
    )

    @field_validator("strategy_order")
    @classmethod
    def _unique_strategies(cls, value: list[StrategyName]) -> list[StrategyName]:
        if len(set(value)) != len(value):
            raise ValueError(f"strategy_order contains duplicates: {[s.value for s in value]}")
        return value

    def with_strategy_order(self, order: list[StrategyName]) -> "ExtractionConfig":
        """Copy with another strategy order, validated like a new config."""
        return ExtractionConfig.model_validate({**self.model_dump(), "strategy_order": order})


# =============================================================================
# RESULTS
# =============================================================================


class StrategyFailure(BaseModel):
    """A strategy that raised instead of returning candidates."""

    strategy: StrategyName
    error: str


class ExtractionStats(BaseModel):
    """Statistics about one extraction call."""

    input_chars: int = 0
    normalized_chars: int = 0
    strategies_attempted: int = 0
    candidates_rejected: int = 0
    duplicate_fractions: int = 0


class ExtractionResult(BaseModel):
    """
    Complete result of extracting exercises from one transcription.

    A single whole-document candidate means no distinct exercises were found;
    callers should surface that instead of presenting it as a normal result.
    """

    source: str = Field(
        "inline",
        description="Where the text came from (file path or 'inline')",
    )
    document_id: str = Field(
        "inline",
        description="Identifier used for storage",
    )
    exercises: list[ExerciseCandidate] = Field(
        default_factory=list,
        description="Extracted exercises in document order",
    )
    strategy: Optional[StrategyName] = Field(
        None,
        description="Strategy whose candidates were returned; None for fallback or empty input",
    )
    attempted: list[StrategyName] = Field(
        default_factory=list,
        description="Strategies tried, in order",
    )
    failed_strategies: list[StrategyFailure] = Field(
        default_factory=list,
    )
    stats: ExtractionStats = Field(default_factory=ExtractionStats)
    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="When extraction was performed",
    )

    @computed_field
    @property
    def total_exercises(self) -> int:
        return len(self.exercises)

    @computed_field
    @property
    def is_fallback(self) -> bool:
        return (
            len(self.exercises) == 1
            and self.exercises[0].provenance == StrategyTag.WHOLE_DOCUMENT_FALLBACK
        )

    def to_records(self) -> list[dict[str, Any]]:
        return [exercise.to_record() for exercise in self.exercises]

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)

    def save(self, path: str) -> None:
        """Save extraction result to a JSON file."""
        Path(path).write_text(self.to_json(), encoding="utf-8")

    @classmethod
    def load(cls, path: str) -> "ExtractionResult":
        """Load extraction result from a JSON file."""
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls.model_validate(data)


# =============================================================================
# API MODELS
# =============================================================================


class ExtractRequest(BaseModel):
    text: str = Field(..., description="OCR / vision transcription of one page")
    document_id: Optional[str] = None
    strategy_order: Optional[list[StrategyName]] = None
    save: bool = False

    @model_validator(mode="after")
    def _order_not_empty(self) -> "ExtractRequest":
        if self.strategy_order is None:
            return self
        if not self.strategy_order:
            raise ValueError("strategy_order must not be empty when given")
        if len(set(self.strategy_order)) != len(self.strategy_order):
            raise ValueError("strategy_order contains duplicates")
        return self


class ExerciseRecord(BaseModel):
    identifier: Optional[str] = None
    question: str
    answer: str = ""
    provenance: StrategyTag


class ExtractResponse(BaseModel):
    document_id: str
    strategy: Optional[StrategyName] = None
    is_fallback: bool = False
    total_exercises: int = 0
    exercises: list[ExerciseRecord] = Field(default_factory=list)
    output_path: Optional[str] = None
