"""
Custom Exceptions for Exercise Extraction.

The extraction strategies themselves never raise on malformed input; these
exceptions describe failures at the service boundary and unexpected
failures inside a strategy.

Exception Hierarchy:
    ExerciseExtractionError (base)
    ├── InputError
    │   ├── InputTooLargeError
    │   └── TranscriptNotFoundError
    ├── StrategyError
    └── ResultLoadError

Usage:
    from exercise_extraction.exceptions import (
        ExerciseExtractionError,
        InputTooLargeError,
    )

    try:
        result = service.extract_text(text)
    except InputTooLargeError as e:
        print(f"Transcript too long: {e.size} > {e.limit}")
    except ExerciseExtractionError as e:
        print(f"Extraction failed: {e}")
"""

from __future__ import annotations

from typing import Optional


# =============================================================================
# BASE EXCEPTION
# =============================================================================


class ExerciseExtractionError(Exception):
    """
    Base exception for all exercise extraction errors.

    Attributes:
        message: Human-readable error description
        details: Additional technical details (optional)
    """

    def __init__(
        self,
        message: str = "An exercise extraction error occurred",
        details: Optional[str] = None,
    ):
        self.message = message
        self.details = details

        full_message = message
        if details:
            full_message = f"{message} | Details: {details}"

        super().__init__(full_message)


# =============================================================================
# INPUT ERRORS
# =============================================================================


class InputError(ExerciseExtractionError):
    """Base class for errors about the transcript handed to the service."""

    pass


class InputTooLargeError(InputError):
    """
    Raised when a transcript exceeds the configured size limit.

    Attributes:
        size: Length of the rejected transcript in characters
        limit: Configured maximum
    """

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(
            message=f"Transcript too large: {size} characters (limit {limit})",
        )


class TranscriptNotFoundError(InputError):
    """
    Raised when a transcript file cannot be found.

    Attributes:
        path: Path to the missing file
    """

    def __init__(self, path: str):
        self.path = path
        super().__init__(message=f"Transcript file not found: {path}")


# =============================================================================
# STRATEGY ERRORS
# =============================================================================


class StrategyError(ExerciseExtractionError):
    """
    Wraps an unexpected failure inside one extraction strategy.

    The coordinator records it and moves on to the next strategy.

    Attributes:
        strategy: Name of the failing strategy
        original_error: The underlying exception
    """

    def __init__(
        self,
        strategy: str,
        original_error: Optional[Exception] = None,
    ):
        self.strategy = strategy
        self.original_error = original_error
        details = str(original_error) if original_error else None
        super().__init__(
            message=f"Strategy '{strategy}' failed",
            details=details,
        )


# =============================================================================
# RESULT ERRORS
# =============================================================================


class ResultLoadError(ExerciseExtractionError):
    """
    Raised when a saved extraction result cannot be read back.

    Attributes:
        path: Path of the result file
        original_error: Parsing or validation error
    """

    def __init__(
        self,
        path: str,
        original_error: Optional[Exception] = None,
    ):
        self.path = path
        self.original_error = original_error
        details = str(original_error) if original_error else None
        super().__init__(
            message=f"Invalid extraction result file: {path}",
            details=details,
        )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def format_error_chain(error: BaseException) -> str:
    """
    Render an error and the errors behind it, outermost first.

    Follows original_error (StrategyError, ResultLoadError), then __cause__:

        StrategyError: Strategy 'smart_math' failed | Details: boom
          caused by RuntimeError: boom
    """
    lines = []
    seen: set[int] = set()
    current: Optional[BaseException] = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        prefix = "  caused by " if lines else ""
        lines.append(f"{prefix}{type(current).__name__}: {current}")
        current = getattr(current, "original_error", None) or current.__cause__
    return "\n".join(lines)
