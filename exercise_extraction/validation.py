"""
Content validation for candidate exercise text.

Anything carrying a signal passes. Only empty, very short and fill-only
spans are rejected.
"""

from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass
class ContentSignals:
    long_enough: bool
    only_fill: bool
    has_fraction: bool
    has_operation: bool
    has_equals: bool
    has_digit: bool
    has_instruction: bool
    has_word: bool

    @property
    def has_signal(self) -> bool:
        return (
            self.has_fraction
            or self.has_operation
            or self.has_equals
            or self.has_digit
            or self.has_instruction
            or self.has_word
        )

    @property
    def is_educational(self) -> bool:
        return self.long_enough and not self.only_fill and self.has_signal


_FRACTION = re.compile(r"(?<!\d)\d+\s*/\s*\d+")
_OPERATION = re.compile(r"(?<!\d)\d+\s*[-+×÷*/:x]\s*\d+")
_DIGIT = re.compile(r"\d")
# French instructions, accented and the unaccented forms OCR tends to produce
_INSTRUCTION = re.compile(
    r"calcul|r[ée]soud|simplifi|r[ée]dui|compl[eèé]t|[ée]cri[st]|trouve",
    re.IGNORECASE,
)
_WORD = re.compile(r"[^\W\d_]{3,}")
_FILL_ONLY = re.compile(r"[\W_]+")

_ERROR_INDICATORS = (
    "ocr extraction failed",
    "manual review required",
    "could not be processed automatically",
    "document uploaded at",
    "status: ocr extraction failed",
    "try uploading again",
    "emergency text extraction",
)
_MATH_CONTENT = re.compile(r"(?<!\d)\d+/\d+|(?<!\d)\d+\.\d+|exercice|fraction", re.IGNORECASE)


def analyze_content(text: str) -> ContentSignals:
    stripped = (text or "").strip()
    return ContentSignals(
        long_enough=len(stripped) > 2,
        only_fill=bool(_FILL_ONLY.fullmatch(stripped)) if stripped else True,
        has_fraction=bool(_FRACTION.search(stripped)),
        has_operation=bool(_OPERATION.search(stripped)),
        has_equals="=" in stripped,
        has_digit=bool(_DIGIT.search(stripped)),
        has_instruction=bool(_INSTRUCTION.search(stripped)),
        has_word=bool(_WORD.search(stripped)),
    )


def is_educational(text: str) -> bool:
    """
    Does a candidate span look like genuine educational content?

    True iff the trimmed text is longer than 2 characters, is not made of
    punctuation/fill characters only, and shows at least one signal:
    a fraction, an operation between numbers, an equals sign, a digit,
    a French instruction keyword, or a run of 3+ letters.
    """
    return analyze_content(text).is_educational


def is_error_text(text: str) -> bool:
    """
    Detect an upstream OCR failure notice posing as a transcription.

    Only counts as error text when a failure indicator is present and no
    math content is.
    """
    if not text:
        return False
    lowered = text.lower()
    has_indicator = any(indicator in lowered for indicator in _ERROR_INDICATORS)
    return has_indicator and not _MATH_CONTENT.search(text)
