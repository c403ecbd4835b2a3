"""
Smart Math Extractor

Fraction-simplification worksheets are the most common input, and the
answer a child wrote usually sits right next to the fraction. This
strategy works on the ORIGINAL text (normalization would destroy both the
markup and the spatial cues):

1. Formula-markup pass: \\frac{N}{D} tokens
2. Plain-OCR pass: N/D or (N)/(D) tokens, date chains excluded

Each token becomes "<letter>. Simplifiez la fraction N/D". The answer is
looked up immediately after the token (answer-proximity search); when no
pattern matches the answer stays empty, it is never guessed.

The two passes are concatenated and may report the same fraction twice.
reconcile_fraction_duplicates() collapses such pairs when the caller asks
for it; formula-markup candidates win.

Usage:
    from exercise_extraction.smart_math import extract_smart_math

    candidates = extract_smart_math(r"\\frac{30}{63} = \\frac{10}{21}")
    # [ExerciseCandidate(identifier="a", question="a. Simplifiez la fraction 30/63",
    #                    answer="10/21", provenance=StrategyTag.SMART_MATH_LATEX)]
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from string import ascii_lowercase
from typing import Iterable

from .markers import MarkerKind
from .models import ExerciseCandidate, FractionForm, FractionToken, StrategyTag
from .validation import is_error_text

logger = logging.getLogger(__name__)


# =============================================================================
# TOKEN PATTERNS
# =============================================================================

LATEX_FRACTION = re.compile(r"\\[dt]?frac\s*\{\s*(\d+)\s*\}\s*\{\s*(\d+)\s*\}")

# Not preceded or followed by a digit or slash: 12/05/2024 is a date, not a fraction
OCR_FRACTION = re.compile(
    r"(?<![\d/])(?:\(\s*(\d+)\s*\)|(\d+))\s*/\s*(?:\(\s*(\d+)\s*\)|(\d+))(?![\d/])"
)

_LATEX_ANSWER = r"\\[dt]?frac\s*\{\s*\d+\s*\}\s*\{\s*\d+\s*\}"
_BARE_ANSWER = r"\(?\s*\d+\s*\)?\s*/\s*\(?\s*\d+\s*\)?(?![\d/])"
_EQUALS = r"\s*=[\s._]*"
_GAP = r"[^\d\n=]{0,40}?"
_BRACKETED_ANSWER = r"[\(\[]\s*\d+\s*/\s*\d+\s*[\)\]]"
_ARROW = r"\s*(?:->|=>|→|⇒|:)\s*"

QUESTION_TEMPLATE = "{letter}. Simplifiez la fraction {fraction}"

_PROVENANCE = {
    FractionForm.LATEX: StrategyTag.SMART_MATH_LATEX,
    FractionForm.OCR: StrategyTag.SMART_MATH_OCR,
}


# =============================================================================
# PUBLIC API
# =============================================================================


def extract_smart_math(text: str, skip_error_text: bool = True) -> list[ExerciseCandidate]:
    """
    Run the formula-markup pass then the plain-OCR pass.

    Args:
        text: Original (not normalized) text.
        skip_error_text: Return nothing for upstream OCR failure notices.

    Returns:
        Latex candidates followed by OCR candidates. The same fraction may
        appear in both; see reconcile_fraction_duplicates().
    """
    if not text:
        return []
    if skip_error_text and is_error_text(text):
        logger.info("Skipping smart math: input looks like an OCR failure notice")
        return []

    latex = _run_pass(text, find_fraction_tokens(text, FractionForm.LATEX))
    ocr = _run_pass(text, find_fraction_tokens(text, FractionForm.OCR))
    logger.debug("Smart math found %d latex and %d OCR fractions", len(latex), len(ocr))
    return latex + ocr


def find_fraction_tokens(text: str, form: FractionForm) -> list[FractionToken]:
    """Locate fraction tokens of one surface form, left to right."""
    tokens = []
    if form == FractionForm.LATEX:
        for match in LATEX_FRACTION.finditer(text):
            tokens.append(_token(match, match.group(1), match.group(2), form))
    else:
        for match in OCR_FRACTION.finditer(text):
            numerator = match.group(1) or match.group(2)
            denominator = match.group(3) or match.group(4)
            tokens.append(_token(match, numerator, denominator, form))
    return tokens


def find_answer(text: str, token: FractionToken) -> str:
    """
    Look for the answer written right after a fraction token.

    Patterns, first match wins:
    1. \\frac{N}{D} = \\frac{a}{b}
    2. N/D = a/b            (fill characters after "=" tolerated)
    3. N/D ... (a/b) or [a/b] within a short digit-free gap
    4. N/D -> a/b, => a/b, : a/b

    Returns:
        "a/b", or "" when nothing is written next to the fraction.
    """
    span = _find_answer_span(text, token)
    if span is None:
        return ""
    return "/".join(re.findall(r"\d+", text[span[0]:span[1]]))


def count_fraction_duplicates(candidates: Iterable[ExerciseCandidate]) -> int:
    """Number of OCR candidates whose fraction was also found as markup."""
    latex = Counter()
    ocr = Counter()
    for candidate in candidates:
        if candidate.provenance == StrategyTag.SMART_MATH_LATEX:
            latex[candidate.fraction] += 1
        elif candidate.provenance == StrategyTag.SMART_MATH_OCR:
            ocr[candidate.fraction] += 1
    return sum(min(count, latex[fraction]) for fraction, count in ocr.items())


def reconcile_fraction_duplicates(
    candidates: list[ExerciseCandidate],
) -> list[ExerciseCandidate]:
    """
    Collapse fractions reported by both smart math passes.

    Each OCR candidate is paired with at most one not-yet-paired latex
    candidate carrying the same fraction. The latex candidate survives and
    takes the OCR answer when its own is empty. Survivors are re-lettered
    a, b, c, ... in order. Candidates of other strategies pass through.
    """
    latex_positions: dict[str, list[int]] = {}
    for position, candidate in enumerate(candidates):
        if candidate.provenance == StrategyTag.SMART_MATH_LATEX:
            latex_positions.setdefault(candidate.fraction, []).append(position)

    survivors = list(candidates)
    dropped: set[int] = set()
    for position, candidate in enumerate(candidates):
        if candidate.provenance != StrategyTag.SMART_MATH_OCR:
            continue
        pending = latex_positions.get(candidate.fraction)
        if not pending:
            continue
        latex_position = pending.pop(0)
        if not survivors[latex_position].answer and candidate.answer:
            survivors[latex_position] = survivors[latex_position].model_copy(
                update={"answer": candidate.answer}
            )
        dropped.add(position)

    reconciled = []
    index = 0
    for position, candidate in enumerate(survivors):
        if position in dropped:
            continue
        if candidate.fraction is not None and candidate.provenance in _PROVENANCE.values():
            candidate = _candidate(index, candidate.fraction, candidate.answer, candidate.provenance)
            index += 1
        reconciled.append(candidate)
    return reconciled


def letter_for(index: int) -> str:
    """0 -> a, 25 -> z, 26 -> aa, 27 -> ab, ..."""
    label = ""
    index += 1
    while index:
        index, remainder = divmod(index - 1, 26)
        label = ascii_lowercase[remainder] + label
    return label


# =============================================================================
# INTERNALS
# =============================================================================


def _token(match: re.Match, numerator: str, denominator: str, form: FractionForm) -> FractionToken:
    return FractionToken(
        numerator=numerator,
        denominator=denominator,
        start=match.start(),
        end=match.end(),
        surface=match.group(0),
        form=form,
    )


def _run_pass(text: str, tokens: list[FractionToken]) -> list[ExerciseCandidate]:
    candidates = []
    # Answers follow their token with no digit in between, so the furthest
    # consumed offset is enough to spot a token that was already an answer
    consumed_until = 0
    for token in tokens:
        if token.start < consumed_until:
            continue
        span = _find_answer_span(text, token)
        answer = ""
        if span is not None:
            consumed_until = span[1]
            answer = "/".join(re.findall(r"\d+", text[span[0]:span[1]]))
        candidates.append(
            _candidate(len(candidates), token.text, answer, _PROVENANCE[token.form])
        )
    return candidates


def _candidate(index: int, fraction: str, answer: str, provenance: StrategyTag) -> ExerciseCandidate:
    letter = letter_for(index)
    return ExerciseCandidate(
        identifier=letter,
        marker_kind=MarkerKind.LETTERED,
        question=QUESTION_TEMPLATE.format(letter=letter, fraction=fraction),
        answer=answer,
        provenance=provenance,
        fraction=fraction,
    )


def _answer_patterns(token: FractionToken) -> list[re.Pattern]:
    n, d = token.numerator, token.denominator
    latex_surface = rf"\\[dt]?frac\s*\{{\s*{n}\s*\}}\s*\{{\s*{d}\s*\}}"
    bare_surface = rf"\(?\s*{n}\s*\)?\s*/\s*\(?\s*{d}(?!\d)\s*\)?"
    any_surface = rf"(?:{latex_surface}|{bare_surface})"
    return [
        re.compile(rf"{latex_surface}{_EQUALS}(?P<answer>{_LATEX_ANSWER})"),
        re.compile(rf"{bare_surface}{_EQUALS}(?P<answer>{_BARE_ANSWER})"),
        re.compile(rf"{any_surface}{_GAP}(?P<answer>{_BRACKETED_ANSWER})"),
        re.compile(rf"{any_surface}{_ARROW}(?P<answer>{_LATEX_ANSWER}|{_BARE_ANSWER})"),
    ]


def _find_answer_span(text: str, token: FractionToken):
    for pattern in _answer_patterns(token):
        match = pattern.match(text, token.start)
        if match:
            return match.span("answer")
    return None
