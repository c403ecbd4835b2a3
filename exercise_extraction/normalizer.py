"""
OCR Text Normalizer for Worksheet Transcriptions

Cleans the raw OCR / vision transcription of a worksheet page before the
line-oriented strategies run. The rules are applied in a fixed order;
later rules assume the earlier ones already ran:

1. Fill-lines: runs of 4+ dots or underscores become one space.
2. Markup: \\frac{N}{D} becomes N/D, text wrappers (\\text{..}, \\mathrm{..})
   keep their content, math delimiters, remaining backslash commands and
   braces are removed.
3. Spacing: short marker tokens followed by "," or "." become "<token>.",
   "a )" becomes "a)", fractions are tightened ("( 30 ) / ( 63 )" -> "30/63")
   and spaces around "=" are removed.
4. Marker collisions: when OCR flattened an enumeration onto one line, a
   line break is inserted before every marker of a family that occurs
   more than once on that line.
5. Whitespace: horizontal runs collapse to one space, lines are stripped,
   blank lines dropped.

normalize() is total and idempotent.

Usage:
    from exercise_extraction.normalizer import normalize

    normalize("a) 2/4  b) résoudre x + 5 = 10")
    # "a) 2/4\\nb) résoudre x+5=10"
"""

from __future__ import annotations

import re
from typing import Optional

from .markers import MarkerKind

# Step 1
_FILL_RUN = re.compile(r"\.{4,}|_{4,}")

# Step 2 (order matters: unwrap meaningful markup before generic stripping)
_LATEX_FRACTION = re.compile(r"\\[dt]?frac\s*\{\s*(\d+)\s*\}\s*\{\s*(\d+)\s*\}")
_LATEX_TEXT_WRAPPER = re.compile(
    r"\\(?:text|textit|textbf|textrm|mathrm|mathbf|boxed|mbox)\s*\{([^{}]{0,500})\}"
)
_LATEX_ENVIRONMENT = re.compile(r"\\(?:begin|end)\s*\{[^{}]{0,40}\}")
_LATEX_SYMBOLS = {
    "times": "×",
    "div": "÷",
    "cdot": "×",
    "le": "≤",
    "ge": "≥",
    "neq": "≠",
}
_LATEX_SYMBOL = re.compile(r"\\(" + "|".join(_LATEX_SYMBOLS) + r")(?![a-zA-Z])")
_MATH_DELIMITER = re.compile(r"\\[()\[\]]|\${1,2}")
_LATEX_COMMAND = re.compile(r"\\\\|\\[a-zA-Z]+|\\")
_BRACES = re.compile(r"[{}]")

# Step 3
_MARKER_TOKEN = r"(?<!\S)([a-h]|\d{1,2}|[IVX]{1,5})"
_MARKER_PUNCTUATION = re.compile(_MARKER_TOKEN + r"[ \t]*[,.](?=\s|$)", re.MULTILINE)
_MARKER_PAREN = re.compile(_MARKER_TOKEN + r"[ \t]+\)")
_PAREN_FRACTION = re.compile(r"\([ \t]*(\d+)[ \t]*\)[ \t]*/[ \t]*\([ \t]*(\d+)[ \t]*\)")
_FRACTION_SPACING = re.compile(r"(?<!\d)(\d+)[ \t]*/[ \t]*(\d+)")
_EQUALS_SPACING = re.compile(r"[ \t]*=[ \t]*")

# Step 5
_HORIZONTAL_SPACE = re.compile(r"[^\S\n]+")


def normalize(raw: str) -> str:
    """
    Normalize a raw OCR transcription.

    Args:
        raw: Unprocessed text. None and empty input are accepted.

    Returns:
        Normalized text: no fill-lines, no markup leftovers, one marker
        family occurrence per line at most, single spaces, no blank lines.
    """
    if not raw:
        return ""

    text = raw.replace("\r\n", "\n").replace("\r", "\n")
    text = _HORIZONTAL_SPACE.sub(" ", text)
    text = _collapse_fill_lines(text)
    text = _strip_markup(text)
    text = _normalize_spacing(text)
    text = _repair_marker_collisions(text)
    return _collapse_whitespace(text)


def _collapse_fill_lines(text: str) -> str:
    return _FILL_RUN.sub(" ", text)


def _strip_markup(text: str) -> str:
    text = _remove_exponent_artifacts(text)
    text = _LATEX_FRACTION.sub(r"\1/\2", text)
    text = _LATEX_TEXT_WRAPPER.sub(r" \1 ", text)
    text = _LATEX_ENVIRONMENT.sub(" ", text)
    text = _LATEX_SYMBOL.sub(lambda m: f" {_LATEX_SYMBOLS[m.group(1)]} ", text)
    text = _MATH_DELIMITER.sub(" ", text)
    text = _LATEX_COMMAND.sub(" ", text)
    text = _BRACES.sub("", text)
    # Brace removal can rebuild an artifact ("^{(}x)") or a fill run ("..{}..")
    text = _remove_exponent_artifacts(text)
    return _collapse_fill_lines(text)


def _remove_exponent_artifacts(text: str) -> str:
    """
    Drop "^(...)" groups left by formula OCR (^(aligned), ^(array), ...).

    Single left-to-right pass over a stack of open parentheses, so nested
    groups ("^(^(x))") and groups joined by a removal ("^^(x)(y)") all go
    at once. A group never spans a line break.
    """
    kept: list[str] = []
    # Start offset in kept for "^(" openers, None for plain "("
    opened: list[Optional[int]] = []
    for char in text:
        if char == "(":
            opened.append(len(kept) - 1 if kept and kept[-1] == "^" else None)
        elif char == ")" and opened:
            start = opened.pop()
            if start is not None:
                del kept[start:]
                continue
        elif char == "\n":
            opened.clear()
        kept.append(char)
    return "".join(kept)


def _normalize_spacing(text: str) -> str:
    text = _MARKER_PUNCTUATION.sub(r"\1.", text)
    text = _MARKER_PAREN.sub(r"\1)", text)
    text = _PAREN_FRACTION.sub(r"\1/\2", text)
    text = _FRACTION_SPACING.sub(r"\1/\2", text)
    return _EQUALS_SPACING.sub("=", text)


def _repair_marker_collisions(text: str) -> str:
    lines = text.split("\n")
    # Keyword headings first: "Exercice 1. ... Exercice 2." splits on the headings
    for kind in reversed(list(MarkerKind)):
        repaired: list[str] = []
        for line in lines:
            repaired.extend(_split_colliding(line, kind.occurrence_pattern))
        lines = repaired
    return "\n".join(lines)


def _split_colliding(line: str, pattern: re.Pattern) -> list[str]:
    """Break a line before each marker of a family that occurs 2+ times on it."""
    starts = [match.start() for match in pattern.finditer(line)]
    if len(starts) < 2:
        return [line]

    pieces: list[str] = []
    previous = 0
    for start in starts:
        if start > previous:
            pieces.append(line[previous:start])
        previous = start
    pieces.append(line[previous:])
    return [piece.strip() for piece in pieces if piece.strip()]


def _collapse_whitespace(text: str) -> str:
    text = _HORIZONTAL_SPACE.sub(" ", text)
    lines = (line.strip() for line in text.split("\n"))
    return "\n".join(line for line in lines if line)
