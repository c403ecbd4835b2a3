"""
Worksheet Marker Families

Enumeration markers introduce one exercise on a worksheet. OCR output of
French elementary worksheets uses four families:

    LETTERED  a. / a)  through  h. / h)
    NUMBERED  1. / 1)  (up to three digits)
    ROMAN     I. II. III. IV. ...
    KEYWORD   Exercice [n], Problème [n], Calcule / Calculez

Each family carries two patterns:
- a line-start pattern used by the boundary scanner to open an exercise
- an in-line occurrence pattern used by the normalizer to detect markers
  that OCR flattened onto the same physical line

and a rendering template used to build the question text.

Adding a family means adding one MarkerKind member and one entry in
_MARKER_SPECS; nothing else enumerates the families.

Usage:
    from exercise_extraction.markers import match_marker

    match = match_marker("b) résoudre x+5=10")
    # MarkerMatch(kind=MarkerKind.LETTERED, token="b", body="résoudre x+5=10")
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class MarkerKind(str, Enum):
    """Closed set of enumeration families, in recognition priority order."""

    LETTERED = "lettered"
    NUMBERED = "numbered"
    ROMAN = "roman"
    KEYWORD = "keyword"

    @property
    def line_pattern(self) -> re.Pattern:
        """Pattern matching a line that starts with this marker."""
        return _MARKER_SPECS[self].line_pattern

    @property
    def occurrence_pattern(self) -> re.Pattern:
        """Pattern matching any occurrence of this marker inside a line."""
        return _MARKER_SPECS[self].occurrence_pattern

    def render(self, token: str, body: str) -> str:
        """Build the question text for an exercise introduced by this marker."""
        template = _MARKER_SPECS[self].template
        return template.format(token=token, body=body.strip()).strip()


@dataclass(frozen=True)
class _MarkerSpec:
    line_pattern: re.Pattern
    occurrence_pattern: re.Pattern
    template: str


@dataclass(frozen=True)
class MarkerMatch:
    """A marker recognized at the start of a line."""

    kind: MarkerKind
    token: str
    body: str


_KEYWORDS = r"exercices?|exos?|probl[eè]mes?"
_INSTRUCTION_KEYWORDS = r"calculez?"

_MARKER_SPECS: dict[MarkerKind, _MarkerSpec] = {
    MarkerKind.LETTERED: _MarkerSpec(
        # "a." not followed by another letter ("e.g." is not a marker); "a)" always
        line_pattern=re.compile(r"^([a-h])\s*(?:\.(?![^\W\d_])|\))\s*(.*)$"),
        occurrence_pattern=re.compile(r"(?<!\S)[a-h](?:\.(?![^\W\d_])|\))"),
        template="{token}. {body}",
    ),
    MarkerKind.NUMBERED: _MarkerSpec(
        # "1." / "1)" but never a decimal such as "3.5"
        line_pattern=re.compile(r"^(\d{1,3})\s*[.)](?!\d)\s*(.*)$"),
        occurrence_pattern=re.compile(r"(?<!\S)\d{1,3}[.)](?=\s|$)"),
        template="{token}. {body}",
    ),
    MarkerKind.ROMAN: _MarkerSpec(
        line_pattern=re.compile(r"^([IVX]{1,6})\s*\.(?!\w)\s*(.*)$"),
        occurrence_pattern=re.compile(r"(?<!\S)[IVX]{1,6}\.(?=\s|$)"),
        template="{token}. {body}",
    ),
    MarkerKind.KEYWORD: _MarkerSpec(
        line_pattern=re.compile(
            rf"^((?:{_KEYWORDS})\b(?:\s*n?°?\s*\d{{1,3}}\b|\s+[IVX]{{1,6}}\b)?|(?:{_INSTRUCTION_KEYWORDS})\b)"
            r"\s*[.:)\-]?\s*(.*)$",
            re.IGNORECASE,
        ),
        # Instruction verbs are not split out of a line ("puis calcule 3+4")
        occurrence_pattern=re.compile(rf"(?<!\S)(?:{_KEYWORDS})\b", re.IGNORECASE),
        template="{token}. {body}",
    ),
}


def match_marker(line: str) -> Optional[MarkerMatch]:
    """
    Recognize an enumeration marker at the start of a line.

    Families are tried in priority order: lettered, numbered, roman, keyword.

    Args:
        line: A single physical line (leading whitespace is ignored).

    Returns:
        MarkerMatch with the token and the trailing same-line content,
        or None if the line does not start with a marker.
    """
    if not line:
        return None
    stripped = line.strip()
    for kind in MarkerKind:
        match = kind.line_pattern.match(stripped)
        if match:
            token = " ".join(match.group(1).split())
            return MarkerMatch(kind=kind, token=token, body=match.group(2).strip())
    return None
