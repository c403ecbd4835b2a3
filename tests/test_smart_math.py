"""Tests for exercise_extraction.smart_math."""

import pytest

from exercise_extraction.models import FractionForm, StrategyTag
from exercise_extraction.smart_math import (
    count_fraction_duplicates,
    extract_smart_math,
    find_answer,
    find_fraction_tokens,
    letter_for,
    reconcile_fraction_duplicates,
)


class TestLatexPass:
    def test_proximity_answer_binding(self):
        result = extract_smart_math("\\frac{30}{63} = \\frac{10}{21}")
        assert len(result) == 1
        assert "30/63" in result[0].question
        assert result[0].answer == "10/21"
        assert result[0].provenance == StrategyTag.SMART_MATH_LATEX

    def test_no_answer_over_fitting(self):
        result = extract_smart_math("\\frac{30}{63}")
        assert len(result) == 1
        assert result[0].answer == ""
        assert result[0].needs_answer

    def test_question_format(self):
        result = extract_smart_math("\\frac{30}{63}")
        assert result[0].identifier == "a"
        assert result[0].question == "a. Simplifiez la fraction 30/63"
        assert result[0].fraction == "30/63"

    def test_sequential_letters(self):
        result = extract_smart_math("\\frac{1}{2} et \\frac{3}{4} et \\frac{5}{6}")
        assert [c.identifier for c in result] == ["a", "b", "c"]

    def test_fill_after_equals_without_answer(self, latex_worksheet):
        result = extract_smart_math(latex_worksheet)
        assert [(c.fraction, c.answer) for c in result] == [("30/63", "10/21"), ("12/18", "")]


class TestOcrPass:
    def test_bare_equals(self):
        result = extract_smart_math("30/63 = 10/21")
        assert len(result) == 1
        assert result[0].answer == "10/21"
        assert result[0].provenance == StrategyTag.SMART_MATH_OCR

    def test_fill_characters_after_equals(self):
        assert extract_smart_math("30/63 = ..... 10/21")[0].answer == "10/21"

    def test_parenthesized_answer(self):
        result = extract_smart_math("30/63 (10/21)")
        assert len(result) == 1
        assert result[0].answer == "10/21"

    def test_bracketed_answer(self):
        assert extract_smart_math("30/63 réponse [10/21]")[0].answer == "10/21"

    @pytest.mark.parametrize("arrow", ["->", "=>", "→", ":"])
    def test_arrow_answer(self, arrow):
        assert extract_smart_math(f"30/63 {arrow} 10/21")[0].answer == "10/21"

    def test_parenthesized_fraction_token(self):
        result = extract_smart_math("(30)/(63)")
        assert result[0].fraction == "30/63"

    def test_date_is_not_a_fraction(self):
        assert extract_smart_math("Le 12/05/2024") == []

    def test_two_fractions_without_answers(self):
        result = extract_smart_math("Simplifie 4/8 et 6/9")
        assert [(c.identifier, c.fraction, c.answer) for c in result] == [
            ("a", "4/8", ""),
            ("b", "6/9", ""),
        ]


class TestFindAnswer:
    def test_anchored_at_token(self):
        text = "Simplifie 30/63 = 10/21"
        token = find_fraction_tokens(text, FractionForm.OCR)[0]
        assert find_answer(text, token) == "10/21"

    def test_whitespace_removed(self):
        text = "30/63 = ( 10 ) / ( 21 )"
        token = find_fraction_tokens(text, FractionForm.OCR)[0]
        assert find_answer(text, token) == "10/21"

    def test_no_answer(self):
        text = "30/63 et plus loin 10/21"
        token = find_fraction_tokens(text, FractionForm.OCR)[0]
        assert find_answer(text, token) == ""


class TestErrorText:
    def test_failure_notice_skipped(self):
        assert extract_smart_math("OCR extraction failed \\frac{3}{4}") == []

    def test_failure_notice_kept_when_disabled(self):
        result = extract_smart_math("OCR extraction failed \\frac{3}{4}", skip_error_text=False)
        assert len(result) == 1


class TestDuplicateReconciliation:
    """Both passes can report one fraction; this is flagged, never silently dropped."""

    def test_duplicates_kept_by_extractor(self):
        result = extract_smart_math("\\frac{30}{63} = \\frac{10}{21} et 30/63")
        assert [c.provenance for c in result] == [
            StrategyTag.SMART_MATH_LATEX,
            StrategyTag.SMART_MATH_OCR,
        ]
        assert count_fraction_duplicates(result) == 1

    def test_latex_wins(self):
        candidates = extract_smart_math("\\frac{30}{63} = \\frac{10}{21} et 30/63")
        result = reconcile_fraction_duplicates(candidates)
        assert len(result) == 1
        assert result[0].provenance == StrategyTag.SMART_MATH_LATEX
        assert result[0].answer == "10/21"

    def test_latex_inherits_ocr_answer(self):
        candidates = extract_smart_math("\\frac{30}{63} puis 30/63 = 10/21")
        result = reconcile_fraction_duplicates(candidates)
        assert len(result) == 1
        assert result[0].provenance == StrategyTag.SMART_MATH_LATEX
        assert result[0].answer == "10/21"

    def test_survivors_relettered(self):
        candidates = extract_smart_math("\\frac{1}{2} \\frac{3}{4} 5/6 3/4")
        result = reconcile_fraction_duplicates(candidates)
        assert [(c.identifier, c.fraction) for c in result] == [
            ("a", "1/2"),
            ("b", "3/4"),
            ("c", "5/6"),
        ]
        assert result[2].question == "c. Simplifiez la fraction 5/6"

    def test_no_duplicates_unchanged(self):
        candidates = extract_smart_math("\\frac{1}{2} 5/6")
        assert count_fraction_duplicates(candidates) == 0
        assert [c.fraction for c in reconcile_fraction_duplicates(candidates)] == ["1/2", "5/6"]


class TestLetters:
    @pytest.mark.parametrize(
        "index,letter",
        [(0, "a"), (1, "b"), (25, "z"), (26, "aa"), (27, "ab"), (51, "az"), (52, "ba")],
    )
    def test_letter_for(self, index, letter):
        assert letter_for(index) == letter


class TestEmpty:
    def test_empty(self):
        assert extract_smart_math("") == []

    def test_no_fractions(self):
        assert extract_smart_math("Calcule 3+4") == []
