"""Tests for exercise_extraction.validation."""

import pytest

from exercise_extraction.validation import analyze_content, is_educational, is_error_text


class TestIsEducational:
    @pytest.mark.parametrize("text", ["....", "  ", "", None, "ab", "___", "?!", "...?", "-- --"])
    def test_rejects_noise(self, text):
        assert is_educational(text) is False

    @pytest.mark.parametrize(
        "text",
        [
            "calcule 3/4",
            "Calcule 3/4",
            "1+1",
            "x=y",
            "abc",
            "12/18",
            "resoudre",
            "Écris le nombre",
        ],
    )
    def test_accepts_content(self, text):
        assert is_educational(text) is True

    def test_surrounding_whitespace_ignored(self):
        assert is_educational("   ab   ") is False
        assert is_educational("   abc   ") is True


class TestAnalyzeContent:
    def test_fraction_signal(self):
        signals = analyze_content("Simplifie 12/18")
        assert signals.has_fraction
        assert signals.has_digit
        assert signals.has_instruction

    def test_operation_signal(self):
        signals = analyze_content("3 × 4")
        assert signals.has_operation
        assert not signals.has_fraction

    def test_fill_only(self):
        signals = analyze_content("......")
        assert signals.only_fill
        assert not signals.is_educational


class TestIsErrorText:
    def test_failure_notice(self):
        assert is_error_text("OCR extraction failed. Manual review required.") is True

    def test_notice_with_math_is_not_error(self):
        assert is_error_text("OCR extraction failed 3/4") is False

    def test_notice_mentioning_exercise_is_not_error(self):
        assert is_error_text("Manual review required for exercice 2") is False

    def test_regular_worksheet(self):
        assert is_error_text("a) 2/4 b) 3/6") is False

    def test_empty(self):
        assert is_error_text("") is False
