"""Tests for exercise_extraction.markers."""

import pytest

from exercise_extraction.markers import MarkerKind, match_marker


class TestMatchMarker:
    def test_lettered_paren(self):
        match = match_marker("a) 2/4")
        assert match.kind == MarkerKind.LETTERED
        assert match.token == "a"
        assert match.body == "2/4"

    def test_lettered_dot(self):
        match = match_marker("b. résoudre x+5=10")
        assert match.kind == MarkerKind.LETTERED
        assert match.token == "b"
        assert match.body == "résoudre x+5=10"

    def test_numbered(self):
        match = match_marker("3. Calcule 4+5")
        assert match.kind == MarkerKind.NUMBERED
        assert match.token == "3"
        assert match.body == "Calcule 4+5"

    def test_roman(self):
        match = match_marker("IV. Fractions")
        assert match.kind == MarkerKind.ROMAN
        assert match.token == "IV"

    def test_keyword_with_number(self):
        match = match_marker("Exercice 2 : Simplifie")
        assert match.kind == MarkerKind.KEYWORD
        assert match.token == "Exercice 2"
        assert match.body == "Simplifie"

    def test_keyword_with_numero(self):
        match = match_marker("Exercice n°3. Calcule")
        assert match.token == "Exercice n°3"
        assert match.body == "Calcule"

    def test_instruction_keyword(self):
        match = match_marker("Calcule 3+4")
        assert match.kind == MarkerKind.KEYWORD
        assert match.token == "Calcule"
        assert match.body == "3+4"

    def test_leading_whitespace_ignored(self):
        assert match_marker("   a) 2/4").token == "a"

    def test_lettered_paren_without_space(self):
        match = match_marker("b)résoudre x+5=10")
        assert match.kind == MarkerKind.LETTERED
        assert match.token == "b"
        assert match.body == "résoudre x+5=10"

    def test_lettered_dot_needs_separation(self):
        assert match_marker("a.Simplifiez") is None

    @pytest.mark.parametrize(
        "line",
        ["", "Bonjour", "3.5 est un nombre", "e.g. something", "Exotique", "c'est facile"],
    )
    def test_no_marker(self, line):
        assert match_marker(line) is None


class TestRender:
    def test_lettered(self):
        assert MarkerKind.LETTERED.render("a", " 2/4 ") == "a. 2/4"

    def test_numbered(self):
        assert MarkerKind.NUMBERED.render("2", "Calcule 5+6") == "2. Calcule 5+6"

    def test_keyword(self):
        assert MarkerKind.KEYWORD.render("Exercice 2", "Simplifiez 30/63") == "Exercice 2. Simplifiez 30/63"

    def test_instruction_keyword(self):
        assert MarkerKind.KEYWORD.render("Calcule", "3+4") == "Calcule. 3+4"

    def test_empty_body(self):
        assert MarkerKind.ROMAN.render("II", "") == "II."


class TestPatterns:
    def test_every_kind_has_patterns(self):
        for kind in MarkerKind:
            assert kind.line_pattern is not None
            assert kind.occurrence_pattern is not None

    def test_occurrences_on_one_line(self):
        line = "a) 2/4 b) 3/6 c) 5/10"
        assert len(MarkerKind.LETTERED.occurrence_pattern.findall(line)) == 3

    def test_occurrences_without_space_after_paren(self):
        line = "a)Simplifiez 30/63 b)résoudre x+5=10"
        assert len(MarkerKind.LETTERED.occurrence_pattern.findall(line)) == 2
