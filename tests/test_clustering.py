"""Tests for exercise_extraction.clustering."""

from exercise_extraction.clustering import extract_clusters
from exercise_extraction.markers import MarkerKind
from exercise_extraction.models import ExtractionConfig, StrategyTag
from exercise_extraction.normalizer import normalize


class TestMathClusters:
    def test_math_sentences_numbered(self):
        text = "Combien font 3 + 4 ? Et combien font 12 - 5 ? Bonne chance"
        result = extract_clusters(text)
        assert [c.question for c in result] == [
            "1. Combien font 3 + 4 ?",
            "2. Et combien font 12 - 5 ?",
        ]
        assert all(c.provenance == StrategyTag.CLUSTERING for c in result)
        assert result[1].identifier == "2"
        assert result[1].marker_kind == MarkerKind.NUMBERED

    def test_short_spans_ignored(self):
        # "3+4" and "5+6" are not longer than 10 characters
        assert extract_clusters("3+4. 5+6.") == []

    def test_default_clusters_keep_sentence_end(self):
        text = "Calcule la somme de 3 + 4 puis ajoute encore 5 à ce résultat. Calcule 12 - 5 maintenant."
        result = extract_clusters(text)
        assert result[0].question == "1. Calcule la somme de 3 + 4 puis ajoute encore 5 à ce résultat."

    def test_long_spans_skipped(self):
        # Only one span fits, so the separator split takes over
        config = ExtractionConfig(max_cluster_chars=30)
        text = "Calcule la somme de 3 + 4 puis ajoute encore 5 à ce résultat. Calcule 12 - 5 maintenant."
        result = extract_clusters(text, config)
        assert [c.question for c in result] == [
            "1. Calcule la somme de 3 + 4 puis ajoute encore 5 à ce résultat",
            "2. Calcule 12 - 5 maintenant.",
        ]


class TestSeparatorSplit:
    def test_blank_lines_split_paragraphs(self):
        raw = "Lis le texte suivant\navec attention\n\n  \nRéponds aux questions\r\ndu texte"
        result = extract_clusters(normalize(raw), raw=raw)
        assert [c.question for c in result] == [
            "1. Lis le texte suivant avec attention",
            "2. Réponds aux questions du texte",
        ]

    def test_normalized_text_has_no_paragraphs(self):
        raw = "Lis le texte suivant\n\nRéponds aux questions"
        assert extract_clusters(normalize(raw)) == []

    def test_sentence_separator(self):
        text = "Lis attentivement le texte. Réponds aux questions suivantes."
        result = extract_clusters(text)
        assert [c.question for c in result] == [
            "1. Lis attentivement le texte",
            "2. Réponds aux questions suivantes.",
        ]

    def test_single_part(self):
        assert extract_clusters("Calcule 3 + 4 maintenant") == []


class TestEmpty:
    def test_empty(self):
        assert extract_clusters("") == []

    def test_whitespace(self):
        assert extract_clusters("   ") == []
