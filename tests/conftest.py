"""
Pytest fixtures for exercise extraction tests.
"""

import pytest

from exercise_extraction import ExtractionConfig, ExtractionServiceConfig


LATEX_WORKSHEET = (
    "Exercice 1 : Simplifie les fractions\n"
    "a) \\frac{30}{63} = \\frac{10}{21}\n"
    "b) \\frac{12}{18} = ..........\n"
)

OCR_WORKSHEET = (
    "Nom : ________  Prénom : ________\n"
    "a. Simplifiez la fraction 30/63 b. Simplifiez la fraction 12/18\n"
)


@pytest.fixture
def latex_worksheet():
    """Vision transcription with LaTeX fractions and one written answer."""
    return LATEX_WORKSHEET


@pytest.fixture
def ocr_worksheet():
    """Plain OCR transcription with two exercises flattened onto one line."""
    return OCR_WORKSHEET


@pytest.fixture
def extraction_config():
    return ExtractionConfig()


@pytest.fixture
def service_config(tmp_path):
    """Service config writing into a temporary directory."""
    return ExtractionServiceConfig(
        data_dir=str(tmp_path / "exercises"),
        max_input_chars=500,
    )
