"""
Unit tests for the therapeutic category classifier.
"""

import pytest

from src.core.taxonomy import CATEGORIES, classify


@pytest.mark.unit
class TestClassify:
    """Tests for classify()"""

    @pytest.mark.parametrize("code", ["ARTEFAN", "PLUFENTRINE", "artefan", " PLUFENTRINE "])
    def test_antimalarial_proxy_codes(self, code):
        """Test the point-of-sale antimalarial codes match regardless of designation"""
        assert classify(code, "CPR B/24") == "antimalarial"

    @pytest.mark.parametrize("designation", [
        "COARTEM 20/120 CPR B/24",
        "ARTEMETHER/LUMEFANTRINE 80/480",
        "Quinine Sulfate 300mg",
        "ARTESUNATE 60MG INJ",
    ])
    def test_antimalarial_keywords(self, designation):
        assert classify("X1", designation) == "antimalarial"

    @pytest.mark.parametrize("designation", [
        "AMOXICILLINE 500MG GEL B/12",
        "Augmentin 1g",
        "CIPROFLOXACINE 500MG",
        "METRONIDAZOLE 250MG",
    ])
    def test_antibiotic_keywords(self, designation):
        assert classify("X1", designation) == "antibiotic"

    @pytest.mark.parametrize("designation", [
        "PARACETAMOL 500MG CPR",
        "Paracétamol 1g",
        "DOLIPRANE 1000",
        "IBUPROFÈNE 400MG",
    ])
    def test_analgesic_keywords(self, designation):
        """Test accents in designations do not prevent a match"""
        assert classify("X1", designation) == "analgesic"

    def test_unmatched_is_other(self):
        assert classify("SER05", "SERINGUE 5ML") == "other"

    def test_empty_inputs_are_other(self):
        assert classify(None, None) == "other"
        assert classify("", "") == "other"

    def test_code_takes_precedence_over_designation(self):
        assert classify("ARTEFAN", "PARACETAMOL 500MG") == "antimalarial"

    def test_categories_are_fixed(self):
        assert CATEGORIES == ("antimalarial", "antibiotic", "analgesic", "other")
