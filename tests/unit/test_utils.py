"""
Unit tests for numeric normalization, period dates and text helpers.

Includes property-based testing with hypothesis for quantity normalization.
"""

from datetime import date

import pytest
from hypothesis import given
from hypothesis import strategies as st

from src.utils.dates import (
    default_window,
    extract_period,
    parse_day_first,
    period_label,
    to_iso_date,
)
from src.utils.numeric import normalize_quantity, parse_optional_number
from src.utils.text import fold_text, split_csv_line


@pytest.mark.unit
class TestNormalizeQuantity:
    """Tests for normalize_quantity"""

    def test_comma_thousands_separator(self):
        """Test "2,561" is read as 2561, never as a decimal"""
        assert normalize_quantity("2,561") == 2561

    def test_space_thousands_separator(self):
        """Test "2 561" is read as 2561"""
        assert normalize_quantity("2 561") == 2561

    def test_non_breaking_space_separators(self):
        """Test no-break and narrow no-break spaces are stripped"""
        assert normalize_quantity("2\u00a0561") == 2561
        assert normalize_quantity("1\u202f234\u202f567") == 1234567

    def test_empty_string_is_zero(self):
        assert normalize_quantity("") == 0

    def test_dash_is_zero(self):
        """Test the em-dash placeholder used for "nothing sold" is zero"""
        assert normalize_quantity("—") == 0

    def test_none_is_zero(self):
        assert normalize_quantity(None) == 0

    @pytest.mark.parametrize("value", ["abc", "12abc", "--", "nan", "inf", "1.2.3"])
    def test_malformed_is_zero(self, value):
        """Test malformed or non-finite values normalize to zero"""
        assert normalize_quantity(value) == 0

    def test_surrounding_whitespace(self):
        assert normalize_quantity("  42 ") == 42

    def test_decimal_point_rounds(self):
        """Test a dot is a decimal point and the value is rounded"""
        assert normalize_quantity("12.7") == 13

    def test_halves_round_up(self):
        """Test .5 rounds up so a half unit is not dropped as zero"""
        assert normalize_quantity("2.5") == 3
        assert normalize_quantity("0.5") == 1
        assert normalize_quantity("1.49") == 1

    def test_plain_integer(self):
        assert normalize_quantity("300") == 300

    @given(st.integers(min_value=0, max_value=10**9))
    def test_property_grouped_integers_round_trip(self, value):
        """Property test: comma- and space-grouped integers normalize to themselves"""
        assert normalize_quantity(f"{value:,}") == value
        assert normalize_quantity(f"{value:,}".replace(",", " ")) == value

    @given(st.text(alphabet=st.characters(blacklist_categories=("Nd",)), max_size=20))
    def test_property_digitless_text_is_zero(self, value):
        """Property test: text without any digit always normalizes to zero"""
        assert normalize_quantity(value) == 0


@pytest.mark.unit
class TestParseOptionalNumber:
    """Tests for parse_optional_number"""

    def test_blank_is_none(self):
        assert parse_optional_number("") is None
        assert parse_optional_number(None) is None

    def test_malformed_is_none(self):
        assert parse_optional_number("n/a") is None

    def test_integral_value_is_int(self):
        value = parse_optional_number("1,500")
        assert value == 1500
        assert isinstance(value, int)

    def test_fractional_value_is_float(self):
        assert parse_optional_number("12.5") == 12.5

    def test_zero_is_kept(self):
        """Test an explicit zero is distinguished from an absent value"""
        assert parse_optional_number("0") == 0


@pytest.mark.unit
class TestPeriodDates:
    """Tests for period statement helpers"""

    def test_parse_day_first(self):
        assert parse_day_first("01/08/2025") == date(2025, 8, 1)

    def test_parse_day_first_rejects_invalid_date(self):
        assert parse_day_first("31/02/2025") is None
        assert parse_day_first("2025-08-01") is None

    def test_to_iso_date(self):
        assert to_iso_date("10/12/2024") == "2024-12-10"
        assert to_iso_date("garbage") is None

    def test_extract_french_period(self):
        lines = ["GRANDE PHARMACIE DE TANDA", "Période du 01/08/2025 au 10/12/2025"]
        assert extract_period(lines) == (date(2025, 8, 1), date(2025, 12, 10))

    def test_extract_english_period(self):
        lines = ["Period from 01/08/2023 to 10/12/2023"]
        assert extract_period(lines) == (date(2023, 8, 1), date(2023, 12, 10))

    def test_extract_period_is_case_insensitive(self):
        lines = ["PERIODE DU 01/08/2022 AU 10/12/2022"]
        assert extract_period(lines) == (date(2022, 8, 1), date(2022, 12, 10))

    def test_extract_period_missing(self):
        assert extract_period(["GRANDE PHARMACIE DE TANDA", "Rang,Code"]) is None

    def test_extract_period_skips_invalid_dates(self):
        lines = ["Période du 45/08/2025 au 10/12/2025", "Période du 01/08/2024 au 10/12/2024"]
        assert extract_period(lines) == (date(2024, 8, 1), date(2024, 12, 10))

    def test_default_window(self):
        assert default_window(2023) == (date(2023, 8, 1), date(2023, 12, 10))

    def test_period_label_same_year(self):
        assert period_label(date(2025, 8, 1), date(2025, 12, 10)) == "Aug–Dec 2025"

    def test_period_label_across_years(self):
        assert period_label(date(2024, 11, 1), date(2025, 2, 28)) == "Nov 2024–Feb 2025"


@pytest.mark.unit
class TestTextHelpers:
    """Tests for fold_text and split_csv_line"""

    def test_fold_text_strips_accents(self):
        assert fold_text("Qté vendue") == "qte vendue"
        assert fold_text("Désignation") == "designation"

    def test_fold_text_drops_bom_and_collapses_spaces(self):
        assert fold_text("\ufeffCode   Géo :") == "code geo :"

    def test_fold_text_empty(self):
        assert fold_text(None) == ""
        assert fold_text("") == ""

    def test_split_csv_line_respects_quotes(self):
        assert split_csv_line('1,ART01,ARTEFAN 20/120,"2,561"') == ["1", "ART01", "ARTEFAN 20/120", "2,561"]

    def test_split_csv_line_trims_fields(self):
        assert split_csv_line(" 1 , A ,  B ") == ["1", "A", "B"]

    def test_split_csv_line_empty(self):
        assert split_csv_line("") == []
