"""
Unit tests for the export dialect parsers.
"""

from datetime import date

import pytest
from export_builders import (
    PROLIFE_HEADER,
    catalog_rows,
    full_catalog_text,
    rank_limited_text,
    top_rows,
)

from src.core.models import SourceMapping
from src.core.parsers import (
    PARSER_REGISTRY,
    FullCatalogParser,
    RankLimitedParser,
    get_parser,
    parse,
)
from src.observability.metrics import get_sample_value


@pytest.mark.unit
class TestRankLimitedParser:
    """Tests for RankLimitedParser"""

    def test_parses_ranked_rows(self):
        """Test a clean top-N export becomes one record"""
        text = rank_limited_text([
            (1, "ARTEFAN", "ARTEFAN 20/120 CPR B/24", "2,561"),
            (2, "DOLI500", "DOLIPRANE 500MG CPR", "1 200"),
            (3, "AMOX500", "AMOXICILLINE 500MG GEL", "300"),
        ])

        record = RankLimitedParser().parse(text)

        assert record is not None
        assert record.pharmacy_id == "tanda"
        assert record.year == 2024
        assert record.period_start == date(2024, 8, 1)
        assert record.period_end == date(2024, 12, 10)
        assert record.period_label == "Aug–Dec 2024"
        assert [p.code for p in record.products] == ["ARTEFAN", "DOLI500", "AMOX500"]
        assert [p.quantity_sold for p in record.products] == [2561, 1200, 300]
        assert record.total_quantity == 4061

    def test_designation_is_kept(self):
        text = rank_limited_text([(1, "ARTEFAN", "ARTEFAN 20/120 CPR B/24", "10")])
        record = RankLimitedParser().parse(text)
        assert record.products[0].designation == "ARTEFAN 20/120 CPR B/24"

    def test_dash_quantity_row_is_dropped(self):
        """Test a row whose quantity is "—" is skipped and the others are kept"""
        text = rank_limited_text([
            (1, "A001", "PRODUIT A", "500"),
            (2, "A002", "PRODUIT B", "—"),
            (3, "A003", "PRODUIT C", "250"),
        ])

        record = RankLimitedParser().parse(text)

        assert [p.code for p in record.products] == ["A001", "A003"]
        assert record.total_quantity == 750

    def test_half_unit_quantity_is_kept(self):
        text = rank_limited_text([(1, "A001", "PRODUIT A", "0.5")])
        record = RankLimitedParser().parse(text)
        assert record.products[0].quantity_sold == 1

    def test_header_with_qualified_code_column(self):
        """Test a "Code article" header is recognized as the code column"""
        text = rank_limited_text([(1, "A001", "PRODUIT A", "40")]).replace(
            "Rang,Code,", "Rang,Code article,"
        )

        record = RankLimitedParser().parse(text)

        assert record is not None
        assert record.products[0].code == "A001"
        assert record.products[0].designation == "PRODUIT A"

    def test_rows_beyond_top_n_are_dropped(self):
        """Test only ranks 1..20 are kept"""
        text = rank_limited_text(top_rows(25, 10))

        record = RankLimitedParser().parse(text)

        assert len(record.products) == 20
        assert record.total_quantity == 200

    def test_custom_top_n(self):
        text = rank_limited_text(top_rows(8, 10))
        record = RankLimitedParser(top_n=5).parse(text)
        assert len(record.products) == 5

    def test_invalid_top_n(self):
        with pytest.raises(ValueError):
            RankLimitedParser(top_n=0)

    def test_non_integer_rank_is_skipped(self):
        text = rank_limited_text([
            ("x", "A001", "PRODUIT A", "500"),
            (2, "A002", "PRODUIT B", "100"),
        ])
        record = RankLimitedParser().parse(text)
        assert [p.code for p in record.products] == ["A002"]

    def test_stops_at_liste_des_section(self):
        """Test rows after the "LISTE DES ..." terminator are ignored"""
        text = rank_limited_text([(1, "A001", "PRODUIT A", "500")], footer=True)

        record = RankLimitedParser().parse(text)

        assert [p.code for p in record.products] == ["A001"]

    def test_stops_at_blank_line(self):
        text = rank_limited_text([(1, "A001", "PRODUIT A", "500")], footer=False)
        text += "\n2,A002,PRODUIT B,\"400\"\n"

        record = RankLimitedParser().parse(text)

        assert [p.code for p in record.products] == ["A001"]

    def test_unknown_pharmacy_is_discarded(self):
        """Test an export naming no known pharmacy yields None"""
        text = rank_limited_text(top_rows(3, 10), pharmacy="PHARMACIE INCONNUE")
        assert RankLimitedParser().parse(text) is None

    def test_no_valid_rows_is_discarded(self):
        text = rank_limited_text([(1, "A001", "PRODUIT A", "—"), (2, "A002", "PRODUIT B", "0")])
        assert RankLimitedParser().parse(text) is None

    def test_missing_header_is_discarded(self):
        text = "GRANDE PHARMACIE DE TANDA\nPériode du 01/08/2024 au 10/12/2024\n1,A,B,\"3\"\n"
        assert RankLimitedParser().parse(text) is None

    @pytest.mark.parametrize("raw", ["", "\n\n", "garbage,\"unterminated", "\x00\x01"])
    def test_garbage_input_returns_none(self, raw):
        """Test parse() is total: garbage never raises"""
        assert RankLimitedParser().parse(raw) is None

    def test_none_input_returns_none(self):
        assert RankLimitedParser().parse(None) is None

    def test_detected_identity_wins_over_hint(self, tanda_2024_hint):
        """Test a Prolife export found through a Tanda mapping stays Prolife"""
        text = rank_limited_text(top_rows(3, 10), pharmacy=PROLIFE_HEADER)

        before = get_sample_value("vrac_mapping_mismatches_total", {"field": "pharmacy_id"})
        record = RankLimitedParser().parse(text, tanda_2024_hint)
        after = get_sample_value("vrac_mapping_mismatches_total", {"field": "pharmacy_id"})

        assert record.pharmacy_id == "prolife"
        assert after == before + 1

    def test_detected_year_wins_over_hint(self, tanda_2024_hint):
        """Test the period statement decides the year; the hint label is not reused"""
        text = rank_limited_text(top_rows(3, 10), year=2023)

        record = RankLimitedParser().parse(text, tanda_2024_hint)

        assert record.year == 2023
        assert record.period_label == "Aug–Dec 2023"

    def test_hint_label_used_when_years_agree(self):
        hint = SourceMapping(
            file="ETAT_2080QTE6.csv",
            dialect="rank_limited",
            pharmacy_id="tanda",
            period_label="Saison 2024",
            year=2024,
        )
        record = RankLimitedParser().parse(rank_limited_text(top_rows(2, 10)), hint)
        assert record.period_label == "Saison 2024"

    def test_missing_period_falls_back_to_hint_year(self, tanda_2024_hint):
        """Test an export without a period statement uses the mapped year's default window"""
        text = rank_limited_text(top_rows(3, 10), year=None)

        record = RankLimitedParser().parse(text, tanda_2024_hint)

        assert record.year == 2024
        assert record.period_start == date(2024, 8, 1)
        assert record.period_end == date(2024, 12, 10)
        assert record.period_label == "Aug–Dec 2024"

    def test_missing_period_without_hint_is_discarded(self):
        text = rank_limited_text(top_rows(3, 10), year=None)
        assert RankLimitedParser().parse(text) is None

    def test_source_path_recorded(self):
        record = RankLimitedParser().parse(
            rank_limited_text(top_rows(1, 10)), source_path="VRAC/TANDA/2080/ETAT_2080QTE6.csv"
        )
        assert record.source.dialect == "rank_limited"
        assert record.source.path == "VRAC/TANDA/2080/ETAT_2080QTE6.csv"

    def test_skipped_rows_are_counted(self):
        text = rank_limited_text([(1, "A001", "PRODUIT A", "5"), (2, "A002", "PRODUIT B", "—")])

        labels = {"dialect": "rank_limited", "reason": "zero_quantity"}
        before = get_sample_value("vrac_rows_skipped_total", labels)
        RankLimitedParser().parse(text)
        after = get_sample_value("vrac_rows_skipped_total", labels)

        assert after == before + 1

    def test_quantity_column_located_by_header(self):
        """Test extra trailing columns do not shift the quantity column"""
        text = (
            "GRANDE PHARMACIE DE TANDA\n"
            "Période du 01/08/2024 au 10/12/2024\n"
            "Rang,Code,Désignation,Qté vendue,CA\n"
            "1,A001,PRODUIT A,\"1,000\",\"250,000\"\n"
        )
        record = RankLimitedParser().parse(text)
        assert record.products[0].quantity_sold == 1000


@pytest.mark.unit
class TestFullCatalogParser:
    """Tests for FullCatalogParser"""

    def test_parses_all_rows(self):
        """Test every catalog row is kept, with stock and price"""
        text = full_catalog_text([
            ("ARTEFAN", "ARTEFAN 20/120 CPR B/24", "2,561", "140", "2 150"),
            ("SER05", "SERINGUE 5ML", "1 200", "", ""),
        ])

        record = FullCatalogParser().parse(text)

        assert record.pharmacy_id == "tanda"
        assert record.year == 2024
        assert [p.quantity_sold for p in record.products] == [2561, 1200]
        assert record.products[0].stock == 140
        assert record.products[0].price == 2150
        assert record.products[1].stock is None
        assert record.products[1].price is None
        assert record.total_quantity == 3761

    def test_no_rank_limit(self):
        text = full_catalog_text(catalog_rows(85, 10))
        record = FullCatalogParser().parse(text)
        assert len(record.products) == 85

    def test_stops_at_trailer(self):
        """Test "Code Géo" and "Nombre d'articles" lines end the table"""
        text = full_catalog_text(catalog_rows(2, 10))
        text += "C999,ARTICLE APRES TRAILER,\"10\",\"1\",\"1\"\n"

        record = FullCatalogParser().parse(text)

        assert len(record.products) == 2

    def test_zero_and_dash_rows_dropped(self):
        text = full_catalog_text([
            ("C001", "ARTICLE 1", "—", "3", "100"),
            ("C002", "ARTICLE 2", "0", "3", "100"),
            ("C003", "ARTICLE 3", "7", "3", "100"),
        ])
        record = FullCatalogParser().parse(text)
        assert [p.code for p in record.products] == ["C003"]

    def test_header_without_stock_is_not_matched(self):
        """Test the catalog header needs code, designation, quantity and stock"""
        text = (
            "GRANDE PHARMACIE DE TANDA\n"
            "Période du 01/08/2024 au 10/12/2024\n"
            "Code,Désignation,Qté vendue\n"
            "C001,ARTICLE 1,\"5\"\n"
        )
        assert FullCatalogParser().parse(text) is None

    def test_unknown_pharmacy_is_discarded(self):
        text = full_catalog_text(catalog_rows(3, 10), pharmacy="DEPOT CENTRAL")
        assert FullCatalogParser().parse(text) is None

    def test_bom_prefixed_header(self):
        """Test a byte-order mark before the first header field is tolerated"""
        text = (
            "\ufeffGRANDE PHARMACIE DE TANDA\n"
            "Période du 01/08/2025 au 10/12/2025\n"
            "\ufeffCode,Désignation,Qté vendue,Stock\n"
            "C001,ARTICLE 1,\"5\",\"1\"\n"
        )
        record = FullCatalogParser().parse(text)
        assert record.year == 2025
        assert record.products[0].quantity_sold == 5


@pytest.mark.unit
class TestParserDispatch:
    """Tests for the dialect registry"""

    def test_registry_has_both_dialects(self):
        assert set(PARSER_REGISTRY) == {"rank_limited", "full_catalog"}

    def test_get_parser(self):
        assert isinstance(get_parser("rank_limited"), RankLimitedParser)
        assert isinstance(get_parser("full_catalog"), FullCatalogParser)

    def test_unknown_dialect(self):
        with pytest.raises(ValueError, match="Unknown dialect"):
            get_parser("xlsx")

    def test_parse_dispatches_by_dialect(self):
        record = parse("full_catalog", full_catalog_text(catalog_rows(4, 10)))
        assert len(record.products) == 4

    def test_dialects_do_not_read_each_other(self):
        """Test a rank-limited parser finds no table in a catalog export"""
        assert parse("rank_limited", full_catalog_text(catalog_rows(4, 10))) is None
