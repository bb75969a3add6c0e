"""Unit tests for country canonicalization and geographic remaps."""
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from src.etl.exceptions import RuleConfigurationError
from src.etl.silver.countries import CountryCanonicalizer, fold_name, normalize_country, repair_mojibake
from src.etl.silver.geo import GeoRemap
from src.etl.silver.rules import sdg_countries, tourism_countries


class TestTourismCountries:
    """Tests for the tourism alias table."""

    def setup_method(self):
        """Setup test fixtures."""
        self.countries = tourism_countries()

    def test_alias_match(self):
        """Should map official names onto the short canonical name."""
        assert self.countries("Hong Kong, China") == "HONG KONG"
        assert self.countries("Korea, Republic of") == "SOUTH KOREA"

    def test_wildcard_alias(self):
        """Should match '*' against any run of characters."""
        assert self.countries("Türkiye") == "TURKIYE"
        assert self.countries("Lao People's Democratic Republic") == "LAOS"

    def test_mojibake_repaired(self):
        """Should repair cp437-decoded names before matching."""
        assert self.countries("COTE D┬┤IVOIRE") == "COTE D'IVOIRE"
        assert self.countries("CURA├çAO") == "CURACAO"

    def test_passthrough_uppercase(self):
        """Should uppercase names without an alias."""
        assert self.countries(" France ") == "FRANCE"

    def test_passthrough_mojibake_repaired(self):
        """Should repair the encoding of names without an alias."""
        assert self.countries("Saint-Barth├ëlemy") == "SAINT-BARTHÉLEMY"

    def test_normalize_country(self):
        """Should canonicalize through the given rules."""
        assert normalize_country("Syrian Arab Republic", self.countries) == "SYRIA"
        assert normalize_country(None, self.countries) is None

    def test_header_rows_return_none(self):
        """Should drop footnote and header rows."""
        assert self.countries("Source: UN Tourism") is None
        assert self.countries('"The information presented') is None

    def test_blank_returns_none(self):
        """Should return None for blanks and placeholders."""
        assert self.countries("") is None
        assert self.countries("..") is None


class TestSdgCountries:
    """Tests for the SDG alias table."""

    def test_same_territory_both_families(self):
        """Should give Hong Kong the same name in both families."""
        sdg = sdg_countries()("China, Hong Kong Special Administrative Region")
        tourism = tourism_countries()("Hong Kong, China")
        assert sdg == tourism == "HONG KONG"

    def test_united_kingdom(self):
        """Should shorten the United Kingdom."""
        name = "United Kingdom of Great Britain and Northern Ireland"
        assert sdg_countries()(name) == "UNITED KINGDOM"

    def test_accented_names(self):
        """Should match accented spellings."""
        assert sdg_countries()("Côte d'Ivoire") == "COTE D'IVOIRE"
        assert sdg_countries()("Réunion") == "REUNION"


class TestFoldName:
    """Tests for name folding helpers."""

    def test_fold_removes_diacritics(self):
        """Should strip accents and collapse whitespace."""
        assert fold_name("  Côte   d’Ivoire ") == "COTE D'IVOIRE"

    def test_repair_leaves_clean_text(self):
        """Should not touch text without mojibake."""
        assert repair_mojibake("Curaçao") == "Curaçao"

    def test_custom_alias(self):
        """Should accept aliases added at runtime."""
        canonicalizer = CountryCanonicalizer([("ATLANTIS*", "atlantis")])
        assert canonicalizer("Atlantis (lost)") == "ATLANTIS"


class TestGeoRemap:
    """Tests for GeoRemap."""

    def test_remap_code(self):
        """Should remap known codes and pass others through."""
        remap = GeoRemap(codes={534: 663})
        assert remap.apply(534) == (663, None)
        assert remap.apply(250) == (250, None)

    def test_name_travels_with_code(self):
        """Should return the forced name together with the remapped code."""
        remap = GeoRemap(codes={231: 288}, names={231: "Ghana"})
        assert remap.apply(231) == (288, "GHANA")

    def test_none_code(self):
        """Should keep a missing code missing."""
        assert GeoRemap(codes={1: 2}).apply(None) == (None, None)

    def test_orphan_name_rejected(self):
        """Should refuse a name override without its code remap."""
        with pytest.raises(RuleConfigurationError):
            GeoRemap(codes={}, names={231: "GHANA"})

    def test_from_config(self):
        """Should build from rule data with string keys."""
        remap = GeoRemap.from_config({'codes': {'535': '658'}})
        assert remap.remap_code(535) == 658

    def test_from_empty_config(self):
        """Should build an identity remap from None."""
        assert GeoRemap.from_config(None).remap_code(534) == 534
