"""Unit tests for gold dimension builders."""
import pytest
import sys
import os

import pandas as pd

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from src.config.pipeline_config import YEAR_COLUMNS
from src.etl.gold.dimensions import (
    apply_name_rule,
    build_dim_country,
    build_dim_indicator,
    build_dim_unit,
    build_dim_year,
    indicator_base_name,
    normalize_unit,
    process_dim_country,
)
from src.storage.warehouse import get_duckdb_connection, setup_schemas

TOURISM_COLUMNS = [
    'country_code', 'indicator_code', 'country_name',
    'indicator_level_1', 'indicator_level_2', 'indicator_level_3', 'indicator_level_4',
    'units',
] + YEAR_COLUMNS


def tourism_frame(*rows):
    """Silver tourism frame as read by the gold build."""
    df = pd.DataFrame([{c: row.get(c) for c in TOURISM_COLUMNS} for row in rows], columns=TOURISM_COLUMNS)
    df['country_code'] = pd.to_numeric(df['country_code']).astype('Int64')
    return df.astype({c: object for c in TOURISM_COLUMNS[1:]})


def sdg_frame(*rows):
    columns = ['country_code', 'country_name', 'year', 'value', 'series_description', 'units']
    df = pd.DataFrame([{c: row.get(c) for c in columns} for row in rows], columns=columns)
    df['country_code'] = pd.to_numeric(df['country_code']).astype('Int64')
    df['year'] = pd.to_numeric(df['year']).astype('Int64')
    return df


class TestDimCountry:
    """Tests for dim_country."""

    def test_one_row_per_code(self):
        """Should key countries 1..n in code order."""
        frames = {
            'domestic_trip': tourism_frame(
                {'country_code': 276, 'country_name': 'GERMANY'},
                {'country_code': 250, 'country_name': 'FRANCE'},
            ),
            'sdg_891': sdg_frame({'country_code': 250, 'country_name': 'FRANCE'}),
        }
        dim = build_dim_country(frames)
        assert dim['country_id'].tolist() == [250, 276]
        assert dim['country_key'].tolist() == [1, 2]
        assert dim['country_name'].tolist() == ['FRANCE', 'GERMANY']

    def test_most_frequent_name_wins(self):
        """Should keep the most frequent name of a conflicting code."""
        frames = {
            'domestic_trip': tourism_frame(
                {'country_code': 250, 'country_name': 'FRANCE'},
                {'country_code': 250, 'country_name': 'FRANCE'},
                {'country_code': 250, 'country_name': 'FRENCH REPUBLIC'},
            ),
        }
        dim = build_dim_country(frames)
        assert len(dim) == 1
        assert dim.iloc[0]['country_name'] == 'FRANCE'

    def test_tie_alphabetical(self):
        """Should break ties alphabetically."""
        frames = {
            'domestic_trip': tourism_frame({'country_code': 384, 'country_name': 'IVORY COAST'}),
            'sdg_891': sdg_frame({'country_code': 384, 'country_name': "COTE D'IVOIRE"}),
        }
        dim = build_dim_country(frames)
        assert dim.iloc[0]['country_name'] == "COTE D'IVOIRE"

    def test_nulls_ignored(self):
        """Should skip rows without code or name."""
        frames = {
            'domestic_trip': tourism_frame(
                {'country_code': None, 'country_name': 'SOMEWHERE'},
                {'country_code': 250, 'country_name': None},
            ),
        }
        assert build_dim_country(frames).empty

    def test_process_reports_conflicts(self):
        """Should write the table and count conflicting codes."""
        conn = get_duckdb_connection(':memory:')
        setup_schemas(conn)
        frames = {
            'domestic_trip': tourism_frame(
                {'country_code': 250, 'country_name': 'FRANCE'},
                {'country_code': 250, 'country_name': 'FRENCH REPUBLIC'},
                {'country_code': 276, 'country_name': 'GERMANY'},
            ),
        }
        stats = process_dim_country(conn, frames)
        assert stats == {'inserted': 2, 'conflicts': 1}
        rows = conn.execute("SELECT country_id, country_name FROM gold.dim_country ORDER BY 1").fetchall()
        assert rows == [(250, 'FRANCE'), (276, 'GERMANY')]
        conn.close()


class TestDimIndicator:
    """Tests for dim_indicator."""

    def test_base_name(self):
        """Should take the first non-null level, upper-cased."""
        assert indicator_base_name([None, 'Arrivals', 'x']) == 'ARRIVALS'
        assert indicator_base_name([None, None]) is None

    def test_suffix_rule(self):
        """Should append the suffix text."""
        assert apply_name_rule('2.19', 'NIGHTS') == 'NIGHTS (ACCOMMODATION)'
        assert apply_name_rule('1.14', 'TOTAL') == 'TOTAL PURPOSE'

    def test_replace_rule(self):
        """Should replace the name, even without level text."""
        assert apply_name_rule('1.4', 'OF WHICH') == 'CRUISE PASSENGERS'
        assert apply_name_rule('1.13', None) == 'NATIONALS RESIDING ABROAD'

    def test_no_rule(self):
        """Should keep names without a rule."""
        assert apply_name_rule('3.1', 'DEPARTURES') == 'DEPARTURES'

    def test_first_table_wins(self):
        """Should take name and source from the first table in load order."""
        frames = {
            'domestic_trip': tourism_frame(
                {'indicator_code': '2.19', 'indicator_level_1': 'Other name'},
            ),
            'domestic_accommodation': tourism_frame(
                {'indicator_code': '2.19', 'indicator_level_2': 'Nights'},
                {'indicator_code': '2.19', 'indicator_level_1': 'Guests'},
            ),
            'inbound_arrivals': tourism_frame({'indicator_code': '1.4'}),
            'sdg_891': sdg_frame({'country_code': 250}),
        }
        dim = build_dim_indicator(frames)
        assert dim['indicator_id'].tolist() == ['1.4', '2.19']
        assert dim['indicator_key'].tolist() == [1, 2]

        row = dim[dim['indicator_id'] == '2.19'].iloc[0]
        assert row['indicator_name'] == 'NIGHTS (ACCOMMODATION)'
        assert row['source_table'] == 'DOMESTIC_ACCOMMODATION'
        assert dim[dim['indicator_id'] == '1.4'].iloc[0]['indicator_name'] == 'CRUISE PASSENGERS'

    def test_unnamed_indicator_skipped(self):
        """Should skip codes without any name."""
        frames = {'domestic_trip': tourism_frame({'indicator_code': '3.1'})}
        assert build_dim_indicator(frames).empty


class TestDimYear:
    """Tests for dim_year."""

    def test_includes_tourism_range(self):
        """Should cover 1995-2022 without SDG data."""
        dim = build_dim_year({})
        assert dim['year'].tolist() == list(range(1995, 2023))
        assert dim['year_key'].iloc[0] == 1

    def test_adds_sdg_years(self):
        """Should add SDG years once."""
        frames = {'sdg_891': sdg_frame({'year': 2023}, {'year': 2023}, {'year': 2010}, {'year': None})}
        years = build_dim_year(frames)['year'].tolist()
        assert years[-1] == 2023
        assert years.count(2010) == 1
        assert len(years) == 29


class TestDimUnit:
    """Tests for dim_unit_of_measure."""

    def test_normalize_unit(self):
        """Should upper-case and apply aliases."""
        assert normalize_unit('Units') == 'NUMBER'
        assert normalize_unit('nights') == 'AVG_NIGHTS'
        assert normalize_unit('US$ Mn') == 'US$ MN'
        assert normalize_unit(None) is None

    def test_distinct_units(self):
        """Should key distinct normalized units alphabetically."""
        frames = {
            'domestic_trip': tourism_frame({'units': 'Units'}, {'units': 'NUMBER'}, {'units': 'Nights'}),
            'sdg_892': sdg_frame({'units': 'PERCENT'}, {'units': None}),
        }
        dim = build_dim_unit(frames)
        assert dim['measure_units'].tolist() == ['AVG_NIGHTS', 'NUMBER', 'PERCENT']
        assert dim['units_key'].tolist() == [1, 2, 3]
