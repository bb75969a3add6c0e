"""Unit tests for the silver load against an in-memory DuckDB."""
import pytest
import sys
import os
from datetime import date
from decimal import Decimal

import pandas as pd

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from src.etl.exceptions import SilverLoadError
from src.etl.silver.pipeline import load_silver_table, run_silver_pipeline
from src.storage.warehouse import (
    bronze_table, get_duckdb_connection, replace_raw_table, setup_schemas
)


def bronze_tourism(conn, table, rows):
    columns = ['C', 'S', 'Basic_data', 'Unnamed_5', 'Unnamed_6', 'Unnamed_7', 'Unnamed_8',
               'Units', 'year_2019', 'year_2020']
    replace_raw_table(conn, bronze_table(table), pd.DataFrame(rows, columns=columns))


def bronze_sdg(conn, table, rows):
    columns = ['GeoAreaCode', 'GeoAreaName', 'TimePeriod', 'Value',
               'SeriesDescription', 'Nature', 'Units', 'Source']
    replace_raw_table(conn, bronze_table(table), pd.DataFrame(rows, columns=columns))


class TestLoadSilverTable:
    """Tests for load_silver_table function."""

    def setup_method(self):
        """Setup test fixtures."""
        self.conn = get_duckdb_connection(':memory:')
        setup_schemas(self.conn)

    def teardown_method(self):
        self.conn.close()

    def test_tourism_values_typed(self):
        """Should store exact decimals and integer codes."""
        bronze_tourism(self.conn, 'domestic_accommodation', [
            ['276', '219', 'FRANCE', 'Nights', '', '', '', 'Number', '..', '1,500.00'],
        ])
        stats = load_silver_table(self.conn, 'domestic_accommodation')
        assert stats['rows'] == 1

        row = self.conn.execute("""
            SELECT country_code, indicator_code, country_name, units, year_2019, year_2020
            FROM silver.domestic_accommodation
        """).fetchone()
        assert row == (276, '2.19', 'FRANCE', 'Number', None, Decimal('1500.00'))

    def test_header_rows_kept_with_null_name(self):
        """Should keep footnote rows with an absent country name."""
        bronze_tourism(self.conn, 'domestic_trip', [
            ['', '', 'Source: UN Tourism', '', '', '', '', '', '', ''],
        ])
        load_silver_table(self.conn, 'domestic_trip')
        row = self.conn.execute("SELECT country_name, country_code FROM silver.domestic_trip").fetchone()
        assert row == (None, None)

    def test_reload_truncates(self):
        """Should replace previous rows on every run."""
        bronze_tourism(self.conn, 'domestic_trip', [
            ['250', '1.1', 'France', 'Trips', '', '', '', 'Number', '1', '2'],
        ])
        load_silver_table(self.conn, 'domestic_trip')
        load_silver_table(self.conn, 'domestic_trip')
        count = self.conn.execute("SELECT COUNT(*) FROM silver.domestic_trip").fetchone()[0]
        assert count == 1

    def test_sdg_row(self):
        """Should remap and type SDG rows."""
        bronze_sdg(self.conn, 'sdg_12b1', [
            ['231', 'Ethiopia', '2021', '..', 'SEEA tables', 'C', 'NUMBER', 'UN Tourism'],
        ])
        load_silver_table(self.conn, 'sdg_12b1')
        row = self.conn.execute(
            "SELECT country_code, country_name, time_period, value FROM silver.sdg_12b1"
        ).fetchone()
        assert row == (288, 'GHANA', date(2021, 1, 1), None)

    def test_missing_bronze_loads_empty(self):
        """Should load an empty silver table when bronze is absent."""
        stats = load_silver_table(self.conn, 'outbound_departures')
        assert stats['rows'] == 0


class TestRunSilverPipeline:
    """Tests for run_silver_pipeline function."""

    def setup_method(self):
        """Setup test fixtures."""
        self.conn = get_duckdb_connection(':memory:')

    def teardown_method(self):
        self.conn.close()

    def test_result_counts(self):
        """Should report per-table rows."""
        setup_schemas(self.conn)
        bronze_tourism(self.conn, 'domestic_trip', [
            ['250', '1.1', 'France', 'Trips', '', '', '', 'Number', '1', '2'],
            ['276', '1.1', 'Germany', 'Trips', '', '', '', 'Number', '3', '..'],
        ])
        result = run_silver_pipeline(self.conn, tables=['domestic_trip', 'sdg_891'])
        assert result['success']
        assert result['tables']['domestic_trip']['rows'] == 2
        assert result['tables']['sdg_891']['rows'] == 0
        assert result['total_rows'] == 2
        assert 'duration_seconds' in result

        trip = result['tables']['domestic_trip']
        assert trip['start_time'] <= trip['end_time']
        assert trip['duration_seconds'] >= 0

    def test_unknown_table(self):
        """Should refuse tables outside the load order."""
        with pytest.raises(SilverLoadError):
            run_silver_pipeline(self.conn, tables=['nope'])

    def test_failure_carries_diagnostics(self, monkeypatch):
        """Should abort with the failing table and stage."""
        setup_schemas(self.conn)
        bronze_tourism(self.conn, 'domestic_trip', [
            ['250', '1.1', 'France', 'Trips', '', '', '', 'Number', '1', '2'],
        ])

        def broken_insert(*args, **kwargs):
            raise RuntimeError('disk full')

        monkeypatch.setattr('src.etl.silver.pipeline.insert_dataframe', broken_insert)
        with pytest.raises(SilverLoadError) as exc_info:
            run_silver_pipeline(self.conn, tables=['domestic_trip', 'sdg_891'])

        diagnostics = exc_info.value.diagnostics()
        assert diagnostics['table'] == 'domestic_trip'
        assert diagnostics['stage'] == 'insert'
        assert diagnostics['error_type'] == 'RuntimeError'
        assert diagnostics['severity'] == 'fatal'
