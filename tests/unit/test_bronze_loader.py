"""Unit tests for the bronze CSV loader."""
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from src.etl.bronze.loader import load_bronze, read_raw_csv, sanitize_column, sanitize_columns
from src.etl.silver.pipeline import load_silver_table
from src.storage.warehouse import get_duckdb_connection, table_exists

TOURISM_HEADER = 'C,S,Basic data,Notes,Codes,,,,,Units,1995,2019\n'


def write_csv(path, text, encoding='utf-8'):
    path.write_bytes(text.encode(encoding))
    return path


class TestSanitizeColumn:
    """Tests for header sanitizing."""

    def test_spaces(self):
        """Should replace spaces with underscores."""
        assert sanitize_column('Basic data', 2) == 'Basic_data'

    def test_pandas_unnamed(self):
        """Should turn pandas blank-header names into identifiers."""
        assert sanitize_column('Unnamed: 5', 5) == 'Unnamed_5'

    def test_year_header(self):
        """Should prefix year headers."""
        assert sanitize_column('1995', 10) == 'year_1995'
        assert sanitize_column(' 2022 ', 11) == 'year_2022'

    def test_bom_stripped(self):
        """Should drop a UTF-8 byte order mark."""
        assert sanitize_column('\ufeffC', 0) == 'C'

    def test_empty_header(self):
        """Should name empty headers by position."""
        assert sanitize_column('  ', 3) == 'Unnamed_3'

    def test_duplicates_suffixed(self):
        """Should keep names unique."""
        assert sanitize_columns(['Units', 'Units ', 'A b']) == ['Units', 'Units_1', 'A_b']


class TestReadRawCsv:
    """Tests for read_raw_csv function."""

    def test_everything_is_text(self, tmp_path):
        """Should keep codes and placeholders as text."""
        path = write_csv(tmp_path / 'x.csv', TOURISM_HEADER + '004,219,France,,,Nights,,,,Number,..,"1,234.5"\n')
        df = read_raw_csv(path)
        row = df.iloc[0]
        assert row['C'] == '004'
        assert row['year_1995'] == '..'
        assert row['year_2019'] == '1,234.5'
        assert row['Unnamed_5'] == 'Nights'
        assert row['Unnamed_6'] == ''

    def test_semicolon_delimiter(self, tmp_path):
        """Should read ';' separated extracts."""
        path = write_csv(tmp_path / 'x.csv', 'C;S;Basic data\n250;1.1;France, Metropolitan\n')
        df = read_raw_csv(path, ';')
        assert df.iloc[0]['Basic_data'] == 'France, Metropolitan'

    def test_cp1252_fallback(self, tmp_path):
        """Should fall back to cp1252 when UTF-8 fails."""
        path = write_csv(tmp_path / 'x.csv', 'C,S,Basic data\n384,1.1,Côte d\'Ivoire\n', encoding='cp1252')
        df = read_raw_csv(path)
        assert df.iloc[0]['Basic_data'] == "Côte d'Ivoire"


class TestLoadBronze:
    """Tests for load_bronze function."""

    def setup_method(self):
        """Setup test fixtures."""
        self.conn = get_duckdb_connection(':memory:')

    def teardown_method(self):
        self.conn.close()

    def test_loads_table(self, tmp_path):
        """Should load a CSV into bronze.raw_<table>."""
        write_csv(
            tmp_path / 'Domestic Tourism-Trips.csv',
            TOURISM_HEADER + '250,1.1,France,,,Trips,,,,Number,100,200\n'
                             '276,1.1,Germany,,,Trips,,,,Number,..,300\n'
        )
        result = load_bronze(self.conn, tmp_path, tables=['domestic_trip'])
        assert result['success']
        assert result['tables']['domestic_trip']['rows'] == 2
        assert result['total_rows'] == 2

        rows = self.conn.execute(
            "SELECT C, year_1995 FROM bronze.raw_domestic_trip ORDER BY C"
        ).fetchall()
        assert rows == [('250', '100'), ('276', '..')]

    def test_reload_replaces_rows(self, tmp_path):
        """Should truncate before reloading."""
        path = tmp_path / 'Domestic Tourism-Trips.csv'
        write_csv(path, TOURISM_HEADER + '250,1.1,France,,,Trips,,,,Number,100,200\n')
        load_bronze(self.conn, tmp_path, tables=['domestic_trip'])
        load_bronze(self.conn, tmp_path, tables=['domestic_trip'])
        count = self.conn.execute("SELECT COUNT(*) FROM bronze.raw_domestic_trip").fetchone()[0]
        assert count == 1

    def test_missing_file_skipped(self, tmp_path):
        """Should skip and report tables without a CSV."""
        result = load_bronze(self.conn, tmp_path, tables=['domestic_trip', 'sdg_891'])
        assert result['success']
        assert result['skipped'] == ['domestic_trip', 'sdg_891']
        assert result['total_rows'] == 0
        assert not table_exists(self.conn, 'bronze.raw_domestic_trip')

    def test_missing_file_empties_previous_rows(self, tmp_path):
        """Should not let a previous run's rows reach silver when the CSV disappears."""
        path = tmp_path / 'Domestic Tourism-Trips.csv'
        write_csv(path, TOURISM_HEADER + '250,1.1,France,,,Trips,,,,Number,100,200\n')
        load_bronze(self.conn, tmp_path, tables=['domestic_trip'])
        path.unlink()

        result = load_bronze(self.conn, tmp_path, tables=['domestic_trip'])
        assert result['skipped'] == ['domestic_trip']
        count = self.conn.execute("SELECT COUNT(*) FROM bronze.raw_domestic_trip").fetchone()[0]
        assert count == 0
        assert load_silver_table(self.conn, 'domestic_trip')['rows'] == 0

    def test_creates_schemas(self, tmp_path):
        """Should create the medallion schemas and silver tables."""
        load_bronze(self.conn, tmp_path, tables=[])
        assert table_exists(self.conn, 'silver.domestic_trip')
        assert table_exists(self.conn, 'silver.sdg_12b1')
