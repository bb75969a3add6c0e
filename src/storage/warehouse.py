"""
DuckDB warehouse operations.

One DuckDB file holds the three medallion schemas:
- bronze: raw_<table>, every column VARCHAR
- silver: <table>, typed and normalized
- gold:   dim_* / fact_* star schema
"""

import logging
import os
from typing import Dict, List, Optional, Sequence, Tuple

import duckdb
import pandas as pd

from src.config.database_config import BRONZE_SCHEMA, DUCKDB_PATH, GOLD_SCHEMA, SILVER_SCHEMA
from src.config.pipeline_config import FAMILY_SDG, SOURCE_TABLES, YEAR_COLUMNS

logger = logging.getLogger(__name__)

ColumnSpec = Sequence[Tuple[str, str]]

ALL_SCHEMAS = [BRONZE_SCHEMA, SILVER_SCHEMA, GOLD_SCHEMA]

DECIMAL_TYPE = 'DECIMAL(18,2)'

TOURISM_SILVER_SCHEMA: List[Tuple[str, str]] = [
    ('country_code', 'INTEGER'),
    ('indicator_code', 'VARCHAR'),
    ('country_name', 'VARCHAR'),
    ('indicator_level_1', 'VARCHAR'),
    ('indicator_level_2', 'VARCHAR'),
    ('indicator_level_3', 'VARCHAR'),
    ('indicator_level_4', 'VARCHAR'),
    ('units', 'VARCHAR'),
    ('series_method', 'VARCHAR'),
] + [(column, DECIMAL_TYPE) for column in YEAR_COLUMNS]

SDG_SILVER_SCHEMA: List[Tuple[str, str]] = [
    ('country_code', 'INTEGER'),
    ('country_name', 'VARCHAR'),
    ('time_period', 'DATE'),
    ('value', DECIMAL_TYPE),
    ('series_description', 'VARCHAR'),
    ('nature', 'VARCHAR'),
    ('units', 'VARCHAR'),
    ('source', 'VARCHAR'),
]


def get_duckdb_connection(local_path: Optional[str] = None) -> duckdb.DuckDBPyConnection:
    """Get DuckDB connection to the warehouse file (':memory:' for tests)."""
    if local_path is None:
        local_path = DUCKDB_PATH
    if local_path != ':memory:':
        os.makedirs(os.path.dirname(os.path.abspath(local_path)), exist_ok=True)
    return duckdb.connect(local_path)


def bronze_table(table: str) -> str:
    return f"{BRONZE_SCHEMA}.raw_{table}"


def silver_table(table: str) -> str:
    return f"{SILVER_SCHEMA}.{table}"


def gold_table(table: str) -> str:
    return f"{GOLD_SCHEMA}.{table}"


def silver_schema_of(table: str) -> List[Tuple[str, str]]:
    """ Typed column list of a silver table """
    family = SOURCE_TABLES[table][0]
    return SDG_SILVER_SCHEMA if family == FAMILY_SDG else TOURISM_SILVER_SCHEMA


def _create_table_sql(full_name: str, columns: ColumnSpec) -> str:
    body = ',\n    '.join(f'"{name}" {sql_type}' for name, sql_type in columns)
    return f"CREATE TABLE IF NOT EXISTS {full_name} (\n    {body}\n)"


def setup_schemas(conn: duckdb.DuckDBPyConnection) -> None:
    """
    Create the bronze/silver/gold schemas and the silver tables.
    Existing tables are kept; bronze and gold tables are (re)created by
    their loaders.
    """
    for schema in ALL_SCHEMAS:
        conn.execute(f"CREATE SCHEMA IF NOT EXISTS {schema}")

    for table in SOURCE_TABLES:
        conn.execute(_create_table_sql(silver_table(table), silver_schema_of(table)))

    logger.info(f"Schemas ready: {', '.join(ALL_SCHEMAS)}")


def table_exists(conn: duckdb.DuckDBPyConnection, full_name: str) -> bool:
    schema, table = full_name.split('.', 1)
    result = conn.execute("""
        SELECT COUNT(*) FROM information_schema.tables
        WHERE table_schema = ? AND table_name = ?
    """, [schema, table]).fetchone()
    return bool(result and result[0] > 0)


def count_rows(conn: duckdb.DuckDBPyConnection, full_name: str) -> int:
    return conn.execute(f"SELECT COUNT(*) FROM {full_name}").fetchone()[0]


def truncate_table(conn: duckdb.DuckDBPyConnection, full_name: str) -> None:
    conn.execute(f"DELETE FROM {full_name}")


def read_table(conn: duckdb.DuckDBPyConnection, full_name: str) -> pd.DataFrame:
    return conn.execute(f"SELECT * FROM {full_name}").fetchdf()


def _as_text(value):
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    return str(value)


def _text_frame(df: pd.DataFrame, columns: ColumnSpec) -> pd.DataFrame:
    """
    Text copy of df limited to columns. Values are cast back to their SQL
    type on insert, so Decimal/date/int survive without float rounding.
    """
    names = [name for name, _ in columns]
    text = pd.DataFrame(index=df.index)
    for name in names:
        source = df[name] if name in df.columns else pd.Series([None] * len(df), index=df.index)
        text[name] = source.map(_as_text).astype(object)
    return text


def insert_dataframe(
    conn: duckdb.DuckDBPyConnection,
    full_name: str,
    df: pd.DataFrame,
    columns: ColumnSpec
) -> int:
    """ Append df to an existing table, casting every column to its type """
    if df.empty:
        return 0

    text = _text_frame(df, columns)
    select = ', '.join(f'CAST("{name}" AS {sql_type}) AS "{name}"' for name, sql_type in columns)
    names = ', '.join(f'"{name}"' for name, _ in columns)

    conn.register('df_tmp', text)
    try:
        conn.execute(f"INSERT INTO {full_name} ({names}) SELECT {select} FROM df_tmp")
    finally:
        conn.unregister('df_tmp')
    return len(df)


def replace_table(
    conn: duckdb.DuckDBPyConnection,
    full_name: str,
    df: pd.DataFrame,
    columns: ColumnSpec
) -> int:
    """ Drop and recreate a table from df (full replace) """
    conn.execute(f"DROP TABLE IF EXISTS {full_name}")
    conn.execute(_create_table_sql(full_name, columns))
    inserted = insert_dataframe(conn, full_name, df, columns)
    logger.info(f"Wrote {inserted} rows to {full_name}")
    return inserted


def replace_raw_table(conn: duckdb.DuckDBPyConnection, full_name: str, df: pd.DataFrame) -> int:
    """ Recreate a bronze table as all-VARCHAR columns named after df """
    return replace_table(conn, full_name, df, [(column, 'VARCHAR') for column in df.columns])


def table_counts(conn: duckdb.DuckDBPyConnection, schema: str) -> Dict[str, int]:
    """ Row count of every table in a schema """
    tables = conn.execute("""
        SELECT table_name FROM information_schema.tables
        WHERE table_schema = ?
        ORDER BY table_name
    """, [schema]).fetchall()
    return {name: count_rows(conn, f"{schema}.{name}") for (name,) in tables}
