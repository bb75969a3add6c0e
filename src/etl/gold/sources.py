"""
Silver inputs of the gold build.

Decimal columns are read as text so values reach the gold tables without a
float round trip; they are cast back to DECIMAL(18,2) on insert.
"""

import logging
from typing import Dict

import duckdb
import pandas as pd

from src.config.pipeline_config import (
    FAMILY_SDG,
    LOAD_ORDER,
    SOURCE_TABLES,
    YEAR_COLUMNS,
)
from src.storage.warehouse import silver_table

logger = logging.getLogger(__name__)

SilverFrames = Dict[str, pd.DataFrame]

_TOURISM_TEXT_COLUMNS = [
    'indicator_code', 'country_name',
    'indicator_level_1', 'indicator_level_2', 'indicator_level_3', 'indicator_level_4',
    'units',
]


def _tourism_query(table: str) -> str:
    years = ', '.join(f'CAST({column} AS VARCHAR) AS {column}' for column in YEAR_COLUMNS)
    text = ', '.join(_TOURISM_TEXT_COLUMNS)
    return f"SELECT country_code, {text}, {years} FROM {silver_table(table)}"


def _sdg_query(table: str) -> str:
    return f"""
        SELECT
            country_code,
            country_name,
            CAST(year(time_period) AS INTEGER) AS year,
            CAST(value AS VARCHAR) AS value,
            series_description,
            units
        FROM {silver_table(table)}
    """


def read_silver_table(conn: duckdb.DuckDBPyConnection, table: str) -> pd.DataFrame:
    """ One silver table shaped for the gold build """
    if SOURCE_TABLES[table][0] == FAMILY_SDG:
        df = conn.execute(_sdg_query(table)).fetchdf()
        df['year'] = pd.to_numeric(df['year'], errors='coerce').astype('Int64')
    else:
        df = conn.execute(_tourism_query(table)).fetchdf()

    df['country_code'] = pd.to_numeric(df['country_code'], errors='coerce').astype('Int64')
    text_columns = [c for c in df.columns if c not in ('country_code', 'year')]
    df[text_columns] = df[text_columns].astype(object).where(df[text_columns].notna(), None)
    return df


def read_silver_frames(conn: duckdb.DuckDBPyConnection) -> SilverFrames:
    """ Every silver table, keyed by table name, in load order """
    frames = {table: read_silver_table(conn, table) for table in LOAD_ORDER}
    logger.info(f"Read silver: {sum(len(df) for df in frames.values())} rows from {len(frames)} tables")
    return frames
