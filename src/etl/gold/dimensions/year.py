"""
dim_year dimension processor.
"""

import logging
from typing import Dict, Set

import duckdb
import pandas as pd

from src.config.pipeline_config import YEARS
from src.storage.warehouse import gold_table, replace_table
from ..sources import SilverFrames

logger = logging.getLogger(__name__)

DIM_YEAR_COLUMNS = [
    ('year_key', 'INTEGER'),
    ('year', 'INTEGER'),
]


def build_dim_year(frames: SilverFrames) -> pd.DataFrame:
    """ Wide tourism years plus every year reported by an SDG table """
    years: Set[int] = set(YEARS)
    for df in frames.values():
        if 'year' in df.columns:
            years.update(int(y) for y in df['year'].dropna())

    ordered = sorted(years)
    return pd.DataFrame({
        'year_key': range(1, len(ordered) + 1),
        'year': ordered,
    })


def process_dim_year(
    conn: duckdb.DuckDBPyConnection,
    frames: SilverFrames
) -> Dict[str, int]:
    dim = build_dim_year(frames)
    logger.debug(f"dim_year range: {dim['year'].min()} to {dim['year'].max()}")
    inserted = replace_table(conn, gold_table('dim_year'), dim, DIM_YEAR_COLUMNS)
    return {'inserted': inserted}
