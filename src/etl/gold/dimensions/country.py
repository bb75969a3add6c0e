"""
dim_country dimension processor.
"""

import logging
from typing import Dict

import duckdb
import pandas as pd

from src.storage.warehouse import gold_table, replace_table
from ..sources import SilverFrames

logger = logging.getLogger(__name__)

DIM_COUNTRY_COLUMNS = [
    ('country_key', 'INTEGER'),
    ('country_id', 'INTEGER'),
    ('country_name', 'VARCHAR'),
]


def country_name_counts(frames: SilverFrames) -> pd.DataFrame:
    """ (country_code, country_name, n) over every silver table """
    pairs = [
        df[['country_code', 'country_name']]
        for df in frames.values()
        if not df.empty
    ]
    if not pairs:
        return pd.DataFrame(columns=['country_code', 'country_name', 'n'])

    union = pd.concat(pairs, ignore_index=True).dropna()
    if union.empty:
        return pd.DataFrame(columns=['country_code', 'country_name', 'n'])
    return union.groupby(['country_code', 'country_name']).size().reset_index(name='n')


def build_dim_country(frames: SilverFrames) -> pd.DataFrame:
    """
    One row per country code.

    A code still carrying several names after normalization keeps its most
    frequent name (ties: alphabetical); every such conflict is logged.
    """
    counts = country_name_counts(frames)
    if counts.empty:
        return pd.DataFrame(columns=[name for name, _ in DIM_COUNTRY_COLUMNS])

    counts = counts.sort_values(
        ['country_code', 'n', 'country_name'], ascending=[True, False, True]
    )

    conflicts = counts[counts.duplicated('country_code', keep=False)]
    for code, group in conflicts.groupby('country_code'):
        names = ', '.join(f"{row.country_name} ({row.n})" for row in group.itertuples())
        logger.warning(f"Country code {code} has several names: {names}")

    dim = counts.drop_duplicates('country_code', keep='first').reset_index(drop=True)
    dim = dim.rename(columns={'country_code': 'country_id'})
    dim.insert(0, 'country_key', range(1, len(dim) + 1))
    return dim[['country_key', 'country_id', 'country_name']]


def process_dim_country(
    conn: duckdb.DuckDBPyConnection,
    frames: SilverFrames
) -> Dict[str, int]:
    """ Rebuild gold.dim_country from every silver table """
    dim = build_dim_country(frames)
    counts = country_name_counts(frames)
    conflicts = 0
    if not counts.empty:
        conflicts = int((counts.groupby('country_code').size() > 1).sum())

    inserted = replace_table(conn, gold_table('dim_country'), dim, DIM_COUNTRY_COLUMNS)
    return {'inserted': inserted, 'conflicts': conflicts}
