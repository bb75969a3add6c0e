"""
Tourism fact processors.

Grain: 1 country x 1 indicator x 1 year x 1 unit. The wide year_YYYY
columns of the silver tables are unpivoted into (year, value) rows.
"""

import logging
from typing import Dict, List

import duckdb
import pandas as pd

from src.config.pipeline_config import FACT_SOURCES, YEAR_COLUMNS
from src.storage.warehouse import DECIMAL_TYPE, gold_table, replace_table
from ..dimensions.unit import normalize_unit
from ..sources import SilverFrames

logger = logging.getLogger(__name__)

FACT_COLUMNS = [
    ('country_key', 'INTEGER'),
    ('indicator_key', 'INTEGER'),
    ('year_key', 'INTEGER'),
    ('units_key', 'INTEGER'),
    ('value', DECIMAL_TYPE),
]

_ID_COLUMNS = ['country_code', 'indicator_code', 'units']


def lookup_keys(values: pd.Series, cache: Dict) -> pd.Series:
    """ Exact-match dimension lookup; unresolved values become <NA> """
    mapped = values.map(lambda v: None if v is None or pd.isna(v) else cache.get(v))
    return pd.to_numeric(mapped, errors='coerce').astype('Int64')


def unpivot_years(df: pd.DataFrame) -> pd.DataFrame:
    """
    Wide silver rows -> (country_code, indicator_code, units, year, value).
    Null values are dropped.
    """
    if df.empty:
        return pd.DataFrame(columns=_ID_COLUMNS + ['year', 'value'])

    long = df.melt(
        id_vars=_ID_COLUMNS,
        value_vars=YEAR_COLUMNS,
        var_name='year_column',
        value_name='value',
    )
    long = long[long['value'].notna()].copy()
    long['year'] = long['year_column'].str[len('year_'):].astype(int)
    return long[_ID_COLUMNS + ['year', 'value']].reset_index(drop=True)


def build_tourism_fact(
    frames: SilverFrames,
    sources: List[str],
    caches: Dict[str, Dict]
) -> pd.DataFrame:
    """ Union the unpivoted source tables and resolve dimension keys """
    parts = [unpivot_years(frames[table]) for table in sources if table in frames]
    parts = [part for part in parts if not part.empty]
    if not parts:
        return pd.DataFrame(columns=[name for name, _ in FACT_COLUMNS])

    long = pd.concat(parts, ignore_index=True)
    fact = pd.DataFrame({
        'country_key': lookup_keys(long['country_code'], caches.get('country', {})),
        'indicator_key': lookup_keys(long['indicator_code'], caches.get('indicator', {})),
        'year_key': lookup_keys(long['year'], caches.get('year', {})),
        'units_key': lookup_keys(long['units'].map(normalize_unit), caches.get('unit', {})),
        'value': long['value'],
    })
    return fact


def process_tourism_facts(
    conn: duckdb.DuckDBPyConnection,
    frames: SilverFrames,
    caches: Dict[str, Dict]
) -> Dict[str, Dict[str, int]]:
    """
    Rebuild every tourism fact table.

    Returns {fact_table: {'inserted': n, 'unresolved': rows with a missing key}}.
    """
    stats = {}
    for fact_table, sources in FACT_SOURCES.items():
        fact = build_tourism_fact(frames, sources, caches)
        unresolved = 0
        if not fact.empty:
            keys = fact[['country_key', 'indicator_key', 'year_key', 'units_key']]
            unresolved = int(keys.isna().any(axis=1).sum())
        inserted = replace_table(conn, gold_table(fact_table), fact, FACT_COLUMNS)
        if unresolved:
            logger.warning(f"{fact_table}: {unresolved} rows with unresolved dimension keys")
        stats[fact_table] = {'inserted': inserted, 'unresolved': unresolved}
    return stats
