"""
fact_sdg processor.

SDG extracts are already long (one year per row). Rows keep null values.
"""

import logging
from typing import Any, Dict, Mapping, Optional

import duckdb
import pandas as pd

from src.config.normalization_config import SDG_INDICATOR_LABELS
from src.config.pipeline_config import SDG_FACT_SOURCES
from src.storage.warehouse import DECIMAL_TYPE, gold_table, replace_table
from ..dimensions.unit import normalize_unit
from ..sources import SilverFrames
from .tourism import lookup_keys

logger = logging.getLogger(__name__)

FACT_SDG_COLUMNS = [
    ('country_key', 'INTEGER'),
    ('indicator', 'VARCHAR'),
    ('year_key', 'INTEGER'),
    ('units_key', 'INTEGER'),
    ('value', DECIMAL_TYPE),
]


def sdg_indicator_label(
    description: Any,
    labels: Mapping[str, str] = SDG_INDICATOR_LABELS
) -> Optional[str]:
    """ Readable SDG indicator code for a series description """
    if description is None or pd.isna(description):
        return None
    return labels.get(description, description)


def build_sdg_fact(frames: SilverFrames, caches: Dict[str, Dict]) -> pd.DataFrame:
    parts = [frames[table] for table in SDG_FACT_SOURCES if table in frames and not frames[table].empty]
    if not parts:
        return pd.DataFrame(columns=[name for name, _ in FACT_SDG_COLUMNS])

    long = pd.concat(parts, ignore_index=True)
    return pd.DataFrame({
        'country_key': lookup_keys(long['country_code'], caches.get('country', {})),
        'indicator': long['series_description'].map(sdg_indicator_label),
        'year_key': lookup_keys(long['year'], caches.get('year', {})),
        'units_key': lookup_keys(long['units'].map(normalize_unit), caches.get('unit', {})),
        'value': long['value'],
    })


def process_sdg_facts(
    conn: duckdb.DuckDBPyConnection,
    frames: SilverFrames,
    caches: Dict[str, Dict]
) -> Dict[str, int]:
    fact = build_sdg_fact(frames, caches)
    unresolved = int(fact['country_key'].isna().sum()) if not fact.empty else 0
    inserted = replace_table(conn, gold_table('fact_sdg'), fact, FACT_SDG_COLUMNS)
    if unresolved:
        logger.warning(f"fact_sdg: {unresolved} rows without a country key")
    return {'inserted': inserted, 'unresolved': unresolved}
