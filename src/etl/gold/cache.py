"""
Dimension cache utilities.
"""

import logging
from typing import Dict

import duckdb

from src.storage.warehouse import gold_table

logger = logging.getLogger(__name__)


def init_dimension_caches(conn: duckdb.DuckDBPyConnection) -> Dict[str, Dict]:
    """
    Initialize caches for dimension lookups.

    Returns dict with:
    - country: country_id -> country_key
    - indicator: indicator_id -> indicator_key
    - year: year -> year_key
    - unit: measure_units -> units_key
    """
    caches = {}

    countries = conn.execute(f"""
        SELECT country_id, country_key FROM {gold_table('dim_country')}
    """).fetchall()
    caches['country'] = {int(cid): int(key) for cid, key in countries}

    indicators = conn.execute(f"""
        SELECT indicator_id, indicator_key FROM {gold_table('dim_indicator')}
    """).fetchall()
    caches['indicator'] = {iid: int(key) for iid, key in indicators}

    years = conn.execute(f"""
        SELECT year, year_key FROM {gold_table('dim_year')}
    """).fetchall()
    caches['year'] = {int(year): int(key) for year, key in years}

    units = conn.execute(f"""
        SELECT measure_units, units_key FROM {gold_table('dim_unit_of_measure')}
    """).fetchall()
    caches['unit'] = {unit: int(key) for unit, key in units}

    logger.info(
        f"Caches initialized: countries={len(caches['country'])}, "
        f"indicators={len(caches['indicator'])}, years={len(caches['year'])}, "
        f"units={len(caches['unit'])}"
    )
    return caches
