"""
dim_unit_of_measure dimension processor.
"""

import logging
from typing import Any, Dict, Optional

import duckdb
import pandas as pd

from src.config.normalization_config import UNIT_ALIASES
from src.storage.warehouse import gold_table, replace_table
from ..sources import SilverFrames

logger = logging.getLogger(__name__)

DIM_UNIT_COLUMNS = [
    ('units_key', 'INTEGER'),
    ('measure_units', 'VARCHAR'),
]


def normalize_unit(value: Any) -> Optional[str]:
    """ Upper-cased unit with the UNITS/NIGHTS aliases applied """
    if value is None or pd.isna(value):
        return None
    unit = str(value).upper()
    return UNIT_ALIASES.get(unit, unit)


def build_dim_unit(frames: SilverFrames) -> pd.DataFrame:
    units = set()
    for df in frames.values():
        for value in df['units']:
            unit = normalize_unit(value)
            if unit is not None:
                units.add(unit)

    ordered = sorted(units)
    return pd.DataFrame({
        'units_key': range(1, len(ordered) + 1),
        'measure_units': ordered,
    })


def process_dim_unit(
    conn: duckdb.DuckDBPyConnection,
    frames: SilverFrames
) -> Dict[str, int]:
    dim = build_dim_unit(frames)
    inserted = replace_table(conn, gold_table('dim_unit_of_measure'), dim, DIM_UNIT_COLUMNS)
    return {'inserted': inserted}
