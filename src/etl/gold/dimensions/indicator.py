"""
dim_indicator dimension processor.
"""

import logging
from typing import Dict, Iterable, Mapping, Optional, Tuple

import duckdb
import pandas as pd

from src.config.normalization_config import INDICATOR_NAME_RULES
from src.config.pipeline_config import FAMILY_TOURISM, LOAD_ORDER, SOURCE_TABLES
from src.storage.warehouse import gold_table, replace_table
from ..sources import SilverFrames

logger = logging.getLogger(__name__)

DIM_INDICATOR_COLUMNS = [
    ('indicator_key', 'INTEGER'),
    ('indicator_id', 'VARCHAR'),
    ('indicator_name', 'VARCHAR'),
    ('source_table', 'VARCHAR'),
]

LEVEL_COLUMNS = ['indicator_level_1', 'indicator_level_2', 'indicator_level_3', 'indicator_level_4']


def indicator_base_name(levels: Iterable[Optional[str]]) -> Optional[str]:
    """ First non-null hierarchy level, upper-cased """
    for level in levels:
        if level is not None and not pd.isna(level):
            return str(level).upper()
    return None


def apply_name_rule(
    code: str,
    name: Optional[str],
    rules: Mapping[str, Tuple[str, str]] = INDICATOR_NAME_RULES
) -> Optional[str]:
    """
    Decorate an indicator name by its code.

    'suffix' appends text to the level name; 'replace' sets the name even
    when the source has no level text.
    """
    rule = rules.get(code)
    if rule is None:
        return name
    kind, text = rule
    if kind == 'replace':
        return text
    if name is None:
        return None
    return name + text


def build_dim_indicator(frames: SilverFrames) -> pd.DataFrame:
    """
    One row per indicator id; the first tourism table in load order that
    names an indicator provides its name and source_table.
    """
    seen: Dict[str, Tuple[str, str]] = {}
    for table in LOAD_ORDER:
        if SOURCE_TABLES[table][0] != FAMILY_TOURISM or table not in frames:
            continue
        df = frames[table]
        for row in df[['indicator_code'] + LEVEL_COLUMNS].itertuples(index=False):
            code = row[0]
            if code is None or code in seen:
                continue
            name = apply_name_rule(code, indicator_base_name(row[1:]))
            if name is None:
                continue
            seen[code] = (name, table.upper())

    dim = pd.DataFrame(
        [(code, name, source) for code, (name, source) in sorted(seen.items())],
        columns=['indicator_id', 'indicator_name', 'source_table'],
    )
    dim.insert(0, 'indicator_key', range(1, len(dim) + 1))
    return dim


def process_dim_indicator(
    conn: duckdb.DuckDBPyConnection,
    frames: SilverFrames
) -> Dict[str, int]:
    """ Rebuild gold.dim_indicator from the tourism silver tables """
    dim = build_dim_indicator(frames)
    inserted = replace_table(conn, gold_table('dim_indicator'), dim, DIM_INDICATOR_COLUMNS)
    return {'inserted': inserted}
