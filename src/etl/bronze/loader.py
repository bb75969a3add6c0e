"""
Bronze loader: UN Tourism CSV extracts -> bronze.raw_<table>.

Every column is loaded as text; typing and cleanup belong to the silver layer.
"""

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import duckdb
import pandas as pd

from src.config.pipeline_config import CSV_ENCODINGS, DATA_DIR, LOAD_ORDER, SOURCE_TABLES
from src.etl.exceptions import BronzeLoadError, error_code
from src.storage.warehouse import (
    bronze_table, replace_raw_table, setup_schemas, table_exists, truncate_table,
)

logger = logging.getLogger(__name__)

_NON_IDENT_RE = re.compile(r'[^0-9A-Za-z]+')
_YEAR_RE = re.compile(r'^(19|20)[0-9]{2}$')


def sanitize_column(name: Any, position: int) -> str:
    """
    SQL-friendly column name from a CSV header.

    'Basic data' -> 'Basic_data', 'Unnamed: 5' -> 'Unnamed_5', '1995' -> 'year_1995'
    """
    text = str(name).replace('\ufeff', '').strip()
    if _YEAR_RE.match(text):
        return f"year_{text}"
    text = _NON_IDENT_RE.sub('_', text).strip('_')
    return text or f"Unnamed_{position}"


def sanitize_columns(columns: List[Any]) -> List[str]:
    """ Sanitize all headers, suffixing repeated names to keep them unique """
    seen: Dict[str, int] = {}
    names = []
    for position, column in enumerate(columns):
        name = sanitize_column(column, position)
        if name in seen:
            seen[name] += 1
            name = f"{name}_{seen[name]}"
        else:
            seen[name] = 0
        names.append(name)
    return names


def read_raw_csv(path: Union[str, Path], delimiter: str = ',') -> pd.DataFrame:
    """
    Read a source extract with every value as text.

    Tries each encoding in CSV_ENCODINGS in turn.
    """
    last_error: Optional[Exception] = None
    for encoding in CSV_ENCODINGS:
        try:
            df = pd.read_csv(
                path,
                sep=delimiter,
                quotechar='"',
                dtype=str,
                keep_default_na=False,
                encoding=encoding,
            )
            df.columns = sanitize_columns(list(df.columns))
            if encoding != CSV_ENCODINGS[0]:
                logger.warning(f"{Path(path).name} decoded as {encoding}")
            return df
        except UnicodeDecodeError as e:
            last_error = e
    raise last_error


def load_bronze_table(
    conn: duckdb.DuckDBPyConnection,
    table: str,
    data_dir: Union[str, Path] = DATA_DIR
) -> Dict[str, Any]:
    """
    Truncate and reload one bronze table from its CSV.

    Returns stats: {'table', 'rows', 'duration_seconds', 'skipped'}.
    """
    start = datetime.now()
    _, file_name, delimiter, _ = SOURCE_TABLES[table]
    path = Path(data_dir) / file_name

    if not path.exists():
        logger.warning(f"Source file not found, skipping {bronze_table(table)}: {path}")
        # Rows from an earlier run must not reach silver
        if table_exists(conn, bronze_table(table)):
            truncate_table(conn, bronze_table(table))
        return {'table': table, 'rows': 0, 'duration_seconds': 0.0, 'skipped': True}

    stage = 'read_csv'
    try:
        df = read_raw_csv(path, delimiter)
        stage = 'insert'
        rows = replace_raw_table(conn, bronze_table(table), df)
    except Exception as e:
        raise BronzeLoadError(
            f"Loading {bronze_table(table)} from {path.name} failed at {stage}: {e}",
            table=table,
            stage=stage,
            code=error_code(e),
            cause=e,
        ) from e

    duration = (datetime.now() - start).total_seconds()
    logger.info(f">> {bronze_table(table)}: {rows} rows in {duration:.2f}s")
    return {'table': table, 'rows': rows, 'duration_seconds': duration, 'skipped': False}


def load_bronze(
    conn: duckdb.DuckDBPyConnection,
    data_dir: Union[str, Path] = DATA_DIR,
    tables: Optional[List[str]] = None
) -> Dict[str, Any]:
    """
    Load every source extract (or the given subset) into the bronze schema.

    Missing files are skipped and listed in result['skipped']; any other
    failure stops the run with BronzeLoadError.
    """
    selected = LOAD_ORDER if tables is None else [t for t in LOAD_ORDER if t in tables]
    start_time = datetime.now()
    result = {
        'success': False,
        'start_time': start_time.isoformat(),
        'data_dir': str(data_dir),
        'tables': {},
        'skipped': [],
    }

    try:
        logger.info("=" * 60)
        logger.info(f"BRONZE LOAD START: {start_time}")
        logger.info("=" * 60)

        setup_schemas(conn)

        for table in selected:
            stats = load_bronze_table(conn, table, data_dir)
            if stats['skipped']:
                result['skipped'].append(table)
                continue
            result['tables'][table] = {
                'rows': stats['rows'],
                'duration_seconds': stats['duration_seconds'],
            }

        result['success'] = True
        result['total_rows'] = sum(t['rows'] for t in result['tables'].values())

    except BronzeLoadError as e:
        result['error'] = e.diagnostics()
        logger.error("ERROR OCCURRED DURING LOADING BRONZE LAYER")
        for key, value in e.diagnostics().items():
            logger.error(f"  {key}: {value}")
        raise

    finally:
        end_time = datetime.now()
        result['end_time'] = end_time.isoformat()
        result['duration_seconds'] = (end_time - start_time).total_seconds()

        logger.info("=" * 60)
        logger.info(f"BRONZE LOAD END: Duration {result['duration_seconds']:.2f}s")
        logger.info(f"Status: {'SUCCESS' if result['success'] else 'FAILED'}")
        logger.info("=" * 60)

    return result
