"""
Silver ETL Pipeline: bronze.raw_<table> -> silver.<table>.

Every run truncates and fully reloads each silver table from the current
bronze rows, table by table in load order.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import duckdb
import pandas as pd

from src.config.pipeline_config import LOAD_ORDER
from src.etl.exceptions import SilverLoadError, error_code
from src.storage.warehouse import (
    bronze_table,
    insert_dataframe,
    read_table,
    setup_schemas,
    silver_schema_of,
    silver_table,
    table_exists,
    truncate_table,
)
from .normalizer import Normalizer

logger = logging.getLogger(__name__)


def _read_bronze(conn: duckdb.DuckDBPyConnection, table: str) -> List[Dict[str, Any]]:
    """ Raw rows of one bronze table as column -> text mappings """
    full_name = bronze_table(table)
    if not table_exists(conn, full_name):
        logger.warning(f"{full_name} does not exist, loading an empty table")
        return []
    df = read_table(conn, full_name)
    return df.astype(object).where(df.notna(), None).to_dict('records')


def load_silver_table(conn: duckdb.DuckDBPyConnection, table: str) -> Dict[str, Any]:
    """
    Truncate and reload one silver table.

    Returns stats: {'table', 'rows', 'start_time', 'end_time', 'duration_seconds'}.
    Errors propagate wrapped in SilverLoadError with the failing stage.
    """
    start = datetime.now()
    stage = 'rules'
    try:
        normalizer = Normalizer.for_table(table)

        stage = 'truncate'
        truncate_table(conn, silver_table(table))

        stage = 'read_bronze'
        raw_rows = _read_bronze(conn, table)

        stage = 'normalize'
        clean_rows = [record.to_row() for record in normalizer.normalize_all(raw_rows)]

        stage = 'insert'
        columns = silver_schema_of(table)
        df = pd.DataFrame(clean_rows, columns=[name for name, _ in columns], dtype=object)
        inserted = insert_dataframe(conn, silver_table(table), df, columns)

    except SilverLoadError:
        raise
    except Exception as e:
        raise SilverLoadError(
            f"Loading {silver_table(table)} failed at {stage}: {e}",
            table=table,
            stage=stage,
            code=error_code(e),
            cause=e,
        ) from e

    end = datetime.now()
    duration = (end - start).total_seconds()
    logger.info(
        f">> {silver_table(table)}: {inserted} rows, "
        f"{start:%H:%M:%S} -> {end:%H:%M:%S} ({duration:.2f}s)"
    )
    return {
        'table': table,
        'rows': inserted,
        'start_time': start.isoformat(),
        'end_time': end.isoformat(),
        'duration_seconds': duration,
    }


def run_silver_pipeline(
    conn: duckdb.DuckDBPyConnection,
    tables: Optional[List[str]] = None
) -> Dict[str, Any]:
    """
    Run the silver load for every table (or the given subset) in load order.

    On the first failure the remaining tables are skipped, full diagnostics
    are logged and SilverLoadError is raised.
    """
    selected = LOAD_ORDER if tables is None else [t for t in LOAD_ORDER if t in tables]
    unknown = sorted(set(tables or []) - set(LOAD_ORDER))
    if unknown:
        raise SilverLoadError(f"Unknown silver tables: {unknown}", stage='setup')

    start_time = datetime.now()
    result = {
        'success': False,
        'start_time': start_time.isoformat(),
        'tables': {},
    }

    try:
        logger.info("=" * 60)
        logger.info(f"SILVER LOAD START: {start_time}")
        logger.info("=" * 60)

        try:
            setup_schemas(conn)
        except Exception as e:
            raise SilverLoadError(
                f"Schema setup failed: {e}", stage='setup', code=error_code(e), cause=e
            ) from e

        for table in selected:
            logger.info(f"Loading table: {silver_table(table)}")
            stats = load_silver_table(conn, table)
            result['tables'][table] = {
                key: stats[key] for key in ('rows', 'start_time', 'end_time', 'duration_seconds')
            }

        result['success'] = True
        result['total_rows'] = sum(t['rows'] for t in result['tables'].values())

    except SilverLoadError as e:
        result['error'] = e.diagnostics()
        logger.error("ERROR OCCURRED DURING LOADING SILVER LAYER")
        for key, value in e.diagnostics().items():
            logger.error(f"  {key}: {value}")
        logger.error(f"Silver load aborted at {e.table}", exc_info=True)
        raise

    finally:
        end_time = datetime.now()
        result['end_time'] = end_time.isoformat()
        result['duration_seconds'] = (end_time - start_time).total_seconds()

        logger.info("=" * 60)
        logger.info(f"SILVER LOAD END: Duration {result['duration_seconds']:.2f}s")
        logger.info(f"Status: {'SUCCESS' if result['success'] else 'FAILED'}")
        logger.info("=" * 60)

    return result
