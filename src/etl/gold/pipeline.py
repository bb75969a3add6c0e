"""
Gold Pipeline: silver tables -> star schema.
Dimensions first, then facts resolved through the dimension caches.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict

import duckdb

from src.config.database_config import GOLD_SCHEMA
from src.etl.exceptions import GoldBuildError, error_code
from src.storage.warehouse import setup_schemas, table_counts
from .cache import init_dimension_caches
from .dimensions import (
    process_dim_country,
    process_dim_indicator,
    process_dim_unit,
    process_dim_year,
)
from .facts import process_sdg_facts, process_tourism_facts
from .sources import read_silver_frames

logger = logging.getLogger(__name__)


def _step(name: str, func: Callable, *args) -> Any:
    """ Run one build step, wrapping failures with the step name """
    try:
        return func(*args)
    except GoldBuildError:
        raise
    except Exception as e:
        raise GoldBuildError(
            f"Gold build failed at {name}: {e}",
            table=name,
            stage='gold',
            code=error_code(e),
            cause=e,
        ) from e


def run_gold_pipeline(conn: duckdb.DuckDBPyConnection) -> Dict[str, Any]:
    """
    Rebuild every gold table (full replace).

    Flow:
    1. Read all silver tables
    2. Build dim_country, dim_indicator, dim_year, dim_unit_of_measure
    3. Load dimension caches
    4. Build the tourism facts and fact_sdg
    """
    start_time = datetime.now()
    result = {
        'success': False,
        'start_time': start_time.isoformat(),
        'stats': {},
    }

    try:
        logger.info("=" * 60)
        logger.info(f"GOLD BUILD START: {start_time}")
        logger.info("=" * 60)

        _step('setup', setup_schemas, conn)
        frames = _step('read_silver', read_silver_frames, conn)

        logger.info("Processing dimensions...")
        result['stats']['dim_country'] = _step('dim_country', process_dim_country, conn, frames)
        result['stats']['dim_indicator'] = _step('dim_indicator', process_dim_indicator, conn, frames)
        result['stats']['dim_year'] = _step('dim_year', process_dim_year, conn, frames)
        result['stats']['dim_unit_of_measure'] = _step('dim_unit_of_measure', process_dim_unit, conn, frames)

        caches = _step('caches', init_dimension_caches, conn)

        logger.info("Processing facts...")
        result['stats'].update(_step('tourism_facts', process_tourism_facts, conn, frames, caches))
        result['stats']['fact_sdg'] = _step('fact_sdg', process_sdg_facts, conn, frames, caches)

        result['row_counts'] = table_counts(conn, GOLD_SCHEMA)
        result['success'] = True

    except GoldBuildError as e:
        result['error'] = e.diagnostics()
        logger.error(f"Gold build failed: {e}", exc_info=True)
        raise

    finally:
        end_time = datetime.now()
        result['end_time'] = end_time.isoformat()
        result['duration_seconds'] = (end_time - start_time).total_seconds()

        logger.info("=" * 60)
        logger.info(f"GOLD BUILD END: Duration {result['duration_seconds']:.2f}s")
        logger.info(f"Status: {'SUCCESS' if result['success'] else 'FAILED'}")
        logger.info("=" * 60)

    return result
