"""
Full warehouse run: CSV -> bronze -> silver -> quality gate -> gold -> export.

Each layer is tracked with ETLMetricsLogger; the DAG calls the layer
functions one task at a time, run_pipeline chains them for local runs.
"""

import argparse
import logging
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

from src.config import DATA_DIR, DUCKDB_PATH, PG_CONN_STRING
from src.monitoring.etl_metrics import ETLMetricsLogger
from src.quality import GoldValidator, QualityGate, SilverValidator
from src.storage.minio import backup_duckdb, export_gold_parquet
from src.storage.warehouse import get_duckdb_connection
from .bronze import load_bronze
from .gold import run_gold_pipeline
from .silver import run_silver_pipeline

logger = logging.getLogger(__name__)

PIPELINE_ID = 'tourism_pipeline'


def run_pipeline(
    data_dir: Union[str, Path] = DATA_DIR,
    db_path: str = DUCKDB_PATH,
    export: bool = False,
    pg_conn_string: Optional[str] = PG_CONN_STRING,
    run_id: Optional[str] = None
) -> Dict[str, Any]:
    """
    Run every layer in order against one DuckDB file.

    Raises the first layer error (BronzeLoadError, SilverLoadError,
    ValidationHardFailError, GoldBuildError).
    """
    run_id = run_id or datetime.now().strftime('manual__%Y%m%dT%H%M%S')
    metrics = ETLMetricsLogger(pg_conn_string)
    result: Dict[str, Any] = {'run_id': run_id}

    with get_duckdb_connection(db_path) as conn:
        with metrics.track(PIPELINE_ID, 'bronze', run_id) as m:
            result['bronze'] = load_bronze(conn, data_dir)
            m.record_result(result['bronze'])

        with metrics.track(PIPELINE_ID, 'silver', run_id) as m:
            result['silver'] = run_silver_pipeline(conn)
            m.rows_in = result['bronze'].get('total_rows', 0)
            m.record_result(result['silver'])

        with metrics.track(PIPELINE_ID, 'quality_silver', run_id):
            validation = SilverValidator().validate(conn)
            result['quality_silver'] = asdict(QualityGate().evaluate(validation))

        with metrics.track(PIPELINE_ID, 'gold', run_id) as m:
            result['gold'] = run_gold_pipeline(conn)
            m.rows_in = result['silver'].get('total_rows', 0)
            m.record_result(result['gold'])

        with metrics.track(PIPELINE_ID, 'quality_gold', run_id):
            validation = GoldValidator().validate(conn)
            result['quality_gold'] = asdict(QualityGate().evaluate(validation))

        if export:
            with metrics.track(PIPELINE_ID, 'export', run_id):
                result['export'] = export_gold_parquet(conn)

    if export:
        result['backup_object'] = backup_duckdb(db_path)

    return result


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='Load UN Tourism extracts into the DuckDB warehouse')
    parser.add_argument('--data-dir', default=str(DATA_DIR), help='Directory holding the CSV extracts')
    parser.add_argument('--db-path', default=DUCKDB_PATH, help='DuckDB warehouse file')
    parser.add_argument('--export', action='store_true', help='Export gold to Parquet and back up to MinIO')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    result = run_pipeline(args.data_dir, args.db_path, export=args.export)
    logger.info(f"Gold row counts: {result['gold'].get('row_counts')}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
