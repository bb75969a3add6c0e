"""ETL Metrics Logger - Track pipeline performance."""

import json
import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

import psycopg2

from src.config.normalization_config import RULESET_VERSION

logger = logging.getLogger(__name__)


@dataclass
class ETLMetrics:
    """ETL stage metrics."""
    dag_id: str
    task_id: str
    dag_run_id: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    duration_seconds: float = 0.0
    rows_in: int = 0
    rows_out: int = 0
    tables_loaded: int = 0
    tables_skipped: int = 0
    status: str = 'running'
    error_message: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def throughput(self) -> float:
        """Rows per second."""
        if self.duration_seconds > 0:
            return self.rows_out / self.duration_seconds
        return 0.0

    def record_result(self, result: Dict[str, Any]) -> None:
        """
        Copy row counts from a bronze/silver/gold pipeline result dict.

        Layer results carry 'tables' ({table: {'rows': n}}) or 'row_counts'
        ({table: n}); skipped tables come from result['skipped'].
        """
        if 'tables' in result:
            rows = {name: stats.get('rows', 0) for name, stats in result['tables'].items()}
        else:
            rows = dict(result.get('row_counts', {}))

        self.rows_out = sum(rows.values())
        self.tables_loaded = len(rows)
        self.tables_skipped = len(result.get('skipped', []))
        self.metadata['table_rows'] = rows


class ETLMetricsLogger:
    """Logger for ETL metrics to monitoring.etl_metrics table."""

    def __init__(self, pg_conn_string: Optional[str]):
        self.conn_string = pg_conn_string

    def log(self, metrics: ETLMetrics) -> bool:
        """Log metrics to etl_metrics table. No-op without a connection string."""
        if not self.conn_string:
            logger.debug(f"No monitoring database configured, metrics of {metrics.task_id} not stored")
            return False
        try:
            with psycopg2.connect(self.conn_string) as conn:
                with conn.cursor() as cur:
                    cur.execute("""
                        INSERT INTO monitoring.etl_metrics (
                            dag_id, task_id, dag_run_id, status,
                            duration_seconds, rows_in, rows_out, tables_loaded,
                            tables_skipped, throughput, error_message,
                            metadata, started_at, completed_at
                        ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                    """, (
                        metrics.dag_id, metrics.task_id, metrics.dag_run_id,
                        metrics.status, metrics.duration_seconds,
                        metrics.rows_in, metrics.rows_out, metrics.tables_loaded,
                        metrics.tables_skipped, metrics.throughput,
                        metrics.error_message,
                        json.dumps(metrics.metadata, default=str) if metrics.metadata else None,
                        metrics.start_time, metrics.end_time
                    ))
                conn.commit()
            logger.info(f"ETL metrics logged: {metrics.task_id} - {metrics.rows_out} rows in {metrics.duration_seconds:.2f}s")
            return True
        except Exception as e:
            logger.warning(f"Failed to log ETL metrics: {e}")
            return False

    @contextmanager
    def track(self, dag_id: str, task_id: str, dag_run_id: str = None):
        """Context manager to track stage duration and metrics."""
        metrics = ETLMetrics(
            dag_id=dag_id,
            task_id=task_id,
            dag_run_id=dag_run_id,
            start_time=datetime.now(),
            metadata={'ruleset_version': RULESET_VERSION}
        )
        start = time.time()

        try:
            yield metrics
            metrics.status = 'success'
        except Exception as e:
            metrics.status = 'failed'
            metrics.error_message = str(e)
            diagnostics = getattr(e, 'diagnostics', None)
            if callable(diagnostics):
                metrics.metadata['error'] = diagnostics()
            raise
        finally:
            metrics.end_time = datetime.now()
            metrics.duration_seconds = time.time() - start
            self.log(metrics)
