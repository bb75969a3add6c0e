"""Metrics Logger - Log validation metrics to PostgreSQL."""

import json
import logging
import psycopg2

from .validators import ValidationResult
from .gates import GateResult

logger = logging.getLogger(__name__)


class MetricsLogger:
    """Logger for validation metrics to monitoring.quality_metrics table."""

    def __init__(self, pg_conn_string: str):
        self.conn_string = pg_conn_string

    def log(self, result: ValidationResult, gate: GateResult, dag_run_id: str = None) -> bool:
        """Log metrics to quality_metrics table. Returns True on success."""
        table_rows = {name: check.rows for name, check in result.tables.items()}
        try:
            with psycopg2.connect(self.conn_string) as conn:
                with conn.cursor() as cur:
                    cur.execute("""
                        INSERT INTO monitoring.quality_metrics (
                            validation_type, run_timestamp, dag_run_id, total_rows,
                            valid_rows, invalid_rows, valid_rate, duplicate_rate,
                            orphan_rate, issue_counts, table_rows, country_conflicts,
                            gate_status, gate_message
                        ) VALUES (%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """, (
                        result.validation_type, result.timestamp, dag_run_id,
                        result.total_rows, result.valid_rows,
                        result.total_rows - result.valid_rows,
                        result.valid_rate, result.duplicate_rate, result.orphan_rate,
                        json.dumps(result.issue_counts()),
                        json.dumps(table_rows),
                        json.dumps(result.country_conflicts),
                        gate.status, gate.message
                    ))
                conn.commit()
            return True
        except Exception as e:
            logger.warning(f"Failed to log metrics: {e}")
            return False
