"""Health Check - Check source extracts, DuckDB, MinIO, PostgreSQL status."""

import os
import logging
import signal
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Optional, Union
from contextlib import contextmanager

from src.config import DATA_DIR, DUCKDB_PATH, MINIO_CONFIG, PG_CONN_STRING, SOURCE_TABLES
from src.config.database_config import GOLD_SCHEMA, SILVER_SCHEMA

logger = logging.getLogger(__name__)

TIMEOUT_SECONDS = 10


@contextmanager
def timeout(seconds: int):
    """Context manager for timeout protection."""
    def handler(signum, frame):
        raise TimeoutError(f"Operation timed out after {seconds}s")

    old_handler = signal.signal(signal.SIGALRM, handler)
    signal.alarm(seconds)
    try:
        yield
    finally:
        signal.alarm(0)
        signal.signal(signal.SIGALRM, old_handler)


class HealthChecker:
    """Check health of all services."""

    def __init__(
        self,
        duckdb_path: str = DUCKDB_PATH,
        pg_conn: Optional[str] = PG_CONN_STRING,
        minio_config: Optional[Dict[str, Any]] = None,
        data_dir: Union[str, Path] = DATA_DIR
    ):
        self.duckdb_path = duckdb_path
        self.pg_conn = pg_conn
        self.minio_config = minio_config or MINIO_CONFIG
        self.data_dir = Path(data_dir)

    def check_extracts(self) -> Dict[str, Any]:
        """Check which source CSV extracts are present in the data directory."""
        missing = [
            table for table, (_, file_name, _, _) in SOURCE_TABLES.items()
            if not (self.data_dir / file_name).is_file()
        ]
        if len(missing) == len(SOURCE_TABLES):
            status = 'unhealthy'
        elif missing:
            status = 'degraded'
        else:
            status = 'healthy'

        return {
            'status': status,
            'data_dir': str(self.data_dir),
            'present': len(SOURCE_TABLES) - len(missing),
            'missing': missing,
        }

    def check_duckdb(self) -> Dict[str, Any]:
        """Check the warehouse file opens and the silver/gold schemas hold data."""
        if not os.path.exists(self.duckdb_path):
            return {'status': 'degraded', 'file_exists': False}
        try:
            with timeout(TIMEOUT_SECONDS):
                import duckdb

                with duckdb.connect(self.duckdb_path, read_only=True) as conn:
                    rows = conn.execute("""
                        SELECT table_schema, COUNT(*)
                        FROM information_schema.tables
                        GROUP BY table_schema
                    """).fetchall()
                tables = {schema: count for schema, count in rows}

                status = 'healthy'
                if not tables.get(SILVER_SCHEMA) or not tables.get(GOLD_SCHEMA):
                    status = 'degraded'

                return {
                    'status': status,
                    'file_exists': True,
                    'size_mb': round(os.path.getsize(self.duckdb_path) / 1024 / 1024, 2),
                    'tables_per_schema': tables
                }
        except TimeoutError:
            logger.error("DuckDB health check timed out")
            return {'status': 'unhealthy', 'error': 'Connection timeout'}
        except Exception as e:
            logger.error(f"DuckDB health check failed: {e}")
            return {'status': 'unhealthy', 'error': str(e)}

    def check_minio(self) -> Dict[str, Any]:
        """Check MinIO connection and warehouse bucket status."""
        try:
            with timeout(TIMEOUT_SECONDS):
                from minio import Minio

                client = Minio(
                    self.minio_config['endpoint'],
                    access_key=self.minio_config['access_key'],
                    secret_key=self.minio_config['secret_key'],
                    secure=self.minio_config['secure']
                )

                bucket = self.minio_config['bucket']
                buckets = [b.name for b in client.list_buckets()]
                dwh_exists = bucket in buckets

                dwh_size = 0
                if dwh_exists:
                    for obj in client.list_objects(bucket, recursive=True):
                        dwh_size += obj.size

                return {
                    'status': 'healthy' if dwh_exists else 'degraded',
                    'buckets': buckets,
                    'warehouse_exists': dwh_exists,
                    'warehouse_size_mb': round(dwh_size / 1024 / 1024, 2)
                }
        except TimeoutError:
            logger.error("MinIO health check timed out")
            return {'status': 'unhealthy', 'error': 'Connection timeout'}
        except Exception as e:
            logger.error(f"MinIO health check failed: {e}")
            return {'status': 'unhealthy', 'error': str(e)}

    def check_postgres(self) -> Dict[str, Any]:
        """Check the PostgreSQL monitoring database."""
        if not self.pg_conn:
            return {'status': 'degraded', 'error': 'No monitoring database configured'}
        try:
            with timeout(TIMEOUT_SECONDS):
                import psycopg2
                with psycopg2.connect(self.pg_conn, connect_timeout=5) as conn:
                    with conn.cursor() as cur:
                        cur.execute("SELECT version()")
                        version = cur.fetchone()[0].split(',')[0]

                        cur.execute("SELECT COUNT(*) FROM monitoring.etl_metrics")
                        metric_rows = cur.fetchone()[0]

                return {
                    'status': 'healthy',
                    'version': version,
                    'etl_metrics_rows': metric_rows
                }
        except TimeoutError:
            logger.error("PostgreSQL health check timed out")
            return {'status': 'unhealthy', 'error': 'Connection timeout'}
        except Exception as e:
            logger.warning(f"PostgreSQL health check failed: {e}")
            return {'status': 'degraded', 'error': str(e)}

    def check_all(self) -> Dict[str, Any]:
        """Run all health checks."""
        result = {
            'timestamp': datetime.now().isoformat(),
            'services': {
                'extracts': self.check_extracts(),
                'duckdb': self.check_duckdb(),
                'minio': self.check_minio(),
                'postgres': self.check_postgres(),
            }
        }

        # Overall status: unhealthy > degraded > healthy
        statuses = [s.get('status') for s in result['services'].values()]
        if 'unhealthy' in statuses:
            result['overall'] = 'unhealthy'
        elif 'degraded' in statuses:
            result['overall'] = 'degraded'
        else:
            result['overall'] = 'healthy'

        return result


def check_all_services() -> Dict[str, Any]:
    """Convenience function to check all services."""
    return HealthChecker().check_all()
