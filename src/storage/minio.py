"""
MinIO storage operations.

Warehouse bucket layout:
- parquet/run=<YYYYMMDD_HHMMSS>/<gold table>.parquet
- dwh_backups/tourism_<YYYYMMDD_HHMMSS>.duckdb
"""

import io
import logging
import os
from datetime import datetime
from typing import Any, Dict, List, Optional

import duckdb
import pyarrow.parquet as pq
from minio import Minio
from minio.error import S3Error

from src.config import MINIO_CONFIG
from src.config.database_config import GOLD_SCHEMA
from src.config.storage_config import BACKUP_KEEP_COUNT

logger = logging.getLogger(__name__)

PARQUET_PREFIX = 'parquet'
BACKUP_PREFIX = 'dwh_backups'


def get_minio_client() -> Minio:
    """Get MinIO client."""
    return Minio(
        MINIO_CONFIG["endpoint"],
        access_key=MINIO_CONFIG["access_key"],
        secret_key=MINIO_CONFIG["secret_key"],
        secure=MINIO_CONFIG["secure"]
    )


def ensure_bucket(client: Minio, bucket: str = None) -> str:
    """Create the warehouse bucket if missing."""
    bucket = bucket or MINIO_CONFIG["bucket"]
    if not client.bucket_exists(bucket):
        client.make_bucket(bucket)
        logger.info(f"Created bucket: {bucket}")
    return bucket


def _run_label() -> str:
    return datetime.now().strftime('%Y%m%d_%H%M%S')


def list_backups(client: Minio = None, bucket: str = None) -> List[str]:
    """DuckDB backups in the warehouse bucket, oldest first."""
    client = client or get_minio_client()
    bucket = bucket or MINIO_CONFIG["bucket"]
    objects = client.list_objects(bucket, prefix=f'{BACKUP_PREFIX}/')
    return sorted(o.object_name for o in objects if o.object_name.endswith('.duckdb'))


def backup_duckdb(
    local_path: str,
    client: Minio = None,
    keep: int = BACKUP_KEEP_COUNT
) -> Optional[str]:
    """Backup the DuckDB file to MinIO. Keeps the last `keep` backups."""
    if not os.path.exists(local_path):
        logger.warning(f"No DuckDB file to back up at {local_path}")
        return None

    try:
        client = client or get_minio_client()
        bucket = ensure_bucket(client)

        backup_object = f'{BACKUP_PREFIX}/tourism_{_run_label()}.duckdb'
        client.fput_object(bucket, backup_object, local_path)
        logger.info(f"Backed up DuckDB: {backup_object}")

        backups = list_backups(client, bucket)
        while len(backups) > keep:
            old = backups.pop(0)
            client.remove_object(bucket, old)
            logger.info(f"Removed old backup: {old}")

        return backup_object
    except S3Error as e:
        logger.error(f"Backup DuckDB error: {e}")
        return None


def export_table_parquet(
    conn: duckdb.DuckDBPyConnection,
    table: str,
    client: Minio,
    bucket: str,
    run_label: str
) -> Dict[str, Any]:
    """Export one gold table to Parquet and upload it."""
    arrow_table = conn.sql(f"SELECT * FROM {GOLD_SCHEMA}.{table}").to_arrow_table()

    buffer = io.BytesIO()
    pq.write_table(arrow_table, buffer, compression='snappy')
    data = buffer.getvalue()

    object_name = f'{PARQUET_PREFIX}/run={run_label}/{table}.parquet'
    client.put_object(
        bucket, object_name, io.BytesIO(data), len(data),
        content_type='application/octet-stream'
    )
    logger.info(f"Exported {arrow_table.num_rows} rows of {table} to {object_name}")
    return {'object': object_name, 'rows': arrow_table.num_rows, 'size': len(data)}


def export_gold_parquet(
    conn: duckdb.DuckDBPyConnection,
    client: Minio = None,
    run_label: str = None
) -> Dict[str, Any]:
    """Export every gold table to Parquet on MinIO."""
    run_label = run_label or _run_label()
    result = {'success': False, 'run_label': run_label, 'tables': {}}
    try:
        client = client or get_minio_client()
        bucket = ensure_bucket(client)

        tables = conn.execute("""
            SELECT table_name FROM information_schema.tables
            WHERE table_schema = ?
            ORDER BY table_name
        """, [GOLD_SCHEMA]).fetchall()

        for (table,) in tables:
            result['tables'][table] = export_table_parquet(conn, table, client, bucket, run_label)

        result['success'] = True
    except Exception as e:
        logger.error(f"Export Parquet error: {e}")
        result['error'] = str(e)
    return result


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    ensure_bucket(get_minio_client())
