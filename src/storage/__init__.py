"""Storage module exports"""
from .warehouse import (
    get_duckdb_connection, setup_schemas, read_table, replace_table,
    insert_dataframe, truncate_table, table_exists, table_counts
)
from .minio import get_minio_client, backup_duckdb, export_gold_parquet, list_backups

__all__ = [
    'get_duckdb_connection',
    'setup_schemas',
    'read_table',
    'replace_table',
    'insert_dataframe',
    'truncate_table',
    'table_exists',
    'table_counts',
    'get_minio_client',
    'backup_duckdb',
    'export_gold_parquet',
    'list_backups',
]
