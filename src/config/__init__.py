"""Configuration exports"""
from .database_config import DB_CONFIG, DUCKDB_PATH, PG_CONN_STRING
from .storage_config import MINIO_CONFIG
from .pipeline_config import DATA_DIR, LOAD_ORDER, SOURCE_TABLES, YEAR_COLUMNS
from .normalization_config import RULESET_VERSION

__all__ = [
    'DB_CONFIG',
    'DUCKDB_PATH',
    'PG_CONN_STRING',
    'MINIO_CONFIG',
    'DATA_DIR',
    'LOAD_ORDER',
    'SOURCE_TABLES',
    'YEAR_COLUMNS',
    'RULESET_VERSION',
]
