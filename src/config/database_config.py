"""Database configuration"""
import os

# DuckDB file holding the bronze, silver and gold schemas
DUCKDB_PATH = os.getenv("DUCKDB_PATH", "/tmp/tourisminsight/tourism.duckdb")

# PostgreSQL is only used as the monitoring sink (monitoring.etl_metrics)
DB_CONFIG = {
    "host": os.getenv("DB_HOST", "postgres"),
    "port": int(os.getenv("DB_PORT", "5432")),
    "user": os.getenv("DB_USER", "tourism"),
    "password": os.getenv("DB_PASSWORD", "tourism"),
    "database": os.getenv("DB_NAME", "tourism"),
}

PG_CONN_STRING = os.getenv(
    "PG_CONN_STRING",
    "postgresql://{user}:{password}@{host}:{port}/{database}".format(**DB_CONFIG)
)

BRONZE_SCHEMA = "bronze"
SILVER_SCHEMA = "silver"
GOLD_SCHEMA = "gold"
