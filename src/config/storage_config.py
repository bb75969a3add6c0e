"""Storage configuration (MinIO)"""
import os

WAREHOUSE_BUCKET = os.getenv("MINIO_WAREHOUSE_BUCKET", "tourism-warehouse")

MINIO_CONFIG = {
    "endpoint": os.getenv("MINIO_ENDPOINT", "minio:9000"),
    "access_key": os.getenv("MINIO_ACCESS_KEY", "minioadmin"),
    "secret_key": os.getenv("MINIO_SECRET_KEY", "minioadmin"),
    "bucket": WAREHOUSE_BUCKET,
    "secure": os.getenv("MINIO_SECURE", "false").lower() == "true",
}

# DuckDB backups kept under dwh_backups/
BACKUP_KEEP_COUNT = int(os.getenv("DWH_BACKUP_KEEP_COUNT", "5"))
