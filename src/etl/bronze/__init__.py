"""Bronze layer exports"""
from .loader import load_bronze, load_bronze_table, read_raw_csv, sanitize_column, sanitize_columns

__all__ = [
    'load_bronze',
    'load_bronze_table',
    'read_raw_csv',
    'sanitize_column',
    'sanitize_columns',
]
