"""Data Quality configuration"""
import os

# Silver thresholds (from env vars)
DQ_MIN_ROW_COUNT = int(os.getenv("DQ_MIN_ROW_COUNT", "1"))
DQ_MAX_DUPLICATE_RATE = float(os.getenv("DQ_MAX_DUPLICATE_RATE", "0.50"))
DQ_SUCCESS_THRESHOLD = float(os.getenv("DQ_SUCCESS_THRESHOLD", "0.90"))
DQ_WARNING_THRESHOLD = float(os.getenv("DQ_WARNING_THRESHOLD", "0.70"))

# Cross-table country code conflicts tolerated before a hard fail
DQ_MAX_COUNTRY_CONFLICTS = int(os.getenv("DQ_MAX_COUNTRY_CONFLICTS", "10"))

# Gold: share of fact rows with an unresolved dimension key
DQ_MAX_ORPHAN_FACT_RATE = float(os.getenv("DQ_MAX_ORPHAN_FACT_RATE", "0.05"))
