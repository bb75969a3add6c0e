"""
Silver layer: normalize raw bronze rows into typed, canonical records.

Structure:
├── cleaners.py     - Placeholder/text cleanup, decimal/int/year parsing
├── indicators.py   - Indicator-code canonicalization
├── countries.py    - Country-name canonicalization (aliases, mojibake repair)
├── geo.py          - SDG geographic-code remap
├── rules.py        - Per-table rule sets
├── normalizer.py   - Composed per-table normalization stages
└── pipeline.py     - Truncate-and-reload orchestrator
"""

from .cleaners import clean_text, parse_int, parse_number, parse_year_start
from .countries import CountryCanonicalizer, normalize_country
from .geo import GeoRemap
from .indicators import normalize_indicator
from .models import SdgRecord, TourismRecord
from .normalizer import Normalizer
from .pipeline import load_silver_table, run_silver_pipeline
from .rules import TableRules, build_rule_sets, build_table_rules

__all__ = [
    'clean_text',
    'parse_int',
    'parse_number',
    'parse_year_start',
    'CountryCanonicalizer',
    'normalize_country',
    'GeoRemap',
    'normalize_indicator',
    'SdgRecord',
    'TourismRecord',
    'Normalizer',
    'load_silver_table',
    'run_silver_pipeline',
    'TableRules',
    'build_rule_sets',
    'build_table_rules',
]
