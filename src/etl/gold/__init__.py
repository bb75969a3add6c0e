"""
Gold layer: star schema built from the silver tables.

Structure:
├── pipeline.py          - Gold build orchestrator
├── sources.py           - Silver inputs
├── cache.py             - Dimension caches
├── dimensions/          - Dimension processors
│   ├── country.py      - dim_country
│   ├── indicator.py    - dim_indicator
│   ├── year.py         - dim_year
│   └── unit.py         - dim_unit_of_measure
└── facts/              - Fact processors
    ├── tourism.py      - fact_domestic/inbound/outbound_tourism, fact_tourism_industries
    └── sdg.py          - fact_sdg
"""

from .pipeline import run_gold_pipeline
from .cache import init_dimension_caches
from .sources import read_silver_frames
from .dimensions import (
    process_dim_country,
    process_dim_indicator,
    process_dim_year,
    process_dim_unit,
)
from .facts import process_tourism_facts, process_sdg_facts

__all__ = [
    'run_gold_pipeline',
    'init_dimension_caches',
    'read_silver_frames',
    'process_dim_country',
    'process_dim_indicator',
    'process_dim_year',
    'process_dim_unit',
    'process_tourism_facts',
    'process_sdg_facts',
]
