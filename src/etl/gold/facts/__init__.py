"""
Fact processing modules for the gold layer.
"""

from .tourism import build_tourism_fact, lookup_keys, process_tourism_facts, unpivot_years
from .sdg import build_sdg_fact, process_sdg_facts, sdg_indicator_label

__all__ = [
    'build_tourism_fact',
    'lookup_keys',
    'process_tourism_facts',
    'unpivot_years',
    'build_sdg_fact',
    'process_sdg_facts',
    'sdg_indicator_label',
]
