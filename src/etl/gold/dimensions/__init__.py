"""
Dimension processing modules for the gold layer.
"""

from .country import build_dim_country, process_dim_country
from .indicator import apply_name_rule, build_dim_indicator, indicator_base_name, process_dim_indicator
from .year import build_dim_year, process_dim_year
from .unit import build_dim_unit, normalize_unit, process_dim_unit

__all__ = [
    'build_dim_country',
    'process_dim_country',
    'apply_name_rule',
    'build_dim_indicator',
    'indicator_base_name',
    'process_dim_indicator',
    'build_dim_year',
    'process_dim_year',
    'build_dim_unit',
    'normalize_unit',
    'process_dim_unit',
]
