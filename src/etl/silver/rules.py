"""Per-table rule sets.

A TableRules bundles everything that differs between source tables: the
record family, the ordered normalization stages, the indicator overrides,
the country alias table and (SDG only) the geographic remap. Rule data lives
in src.config.normalization_config.
"""
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple

from src.config import normalization_config as cfg
from src.config.pipeline_config import FAMILY_SDG, FAMILY_TOURISM, SOURCE_TABLES
from .countries import CountryCanonicalizer
from .geo import GeoRemap

# Stage order per family. Geo remap runs first: it rewrites the raw code
# before anything else looks at it.
TOURISM_STAGES = ('text', 'numbers', 'country_code', 'indicator', 'country_name')
SDG_STAGES = ('geo_remap', 'country_name', 'time_period', 'numbers', 'text')


@dataclass(frozen=True)
class TableRules:
    """Normalization rules for one source table."""
    table: str
    family: str
    stages: Tuple[str, ...]
    countries: CountryCanonicalizer
    indicator_overrides: Mapping[str, str] = field(default_factory=dict)
    geo: GeoRemap = field(default_factory=GeoRemap)
    has_series_method: bool = False


_TOURISM_COUNTRIES: Optional[CountryCanonicalizer] = None
_SDG_COUNTRIES: Optional[CountryCanonicalizer] = None


def tourism_countries() -> CountryCanonicalizer:
    """ Shared canonicalizer for the tourism family """
    global _TOURISM_COUNTRIES
    if _TOURISM_COUNTRIES is None:
        _TOURISM_COUNTRIES = CountryCanonicalizer(cfg.TOURISM_COUNTRY_ALIASES)
    return _TOURISM_COUNTRIES


def sdg_countries() -> CountryCanonicalizer:
    """ Shared canonicalizer for the SDG family """
    global _SDG_COUNTRIES
    if _SDG_COUNTRIES is None:
        _SDG_COUNTRIES = CountryCanonicalizer(cfg.SDG_COUNTRY_ALIASES)
    return _SDG_COUNTRIES


def build_table_rules(
    table: str,
    indicator_overrides: Optional[Mapping[str, Mapping[str, str]]] = None,
    geo_remaps: Optional[Mapping[str, Mapping]] = None
) -> TableRules:
    """
    Build the rule set of one source table from rule data.

    Overrides/remaps default to the configured tables; pass custom mappings
    to test or audit alternative rule data.
    """
    if table not in SOURCE_TABLES:
        raise KeyError(f"Unknown source table: {table}")

    family, _, _, has_series = SOURCE_TABLES[table]
    if indicator_overrides is None:
        indicator_overrides = cfg.INDICATOR_OVERRIDES
    if geo_remaps is None:
        geo_remaps = cfg.GEO_REMAPS

    if family == FAMILY_SDG:
        return TableRules(
            table=table,
            family=family,
            stages=SDG_STAGES,
            countries=sdg_countries(),
            geo=GeoRemap.from_config(geo_remaps.get(table)),
        )

    return TableRules(
        table=table,
        family=FAMILY_TOURISM,
        stages=TOURISM_STAGES,
        countries=tourism_countries(),
        indicator_overrides=dict(indicator_overrides.get(table, {})),
        has_series_method=has_series,
    )


def build_rule_sets() -> Dict[str, TableRules]:
    """ Rule sets for every source table, in load order """
    return {table: build_table_rules(table) for table in SOURCE_TABLES}
