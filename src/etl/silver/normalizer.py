"""Silver normalizer: one raw record in, one clean record out.

Each table's normalization is an ordered list of stages taken from
rules.stages. A stage reads the raw record and fills its part of the output;
stages never raise on bad data, they leave the field as None.
"""
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Union

from src.config.pipeline_config import (
    FAMILY_SDG,
    TOURISM_CODE_COLUMN,
    TOURISM_COUNTRY_COLUMN,
    TOURISM_INDICATOR_COLUMN,
    TOURISM_LEVEL_COLUMNS,
    TOURISM_SERIES_COLUMN,
    YEARS,
)
from .cleaners import clean_text, parse_int, parse_number, parse_year_start
from .countries import normalize_country
from .indicators import normalize_indicator
from .models import SdgRecord, TourismRecord
from .rules import TableRules, build_table_rules


RawRecord = Mapping[str, Any]
CleanRecord = Union[TourismRecord, SdgRecord]
Stage = Callable[[RawRecord, Dict[str, Any], TableRules], None]


# =============================================================================
# TOURISM STAGES
# =============================================================================

def _tourism_text(raw: RawRecord, out: Dict[str, Any], rules: TableRules) -> None:
    for level, column in enumerate(TOURISM_LEVEL_COLUMNS, start=1):
        out[f'indicator_level_{level}'] = clean_text(raw.get(column))
    out['units'] = clean_text(raw.get('Units'))
    if rules.has_series_method:
        out['series_method'] = clean_text(raw.get(TOURISM_SERIES_COLUMN))


def _tourism_numbers(raw: RawRecord, out: Dict[str, Any], rules: TableRules) -> None:
    out['years'] = {year: parse_number(raw.get(f'year_{year}')) for year in YEARS}


def _tourism_country_code(raw: RawRecord, out: Dict[str, Any], rules: TableRules) -> None:
    out['country_code'] = parse_int(raw.get(TOURISM_CODE_COLUMN))


def _tourism_indicator(raw: RawRecord, out: Dict[str, Any], rules: TableRules) -> None:
    out['indicator_code'] = normalize_indicator(
        raw.get(TOURISM_INDICATOR_COLUMN), rules.indicator_overrides
    )


def _tourism_country_name(raw: RawRecord, out: Dict[str, Any], rules: TableRules) -> None:
    out['country_name'] = normalize_country(raw.get(TOURISM_COUNTRY_COLUMN), rules.countries)


# =============================================================================
# SDG STAGES
# =============================================================================

def _sdg_geo_remap(raw: RawRecord, out: Dict[str, Any], rules: TableRules) -> None:
    code, forced_name = rules.geo.apply(parse_int(raw.get('GeoAreaCode')))
    out['country_code'] = code
    if forced_name is not None:
        out['country_name'] = forced_name


def _sdg_country_name(raw: RawRecord, out: Dict[str, Any], rules: TableRules) -> None:
    # A name forced by the geo remap wins over the alias table
    if out.get('country_name') is None:
        name = clean_text(raw.get('GeoAreaName'))
        out['country_name'] = normalize_country(name.upper() if name else None, rules.countries)


def _sdg_time_period(raw: RawRecord, out: Dict[str, Any], rules: TableRules) -> None:
    out['time_period'] = parse_year_start(raw.get('TimePeriod'))


def _sdg_numbers(raw: RawRecord, out: Dict[str, Any], rules: TableRules) -> None:
    out['value'] = parse_number(raw.get('Value'))


def _sdg_text(raw: RawRecord, out: Dict[str, Any], rules: TableRules) -> None:
    out['series_description'] = clean_text(raw.get('SeriesDescription'))
    out['nature'] = clean_text(raw.get('Nature'))
    out['units'] = clean_text(raw.get('Units'))
    out['source'] = clean_text(raw.get('Source'))


TOURISM_STAGE_FUNCS: Dict[str, Stage] = {
    'text': _tourism_text,
    'numbers': _tourism_numbers,
    'country_code': _tourism_country_code,
    'indicator': _tourism_indicator,
    'country_name': _tourism_country_name,
}

SDG_STAGE_FUNCS: Dict[str, Stage] = {
    'geo_remap': _sdg_geo_remap,
    'country_name': _sdg_country_name,
    'time_period': _sdg_time_period,
    'numbers': _sdg_numbers,
    'text': _sdg_text,
}


class Normalizer:
    """Composed normalization pipeline for one source table."""

    def __init__(self, rules: TableRules):
        self.rules = rules
        if rules.family == FAMILY_SDG:
            funcs, self._record_type = SDG_STAGE_FUNCS, SdgRecord
        else:
            funcs, self._record_type = TOURISM_STAGE_FUNCS, TourismRecord

        unknown = [name for name in rules.stages if name not in funcs]
        if unknown:
            raise ValueError(f"Unknown stages for {rules.table}: {unknown}")
        self._stages: List[Stage] = [funcs[name] for name in rules.stages]

    @classmethod
    def for_table(cls, table: str) -> 'Normalizer':
        return cls(build_table_rules(table))

    @property
    def table(self) -> str:
        return self.rules.table

    def normalize(self, raw: RawRecord) -> CleanRecord:
        out: Dict[str, Any] = {}
        for stage in self._stages:
            stage(raw, out, self.rules)
        return self._record_type(**out)

    __call__ = normalize

    def normalize_all(self, records: Iterable[RawRecord]) -> Iterator[CleanRecord]:
        for raw in records:
            yield self.normalize(raw)
