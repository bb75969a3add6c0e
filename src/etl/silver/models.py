"""Clean record types produced by the silver normalizer."""
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional

from src.config.pipeline_config import YEARS

SDG_SILVER_COLUMNS = [
    'country_code', 'country_name', 'time_period', 'value',
    'series_description', 'nature', 'units', 'source',
]


@dataclass(frozen=True)
class TourismRecord:
    """Cleaned row of a wide tourism extract (domestic/inbound/outbound/industries)."""
    country_code: Optional[int] = None
    indicator_code: Optional[str] = None
    country_name: Optional[str] = None
    indicator_level_1: Optional[str] = None
    indicator_level_2: Optional[str] = None
    indicator_level_3: Optional[str] = None
    indicator_level_4: Optional[str] = None
    units: Optional[str] = None
    series_method: Optional[str] = None
    years: Dict[int, Optional[Decimal]] = field(default_factory=dict)

    def year_value(self, year: int) -> Optional[Decimal]:
        return self.years.get(year)

    def to_row(self) -> Dict[str, Any]:
        """ Flat silver row with one year_YYYY column per year """
        row = {
            'country_code': self.country_code,
            'indicator_code': self.indicator_code,
            'country_name': self.country_name,
            'indicator_level_1': self.indicator_level_1,
            'indicator_level_2': self.indicator_level_2,
            'indicator_level_3': self.indicator_level_3,
            'indicator_level_4': self.indicator_level_4,
            'units': self.units,
            'series_method': self.series_method,
        }
        for year in YEARS:
            row[f'year_{year}'] = self.years.get(year)
        return row


@dataclass(frozen=True)
class SdgRecord:
    """Cleaned row of an SDG indicator extract (long format, one year per row)."""
    country_code: Optional[int] = None
    country_name: Optional[str] = None
    time_period: Optional[date] = None
    value: Optional[Decimal] = None
    series_description: Optional[str] = None
    nature: Optional[str] = None
    units: Optional[str] = None
    source: Optional[str] = None

    def to_row(self) -> Dict[str, Any]:
        return {column: getattr(self, column) for column in SDG_SILVER_COLUMNS}
