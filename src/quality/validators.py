"""Data Quality Validators for the silver and gold layers."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

import duckdb

from src.config import quality_config
from src.config.pipeline_config import FACT_SOURCES, FAMILY_SDG, LOAD_ORDER, SOURCE_TABLES
from src.storage.warehouse import gold_table, silver_table, table_exists

logger = logging.getLogger(__name__)

# Allowed characters of a canonical country name
COUNTRY_NAME_PATTERN = r"^[A-Z0-9 _'-]+$"

TOURISM_TEXT_COLUMNS = [
    'country_name', 'indicator_level_1', 'indicator_level_2',
    'indicator_level_3', 'indicator_level_4', 'units', 'series_method',
]
SDG_TEXT_COLUMNS = ['country_name', 'series_description', 'nature', 'units', 'source']

TOURISM_KEY_COLUMNS = ['country_code', 'indicator_code', 'units', 'series_method']
SDG_KEY_COLUMNS = ['country_code', 'time_period', 'series_description', 'units']


@dataclass
class ValidationConfig:
    """Validation thresholds."""
    min_row_count: int = quality_config.DQ_MIN_ROW_COUNT
    hard_fail_duplicate_rate: float = quality_config.DQ_MAX_DUPLICATE_RATE
    success_threshold: float = quality_config.DQ_SUCCESS_THRESHOLD
    warning_threshold: float = quality_config.DQ_WARNING_THRESHOLD
    max_country_conflicts: int = quality_config.DQ_MAX_COUNTRY_CONFLICTS
    max_orphan_fact_rate: float = quality_config.DQ_MAX_ORPHAN_FACT_RATE


@dataclass
class TableCheck:
    """Checks of one table."""
    table: str
    rows: int = 0
    duplicate_rows: int = 0
    untrimmed_rows: int = 0
    missing_key_rows: int = 0
    strange_names: List[str] = field(default_factory=list)
    orphan_rows: int = 0


@dataclass
class ValidationResult:
    """Validation result."""
    validation_type: str  # 'silver' or 'gold'
    timestamp: datetime
    total_rows: int
    valid_rows: int
    valid_rate: float
    duplicate_rate: float = 0.0
    tables: Dict[str, TableCheck] = field(default_factory=dict)
    # Silver: same country code with different names across tables
    country_conflicts: List[Dict[str, Any]] = field(default_factory=list)
    # Gold: fact rows whose dimension keys did not resolve
    orphan_rows: int = 0
    orphan_rate: float = 0.0

    def issue_counts(self) -> Dict[str, int]:
        """ Totals per check, for logs and the metrics table """
        return {
            'duplicate_rows': sum(t.duplicate_rows for t in self.tables.values()),
            'untrimmed_rows': sum(t.untrimmed_rows for t in self.tables.values()),
            'missing_key_rows': sum(t.missing_key_rows for t in self.tables.values()),
            'strange_names': sum(len(t.strange_names) for t in self.tables.values()),
            'country_conflicts': len(self.country_conflicts),
            'orphan_rows': self.orphan_rows,
        }


def _is_sdg(table: str) -> bool:
    return SOURCE_TABLES[table][0] == FAMILY_SDG


class SilverValidator:
    """Validator for silver tables after a reload."""

    def __init__(self, config: ValidationConfig = None):
        self.config = config or ValidationConfig()

    def check_table(self, conn: duckdb.DuckDBPyConnection, table: str) -> TableCheck:
        name = silver_table(table)
        check = TableCheck(table=table)
        if not table_exists(conn, name):
            return check

        text_columns = SDG_TEXT_COLUMNS if _is_sdg(table) else TOURISM_TEXT_COLUMNS
        key_columns = SDG_KEY_COLUMNS if _is_sdg(table) else TOURISM_KEY_COLUMNS
        untrimmed = ' OR '.join(f"{c} != TRIM({c})" for c in text_columns)
        missing = 'country_code IS NULL' if _is_sdg(table) else 'country_code IS NULL OR indicator_code IS NULL'
        keys = ', '.join(key_columns)

        row = conn.execute(f"""
            SELECT
                COUNT(*),
                COUNT(*) - (SELECT COUNT(*) FROM (SELECT DISTINCT {keys} FROM {name})),
                COUNT(CASE WHEN {untrimmed} THEN 1 END),
                COUNT(CASE WHEN {missing} THEN 1 END)
            FROM {name}
        """).fetchone()
        check.rows, check.duplicate_rows, check.untrimmed_rows, check.missing_key_rows = (
            int(value or 0) for value in row
        )

        strange = conn.execute(f"""
            SELECT DISTINCT country_name FROM {name}
            WHERE country_name IS NOT NULL
              AND NOT regexp_matches(country_name, ?)
            ORDER BY country_name
        """, [COUNTRY_NAME_PATTERN]).fetchall()
        check.strange_names = [value for (value,) in strange]
        return check

    def country_conflicts(self, conn: duckdb.DuckDBPyConnection) -> List[Dict[str, Any]]:
        """ Codes mapped to different country names across silver tables """
        selects = [
            f"SELECT country_code, country_name, '{table}' AS source_table FROM {silver_table(table)}"
            for table in LOAD_ORDER
            if table_exists(conn, silver_table(table))
        ]
        if not selects:
            return []

        rows = conn.execute(f"""
            WITH pairs AS ({' UNION ALL '.join(selects)})
            SELECT
                country_code,
                list(DISTINCT country_name) AS names,
                list(DISTINCT source_table) AS tables
            FROM pairs
            WHERE country_code IS NOT NULL AND country_name IS NOT NULL
            GROUP BY country_code
            HAVING COUNT(DISTINCT country_name) > 1
            ORDER BY country_code
        """).fetchall()
        return [
            {'country_code': int(code), 'names': sorted(names), 'tables': sorted(tables)}
            for code, names, tables in rows
        ]

    def validate(self, conn: duckdb.DuckDBPyConnection, tables: Optional[List[str]] = None) -> ValidationResult:
        """Run all silver checks."""
        selected = tables or LOAD_ORDER
        checks = {table: self.check_table(conn, table) for table in selected}

        total = sum(c.rows for c in checks.values())
        duplicates = sum(c.duplicate_rows for c in checks.values())
        missing = sum(c.missing_key_rows for c in checks.values())
        valid = total - missing

        result = ValidationResult(
            validation_type='silver',
            timestamp=datetime.now(),
            total_rows=total,
            valid_rows=valid,
            valid_rate=valid / total if total else 0.0,
            duplicate_rate=duplicates / total if total else 0.0,
            tables=checks,
            country_conflicts=self.country_conflicts(conn),
        )

        for conflict in result.country_conflicts:
            logger.warning(
                f"Country_Conflict: code {conflict['country_code']} -> {conflict['names']}"
            )
        logger.info(
            f"Silver validation: {total} rows, {result.valid_rate:.1%} valid, "
            f"{len(result.country_conflicts)} country conflicts"
        )
        return result


class GoldValidator:
    """Foreign key integrity of the gold fact tables."""

    FACT_KEYS = {
        **{fact: ['country_key', 'indicator_key', 'year_key', 'units_key'] for fact in FACT_SOURCES},
        'fact_sdg': ['country_key', 'year_key', 'units_key'],
    }

    def __init__(self, config: ValidationConfig = None):
        self.config = config or ValidationConfig()

    def check_fact(self, conn: duckdb.DuckDBPyConnection, fact_table: str) -> TableCheck:
        name = gold_table(fact_table)
        check = TableCheck(table=fact_table)
        if not table_exists(conn, name):
            return check

        dims = {
            'country_key': ('dim_country', 'country_key'),
            'indicator_key': ('dim_indicator', 'indicator_key'),
            'year_key': ('dim_year', 'year_key'),
            'units_key': ('dim_unit_of_measure', 'units_key'),
        }
        joins = []
        orphans = []
        for i, key in enumerate(self.FACT_KEYS[fact_table]):
            dim_table, dim_key = dims[key]
            joins.append(f"LEFT JOIN {gold_table(dim_table)} d{i} ON d{i}.{dim_key} = f.{key}")
            orphans.append(f"d{i}.{dim_key} IS NULL")

        row = conn.execute(f"""
            SELECT COUNT(*), COUNT(CASE WHEN {' OR '.join(orphans)} THEN 1 END)
            FROM {name} f
            {' '.join(joins)}
        """).fetchone()
        check.rows, check.orphan_rows = int(row[0] or 0), int(row[1] or 0)
        return check

    def validate(self, conn: duckdb.DuckDBPyConnection) -> ValidationResult:
        """Run the gold foreign key checks."""
        checks = {fact: self.check_fact(conn, fact) for fact in self.FACT_KEYS}
        total = sum(c.rows for c in checks.values())
        orphans = sum(c.orphan_rows for c in checks.values())

        result = ValidationResult(
            validation_type='gold',
            timestamp=datetime.now(),
            total_rows=total,
            valid_rows=total - orphans,
            valid_rate=(total - orphans) / total if total else 0.0,
            tables=checks,
            orphan_rows=orphans,
            orphan_rate=orphans / total if total else 0.0,
        )
        logger.info(f"Gold validation: {total} fact rows, {orphans} with unresolved keys")
        return result
