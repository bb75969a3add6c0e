"""Quality Gate - Decision maker for pass/fail."""

import logging
from dataclasses import dataclass

from .validators import ValidationResult, ValidationConfig

logger = logging.getLogger(__name__)


class ValidationHardFailError(Exception):
    """Raised when validation fails hard."""
    pass


@dataclass
class GateResult:
    """Quality gate result."""
    status: str  # 'success', 'warning', 'failed'
    valid_rate: float
    message: str


class QualityGate:
    """Decision maker for pass/fail based on validation results."""

    def __init__(self, config: ValidationConfig = None):
        self.config = config or ValidationConfig()

    def _check_silver(self, result: ValidationResult) -> None:
        if result.total_rows < self.config.min_row_count:
            raise ValidationHardFailError(
                f'Row count {result.total_rows} below minimum {self.config.min_row_count}'
            )

        if result.duplicate_rate > self.config.hard_fail_duplicate_rate:
            raise ValidationHardFailError(f'Duplicate rate {result.duplicate_rate:.1%} too high')

        conflicts = len(result.country_conflicts)
        if conflicts > self.config.max_country_conflicts:
            codes = ', '.join(str(c['country_code']) for c in result.country_conflicts)
            raise ValidationHardFailError(f'{conflicts} country code conflicts: {codes}')

    def _check_gold(self, result: ValidationResult) -> None:
        if result.orphan_rate > self.config.max_orphan_fact_rate:
            raise ValidationHardFailError(
                f'Unresolved dimension keys on {result.orphan_rate:.1%} of fact rows'
            )

    def evaluate(self, result: ValidationResult) -> GateResult:
        """Evaluate validation result. Raises ValidationHardFailError on hard fail."""

        # Hard fail: empty layer
        if result.total_rows == 0:
            raise ValidationHardFailError(f'No {result.validation_type} rows found')

        if result.validation_type == 'gold':
            self._check_gold(result)
        else:
            self._check_silver(result)

        # Hard fail: Low valid rate
        if result.valid_rate < self.config.warning_threshold:
            raise ValidationHardFailError(f'Valid rate {result.valid_rate:.1%} below threshold')

        # Warning
        if result.valid_rate < self.config.success_threshold:
            logger.warning(f'Valid rate {result.valid_rate:.1%} - warning')
            return GateResult('warning', result.valid_rate, f'Warning: {result.valid_rate:.1%} valid')

        # Tolerated conflicts still need attention
        if result.country_conflicts:
            message = f'Warning: {len(result.country_conflicts)} country code conflicts'
            logger.warning(message)
            return GateResult('warning', result.valid_rate, message)

        # Success
        logger.info(f'Validation passed: {result.valid_rate:.1%} valid')
        return GateResult('success', result.valid_rate, f'Passed: {result.valid_rate:.1%} valid')
