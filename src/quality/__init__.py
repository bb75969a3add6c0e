"""Quality module - Data validation and quality gates."""

from .validators import (
    SilverValidator, GoldValidator, TableCheck,
    ValidationConfig, ValidationResult
)
from .gates import QualityGate, GateResult, ValidationHardFailError
from .metrics_logger import MetricsLogger

__all__ = [
    'SilverValidator', 'GoldValidator', 'TableCheck',
    'ValidationConfig', 'ValidationResult',
    'QualityGate', 'GateResult', 'ValidationHardFailError',
    'MetricsLogger'
]
