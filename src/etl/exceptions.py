"""Pipeline exceptions.

Field-level problems (bad numbers, unknown aliases) never raise; these
exceptions are reserved for structural failures that must stop a run.
"""
from typing import Any, Dict, Optional


class TourismPipelineError(Exception):
    """Base error carrying the diagnostic context of a failed stage."""

    def __init__(
        self,
        message: str,
        table: Optional[str] = None,
        stage: Optional[str] = None,
        code: Optional[str] = None,
        cause: Optional[BaseException] = None,
        severity: str = 'fatal'
    ):
        super().__init__(message)
        self.message = message
        self.table = table
        self.stage = stage
        self.code = code
        self.cause = cause
        self.severity = severity

    def diagnostics(self) -> Dict[str, Any]:
        """Context dict for logs and run results."""
        return {
            'message': self.message,
            'code': self.code,
            'severity': self.severity,
            'error_type': type(self.cause).__name__ if self.cause else type(self).__name__,
            'table': self.table,
            'stage': self.stage,
        }


class BronzeLoadError(TourismPipelineError):
    """Raised when a raw extract cannot be loaded into the bronze schema."""
    pass


class SilverLoadError(TourismPipelineError):
    """Raised when a silver table reload fails; the run is aborted."""
    pass


class GoldBuildError(TourismPipelineError):
    """Raised when a gold dimension or fact table cannot be rebuilt."""
    pass


class RuleConfigurationError(ValueError):
    """Raised when a rule table is inconsistent (e.g. a name override without its remap)."""
    pass


def error_code(exc: BaseException) -> str:
    """Best-effort error code for diagnostics (DB errno/sqlstate or exception name)."""
    for attr in ('pgcode', 'errno', 'code'):
        value = getattr(exc, attr, None)
        if value:
            return str(value)
    return type(exc).__name__
