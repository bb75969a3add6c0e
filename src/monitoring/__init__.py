"""Monitoring module - Health checks and metrics."""

from .health import HealthChecker, check_all_services
from .etl_metrics import ETLMetrics, ETLMetricsLogger

__all__ = ['HealthChecker', 'check_all_services', 'ETLMetrics', 'ETLMetricsLogger']
