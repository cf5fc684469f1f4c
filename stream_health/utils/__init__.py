"""
Stream health utilities package.

This package provides structured logging and JSON serialization helpers.
"""

from stream_health.utils.serialization import dumps_pretty, loads, to_json_serializable
from stream_health.utils.structured_logger import (
    log_alert_created,
    log_alert_transition,
    log_analytics_emission,
    log_configuration_loaded,
    log_error_action,
    log_error_dispatched,
    log_metrics_sample,
    log_report_generated,
    log_side_effect_failure,
)

__all__ = [
    'dumps_pretty',
    'loads',
    'to_json_serializable',
    'log_alert_created',
    'log_alert_transition',
    'log_analytics_emission',
    'log_configuration_loaded',
    'log_error_action',
    'log_error_dispatched',
    'log_metrics_sample',
    'log_report_generated',
    'log_side_effect_failure',
]
