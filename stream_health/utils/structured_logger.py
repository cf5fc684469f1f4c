"""
Structured logging utilities for stream health monitoring.

Provides JSON-formatted log entries for the error dispatcher and the
stream quality tracker so they can be queried in CloudWatch Logs Insights.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from stream_health.models.error_record import ErrorRecord
from stream_health.models.error_types import ErrorSeverity
from stream_health.models.stream_alert import StreamAlert
from stream_health.models.stream_state import StreamMetricsSample
from stream_health.utils.serialization import to_json_serializable


logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')


def _dumps(log_entry: Dict[str, Any]) -> str:
    return json.dumps(to_json_serializable(log_entry), default=str)


def log_error_dispatched(record: ErrorRecord, surfaced: bool) -> None:
    """
    Logs a dispatched error record.
    
    Low and medium severities log at WARNING, high and critical at ERROR.
    
    Args:
        record: Dispatched error record
        surfaced: Whether the record became the current surfaced error
    """
    log_entry = {
        'event': 'error_dispatched',
        'timestamp': _now(),
        'errorId': record.error_id,
        'code': record.code,
        'title': record.title,
        'message': record.message,
        'category': record.category.value,
        'severity': record.severity.value,
        'isRetryable': record.is_retryable,
        'surfaced': surfaced,
    }
    
    if record.severity.priority >= ErrorSeverity.HIGH.priority:
        logger.error(_dumps(log_entry))
    else:
        logger.warning(_dumps(log_entry))


def log_error_action(record: Optional[ErrorRecord], action_title: str) -> None:
    """
    Logs an executed error action.
    
    Args:
        record: Current error when the action ran (may be None)
        action_title: Title of the executed action
    """
    log_entry = {
        'event': 'error_action',
        'timestamp': _now(),
        'errorId': record.error_id if record else None,
        'code': record.code if record else None,
        'action': action_title,
    }
    
    logger.info(_dumps(log_entry))


def log_metrics_sample(stream_id: str, sample: StreamMetricsSample) -> None:
    log_entry = {
        'event': 'metrics_sample',
        'timestamp': _now(),
        'streamId': stream_id,
        'metrics': {
            'latency_ms': round(float(sample.latency_ms), 2),
            'buffer_events': int(sample.buffer_events),
            'bitrate_kbps': round(float(sample.bitrate_kbps), 2),
            'frame_rate_fps': round(float(sample.frame_rate_fps), 2),
            'dropped_frames': int(sample.dropped_frames),
        }
    }
    
    logger.debug(_dumps(log_entry))


def log_alert_created(alert: StreamAlert) -> None:
    """
    Logs alert creation.
    
    Critical alerts log at ERROR, everything else at WARNING.
    
    Args:
        alert: Newly created alert
    """
    log_entry = {
        'event': 'alert_created',
        'timestamp': _now(),
        'alertId': alert.alert_id,
        'streamId': alert.stream_id,
        'alertType': alert.alert_type.value,
        'severity': alert.severity.value,
        'message': alert.message,
    }
    
    if alert.severity.value == 'critical':
        logger.error(_dumps(log_entry))
    else:
        logger.warning(_dumps(log_entry))


def log_alert_transition(alert: StreamAlert, changed: bool) -> None:
    log_entry = {
        'event': 'alert_transition',
        'timestamp': _now(),
        'alertId': alert.alert_id,
        'streamId': alert.stream_id,
        'status': alert.status.value,
        'changed': changed,
    }
    
    logger.info(_dumps(log_entry))


def log_report_generated(
    stream_id: str,
    quality_score: float,
    grade: str,
    sample_count: int
) -> None:
    """
    Logs session report generation.
    
    Args:
        stream_id: Stream identifier
        quality_score: Computed quality score
        grade: Performance grade value
        sample_count: Number of samples aggregated
    """
    log_entry = {
        'event': 'report_generated',
        'timestamp': _now(),
        'streamId': stream_id,
        'qualityScore': round(float(quality_score), 2),
        'grade': grade,
        'sampleCount': sample_count,
    }
    
    logger.info(_dumps(log_entry))


def log_side_effect_failure(effect: str, error: BaseException) -> None:
    """
    Logs a failed collaborator call.
    
    Args:
        effect: Side effect name (e.g., 'analytics.error_occurred')
        error: Exception raised by the collaborator
    """
    log_entry = {
        'event': 'side_effect_failure',
        'timestamp': _now(),
        'effect': effect,
        'errorType': type(error).__name__,
        'error': str(error),
    }
    
    logger.error(_dumps(log_entry), exc_info=error)


def log_analytics_emission(
    event_name: str,
    success: bool = True,
    error: Optional[str] = None
) -> None:
    """
    Logs analytics event emission.
    
    Args:
        event_name: Analytics event name
        success: Whether emission succeeded
        error: Error message if emission failed
    """
    log_entry = {
        'event': 'analytics_emission',
        'timestamp': _now(),
        'eventName': event_name,
        'success': success,
    }
    
    if error:
        log_entry['error'] = error
    
    if success:
        logger.debug(_dumps(log_entry))
    else:
        logger.error(_dumps(log_entry))


def log_configuration_loaded(component: str, config_dict: Dict[str, Any]) -> None:
    log_entry = {
        'event': 'configuration_loaded',
        'timestamp': _now(),
        'component': component,
        'config': config_dict,
    }
    
    logger.info(_dumps(log_entry))
