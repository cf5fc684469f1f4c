"""
Stream Health Monitoring Package.

This package classifies application errors into a closed taxonomy with
fixed severity and remediation policy, and tracks per-stream playback
quality: health snapshots, threshold alerts, session reports and
benchmarks.
"""

__version__ = '1.0.0'

# Import main classes for convenient access
from stream_health.models.error_record import ErrorRecord
from stream_health.models.error_types import ErrorAction, ErrorCategory, ErrorSeverity
from stream_health.models.quality_thresholds import QualityThresholds
from stream_health.models.stream_state import StreamMetricsSample, StreamQualitySnapshot, StreamState
from stream_health.models.stream_alert import StreamAlert, StreamAlertType
from stream_health.models.quality_report import PerformanceGrade, SessionWindow, StreamQualityReport
from stream_health.models.benchmark import BenchmarkType, QualityBenchmark
from stream_health.errors.classifier import classify
from stream_health.notifiers.analytics_emitter import AnalyticsEmitter
from stream_health.notifiers.crash_reporter import CrashReporter
from stream_health.services.error_dispatcher import ErrorDispatcher, parse_error_log
from stream_health.services.quality_tracker import StreamQualityTracker
from stream_health.services.side_effects import SideEffectRunner

__all__ = [
    'ErrorRecord',
    'ErrorAction',
    'ErrorCategory',
    'ErrorSeverity',
    'QualityThresholds',
    'StreamMetricsSample',
    'StreamQualitySnapshot',
    'StreamState',
    'StreamAlert',
    'StreamAlertType',
    'PerformanceGrade',
    'SessionWindow',
    'StreamQualityReport',
    'BenchmarkType',
    'QualityBenchmark',
    'classify',
    'AnalyticsEmitter',
    'CrashReporter',
    'ErrorDispatcher',
    'parse_error_log',
    'StreamQualityTracker',
    'SideEffectRunner',
]
