"""
Stream health data models.

This module contains dataclasses and enums for error records, stream
snapshots, alerts, thresholds, reports, benchmarks and monitoring series.
"""

from stream_health.models.analytics_event import AnalyticsEvent
from stream_health.models.benchmark import BenchmarkType, QualityBenchmark
from stream_health.models.dispatch_state import ErrorDispatchState, ErrorStatistics
from stream_health.models.error_record import ErrorRecord
from stream_health.models.error_types import (
    ErrorAction,
    ErrorActionKind,
    ErrorCategory,
    ErrorSeverity,
)
from stream_health.models.monitoring_points import (
    BufferHealthPoint,
    EnvironmentInfo,
    InsightImpact,
    NetworkQualityPoint,
    NetworkStability,
    QualityExportSummary,
    QualityInsight,
    QualityInsightType,
    StreamQualityMetric,
)
from stream_health.models.quality_report import (
    IssueSeverity,
    PerformanceGrade,
    QualityIssue,
    QualityIssueType,
    SessionWindow,
    StreamQualityReport,
)
from stream_health.models.quality_thresholds import QualityThresholds
from stream_health.models.stream_alert import (
    AlertSeverity,
    AlertStatus,
    StreamAlert,
    StreamAlertType,
)
from stream_health.models.stream_state import (
    StreamMetricsSample,
    StreamQualitySnapshot,
    StreamState,
)

__all__ = [
    'AnalyticsEvent',
    'BenchmarkType',
    'QualityBenchmark',
    'ErrorDispatchState',
    'ErrorStatistics',
    'ErrorRecord',
    'ErrorAction',
    'ErrorActionKind',
    'ErrorCategory',
    'ErrorSeverity',
    'BufferHealthPoint',
    'EnvironmentInfo',
    'InsightImpact',
    'NetworkQualityPoint',
    'NetworkStability',
    'QualityExportSummary',
    'QualityInsight',
    'QualityInsightType',
    'StreamQualityMetric',
    'IssueSeverity',
    'PerformanceGrade',
    'QualityIssue',
    'QualityIssueType',
    'SessionWindow',
    'StreamQualityReport',
    'QualityThresholds',
    'AlertSeverity',
    'AlertStatus',
    'StreamAlert',
    'StreamAlertType',
    'StreamMetricsSample',
    'StreamQualitySnapshot',
    'StreamState',
]
