"""
Stream quality tracker.

This module provides the StreamQualityTracker, the shared owner of
per-stream quality state: snapshots, the per-sample time series, alerts,
network stability, insights and session reports.
"""

import dataclasses
import logging
import threading
import time
from collections import deque
from datetime import datetime, timezone
from typing import Callable, Deque, Dict, List, Optional, Union

import numpy as np

from stream_health.analyzers.insight_generator import InsightGenerator
from stream_health.analyzers.network_analyzer import NetworkAnalyzer, buffer_health
from stream_health.analyzers.quality_scoring import (
    mean_or_zero,
    reliability_score,
    sample_quality_score,
)
from stream_health.analyzers.threshold_evaluator import ThresholdEvaluator
from stream_health.exceptions import AlertNotFoundError, ConfigurationError, SerializationError
from stream_health.models import analytics_event
from stream_health.models.benchmark import BenchmarkType, QualityBenchmark
from stream_health.models.monitoring_points import (
    BufferHealthPoint,
    EnvironmentInfo,
    NetworkQualityPoint,
    NetworkStability,
    QualityExportSummary,
    QualityInsight,
    StreamQualityMetric,
)
from stream_health.models.quality_report import (
    IssueSeverity,
    QualityIssue,
    QualityIssueType,
    SessionWindow,
    StreamQualityReport,
)
from stream_health.models.quality_thresholds import QualityThresholds
from stream_health.models.stream_alert import AlertSeverity, StreamAlert, StreamAlertType
from stream_health.models.stream_state import (
    StreamMetricsSample,
    StreamQualitySnapshot,
    StreamState,
)
from stream_health.notifiers.analytics_emitter import AnalyticsEmitter
from stream_health.services.side_effects import SideEffectRunner
from stream_health.utils.serialization import dumps_pretty
from stream_health.utils.structured_logger import (
    log_alert_created,
    log_alert_transition,
    log_configuration_loaded,
    log_metrics_sample,
    log_report_generated,
)


logger = logging.getLogger(__name__)


MAX_STORED_METRICS = 1000
# Network points averaged for the current network latency (one minute at 5s)
NETWORK_LATENCY_WINDOW = 12
FREQUENT_BUFFERING_EVENTS = 5

_ISSUE_TYPES = {
    StreamAlertType.HIGH_LATENCY: QualityIssueType.LATENCY,
    StreamAlertType.BUFFERING_ISSUES: QualityIssueType.BUFFERING,
    StreamAlertType.SLOW_LOADING: QualityIssueType.CONNECTION,
    StreamAlertType.QUALITY_DEGRADATION: QualityIssueType.VIDEO,
    StreamAlertType.CONNECTION_LOSS: QualityIssueType.CONNECTION,
    StreamAlertType.LOW_BITRATE: QualityIssueType.BITRATE,
    StreamAlertType.FRAME_DROPS: QualityIssueType.FRAME_RATE,
    StreamAlertType.AUDIO_ISSUES: QualityIssueType.AUDIO,
    StreamAlertType.UNKNOWN: QualityIssueType.VIDEO,
}

_ISSUE_SEVERITIES = {
    AlertSeverity.INFO: IssueSeverity.MINOR,
    AlertSeverity.WARNING: IssueSeverity.MODERATE,
    AlertSeverity.ERROR: IssueSeverity.MAJOR,
    AlertSeverity.CRITICAL: IssueSeverity.CRITICAL,
}

_ISSUE_ACTIONS = {
    StreamAlertType.HIGH_LATENCY: 'Switch to a lower quality setting to reduce latency',
    StreamAlertType.BUFFERING_ISSUES: 'Check network connection or reduce concurrent streams',
    StreamAlertType.SLOW_LOADING: 'Verify stream URL and network speed',
    StreamAlertType.QUALITY_DEGRADATION: 'Lower the stream quality setting',
    StreamAlertType.CONNECTION_LOSS: 'Reconnect to the network and reload the stream',
    StreamAlertType.LOW_BITRATE: 'Improve bandwidth or select a lower quality',
    StreamAlertType.FRAME_DROPS: 'Reduce concurrent streams to free decoding capacity',
    StreamAlertType.AUDIO_ISSUES: 'Reload the stream to resynchronize audio',
    StreamAlertType.UNKNOWN: 'Reload the stream',
}


def _iso8601(timestamp: float) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat().replace('+00:00', 'Z')


class StreamQualityTracker:
    """
    Shared quality state for every monitored stream.

    Construct one instance and pass it to the layers that feed telemetry
    or display quality. Ingestion for one stream is serialized by that
    stream's lock; different streams ingest in parallel. Shared series and
    alerts are guarded by the registry lock, always taken after a stream
    lock, never before. Readers receive copies.

    Attributes:
        thresholds: Quality thresholds in effect
        analytics: Analytics collaborator (optional)
        side_effects: Runner for collaborator calls
    """

    def __init__(
        self,
        thresholds: Optional[QualityThresholds] = None,
        analytics: Optional[AnalyticsEmitter] = None,
        side_effects: Optional[SideEffectRunner] = None,
        app_version: str = '1.0.0',
        max_stored_metrics: int = MAX_STORED_METRICS,
        clock: Callable[[], float] = time.time
    ):
        """
        Initialize the tracker.

        Args:
            thresholds: Quality thresholds (defaults if None)
            analytics: Analytics collaborator (events skipped if None)
            side_effects: Runner for collaborator calls
            app_version: Version reported in exports
            max_stored_metrics: Capacity of each time series
            clock: Source of the current epoch time

        Raises:
            ConfigurationError: If the thresholds are invalid
        """
        self.thresholds = thresholds or QualityThresholds()
        errors = self.thresholds.validate()
        if errors:
            raise ConfigurationError('Invalid quality thresholds', errors)

        if max_stored_metrics < 1:
            raise ConfigurationError('Invalid tracker configuration', ['Max stored metrics must be at least 1'])

        self.analytics = analytics
        self.side_effects = side_effects or SideEffectRunner()
        self.app_version = app_version
        self._clock = clock

        self._evaluator = ThresholdEvaluator(self.thresholds)
        self._network_analyzer = NetworkAnalyzer()
        self._insight_generator = InsightGenerator(self.thresholds)

        self._registry_lock = threading.RLock()
        self._streams: Dict[str, StreamQualitySnapshot] = {}
        self._stream_locks: Dict[str, threading.RLock] = {}
        self._alerts: List[StreamAlert] = []
        self._alerts_by_id: Dict[str, StreamAlert] = {}
        self._metrics: Deque[StreamQualityMetric] = deque(maxlen=max_stored_metrics)
        self._buffer_points: Deque[BufferHealthPoint] = deque(maxlen=max_stored_metrics)
        self._network_points: Deque[NetworkQualityPoint] = deque(maxlen=max_stored_metrics)
        self._insights: List[QualityInsight] = []
        self._network_stability = NetworkStability.STABLE

        log_configuration_loaded('quality_tracker', {
            'thresholds': self.thresholds.to_dict(),
            'max_stored_metrics': max_stored_metrics,
        })

    # Stream registration

    def add_stream(
        self,
        stream_id: str,
        title: str,
        platform: str,
        url: str,
        quality: str = 'auto'
    ) -> StreamQualitySnapshot:
        """
        Start monitoring a stream.

        Registering an already monitored stream leaves it unchanged.

        Returns:
            Copy of the stream snapshot
        """
        with self._registry_lock:
            snapshot = self._streams.get(stream_id)
            if snapshot is None:
                now = self._clock()
                snapshot = StreamQualitySnapshot(
                    stream_id=stream_id,
                    title=title,
                    platform=platform,
                    url=url,
                    start_time=now,
                    quality=quality or 'auto',
                    last_update=now
                )
                self._streams[stream_id] = snapshot
                self._stream_locks.setdefault(stream_id, threading.RLock())
                logger.info(f'Monitoring stream {stream_id} ({platform})')

        return self.get_snapshot(stream_id)

    def remove_stream(self, stream_id: str) -> Optional[StreamQualityReport]:
        """
        Stop monitoring a stream.

        A final session report is generated and sent to analytics as
        'stream_quality_report'. Alerts and time series are kept.

        Returns:
            Final report, or None if the stream was not monitored
        """
        lock = self._stream_lock(stream_id)
        with lock:
            report = self.generate_report(stream_id)
            with self._registry_lock:
                self._streams.pop(stream_id, None)
                if self._stream_locks.get(stream_id) is lock:
                    del self._stream_locks[stream_id]

        if report is None:
            return None

        if self.analytics is not None:
            self.side_effects.submit(
                f'analytics.{analytics_event.STREAM_QUALITY_REPORT}',
                self.analytics.track,
                analytics_event.STREAM_QUALITY_REPORT,
                {
                    'stream_id': report.stream_id,
                    'platform': report.platform,
                    'quality_score': report.quality_score,
                    'session_duration': report.session_duration_s,
                }
            )

        logger.info(f'Stopped monitoring stream {stream_id}')
        return report

    def set_stream_state(self, stream_id: str, state: Union[StreamState, str]) -> bool:
        """
        Update the playback state of a stream.

        Args:
            stream_id: Stream identifier
            state: New state; unrecognized strings map to UNKNOWN

        Returns:
            False if the stream is not monitored
        """
        if not isinstance(state, StreamState):
            state = StreamState.parse(state)

        with self._stream_lock(stream_id):
            with self._registry_lock:
                snapshot = self._streams.get(stream_id)
            if snapshot is None:
                return False
            snapshot.state = state

        return True

    # Telemetry ingestion

    def update_metrics(self, stream_id: str, sample: StreamMetricsSample) -> StreamQualitySnapshot:
        """
        Apply a telemetry sample to a stream.

        Unknown streams are registered on the fly (empty title and url,
        platform 'unknown'). Samples are validated on construction, so
        malformed values never reach this point.

        Args:
            stream_id: Stream identifier
            sample: Validated telemetry sample

        Returns:
            Copy of the updated snapshot
        """
        if not stream_id:
            raise ValueError('Stream ID must not be empty')

        if not isinstance(sample, StreamMetricsSample):
            raise TypeError(f'Expected StreamMetricsSample, got {type(sample).__name__}')

        with self._stream_lock(stream_id):
            now = self._clock()

            with self._registry_lock:
                snapshot = self._streams.get(stream_id)
                if snapshot is None:
                    snapshot = StreamQualitySnapshot(
                        stream_id=stream_id,
                        title='',
                        platform='unknown',
                        url='',
                        start_time=now,
                        last_update=now
                    )
                    self._streams[stream_id] = snapshot
                    logger.info(f'Registered stream {stream_id} on first sample')

            snapshot.apply_sample(sample, now=now)

            metric = StreamQualityMetric(
                stream_id=stream_id,
                platform=snapshot.platform,
                quality=snapshot.quality,
                latency_ms=sample.latency_ms,
                buffer_events=sample.buffer_events,
                load_time_s=snapshot.load_time_s,
                bitrate_kbps=sample.bitrate_kbps,
                frame_rate_fps=sample.frame_rate_fps,
                dropped_frames=sample.dropped_frames,
                quality_score=sample_quality_score(
                    sample.latency_ms,
                    sample.buffer_events,
                    snapshot.load_time_s,
                    self.thresholds.max_load_time_s
                ),
                timestamp=sample.timestamp
            )

            with self._registry_lock:
                point = BufferHealthPoint(
                    stream_id=stream_id,
                    buffer_health=buffer_health(sample.buffer_events, self._average_network_latency()),
                    buffer_events=sample.buffer_events,
                    timestamp=sample.timestamp,
                    buffer_size_s=sample.buffer_size_s
                )
                self._metrics.append(metric)
                self._buffer_points.append(point)

            result = dataclasses.replace(snapshot)

        log_metrics_sample(stream_id, sample)
        return result

    def record_network_sample(self, point: NetworkQualityPoint) -> NetworkStability:
        """
        Record a network quality point and reclassify stability.

        Stability keeps its previous value until enough points exist.

        Returns:
            Current network stability
        """
        with self._registry_lock:
            self._network_points.append(point)
            stability = self._network_analyzer.classify(self._network_points)
            if stability is not None and stability != self._network_stability:
                logger.info(f'Network stability changed: {self._network_stability.value} -> {stability.value}')
                self._network_stability = stability
            return self._network_stability

    # Alerts

    def evaluate_alerts(self, stream_id: str) -> List[StreamAlert]:
        """
        Compare a stream against the thresholds and raise alerts.

        A breach creates an alert only when the stream has no unresolved
        alert of the same type, so repeated evaluation of a breaching
        stream never duplicates alerts. Never raises for unknown streams.

        Returns:
            Copies of the alerts created by this call
        """
        created = []

        with self._stream_lock(stream_id):
            with self._registry_lock:
                snapshot = self._streams.get(stream_id)
            if snapshot is None:
                return []

            breaches = self._evaluator.evaluate(snapshot)
            now = self._clock()

            with self._registry_lock:
                for breach in breaches:
                    if self._find_active_alert(stream_id, breach.alert_type) is not None:
                        continue

                    alert = StreamAlert(
                        alert_type=breach.alert_type,
                        stream_id=stream_id,
                        message=breach.message,
                        severity=breach.severity,
                        timestamp=now
                    )
                    self._alerts.append(alert)
                    self._alerts_by_id[alert.alert_id] = alert
                    created.append(dataclasses.replace(alert))

        for alert in created:
            log_alert_created(alert)
            self._emit_alert(alert)

        return created

    def acknowledge_alert(self, alert_id: str) -> bool:
        """
        Acknowledge an alert.

        Returns:
            True if the alert changed state

        Raises:
            AlertNotFoundError: If no alert has this id
        """
        with self._registry_lock:
            alert = self._get_alert(alert_id)
            changed = alert.acknowledge(self._clock())
            result = dataclasses.replace(alert)

        log_alert_transition(result, changed)
        return changed

    def resolve_alert(self, alert_id: str) -> bool:
        """
        Resolve an alert.

        Returns:
            True if the alert changed state

        Raises:
            AlertNotFoundError: If no alert has this id
        """
        with self._registry_lock:
            alert = self._get_alert(alert_id)
            changed = alert.resolve(self._clock())
            result = dataclasses.replace(alert)

        log_alert_transition(result, changed)
        return changed

    def get_alert(self, alert_id: str) -> Optional[StreamAlert]:
        with self._registry_lock:
            alert = self._alerts_by_id.get(alert_id)
            return dataclasses.replace(alert) if alert else None

    def alerts(self, stream_id: Optional[str] = None) -> List[StreamAlert]:
        """All alerts (oldest first), optionally for one stream."""
        with self._registry_lock:
            return [
                dataclasses.replace(a) for a in self._alerts
                if stream_id is None or a.stream_id == stream_id
            ]

    def active_alerts(self, stream_id: Optional[str] = None) -> List[StreamAlert]:
        return [a for a in self.alerts(stream_id) if a.is_active]

    # Reads

    def get_snapshot(self, stream_id: str) -> Optional[StreamQualitySnapshot]:
        with self._stream_lock(stream_id):
            with self._registry_lock:
                snapshot = self._streams.get(stream_id)
            return dataclasses.replace(snapshot) if snapshot else None

    def streams(self) -> List[StreamQualitySnapshot]:
        with self._registry_lock:
            stream_ids = list(self._streams)

        snapshots = [self.get_snapshot(stream_id) for stream_id in stream_ids]
        return [s for s in snapshots if s is not None]

    def quality_metrics(self, stream_id: Optional[str] = None) -> List[StreamQualityMetric]:
        with self._registry_lock:
            return [m for m in self._metrics if stream_id is None or m.stream_id == stream_id]

    def buffer_health_points(self, stream_id: Optional[str] = None) -> List[BufferHealthPoint]:
        with self._registry_lock:
            return [p for p in self._buffer_points if stream_id is None or p.stream_id == stream_id]

    def network_points(self) -> List[NetworkQualityPoint]:
        with self._registry_lock:
            return list(self._network_points)

    @property
    def network_stability(self) -> NetworkStability:
        with self._registry_lock:
            return self._network_stability

    @property
    def insights(self) -> List[QualityInsight]:
        with self._registry_lock:
            return list(self._insights)

    # Reports and benchmarks

    def generate_report(
        self,
        stream_id: str,
        window: Optional[SessionWindow] = None
    ) -> Optional[StreamQualityReport]:
        """
        Summarize a stream session.

        Aggregates the stream's samples inside the window (defaults to
        stream start, or its earliest stored sample, until now). The score is the reliability score: mean
        of the latency score, the buffering score and the mean per-sample
        quality score. A window without samples scores 0.

        Args:
            stream_id: Monitored stream
            window: Session window to aggregate

        Returns:
            StreamQualityReport, or None if the stream is not monitored
        """
        with self._stream_lock(stream_id):
            with self._registry_lock:
                snapshot = self._streams.get(stream_id)
                if snapshot is None:
                    return None
                snapshot = dataclasses.replace(snapshot)

                now = self._clock()
                stream_metrics = [m for m in self._metrics if m.stream_id == stream_id]
                if window is None:
                    timestamps = [m.timestamp for m in stream_metrics]
                    window = SessionWindow(
                        start=min([snapshot.start_time] + timestamps),
                        end=max([now, snapshot.start_time] + timestamps)
                    )
                samples = [m for m in stream_metrics if window.contains(m.timestamp)]
                window_alerts = [
                    dataclasses.replace(a) for a in self._alerts
                    if a.stream_id == stream_id and window.contains(a.timestamp)
                ]

        latencies = [m.latency_ms for m in samples]
        buffer_events = [m.buffer_events for m in samples]
        score = reliability_score(latencies, buffer_events, [m.quality_score for m in samples])

        report = StreamQualityReport(
            stream_id=stream_id,
            platform=snapshot.platform,
            window=window,
            session_duration_s=window.duration_s,
            sample_count=len(samples),
            average_latency_ms=mean_or_zero(latencies),
            total_buffer_events=int(sum(buffer_events)),
            average_load_time_s=mean_or_zero([m.load_time_s for m in samples]),
            quality_score=score if score is not None else 0.0,
            recommendations=self._recommendations(snapshot),
            issues=self._group_issues(window_alerts),
            generated_at=now
        )

        log_report_generated(stream_id, report.quality_score, report.performance_grade.value, report.sample_count)
        return report

    def check_benchmark(self, benchmark: QualityBenchmark) -> bool:
        """Whether the benchmark's current value meets its target."""
        return benchmark.meets_benchmark

    def measure_benchmark(
        self,
        benchmark_type: BenchmarkType,
        target_value: float,
        platform: str = 'all'
    ) -> Optional[QualityBenchmark]:
        """
        Build a benchmark from the stored metrics.

        The current value is the mean of the metric over the stored
        samples of the platform ('all' for every platform).

        Returns:
            QualityBenchmark, or None when there are no matching samples
        """
        metrics = [
            m for m in self.quality_metrics()
            if platform == 'all' or m.platform == platform
        ]
        if not metrics:
            return None

        field_name = {
            BenchmarkType.LATENCY: 'latency_ms',
            BenchmarkType.LOAD_TIME: 'load_time_s',
            BenchmarkType.BUFFER_EVENTS: 'buffer_events',
            BenchmarkType.BITRATE: 'bitrate_kbps',
            BenchmarkType.FRAME_RATE: 'frame_rate_fps',
            BenchmarkType.QUALITY_SCORE: 'quality_score',
        }[benchmark_type]

        return QualityBenchmark(
            benchmark_type=benchmark_type,
            target_value=target_value,
            current_value=mean_or_zero([getattr(m, field_name) for m in metrics]),
            platform=platform,
            sample_size=len(metrics),
            timestamp=self._clock()
        )

    # Insights and overall score

    def generate_insights(self) -> List[QualityInsight]:
        """Recompute the quality insights from the stored series."""
        with self._registry_lock:
            insights = self._insight_generator.generate(
                list(self._metrics),
                list(self._buffer_points),
                self._clock()
            )
            self._insights = insights

        for insight in insights:
            logger.info(f'Quality insight: {insight.title} ({insight.impact.value})')

        return list(insights)

    def buffer_health_score(self) -> float:
        """Mean of the latest buffer health of each monitored stream (1.0 if none)."""
        with self._registry_lock:
            latest: Dict[str, float] = {}
            for point in self._buffer_points:
                if point.stream_id in self._streams:
                    latest[point.stream_id] = point.buffer_health

        if not latest:
            return 1.0
        return float(np.mean(list(latest.values())))

    def overall_quality_score(self) -> float:
        """Quality score across all monitored streams, 0-100."""
        health = self.buffer_health_score()

        with self._registry_lock:
            return self._insight_generator.overall_quality_score(
                active_stream_count=len(self._streams),
                average_latency_ms=self._average_network_latency(),
                buffer_health_score=health,
                stability=self._network_stability,
                metrics=list(self._metrics)
            )

    # Export

    def export_quality_data(self) -> Optional[str]:
        """
        Export the stored series as pretty-printed JSON.

        Bundles quality metrics, buffer health points, network points,
        active alerts, insights, the export date, environment metadata and
        a summary.

        Returns:
            JSON text, or None if encoding fails
        """
        with self._registry_lock:
            metrics = list(self._metrics)
            buffer_points = list(self._buffer_points)
            network_points = list(self._network_points)
            alerts = [dataclasses.replace(a) for a in self._alerts if a.is_active]
            insights = list(self._insights)

        now = self._clock()
        summary = QualityExportSummary(
            total_metrics=len(metrics),
            average_quality_score=mean_or_zero([m.quality_score for m in metrics]),
            total_alerts=len(alerts),
            critical_alerts=sum(1 for a in alerts if a.severity == AlertSeverity.CRITICAL),
            total_insights=len(insights),
            export_duration_s=max(0.0, now - min(m.timestamp for m in metrics)) if metrics else 0.0
        )

        payload = {
            'quality_metrics': [m.to_dict() for m in metrics],
            'buffer_health_data': [p.to_dict() for p in buffer_points],
            'network_quality_data': [p.to_dict() for p in network_points],
            'stream_alerts': [a.to_dict() for a in alerts],
            'quality_insights': [i.to_dict() for i in insights],
            'export_date': _iso8601(now),
            'environment': EnvironmentInfo.detect(self.app_version).to_dict(),
            'summary': summary.to_dict(),
        }

        try:
            return dumps_pretty(payload)
        except SerializationError as e:
            logger.error(f'Failed to export quality data: {e}', exc_info=True)
            return None

    # Internals

    def _stream_lock(self, stream_id: str) -> threading.RLock:
        with self._registry_lock:
            lock = self._stream_locks.get(stream_id)
            if lock is None:
                lock = threading.RLock()
                self._stream_locks[stream_id] = lock
            return lock

    def _get_alert(self, alert_id: str) -> StreamAlert:
        alert = self._alerts_by_id.get(alert_id)
        if alert is None:
            raise AlertNotFoundError(alert_id)
        return alert

    def _find_active_alert(self, stream_id: str, alert_type: StreamAlertType) -> Optional[StreamAlert]:
        for alert in self._alerts:
            if alert.stream_id == stream_id and alert.alert_type == alert_type and alert.is_active:
                return alert
        return None

    def _average_network_latency(self) -> float:
        recent = list(self._network_points)[-NETWORK_LATENCY_WINDOW:]
        return mean_or_zero([p.latency_ms for p in recent])

    def _emit_alert(self, alert: StreamAlert) -> None:
        if self.analytics is None:
            return

        self.side_effects.submit(
            'analytics.alert_metric',
            self.analytics.emit_alert_metric,
            alert
        )
        self.side_effects.submit(
            f'analytics.{analytics_event.STREAM_ALERT_CREATED}',
            self.analytics.track,
            analytics_event.STREAM_ALERT_CREATED,
            {
                'alert_id': alert.alert_id,
                'stream_id': alert.stream_id,
                'alert_type': alert.alert_type.value,
                'severity': alert.severity.value,
                'message': alert.message,
            }
        )

    def _recommendations(self, snapshot: StreamQualitySnapshot) -> List[str]:
        recommendations = []

        if snapshot.latency_ms > self.thresholds.max_latency_ms:
            recommendations.append('Consider switching to a lower quality setting to reduce latency')

        if snapshot.buffer_events > FREQUENT_BUFFERING_EVENTS:
            recommendations.append('Frequent buffering detected. Check network connection')

        if snapshot.load_time_s > self.thresholds.max_load_time_s:
            recommendations.append('Slow loading times. Verify stream URL and network speed')

        return recommendations

    @staticmethod
    def _group_issues(alerts: List[StreamAlert]) -> List[QualityIssue]:
        grouped: Dict[StreamAlertType, List[StreamAlert]] = {}
        for alert in alerts:
            grouped.setdefault(alert.alert_type, []).append(alert)

        issues = []
        for alert_type, group in grouped.items():
            worst = max(group, key=lambda a: a.severity.priority)
            resolved = all(not a.is_active for a in group)

            issues.append(QualityIssue(
                issue_type=_ISSUE_TYPES[alert_type],
                severity=_ISSUE_SEVERITIES[worst.severity],
                description=worst.message,
                occurrence_count=len(group),
                first_occurrence=min(a.timestamp for a in group),
                last_occurrence=max(a.timestamp for a in group),
                affected_streams=sorted({a.stream_id for a in group}),
                recommended_action=_ISSUE_ACTIONS[alert_type],
                possible_cause=alert_type.display_name,
                is_resolved=resolved,
                resolved_at=max(a.resolved_at for a in group) if resolved else None
            ))

        return issues
