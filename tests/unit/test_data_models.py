"""
Unit tests for stream health data models.
"""

import math

import pytest

from stream_health.errors.catalog import NetworkErrorKind
from stream_health.errors.factory import network_error
from stream_health.exceptions import SampleValidationError
from stream_health.models.benchmark import BenchmarkType, QualityBenchmark
from stream_health.models.error_record import ErrorRecord
from stream_health.models.error_types import ErrorAction, ErrorActionKind, ErrorSeverity
from stream_health.models.monitoring_points import BufferHealthPoint, NetworkQualityPoint
from stream_health.models.quality_report import (
    PerformanceGrade,
    QualityIssue,
    QualityIssueType,
    IssueSeverity,
    SessionWindow,
    StreamQualityReport,
)
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


class TestErrorSeverity:
    """Test suite for ErrorSeverity ordering."""
    
    def test_priorities_are_totally_ordered(self):
        """Test severity priorities run from low to critical."""
        priorities = [s.priority for s in ErrorSeverity]
        assert priorities == [1, 2, 3, 4]


class TestErrorAction:
    """Test suite for ErrorAction."""
    
    def test_builtin_title(self):
        """Test built-in actions have a fixed title."""
        assert ErrorAction(ErrorActionKind.CONTACT_SUPPORT).title == 'Contact Support'
    
    def test_custom_action(self):
        """Test custom action title and dictionary form."""
        action = ErrorAction.custom('Switch Quality', 'quality.lower')
        
        assert action.title == 'Switch Quality'
        assert action.to_dict() == {
            'kind': 'custom',
            'label': 'Switch Quality',
            'callback_id': 'quality.lower'
        }
        assert ErrorAction.from_dict(action.to_dict()) == action
    
    def test_custom_action_requires_callback(self):
        """Test custom actions require a callback id."""
        with pytest.raises(ValueError, match='callback id'):
            ErrorAction(ErrorActionKind.CUSTOM, label='Switch Quality')


class TestErrorRecord:
    """Test suite for ErrorRecord."""
    
    def test_record_is_immutable(self):
        """Test records cannot be modified."""
        record = network_error(NetworkErrorKind.TIMEOUT)
        
        with pytest.raises(AttributeError):
            record.severity = ErrorSeverity.LOW
    
    def test_timestamp_captured_once(self):
        """Test the timestamp does not change after construction."""
        record = network_error(NetworkErrorKind.TIMEOUT)
        assert record.timestamp == record.timestamp
        assert record.to_log_entry()['timestamp'] == record.to_log_entry()['timestamp']
    
    def test_log_entry_round_trip(self):
        """Test a record survives the log entry round trip."""
        record = network_error(NetworkErrorKind.SERVER_ERROR, status_code=500)
        
        restored = ErrorRecord.from_log_entry(record.to_log_entry())
        
        assert restored.error_id == record.error_id
        assert restored.code == 'NET_003'
        assert restored.suggested_actions == record.suggested_actions
        assert restored.context == {'status_code': 500}
        assert restored.timestamp == record.timestamp
        assert restored == record
    
    def test_timestamp_normalized_to_microseconds(self):
        """Test sub-microsecond timestamps survive the log entry round trip unchanged."""
        record = network_error(NetworkErrorKind.TIMEOUT)
        precise = ErrorRecord(
            title=record.title, message=record.message, code=record.code,
            category=record.category, severity=record.severity,
            is_retryable=record.is_retryable, suggested_actions=record.suggested_actions,
            timestamp=1700000000.1234567
        )
        
        restored = ErrorRecord.from_log_entry(precise.to_log_entry())
        
        assert precise.timestamp == pytest.approx(1700000000.123457, abs=1e-6)
        assert restored.timestamp == precise.timestamp
        assert restored == precise
    
    def test_record_is_hashable(self):
        """Test records with context can be hashed and collected in a set."""
        record = network_error(NetworkErrorKind.SERVER_ERROR, status_code=500)
        restored = ErrorRecord.from_log_entry(record.to_log_entry())
        
        assert isinstance(hash(record), int)
        assert hash(restored) == hash(record)
        assert {record, restored} == {record}
    
    def test_log_entry_timestamp_is_iso8601(self):
        """Test log entry timestamps are UTC ISO-8601."""
        record = network_error(NetworkErrorKind.TIMEOUT)
        assert record.to_log_entry()['timestamp'].endswith('Z')
    
    def test_empty_code_rejected(self):
        """Test an empty code is rejected."""
        with pytest.raises(ValueError, match='code'):
            ErrorRecord(
                title='t', message='m', code='',
                category=network_error(NetworkErrorKind.TIMEOUT).category,
                severity=ErrorSeverity.LOW, is_retryable=False, suggested_actions=()
            )


class TestStreamMetricsSample:
    """Test suite for sample validation at ingestion."""
    
    def test_valid_sample(self):
        """Test a valid sample leaves optional values unset."""
        sample = StreamMetricsSample(
            latency_ms=120.0, buffer_events=1, bitrate_kbps=3000.0,
            frame_rate_fps=60.0, dropped_frames=2
        )
        assert sample.load_time_s is None
    
    @pytest.mark.parametrize('field_name,value', [
        ('latency_ms', -1.0),
        ('latency_ms', math.nan),
        ('bitrate_kbps', math.inf),
        ('frame_rate_fps', -30.0),
    ])
    def test_invalid_float_rejected(self, field_name, value):
        """Test negative, NaN and infinite floats are rejected."""
        values = dict(latency_ms=100.0, buffer_events=0, bitrate_kbps=1000.0,
                      frame_rate_fps=30.0, dropped_frames=0)
        values[field_name] = value
        
        with pytest.raises(SampleValidationError) as exc_info:
            StreamMetricsSample(**values)
        
        assert exc_info.value.field == field_name
    
    def test_negative_count_rejected(self):
        """Test negative counts are rejected."""
        with pytest.raises(SampleValidationError):
            StreamMetricsSample(latency_ms=100.0, buffer_events=-1, bitrate_kbps=1000.0,
                                frame_rate_fps=30.0, dropped_frames=0)
    
    def test_fractional_count_rejected(self):
        """Test fractional counts are rejected."""
        with pytest.raises(SampleValidationError):
            StreamMetricsSample(latency_ms=100.0, buffer_events=0, bitrate_kbps=1000.0,
                                frame_rate_fps=30.0, dropped_frames=1.5)
    
    def test_negative_optional_rejected(self):
        """Test negative optional values are rejected."""
        with pytest.raises(SampleValidationError):
            StreamMetricsSample(latency_ms=100.0, buffer_events=0, bitrate_kbps=1000.0,
                                frame_rate_fps=30.0, dropped_frames=0, load_time_s=-2.0)


class TestStreamQualitySnapshot:
    """Test suite for the per-stream snapshot."""
    
    @pytest.fixture
    def snapshot(self):
        return StreamQualitySnapshot(
            stream_id='s1', title='Speedrun', platform='twitch',
            url='https://twitch.tv/s1', start_time=1000.0
        )
    
    def test_new_stream_is_not_healthy(self, snapshot):
        """Test that a loading stream is not healthy."""
        assert snapshot.state == StreamState.LOADING
        assert snapshot.is_healthy is False
    
    def test_healthy_when_playing_within_limits(self, snapshot):
        """Test a playing stream within limits is healthy."""
        snapshot.state = StreamState.PLAYING
        snapshot.latency_ms = 199.0
        snapshot.buffer_events = 4
        assert snapshot.is_healthy is True
    
    def test_latency_boundary(self, snapshot):
        """Test latency at the cutoff is unhealthy."""
        snapshot.state = StreamState.PLAYING
        snapshot.latency_ms = 200.0
        assert snapshot.is_healthy is False
    
    def test_buffer_boundary(self, snapshot):
        """Test buffer events at the cutoff are unhealthy."""
        snapshot.state = StreamState.PLAYING
        snapshot.buffer_events = 5
        assert snapshot.is_healthy is False
    
    def test_apply_sample_overwrites_metrics(self, snapshot):
        """Test applying a sample overwrites the metric fields."""
        sample = StreamMetricsSample(latency_ms=600.0, buffer_events=1, bitrate_kbps=1000.0,
                                     frame_rate_fps=30.0, dropped_frames=3, load_time_s=1.5)
        
        snapshot.apply_sample(sample, now=2000.0)
        
        assert snapshot.latency_ms == 600.0
        assert snapshot.dropped_frames == 3
        assert snapshot.load_time_s == 1.5
        assert snapshot.last_update == 2000.0
        assert snapshot.start_time == 1000.0
    
    def test_apply_sample_keeps_load_time_when_absent(self, snapshot):
        """Test an absent load time keeps the previous value."""
        snapshot.load_time_s = 2.0
        sample = StreamMetricsSample(latency_ms=50.0, buffer_events=0, bitrate_kbps=1000.0,
                                     frame_rate_fps=30.0, dropped_frames=0)
        
        snapshot.apply_sample(sample, now=2000.0)
        
        assert snapshot.load_time_s == 2.0
    
    def test_dropped_frame_ratio(self, snapshot):
        """Test dropped frame ratio, including zero frame rate."""
        snapshot.frame_rate_fps = 30.0
        snapshot.dropped_frames = 3
        assert snapshot.dropped_frame_ratio == pytest.approx(0.1)
        
        snapshot.frame_rate_fps = 0.0
        assert snapshot.dropped_frame_ratio == 1.0
        
        snapshot.dropped_frames = 0
        assert snapshot.dropped_frame_ratio == 0.0
    
    def test_state_parse(self):
        """Test unrecognized states parse as unknown."""
        assert StreamState.parse('playing') == StreamState.PLAYING
        assert StreamState.parse('rewinding') == StreamState.UNKNOWN


class TestStreamAlert:
    """Test suite for the alert lifecycle."""
    
    @pytest.fixture
    def alert(self):
        return StreamAlert(
            alert_type=StreamAlertType.HIGH_LATENCY,
            stream_id='s1',
            message='High latency detected: 600ms',
            severity=AlertSeverity.CRITICAL,
            timestamp=1000.0
        )
    
    def test_lifecycle(self, alert):
        """Test the unacknowledged, acknowledged, resolved lifecycle."""
        assert alert.status == AlertStatus.UNACKNOWLEDGED
        
        assert alert.acknowledge(now=1010.0) is True
        assert alert.status == AlertStatus.ACKNOWLEDGED
        
        assert alert.resolve(now=1020.0) is True
        assert alert.status == AlertStatus.RESOLVED
        assert alert.is_active is False
    
    def test_transitions_are_idempotent(self, alert):
        """Test repeated transitions keep the first timestamp."""
        alert.acknowledge(now=1010.0)
        assert alert.acknowledge(now=1015.0) is False
        assert alert.acknowledged_at == 1010.0
        
        alert.resolve(now=1020.0)
        assert alert.resolve(now=1030.0) is False
        assert alert.resolved_at == 1020.0
    
    def test_acknowledge_after_resolve_is_noop(self, alert):
        """Test a resolved alert cannot be acknowledged."""
        alert.resolve(now=1020.0)
        assert alert.acknowledge(now=1030.0) is False
        assert alert.status == AlertStatus.RESOLVED
    
    def test_resolve_stamps_acknowledgement(self, alert):
        """Test resolving stamps the acknowledgement time."""
        alert.resolve(now=1020.0)
        assert alert.acknowledged_at == 1020.0
    
    def test_age_minutes(self, alert):
        """Test alert age in whole minutes."""
        assert alert.age_minutes(now=1000.0 + 125) == 2
    
    def test_severity_order(self):
        """Test alert severity priorities."""
        assert [s.priority for s in AlertSeverity] == [1, 2, 3, 4]


class TestQualityReport:
    """Test suite for session reports."""
    
    def _report(self, score):
        return StreamQualityReport(
            stream_id='s1', platform='twitch', window=SessionWindow(0.0, 60.0),
            session_duration_s=60.0, sample_count=12, average_latency_ms=90.0,
            total_buffer_events=0, average_load_time_s=1.0, quality_score=score
        )
    
    @pytest.mark.parametrize('score,grade', [
        (100.0, PerformanceGrade.EXCELLENT),
        (90.0, PerformanceGrade.EXCELLENT),
        (89.9, PerformanceGrade.GOOD),
        (80.0, PerformanceGrade.GOOD),
        (70.0, PerformanceGrade.FAIR),
        (60.0, PerformanceGrade.POOR),
        (59.9, PerformanceGrade.CRITICAL),
        (0.0, PerformanceGrade.CRITICAL),
    ])
    def test_grade_cutoffs(self, score, grade):
        """Test performance grade cutoffs."""
        assert self._report(score).performance_grade == grade
    
    def test_score_out_of_range_rejected(self):
        """Test scores above 100 are rejected."""
        with pytest.raises(ValueError):
            self._report(101.0)
    
    def test_to_dict_includes_grade(self):
        """Test the report dictionary includes the grade."""
        assert self._report(85.0).to_dict()['performance_grade'] == 'good'
    
    def test_window_rejects_inverted_bounds(self):
        """Test a window ending before it starts is rejected."""
        with pytest.raises(ValueError):
            SessionWindow(start=10.0, end=5.0)
    
    def test_issue_validation(self):
        """Test an issue with no occurrences is rejected."""
        with pytest.raises(ValueError):
            QualityIssue(
                issue_type=QualityIssueType.LATENCY, severity=IssueSeverity.MAJOR,
                description='d', occurrence_count=0, first_occurrence=0.0,
                last_occurrence=1.0, affected_streams=['s1'], recommended_action='a'
            )


class TestQualityBenchmark:
    """Test suite for benchmark polarity."""
    
    @pytest.mark.parametrize('benchmark_type,target,current,expected', [
        (BenchmarkType.LATENCY, 200.0, 150.0, True),
        (BenchmarkType.LATENCY, 200.0, 250.0, False),
        (BenchmarkType.LATENCY, 200.0, 200.0, True),
        (BenchmarkType.BITRATE, 1000.0, 1200.0, True),
        (BenchmarkType.BITRATE, 1000.0, 800.0, False),
        (BenchmarkType.LOAD_TIME, 3.0, 2.0, True),
        (BenchmarkType.BUFFER_EVENTS, 3, 4, False),
        (BenchmarkType.FRAME_RATE, 30.0, 24.0, False),
        (BenchmarkType.QUALITY_SCORE, 80.0, 80.0, True),
    ])
    def test_meets_benchmark(self, benchmark_type, target, current, expected):
        """Test benchmark polarity per type."""
        benchmark = QualityBenchmark(benchmark_type, target_value=target, current_value=current)
        assert benchmark.meets_benchmark is expected
    
    def test_units_and_ratio(self):
        """Test benchmark unit and performance ratio."""
        benchmark = QualityBenchmark(BenchmarkType.BITRATE, target_value=1000.0, current_value=1200.0)
        assert benchmark.unit == 'kbps'
        assert benchmark.performance_ratio == pytest.approx(1.2)


class TestMonitoringPoints:
    """Test suite for monitoring series points."""
    
    def test_buffer_health_range(self):
        """Test buffer health above 1 is rejected."""
        with pytest.raises(ValueError):
            BufferHealthPoint(stream_id='s1', buffer_health=1.5, buffer_events=0, timestamp=0.0)
    
    def test_network_packet_loss_range(self):
        """Test packet loss above 100% is rejected."""
        with pytest.raises(SampleValidationError):
            NetworkQualityPoint(bandwidth_bps=1e6, latency_ms=20.0, packet_loss_percent=120.0,
                                jitter_ms=2.0, connection_type='wifi')
    
    @pytest.mark.parametrize('field_name,value', [
        ('latency_ms', math.nan),
        ('jitter_ms', math.inf),
        ('bandwidth_bps', -math.inf),
        ('packet_loss_percent', math.nan),
        ('signal_strength', math.inf),
    ])
    def test_network_non_finite_rejected(self, field_name, value):
        """Test NaN and infinite network values are rejected."""
        values = dict(bandwidth_bps=1e6, latency_ms=20.0, packet_loss_percent=0.5,
                      jitter_ms=2.0, connection_type='wifi')
        values[field_name] = value
        
        with pytest.raises(SampleValidationError) as exc_info:
            NetworkQualityPoint(**values)
        
        assert exc_info.value.field == field_name
    
    def test_network_signal_strength_may_be_negative(self):
        """Test signal strength in dBm is accepted below zero."""
        point = NetworkQualityPoint(bandwidth_bps=1e6, latency_ms=20.0, packet_loss_percent=0.5,
                                    jitter_ms=2.0, connection_type='wifi', signal_strength=-67.0)
        assert point.signal_strength == -67.0
