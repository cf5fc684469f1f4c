"""
Unit tests for StreamQualityTracker.

Tests ingestion, alert generation and deduplication, the alert
lifecycle, session reports, benchmarks, insights and export.
"""

import json
from concurrent.futures import ThreadPoolExecutor

import pytest

from stream_health.exceptions import AlertNotFoundError, ConfigurationError, SampleValidationError
from stream_health.models.benchmark import BenchmarkType, QualityBenchmark
from stream_health.models.monitoring_points import (
    NetworkQualityPoint,
    NetworkStability,
    QualityInsightType,
)
from stream_health.models.quality_report import (
    IssueSeverity,
    PerformanceGrade,
    QualityIssueType,
    SessionWindow,
)
from stream_health.models.quality_thresholds import QualityThresholds
from stream_health.models.stream_alert import AlertSeverity, AlertStatus, StreamAlertType
from stream_health.models.stream_state import StreamState
from stream_health.services.quality_tracker import StreamQualityTracker


def _network_point(latency_ms, packet_loss=0.0, timestamp=0.0):
    return NetworkQualityPoint(
        bandwidth_bps=50_000_000.0,
        latency_ms=latency_ms,
        packet_loss_percent=packet_loss,
        jitter_ms=3.0,
        connection_type='wifi',
        timestamp=timestamp
    )


class TestConfiguration:
    """Test suite for tracker construction."""
    
    def test_invalid_thresholds_rejected(self):
        """Test inconsistent thresholds are rejected."""
        with pytest.raises(ConfigurationError) as exc_info:
            StreamQualityTracker(thresholds=QualityThresholds(critical_latency_ms=100.0))
        
        assert 'Critical latency must be greater than max latency' in str(exc_info.value)


class TestIngestion:
    """Test suite for metrics ingestion."""
    
    def test_add_stream(self, tracker, clock):
        """Test registering a stream."""
        snapshot = tracker.add_stream('s1', 'Speedrun', 'twitch', 'https://twitch.tv/s1', quality='1080p')
        
        assert snapshot.title == 'Speedrun'
        assert snapshot.start_time == clock()
        assert snapshot.state == StreamState.LOADING
    
    def test_add_stream_twice_is_noop(self, tracker, clock):
        """Test registering a stream twice keeps the first registration."""
        tracker.add_stream('s1', 'Speedrun', 'twitch', 'https://twitch.tv/s1')
        clock.advance(30)
        
        snapshot = tracker.add_stream('s1', 'Other', 'youtube', 'https://youtube.com/x')
        
        assert snapshot.title == 'Speedrun'
        assert snapshot.start_time == clock() - 30
    
    def test_update_overwrites_metrics(self, tracker, make_sample, clock):
        """Test a sample overwrites the snapshot metrics."""
        tracker.add_stream('s1', 'Speedrun', 'twitch', 'https://twitch.tv/s1')
        clock.advance(5)
        
        snapshot = tracker.update_metrics('s1', make_sample(latency_ms=150.0, buffer_events=2,
                                                            bitrate_kbps=4000.0, frame_rate_fps=60.0,
                                                            dropped_frames=1, load_time_s=1.2))
        
        assert snapshot.latency_ms == 150.0
        assert snapshot.buffer_events == 2
        assert snapshot.bitrate_kbps == 4000.0
        assert snapshot.frame_rate_fps == 60.0
        assert snapshot.dropped_frames == 1
        assert snapshot.load_time_s == 1.2
        assert snapshot.last_update == clock()
        assert snapshot.title == 'Speedrun'
    
    def test_unknown_stream_is_created(self, tracker, make_sample):
        """Test samples for unknown streams register them."""
        snapshot = tracker.update_metrics('ghost', make_sample())
        
        assert snapshot.stream_id == 'ghost'
        assert snapshot.platform == 'unknown'
        assert tracker.get_snapshot('ghost') is not None
    
    def test_returned_snapshot_is_a_copy(self, tracker, make_sample):
        """Test callers receive a copy of the snapshot."""
        snapshot = tracker.update_metrics('s1', make_sample(latency_ms=100.0))
        snapshot.latency_ms = 9999.0
        
        assert tracker.get_snapshot('s1').latency_ms == 100.0
    
    def test_health_follows_state_and_metrics(self, tracker, make_sample):
        """Test health follows playback state and metrics."""
        tracker.update_metrics('s1', make_sample(latency_ms=80.0, buffer_events=0))
        assert tracker.get_snapshot('s1').is_healthy is False
        
        assert tracker.set_stream_state('s1', 'playing') is True
        assert tracker.get_snapshot('s1').is_healthy is True
        
        tracker.update_metrics('s1', make_sample(latency_ms=250.0))
        assert tracker.get_snapshot('s1').is_healthy is False
    
    def test_set_state_of_unknown_stream(self, tracker):
        """Test setting the state of an unknown stream."""
        assert tracker.set_stream_state('missing', StreamState.PLAYING) is False
    
    def test_rejects_non_sample(self, tracker):
        """Test non-sample values are rejected."""
        with pytest.raises(TypeError):
            tracker.update_metrics('s1', {'latency_ms': 100.0})
    
    def test_quality_metric_recorded_per_sample(self, tracker, make_sample):
        """Test each sample records a quality metric and buffer health point."""
        tracker.update_metrics('s1', make_sample(buffer_events=2))
        tracker.update_metrics('s2', make_sample())
        
        metrics = tracker.quality_metrics('s1')
        
        assert len(metrics) == 1
        assert metrics[0].quality_score == 80.0
        assert len(tracker.buffer_health_points()) == 2
    
    def test_series_are_capped(self, analytics, inline_runner, clock, make_sample):
        """Test stored series keep only the most recent entries."""
        tracker = StreamQualityTracker(analytics=analytics, side_effects=inline_runner,
                                       max_stored_metrics=5, clock=clock)
        for i in range(8):
            tracker.update_metrics('s1', make_sample(latency_ms=float(i)))
        
        latencies = [m.latency_ms for m in tracker.quality_metrics()]
        
        assert latencies == [3.0, 4.0, 5.0, 6.0, 7.0]
    
    def test_parallel_ingestion(self, tracker, make_sample):
        """Test concurrent ingestion across streams."""
        samples = [make_sample(latency_ms=float(i)) for i in range(200)]
        
        with ThreadPoolExecutor(max_workers=8) as executor:
            list(executor.map(lambda i: tracker.update_metrics(f's{i % 4}', samples[i]), range(200)))
        
        assert len(tracker.quality_metrics()) == 200
        assert len(tracker.streams()) == 4
        for stream_id in ('s0', 's1', 's2', 's3'):
            assert len(tracker.quality_metrics(stream_id)) == 50


class TestAlerts:
    """Test suite for alert evaluation and lifecycle."""
    
    def test_critical_latency_scenario(self, tracker, make_sample):
        """Test critical latency raises a critical alert."""
        tracker.update_metrics('s1', make_sample(latency_ms=600.0, buffer_events=1,
                                                 bitrate_kbps=1000.0, frame_rate_fps=30.0,
                                                 dropped_frames=0))
        
        created = tracker.evaluate_alerts('s1')
        
        assert len(created) == 1
        assert created[0].alert_type == StreamAlertType.HIGH_LATENCY
        assert created[0].severity == AlertSeverity.CRITICAL
        assert tracker.get_snapshot('s1').is_healthy is False
    
    def test_warning_latency(self, tracker, make_sample):
        """Test warning latency raises a warning alert."""
        tracker.update_metrics('s1', make_sample(latency_ms=300.0))
        
        created = tracker.evaluate_alerts('s1')
        
        assert created[0].severity == AlertSeverity.WARNING
    
    def test_evaluation_is_deduplicated(self, tracker, make_sample):
        """Test repeated evaluation does not duplicate active alerts."""
        tracker.update_metrics('s1', make_sample(latency_ms=600.0))
        
        tracker.evaluate_alerts('s1')
        second = tracker.evaluate_alerts('s1')
        
        assert second == []
        active = tracker.active_alerts('s1')
        assert len([a for a in active if a.alert_type == StreamAlertType.HIGH_LATENCY]) == 1
    
    def test_resolved_alert_allows_new_alert(self, tracker, make_sample):
        """Test a resolved alert allows a new alert of the same type."""
        tracker.update_metrics('s1', make_sample(latency_ms=600.0))
        first = tracker.evaluate_alerts('s1')[0]
        tracker.resolve_alert(first.alert_id)
        
        again = tracker.evaluate_alerts('s1')
        
        assert len(again) == 1
        assert again[0].alert_id != first.alert_id
        assert len(tracker.alerts('s1')) == 2
    
    def test_dedup_is_per_stream(self, tracker, make_sample):
        """Test deduplication is per stream."""
        tracker.update_metrics('s1', make_sample(latency_ms=600.0))
        tracker.update_metrics('s2', make_sample(latency_ms=600.0))
        
        tracker.evaluate_alerts('s1')
        tracker.evaluate_alerts('s2')
        
        assert len(tracker.active_alerts()) == 2
    
    def test_all_breaches(self, tracker, make_sample):
        """Test every breach type in evaluation order."""
        tracker.update_metrics('s1', make_sample(latency_ms=250.0, buffer_events=4,
                                                 bitrate_kbps=300.0, frame_rate_fps=20.0,
                                                 dropped_frames=0, load_time_s=4.5))
        
        types = [a.alert_type for a in tracker.evaluate_alerts('s1')]
        
        assert types == [
            StreamAlertType.HIGH_LATENCY,
            StreamAlertType.BUFFERING_ISSUES,
            StreamAlertType.LOW_BITRATE,
            StreamAlertType.FRAME_DROPS,
            StreamAlertType.SLOW_LOADING,
        ]
    
    def test_frame_drop_ratio_breach(self, tracker, make_sample):
        """Test dropped frame ratio above the limit breaches."""
        tracker.update_metrics('s1', make_sample(frame_rate_fps=30.0, dropped_frames=3))
        
        types = [a.alert_type for a in tracker.evaluate_alerts('s1')]
        
        assert types == [StreamAlertType.FRAME_DROPS]
    
    def test_healthy_stream_has_no_alerts(self, tracker, make_sample):
        """Test a healthy stream raises no alerts."""
        tracker.update_metrics('s1', make_sample())
        assert tracker.evaluate_alerts('s1') == []
    
    def test_unknown_stream_never_fails(self, tracker):
        """Test evaluating an unknown stream."""
        assert tracker.evaluate_alerts('missing') == []
    
    def test_acknowledge_then_resolve(self, tracker, make_sample, clock):
        """Test acknowledging then resolving an alert."""
        tracker.update_metrics('s1', make_sample(latency_ms=600.0))
        alert = tracker.evaluate_alerts('s1')[0]
        
        clock.advance(10)
        assert tracker.acknowledge_alert(alert.alert_id) is True
        assert tracker.acknowledge_alert(alert.alert_id) is False
        assert tracker.get_alert(alert.alert_id).status == AlertStatus.ACKNOWLEDGED
        
        clock.advance(10)
        assert tracker.resolve_alert(alert.alert_id) is True
        assert tracker.resolve_alert(alert.alert_id) is False
        
        stored = tracker.get_alert(alert.alert_id)
        assert stored.status == AlertStatus.RESOLVED
        assert stored.resolved_at == clock()
        assert tracker.active_alerts('s1') == []
        assert len(tracker.alerts('s1')) == 1
    
    def test_unknown_alert_id(self, tracker):
        """Test unknown alert ids raise."""
        with pytest.raises(AlertNotFoundError):
            tracker.acknowledge_alert('nope')
        with pytest.raises(AlertNotFoundError):
            tracker.resolve_alert('nope')
    
    def test_alert_emits_analytics(self, tracker, make_sample, mock_cloudwatch, mock_eventbridge):
        """Test new alerts emit a metric and an analytics event."""
        tracker.update_metrics('s1', make_sample(latency_ms=600.0))
        tracker.evaluate_alerts('s1')
        
        metric = mock_cloudwatch.put_metric_data.call_args.kwargs['MetricData'][0]
        dimensions = {d['Name']: d['Value'] for d in metric['Dimensions']}
        assert metric['MetricName'] == 'AlertsCreated'
        assert dimensions == {'StreamId': 's1', 'AlertType': 'high_latency', 'Severity': 'critical'}
        
        entry = mock_eventbridge.put_events.call_args.kwargs['Entries'][0]
        assert entry['DetailType'] == 'analytics.stream_alert_created'


class TestReports:
    """Test suite for session reports."""
    
    def test_report_of_good_session(self, tracker, make_sample, clock):
        """Test the report of a good session."""
        tracker.add_stream('s1', 'Speedrun', 'twitch', 'https://twitch.tv/s1')
        tracker.update_metrics('s1', make_sample(latency_ms=100.0))
        clock.advance(5)
        tracker.update_metrics('s1', make_sample(latency_ms=100.0))
        clock.advance(5)
        
        report = tracker.generate_report('s1')
        
        assert report.sample_count == 2
        assert report.average_latency_ms == 100.0
        assert report.total_buffer_events == 0
        # latency score 90, buffering score 100, sample scores 100
        assert report.quality_score == pytest.approx(290.0 / 3)
        assert report.performance_grade == PerformanceGrade.EXCELLENT
        assert report.session_duration_s == 10.0
        assert report.recommendations == []
    
    def test_report_of_poor_session(self, tracker, make_sample):
        """Test the report of a poor session."""
        tracker.update_metrics('s1', make_sample(latency_ms=300.0, buffer_events=2))
        tracker.update_metrics('s1', make_sample(latency_ms=300.0, buffer_events=0))
        
        report = tracker.generate_report('s1')
        
        # latency score 50, buffering score 0 (half the samples buffered), sample scores 80 and 100
        assert report.quality_score == pytest.approx(140.0 / 3)
        assert report.total_buffer_events == 2
        assert report.performance_grade == PerformanceGrade.CRITICAL
        assert 'Consider switching to a lower quality setting to reduce latency' in report.recommendations
    
    def test_report_respects_window(self, tracker, make_sample, clock):
        """Test reports only count samples inside the window."""
        start = clock()
        tracker.update_metrics('s1', make_sample(latency_ms=100.0))
        clock.advance(60)
        tracker.update_metrics('s1', make_sample(latency_ms=900.0))
        
        report = tracker.generate_report('s1', SessionWindow(start=start, end=start + 30))
        
        assert report.sample_count == 1
        assert report.average_latency_ms == 100.0
    
    def test_report_without_samples(self, tracker):
        """Test the report of a stream without samples."""
        tracker.add_stream('s1', 'Speedrun', 'twitch', 'https://twitch.tv/s1')
        
        report = tracker.generate_report('s1')
        
        assert report.sample_count == 0
        assert report.quality_score == 0.0
        assert report.performance_grade == PerformanceGrade.CRITICAL
    
    def test_report_for_unknown_stream(self, tracker):
        """Test the report of an unknown stream."""
        assert tracker.generate_report('missing') is None
    
    def test_report_groups_alerts_into_issues(self, tracker, make_sample, clock):
        """Test alerts are grouped into report issues."""
        tracker.update_metrics('s1', make_sample(latency_ms=600.0))
        first = tracker.evaluate_alerts('s1')[0]
        tracker.resolve_alert(first.alert_id)
        clock.advance(5)
        tracker.evaluate_alerts('s1')
        
        report = tracker.generate_report('s1')
        
        assert len(report.issues) == 1
        issue = report.issues[0]
        assert issue.issue_type == QualityIssueType.LATENCY
        assert issue.severity == IssueSeverity.CRITICAL
        assert issue.occurrence_count == 2
        assert issue.affected_streams == ['s1']
        assert issue.is_resolved is False
    
    def test_remove_stream_emits_final_report(self, tracker, make_sample, mock_eventbridge):
        """Test removing a stream emits its final report."""
        tracker.add_stream('s1', 'Speedrun', 'twitch', 'https://twitch.tv/s1')
        tracker.update_metrics('s1', make_sample())
        
        report = tracker.remove_stream('s1')
        
        assert report.stream_id == 's1'
        assert tracker.get_snapshot('s1') is None
        entry = mock_eventbridge.put_events.call_args.kwargs['Entries'][0]
        assert entry['DetailType'] == 'analytics.stream_quality_report'
        properties = json.loads(entry['Detail'])['properties']
        assert properties['stream_id'] == 's1'
        assert properties['platform'] == 'twitch'
    
    def test_remove_unknown_stream(self, tracker):
        """Test removing an unknown stream."""
        assert tracker.remove_stream('missing') is None
    
    def test_remove_stream_releases_stream_lock(self, tracker, make_sample):
        """Test removed and unknown streams leave no per-stream lock behind."""
        for i in range(20):
            tracker.update_metrics(f's{i}', make_sample())
            tracker.remove_stream(f's{i}')
        tracker.remove_stream('missing')
        
        assert tracker._stream_locks == {}
        
        snapshot = tracker.update_metrics('s0', make_sample(latency_ms=90.0))
        assert snapshot.latency_ms == 90.0
        assert list(tracker._stream_locks) == ['s0']


class TestBenchmarks:
    """Test suite for benchmarks."""
    
    def test_check_benchmark(self, tracker):
        """Test benchmark checks by polarity."""
        assert tracker.check_benchmark(QualityBenchmark(BenchmarkType.LATENCY, 200.0, 150.0)) is True
        assert tracker.check_benchmark(QualityBenchmark(BenchmarkType.LATENCY, 200.0, 250.0)) is False
        assert tracker.check_benchmark(QualityBenchmark(BenchmarkType.BITRATE, 1000.0, 1200.0)) is True
        assert tracker.check_benchmark(QualityBenchmark(BenchmarkType.BITRATE, 1000.0, 800.0)) is False
    
    def test_measure_benchmark(self, tracker, make_sample):
        """Test measuring a benchmark from platform samples."""
        tracker.add_stream('s1', 'Speedrun', 'twitch', 'https://twitch.tv/s1')
        tracker.update_metrics('s1', make_sample(latency_ms=100.0))
        tracker.update_metrics('s1', make_sample(latency_ms=200.0))
        tracker.update_metrics('other', make_sample(latency_ms=900.0))
        
        benchmark = tracker.measure_benchmark(BenchmarkType.LATENCY, 200.0, platform='twitch')
        
        assert benchmark.current_value == 150.0
        assert benchmark.sample_size == 2
        assert benchmark.meets_benchmark is True
    
    def test_measure_benchmark_without_samples(self, tracker):
        """Test measuring a benchmark without samples."""
        assert tracker.measure_benchmark(BenchmarkType.BITRATE, 1000.0) is None


class TestNetworkAndInsights:
    """Test suite for network stability, insights and the overall score."""
    
    def test_stability_needs_five_points(self, tracker):
        """Test stability is kept until five points exist."""
        for _ in range(4):
            tracker.record_network_sample(_network_point(10.0, packet_loss=5.0))
        
        assert tracker.network_stability == NetworkStability.STABLE
        
        assert tracker.record_network_sample(_network_point(10.0, packet_loss=5.0)) == NetworkStability.POOR
    
    @pytest.mark.parametrize('overrides', [
        {'latency_ms': float('nan')},
        {'jitter_ms': float('inf')},
        {'bandwidth_bps': float('-inf')},
        {'packet_loss_percent': float('nan')},
        {'signal_strength': float('nan')},
    ])
    def test_non_finite_network_values_rejected(self, tracker, clock, overrides):
        """Test NaN and infinite network values never reach stability or export."""
        for latency in (10.0, 40.0, 10.0, 40.0, 10.0):
            tracker.record_network_sample(_network_point(latency, timestamp=clock()))
        assert tracker.network_stability == NetworkStability.POOR
        
        values = dict(bandwidth_bps=1e6, latency_ms=20.0, packet_loss_percent=0.1,
                      jitter_ms=3.0, connection_type='wifi', timestamp=clock())
        values.update(overrides)
        
        with pytest.raises(SampleValidationError):
            tracker.record_network_sample(NetworkQualityPoint(**values))
        
        assert tracker.network_stability == NetworkStability.POOR
        assert len(tracker.network_points()) == 5
        assert tracker.export_quality_data() is not None
    
    def test_latency_variance_classification(self, tracker):
        """Test latency variance classification."""
        for latency in (10.0, 30.0, 10.0, 30.0, 10.0):
            tracker.record_network_sample(_network_point(latency))
        
        assert tracker.network_stability == NetworkStability.POOR
    
    def test_unstable_packet_loss(self, tracker):
        """Test moderate packet loss classifies as unstable."""
        for _ in range(5):
            tracker.record_network_sample(_network_point(20.0, packet_loss=1.0))
        
        assert tracker.network_stability == NetworkStability.UNSTABLE
    
    def test_performance_degradation_insight(self, tracker, make_sample):
        """Test rising latency produces a degradation insight."""
        for _ in range(20):
            tracker.update_metrics('s1', make_sample(latency_ms=100.0))
        for _ in range(20):
            tracker.update_metrics('s1', make_sample(latency_ms=150.0))
        
        insights = tracker.generate_insights()
        
        assert [i.insight_type for i in insights] == [QualityInsightType.PERFORMANCE_DEGRADATION]
        assert insights[0].description == 'Average latency has increased by 50%'
        assert tracker.insights == insights
    
    def test_buffer_and_platform_insights(self, tracker, make_sample):
        """Test buffer and platform insights."""
        tracker.add_stream('s1', 'Speedrun', 'twitch', 'https://twitch.tv/s1')
        for _ in range(20):
            tracker.update_metrics('s1', make_sample(buffer_events=4))
        
        insights = tracker.generate_insights()
        
        types = [i.insight_type for i in insights]
        assert types == [QualityInsightType.PLATFORM_ISSUE, QualityInsightType.BUFFER_HEALTH]
        assert insights[0].title == 'twitch Quality Issues'
    
    def test_no_insights_for_healthy_streams(self, tracker, make_sample):
        """Test healthy streams produce no insights."""
        for _ in range(30):
            tracker.update_metrics('s1', make_sample())
        
        assert tracker.generate_insights() == []
    
    def test_overall_score_without_streams(self, tracker):
        """Test the overall score without streams."""
        assert tracker.overall_quality_score() == 100.0
    
    def test_overall_score_penalties(self, tracker, make_sample):
        """Test overall score penalties."""
        tracker.update_metrics('s1', make_sample(buffer_events=2))
        
        # buffer health 0.8 costs 8 points, 2 buffer events cost 4 more
        assert tracker.overall_quality_score() == pytest.approx(88.0)


class TestExport:
    """Test suite for the quality data export."""
    
    def test_export_bundle(self, tracker, make_sample, clock):
        """Test the export bundle contents."""
        tracker.update_metrics('s1', make_sample(latency_ms=600.0))
        tracker.record_network_sample(_network_point(20.0, timestamp=clock()))
        tracker.evaluate_alerts('s1')
        clock.advance(30)
        
        data = json.loads(tracker.export_quality_data())
        
        assert set(data) == {
            'quality_metrics', 'buffer_health_data', 'network_quality_data',
            'stream_alerts', 'quality_insights', 'export_date', 'environment', 'summary'
        }
        assert data['environment']['app_version'] == '1.0.0'
        assert data['export_date'].endswith('Z')
        assert data['summary']['total_metrics'] == 1
        assert data['summary']['total_alerts'] == 1
        assert data['summary']['critical_alerts'] == 1
        assert data['summary']['export_duration_s'] == 30.0
        assert data['stream_alerts'][0]['type'] == 'high_latency'
    
    def test_export_excludes_resolved_alerts(self, tracker, make_sample):
        """Test resolved alerts are not exported."""
        tracker.update_metrics('s1', make_sample(latency_ms=600.0))
        alert = tracker.evaluate_alerts('s1')[0]
        tracker.resolve_alert(alert.alert_id)
        
        data = json.loads(tracker.export_quality_data())
        
        assert data['stream_alerts'] == []
    
    def test_export_of_empty_tracker(self, tracker):
        """Test exporting an empty tracker."""
        data = json.loads(tracker.export_quality_data())
        
        assert data['summary']['total_metrics'] == 0
        assert data['summary']['export_duration_s'] == 0.0
