"""
Shared pytest fixtures for stream-health tests.
"""

import os
import sys
from unittest.mock import Mock

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from stream_health.models.stream_state import StreamMetricsSample
from stream_health.notifiers.analytics_emitter import AnalyticsEmitter
from stream_health.notifiers.crash_reporter import CrashReporter
from stream_health.services.error_dispatcher import ErrorDispatcher
from stream_health.services.error_log_store import ErrorLogStore
from stream_health.services.key_value_store import InMemoryKeyValueStore
from stream_health.services.quality_tracker import StreamQualityTracker
from stream_health.services.side_effects import SideEffectRunner


class FakeClock:
    """Manually advanced epoch clock."""
    
    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start
    
    def __call__(self) -> float:
        return self.now
    
    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


@pytest.fixture(scope="session", autouse=True)
def aws_credentials():
    """Mock AWS credentials for testing."""
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
    os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def clock():
    """Fixture providing a controllable clock."""
    return FakeClock()


@pytest.fixture
def inline_runner():
    """Fixture providing a synchronous side effect runner."""
    return SideEffectRunner.inline()


@pytest.fixture
def mock_eventbridge():
    """Creates mock EventBridge client."""
    client = Mock()
    client.put_events.return_value = {'FailedEntryCount': 0, 'Entries': [{'EventId': 'evt-1'}]}
    return client


@pytest.fixture
def mock_cloudwatch():
    """Creates mock CloudWatch client."""
    return Mock()


@pytest.fixture
def analytics(mock_eventbridge, mock_cloudwatch):
    """Fixture providing an analytics emitter backed by mock clients."""
    return AnalyticsEmitter(mock_eventbridge, mock_cloudwatch, event_bus_name='test-bus')


@pytest.fixture
def crash_reporter(mock_eventbridge):
    """Fixture providing a crash reporter backed by a mock client."""
    return CrashReporter(mock_eventbridge, event_bus_name='test-bus')


@pytest.fixture
def kv_store():
    """Fixture providing an in-memory key-value store."""
    return InMemoryKeyValueStore()


@pytest.fixture
def error_log(kv_store):
    """Fixture providing the persisted error log."""
    return ErrorLogStore(kv_store)


@pytest.fixture
def dispatcher(analytics, crash_reporter, error_log, inline_runner):
    """Fixture providing a dispatcher with synchronous side effects."""
    return ErrorDispatcher(
        analytics=analytics,
        crash_reporter=crash_reporter,
        error_log=error_log,
        side_effects=inline_runner
    )


@pytest.fixture
def tracker(analytics, inline_runner, clock):
    """Fixture providing a quality tracker with a controllable clock."""
    return StreamQualityTracker(
        analytics=analytics,
        side_effects=inline_runner,
        clock=clock
    )


@pytest.fixture
def make_sample(clock):
    """Factory fixture for telemetry samples stamped with the fake clock."""
    def _make(
        latency_ms=80.0,
        buffer_events=0,
        bitrate_kbps=2500.0,
        frame_rate_fps=30.0,
        dropped_frames=0,
        load_time_s=None,
        timestamp=None
    ):
        return StreamMetricsSample(
            latency_ms=latency_ms,
            buffer_events=buffer_events,
            bitrate_kbps=bitrate_kbps,
            frame_rate_fps=frame_rate_fps,
            dropped_frames=dropped_frames,
            load_time_s=load_time_s,
            timestamp=clock() if timestamp is None else timestamp
        )
    return _make

