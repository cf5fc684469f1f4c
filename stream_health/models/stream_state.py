"""
Stream snapshot and telemetry sample data models.

This module defines the per-stream quality snapshot that the tracker keeps
up to date, and the telemetry sample that updates it.
"""

import math
import time
from dataclasses import asdict, dataclass, field
from enum import Enum
from numbers import Integral, Real
from typing import Any, Dict, Optional

from stream_health.exceptions import SampleValidationError


# Health cutoffs for a single snapshot
HEALTHY_MAX_LATENCY_MS = 200.0
HEALTHY_MAX_BUFFER_EVENTS = 5


class StreamState(str, Enum):
    """Playback state of a stream."""
    
    LOADING = 'loading'
    PLAYING = 'playing'
    BUFFERING = 'buffering'
    PAUSED = 'paused'
    ERROR = 'error'
    UNKNOWN = 'unknown'
    
    @classmethod
    def parse(cls, value: str) -> 'StreamState':
        """Parses a raw state string, mapping anything unrecognized to UNKNOWN."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


def check_finite(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise SampleValidationError(f'{name} must be a number', field=name, value=value)
    if math.isnan(value) or math.isinf(value):
        raise SampleValidationError(f'{name} must be a finite number', field=name, value=value)


def check_non_negative(name: str, value) -> None:
    check_finite(name, value)
    if value < 0:
        raise SampleValidationError(f'{name} must be non-negative', field=name, value=value)


def check_count(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise SampleValidationError(f'{name} must be an integer', field=name, value=value)
    check_non_negative(name, value)


@dataclass(frozen=True)
class StreamMetricsSample:
    """
    Real-time telemetry sample for one stream.
    
    Values are validated on construction; negative, NaN and infinite
    values raise SampleValidationError so they never reach the averages.
    """
    
    latency_ms: float
    buffer_events: int
    bitrate_kbps: float
    frame_rate_fps: float
    dropped_frames: int
    load_time_s: Optional[float] = None
    timestamp: float = field(default_factory=time.time)
    buffer_size_s: Optional[float] = None
    network_bandwidth: Optional[float] = None
    cpu_usage: Optional[float] = None
    memory_usage: Optional[float] = None
    
    def __post_init__(self):
        """Validates sample values."""
        check_non_negative('latency_ms', self.latency_ms)
        check_count('buffer_events', self.buffer_events)
        check_non_negative('bitrate_kbps', self.bitrate_kbps)
        check_non_negative('frame_rate_fps', self.frame_rate_fps)
        check_count('dropped_frames', self.dropped_frames)
        check_non_negative('timestamp', self.timestamp)
        
        for name in ('load_time_s', 'buffer_size_s', 'network_bandwidth',
                     'cpu_usage', 'memory_usage'):
            value = getattr(self, name)
            if value is not None:
                check_non_negative(name, value)


@dataclass
class StreamQualitySnapshot:
    """
    Current quality state of one stream.
    
    Identity fields (stream_id, title, platform, url, start_time) are set
    once at registration. Metric fields are overwritten in place by each
    new sample; is_healthy is derived on read.
    """
    
    stream_id: str
    title: str
    platform: str
    url: str
    start_time: float
    quality: str = 'auto'
    state: StreamState = StreamState.LOADING
    latency_ms: float = 0.0
    buffer_events: int = 0
    load_time_s: float = 0.0
    bitrate_kbps: float = 0.0
    frame_rate_fps: float = 0.0
    dropped_frames: int = 0
    last_update: float = field(default_factory=time.time)
    
    def __post_init__(self):
        if not self.stream_id:
            raise ValueError('Stream ID must not be empty')
    
    @property
    def is_healthy(self) -> bool:
        return (
            self.latency_ms < HEALTHY_MAX_LATENCY_MS
            and self.buffer_events < HEALTHY_MAX_BUFFER_EVENTS
            and self.state == StreamState.PLAYING
        )
    
    @property
    def dropped_frame_ratio(self) -> float:
        """
        Dropped frames relative to the frames rendered in one second.
        
        Returns:
            dropped_frames / frame_rate_fps, 1.0 when frames were dropped
            at zero frame rate, 0.0 when nothing was dropped.
        """
        if self.dropped_frames == 0:
            return 0.0
        if self.frame_rate_fps <= 0:
            return 1.0
        return self.dropped_frames / self.frame_rate_fps
    
    def apply_sample(self, sample: StreamMetricsSample, now: Optional[float] = None) -> None:
        self.latency_ms = sample.latency_ms
        self.buffer_events = sample.buffer_events
        self.bitrate_kbps = sample.bitrate_kbps
        self.frame_rate_fps = sample.frame_rate_fps
        self.dropped_frames = sample.dropped_frames
        if sample.load_time_s is not None:
            self.load_time_s = sample.load_time_s
        self.last_update = now if now is not None else time.time()
    
    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['state'] = self.state.value
        data['is_healthy'] = self.is_healthy
        return data
