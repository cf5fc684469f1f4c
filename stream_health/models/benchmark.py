"""
Quality benchmark data model.
"""

import time
from dataclasses import dataclass, field
from enum import Enum


class BenchmarkType(str, Enum):
    """Benchmarked metric and its polarity."""
    
    LATENCY = 'latency'
    LOAD_TIME = 'load_time'
    BUFFER_EVENTS = 'buffer_events'
    BITRATE = 'bitrate'
    FRAME_RATE = 'frame_rate'
    QUALITY_SCORE = 'quality_score'
    
    @property
    def lower_is_better(self) -> bool:
        return self in _LOWER_IS_BETTER
    
    @property
    def unit(self) -> str:
        return _UNITS[self]


_LOWER_IS_BETTER = frozenset({
    BenchmarkType.LATENCY,
    BenchmarkType.LOAD_TIME,
    BenchmarkType.BUFFER_EVENTS,
})

_UNITS = {
    BenchmarkType.LATENCY: 'ms',
    BenchmarkType.LOAD_TIME: 's',
    BenchmarkType.BUFFER_EVENTS: 'events',
    BenchmarkType.BITRATE: 'kbps',
    BenchmarkType.FRAME_RATE: 'fps',
    BenchmarkType.QUALITY_SCORE: '%',
}


@dataclass(frozen=True)
class QualityBenchmark:
    """Measured value compared against a target for one metric."""
    
    benchmark_type: BenchmarkType
    target_value: float
    current_value: float
    platform: str = 'all'
    sample_size: int = 1
    timestamp: float = field(default_factory=time.time)
    
    @property
    def unit(self) -> str:
        return self.benchmark_type.unit
    
    @property
    def performance_ratio(self) -> float:
        if self.target_value <= 0:
            return 0.0
        return self.current_value / self.target_value
    
    @property
    def meets_benchmark(self) -> bool:
        if self.benchmark_type.lower_is_better:
            return self.current_value <= self.target_value
        return self.current_value >= self.target_value
