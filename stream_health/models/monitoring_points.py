"""
Time-series monitoring data models.

This module defines the per-sample records the tracker retains for
insights and export: quality metrics, buffer health points, network
quality points and the insights derived from them.
"""

import platform as platform_module
import time
import uuid
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from stream_health.exceptions import SampleValidationError
from stream_health.models.stream_state import check_finite, check_non_negative


@dataclass(frozen=True)
class StreamQualityMetric:
    """
    Quality record for one ingested sample.
    
    quality_score is computed once at ingestion by the quality scoring
    analyzer and stored with the sample.
    """
    
    stream_id: str
    platform: str
    quality: str
    latency_ms: float
    buffer_events: int
    load_time_s: float
    bitrate_kbps: float
    frame_rate_fps: float
    dropped_frames: int
    quality_score: float
    timestamp: float
    metric_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    
    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class BufferHealthPoint:
    """Buffer health observation (0.0 = starved, 1.0 = perfect)."""
    
    stream_id: str
    buffer_health: float
    buffer_events: int
    timestamp: float
    buffer_size_s: Optional[float] = None
    
    def __post_init__(self):
        if not (0.0 <= self.buffer_health <= 1.0):
            raise ValueError('Buffer health must be between 0 and 1')
    
    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class NetworkQualityPoint:
    """Network quality observation."""
    
    bandwidth_bps: float
    latency_ms: float
    packet_loss_percent: float
    jitter_ms: float
    connection_type: str
    timestamp: float = field(default_factory=time.time)
    signal_strength: Optional[float] = None
    
    def __post_init__(self):
        """Validates network values; NaN and infinite values are rejected."""
        for name in ('bandwidth_bps', 'latency_ms', 'jitter_ms', 'timestamp'):
            check_non_negative(name, getattr(self, name))
        
        check_non_negative('packet_loss_percent', self.packet_loss_percent)
        if self.packet_loss_percent > 100.0:
            raise SampleValidationError(
                'Packet loss must be between 0 and 100',
                field='packet_loss_percent',
                value=self.packet_loss_percent
            )
        
        if self.signal_strength is not None:
            check_finite('signal_strength', self.signal_strength)
    
    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class NetworkStability(str, Enum):
    STABLE = 'stable'
    UNSTABLE = 'unstable'
    POOR = 'poor'


class QualityInsightType(str, Enum):
    PERFORMANCE_DEGRADATION = 'performance_degradation'
    PLATFORM_ISSUE = 'platform_issue'
    BUFFER_HEALTH = 'buffer_health'
    NETWORK_OPTIMIZATION = 'network_optimization'
    QUALITY_RECOMMENDATION = 'quality_recommendation'
    USER_EXPERIENCE = 'user_experience'
    SYSTEM_RESOURCE = 'system_resource'


class InsightImpact(str, Enum):
    LOW = 'low'
    MEDIUM = 'medium'
    HIGH = 'high'
    CRITICAL = 'critical'
    
    @property
    def priority(self) -> int:
        return list(InsightImpact).index(self) + 1


@dataclass(frozen=True)
class QualityInsight:
    """Trend-level observation with a recommendation."""
    
    insight_type: QualityInsightType
    title: str
    description: str
    recommendation: str
    impact: InsightImpact
    timestamp: float = field(default_factory=time.time)
    is_actionable: bool = True
    insight_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    
    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['insight_type'] = self.insight_type.value
        data['impact'] = self.impact.value
        return data


@dataclass(frozen=True)
class EnvironmentInfo:
    """Runtime environment metadata attached to exports."""
    
    app_version: str
    device_model: str
    os_version: str
    
    @classmethod
    def detect(cls, app_version: str) -> 'EnvironmentInfo':
        return cls(
            app_version=app_version,
            device_model=platform_module.machine() or 'unknown',
            os_version=f'{platform_module.system()} {platform_module.release()}'.strip(),
        )
    
    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class QualityExportSummary:
    """Summary block of a quality data export."""
    
    total_metrics: int
    average_quality_score: float
    total_alerts: int
    critical_alerts: int
    total_insights: int
    export_duration_s: float
    
    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
