"""
Session quality report data models.

This module defines the per-session StreamQualityReport, the performance
grade derived from its score, and the QualityIssue records attached to it.
"""

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class PerformanceGrade(str, Enum):
    """Letter-style grade derived from a 0-100 quality score."""
    
    EXCELLENT = 'excellent'
    GOOD = 'good'
    FAIR = 'fair'
    POOR = 'poor'
    CRITICAL = 'critical'
    
    @classmethod
    def from_score(cls, score: float) -> 'PerformanceGrade':
        if score >= 90:
            return cls.EXCELLENT
        if score >= 80:
            return cls.GOOD
        if score >= 70:
            return cls.FAIR
        if score >= 60:
            return cls.POOR
        return cls.CRITICAL


class QualityIssueType(str, Enum):
    LATENCY = 'latency'
    BUFFERING = 'buffering'
    BITRATE = 'bitrate'
    FRAME_RATE = 'frame_rate'
    CONNECTION = 'connection'
    AUDIO = 'audio'
    VIDEO = 'video'
    SYNC = 'sync'


class IssueSeverity(str, Enum):
    MINOR = 'minor'
    MODERATE = 'moderate'
    MAJOR = 'major'
    CRITICAL = 'critical'
    
    @property
    def priority(self) -> int:
        return list(IssueSeverity).index(self) + 1


@dataclass
class QualityIssue:
    """Recurring quality problem observed during a session."""
    
    issue_type: QualityIssueType
    severity: IssueSeverity
    description: str
    occurrence_count: int
    first_occurrence: float
    last_occurrence: float
    affected_streams: List[str]
    recommended_action: str
    possible_cause: Optional[str] = None
    is_resolved: bool = False
    resolved_at: Optional[float] = None
    issue_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    
    def __post_init__(self):
        """Validates issue values."""
        if self.occurrence_count < 1:
            raise ValueError('Occurrence count must be at least 1')
        
        if self.last_occurrence < self.first_occurrence:
            raise ValueError('Last occurrence must not precede first occurrence')
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.issue_id,
            'type': self.issue_type.value,
            'severity': self.severity.value,
            'description': self.description,
            'occurrence_count': self.occurrence_count,
            'first_occurrence': self.first_occurrence,
            'last_occurrence': self.last_occurrence,
            'affected_streams': list(self.affected_streams),
            'possible_cause': self.possible_cause,
            'recommended_action': self.recommended_action,
            'is_resolved': self.is_resolved,
            'resolved_at': self.resolved_at,
        }


@dataclass(frozen=True)
class SessionWindow:
    """Inclusive time window (epoch seconds) a report aggregates over."""
    
    start: float
    end: float
    
    def __post_init__(self):
        if self.end < self.start:
            raise ValueError('Session window end must not precede its start')
    
    @property
    def duration_s(self) -> float:
        return self.end - self.start
    
    def contains(self, timestamp: float) -> bool:
        return self.start <= timestamp <= self.end


@dataclass
class StreamQualityReport:
    """Quality summary of one stream session."""
    
    stream_id: str
    platform: str
    window: SessionWindow
    session_duration_s: float
    sample_count: int
    average_latency_ms: float
    total_buffer_events: int
    average_load_time_s: float
    quality_score: float
    recommendations: List[str] = field(default_factory=list)
    issues: List[QualityIssue] = field(default_factory=list)
    generated_at: float = field(default_factory=time.time)
    report_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    
    def __post_init__(self):
        """Validates report values."""
        if not (0.0 <= self.quality_score <= 100.0):
            raise ValueError('Quality score must be between 0 and 100')
    
    @property
    def performance_grade(self) -> PerformanceGrade:
        return PerformanceGrade.from_score(self.quality_score)
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.report_id,
            'stream_id': self.stream_id,
            'platform': self.platform,
            'window': {'start': self.window.start, 'end': self.window.end},
            'session_duration_s': self.session_duration_s,
            'sample_count': self.sample_count,
            'average_latency_ms': self.average_latency_ms,
            'total_buffer_events': self.total_buffer_events,
            'average_load_time_s': self.average_load_time_s,
            'quality_score': self.quality_score,
            'performance_grade': self.performance_grade.value,
            'recommendations': list(self.recommendations),
            'issues': [issue.to_dict() for issue in self.issues],
            'generated_at': self.generated_at,
        }
