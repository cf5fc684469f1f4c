"""
Stream alert data model.

This module defines the StreamAlert dataclass raised when a stream metric
crosses a quality threshold, and its acknowledgement/resolution lifecycle.
"""

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class StreamAlertType(str, Enum):
    """Cause of a stream alert."""
    
    HIGH_LATENCY = 'high_latency'
    BUFFERING_ISSUES = 'buffering_issues'
    SLOW_LOADING = 'slow_loading'
    QUALITY_DEGRADATION = 'quality_degradation'
    CONNECTION_LOSS = 'connection_loss'
    LOW_BITRATE = 'low_bitrate'
    FRAME_DROPS = 'frame_drops'
    AUDIO_ISSUES = 'audio_issues'
    UNKNOWN = 'unknown'
    
    @property
    def display_name(self) -> str:
        return self.value.replace('_', ' ').title()


class AlertSeverity(str, Enum):
    """Alert severity, ordered info < warning < error < critical."""
    
    INFO = 'info'
    WARNING = 'warning'
    ERROR = 'error'
    CRITICAL = 'critical'
    
    @property
    def priority(self) -> int:
        return list(AlertSeverity).index(self) + 1


class AlertStatus(str, Enum):
    UNACKNOWLEDGED = 'unacknowledged'
    ACKNOWLEDGED = 'acknowledged'
    RESOLVED = 'resolved'


@dataclass
class StreamAlert:
    """
    Threshold breach alert for a single stream.
    
    Lifecycle is monotonic: unacknowledged -> acknowledged -> resolved.
    Alerts are never deleted; a resolved alert stays in the alert history.
    """
    
    alert_type: StreamAlertType
    stream_id: str
    message: str
    severity: AlertSeverity
    timestamp: float = field(default_factory=time.time)
    alert_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    acknowledged_at: Optional[float] = None
    resolved_at: Optional[float] = None
    
    def __post_init__(self):
        """Validates alert values."""
        if not self.stream_id:
            raise ValueError('Stream ID must not be empty')
        
        if not self.message:
            raise ValueError('Message must not be empty')
    
    @property
    def status(self) -> AlertStatus:
        if self.resolved_at is not None:
            return AlertStatus.RESOLVED
        if self.acknowledged_at is not None:
            return AlertStatus.ACKNOWLEDGED
        return AlertStatus.UNACKNOWLEDGED
    
    @property
    def is_acknowledged(self) -> bool:
        return self.acknowledged_at is not None
    
    @property
    def is_active(self) -> bool:
        return self.resolved_at is None
    
    def age_minutes(self, now: Optional[float] = None) -> int:
        now = now if now is not None else time.time()
        return int(max(0.0, now - self.timestamp) // 60)
    
    def acknowledge(self, now: Optional[float] = None) -> bool:
        """
        Marks the alert acknowledged.
        
        Returns:
            True if the state changed, False if the alert was already
            acknowledged or resolved.
        """
        if self.status != AlertStatus.UNACKNOWLEDGED:
            return False
        self.acknowledged_at = now if now is not None else time.time()
        return True
    
    def resolve(self, now: Optional[float] = None) -> bool:
        """
        Marks the alert resolved.
        
        An unacknowledged alert is acknowledged at the same instant so the
        lifecycle never skips a state.
        
        Returns:
            True if the state changed, False if it was already resolved.
        """
        if self.status == AlertStatus.RESOLVED:
            return False
        now = now if now is not None else time.time()
        if self.acknowledged_at is None:
            self.acknowledged_at = now
        self.resolved_at = now
        return True
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.alert_id,
            'type': self.alert_type.value,
            'stream_id': self.stream_id,
            'message': self.message,
            'severity': self.severity.value,
            'timestamp': self.timestamp,
            'status': self.status.value,
            'acknowledged_at': self.acknowledged_at,
            'resolved_at': self.resolved_at,
        }
