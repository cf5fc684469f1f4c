"""
Threshold evaluator.

This module compares a stream snapshot against QualityThresholds and
reports every breached threshold as the alert it maps to.
"""

from dataclasses import dataclass
from typing import List

from stream_health.models.quality_thresholds import QualityThresholds
from stream_health.models.stream_alert import AlertSeverity, StreamAlertType
from stream_health.models.stream_state import StreamQualitySnapshot


@dataclass(frozen=True)
class ThresholdBreach:
    """Single breached threshold."""
    
    alert_type: StreamAlertType
    severity: AlertSeverity
    message: str


class ThresholdEvaluator:
    """
    Maps snapshot metrics to threshold breaches.
    
    Breach mapping:
    - latency > max_latency_ms -> high_latency (critical above critical_latency_ms)
    - buffer_events > max_buffer_events -> buffering_issues
    - bitrate < min_bitrate_kbps -> low_bitrate
    - frame rate < min_frame_rate_fps or drop ratio > max_frame_drop_rate -> frame_drops
    - load time > max_load_time_s -> slow_loading
    
    Evaluation is pure and never raises.
    """
    
    def __init__(self, thresholds: QualityThresholds):
        self.thresholds = thresholds
    
    def evaluate(self, snapshot: StreamQualitySnapshot) -> List[ThresholdBreach]:
        """
        Evaluate a snapshot.
        
        Args:
            snapshot: Current stream snapshot
            
        Returns:
            Breaches in a fixed type order
        """
        t = self.thresholds
        breaches = []
        
        if snapshot.latency_ms > t.max_latency_ms:
            critical = snapshot.latency_ms > t.critical_latency_ms
            breaches.append(ThresholdBreach(
                alert_type=StreamAlertType.HIGH_LATENCY,
                severity=AlertSeverity.CRITICAL if critical else AlertSeverity.WARNING,
                message=f'High latency detected: {int(snapshot.latency_ms)}ms'
            ))
        
        if snapshot.buffer_events > t.max_buffer_events:
            breaches.append(ThresholdBreach(
                alert_type=StreamAlertType.BUFFERING_ISSUES,
                severity=AlertSeverity.WARNING,
                message=f'Excessive buffering: {snapshot.buffer_events} events'
            ))
        
        if snapshot.bitrate_kbps < t.min_bitrate_kbps:
            breaches.append(ThresholdBreach(
                alert_type=StreamAlertType.LOW_BITRATE,
                severity=AlertSeverity.WARNING,
                message=f'Low bitrate: {int(snapshot.bitrate_kbps)}kbps'
            ))
        
        drop_ratio = snapshot.dropped_frame_ratio
        if snapshot.frame_rate_fps < t.min_frame_rate_fps or drop_ratio > t.max_frame_drop_rate:
            breaches.append(ThresholdBreach(
                alert_type=StreamAlertType.FRAME_DROPS,
                severity=AlertSeverity.WARNING,
                message=(
                    f'Frame drops: {snapshot.frame_rate_fps:.1f}fps, '
                    f'{drop_ratio * 100:.1f}% dropped'
                )
            ))
        
        if snapshot.load_time_s > t.max_load_time_s:
            breaches.append(ThresholdBreach(
                alert_type=StreamAlertType.SLOW_LOADING,
                severity=AlertSeverity.WARNING,
                message=f'Slow loading: {snapshot.load_time_s:.1f}s'
            ))
        
        return breaches
