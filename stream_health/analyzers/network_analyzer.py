"""
Network and buffer health analysis.

This module derives buffer health from buffer events and network latency,
and classifies network stability from recent network quality points.
"""

from typing import Optional, Sequence

import numpy as np

from stream_health.models.monitoring_points import NetworkQualityPoint, NetworkStability


STABILITY_WINDOW = 10
MIN_STABILITY_POINTS = 5

POOR_LATENCY_VARIANCE = 50.0
POOR_PACKET_LOSS = 2.0
UNSTABLE_LATENCY_VARIANCE = 20.0
UNSTABLE_PACKET_LOSS = 0.5


def buffer_health(buffer_events: int, average_latency_ms: float) -> float:
    """
    Calculate buffer health for a stream.
    
    Perfect health is 1.0. Each buffer event removes 0.1, and network
    latency removes up to a further 0.2 (saturating at 100ms).
    
    Args:
        buffer_events: Recent buffer events of the stream
        average_latency_ms: Current average network latency
        
    Returns:
        Health in [0.0, 1.0]
    """
    base_health = max(0.0, 1.0 - buffer_events / 10.0)
    network_adjustment = min(1.0, average_latency_ms / 100.0) * 0.2
    return float(max(0.0, min(1.0, base_health - network_adjustment)))


def latency_variance(latencies_ms: Sequence[float]) -> float:
    """Sample variance (n - 1 denominator); 0.0 for fewer than two values."""
    if len(latencies_ms) < 2:
        return 0.0
    return float(np.var(np.asarray(latencies_ms, dtype=np.float64), ddof=1))


class NetworkAnalyzer:
    """
    Classifies network stability.
    
    Uses the last 10 network points. Latency variance above 50 or mean
    packet loss above 2% is poor; above 20 or 0.5% is unstable.
    """
    
    def __init__(self, window: int = STABILITY_WINDOW, min_points: int = MIN_STABILITY_POINTS):
        self.window = window
        self.min_points = min_points
    
    def classify(self, points: Sequence[NetworkQualityPoint]) -> Optional[NetworkStability]:
        """
        Classify stability.
        
        Args:
            points: Network points, oldest first
            
        Returns:
            NetworkStability, or None when fewer than min_points are available
        """
        recent = list(points)[-self.window:]
        if len(recent) < self.min_points:
            return None
        
        variance = latency_variance([p.latency_ms for p in recent])
        packet_loss_avg = float(np.mean([p.packet_loss_percent for p in recent]))
        
        if variance > POOR_LATENCY_VARIANCE or packet_loss_avg > POOR_PACKET_LOSS:
            return NetworkStability.POOR
        if variance > UNSTABLE_LATENCY_VARIANCE or packet_loss_avg > UNSTABLE_PACKET_LOSS:
            return NetworkStability.UNSTABLE
        return NetworkStability.STABLE
