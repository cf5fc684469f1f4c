"""
Quality threshold configuration.

This module defines the immutable QualityThresholds used to evaluate stream
snapshots and to score sessions.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, List


@dataclass(frozen=True)
class QualityThresholds:
    """Thresholds for stream quality evaluation."""
    
    # Latency (milliseconds)
    max_latency_ms: float = 200.0
    critical_latency_ms: float = 500.0
    
    # Buffering (events per 30 second window)
    max_buffer_events: int = 3
    
    # Loading (seconds)
    max_load_time_s: float = 3.0
    
    # Media quality
    min_bitrate_kbps: float = 500.0
    min_frame_rate_fps: float = 24.0
    max_frame_drop_rate: float = 0.05  # 5%
    
    # Buffer and network health
    min_buffer_health: float = 0.8  # 80%
    max_packet_loss_percent: float = 1.0
    max_jitter_ms: float = 30.0
    
    def validate(self) -> List[str]:
        """
        Validates threshold values.
        
        Returns:
            List of error messages. Empty list if thresholds are valid.
        """
        errors = []
        
        if self.max_latency_ms <= 0:
            errors.append('Max latency must be positive')
        
        if self.critical_latency_ms <= self.max_latency_ms:
            errors.append('Critical latency must be greater than max latency')
        
        if self.max_buffer_events < 0:
            errors.append('Max buffer events must be non-negative')
        
        if self.max_load_time_s <= 0:
            errors.append('Max load time must be positive')
        
        if self.min_bitrate_kbps < 0:
            errors.append('Min bitrate must be non-negative')
        
        if self.min_frame_rate_fps < 0:
            errors.append('Min frame rate must be non-negative')
        
        if not (0.0 <= self.max_frame_drop_rate <= 1.0):
            errors.append('Max frame drop rate must be between 0 and 1')
        
        if not (0.0 <= self.min_buffer_health <= 1.0):
            errors.append('Min buffer health must be between 0 and 1')
        
        if not (0.0 <= self.max_packet_loss_percent <= 100.0):
            errors.append('Max packet loss must be between 0% and 100%')
        
        if self.max_jitter_ms < 0:
            errors.append('Max jitter must be non-negative')
        
        return errors
    
    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
