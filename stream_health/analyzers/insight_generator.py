"""
Quality insight generation.

This module turns the tracker's time series into trend-level insights
and the overall quality score across active streams.
"""

from collections import OrderedDict
from typing import Dict, List, Sequence

import numpy as np

from stream_health.models.monitoring_points import (
    BufferHealthPoint,
    InsightImpact,
    NetworkStability,
    QualityInsight,
    QualityInsightType,
    StreamQualityMetric,
)
from stream_health.models.quality_thresholds import QualityThresholds


TREND_WINDOW = 20
DEGRADATION_FACTOR = 1.2
PLATFORM_WINDOW = 50
PLATFORM_MIN_SCORE = 70.0
BUFFER_HEALTH_WINDOW = 20
BUFFER_HEALTH_MIN = 0.7

_STABILITY_PENALTIES = {
    NetworkStability.STABLE: 0.0,
    NetworkStability.UNSTABLE: 10.0,
    NetworkStability.POOR: 20.0,
}


class InsightGenerator:
    """
    Derives insights from quality metrics and buffer health points.
    
    - performance degradation: last 20 metrics average latency more than
      20% above the 20 before them
    - platform issue: mean quality score under 70 for a platform in the
      last 50 metrics
    - buffer health: mean of the last 20 buffer health points under 0.7
    """
    
    def __init__(self, thresholds: QualityThresholds):
        self.thresholds = thresholds
    
    def generate(
        self,
        metrics: Sequence[StreamQualityMetric],
        buffer_points: Sequence[BufferHealthPoint],
        now: float
    ) -> List[QualityInsight]:
        insights = []
        metrics = list(metrics)
        buffer_points = list(buffer_points)
        
        if len(metrics) >= TREND_WINDOW:
            recent = metrics[-TREND_WINDOW:]
            previous = metrics[:-TREND_WINDOW][-TREND_WINDOW:]
            
            if previous:
                recent_avg = float(np.mean([m.latency_ms for m in recent]))
                previous_avg = float(np.mean([m.latency_ms for m in previous]))
                
                if previous_avg > 0 and recent_avg > previous_avg * DEGRADATION_FACTOR:
                    increase = int((recent_avg - previous_avg) / previous_avg * 100)
                    insights.append(QualityInsight(
                        insight_type=QualityInsightType.PERFORMANCE_DEGRADATION,
                        title='Network Performance Declining',
                        description=f'Average latency has increased by {increase}%',
                        recommendation='Check network connection and consider reducing stream quality',
                        impact=InsightImpact.MEDIUM,
                        timestamp=now
                    ))
        
        by_platform: Dict[str, List[float]] = OrderedDict()
        for metric in metrics[-PLATFORM_WINDOW:]:
            by_platform.setdefault(metric.platform, []).append(metric.quality_score)
        
        for platform, scores in by_platform.items():
            avg_score = float(np.mean(scores))
            if avg_score < PLATFORM_MIN_SCORE:
                insights.append(QualityInsight(
                    insight_type=QualityInsightType.PLATFORM_ISSUE,
                    title=f'{platform} Quality Issues',
                    description=f'Poor quality detected for {platform} streams (Score: {int(avg_score)})',
                    recommendation=f'Consider switching to a different quality setting for {platform}',
                    impact=InsightImpact.MEDIUM,
                    timestamp=now
                ))
        
        if len(buffer_points) >= BUFFER_HEALTH_WINDOW:
            recent_health = float(np.mean([p.buffer_health for p in buffer_points[-BUFFER_HEALTH_WINDOW:]]))
            
            if recent_health < BUFFER_HEALTH_MIN:
                insights.append(QualityInsight(
                    insight_type=QualityInsightType.BUFFER_HEALTH,
                    title='Poor Buffer Health',
                    description=f'Buffer health is below optimal levels ({int(recent_health * 100)}%)',
                    recommendation='Reduce concurrent streams or improve network connection',
                    impact=InsightImpact.HIGH,
                    timestamp=now
                ))
        
        return insights
    
    def overall_quality_score(
        self,
        active_stream_count: int,
        average_latency_ms: float,
        buffer_health_score: float,
        stability: NetworkStability,
        metrics: Sequence[StreamQualityMetric]
    ) -> float:
        """
        Calculate the overall quality score across active streams.
        
        Starts at 100 and subtracts a latency penalty (capped at 30), up to
        40 points for poor buffer health, 10 or 20 points for unstable or
        poor network, and 2 points per average buffer event over the last
        five metrics of each active stream.
        
        Args:
            active_stream_count: Number of registered streams
            average_latency_ms: Recent average network latency
            buffer_health_score: Mean buffer health across streams
            stability: Current network stability
            metrics: Quality metrics, oldest first
            
        Returns:
            Score clamped to [0, 100]; 100 when no stream is active
        """
        if active_stream_count == 0:
            return 100.0
        
        score = 100.0
        max_latency = self.thresholds.max_latency_ms
        
        if average_latency_ms > max_latency:
            score -= min((average_latency_ms - max_latency) / 10.0, 30.0)
        
        score -= (1.0 - buffer_health_score) * 40.0
        score -= _STABILITY_PENALTIES[stability]
        
        recent = list(metrics)[-(active_stream_count * 5):]
        if recent:
            score -= float(np.mean([m.buffer_events for m in recent])) * 2.0
        
        return float(max(0.0, min(100.0, score)))
