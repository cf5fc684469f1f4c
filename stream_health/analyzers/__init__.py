"""
Stream quality analyzers.

This module contains the pure computations behind the tracker: scoring,
threshold evaluation, network analysis and insight generation.
"""

from stream_health.analyzers.insight_generator import InsightGenerator
from stream_health.analyzers.network_analyzer import NetworkAnalyzer, buffer_health
from stream_health.analyzers.quality_scoring import (
    reliability_score,
    sample_quality_score,
)
from stream_health.analyzers.threshold_evaluator import ThresholdBreach, ThresholdEvaluator

__all__ = [
    'InsightGenerator',
    'NetworkAnalyzer',
    'buffer_health',
    'reliability_score',
    'sample_quality_score',
    'ThresholdBreach',
    'ThresholdEvaluator',
]
