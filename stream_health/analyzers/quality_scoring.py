"""
Quality scoring.

This module provides the pure scoring functions used by the tracker:
the per-sample quality score and the three-factor reliability score
that session reports are graded on.
"""

from typing import Optional, Sequence

import numpy as np


SCORE_MIN = 0.0
SCORE_MAX = 100.0

# Per-sample penalties
BUFFER_EVENT_PENALTY = 10.0
LATENCY_GRACE_S = 5.0
LATENCY_PENALTY_PER_S = 5.0
LOAD_TIME_PENALTY_PER_S = 10.0

# Reliability baselines
LATENCY_BASELINE_MS = 50.0
LATENCY_MS_PER_POINT = 5.0
BUFFERING_RATE_WEIGHT = 200.0


def clamp_score(value: float) -> float:
    return float(max(SCORE_MIN, min(SCORE_MAX, value)))


def sample_quality_score(
    latency_ms: float,
    buffer_events: int,
    load_time_s: float,
    max_load_time_s: float = 3.0
) -> float:
    """
    Calculate the quality score of a single telemetry sample.
    
    Starts at 100 and subtracts 10 points per buffer event, 5 points per
    second of latency beyond 5 seconds, and 10 points per second of load
    time beyond max_load_time_s.
    
    Args:
        latency_ms: Sample latency in milliseconds
        buffer_events: Buffer events in the sample
        load_time_s: Load time in seconds
        max_load_time_s: Load time allowed before penalties apply
        
    Returns:
        Score clamped to [0, 100]
    """
    score = SCORE_MAX
    score -= buffer_events * BUFFER_EVENT_PENALTY
    
    latency_s = latency_ms / 1000.0
    if latency_s > LATENCY_GRACE_S:
        score -= (latency_s - LATENCY_GRACE_S) * LATENCY_PENALTY_PER_S
    
    if load_time_s > max_load_time_s:
        score -= (load_time_s - max_load_time_s) * LOAD_TIME_PENALTY_PER_S
    
    return clamp_score(score)


def latency_score(average_latency_ms: float) -> float:
    """50ms baseline, minus one point per 5ms above it."""
    return clamp_score(SCORE_MAX - (average_latency_ms - LATENCY_BASELINE_MS) / LATENCY_MS_PER_POINT)


def buffering_score(buffering_rate: float) -> float:
    """
    Minus two points per percent of samples that buffered.
    
    Args:
        buffering_rate: Fraction (0.0-1.0) of samples with buffer events
    """
    return clamp_score(SCORE_MAX - buffering_rate * BUFFERING_RATE_WEIGHT)


def buffering_rate(buffer_events: Sequence[int]) -> float:
    """Fraction of samples that recorded at least one buffer event."""
    if len(buffer_events) == 0:
        return 0.0
    return float(np.mean(np.asarray(buffer_events) > 0))


def mean_or_zero(values: Sequence[float]) -> float:
    if len(values) == 0:
        return 0.0
    return float(np.mean(np.asarray(values, dtype=np.float64)))


def reliability_score(
    latencies_ms: Sequence[float],
    buffer_events: Sequence[int],
    quality_scores: Sequence[float]
) -> Optional[float]:
    """
    Calculate the session reliability score.
    
    Arithmetic mean of the latency score, the buffering score and the
    mean per-sample quality score, each on a 0-100 scale.
    
    Args:
        latencies_ms: Sample latencies
        buffer_events: Sample buffer event counts
        quality_scores: Per-sample quality scores
        
    Returns:
        Score in [0, 100], or None when there are no samples
    """
    if len(latencies_ms) == 0:
        return None
    
    components = np.array([
        latency_score(mean_or_zero(latencies_ms)),
        buffering_score(buffering_rate(buffer_events)),
        clamp_score(mean_or_zero(quality_scores)),
    ])
    
    return clamp_score(float(components.mean()))
