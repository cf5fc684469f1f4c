"""
Error dispatch state and statistics models.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from stream_health.models.error_record import ErrorRecord


@dataclass(frozen=True)
class ErrorDispatchState:
    """
    Consistent read-only view of the dispatcher state.
    
    Produced under the dispatcher lock, so the counters, the history and
    the surfaced error always belong to the same point in time.
    """
    
    current_error: Optional[ErrorRecord]
    is_showing: bool
    error_count: int
    critical_error_count: int
    history: Tuple[ErrorRecord, ...] = ()


@dataclass(frozen=True)
class ErrorStatistics:
    """Aggregated error statistics."""
    
    total_errors: int
    critical_errors: int
    category_distribution: Dict[str, int] = field(default_factory=dict)
    severity_distribution: Dict[str, int] = field(default_factory=dict)
    # Most recent last
    recent_error_codes: List[str] = field(default_factory=list)
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_errors': self.total_errors,
            'critical_errors': self.critical_errors,
            'category_distribution': dict(self.category_distribution),
            'severity_distribution': dict(self.severity_distribution),
            'recent_error_codes': list(self.recent_error_codes),
        }
