"""
Error record data model.

This module defines the ErrorRecord dataclass, the single value type every
classified failure is turned into before it reaches the dispatcher.
"""

import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from stream_health.models.error_types import ErrorAction, ErrorCategory, ErrorSeverity


def _iso8601(timestamp: float) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat().replace('+00:00', 'Z')


def _parse_iso8601(value: str) -> float:
    return datetime.fromisoformat(value.replace('Z', '+00:00')).timestamp()


@dataclass(frozen=True)
class ErrorRecord:
    """
    Classified error.
    
    Severity, retryability and suggested actions are fixed at construction
    from the variant tables in stream_health.errors.catalog. The timestamp
    is captured once, when the record is created.
    
    Attributes:
        error_id: Stable unique identifier
        title: Human readable title
        message: Human readable message
        code: Category-scoped machine code (e.g. 'AUTH_003')
        category: Error category
        severity: Error severity
        context: Arbitrary key-value diagnostics
        timestamp: Creation time (epoch seconds, microsecond precision)
        is_retryable: Whether retrying the operation may succeed
        suggested_actions: Ordered remediation actions
        variant: Variant tag the record was built from (e.g. 'network.no_connection')
        underlying_error: Wrapped original exception, for diagnostics only
    """
    
    title: str
    message: str
    code: str
    category: ErrorCategory
    severity: ErrorSeverity
    is_retryable: bool
    suggested_actions: Tuple[ErrorAction, ...]
    variant: Optional[str] = None
    context: Dict[str, Any] = field(default_factory=dict, hash=False)
    error_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: float = field(default_factory=time.time)
    underlying_error: Optional[BaseException] = field(default=None, compare=False, repr=False)
    
    def __post_init__(self):
        """Validates record values."""
        if not self.code:
            raise ValueError('Error code must not be empty')
        
        if self.timestamp < 0:
            raise ValueError('Timestamp must be non-negative')

        # Persisted log entries carry microsecond precision
        object.__setattr__(self, 'timestamp', _parse_iso8601(_iso8601(self.timestamp)))

        # Accept any iterable of actions but store an immutable tuple
        object.__setattr__(self, 'suggested_actions', tuple(self.suggested_actions))
    
    @property
    def recovery_suggestion(self) -> Optional[str]:
        return self.suggested_actions[0].title if self.suggested_actions else None
    
    def to_log_entry(self) -> Dict[str, Any]:
        """
        Converts the record to a persisted log entry.
        
        Returns:
            Dictionary with JSON-compatible values (context is copied as-is).
        """
        return {
            'id': self.error_id,
            'code': self.code,
            'title': self.title,
            'message': self.message,
            'category': self.category.value,
            'severity': self.severity.value,
            'timestamp': _iso8601(self.timestamp),
            'is_retryable': self.is_retryable,
            'suggested_actions': [action.to_dict() for action in self.suggested_actions],
            'variant': self.variant,
            'context': dict(self.context),
        }
    
    @classmethod
    def from_log_entry(cls, entry: Dict[str, Any]) -> 'ErrorRecord':
        """
        Rebuilds a record from a persisted log entry.
        
        Args:
            entry: Dictionary produced by to_log_entry()
        
        Returns:
            ErrorRecord equal to the one that was logged
        """
        return cls(
            error_id=entry['id'],
            title=entry['title'],
            message=entry['message'],
            code=entry['code'],
            category=ErrorCategory(entry['category']),
            severity=ErrorSeverity(entry['severity']),
            timestamp=_parse_iso8601(entry['timestamp']),
            is_retryable=entry['is_retryable'],
            suggested_actions=tuple(
                ErrorAction.from_dict(action) for action in entry.get('suggested_actions', [])
            ),
            variant=entry.get('variant'),
            context=dict(entry.get('context') or {}),
        )
