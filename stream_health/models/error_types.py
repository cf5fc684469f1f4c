"""
Error classification enums and remediation actions.

This module defines the closed set of error categories, the totally ordered
severity scale, and the ErrorAction value used to describe a suggested
remediation step.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(str, Enum):
    """Category an error record belongs to."""
    
    AUTHENTICATION = 'authentication'
    NETWORK = 'network'
    VALIDATION = 'validation'
    DATABASE = 'database'
    PAYMENT = 'payment'
    STREAMING = 'streaming'
    PERMISSION = 'permission'
    SYSTEM = 'system'
    UNKNOWN = 'unknown'
    
    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class ErrorSeverity(str, Enum):
    """
    Error severity.
    
    Severities are totally ordered by priority (low=1 ... critical=4).
    """
    
    LOW = 'low'
    MEDIUM = 'medium'
    HIGH = 'high'
    CRITICAL = 'critical'
    
    @property
    def display_name(self) -> str:
        return self.value.capitalize()
    
    @property
    def priority(self) -> int:
        return _SEVERITY_PRIORITY[self]


_SEVERITY_PRIORITY = {
    ErrorSeverity.LOW: 1,
    ErrorSeverity.MEDIUM: 2,
    ErrorSeverity.HIGH: 3,
    ErrorSeverity.CRITICAL: 4,
}


class ErrorActionKind(str, Enum):
    """Kind of remediation action suggested for an error."""
    
    RETRY = 'retry'
    REFRESH = 'refresh'
    LOGIN = 'login'
    UPGRADE = 'upgrade'
    CONTACT_SUPPORT = 'contact_support'
    DISMISS = 'dismiss'
    SETTINGS = 'settings'
    CUSTOM = 'custom'


_ACTION_TITLES = {
    ErrorActionKind.RETRY: 'Retry',
    ErrorActionKind.REFRESH: 'Refresh',
    ErrorActionKind.LOGIN: 'Login',
    ErrorActionKind.UPGRADE: 'Upgrade',
    ErrorActionKind.CONTACT_SUPPORT: 'Contact Support',
    ErrorActionKind.DISMISS: 'Dismiss',
    ErrorActionKind.SETTINGS: 'Settings',
}


@dataclass(frozen=True)
class ErrorAction:
    """
    Suggested remediation action.
    
    Built-in kinds carry no payload. A custom action carries a label and a
    callback identifier that the collaborator layer resolves to an effect
    through the ActionRegistry, which keeps the action serializable.
    """
    
    kind: ErrorActionKind
    label: Optional[str] = None
    callback_id: Optional[str] = None
    
    def __post_init__(self):
        """Validates custom action payload."""
        if self.kind == ErrorActionKind.CUSTOM:
            if not self.label:
                raise ValueError('Custom action must have a label')
            if not self.callback_id:
                raise ValueError('Custom action must have a callback id')
    
    @classmethod
    def custom(cls, label: str, callback_id: str) -> 'ErrorAction':
        return cls(ErrorActionKind.CUSTOM, label=label, callback_id=callback_id)
    
    @property
    def title(self) -> str:
        if self.kind == ErrorActionKind.CUSTOM:
            return self.label
        return _ACTION_TITLES[self.kind]
    
    def to_dict(self) -> Dict[str, Any]:
        entry = {'kind': self.kind.value}
        if self.kind == ErrorActionKind.CUSTOM:
            entry['label'] = self.label
            entry['callback_id'] = self.callback_id
        return entry
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ErrorAction':
        return cls(
            ErrorActionKind(data['kind']),
            label=data.get('label'),
            callback_id=data.get('callback_id')
        )


RETRY = ErrorAction(ErrorActionKind.RETRY)
REFRESH = ErrorAction(ErrorActionKind.REFRESH)
LOGIN = ErrorAction(ErrorActionKind.LOGIN)
UPGRADE = ErrorAction(ErrorActionKind.UPGRADE)
CONTACT_SUPPORT = ErrorAction(ErrorActionKind.CONTACT_SUPPORT)
DISMISS = ErrorAction(ErrorActionKind.DISMISS)
SETTINGS = ErrorAction(ErrorActionKind.SETTINGS)
