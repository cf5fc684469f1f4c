"""
Analytics event data model.

This module defines the AnalyticsEvent dataclass for events published to
the analytics collaborator through EventBridge.
"""

import json
import time
from dataclasses import dataclass, field
from typing import Any, Dict

from stream_health.config.settings import EVENT_SOURCE


# Event names emitted by the core
ERROR_OCCURRED = 'error_occurred'
ERROR_ACTION_TAKEN = 'error_action_taken'
STREAM_ALERT_CREATED = 'stream_alert_created'
STREAM_QUALITY_REPORT = 'stream_quality_report'


@dataclass
class AnalyticsEvent:
    """Named analytics event with flat properties."""
    
    name: str
    properties: Dict[str, Any]
    timestamp: float = field(default_factory=time.time)
    
    def __post_init__(self):
        """Validates event values."""
        if not self.name:
            raise ValueError('Event name must not be empty')
        
        if self.timestamp < 0:
            raise ValueError('Timestamp must be non-negative')
    
    def to_eventbridge_entry(self, event_bus_name: str = 'default') -> Dict[str, Any]:
        """
        Converts to EventBridge event entry.
        
        Args:
            event_bus_name: Target event bus
        
        Returns:
            Dictionary formatted for EventBridge PutEvents API.
        """
        return {
            'Source': f'{EVENT_SOURCE}.analytics',
            'DetailType': f'analytics.{self.name}',
            'EventBusName': event_bus_name,
            'Detail': json.dumps({
                'event': self.name,
                'timestamp': self.timestamp,
                'properties': self.properties,
            }, default=str)
        }
