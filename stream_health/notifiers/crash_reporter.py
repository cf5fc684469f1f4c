"""
Crash reporter.

This module provides the CrashReporter class that forwards critical
error records to EventBridge for the crash reporting pipeline.
"""

import json
import logging
from typing import Any, Dict, Optional

from stream_health.config.settings import EVENT_SOURCE, get_setting
from stream_health.models.error_record import ErrorRecord


logger = logging.getLogger(__name__)


class CrashReporter:
    """Publishes crash reports for critical error records."""
    
    def __init__(self, eventbridge_client, event_bus_name: Optional[str] = None):
        self.eventbridge = eventbridge_client
        self.event_bus_name = event_bus_name or get_setting('STREAM_HEALTH_EVENT_BUS_NAME')
    
    def build_entry(self, record: ErrorRecord) -> Dict[str, Any]:
        """
        Builds the EventBridge entry for a crash report.
        
        Args:
            record: Error record to report
        
        Returns:
            Dictionary formatted for EventBridge PutEvents API.
        """
        detail = record.to_log_entry()
        if record.underlying_error is not None:
            detail['underlying_error'] = repr(record.underlying_error)
        
        return {
            'Source': f'{EVENT_SOURCE}.crash',
            'DetailType': f'crash.{record.category.value}',
            'EventBusName': self.event_bus_name,
            'Detail': json.dumps(detail, default=str)
        }
    
    def capture_error(self, record: ErrorRecord) -> None:
        """
        Submits a crash report.
        
        Args:
            record: Critical error record
        """
        try:
            self.eventbridge.put_events(Entries=[self.build_entry(record)])
            logger.info(f'Submitted crash report for {record.code} ({record.error_id})')
        except Exception as e:
            logger.error(
                f'Failed to submit crash report: {e}',
                exc_info=True
            )
