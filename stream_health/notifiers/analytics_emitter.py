"""
Analytics emitter.

This module provides the AnalyticsEmitter class for publishing analytics
events to EventBridge and alert counts to CloudWatch.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from stream_health.config.settings import get_setting
from stream_health.models.analytics_event import AnalyticsEvent
from stream_health.models.stream_alert import StreamAlert
from stream_health.utils.structured_logger import log_analytics_emission


logger = logging.getLogger(__name__)


class AnalyticsEmitter:
    """
    Emits analytics events to monitoring systems.
    
    Publishes named events to EventBridge and, when a CloudWatch client
    is configured, alert counters to CloudWatch.
    """
    
    def __init__(
        self,
        eventbridge_client,
        cloudwatch_client=None,
        event_bus_name: Optional[str] = None,
        namespace: Optional[str] = None
    ):
        """
        Initializes the analytics emitter.
        
        Args:
            eventbridge_client: Boto3 EventBridge client
            cloudwatch_client: Boto3 CloudWatch client (optional)
            event_bus_name: Target EventBridge bus (STREAM_HEALTH_EVENT_BUS_NAME if None)
            namespace: CloudWatch namespace (STREAM_HEALTH_METRICS_NAMESPACE if None)
        """
        self.eventbridge = eventbridge_client
        self.cloudwatch = cloudwatch_client
        self.event_bus_name = event_bus_name or get_setting('STREAM_HEALTH_EVENT_BUS_NAME')
        self.namespace = namespace or get_setting('STREAM_HEALTH_METRICS_NAMESPACE')
    
    def track(self, event_name: str, properties: Dict[str, Any]) -> None:
        """
        Publishes an analytics event to EventBridge.
        
        Args:
            event_name: Event name (e.g., 'error_occurred')
            properties: Flat event properties
        """
        try:
            event = AnalyticsEvent(name=event_name, properties=dict(properties))
            
            response = self.eventbridge.put_events(
                Entries=[event.to_eventbridge_entry(self.event_bus_name)]
            )
            
            failed = response.get('FailedEntryCount', 0) if isinstance(response, dict) else 0
            if failed:
                log_analytics_emission(
                    event_name,
                    success=False,
                    error=f'{failed} entries rejected by EventBridge'
                )
                return
            
            log_analytics_emission(event_name, success=True)
            
        except Exception as e:
            logger.error(
                f'Failed to emit analytics event to EventBridge: {e}',
                exc_info=True
            )
            log_analytics_emission(event_name, success=False, error=str(e))
    
    def emit_alert_metric(self, alert: StreamAlert) -> None:
        """
        Publishes an AlertsCreated count to CloudWatch.
        
        No-op when no CloudWatch client is configured.
        
        Args:
            alert: Newly created alert
        """
        if self.cloudwatch is None:
            return
        
        try:
            self.cloudwatch.put_metric_data(
                Namespace=self.namespace,
                MetricData=[
                    {
                        'MetricName': 'AlertsCreated',
                        'Value': 1.0,
                        'Unit': 'Count',
                        'Timestamp': datetime.fromtimestamp(alert.timestamp, tz=timezone.utc),
                        'Dimensions': [
                            {'Name': 'StreamId', 'Value': alert.stream_id},
                            {'Name': 'AlertType', 'Value': alert.alert_type.value},
                            {'Name': 'Severity', 'Value': alert.severity.value}
                        ]
                    }
                ]
            )
            
            logger.debug(f'Emitted AlertsCreated metric for stream {alert.stream_id}')
            
        except Exception as e:
            logger.error(
                f'Failed to emit alert metric to CloudWatch: {e}',
                exc_info=True
            )
