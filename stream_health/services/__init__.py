"""
Stream health services.

This module contains the shared state owners (error dispatcher and
quality tracker) and the stores and runners they depend on.
"""

from stream_health.services.action_registry import ActionRegistry
from stream_health.services.error_dispatcher import ErrorDispatcher, parse_error_log
from stream_health.services.error_log_store import ErrorLogStore
from stream_health.services.key_value_store import (
    DynamoDBKeyValueStore,
    InMemoryKeyValueStore,
    KeyValueStore,
)
from stream_health.services.quality_tracker import StreamQualityTracker
from stream_health.services.side_effects import SideEffectRunner

__all__ = [
    'ActionRegistry',
    'ErrorDispatcher',
    'parse_error_log',
    'ErrorLogStore',
    'DynamoDBKeyValueStore',
    'InMemoryKeyValueStore',
    'KeyValueStore',
    'StreamQualityTracker',
    'SideEffectRunner',
]
