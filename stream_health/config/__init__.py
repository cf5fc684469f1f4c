"""
Configuration for stream health monitoring.
"""

from stream_health.config.settings import (
    ERROR_LOG_KEY,
    MAX_PERSISTED_ERROR_LOGS,
    RECENT_ERROR_CODES_COUNT,
    DispatcherConfig,
    get_setting,
)

__all__ = [
    'ERROR_LOG_KEY',
    'MAX_PERSISTED_ERROR_LOGS',
    'RECENT_ERROR_CODES_COUNT',
    'DispatcherConfig',
    'get_setting',
]
