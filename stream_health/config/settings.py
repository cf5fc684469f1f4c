"""
Settings and environment overrides.

This module provides centralized constants for the error dispatcher and the
collaborator integrations, together with the helpers that let each value be
overridden through environment variables per deployment.
"""

import os
from dataclasses import dataclass
from typing import List, Optional

from stream_health.exceptions import ConfigurationError


# Durable key-value slot holding the persisted error log
ERROR_LOG_KEY = 'ErrorLogs'
MAX_PERSISTED_ERROR_LOGS = 100
RECENT_ERROR_CODES_COUNT = 10

# Errors at or above this severity priority are surfaced (high == 3)
SURFACE_MIN_PRIORITY = 3

# Collaborator integration defaults
EVENT_SOURCE = 'stream.health'
EVENT_BUS_NAME = 'default'
METRICS_NAMESPACE = 'StreamHealth'
KV_TABLE_NAME = 'StreamHealthKeyValue'

# Environment variable names mapped to their defaults
SETTING_ENV_VARS = {
    'STREAM_HEALTH_ERROR_LOG_KEY': ERROR_LOG_KEY,
    'STREAM_HEALTH_MAX_PERSISTED_LOGS': str(MAX_PERSISTED_ERROR_LOGS),
    'STREAM_HEALTH_RECENT_CODES_COUNT': str(RECENT_ERROR_CODES_COUNT),
    'STREAM_HEALTH_EVENT_BUS_NAME': EVENT_BUS_NAME,
    'STREAM_HEALTH_METRICS_NAMESPACE': METRICS_NAMESPACE,
    'STREAM_HEALTH_KV_TABLE_NAME': KV_TABLE_NAME,
}


def get_setting(key: str, default: Optional[str] = None) -> str:
    """
    Get a setting from the environment or fall back to its default.
    
    Args:
        key: Environment variable key (e.g., 'STREAM_HEALTH_EVENT_BUS_NAME')
        default: Default value if the environment variable is not set.
                 If None, the registered default for the key is used.
    
    Returns:
        Setting value from environment or default
    
    Example:
        >>> os.environ['STREAM_HEALTH_EVENT_BUS_NAME'] = 'stream-health-dev'
        >>> get_setting('STREAM_HEALTH_EVENT_BUS_NAME')
        'stream-health-dev'
    """
    if default is None:
        default = SETTING_ENV_VARS.get(key, '')
    
    value = os.getenv(key)
    if value:
        return value
    
    return default


def _int_setting(key: str) -> int:
    raw = get_setting(key)
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(
            f"Invalid integer for {key}",
            validation_errors=[f"{key}={raw!r} is not an integer"]
        ) from e


@dataclass
class DispatcherConfig:
    """
    Configuration for the error dispatcher.
    
    Attributes:
        error_log_key: Name of the durable key-value slot for the error log
        max_persisted_logs: Ring capacity of the persisted error log
        recent_codes_count: Number of codes reported in statistics
        surface_min_priority: Minimum severity priority that is surfaced
    """
    
    error_log_key: str = ERROR_LOG_KEY
    max_persisted_logs: int = MAX_PERSISTED_ERROR_LOGS
    recent_codes_count: int = RECENT_ERROR_CODES_COUNT
    surface_min_priority: int = SURFACE_MIN_PRIORITY
    
    def validate(self) -> List[str]:
        """
        Validates configuration parameters.
        
        Returns:
            List of error messages. Empty list if configuration is valid.
        """
        errors = []
        
        if not self.error_log_key:
            errors.append('Error log key must not be empty')
        
        if self.max_persisted_logs < 1:
            errors.append('Max persisted logs must be at least 1')
        
        if self.recent_codes_count < 0:
            errors.append('Recent codes count must be non-negative')
        
        if not (1 <= self.surface_min_priority <= 4):
            errors.append('Surface priority must be between 1 and 4')
        
        return errors
    
    def __post_init__(self):
        """Validate configuration on initialization."""
        errors = self.validate()
        if errors:
            raise ConfigurationError('Invalid dispatcher configuration', errors)
    
    @classmethod
    def from_environment(cls) -> 'DispatcherConfig':
        """
        Builds configuration from environment overrides.
        
        Returns:
            DispatcherConfig with environment values applied
        
        Raises:
            ConfigurationError: If an override is malformed or out of range
        """
        return cls(
            error_log_key=get_setting('STREAM_HEALTH_ERROR_LOG_KEY'),
            max_persisted_logs=_int_setting('STREAM_HEALTH_MAX_PERSISTED_LOGS'),
            recent_codes_count=_int_setting('STREAM_HEALTH_RECENT_CODES_COUNT'),
        )
