"""
Error dispatcher.

This module provides the ErrorDispatcher, the single write path for
error state: it records every classified error, keeps the counters,
decides which error is surfaced, and forwards records to analytics,
crash reporting and the persisted error log.
"""

import logging
import threading
import time
from collections import Counter
from typing import List, Optional, Union

from stream_health.config.settings import DispatcherConfig
from stream_health.errors.classifier import classify
from stream_health.errors.factory import unhandled_exception_error
from stream_health.exceptions import KeyValueStoreError, SerializationError
from stream_health.models import analytics_event
from stream_health.models.dispatch_state import ErrorDispatchState, ErrorStatistics
from stream_health.models.error_record import ErrorRecord
from stream_health.models.error_types import RETRY, ErrorAction, ErrorSeverity
from stream_health.notifiers.analytics_emitter import AnalyticsEmitter
from stream_health.notifiers.crash_reporter import CrashReporter
from stream_health.services.action_registry import ActionRegistry
from stream_health.services.error_log_store import ErrorLogStore
from stream_health.services.key_value_store import InMemoryKeyValueStore
from stream_health.services.side_effects import SideEffectRunner
from stream_health.utils.serialization import dumps_pretty, loads
from stream_health.utils.structured_logger import (
    log_configuration_loaded,
    log_error_action,
    log_error_dispatched,
)


logger = logging.getLogger(__name__)


class ErrorDispatcher:
    """
    Shared error state for the process.
    
    Construct one instance and pass it to every layer that reports
    errors. All mutations hold the dispatcher lock, so counters and
    history never diverge; readers get copies or an immutable snapshot.
    
    Collaborator calls are queued on the side effect runner while the lock
    is held, so they run in dispatch order, and their failures never reach
    the caller.
    
    Example:
        >>> dispatcher = ErrorDispatcher(side_effects=SideEffectRunner.inline())
        >>> record = dispatcher.dispatch(network_error(NetworkErrorKind.NO_CONNECTION))
        >>> dispatcher.is_showing
        False
    """
    
    def __init__(
        self,
        analytics: Optional[AnalyticsEmitter] = None,
        crash_reporter: Optional[CrashReporter] = None,
        error_log: Optional[ErrorLogStore] = None,
        actions: Optional[ActionRegistry] = None,
        side_effects: Optional[SideEffectRunner] = None,
        config: Optional[DispatcherConfig] = None
    ):
        """
        Initialize the dispatcher.
        
        Args:
            analytics: Analytics collaborator (events skipped if None)
            crash_reporter: Crash reporting collaborator (skipped if None)
            error_log: Persisted error log (in-memory slot if None)
            actions: Action effect registry (logging-only registry if None)
            side_effects: Runner for collaborator calls
            config: Dispatcher configuration
        """
        self.config = config or DispatcherConfig()
        self.analytics = analytics
        self.crash_reporter = crash_reporter
        self.error_log = error_log or ErrorLogStore(
            InMemoryKeyValueStore(),
            key=self.config.error_log_key,
            capacity=self.config.max_persisted_logs
        )
        self.actions = actions or ActionRegistry()
        self.side_effects = side_effects or SideEffectRunner()
        
        self._lock = threading.RLock()
        self._current_error: Optional[ErrorRecord] = None
        self._is_showing = False
        self._history: List[ErrorRecord] = []
        self._error_count = 0
        self._critical_error_count = 0
        
        log_configuration_loaded('error_dispatcher', {
            'error_log_key': self.config.error_log_key,
            'max_persisted_logs': self.config.max_persisted_logs,
            'recent_codes_count': self.config.recent_codes_count,
            'surface_min_priority': self.config.surface_min_priority,
        })
    
    @property
    def current_error(self) -> Optional[ErrorRecord]:
        with self._lock:
            return self._current_error
    
    @property
    def is_showing(self) -> bool:
        with self._lock:
            return self._is_showing
    
    @property
    def error_count(self) -> int:
        with self._lock:
            return self._error_count
    
    @property
    def critical_error_count(self) -> int:
        with self._lock:
            return self._critical_error_count
    
    @property
    def history(self) -> List[ErrorRecord]:
        with self._lock:
            return list(self._history)
    
    def snapshot(self) -> ErrorDispatchState:
        """Consistent view of the surfaced error, counters and history."""
        with self._lock:
            return ErrorDispatchState(
                current_error=self._current_error,
                is_showing=self._is_showing,
                error_count=self._error_count,
                critical_error_count=self._critical_error_count,
                history=tuple(self._history)
            )
    
    def dispatch(self, error: Union[ErrorRecord, BaseException]) -> ErrorRecord:
        """
        Record an error.
        
        Raw exceptions are classified first. The record is appended to the
        history and counted; severities at or above high become the current
        error. The record is always logged, persisted and sent to
        analytics, and critical records also go to the crash reporter.
        
        Args:
            error: Error record or raw exception
            
        Returns:
            The dispatched record
        """
        record = classify(error)
        
        with self._lock:
            self._history.append(record)
            self._error_count += 1
            if record.severity == ErrorSeverity.CRITICAL:
                self._critical_error_count += 1
            
            surfaced = record.severity.priority >= self.config.surface_min_priority
            if surfaced:
                self._current_error = record
                self._is_showing = True
            
            log_error_dispatched(record, surfaced)
            
            self.side_effects.submit(
                'error_log.append',
                self.error_log.append,
                record.to_log_entry()
            )
            
            if self.analytics is not None:
                self.side_effects.submit(
                    f'analytics.{analytics_event.ERROR_OCCURRED}',
                    self.analytics.track,
                    analytics_event.ERROR_OCCURRED,
                    {
                        'error_id': record.error_id,
                        'error_code': record.code,
                        'category': record.category.value,
                        'severity': record.severity.value,
                        'is_retryable': record.is_retryable,
                        'timestamp': record.timestamp,
                    }
                )
            
            if record.severity == ErrorSeverity.CRITICAL and self.crash_reporter is not None:
                self.side_effects.submit(
                    'crash_reporter.capture_error',
                    self.crash_reporter.capture_error,
                    record
                )
        
        return record
    
    def handle_unhandled_exception(self, error: Optional[BaseException] = None) -> ErrorRecord:
        """Dispatch an uncaught exception as a critical system error."""
        return self.dispatch(unhandled_exception_error(error))
    
    def dismiss(self) -> None:
        """Clear the surfaced error. History and counters are untouched."""
        with self._lock:
            self._current_error = None
            self._is_showing = False
    
    def execute_action(self, action: ErrorAction) -> None:
        """
        Run an action's effect for the current error, then dismiss.
        
        The effect runs on the side effect runner. An analytics event
        referencing the current error is emitted when one is surfaced.
        
        Args:
            action: Action chosen by the user
        """
        with self._lock:
            record = self._current_error
            
            self.side_effects.submit(
                f'action.{action.kind.value}',
                self.actions.execute,
                action,
                record
            )
            
            if record is not None and self.analytics is not None:
                self.side_effects.submit(
                    f'analytics.{analytics_event.ERROR_ACTION_TAKEN}',
                    self.analytics.track,
                    analytics_event.ERROR_ACTION_TAKEN,
                    {
                        'error_id': record.error_id,
                        'error_code': record.code,
                        'action_taken': action.title,
                        'timestamp': time.time(),
                    }
                )
            
            log_error_action(record, action.title)
            self.dismiss()
    
    def retry_last_operation(self) -> None:
        """Run the retry effect for the current error and dismiss it."""
        self.execute_action(RETRY)
    
    def statistics(self) -> ErrorStatistics:
        """
        Aggregate statistics over the in-memory history.
        
        Returns:
            Totals, counts by category and severity, and the codes of the
            most recent records (most recent last)
        """
        with self._lock:
            history = list(self._history)
            total = self._error_count
            critical = self._critical_error_count
        
        recent = history[-self.config.recent_codes_count:] if self.config.recent_codes_count else []
        
        return ErrorStatistics(
            total_errors=total,
            critical_errors=critical,
            category_distribution=dict(Counter(r.category.value for r in history)),
            severity_distribution=dict(Counter(r.severity.value for r in history)),
            recent_error_codes=[r.code for r in recent]
        )
    
    def clear_history(self) -> None:
        """
        Empty the history, reset both counters and clear the persisted log.
        
        The surfaced error is left as is.
        """
        with self._lock:
            self._history.clear()
            self._error_count = 0
            self._critical_error_count = 0
            self.side_effects.submit('error_log.clear', self.error_log.clear)
        
        logger.info('Error history cleared')
    
    def export_log(self) -> Optional[str]:
        """
        Export the persisted error log as pretty-printed JSON.
        
        Waits for queued log appends first, so every dispatched record
        that is still within the ring capacity is included.
        
        Returns:
            JSON array text (oldest first), or None when the log cannot be
            read or encoded
        """
        try:
            self.side_effects.flush()
            entries = self.error_log.entries()
            return dumps_pretty(entries)
        except (KeyValueStoreError, SerializationError) as e:
            logger.error(f'Failed to export error logs: {e}', exc_info=True)
            return None


def parse_error_log(text: str) -> List[ErrorRecord]:
    """
    Rebuild error records from an export_log() payload.
    
    Args:
        text: JSON text produced by export_log()
        
    Returns:
        Records in export order
        
    Raises:
        SerializationError: If the text is not a valid error log
    """
    entries = loads(text)
    if not isinstance(entries, list):
        raise SerializationError('Error log export must be a JSON array')
    
    try:
        return [ErrorRecord.from_log_entry(entry) for entry in entries]
    except (KeyError, TypeError, ValueError) as e:
        raise SerializationError('Malformed error log entry', original_error=e) from e
