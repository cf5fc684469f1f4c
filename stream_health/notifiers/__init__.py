"""
Stream health notifiers.

This module contains the collaborators that receive analytics events
and crash reports.
"""

from stream_health.notifiers.analytics_emitter import AnalyticsEmitter
from stream_health.notifiers.crash_reporter import CrashReporter

__all__ = ['AnalyticsEmitter', 'CrashReporter']
