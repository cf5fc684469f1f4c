"""
Error classification.

This package contains the closed error taxonomy, the record factory and
the classifier that turns raw failures into ErrorRecord values.
"""

from stream_health.errors.catalog import (
    AuthErrorKind,
    GenericErrorKind,
    NetworkErrorKind,
    ValidationErrorKind,
    variant_tag,
)
from stream_health.errors.classifier import classify
from stream_health.errors.factory import (
    authentication_error,
    build_error,
    generic_error,
    network_error,
    unhandled_exception_error,
    validation_error,
)

__all__ = [
    'AuthErrorKind',
    'GenericErrorKind',
    'NetworkErrorKind',
    'ValidationErrorKind',
    'variant_tag',
    'classify',
    'authentication_error',
    'build_error',
    'generic_error',
    'network_error',
    'unhandled_exception_error',
    'validation_error',
]
