"""
Error record factory.

Builds ErrorRecord values from catalog variants. Classification fields are
looked up from the catalog tables, never passed in by callers.
"""

from typing import Any, Dict, Optional

from stream_health.errors.catalog import (
    ERROR_ACTIONS,
    ERROR_CATEGORIES,
    ERROR_CODES,
    ERROR_MESSAGES,
    ERROR_RETRYABLE,
    ERROR_SEVERITIES,
    ERROR_TITLES,
    AuthErrorKind,
    ErrorKind,
    GenericErrorKind,
    NetworkErrorKind,
    ValidationErrorKind,
    variant_tag,
)
from stream_health.models.error_record import ErrorRecord


def _describe(error: BaseException) -> str:
    return str(error) or type(error).__name__


def build_error(
    kind: ErrorKind,
    context: Optional[Dict[str, Any]] = None,
    underlying_error: Optional[BaseException] = None,
    **params: Any
) -> ErrorRecord:
    """
    Builds an ErrorRecord for a catalog variant.
    
    Args:
        kind: Catalog variant
        context: Extra diagnostics merged into the record context
        underlying_error: Original exception, kept for diagnostics only
        **params: Values for the variant's title/message placeholders
    
    Returns:
        ErrorRecord with classification fields taken from the catalog
    
    Raises:
        ValueError: If a placeholder required by the variant is missing
    
    Examples:
        >>> record = build_error(NetworkErrorKind.SERVER_ERROR, status_code=503)
        >>> record.code, record.message
        ('NET_003', 'Server error occurred (HTTP 503). Please try again later.')
    """
    try:
        title = ERROR_TITLES[kind].format(**params)
        message = ERROR_MESSAGES[kind].format(**params)
    except KeyError as e:
        raise ValueError(f'Missing parameter {e} for error variant {variant_tag(kind)}') from e
    
    record_context = dict(context or {})
    if underlying_error is not None:
        record_context.setdefault('underlying_error_type', type(underlying_error).__name__)
    
    return ErrorRecord(
        title=title,
        message=message,
        code=ERROR_CODES[kind],
        category=ERROR_CATEGORIES[kind],
        severity=ERROR_SEVERITIES[kind],
        is_retryable=ERROR_RETRYABLE[kind],
        suggested_actions=ERROR_ACTIONS[kind],
        variant=variant_tag(kind),
        context=record_context,
        underlying_error=underlying_error,
    )


def authentication_error(
    kind: AuthErrorKind,
    detail: Optional[str] = None,
    underlying_error: Optional[BaseException] = None
) -> ErrorRecord:
    """Builds an authentication error; detail feeds provider/unknown messages."""
    if detail is None and underlying_error is not None:
        detail = _describe(underlying_error)
    params = {'detail': detail} if detail is not None else {}
    return build_error(kind, underlying_error=underlying_error, **params)


def network_error(
    kind: NetworkErrorKind,
    status_code: Optional[int] = None,
    underlying_error: Optional[BaseException] = None
) -> ErrorRecord:
    """
    Builds a network error.
    
    Args:
        kind: Network variant
        status_code: HTTP status (required for SERVER_ERROR, kept in context)
        underlying_error: Original exception (message feeds UNKNOWN)
    """
    params: Dict[str, Any] = {}
    context: Dict[str, Any] = {}
    
    if status_code is not None:
        params['status_code'] = status_code
        context['status_code'] = status_code
    
    if kind == NetworkErrorKind.UNKNOWN:
        params['detail'] = _describe(underlying_error) if underlying_error is not None else 'unknown'
    
    return build_error(kind, context=context, underlying_error=underlying_error, **params)


def validation_error(
    kind: ValidationErrorKind,
    field: Optional[str] = None,
    limit: Optional[int] = None,
    title: Optional[str] = None,
    message: Optional[str] = None
) -> ErrorRecord:
    """Builds a validation error; field/limit/title/message fill the templates."""
    params = {
        name: value for name, value in (
            ('field', field), ('limit', limit), ('title', title), ('message', message)
        ) if value is not None
    }
    context = {'field': field} if field is not None else {}
    return build_error(kind, context=context, **params)


def generic_error(error: BaseException) -> ErrorRecord:
    """Wraps an unrecognized exception as a GENERIC_001 record."""
    return build_error(
        GenericErrorKind.GENERIC,
        context={'underlying_error_message': _describe(error)},
        underlying_error=error,
        detail=_describe(error),
    )


def unhandled_exception_error(error: Optional[BaseException] = None) -> ErrorRecord:
    """Builds the critical UNHANDLED_001 record for an uncaught exception."""
    context = {'underlying_error_message': _describe(error)} if error is not None else {}
    return build_error(GenericErrorKind.UNHANDLED, context=context, underlying_error=error)
