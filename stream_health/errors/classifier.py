"""
Error classifier.

Turns raw failures into ErrorRecord values. Classification is deterministic:
already classified errors pass through unchanged, recognized transport
failures map to fixed network variants, and everything else is wrapped as a
generic record.
"""

import logging
from typing import Optional, Union

import requests

from stream_health.errors.catalog import NetworkErrorKind
from stream_health.errors.factory import generic_error, network_error
from stream_health.exceptions import AppError
from stream_health.models.error_record import ErrorRecord


logger = logging.getLogger(__name__)


# Transport failures whose payload could not be understood
BAD_RESPONSE_ERRORS = (
    requests.exceptions.InvalidJSONError,
    requests.exceptions.ContentDecodingError,
    requests.exceptions.ChunkedEncodingError,
)


def _status_code(error: BaseException) -> Optional[int]:
    response = getattr(error, 'response', None)
    return getattr(response, 'status_code', None)


def classify_transport_error(error: BaseException) -> Optional[ErrorRecord]:
    """
    Maps a transport failure to a network variant.
    
    Mapping:
    - Timeouts (requests.Timeout, TimeoutError) -> NET_002 timeout
    - Connection failures (requests.ConnectionError, ConnectionError) -> NET_001
    - Undecodable responses -> NET_004 bad response
    - Any other requests.RequestException -> NET_999 wrapping the message
    
    Timeouts are checked first: requests.ConnectTimeout is both a timeout
    and a connection error.
    
    Args:
        error: Raw exception
    
    Returns:
        ErrorRecord, or None if the error is not a transport failure
    """
    if isinstance(error, (requests.exceptions.Timeout, TimeoutError)):
        return network_error(NetworkErrorKind.TIMEOUT, underlying_error=error)
    
    if isinstance(error, (requests.exceptions.ConnectionError, ConnectionError)):
        return network_error(NetworkErrorKind.NO_CONNECTION, underlying_error=error)
    
    if isinstance(error, BAD_RESPONSE_ERRORS):
        return network_error(NetworkErrorKind.BAD_RESPONSE, underlying_error=error)
    
    if isinstance(error, requests.exceptions.RequestException):
        return network_error(
            NetworkErrorKind.UNKNOWN,
            status_code=_status_code(error),
            underlying_error=error
        )
    
    return None


def classify(error: Union[ErrorRecord, BaseException]) -> ErrorRecord:
    """
    Classifies a raw failure.
    
    Args:
        error: An ErrorRecord, an AppError carrying one, or any exception
    
    Returns:
        ErrorRecord describing the failure
    
    Examples:
        >>> classify(requests.exceptions.ConnectionError('refused')).code
        'NET_001'
        >>> classify(KeyError('stream')).code
        'GENERIC_001'
    """
    if isinstance(error, ErrorRecord):
        return error
    
    if isinstance(error, AppError):
        return error.record
    
    record = classify_transport_error(error)
    if record is not None:
        return record
    
    logger.debug(f'Wrapping unrecognized {type(error).__name__} as generic error')
    return generic_error(error)
