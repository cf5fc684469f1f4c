"""
Error variant catalog.

This module provides the closed taxonomy of error variants and the lookup
tables that fix, per variant, the machine code, title, message template,
category, severity, retryability and suggested actions.

Every table must cover every variant; the module verifies this on import
so an incomplete table fails at build time rather than at dispatch time.
"""

from enum import Enum
from typing import Dict, Tuple, Union

from stream_health.exceptions import ConfigurationError
from stream_health.models.error_types import (
    CONTACT_SUPPORT,
    DISMISS,
    LOGIN,
    REFRESH,
    RETRY,
    SETTINGS,
    ErrorAction,
    ErrorCategory,
    ErrorSeverity,
)


class AuthErrorKind(Enum):
    """Authentication error variants."""
    
    INVALID_CREDENTIALS = 'invalid_credentials'
    USER_NOT_FOUND = 'user_not_found'
    ACCOUNT_LOCKED = 'account_locked'
    SESSION_EXPIRED = 'session_expired'
    NETWORK_ERROR = 'network_error'
    PROVIDER_ERROR = 'provider_error'
    UNKNOWN = 'unknown'


class NetworkErrorKind(Enum):
    """Network error variants."""
    
    NO_CONNECTION = 'no_connection'
    TIMEOUT = 'timeout'
    SERVER_ERROR = 'server_error'
    BAD_RESPONSE = 'bad_response'
    RATE_LIMITED = 'rate_limited'
    UNKNOWN = 'unknown'


class ValidationErrorKind(Enum):
    """Input validation error variants."""
    
    INVALID_EMAIL = 'invalid_email'
    INVALID_PASSWORD = 'invalid_password'
    INVALID_URL = 'invalid_url'
    INVALID_USERNAME = 'invalid_username'
    INVALID_PHONE_NUMBER = 'invalid_phone_number'
    FIELD_REQUIRED = 'field_required'
    FIELD_TOO_LONG = 'field_too_long'
    FIELD_TOO_SHORT = 'field_too_short'
    INVALID_FORMAT = 'invalid_format'
    CUSTOM = 'custom'


class GenericErrorKind(Enum):
    """Fallback variants for failures outside the typed categories."""
    
    GENERIC = 'generic'
    UNHANDLED = 'unhandled'


ErrorKind = Union[AuthErrorKind, NetworkErrorKind, ValidationErrorKind, GenericErrorKind]

ALL_VARIANTS: Tuple[ErrorKind, ...] = (
    tuple(AuthErrorKind)
    + tuple(NetworkErrorKind)
    + tuple(ValidationErrorKind)
    + tuple(GenericErrorKind)
)


ERROR_CATEGORIES: Dict[ErrorKind, ErrorCategory] = {
    **{kind: ErrorCategory.AUTHENTICATION for kind in AuthErrorKind},
    **{kind: ErrorCategory.NETWORK for kind in NetworkErrorKind},
    **{kind: ErrorCategory.VALIDATION for kind in ValidationErrorKind},
    GenericErrorKind.GENERIC: ErrorCategory.UNKNOWN,
    GenericErrorKind.UNHANDLED: ErrorCategory.SYSTEM,
}


ERROR_CODES: Dict[ErrorKind, str] = {
    AuthErrorKind.INVALID_CREDENTIALS: 'AUTH_001',
    AuthErrorKind.USER_NOT_FOUND: 'AUTH_002',
    AuthErrorKind.ACCOUNT_LOCKED: 'AUTH_003',
    AuthErrorKind.SESSION_EXPIRED: 'AUTH_004',
    AuthErrorKind.NETWORK_ERROR: 'AUTH_005',
    AuthErrorKind.PROVIDER_ERROR: 'AUTH_006',
    AuthErrorKind.UNKNOWN: 'AUTH_999',
    
    NetworkErrorKind.NO_CONNECTION: 'NET_001',
    NetworkErrorKind.TIMEOUT: 'NET_002',
    NetworkErrorKind.SERVER_ERROR: 'NET_003',
    NetworkErrorKind.BAD_RESPONSE: 'NET_004',
    NetworkErrorKind.RATE_LIMITED: 'NET_005',
    NetworkErrorKind.UNKNOWN: 'NET_999',
    
    ValidationErrorKind.INVALID_EMAIL: 'VAL_001',
    ValidationErrorKind.INVALID_PASSWORD: 'VAL_002',
    ValidationErrorKind.INVALID_URL: 'VAL_003',
    ValidationErrorKind.INVALID_USERNAME: 'VAL_004',
    ValidationErrorKind.INVALID_PHONE_NUMBER: 'VAL_005',
    ValidationErrorKind.FIELD_REQUIRED: 'VAL_006',
    ValidationErrorKind.FIELD_TOO_LONG: 'VAL_007',
    ValidationErrorKind.FIELD_TOO_SHORT: 'VAL_008',
    ValidationErrorKind.INVALID_FORMAT: 'VAL_009',
    ValidationErrorKind.CUSTOM: 'VAL_999',
    
    GenericErrorKind.GENERIC: 'GENERIC_001',
    GenericErrorKind.UNHANDLED: 'UNHANDLED_001',
}


# Titles and messages are str.format templates; placeholders are filled
# from the parameters of parameterised variants.
ERROR_TITLES: Dict[ErrorKind, str] = {
    AuthErrorKind.INVALID_CREDENTIALS: 'Invalid Credentials',
    AuthErrorKind.USER_NOT_FOUND: 'User Not Found',
    AuthErrorKind.ACCOUNT_LOCKED: 'Account Locked',
    AuthErrorKind.SESSION_EXPIRED: 'Session Expired',
    AuthErrorKind.NETWORK_ERROR: 'Network Error',
    AuthErrorKind.PROVIDER_ERROR: 'Authentication Error',
    AuthErrorKind.UNKNOWN: 'Unknown Error',
    
    NetworkErrorKind.NO_CONNECTION: 'No Internet Connection',
    NetworkErrorKind.TIMEOUT: 'Request Timeout',
    NetworkErrorKind.SERVER_ERROR: 'Server Error',
    NetworkErrorKind.BAD_RESPONSE: 'Invalid Response',
    NetworkErrorKind.RATE_LIMITED: 'Rate Limited',
    NetworkErrorKind.UNKNOWN: 'Network Error',
    
    ValidationErrorKind.INVALID_EMAIL: 'Invalid Email',
    ValidationErrorKind.INVALID_PASSWORD: 'Invalid Password',
    ValidationErrorKind.INVALID_URL: 'Invalid URL',
    ValidationErrorKind.INVALID_USERNAME: 'Invalid Username',
    ValidationErrorKind.INVALID_PHONE_NUMBER: 'Invalid Phone Number',
    ValidationErrorKind.FIELD_REQUIRED: 'Field Required',
    ValidationErrorKind.FIELD_TOO_LONG: 'Field Too Long',
    ValidationErrorKind.FIELD_TOO_SHORT: 'Field Too Short',
    ValidationErrorKind.INVALID_FORMAT: 'Invalid Format',
    ValidationErrorKind.CUSTOM: '{title}',
    
    GenericErrorKind.GENERIC: 'Error',
    GenericErrorKind.UNHANDLED: 'Unexpected Error',
}


ERROR_MESSAGES: Dict[ErrorKind, str] = {
    AuthErrorKind.INVALID_CREDENTIALS: 'The email or password you entered is incorrect.',
    AuthErrorKind.USER_NOT_FOUND: 'No account found with this email address.',
    AuthErrorKind.ACCOUNT_LOCKED: (
        'Your account has been temporarily locked due to too many failed attempts.'
    ),
    AuthErrorKind.SESSION_EXPIRED: 'Your session has expired. Please log in again.',
    AuthErrorKind.NETWORK_ERROR: 'Unable to connect to authentication servers.',
    AuthErrorKind.PROVIDER_ERROR: '{detail}',
    AuthErrorKind.UNKNOWN: '{detail}',
    
    NetworkErrorKind.NO_CONNECTION: 'Please check your internet connection and try again.',
    NetworkErrorKind.TIMEOUT: 'The request took too long to complete. Please try again.',
    NetworkErrorKind.SERVER_ERROR: (
        'Server error occurred (HTTP {status_code}). Please try again later.'
    ),
    NetworkErrorKind.BAD_RESPONSE: 'Received an invalid response from the server.',
    NetworkErrorKind.RATE_LIMITED: 'Too many requests. Please wait a moment and try again.',
    NetworkErrorKind.UNKNOWN: 'Network error: {detail}',
    
    ValidationErrorKind.INVALID_EMAIL: 'Please enter a valid email address.',
    ValidationErrorKind.INVALID_PASSWORD: (
        'Password must be at least 8 characters long and contain letters and numbers.'
    ),
    ValidationErrorKind.INVALID_URL: 'Please enter a valid URL.',
    ValidationErrorKind.INVALID_USERNAME: (
        'Username must be 3-20 characters and contain only letters, numbers, and underscores.'
    ),
    ValidationErrorKind.INVALID_PHONE_NUMBER: 'Please enter a valid phone number.',
    ValidationErrorKind.FIELD_REQUIRED: '{field} is required.',
    ValidationErrorKind.FIELD_TOO_LONG: '{field} must be no more than {limit} characters.',
    ValidationErrorKind.FIELD_TOO_SHORT: '{field} must be at least {limit} characters.',
    ValidationErrorKind.INVALID_FORMAT: '{field} is not in the correct format.',
    ValidationErrorKind.CUSTOM: '{message}',
    
    GenericErrorKind.GENERIC: '{detail}',
    GenericErrorKind.UNHANDLED: 'An unexpected error occurred. Please try again.',
}


ERROR_SEVERITIES: Dict[ErrorKind, ErrorSeverity] = {
    AuthErrorKind.INVALID_CREDENTIALS: ErrorSeverity.MEDIUM,
    AuthErrorKind.USER_NOT_FOUND: ErrorSeverity.MEDIUM,
    AuthErrorKind.ACCOUNT_LOCKED: ErrorSeverity.HIGH,
    AuthErrorKind.SESSION_EXPIRED: ErrorSeverity.HIGH,
    AuthErrorKind.NETWORK_ERROR: ErrorSeverity.HIGH,
    AuthErrorKind.PROVIDER_ERROR: ErrorSeverity.HIGH,
    AuthErrorKind.UNKNOWN: ErrorSeverity.HIGH,
    
    NetworkErrorKind.NO_CONNECTION: ErrorSeverity.MEDIUM,
    NetworkErrorKind.TIMEOUT: ErrorSeverity.MEDIUM,
    NetworkErrorKind.SERVER_ERROR: ErrorSeverity.HIGH,
    NetworkErrorKind.BAD_RESPONSE: ErrorSeverity.HIGH,
    NetworkErrorKind.RATE_LIMITED: ErrorSeverity.HIGH,
    NetworkErrorKind.UNKNOWN: ErrorSeverity.MEDIUM,
    
    **{kind: ErrorSeverity.LOW for kind in ValidationErrorKind},
    
    GenericErrorKind.GENERIC: ErrorSeverity.MEDIUM,
    GenericErrorKind.UNHANDLED: ErrorSeverity.CRITICAL,
}


ERROR_RETRYABLE: Dict[ErrorKind, bool] = {
    AuthErrorKind.INVALID_CREDENTIALS: False,
    AuthErrorKind.USER_NOT_FOUND: False,
    AuthErrorKind.ACCOUNT_LOCKED: False,
    AuthErrorKind.SESSION_EXPIRED: True,
    AuthErrorKind.NETWORK_ERROR: True,
    AuthErrorKind.PROVIDER_ERROR: True,
    AuthErrorKind.UNKNOWN: True,
    
    NetworkErrorKind.NO_CONNECTION: True,
    NetworkErrorKind.TIMEOUT: True,
    NetworkErrorKind.SERVER_ERROR: True,
    NetworkErrorKind.BAD_RESPONSE: False,
    NetworkErrorKind.RATE_LIMITED: True,
    NetworkErrorKind.UNKNOWN: False,
    
    **{kind: False for kind in ValidationErrorKind},
    
    GenericErrorKind.GENERIC: True,
    GenericErrorKind.UNHANDLED: False,
}


ERROR_ACTIONS: Dict[ErrorKind, Tuple[ErrorAction, ...]] = {
    AuthErrorKind.INVALID_CREDENTIALS: (DISMISS,),
    AuthErrorKind.USER_NOT_FOUND: (DISMISS,),
    AuthErrorKind.ACCOUNT_LOCKED: (CONTACT_SUPPORT, DISMISS),
    AuthErrorKind.SESSION_EXPIRED: (LOGIN, DISMISS),
    AuthErrorKind.NETWORK_ERROR: (RETRY, REFRESH, DISMISS),
    AuthErrorKind.PROVIDER_ERROR: (RETRY, CONTACT_SUPPORT, DISMISS),
    AuthErrorKind.UNKNOWN: (RETRY, CONTACT_SUPPORT, DISMISS),
    
    NetworkErrorKind.NO_CONNECTION: (RETRY, SETTINGS, DISMISS),
    NetworkErrorKind.TIMEOUT: (RETRY, REFRESH, DISMISS),
    NetworkErrorKind.SERVER_ERROR: (RETRY, REFRESH, DISMISS),
    NetworkErrorKind.BAD_RESPONSE: (REFRESH, CONTACT_SUPPORT, DISMISS),
    NetworkErrorKind.RATE_LIMITED: (DISMISS,),
    NetworkErrorKind.UNKNOWN: (RETRY, CONTACT_SUPPORT, DISMISS),
    
    **{kind: (DISMISS,) for kind in ValidationErrorKind},
    
    GenericErrorKind.GENERIC: (RETRY, DISMISS),
    GenericErrorKind.UNHANDLED: (CONTACT_SUPPORT, DISMISS),
}


VARIANT_TABLES = {
    'ERROR_CATEGORIES': ERROR_CATEGORIES,
    'ERROR_CODES': ERROR_CODES,
    'ERROR_TITLES': ERROR_TITLES,
    'ERROR_MESSAGES': ERROR_MESSAGES,
    'ERROR_SEVERITIES': ERROR_SEVERITIES,
    'ERROR_RETRYABLE': ERROR_RETRYABLE,
    'ERROR_ACTIONS': ERROR_ACTIONS,
}


def variant_tag(kind: ErrorKind) -> str:
    """
    Returns the stable tag of a variant.
    
    Example:
        >>> variant_tag(NetworkErrorKind.NO_CONNECTION)
        'network.no_connection'
    """
    return f'{ERROR_CATEGORIES[kind].value}.{kind.value}'


def verify_catalog() -> None:
    """
    Verifies that every table covers every variant and codes are unique.
    
    Raises:
        ConfigurationError: If a table is incomplete or a code is reused
    """
    errors = []
    expected = set(ALL_VARIANTS)
    
    for table_name, table in VARIANT_TABLES.items():
        missing = expected - set(table)
        if missing:
            names = sorted(f'{type(kind).__name__}.{kind.name}' for kind in missing)
            errors.append(f'{table_name} is missing {", ".join(names)}')
    
    codes = list(ERROR_CODES.values())
    duplicates = sorted({code for code in codes if codes.count(code) > 1})
    if duplicates:
        errors.append(f'Duplicate error codes: {", ".join(duplicates)}')
    
    if errors:
        raise ConfigurationError('Incomplete error catalog', errors)


verify_catalog()
