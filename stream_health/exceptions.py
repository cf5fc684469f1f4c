"""
Custom exceptions for stream health monitoring.

This module defines the exception classes raised by the stream quality
tracker, the export helpers and the durable storage layer. Domain errors
that describe user-facing failures are not exceptions: they are modelled as
ErrorRecord values and funnelled through the ErrorDispatcher.
"""


class StreamHealthError(Exception):
    """
    Base exception for stream health errors.
    
    All package-specific exceptions inherit from this base class,
    allowing for easy catching of every stream health failure.
    """
    pass


class SampleValidationError(StreamHealthError):
    """
    Raised when a telemetry sample is rejected at ingestion.
    
    This exception is raised when:
    - A metric value is negative
    - A metric value is NaN or infinite
    - A counter is not an integer
    
    Attributes:
        message: Error message describing the rejected value
        field: Name of the offending sample field (if known)
        value: The rejected value (if known)
    
    Examples:
        >>> raise SampleValidationError("latency_ms must be non-negative",
        ...                             field='latency_ms', value=-1.0)
    """
    
    def __init__(self, message: str, field: str = None, value=None):
        """
        Initialize SampleValidationError.
        
        Args:
            message: Error message
            field: Name of the offending field (optional)
            value: Rejected value (optional)
        """
        super().__init__(message)
        self.field = field
        self.value = value


class SerializationError(StreamHealthError):
    """
    Raised when an export payload cannot be encoded.
    
    The dispatcher and tracker catch this exception, log it and degrade to
    an absent result, so callers of the export operations never see it.
    
    Attributes:
        message: Error message
        original_error: Underlying encoder exception (if any)
    """
    
    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.original_error = original_error
    
    def __str__(self):
        """Return string representation with the encoder error if available."""
        if self.original_error is not None:
            return f"{super().__str__()}: {self.original_error}"
        return super().__str__()


class ConfigurationError(StreamHealthError):
    """
    Raised when configuration is invalid.
    
    This exception is raised when:
    - Quality threshold validation fails
    - Dispatcher configuration values are out of range
    - An environment override cannot be parsed
    
    Attributes:
        message: Error message describing the configuration issue
        validation_errors: List of validation error messages
    
    Examples:
        >>> raise ConfigurationError(
        ...     "Invalid thresholds",
        ...     validation_errors=["criticalLatency must exceed maxLatency"]
        ... )
    """
    
    def __init__(self, message: str, validation_errors: list = None):
        """
        Initialize ConfigurationError.
        
        Args:
            message: Error message
            validation_errors: List of validation error messages (optional)
        """
        super().__init__(message)
        self.validation_errors = validation_errors or []
    
    def __str__(self):
        """Return string representation with validation errors if available."""
        if self.validation_errors:
            errors_str = "; ".join(self.validation_errors)
            return f"{super().__str__()}: {errors_str}"
        return super().__str__()


class KeyValueStoreError(StreamHealthError):
    """Raised when the durable key-value slot cannot be read or written."""
    
    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.original_error = original_error


class AlertNotFoundError(StreamHealthError):
    """Raised when an alert command references an unknown alert id."""
    
    def __init__(self, alert_id: str):
        super().__init__(f"Alert not found: {alert_id}")
        self.alert_id = alert_id


class AppError(StreamHealthError):
    """
    Exception carrying an already classified ErrorRecord.
    
    Raise it where a typed domain failure has to travel through code that
    only understands exceptions; the classifier passes the record through
    unchanged.
    
    Attributes:
        record: The ErrorRecord describing the failure
    """
    
    def __init__(self, record):
        super().__init__(record.message)
        self.record = record
