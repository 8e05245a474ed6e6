"""
Target Pharmacology Exception Hierarchy

Provides specific exception types for the search boundary, pagination and
configuration. Search failures raised here are converted into the widget's
error signal by the query controller.
"""

from typing import Optional, Dict, Any


class TargetPharmaException(Exception):
    """
    Base exception for all targetpharma errors.

    All custom exceptions inherit from this class so callers can catch
    every package-specific error with a single except clause.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize exception with message and optional details.

        Args:
            message: Human-readable error message
            details: Additional context (server name, status, field, etc.)
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        """String representation with details."""
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


# =============================================================================
# Search Boundary Errors
# =============================================================================

class SearchError(TargetPharmaException):
    """
    Base class for failures at the pharmacology search boundary.

    Every SearchError terminates the current fetch. None of them are retried.
    """
    pass


class TransportFailureError(SearchError):
    """
    The count or data query did not produce a usable response.

    Raised when the search API reports failure (non-success status) or the
    call errors before a response is obtained.
    """

    def __init__(self, server_name: str, message: str, status: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None):
        """
        Initialize with server information.

        Args:
            server_name: Name of the search service (e.g., "OpenPHACTS")
            message: Error description
            status: HTTP status code, if a response was received
            details: Additional context
        """
        details = details or {}
        details['server'] = server_name
        if status is not None:
            details['status'] = status
        super().__init__(message, details)
        self.server_name = server_name
        self.status = status


class SearchConnectionError(TransportFailureError):
    """Unable to reach the search API."""
    pass


class SearchTimeoutError(TransportFailureError):
    """
    Search query timed out.

    Raised when a request exceeds the configured client timeout.
    """

    def __init__(self, server_name: str, timeout: float, query: str,
                 details: Optional[Dict[str, Any]] = None):
        """
        Initialize with timeout information.

        Args:
            server_name: Name of the search service
            timeout: Timeout threshold in seconds
            query: Endpoint that timed out
            details: Additional context
        """
        details = details or {}
        details.update({
            'timeout_seconds': timeout,
            'query': query
        })
        message = f"{server_name} query timed out after {timeout}s: {query}"
        super().__init__(server_name, message, details=details)
        self.timeout = timeout
        self.query = query


class MalformedResponseError(SearchError):
    """
    Response could not be parsed into a count or a result sequence.

    Treated the same way as a transport failure.
    """

    def __init__(self, message: str, field: Optional[str] = None,
                 value: Optional[Any] = None):
        """
        Initialize with parse details.

        Args:
            message: Parse error description
            field: Response field that was missing or invalid
            value: Offending value
        """
        details = {}
        if field:
            details['field'] = field
        if value is not None:
            details['value'] = str(value)[:200]
        super().__init__(message, details)
        self.field = field
        self.value = value


# =============================================================================
# Rendering Errors
# =============================================================================

class RenderError(TargetPharmaException):
    """A result template could not be rendered."""

    def __init__(self, message: str, target_id: Optional[str] = None):
        details = {'target_id': target_id} if target_id else {}
        super().__init__(message, details)
        self.target_id = target_id


# =============================================================================
# Pagination Errors
# =============================================================================

class InvalidPaginationError(TargetPharmaException, ValueError):
    """Page number or page size is not a positive integer."""

    def __init__(self, field: str, value: Any):
        message = f"{field} must be a positive integer, got {value!r}"
        super().__init__(message, {'field': field, 'value': value})
        self.field = field
        self.value = value


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(TargetPharmaException):
    """
    Configuration error.

    Raised when configuration is invalid or missing.
    This is NOT retryable - requires fixing configuration.
    """

    def __init__(self, config_key: str, message: str, config_file: Optional[str] = None):
        """
        Initialize with configuration details.

        Args:
            config_key: Configuration key that's problematic
            message: Error description
            config_file: Path to configuration file
        """
        details = {'config_key': config_key}
        if config_file:
            details['config_file'] = config_file

        super().__init__(message, details)
        self.config_key = config_key
        self.config_file = config_file


class MissingConfigurationError(ConfigurationError):
    """
    Required configuration is missing.

    Raised when a required configuration key is not found.
    """

    def __init__(self, config_key: str, config_file: Optional[str] = None):
        message = f"Missing required configuration: {config_key}"
        if config_file:
            message += f" in {config_file}"

        super().__init__(config_key, message, config_file)


# =============================================================================
# Helper Functions
# =============================================================================

def format_error_for_logging(error: Exception) -> Dict[str, Any]:
    """
    Format exception for structured logging.

    Args:
        error: The exception to format

    Returns:
        Dictionary with error details for logging

    Example:
        >>> logger.error("Count query failed", extra=format_error_for_logging(e))
    """
    base_info = {
        'error_type': type(error).__name__,
        'error_message': str(error),
    }

    if isinstance(error, TargetPharmaException):
        base_info.update(error.details)

    # Nested under extra_fields so StructuredFormatter emits it as-is
    return {"extra_fields": base_info}
