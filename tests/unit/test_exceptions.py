"""
Unit tests for the exception hierarchy.

Tests all custom exception classes and the logging helper.
"""

import pytest
from targetpharma.core.exceptions import (
    TargetPharmaException,
    SearchError,
    TransportFailureError,
    SearchConnectionError,
    SearchTimeoutError,
    MalformedResponseError,
    RenderError,
    InvalidPaginationError,
    ConfigurationError,
    MissingConfigurationError,
    format_error_for_logging,
)


@pytest.mark.unit
class TestBaseExceptions:
    """Test base exception classes."""

    def test_base_exception_basic(self):
        """Test basic TargetPharmaException."""
        error = TargetPharmaException("Test error")
        assert str(error) == "Test error"
        assert error.message == "Test error"
        assert error.details == {}

    def test_base_exception_with_details(self):
        """Test TargetPharmaException with details."""
        error = TargetPharmaException("Test error", details={"server": "OpenPHACTS", "page": 2})
        assert "Test error" in str(error)
        assert "server=OpenPHACTS" in str(error)
        assert "page=2" in str(error)

    def test_search_errors_share_a_base(self):
        """Test every search boundary error is a SearchError."""
        for error in (
            TransportFailureError("OpenPHACTS", "failed"),
            SearchConnectionError("OpenPHACTS", "refused"),
            SearchTimeoutError("OpenPHACTS", 30, "/target/pharmacology/count"),
            MalformedResponseError("bad"),
        ):
            assert isinstance(error, SearchError)
            assert isinstance(error, TargetPharmaException)


@pytest.mark.unit
class TestSearchErrors:
    """Test search boundary exception classes."""

    def test_transport_failure_with_status(self):
        """Test TransportFailureError records server and status."""
        error = TransportFailureError("OpenPHACTS", "Count query failed", status=503)
        assert error.server_name == "OpenPHACTS"
        assert error.status == 503
        assert error.details == {"server": "OpenPHACTS", "status": 503}

    def test_transport_failure_without_status(self):
        """Test status is left out of details when no response was received."""
        error = SearchConnectionError("OpenPHACTS", "Connection refused", details={"path": "/x"})
        assert error.status is None
        assert "status" not in error.details
        assert error.details["path"] == "/x"

    def test_timeout_error(self):
        """Test SearchTimeoutError."""
        error = SearchTimeoutError("OpenPHACTS", 5.0, "/target/pharmacology/pages")
        assert error.timeout == 5.0
        assert error.query == "/target/pharmacology/pages"
        assert "timed out after 5.0s" in error.message
        assert isinstance(error, TransportFailureError)

    def test_malformed_response_truncates_value(self):
        """Test long offending values are truncated in details."""
        error = MalformedResponseError("Bad count", field="count", value="x" * 500)
        assert error.field == "count"
        assert len(error.details["value"]) == 200
        assert error.value == "x" * 500

    def test_malformed_response_minimal(self):
        error = MalformedResponseError("Bad count")
        assert error.details == {}


@pytest.mark.unit
class TestOtherErrors:
    """Test rendering, pagination and configuration errors."""

    def test_render_error(self):
        error = RenderError("Template rendering failed", target_id="pharma")
        assert error.details == {"target_id": "pharma"}
        assert not isinstance(error, SearchError)

    def test_invalid_pagination_error(self):
        error = InvalidPaginationError("page", 0)
        assert isinstance(error, ValueError)
        assert error.field == "page"
        assert "positive integer" in error.message

    def test_configuration_error(self):
        error = ConfigurationError("timeout", "Invalid timeout", config_file="config.json")
        assert error.config_key == "timeout"
        assert error.details == {"config_key": "timeout", "config_file": "config.json"}

    def test_missing_configuration_error(self):
        error = MissingConfigurationError("app_url", config_file="config.json")
        assert error.message == "Missing required configuration: app_url in config.json"
        assert isinstance(error, ConfigurationError)


@pytest.mark.unit
class TestFormatErrorForLogging:
    """Test format_error_for_logging helper."""

    def test_package_error(self):
        """Test details are merged into the log fields."""
        error = TransportFailureError("OpenPHACTS", "failed", status=500)
        fields = format_error_for_logging(error)["extra_fields"]
        assert fields["error_type"] == "TransportFailureError"
        assert fields["server"] == "OpenPHACTS"
        assert fields["status"] == 500

    def test_builtin_error(self):
        """Test standard exceptions only carry type and message."""
        fields = format_error_for_logging(ValueError("boom"))["extra_fields"]
        assert fields == {"error_type": "ValueError", "error_message": "boom"}
