"""
Tests for the error taxonomy and HTTP status classification.
"""

import pytest

from taurine_browser.errors import (
    ActivationTimeoutError,
    AuthError,
    EndpointFormatError,
    NotFoundError,
    RetryExhaustedError,
    TaurineError,
    TransportError,
    ValidationError,
    classify_status,
)


class TestClassifyStatus:
    """Tests for classify_status."""

    @pytest.mark.parametrize("status", [401, 403])
    def test_auth(self, status):
        """Test auth failures."""
        err = classify_status(status, {"message": "invalid api key"})
        assert isinstance(err, AuthError)
        assert err.status_code == status
        assert err.message == "invalid api key"

    @pytest.mark.parametrize("status", [404, 410])
    def test_not_found(self, status):
        """Test unknown or expired sessions."""
        err = classify_status(status, {"error": "session expired"})
        assert isinstance(err, NotFoundError)
        assert err.message == "session expired"

    @pytest.mark.parametrize("status", [400, 429, 500, 502, 503])
    def test_generic(self, status):
        """Test everything else is a plain TransportError."""
        err = classify_status(status, None, "Bad Gateway")
        assert type(err) is TransportError
        assert err.status_code == status
        assert err.message == "Bad Gateway"

    def test_text_body_used_as_message(self):
        """Test a non-JSON body becomes the message."""
        err = classify_status(500, "upstream exploded\n")
        assert err.message == "upstream exploded"
        assert str(err) == "HTTP 500: upstream exploded"

    def test_detail_field(self):
        """Test the detail field is also recognised."""
        err = classify_status(422, {"detail": "bad targeting"})
        assert err.message == "bad targeting"
        assert err.body == {"detail": "bad targeting"}


class TestErrorHierarchy:
    """Tests for error base classes."""

    def test_all_are_taurine_errors(self):
        """Test catching TaurineError catches every kind."""
        for cls in (AuthError, NotFoundError, TransportError, ValidationError):
            assert issubclass(cls, TaurineError)

    def test_builtin_bases(self):
        """Test compatibility with builtin exception types."""
        assert issubclass(ValidationError, ValueError)
        assert issubclass(EndpointFormatError, ValueError)
        assert issubclass(ActivationTimeoutError, TimeoutError)

    def test_retry_exhausted_attributes(self):
        """Test RetryExhaustedError keeps the last failure."""
        cause = TransportError("boom", status_code=503)
        err = RetryExhaustedError(3, cause)
        assert err.attempts == 3
        assert err.last_error is cause
        assert "3 attempt(s)" in str(err)

    def test_activation_timeout_attributes(self):
        """Test ActivationTimeoutError reports elapsed time and status."""
        err = ActivationTimeoutError(20.4, "pending", "sess123")
        assert err.elapsed == 20.4
        assert err.last_status == "pending"
        assert err.session_id == "sess123"
        assert "sess123" in str(err)
        assert "'pending'" in str(err)

    def test_network_error_str(self):
        """Test a TransportError without status prints just the message."""
        assert str(TransportError("connection refused")) == "connection refused"
