"""
Unit tests for custom exceptions.

Tests the exception hierarchy to ensure proper error handling
and cause tracking.
"""

import pytest

from httpupgrade.exceptions import (
    HTTPUpgradeError,
    DialError,
    WriteError,
    HandshakeError,
    MalformedResponseError,
    UnrecognizedReplyError,
)
from httpupgrade.http_primitives import Destination


class TestHTTPUpgradeError:
    """Test base HTTPUpgradeError class."""
    
    def test_basic_creation(self) -> None:
        error = HTTPUpgradeError("Test error message")
        assert str(error) == "Test error message"
        assert error.message == "Test error message"
        assert error.cause is None
        assert error.destination is None
    
    def test_with_cause(self) -> None:
        original_error = ValueError("Original error")
        error = HTTPUpgradeError("Test error message", cause=original_error)
        assert error.cause is original_error
    
    def test_with_destination(self) -> None:
        error = HTTPUpgradeError("boom", destination=Destination("example.com", 443))
        assert str(error) == "boom (destination: tcp:example.com:443)"
        assert error.destination == ("example.com", 443)


class TestDialErrors:
    """Test the dial side of the hierarchy."""
    
    def test_dial_error_prefix(self) -> None:
        cause = ConnectionRefusedError("refused")
        error = DialError("failed to connect", cause=cause)
        assert str(error) == "Dial error: failed to connect"
        assert error.cause is cause
    
    def test_write_error_is_dial_error(self) -> None:
        error = WriteError("failed to write request")
        assert isinstance(error, DialError)
        assert str(error) == "Write error: failed to write request"


class TestHandshakeErrors:
    """Test the handshake side of the hierarchy."""
    
    @pytest.mark.parametrize("error_class, prefix", [
        (MalformedResponseError, "Malformed response: "),
        (UnrecognizedReplyError, "Unrecognized reply: "),
    ])
    def test_prefix_and_base(self, error_class, prefix) -> None:
        error = error_class("bad")
        assert isinstance(error, HandshakeError)
        assert isinstance(error, HTTPUpgradeError)
        assert not isinstance(error, DialError)
        assert str(error) == f"{prefix}bad"
