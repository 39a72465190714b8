"""
Custom exceptions for httpupgrade.

This module defines the exception hierarchy used throughout
the library for error handling and debugging.
"""

from typing import Any, Optional


class HTTPUpgradeError(Exception):
    """Base exception for all httpupgrade errors."""
    
    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        destination: Optional[Any] = None,
    ) -> None:
        if destination is not None:
            message = f"{message} (destination: {destination})"
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.destination = destination


class DialError(HTTPUpgradeError):
    """Raised when the raw connection or the TLS layer cannot be set up."""
    
    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        destination: Optional[Any] = None,
    ) -> None:
        super().__init__(f"Dial error: {message}", cause, destination)


class WriteError(DialError):
    """Raised when the upgrade request cannot be written to the wire."""
    
    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        destination: Optional[Any] = None,
    ) -> None:
        HTTPUpgradeError.__init__(self, f"Write error: {message}", cause, destination)


class HandshakeError(HTTPUpgradeError):
    """Base class for failures while validating the upgrade response."""


class MalformedResponseError(HandshakeError):
    """Raised when the upgrade response cannot be parsed as HTTP."""
    
    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        destination: Optional[Any] = None,
    ) -> None:
        super().__init__(f"Malformed response: {message}", cause, destination)


class UnrecognizedReplyError(HandshakeError):
    """Raised when the response parses but is not a websocket upgrade."""
    
    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        destination: Optional[Any] = None,
    ) -> None:
        super().__init__(f"Unrecognized reply: {message}", cause, destination)
