"""
Upgraded connection with first-read handshake validation.

HandshakeConnection is returned by the dialer right after the upgrade
request has been written. It behaves as a plain duplex stream, except
that the first read parses and checks the server's upgrade response
before any application byte is handed out.
"""

import logging
from enum import Enum
from typing import Any, Optional, Union

import h11

from .exceptions import (
    HandshakeError,
    MalformedResponseError,
    UnrecognizedReplyError,
)
from .http_primitives import Destination, Headers, UpgradeRequest
from .network.stream import NetworkStream

logger = logging.getLogger(__name__)

SWITCHING_PROTOCOLS = "101 Switching Protocols"


class HandshakeState(Enum):
    """States of the upgrade handshake on a connection."""
    PENDING = "pending"       # Request sent, response not validated yet
    VALIDATED = "validated"   # Upgrade confirmed, pure pass-through
    FAILED = "failed"         # Upgrade rejected, connection unusable


def _get_header(headers: Headers, name: bytes) -> str:
    """Get the first value of a header (case-insensitive), or ""."""
    for header_name, header_value in headers:
        if header_name.lower() == name:
            return header_value.decode("latin-1")
    return ""


class HandshakeConnection(NetworkStream):
    """
    Duplex stream that validates the upgrade response on its first read.
    
    The first read, whatever its size and including a zero-length probe,
    reads the response from the underlying stream in chunks no larger
    than the caller asked for (with a small floor), feeds it to the h11
    client state machine that serialized the request, and checks the
    status line and the Upgrade/Connection headers. Bytes that arrived
    after the response headers are returned by that same read; no extra
    read is issued to top the result up.
    
    After a successful validation reads and writes go straight to the
    underlying stream. A failed validation is sticky: the same error is
    raised by every later read and write.
    
    Writes are allowed while validation is pending, so early data queues
    on the wire behind the request.
    """
    
    # Smallest chunk used to read the response, whatever the caller asked
    MIN_BUFFER_SIZE = 16
    # Chunk size when the caller does not bound the read
    DEFAULT_BUFFER_SIZE = 4096
    
    def __init__(
        self,
        stream: NetworkStream,
        request: UpgradeRequest,
        h11_connection: h11.Connection,
        destination: Optional[Destination] = None,
    ) -> None:
        """
        Initialize the connection.
        
        Args:
            stream: The (possibly TLS wrapped) stream the request was sent on
            request: The upgrade request that was sent
            h11_connection: The h11 client state machine that serialized it
            destination: Destination used in error messages
        """
        self._stream = stream
        self._request = request
        self._h11_connection = h11_connection
        self._destination = destination
        self._state = HandshakeState.PENDING
        self._error: Optional[HandshakeError] = None
        self._buffered = b""
    
    async def read(self, max_bytes: Optional[int] = None) -> bytes:
        if self._state is HandshakeState.PENDING:
            return await self._validate(max_bytes)
        if self._state is HandshakeState.FAILED:
            raise self._error
        if self._buffered:
            return self._drain(max_bytes)
        return await self._stream.read(max_bytes)
    
    async def write(self, data: bytes) -> None:
        if self._state is HandshakeState.FAILED:
            raise self._error
        await self._stream.write(data)
    
    async def aclose(self) -> None:
        await self._stream.aclose()
    
    def get_extra_info(self, name: str) -> Optional[Any]:
        return self._stream.get_extra_info(name)
    
    @property
    def is_closed(self) -> bool:
        return self._stream.is_closed
    
    @property
    def state(self) -> HandshakeState:
        return self._state
    
    @property
    def request(self) -> UpgradeRequest:
        """The upgrade request sent on this connection."""
        return self._request
    
    @property
    def error(self) -> Optional[HandshakeError]:
        """The validation error, once the handshake has failed."""
        return self._error
    
    async def _validate(self, max_bytes: Optional[int]) -> bytes:
        """
        Run the one-time handshake validation.
        
        Raises:
            MalformedResponseError: If no valid HTTP response was received.
            UnrecognizedReplyError: If the response is not an upgrade.
        """
        if max_bytes is None:
            buffer_size = self.DEFAULT_BUFFER_SIZE
        else:
            buffer_size = max(max_bytes, self.MIN_BUFFER_SIZE)
        
        try:
            event = await self._receive_response(buffer_size)
            self._check_reply(event)
        except HandshakeError as e:
            self._state = HandshakeState.FAILED
            self._error = e
            logger.error(f"Upgrade handshake with {self._request.url} failed: {e}")
            raise
        
        self._state = HandshakeState.VALIDATED
        self._buffered, _ = self._h11_connection.trailing_data
        logger.debug(
            f"Upgrade handshake with {self._request.url} complete "
            f"({len(self._buffered)} bytes buffered)"
        )
        return self._drain(max_bytes)
    
    async def _receive_response(
        self, buffer_size: int
    ) -> Union[h11.Response, h11.InformationalResponse]:
        """
        Read until h11 produces the response head.
        
        Args:
            buffer_size: Maximum size of each read on the stream
        
        Returns:
            The first response event, informational or final
        """
        while True:
            try:
                event = self._h11_connection.next_event()
            except h11.RemoteProtocolError as e:
                raise MalformedResponseError(
                    str(e), cause=e, destination=self._destination
                ) from e
            
            if event is h11.NEED_DATA:
                try:
                    data = await self._stream.read(buffer_size)
                except (OSError, RuntimeError) as e:
                    raise MalformedResponseError(
                        f"failed to read response: {e}",
                        cause=e,
                        destination=self._destination,
                    ) from e
                if not data:
                    raise MalformedResponseError(
                        "connection closed before the response was complete",
                        destination=self._destination,
                    )
                self._h11_connection.receive_data(data)
                continue
            
            if isinstance(event, (h11.Response, h11.InformationalResponse)):
                return event
            
            raise MalformedResponseError(
                f"unexpected {type(event).__name__} event",
                destination=self._destination,
            )
    
    def _check_reply(self, event: Union[h11.Response, h11.InformationalResponse]) -> None:
        status = f"{event.status_code} {event.reason.decode('latin-1')}"
        upgrade = _get_header(event.headers, b"upgrade")
        connection = _get_header(event.headers, b"connection")
        
        if (
            status != SWITCHING_PROTOCOLS
            or upgrade.lower() != "websocket"
            or connection.lower() != "upgrade"
        ):
            raise UnrecognizedReplyError(
                f"status={status!r} upgrade={upgrade!r} connection={connection!r}",
                destination=self._destination,
            )
    
    def _drain(self, max_bytes: Optional[int]) -> bytes:
        if max_bytes is None:
            max_bytes = len(self._buffered)
        data = self._buffered[:max_bytes]
        self._buffered = self._buffered[max_bytes:]
        return data
