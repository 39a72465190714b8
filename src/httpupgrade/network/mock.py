"""
Mock network implementations for testing.

This module provides in-memory implementations of NetworkStream and
NetworkBackend so the dialer can be exercised without real sockets.
Responses are scripted per destination and failures can be injected
at every step of a dial.
"""

from typing import Any, Dict, List, Optional, Tuple

from .backend import NetworkBackend
from .stream import EmulatedTLSStream, NetworkStream


class MockNetworkStream(NetworkStream):
    """
    Mock network stream for testing.
    
    Reads are served from an in-memory buffer (``b""`` once it is
    exhausted) and writes are recorded for inspection.
    """
    
    def __init__(self, data: bytes = b""):
        """
        Initialize the mock stream.
        
        Args:
            data: Initial data to be available for reading.
        """
        self._data = data
        self._position = 0
        self._closed = False
        self._extra_info: Dict[str, Any] = {}
        self._write_buffer: List[bytes] = []
        self.read_sizes: List[Optional[int]] = []
        self.read_error: Optional[Exception] = None
        self.write_error: Optional[Exception] = None
    
    async def read(self, max_bytes: Optional[int] = None) -> bytes:
        """
        Read data from the mock stream.
        
        Args:
            max_bytes: Maximum number of bytes to read.
        
        Returns:
            The data read from the stream.
        
        Raises:
            RuntimeError: If the stream is closed.
        """
        if self._closed:
            raise RuntimeError("Stream is closed")
        
        self.read_sizes.append(max_bytes)
        if self.read_error is not None:
            raise self.read_error
        
        if self._position >= len(self._data):
            return b""
        
        if max_bytes is None:
            end = len(self._data)
        else:
            end = min(self._position + max_bytes, len(self._data))
        result = self._data[self._position:end]
        self._position = end
        return result
    
    async def write(self, data: bytes) -> None:
        """
        Write data to the mock stream.
        
        Args:
            data: The data to write.
        
        Raises:
            RuntimeError: If the stream is closed.
        """
        if self._closed:
            raise RuntimeError("Stream is closed")
        if self.write_error is not None:
            raise self.write_error
        
        self._write_buffer.append(data)
    
    async def aclose(self) -> None:
        """Close the mock stream."""
        self._closed = True
    
    def get_extra_info(self, name: str) -> Optional[Any]:
        return self._extra_info.get(name)
    
    @property
    def is_closed(self) -> bool:
        """Check if the mock stream is closed."""
        return self._closed
    
    @property
    def written_data(self) -> bytes:
        """Get all data that was written to the stream."""
        return b"".join(self._write_buffer)
    
    @property
    def read_count(self) -> int:
        """Number of read calls served so far."""
        return len(self.read_sizes)
    
    def set_extra_info(self, name: str, value: Any) -> None:
        self._extra_info[name] = value
    
    def add_data(self, data: bytes) -> None:
        """
        Add data to be available for reading.
        
        Args:
            data: The data to add.
        """
        self._data += data
    
    def take_unread(self) -> bytes:
        """Remove and return the data no read has consumed yet."""
        remaining = self._data[self._position:]
        self._data = b""
        self._position = 0
        return remaining


class MockEmulatedTLSStream(MockNetworkStream, EmulatedTLSStream):
    """Mock fingerprinted TLS stream that records its handshake."""
    
    def __init__(self, data: bytes = b"", fingerprint: str = ""):
        super().__init__(data)
        self.fingerprint = fingerprint
        self.handshake_count = 0
        self.handshake_error: Optional[Exception] = None
    
    async def handshake(self, timeout: Optional[float] = None) -> None:
        self.handshake_count += 1
        if self.handshake_error is not None:
            raise self.handshake_error


class MockNetworkBackend(NetworkBackend):
    """
    Mock network backend for testing.
    
    Data queued with ``add_connection_data`` becomes readable on the
    stream returned for that destination; when TLS is layered on top the
    unread data moves to the TLS stream, so tests script the server reply
    once whatever the transport.
    """
    
    def __init__(self):
        """Initialize the mock backend."""
        self._connections: Dict[Tuple[str, int], MockNetworkStream] = {}
        self._tls_connections: Dict[Tuple[str, int], MockNetworkStream] = {}
        self._connect_errors: Dict[Tuple[str, int], Exception] = {}
        self._tls_errors: Dict[Tuple[str, int], Exception] = {}
        self._handshake_errors: Dict[Tuple[str, int], Exception] = {}
        self._connection_count = 0
        self.tls_calls: List[Dict[str, Any]] = []
    
    async def connect_tcp(
        self, 
        host: str, 
        port: int, 
        timeout: Optional[float] = None
    ) -> MockNetworkStream:
        """
        Create a mock TCP connection.
        
        Args:
            host: The hostname to connect to.
            port: The port number to connect to.
            timeout: Ignored in mock implementation.
        
        Returns:
            A MockNetworkStream representing the connection.
        
        Raises:
            OSError: If a connect error was injected for the destination.
        """
        key = (host, port)
        if key in self._connect_errors:
            raise self._connect_errors[key]
        
        if key not in self._connections:
            self.register_stream(host, port, MockNetworkStream())
        
        return self._connections[key]
    
    async def connect_tls(
        self,
        stream: MockNetworkStream,
        host: str,
        port: int,
        timeout: Optional[float] = None,
        alpn_protocols: Optional[List[str]] = None,
        ssl_context: Any = None,
    ) -> MockNetworkStream:
        """
        Create a mock TLS connection on top of ``stream``.
        
        Raises:
            OSError: If a TLS error was injected for the destination.
        """
        key = (host, port)
        self.tls_calls.append(
            {"host": host, "port": port, "alpn_protocols": alpn_protocols,
             "fingerprint": None}
        )
        if key in self._tls_errors:
            raise self._tls_errors[key]
        
        tls_stream = MockNetworkStream(stream.take_unread())
        self._wrap(stream, tls_stream, alpn_protocols)
        self._tls_connections[key] = tls_stream
        return tls_stream
    
    async def connect_tls_emulated(
        self,
        stream: MockNetworkStream,
        host: str,
        port: int,
        fingerprint: str,
        timeout: Optional[float] = None,
        alpn_protocols: Optional[List[str]] = None,
    ) -> MockEmulatedTLSStream:
        """Create a mock fingerprinted TLS connection on top of ``stream``."""
        key = (host, port)
        self.tls_calls.append(
            {"host": host, "port": port, "alpn_protocols": alpn_protocols,
             "fingerprint": fingerprint}
        )
        if key in self._tls_errors:
            raise self._tls_errors[key]
        
        tls_stream = MockEmulatedTLSStream(stream.take_unread(), fingerprint)
        tls_stream.handshake_error = self._handshake_errors.get(key)
        self._wrap(stream, tls_stream, alpn_protocols)
        tls_stream.set_extra_info("tls_fingerprint", fingerprint)
        self._tls_connections[key] = tls_stream
        return tls_stream
    
    def _wrap(
        self,
        stream: MockNetworkStream,
        tls_stream: MockNetworkStream,
        alpn_protocols: Optional[List[str]],
    ) -> None:
        for name, value in stream._extra_info.items():
            tls_stream.set_extra_info(name, value)
        tls_stream.set_extra_info("ssl_object", True)
        tls_stream.set_extra_info(
            "selected_alpn_protocol",
            alpn_protocols[0] if alpn_protocols else None,
        )
    
    def register_stream(self, host: str, port: int, stream: MockNetworkStream) -> None:
        """
        Use ``stream`` as the TCP connection for a destination.
        
        Args:
            host: The hostname.
            port: The port number.
            stream: The stream connect_tcp will return.
        """
        stream.set_extra_info("socket", self._connection_count)
        stream.set_extra_info("peername", (host, port))
        stream.set_extra_info("sockname", ("127.0.0.1", 12345))
        self._connections[(host, port)] = stream
        self._connection_count += 1
    
    def get_connection(self, host: str, port: int) -> Optional[MockNetworkStream]:
        """Get the mock TCP connection of a destination, if any."""
        return self._connections.get((host, port))
    
    def get_tls_connection(self, host: str, port: int) -> Optional[MockNetworkStream]:
        """Get the mock TLS connection of a destination, if any."""
        return self._tls_connections.get((host, port))
    
    def add_connection_data(self, host: str, port: int, data: bytes) -> None:
        """
        Queue data the server side of a destination will send.
        
        Args:
            host: The hostname.
            port: The port number.
            data: The data to add.
        """
        connection = self.get_connection(host, port)
        if connection is None:
            connection = MockNetworkStream()
            self.register_stream(host, port, connection)
        connection.add_data(data)
    
    def fail_connect(self, host: str, port: int, error: Exception) -> None:
        """Make connect_tcp raise ``error`` for a destination."""
        self._connect_errors[(host, port)] = error
    
    def fail_tls(self, host: str, port: int, error: Exception) -> None:
        """Make both TLS wraps raise ``error`` for a destination."""
        self._tls_errors[(host, port)] = error
    
    def fail_handshake(self, host: str, port: int, error: Exception) -> None:
        """Make the fingerprinted TLS handshake raise ``error`` for a destination."""
        self._handshake_errors[(host, port)] = error
    
    def reset(self) -> None:
        """Reset all mock connections and injected failures."""
        self._connections.clear()
        self._tls_connections.clear()
        self._connect_errors.clear()
        self._tls_errors.clear()
        self._handshake_errors.clear()
        self._connection_count = 0
        self.tls_calls.clear()
