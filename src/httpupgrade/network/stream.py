"""
Network stream interfaces for httpupgrade.

A NetworkStream is the duplex byte pipe every layer of the dialer works
with: the raw TCP connection, the TLS wrapped connection and the upgraded
HandshakeConnection all share this contract.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class NetworkStream(ABC):
    """
    Interface for duplex byte streams with async I/O operations.
    
    Implementations follow ordinary partial-read semantics: ``read`` may
    return fewer bytes than requested and returns ``b""`` at end of stream.
    A stream has a single owner; concurrent reads or concurrent writes on
    the same instance are not supported.
    """
    
    @abstractmethod
    async def read(self, max_bytes: Optional[int] = None) -> bytes:
        """
        Read data from the stream.
        
        Args:
            max_bytes: Maximum number of bytes to return. If None, the
                      implementation picks its own chunk size.
        
        Returns:
            The data read from the stream, or b"" at end of stream.
        
        Raises:
            RuntimeError: If the stream is closed.
            OSError: If a network error occurs.
        """
        pass
    
    @abstractmethod
    async def write(self, data: bytes) -> None:
        """
        Write data to the stream.
        
        Args:
            data: The data to write to the stream.
        
        Raises:
            RuntimeError: If the stream is closed.
            OSError: If a network error occurs.
        """
        pass
    
    @abstractmethod
    async def aclose(self) -> None:
        """Close the stream and release its resources."""
        pass
    
    @abstractmethod
    def get_extra_info(self, name: str) -> Optional[Any]:
        """
        Get extra information about the stream.
        
        Args:
            name: The name of the information to retrieve, e.g.
                 "peername", "sockname", "ssl_object" or
                 "selected_alpn_protocol".
        
        Returns:
            The requested information or None if not available.
        """
        pass
    
    @property
    @abstractmethod
    def is_closed(self) -> bool:
        """Check if the stream is closed."""
        pass


class EmulatedTLSStream(NetworkStream):
    """
    TLS stream whose ClientHello mimics a well known client.
    
    Unlike a plain TLS wrap, whose handshake happens as part of the wrap
    (or implicitly on first I/O), the fingerprinted stream owns its
    handshake timing and must be driven explicitly before use.
    """
    
    @abstractmethod
    async def handshake(self, timeout: Optional[float] = None) -> None:
        """
        Perform the TLS handshake.
        
        Args:
            timeout: Optional timeout in seconds for the handshake.
        
        Raises:
            OSError: If the handshake fails or times out.
        """
        pass
