"""
Network backend interface for httpupgrade.

The backend is the dialer's only way to reach the network: it opens raw
TCP connections and layers TLS on top of them.
"""

import ssl
from abc import ABC, abstractmethod
from typing import List, Optional

from .stream import EmulatedTLSStream, NetworkStream


class NetworkBackend(ABC):
    """
    Interface for network backend implementations.
    
    Backends create TCP connections and wrap them in TLS. Support for
    fingerprinted TLS is optional; backends without it keep the default
    ``connect_tls_emulated`` which raises NotImplementedError.
    """
    
    @abstractmethod
    async def connect_tcp(
        self, 
        host: str, 
        port: int, 
        timeout: Optional[float] = None
    ) -> NetworkStream:
        """
        Connect to a TCP endpoint.
        
        Args:
            host: The hostname or IP address to connect to.
            port: The port number to connect to.
            timeout: Optional timeout in seconds for the connection.
        
        Returns:
            A NetworkStream representing the TCP connection.
        
        Raises:
            OSError: If the connection fails or times out.
        """
        pass
    
    @abstractmethod
    async def connect_tls(
        self,
        stream: NetworkStream,
        host: str,
        port: int,
        timeout: Optional[float] = None,
        alpn_protocols: Optional[List[str]] = None,
        ssl_context: Optional[ssl.SSLContext] = None,
    ) -> NetworkStream:
        """
        Wrap a TCP stream in TLS.
        
        Args:
            stream: The existing TCP NetworkStream to wrap.
            host: The server name for SNI and certificate verification.
            port: The port number (used for logging/debugging).
            timeout: Optional timeout in seconds for the TLS handshake.
            alpn_protocols: Optional list of ALPN protocols to advertise.
            ssl_context: Optional pre-built context; the backend builds a
                        default one when omitted.
        
        Returns:
            A NetworkStream representing the TLS connection.
        
        Raises:
            OSError: If the TLS handshake fails.
        """
        pass
    
    async def connect_tls_emulated(
        self,
        stream: NetworkStream,
        host: str,
        port: int,
        fingerprint: str,
        timeout: Optional[float] = None,
        alpn_protocols: Optional[List[str]] = None,
    ) -> EmulatedTLSStream:
        """
        Wrap a TCP stream in fingerprinted TLS.
        
        The returned stream has not completed its handshake yet; callers
        must await ``EmulatedTLSStream.handshake`` before any I/O.
        
        Args:
            stream: The existing TCP NetworkStream to wrap.
            host: The server name for SNI and certificate verification.
            port: The port number (used for logging/debugging).
            fingerprint: Name of the client profile to emulate.
            timeout: Optional timeout in seconds.
            alpn_protocols: Optional list of ALPN protocols to advertise.
        
        Raises:
            NotImplementedError: If the backend cannot emulate fingerprints.
        """
        raise NotImplementedError(
            f"{type(self).__name__} does not support fingerprinted TLS"
        )
