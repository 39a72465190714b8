"""
asyncio streams backend for httpupgrade.

Connections are opened with ``asyncio.open_connection`` and upgraded to
TLS in place with ``StreamWriter.start_tls``.
"""

import asyncio
import logging
import ssl
from typing import Any, List, Optional

from .backend import NetworkBackend
from .stream import NetworkStream
from .utils import create_ssl_context, tune_socket

logger = logging.getLogger(__name__)


class AsyncioNetworkStream(NetworkStream):
    """NetworkStream over an asyncio StreamReader/StreamWriter pair."""
    
    DEFAULT_READ_SIZE = 65536
    
    def __init__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        self._reader = reader
        self._writer = writer
        self._closed = False
    
    async def read(self, max_bytes: Optional[int] = None) -> bytes:
        if self._closed:
            raise RuntimeError("Stream is closed")
        if max_bytes is None:
            max_bytes = self.DEFAULT_READ_SIZE
        return await self._reader.read(max_bytes)
    
    async def write(self, data: bytes) -> None:
        if self._closed:
            raise RuntimeError("Stream is closed")
        self._writer.write(data)
        await self._writer.drain()
    
    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._writer.close()
        try:
            await self._writer.wait_closed()
        except (OSError, ssl.SSLError) as e:
            logger.debug(f"Error while closing stream: {e}")
    
    def get_extra_info(self, name: str) -> Optional[Any]:
        return self._writer.get_extra_info(name)
    
    @property
    def is_closed(self) -> bool:
        return self._closed


class AsyncioNetworkBackend(NetworkBackend):
    """
    Network backend built on asyncio streams.
    
    Fingerprinted TLS is not available from the standard ``ssl`` module,
    so ``connect_tls_emulated`` keeps the NotImplementedError default.
    """
    
    async def connect_tcp(
        self,
        host: str,
        port: int,
        timeout: Optional[float] = None
    ) -> AsyncioNetworkStream:
        """
        Open a TCP connection.
        
        Raises:
            OSError: If the connection fails.
            TimeoutError: If the connection times out.
        """
        reader, writer = await asyncio.wait_for(
            asyncio.open_connection(host, port),
            timeout=timeout,
        )
        tune_socket(writer.get_extra_info("socket"))
        logger.debug(f"TCP connection established to {host}:{port}")
        return AsyncioNetworkStream(reader, writer)
    
    async def connect_tls(
        self,
        stream: NetworkStream,
        host: str,
        port: int,
        timeout: Optional[float] = None,
        alpn_protocols: Optional[List[str]] = None,
        ssl_context: Optional[ssl.SSLContext] = None,
    ) -> AsyncioNetworkStream:
        """
        Upgrade an asyncio stream to TLS in place.
        
        Raises:
            TypeError: If ``stream`` was not created by this backend.
            ssl.SSLError: If the TLS handshake fails.
            TimeoutError: If the TLS handshake times out.
        """
        if not isinstance(stream, AsyncioNetworkStream):
            raise TypeError("AsyncioNetworkBackend can only wrap its own streams")
        
        if ssl_context is None:
            ssl_context = create_ssl_context(alpn_protocols=alpn_protocols)
        
        await asyncio.wait_for(
            stream._writer.start_tls(ssl_context, server_hostname=host),
            timeout=timeout,
        )
        logger.debug(
            f"TLS established to {host}:{port} "
            f"(alpn={stream.get_extra_info('ssl_object').selected_alpn_protocol()})"
        )
        return AsyncioNetworkStream(stream._reader, stream._writer)
