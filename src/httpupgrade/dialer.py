"""
HTTP upgrade dialer.

The dialer connects to a destination, optionally layers TLS, writes the
upgrade request and returns a HandshakeConnection. Unless early data is
enabled it also waits for the upgrade response to be validated, so the
caller never sees a connection whose handshake has not completed.
"""

import logging

import h11

from .config import TransportSettings
from .connection import HandshakeConnection
from .exceptions import DialError, WriteError
from .http_primitives import Destination, UpgradeRequest
from .network.backend import NetworkBackend
from .network.stream import NetworkStream
from .request_builder import build_upgrade_request
from .tls import select_tls_strategy

logger = logging.getLogger(__name__)

PROTOCOL_NAME = "httpupgrade"


class HandshakeDialer:
    """
    Dials HTTP upgrade connections through a network backend.
    
    The dialer holds no per-connection state, so one instance can serve
    any number of concurrent dials. Nothing is retried: every failure
    ends the attempt and is raised to the caller.
    """
    
    def __init__(self, backend: NetworkBackend) -> None:
        """
        Initialize the dialer.
        
        Args:
            backend: Backend used for TCP connections and TLS
        """
        self._backend = backend
    
    async def dial(
        self,
        destination: Destination,
        settings: TransportSettings,
    ) -> HandshakeConnection:
        """
        Open an upgraded connection to ``destination``.
        
        Args:
            destination: Host and port to connect to
            settings: Upgrade configuration, TLS settings and timeouts
        
        Returns:
            The upgraded connection; already validated unless early data
            is enabled.
        
        Raises:
            DialError: If the TCP connection or TLS setup fails.
            WriteError: If the request cannot be written.
            MalformedResponseError: If the response is not valid HTTP.
            UnrecognizedReplyError: If the server refused the upgrade.
        """
        logger.info(f"Creating connection to {destination}")
        strategy = select_tls_strategy(settings.tls)
        
        try:
            stream = await self._backend.connect_tcp(
                destination.host,
                destination.port,
                timeout=settings.connect_timeout,
            )
        except OSError as e:
            logger.error(f"Failed to dial to {destination}: {e}")
            raise DialError("failed to connect", cause=e, destination=destination) from e
        
        scheme = "http"
        if strategy is not None:
            try:
                stream = await strategy.wrap(
                    self._backend,
                    stream,
                    destination.host,
                    destination.port,
                    timeout=settings.connect_timeout,
                )
            except Exception as e:
                await self._close(stream)
                logger.error(f"TLS setup with {destination} failed: {e}")
                raise DialError("TLS setup failed", cause=e, destination=destination) from e
            except BaseException:
                await self._close(stream)
                raise
            scheme = "https"
        
        try:
            return await self._handshake(stream, destination, settings, scheme)
        except BaseException:
            await self._close(stream)
            raise
    
    async def _handshake(
        self,
        stream: NetworkStream,
        destination: Destination,
        settings: TransportSettings,
        scheme: str,
    ) -> HandshakeConnection:
        request = build_upgrade_request(settings.config, destination, scheme)
        h11_connection = await self._send_request(stream, request, destination)
        connection = HandshakeConnection(stream, request, h11_connection, destination)
        
        if not settings.config.early_data:
            # Zero-length probe: validates without consuming application data
            await connection.read(0)
        
        return connection
    
    async def _send_request(
        self,
        stream: NetworkStream,
        request: UpgradeRequest,
        destination: Destination,
    ) -> h11.Connection:
        """
        Serialize the request with h11 and write it in one piece.
        
        Returns:
            The h11 client connection, ready to parse the response.
        """
        h11_connection = h11.Connection(h11.CLIENT)
        try:
            request_line = request.request_line()
            head = h11_connection.send(request.to_h11())
            head += h11_connection.send(h11.EndOfMessage())
        except (h11.LocalProtocolError, ValueError) as e:
            raise WriteError(
                f"invalid request: {e}", cause=e, destination=destination
            ) from e
        
        # h11 tracks the exchange; the raw request line carries the target
        data = request_line + head.partition(b"\r\n")[2]
        
        try:
            await stream.write(data)
        except (OSError, RuntimeError) as e:
            logger.error(f"Failed to write upgrade request to {destination}: {e}")
            raise WriteError(
                f"failed to write request: {e}", cause=e, destination=destination
            ) from e
        
        logger.debug(f"Sent {request.method.decode()} {request.target} to {destination}")
        return h11_connection
    
    async def _close(self, stream: NetworkStream) -> None:
        if stream.is_closed:
            return
        try:
            await stream.aclose()
        except (OSError, RuntimeError) as e:
            logger.debug(f"Error while closing stream: {e}")


async def dial(
    backend: NetworkBackend,
    destination: Destination,
    settings: TransportSettings,
) -> HandshakeConnection:
    """Dial ``destination`` once with a throwaway HandshakeDialer."""
    return await HandshakeDialer(backend).dial(destination, settings)
