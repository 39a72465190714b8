"""
TLS settings and TLS wrapping strategies.

Whether a dial uses the plain TLS wrap or the fingerprinted one is
decided once, from the settings, before the dial performs any I/O.
"""

import logging
import ssl
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from .network.backend import NetworkBackend
from .network.stream import NetworkStream
from .network.utils import create_ssl_context

logger = logging.getLogger(__name__)

# The upgrade handshake is an HTTP/1.1 mechanism
ALPN_PROTOCOLS = ["http/1.1"]

KNOWN_FINGERPRINTS = frozenset({
    "chrome",
    "firefox",
    "safari",
    "ios",
    "android",
    "edge",
    "360",
    "qq",
    "random",
    "randomized",
})


@dataclass(frozen=True)
class TLSSettings:
    """
    TLS options of the transport.
    
    Attributes:
        server_name: SNI and verification name; the destination host is
                    used when None.
        fingerprint: Client profile to emulate, or None for the standard
                    library TLS stack.
        allow_insecure: Skip certificate and hostname verification.
    """
    
    server_name: Optional[str] = None
    fingerprint: Optional[str] = None
    allow_insecure: bool = False
    
    def __post_init__(self) -> None:
        if self.fingerprint is not None:
            fingerprint = self.fingerprint.lower()
            if fingerprint not in KNOWN_FINGERPRINTS:
                raise ValueError(f"Unknown TLS fingerprint: {self.fingerprint}")
            object.__setattr__(self, "fingerprint", fingerprint)
    
    def ssl_context(self) -> ssl.SSLContext:
        """Build the context used by the plain TLS wrap."""
        return create_ssl_context(
            alpn_protocols=ALPN_PROTOCOLS,
            verify=not self.allow_insecure,
        )


class TLSStrategy(ABC):
    """A way of layering TLS over a freshly dialed TCP stream."""
    
    def __init__(self, settings: TLSSettings) -> None:
        self.settings = settings
    
    @abstractmethod
    async def wrap(
        self,
        backend: NetworkBackend,
        stream: NetworkStream,
        host: str,
        port: int,
        timeout: Optional[float] = None,
    ) -> NetworkStream:
        """
        Wrap ``stream`` in TLS.
        
        Args:
            backend: Backend that created the stream
            stream: The raw TCP stream
            host: Destination host, used when no server name is configured
            port: Destination port
            timeout: Optional timeout in seconds
        
        Returns:
            The encrypted stream.
        """
        pass
    
    def server_name(self, host: str) -> str:
        return self.settings.server_name or host


class PlainTLSStrategy(TLSStrategy):
    """Standard TLS wrap; the backend completes the handshake itself."""
    
    async def wrap(
        self,
        backend: NetworkBackend,
        stream: NetworkStream,
        host: str,
        port: int,
        timeout: Optional[float] = None,
    ) -> NetworkStream:
        return await backend.connect_tls(
            stream,
            self.server_name(host),
            port,
            timeout=timeout,
            alpn_protocols=list(ALPN_PROTOCOLS),
            ssl_context=self.settings.ssl_context(),
        )


class FingerprintedTLSStrategy(TLSStrategy):
    """TLS wrap emulating a client profile, with an explicit handshake."""
    
    async def wrap(
        self,
        backend: NetworkBackend,
        stream: NetworkStream,
        host: str,
        port: int,
        timeout: Optional[float] = None,
    ) -> NetworkStream:
        tls_stream = await backend.connect_tls_emulated(
            stream,
            self.server_name(host),
            port,
            self.settings.fingerprint,
            timeout=timeout,
            alpn_protocols=list(ALPN_PROTOCOLS),
        )
        try:
            await tls_stream.handshake(timeout)
        except BaseException:
            await tls_stream.aclose()
            raise
        return tls_stream


def select_tls_strategy(settings: Optional[TLSSettings]) -> Optional[TLSStrategy]:
    """
    Pick the TLS strategy for a dial.
    
    Returns:
        None for cleartext, otherwise the strategy matching the settings.
    """
    if settings is None:
        return None
    if settings.fingerprint:
        logger.debug(f"Using fingerprinted TLS ({settings.fingerprint})")
        return FingerprintedTLSStrategy(settings)
    logger.debug("Using standard TLS")
    return PlainTLSStrategy(settings)
