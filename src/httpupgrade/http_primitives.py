"""
HTTP primitives for httpupgrade.

This module defines the destination of a dial and the upgrade request
sent over it. Both are immutable; a request is built fresh for every
dial and kept by the connection that sent it.
"""

from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, Tuple
from urllib.parse import quote

import h11

from .network.utils import is_ipv6_address, validate_port

Headers = List[Tuple[bytes, bytes]]

# Kept unescaped in paths, besides the unreserved characters
_PATH_SAFE = "/:@$&+,;="


def _escape_target(target: bytes) -> bytes:
    """Percent-escape the bytes h11 refuses in a request-target."""
    return b"".join(
        bytes([byte]) if 0x21 <= byte <= 0x7e else b"%%%02X" % byte
        for byte in target
    )


class Destination(NamedTuple):
    """Immutable host and port of a dial target."""
    host: str
    port: int
    
    @classmethod
    def parse(cls, address: str) -> "Destination":
        """
        Parse ``host:port`` (IPv6 hosts in brackets) into a Destination.
        
        Raises:
            ValueError: If the address has no valid port.
        """
        host, sep, port = address.rpartition(":")
        if not sep or not host:
            raise ValueError(f"Missing port in address: {address}")
        if host.startswith("[") and host.endswith("]"):
            host = host[1:-1]
        return cls(host=host, port=validate_port(port))
    
    @property
    def net_addr(self) -> str:
        """The address in ``host:port`` form."""
        if is_ipv6_address(self.host):
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"
    
    def __str__(self) -> str:
        return f"tcp:{self.net_addr}"


@dataclass(frozen=True)
class UpgradeRequest:
    """
    Immutable HTTP upgrade request.
    
    ``path`` is the structural URL path and ``opaque`` the component that
    bypasses path escaping; when ``opaque`` is set it alone forms the
    request-target.
    """
    
    scheme: str
    authority: str
    path: Optional[str] = None
    opaque: Optional[str] = None
    host: str = ""
    headers: Headers = field(default_factory=list)
    method: bytes = b"GET"
    
    def __post_init__(self) -> None:
        if self.scheme not in ("http", "https"):
            raise ValueError(f"Unsupported scheme: {self.scheme}")
        
        for name, value in self.headers:
            if not isinstance(name, bytes) or not isinstance(value, bytes):
                raise ValueError("header names and values must be bytes")
    
    @property
    def target(self) -> str:
        """The request-target written on the request line."""
        if self.opaque:
            if self.opaque.startswith("//"):
                return f"{self.scheme}:{self.opaque}"
            return self.opaque
        return quote(self.path or "", safe=_PATH_SAFE) or "/"
    
    @property
    def host_header(self) -> str:
        """Value of the Host header: the virtual host or the authority."""
        return self.host or self.authority
    
    @property
    def url(self) -> str:
        """Absolute URL of the request, for logging."""
        return f"{self.scheme}://{self.authority}/{self.target.lstrip('/')}"
    
    def get_header(self, name: str) -> List[bytes]:
        """Get all values of a header by its exact name."""
        raw = name.encode()
        return [value for header_name, value in self.headers if header_name == raw]
    
    def request_line(self) -> bytes:
        """
        The request line with the target as raw UTF-8 bytes.
        
        The opaque component is written byte for byte, including bytes
        outside printable ASCII; only bytes that would break the line
        (whitespace, control characters) are refused.
        
        Raises:
            ValueError: If the target contains such a byte.
        """
        target = self.target.encode("utf-8")
        if any(byte <= 0x20 or byte == 0x7f for byte in target):
            raise ValueError(f"Illegal character in request target: {self.target!r}")
        return self.method + b" " + target + b" HTTP/1.1\r\n"
    
    def to_h11(self) -> h11.Request:
        """
        Build the h11 event for this request.
        
        h11 keeps the header names' original casing on the wire. Its
        request-target only admits printable ASCII, so other bytes are
        percent-escaped here; the dialer writes ``request_line`` instead
        of h11's own line.
        
        Raises:
            h11.LocalProtocolError: If a header is not valid in an
                HTTP/1.1 header block.
        """
        headers = [(b"Host", self.host_header.encode("utf-8"))]
        headers.extend(self.headers)
        return h11.Request(
            method=self.method,
            target=_escape_target(self.target.encode("utf-8")),
            headers=headers,
        )
