"""
Configuration for the HTTP upgrade transport.

An UpgradeConfig is built once when the transport is set up and then
shared read-only by every dial, so all instances are frozen and the
header mapping is exposed through a read-only proxy.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Sequence, Tuple, Union
from urllib.parse import parse_qs

from .tls import TLSSettings

HeaderValues = Union[str, Sequence[str]]


def _default_headers() -> Mapping[str, Tuple[str, ...]]:
    return MappingProxyType({})


def _as_values(value: HeaderValues) -> Tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    return tuple(value)


@dataclass(frozen=True)
class UpgradeConfig:
    """
    Settings of the HTTP upgrade handshake.
    
    Header names are kept exactly as configured. They are never folded to
    the canonical ``Title-Case`` form, because some servers compare them
    case-sensitively.
    
    Attributes:
        host: Virtual host sent in the Host header; the destination
             address is used when empty.
        path: Request path, possibly percent-encoded and possibly
             carrying an opaque segment (see request_builder).
        headers: Ordered mapping of header name to its values.
        early_data: Return connections before the upgrade response is
                   seen and validate it on the first read instead.
    """
    
    host: str = ""
    path: str = ""
    headers: Mapping[str, Tuple[str, ...]] = field(default_factory=_default_headers)
    early_data: bool = False
    
    def __post_init__(self) -> None:
        if not isinstance(self.host, str):
            raise ValueError("host must be a string")
        if not isinstance(self.path, str):
            raise ValueError("path must be a string")
        
        headers = {}
        for name, values in self.headers.items():
            if not name or not isinstance(name, str):
                raise ValueError(f"Invalid header name: {name!r}")
            headers[name] = _as_values(values)
        
        # Host is carried by the host field, never as a plain header
        host = self.host
        for name in [name for name in headers if name.lower() == "host"]:
            values = headers.pop(name)
            if not host and values:
                host = values[0]
        
        early_data = self.early_data
        _, _, query = self.path.partition("?")
        if query:
            ed = parse_qs(query).get("ed")
            if ed:
                try:
                    early_data = early_data or int(ed[0]) > 0
                except ValueError:
                    raise ValueError(f"Invalid ed parameter in path: {ed[0]!r}")
        
        object.__setattr__(self, "host", host)
        object.__setattr__(self, "headers", MappingProxyType(headers))
        object.__setattr__(self, "early_data", bool(early_data))
    
    @classmethod
    def create(
        cls,
        host: str = "",
        path: str = "",
        headers: Optional[Mapping[str, HeaderValues]] = None,
        early_data: bool = False,
    ) -> "UpgradeConfig":
        """
        Create an UpgradeConfig accepting single-string header values.
        
        Args:
            host: Virtual host for the Host header
            path: Request path, optionally with an ``ed=<n>`` query
            headers: Header name to a value or a sequence of values
            early_data: Enable early data mode
        
        Returns:
            New UpgradeConfig instance
        """
        return cls(
            host=host,
            path=path,
            headers={name: _as_values(value) for name, value in (headers or {}).items()},
            early_data=early_data,
        )
    
    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UpgradeConfig":
        """Create an UpgradeConfig from a plain (e.g. JSON decoded) mapping."""
        unknown = set(data) - {"host", "path", "headers", "early_data"}
        if unknown:
            raise ValueError(f"Unknown configuration keys: {sorted(unknown)}")
        return cls.create(
            host=data.get("host", ""),
            path=data.get("path", ""),
            headers=data.get("headers"),
            early_data=bool(data.get("early_data", False)),
        )
    
    @property
    def normalized_path(self) -> str:
        """
        The path without its query string, starting with ``/``.
        
        An empty path stays empty so the request builder can apply its
        own default.
        """
        path = self.path.split("?", 1)[0]
        if not self.path:
            return ""
        if not path.startswith("/"):
            path = "/" + path
        return path


@dataclass(frozen=True)
class TransportSettings:
    """
    Everything a single dial needs besides the destination.
    
    Attributes:
        config: The upgrade handshake configuration.
        tls: TLS settings, or None for a cleartext connection.
        connect_timeout: Timeout in seconds for TCP connect and TLS setup.
    """
    
    config: UpgradeConfig = field(default_factory=UpgradeConfig)
    tls: Optional[TLSSettings] = None
    connect_timeout: Optional[float] = None
    
    def __post_init__(self) -> None:
        if self.connect_timeout is not None and self.connect_timeout <= 0:
            raise ValueError("connect_timeout must be > 0 when provided")
