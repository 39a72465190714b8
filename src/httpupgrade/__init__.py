"""
httpupgrade - HTTP/1.1 Upgrade transport

Dials a TCP (optionally TLS) connection, performs an HTTP/1.1
``Upgrade: websocket`` handshake on it and hands back a byte-transparent
duplex stream.
"""

__version__ = "0.1.0"

from .config import UpgradeConfig, TransportSettings
from .connection import HandshakeConnection, HandshakeState
from .dialer import HandshakeDialer, PROTOCOL_NAME, dial
from .exceptions import (
    HTTPUpgradeError,
    DialError,
    WriteError,
    HandshakeError,
    MalformedResponseError,
    UnrecognizedReplyError,
)
from .http_primitives import Destination, UpgradeRequest
from .request_builder import PathEncoding, build_upgrade_request, encode_path
from .tls import TLSSettings, select_tls_strategy

__all__ = [
    "UpgradeConfig",
    "TransportSettings",
    "HandshakeConnection",
    "HandshakeState",
    "HandshakeDialer",
    "PROTOCOL_NAME",
    "dial",
    "HTTPUpgradeError",
    "DialError",
    "WriteError",
    "HandshakeError",
    "MalformedResponseError",
    "UnrecognizedReplyError",
    "Destination",
    "UpgradeRequest",
    "PathEncoding",
    "build_upgrade_request",
    "encode_path",
    "TLSSettings",
    "select_tls_strategy",
]
