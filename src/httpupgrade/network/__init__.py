"""
Network backend components for httpupgrade.

This module provides the low-level networking abstractions the dialer
is built on, an asyncio implementation and in-memory mocks for tests.
"""

from .backend import NetworkBackend
from .stream import NetworkStream, EmulatedTLSStream
from .asyncio_backend import AsyncioNetworkBackend, AsyncioNetworkStream
from .mock import MockNetworkBackend, MockNetworkStream, MockEmulatedTLSStream
from .utils import (
    create_ssl_context,
    is_ipv6_address,
    tune_socket,
    validate_port,
)

__all__ = [
    "NetworkBackend",
    "NetworkStream",
    "EmulatedTLSStream",
    "AsyncioNetworkBackend",
    "AsyncioNetworkStream",
    "MockNetworkBackend",
    "MockNetworkStream",
    "MockEmulatedTLSStream",
    "create_ssl_context",
    "is_ipv6_address",
    "tune_socket",
    "validate_port",
]
