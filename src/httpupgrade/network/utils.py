"""
Network utilities for httpupgrade.

Helpers shared by the backends and the destination model: socket
tuning, SSL context setup and address handling.
"""

import socket
import ssl
from typing import List, Optional, Union


def tune_socket(sock: Optional[socket.socket]) -> None:
    """
    Apply latency and keep-alive options to a connected TCP socket.
    
    Args:
        sock: Socket object, or None when the transport exposes none.
    """
    if sock is None:
        return
    
    sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1)
    
    # Platform-specific keep-alive settings
    if hasattr(socket, 'TCP_KEEPIDLE'):
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_KEEPIDLE, 60)
    if hasattr(socket, 'TCP_KEEPINTVL'):
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_KEEPINTVL, 10)
    if hasattr(socket, 'TCP_KEEPCNT'):
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_KEEPCNT, 6)


def create_ssl_context(
    alpn_protocols: Optional[List[str]] = None,
    verify: bool = True,
) -> ssl.SSLContext:
    """
    Create a client SSL context.
    
    Args:
        alpn_protocols: Optional list of ALPN protocols to advertise
        verify: Whether to verify the server certificate and hostname
    
    Returns:
        Configured SSL context
    """
    context = ssl.create_default_context()
    if not verify:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    
    if alpn_protocols:
        context.set_alpn_protocols(alpn_protocols)
    
    context.options |= ssl.OP_NO_COMPRESSION
    context.options |= ssl.OP_NO_RENEGOTIATION
    context.minimum_version = ssl.TLSVersion.TLSv1_2
    context.maximum_version = ssl.TLSVersion.TLSv1_3
    
    return context


def is_ipv6_address(host: str) -> bool:
    """
    Check if a host string is an IPv6 address.
    
    Args:
        host: Host string to check
    
    Returns:
        True if the host is an IPv6 address
    """
    try:
        socket.inet_pton(socket.AF_INET6, host)
        return True
    except OSError:
        return False


def validate_port(port: Union[int, str]) -> int:
    """
    Validate and convert port to integer.
    
    Args:
        port: Port number (int or string)
    
    Returns:
        Port as integer
    
    Raises:
        ValueError: If port is invalid
    """
    try:
        port_int = int(port)
    except (ValueError, TypeError):
        raise ValueError(f"Invalid port: {port}")
    
    if not (1 <= port_int <= 65535):
        raise ValueError(f"Port must be between 1 and 65535, got {port_int}")
    
    return port_int
