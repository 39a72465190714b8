"""
Construction of the HTTP upgrade request.

Everything here is pure: no I/O happens until the dialer writes the
request produced by ``build_upgrade_request``.

The configured path doubles as a carrier for an opaque routing segment.
After percent-decoding, dropping one leading ``/`` and turning the first
space into ``:``, the path is split on ``:``:

* two parts: the whole string becomes the opaque request-target,
* three parts: the first part is the URL path and the other two,
  joined by ``:``, the opaque request-target,
* anything else: the path is sent as an ordinary escaped URL path.

A cooperating server depends on this exact encoding.
"""

import logging
from typing import Dict, List, NamedTuple, Optional
from urllib.parse import unquote_plus

from .config import UpgradeConfig
from .http_primitives import Destination, Headers, UpgradeRequest

logger = logging.getLogger(__name__)

# Sent when no path is configured; not a real path
DEFAULT_PATH = "GET"


class PathEncoding(NamedTuple):
    """Structural path and opaque component derived from a configured path."""
    path: Optional[str]
    opaque: Optional[str]


def encode_path(path: str) -> PathEncoding:
    """
    Split a configured path into its structural and opaque components.
    
    Args:
        path: The configured (normalized) path
    
    Returns:
        The PathEncoding to put on the request URL
    """
    if not path:
        path = DEFAULT_PATH
    
    try:
        unescaped = unquote_plus(path, errors="strict")
    except UnicodeDecodeError:
        unescaped = path
    
    trimmed = unescaped[1:] if unescaped.startswith("/") else unescaped
    replaced = trimmed.replace(" ", ":", 1)
    parts = replaced.split(":")
    
    if len(parts) == 2:
        return PathEncoding(path=None, opaque=replaced)
    if len(parts) == 3:
        return PathEncoding(path=parts[0], opaque=f"{parts[1]}:{parts[2]}")
    return PathEncoding(path=path, opaque=None)


def build_headers(config: UpgradeConfig) -> Headers:
    """
    Build the header list of the upgrade request.
    
    The mandatory ``Connection`` and ``Upgrade`` headers come first. Every
    configured key is assigned as is, so a key spelled exactly
    ``Upgrade`` or ``Connection`` replaces the default value while any
    other spelling is a separate header.
    """
    header: Dict[str, List[str]] = {
        "Connection": ["upgrade"],
        "Upgrade": ["websocket"],
    }
    for name, values in config.headers.items():
        header[name] = list(values)
    
    return [
        (name.encode("utf-8"), value.encode("utf-8"))
        for name, values in header.items()
        for value in values
    ]


def build_upgrade_request(
    config: UpgradeConfig,
    destination: Destination,
    scheme: str,
) -> UpgradeRequest:
    """
    Build the upgrade request for one dial.
    
    Args:
        config: The transport configuration
        destination: Where the request is sent
        scheme: "https" when TLS was applied, "http" otherwise
    
    Returns:
        New UpgradeRequest instance
    """
    encoding = encode_path(config.normalized_path)
    request = UpgradeRequest(
        scheme=scheme,
        authority=destination.net_addr,
        path=encoding.path,
        opaque=encoding.opaque,
        host=config.host,
        headers=build_headers(config),
    )
    logger.debug(f"Built upgrade request for {request.url}")
    return request
