"""
Pytest configuration for httpupgrade tests.

This file contains shared fixtures and configuration
for all tests in the project.
"""

import asyncio
from typing import Optional

import pytest

from httpupgrade.config import TransportSettings, UpgradeConfig
from httpupgrade.http_primitives import Destination
from httpupgrade.network.mock import MockNetworkBackend, MockNetworkStream


UPGRADE_RESPONSE = (
    b"HTTP/1.1 101 Switching Protocols\r\n"
    b"Upgrade: websocket\r\n"
    b"Connection: Upgrade\r\n"
    b"\r\n"
)


class SilentNetworkStream(MockNetworkStream):
    """Mock stream whose reads block once the scripted data is used up."""
    
    async def read(self, max_bytes: Optional[int] = None) -> bytes:
        data = await super().read(max_bytes)
        if not data:
            await asyncio.Event().wait()
        return data


@pytest.fixture
def destination():
    """Destination used by most dial tests."""
    return Destination("server.test", 8080)


@pytest.fixture
def backend():
    """Fresh mock network backend."""
    return MockNetworkBackend()


@pytest.fixture
def upgrade_response():
    """A valid 101 response."""
    return UPGRADE_RESPONSE


@pytest.fixture
def make_settings():
    """Build TransportSettings from UpgradeConfig keyword arguments."""
    def _make(tls=None, **config) -> TransportSettings:
        return TransportSettings(config=UpgradeConfig.create(**config), tls=tls)
    return _make


@pytest.fixture
def silent_stream():
    """A stream for a server that accepts the connection but never answers."""
    return SilentNetworkStream()
