"""
HTTP upgrade client example using httpupgrade.

This example starts a tiny local server that accepts the upgrade and
echoes bytes back, then dials it twice: once waiting for the handshake
and once with early data.
"""

import asyncio
import logging

from httpupgrade import (
    Destination,
    HandshakeDialer,
    TransportSettings,
    UpgradeConfig,
)
from httpupgrade.network import AsyncioNetworkBackend

# Configure logging
logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger(__name__)

UPGRADE_RESPONSE = (
    b"HTTP/1.1 101 Switching Protocols\r\n"
    b"Upgrade: websocket\r\n"
    b"Connection: Upgrade\r\n"
    b"\r\n"
)


async def handle_client(reader, writer):
    """Accept any upgrade, then echo."""
    request = await reader.readuntil(b"\r\n\r\n")
    logger.info(f"Server received:\n{request.decode('latin-1')}")
    writer.write(UPGRADE_RESPONSE)
    await writer.drain()
    
    while True:
        data = await reader.read(1024)
        if not data:
            break
        writer.write(data)
        await writer.drain()
    writer.close()


async def echo_once(dialer, destination, settings, message):
    """Dial, send one message and read the echo."""
    connection = await dialer.dial(destination, settings)
    logger.info(f"Dialed {destination}, handshake {connection.state.value}")
    
    try:
        await connection.write(message)
        echoed = b""
        while len(echoed) < len(message):
            chunk = await connection.read(1024)
            if not chunk:
                break
            echoed += chunk
        logger.info(f"Echo: {echoed!r} (handshake {connection.state.value})")
    finally:
        await connection.aclose()


async def main():
    """Run the examples."""
    server = await asyncio.start_server(handle_client, "127.0.0.1", 0)
    host, port = server.sockets[0].getsockname()[:2]
    destination = Destination(host, port)
    dialer = HandshakeDialer(AsyncioNetworkBackend())
    
    async with server:
        # Waits for the 101 before returning
        settings = TransportSettings(
            config=UpgradeConfig.create(
                host="example.com",
                path="/tunnel",
                headers={"User-Agent": "httpupgrade-example"},
            ),
            connect_timeout=5.0,
        )
        await echo_once(dialer, destination, settings, b"hello")
        
        # Returns as soon as the request is written
        settings = TransportSettings(
            config=UpgradeConfig(host="example.com", path="/tunnel?ed=2048"),
        )
        await echo_once(dialer, destination, settings, b"early hello")


if __name__ == "__main__":
    asyncio.run(main())
