"""
Tests for network interfaces and mock implementations.
"""

import pytest

from httpupgrade.network import (
    EmulatedTLSStream,
    MockEmulatedTLSStream,
    MockNetworkBackend,
    MockNetworkStream,
    NetworkBackend,
    NetworkStream,
    validate_port,
    is_ipv6_address,
)


class TestMockNetworkStream:
    """Test cases for MockNetworkStream."""
    
    @pytest.mark.asyncio
    async def test_read_write_basic(self):
        stream = MockNetworkStream()
        
        await stream.write(b"hello world")
        assert stream.written_data == b"hello world"
        
        stream.add_data(b"hello world")
        assert await stream.read(5) == b"hello"
        assert await stream.read() == b" world"
        assert await stream.read(10) == b""
        assert stream.read_sizes == [5, None, 10]
    
    @pytest.mark.asyncio
    async def test_closed_stream(self):
        stream = MockNetworkStream(b"data")
        await stream.aclose()
        
        assert stream.is_closed
        with pytest.raises(RuntimeError):
            await stream.read(1)
        with pytest.raises(RuntimeError):
            await stream.write(b"x")
    
    @pytest.mark.asyncio
    async def test_take_unread(self):
        stream = MockNetworkStream(b"abcdef")
        await stream.read(2)
        
        assert stream.take_unread() == b"cdef"
        assert await stream.read() == b""
    
    @pytest.mark.asyncio
    async def test_injected_errors(self):
        stream = MockNetworkStream(b"data")
        stream.read_error = ConnectionResetError("reset")
        stream.write_error = BrokenPipeError("pipe")
        
        with pytest.raises(ConnectionResetError):
            await stream.read()
        with pytest.raises(BrokenPipeError):
            await stream.write(b"x")
    
    def test_is_network_stream(self):
        assert isinstance(MockNetworkStream(), NetworkStream)
        assert isinstance(MockEmulatedTLSStream(), EmulatedTLSStream)


class TestMockNetworkBackend:
    """Test cases for MockNetworkBackend."""
    
    @pytest.mark.asyncio
    async def test_connect_tcp_reuses_stream(self):
        backend = MockNetworkBackend()
        
        first = await backend.connect_tcp("example.com", 80)
        second = await backend.connect_tcp("example.com", 80)
        
        assert first is second
        assert first.get_extra_info("peername") == ("example.com", 80)
    
    @pytest.mark.asyncio
    async def test_tls_takes_pending_data(self):
        backend = MockNetworkBackend()
        backend.add_connection_data("example.com", 443, b"server bytes")
        
        tcp = await backend.connect_tcp("example.com", 443)
        tls = await backend.connect_tls(tcp, "example.com", 443, alpn_protocols=["http/1.1"])
        
        assert await tls.read() == b"server bytes"
        assert await tcp.read() == b""
        assert tls.get_extra_info("ssl_object") is True
        assert tls.get_extra_info("peername") == ("example.com", 443)
        assert backend.get_tls_connection("example.com", 443) is tls
    
    @pytest.mark.asyncio
    async def test_emulated_tls_handshake(self):
        backend = MockNetworkBackend()
        tcp = await backend.connect_tcp("example.com", 443)
        
        tls = await backend.connect_tls_emulated(tcp, "example.com", 443, "safari")
        await tls.handshake()
        
        assert tls.fingerprint == "safari"
        assert tls.handshake_count == 1
    
    @pytest.mark.asyncio
    async def test_injected_connect_error(self):
        backend = MockNetworkBackend()
        backend.fail_connect("example.com", 80, ConnectionRefusedError())
        
        with pytest.raises(ConnectionRefusedError):
            await backend.connect_tcp("example.com", 80)
    
    @pytest.mark.asyncio
    async def test_reset(self):
        backend = MockNetworkBackend()
        await backend.connect_tcp("example.com", 80)
        backend.fail_tls("example.com", 443, OSError())
        
        backend.reset()
        
        assert backend.get_connection("example.com", 80) is None
        tcp = await backend.connect_tcp("example.com", 443)
        await backend.connect_tls(tcp, "example.com", 443)


class _TCPOnlyBackend(NetworkBackend):
    async def connect_tcp(self, host, port, timeout=None):
        return MockNetworkStream()
    
    async def connect_tls(self, stream, host, port, timeout=None,
                          alpn_protocols=None, ssl_context=None):
        return stream


class TestNetworkBackend:
    """Test the NetworkBackend defaults."""
    
    @pytest.mark.asyncio
    async def test_emulated_tls_not_supported_by_default(self):
        backend = _TCPOnlyBackend()
        stream = await backend.connect_tcp("example.com", 443)
        
        with pytest.raises(NotImplementedError, match="_TCPOnlyBackend"):
            await backend.connect_tls_emulated(stream, "example.com", 443, "chrome")


class TestUtils:
    """Test network utilities."""
    
    def test_validate_port(self):
        assert validate_port("443") == 443
        with pytest.raises(ValueError):
            validate_port(70000)
        with pytest.raises(ValueError):
            validate_port(None)
    
    def test_is_ipv6_address(self):
        assert is_ipv6_address("::1")
        assert is_ipv6_address("2001:db8::1")
        assert not is_ipv6_address("127.0.0.1")
        assert not is_ipv6_address("example.com")
