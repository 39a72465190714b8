"""
Tests for the transport configuration.
"""

import pytest

from httpupgrade.config import TransportSettings, UpgradeConfig
from httpupgrade.tls import TLSSettings


class TestUpgradeConfig:
    """Test UpgradeConfig construction and normalization."""
    
    def test_defaults(self):
        config = UpgradeConfig()
        assert config.host == ""
        assert config.path == ""
        assert dict(config.headers) == {}
        assert config.early_data is False
    
    def test_headers_keep_order_and_casing(self):
        config = UpgradeConfig.create(headers={
            "X-First": "1",
            "WebSocket-Test": ["a", "b"],
            "x-lower": "2",
        })
        assert list(config.headers) == ["X-First", "WebSocket-Test", "x-lower"]
        assert config.headers["WebSocket-Test"] == ("a", "b")
        assert config.headers["X-First"] == ("1",)
    
    def test_headers_are_read_only(self):
        config = UpgradeConfig.create(headers={"X-Test": "1"})
        with pytest.raises(TypeError):
            config.headers["X-Other"] = ("2",)
    
    def test_frozen(self):
        config = UpgradeConfig()
        with pytest.raises(AttributeError):
            config.host = "example.com"
    
    def test_headers_are_copied(self):
        headers = {"X-Test": ["1"]}
        config = UpgradeConfig.create(headers=headers)
        headers["X-Test"].append("2")
        headers["X-New"] = ["3"]
        assert dict(config.headers) == {"X-Test": ("1",)}
    
    def test_host_header_fallback(self):
        config = UpgradeConfig.create(headers={"host": "cdn.example.com", "X-Test": "1"})
        assert config.host == "cdn.example.com"
        assert "host" not in config.headers
        assert "X-Test" in config.headers
    
    def test_host_field_wins_over_host_header(self):
        config = UpgradeConfig.create(host="front.example.com", headers={"Host": "other"})
        assert config.host == "front.example.com"
        assert dict(config.headers) == {}
    
    @pytest.mark.parametrize("path, expected", [
        ("", ""),
        ("/ws", "/ws"),
        ("ws", "/ws"),
        ("/ws?ed=2048", "/ws"),
        ("?ed=2048", "/"),
    ])
    def test_normalized_path(self, path, expected):
        assert UpgradeConfig(path=path).normalized_path == expected
    
    def test_ed_query_enables_early_data(self):
        assert UpgradeConfig(path="/ws?ed=2048").early_data is True
        assert UpgradeConfig(path="/ws?ed=0").early_data is False
        assert UpgradeConfig(path="/ws?foo=bar").early_data is False
    
    def test_invalid_ed_query(self):
        with pytest.raises(ValueError):
            UpgradeConfig(path="/ws?ed=lots")
    
    def test_invalid_header_name(self):
        with pytest.raises(ValueError):
            UpgradeConfig.create(headers={"": "value"})
    
    def test_from_dict(self):
        config = UpgradeConfig.from_dict({
            "host": "example.com",
            "path": "/tunnel",
            "headers": {"User-Agent": "test"},
            "early_data": True,
        })
        assert config == UpgradeConfig.create(
            host="example.com",
            path="/tunnel",
            headers={"User-Agent": "test"},
            early_data=True,
        )
    
    def test_from_dict_rejects_unknown_keys(self):
        with pytest.raises(ValueError, match="Unknown configuration keys"):
            UpgradeConfig.from_dict({"hots": "example.com"})


class TestTransportSettings:
    """Test TransportSettings validation."""
    
    def test_defaults(self):
        settings = TransportSettings()
        assert settings.config == UpgradeConfig()
        assert settings.tls is None
        assert settings.connect_timeout is None
    
    def test_with_tls(self):
        settings = TransportSettings(tls=TLSSettings(server_name="example.com"))
        assert settings.tls.server_name == "example.com"
    
    def test_invalid_timeout(self):
        with pytest.raises(ValueError):
            TransportSettings(connect_timeout=0)
