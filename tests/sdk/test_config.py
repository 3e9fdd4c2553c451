"""Tests for AgentConfig defaults, layering and validation."""

from __future__ import annotations

import pytest

from mt_sdk.protocol.errors import ConfigurationError
from mt_sdk.sdk.config import (
    DEFAULT_AGENT_ID,
    DEFAULT_MARKETPLACE_URL,
    DEFAULT_PORT,
    AgentConfig,
)


class TestDefaults:
    def test_default_config(self):
        c = AgentConfig(api_key="k", webhook_secret="s")
        assert c.port == DEFAULT_PORT == 3000
        assert c.marketplace_url == DEFAULT_MARKETPLACE_URL
        assert c.marketplace_url == "https://marketplace.metaltorque.dev/marketplace"
        assert c.agent_id == DEFAULT_AGENT_ID == "mt-sdk-agent"
        assert c.host == "0.0.0.0"
        assert c.require_signature is False
        assert c.log_level == "INFO"

    def test_missing_secret_defaults_to_empty(self):
        c = AgentConfig()
        assert c.api_key == ""
        assert c.webhook_secret == ""

    def test_missing_secret_warning(self, caplog):
        with caplog.at_level("WARNING", logger="mt_sdk.sdk.config"):
            AgentConfig()
        assert "empty key" in caplog.text
        assert "rejected" not in caplog.text

    def test_secret_set_no_warning(self, caplog):
        with caplog.at_level("WARNING", logger="mt_sdk.sdk.config"):
            AgentConfig(webhook_secret="s")
        assert "webhook secret" not in caplog.text

    def test_secrets_not_in_repr(self):
        c = AgentConfig(api_key="mt_live_key", webhook_secret="super-secret")
        assert "super-secret" not in repr(c)
        assert "mt_live_key" not in repr(c)


class TestEnvOverride:
    def test_env_var_used(self, monkeypatch):
        monkeypatch.setenv("MT_PORT", "4000")
        monkeypatch.setenv("MT_WEBHOOK_SECRET", "from-env")
        monkeypatch.setenv("MT_MARKETPLACE_URL", "http://localhost:9000")
        c = AgentConfig()
        assert c.port == 4000
        assert c.webhook_secret == "from-env"
        assert c.marketplace_url == "http://localhost:9000"

    def test_explicit_overrides_env_var(self, monkeypatch):
        monkeypatch.setenv("MT_PORT", "4000")
        c = AgentConfig(port=5000)
        assert c.port == 5000

    @pytest.mark.parametrize("value,expected", [("1", True), ("true", True), ("YES", True), ("0", False), ("no", False)])
    def test_require_signature_env(self, monkeypatch, value, expected):
        monkeypatch.setenv("MT_REQUIRE_SIGNATURE", value)
        assert AgentConfig().require_signature is expected

    def test_host_env(self, monkeypatch):
        monkeypatch.setenv("MT_HOST", "127.0.0.1")
        assert AgentConfig().host == "127.0.0.1"

    def test_log_level_uppercased(self, monkeypatch):
        monkeypatch.setenv("MT_LOG_LEVEL", "debug")
        assert AgentConfig().log_level == "DEBUG"


class TestConfigFile:
    def test_file_fills_defaults(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text('[agent]\nport = 8123\nagent_id = "file-agent"\nrequire_signature = true\n')
        c = AgentConfig(config_path=path)
        assert c.port == 8123
        assert c.agent_id == "file-agent"
        assert c.require_signature is True

    def test_env_beats_file(self, tmp_path, monkeypatch):
        path = tmp_path / "config.toml"
        path.write_text("[agent]\nport = 8123\n")
        monkeypatch.setenv("MT_PORT", "9001")
        assert AgentConfig(config_path=path).port == 9001

    def test_path_from_env(self, tmp_path, monkeypatch):
        path = tmp_path / "config.toml"
        path.write_text('[agent]\nagent_id = "via-env-path"\n')
        monkeypatch.setenv("MT_CONFIG_PATH", str(path))
        assert AgentConfig().agent_id == "via-env-path"

    def test_broken_file_ignored(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("[agent\nport = ")
        assert AgentConfig(config_path=path).port == DEFAULT_PORT

    def test_missing_file_ignored(self, tmp_path):
        assert AgentConfig(config_path=tmp_path / "nope.toml").port == DEFAULT_PORT


class TestValidation:
    @pytest.mark.parametrize("port", [0, -1, 65536, 70000])
    def test_out_of_range_port(self, port):
        with pytest.raises(ConfigurationError, match="port"):
            AgentConfig(port=port)

    def test_non_numeric_port_env(self, monkeypatch):
        monkeypatch.setenv("MT_PORT", "http")
        with pytest.raises(ConfigurationError, match="port"):
            AgentConfig()
