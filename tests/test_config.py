"""
Tests for configuration.
"""

import pytest

from kolibri_bot.config import Config, NetworkConfig
from kolibri_bot.errors import ConfigurationError


def test_validate_requires_both_webhooks(monkeypatch):
    monkeypatch.setattr(Config, "DISCORD_WEBHOOK_MAINNET", "")
    monkeypatch.setattr(Config, "DISCORD_WEBHOOK_TESTNET", "")

    with pytest.raises(ConfigurationError) as excinfo:
        Config.validate()

    assert "DISCORD_WEBHOOK_TESTNET" in str(excinfo.value)
    assert "DISCORD_WEBHOOK_MAINNET" in str(excinfo.value)


def test_validate_passes_with_webhooks(monkeypatch):
    monkeypatch.setattr(Config, "DISCORD_WEBHOOK_MAINNET", "https://discord.com/api/webhooks/1/a")
    monkeypatch.setattr(Config, "DISCORD_WEBHOOK_TESTNET", "https://discord.com/api/webhooks/2/b")
    Config.validate()


def test_network_configs_carry_webhook_per_tier(monkeypatch):
    monkeypatch.setattr(Config, "DISCORD_WEBHOOK_MAINNET", "main-url")
    monkeypatch.setattr(Config, "DISCORD_WEBHOOK_TESTNET", "test-url")

    mainnet, testnet = Config.network_configs()

    assert (mainnet.tier, mainnet.webhook_url) == ("main", "main-url")
    assert (testnet.tier, testnet.webhook_url) == ("test", "test-url")
    assert mainnet.oven_factory == Config.MAINNET_OVEN_FACTORY


def test_placeholder_addresses_are_not_configured():
    nc = NetworkConfig(
        network="florencenet",
        tier="test",
        rpc_url="https://rpctest.example",
        oven_factory="PLACEHOLDER_OVEN_FACTORY_ADDRESS",
        oven_registry="KT1registry",
        minter="KT1minter",
        webhook_url="url",
    )
    assert not nc.is_configured


def test_get_api_url_joins_paths(monkeypatch):
    monkeypatch.setattr(Config, "EXPLORER_API_BASE_URL", "https://api.example/v1/")
    assert Config.get_api_url("/opg/oo1") == "https://api.example/v1/opg/oo1"


def test_module_builds_no_config_at_import():
    import kolibri_bot.config as config_module

    assert not hasattr(config_module, "config")
