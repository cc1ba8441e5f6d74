"""
Tests for tracker configuration loading and validation.
"""

import pytest
import yaml
from web3 import Web3

from contract_tracker.config import (
    RPC_URL_ENV,
    TARGET_ADDRESS_ENV,
    TrackerConfig,
)
from contract_tracker.errors import ConfigurationError, InvalidAddressError

USDT_ADDRESS = "0xdac17f958d2ee523a2206206994597c13d831ec7"
OTHER_ADDRESS = "0x1111111111111111111111111111111111111111"


@pytest.fixture
def config_file(tmp_path):
    """Write a config YAML file and return its path."""
    path = tmp_path / "tracker_config.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "rpc": {"endpoint": "https://node.example", "timeout": 10},
                "tracking": {"target_address": USDT_ADDRESS, "limit": 3},
                "logging": {"level": "DEBUG"},
            }
        )
    )
    return path


class TestTrackerConfig:
    """Test configuration loading."""

    def test_defaults(self):
        config = TrackerConfig()

        assert config.tracking.limit == 5
        assert config.tracking.target_address is None
        assert config.rpc.timeout == 30
        assert config.logging.level == "INFO"

    def test_from_yaml(self, config_file):
        config = TrackerConfig.from_yaml(config_file)

        assert config.rpc.endpoint == "https://node.example"
        assert config.rpc.timeout == 10
        assert config.rpc.poll_interval == 1.0
        assert config.tracking.target_address == Web3.to_checksum_address(USDT_ADDRESS)
        assert config.tracking.limit == 3
        assert config.logging.level == "DEBUG"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            TrackerConfig.from_yaml(tmp_path / "missing.yaml")

    def test_empty_file_uses_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert TrackerConfig.from_yaml(path) == TrackerConfig()

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("rpc: [unclosed")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            TrackerConfig.from_yaml(path)

    def test_unknown_key(self):
        with pytest.raises(ConfigurationError, match="Invalid configuration structure"):
            TrackerConfig.from_dict({"rpc": {"endpoint": "x", "retries": 3}})

    def test_invalid_target_address(self):
        """Test that a malformed target fails before anything else runs."""
        with pytest.raises(InvalidAddressError):
            TrackerConfig.from_dict({"tracking": {"target_address": "0x1234"}})

    @pytest.mark.parametrize(
        "section, values",
        [
            ("tracking", {"limit": 0}),
            ("rpc", {"timeout": 0}),
            ("rpc", {"poll_interval": -1}),
            ("logging", {"level": "LOUD"}),
        ],
    )
    def test_invalid_values(self, section, values):
        with pytest.raises(ConfigurationError):
            TrackerConfig.from_dict({section: values})

    def test_to_dict_round_trip(self, config_file):
        config = TrackerConfig.from_yaml(config_file)

        assert TrackerConfig.from_dict(config.to_dict()) == config


class TestOverrides:
    """Test flag > environment > file precedence."""

    def test_environment_overrides_file(self, config_file):
        config = TrackerConfig.from_yaml(config_file).with_overrides(
            env={TARGET_ADDRESS_ENV: OTHER_ADDRESS, RPC_URL_ENV: "wss://env.example"}
        )

        assert config.tracking.target_address == Web3.to_checksum_address(OTHER_ADDRESS)
        assert config.rpc.endpoint == "wss://env.example"

    def test_flags_override_environment(self, config_file):
        config = TrackerConfig.from_yaml(config_file).with_overrides(
            rpc_url="http://flag.example",
            target_address=USDT_ADDRESS,
            limit=1,
            env={TARGET_ADDRESS_ENV: OTHER_ADDRESS, RPC_URL_ENV: "wss://env.example"},
        )

        assert config.tracking.target_address == Web3.to_checksum_address(USDT_ADDRESS)
        assert config.rpc.endpoint == "http://flag.example"
        assert config.tracking.limit == 1

    def test_file_values_kept_without_overrides(self, config_file):
        original = TrackerConfig.from_yaml(config_file)

        assert original.with_overrides(env={}) == original

    def test_invalid_environment_target(self):
        with pytest.raises(InvalidAddressError):
            TrackerConfig().with_overrides(env={TARGET_ADDRESS_ENV: "not-an-address"})

    def test_require_target(self):
        with pytest.raises(ConfigurationError, match=TARGET_ADDRESS_ENV):
            TrackerConfig().with_overrides(env={}).require_target()

        config = TrackerConfig().with_overrides(env={TARGET_ADDRESS_ENV: USDT_ADDRESS})
        assert config.require_target() == Web3.to_checksum_address(USDT_ADDRESS)
