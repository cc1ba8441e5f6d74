"""
Tracker configuration management.

Loads settings from a YAML file into typed dataclasses and validates them
before any transaction is processed. A malformed target address is
reported here, so the classification core never sees one.

Precedence when used from the CLI: command-line flag, then environment
variable, then config file, then the defaults below.

Usage:
    from contract_tracker.config import TrackerConfig

    config = TrackerConfig.from_yaml("configs/tracker_config.yaml")
    print(config.tracking.limit)  # 5
"""

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from .classification.normalization import normalize_address
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

TARGET_ADDRESS_ENV = "TARGET_CONTRACT_ADDRESS"
RPC_URL_ENV = "ETH_RPC_URL"

DEFAULT_RPC_ENDPOINT = "wss://mainnet.infura.io/ws/v3/"


@dataclass
class RpcConfig:
    """Node connection settings."""

    endpoint: str = DEFAULT_RPC_ENDPOINT
    timeout: int = 30
    poll_interval: float = 1.0

    def __post_init__(self):
        if self.timeout <= 0:
            raise ConfigurationError(f"rpc.timeout must be positive, got {self.timeout}")
        if self.poll_interval < 0:
            raise ConfigurationError(
                f"rpc.poll_interval must be non-negative, got {self.poll_interval}"
            )


@dataclass
class TrackingConfig:
    """What to track and when to stop."""

    target_address: str | None = None
    limit: int | None = 5

    def __post_init__(self):
        # Validate and checksum once; raises InvalidAddressError
        if self.target_address:
            self.target_address = normalize_address(self.target_address)
        if self.limit is not None and self.limit <= 0:
            raise ConfigurationError(
                f"tracking.limit must be positive, got {self.limit}"
            )


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "INFO"
    format: str | None = None

    def __post_init__(self):
        if self.level.upper() not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            raise ConfigurationError(f"Invalid logging.level: {self.level}")


@dataclass
class TrackerConfig:
    """Complete tracker configuration."""

    rpc: RpcConfig = field(default_factory=RpcConfig)
    tracking: TrackingConfig = field(default_factory=TrackingConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "TrackerConfig":
        """
        Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            TrackerConfig instance with loaded values

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            ConfigurationError: If YAML structure or values are invalid
        """
        yaml_path = Path(yaml_path)

        if not yaml_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {yaml_path}")

        logger.info(f"Loading tracker configuration from {yaml_path}")

        try:
            with open(yaml_path, "r") as f:
                config_dict = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in config file {yaml_path}: {e}") from e

        if config_dict is None:
            config_dict = {}
        if not isinstance(config_dict, dict):
            raise ConfigurationError(f"Expected a mapping at top level of {yaml_path}")

        config = cls.from_dict(config_dict)
        logger.debug(f"RPC endpoint: {config.rpc.endpoint}")
        logger.debug(f"Target address: {config.tracking.target_address}")
        return config

    @classmethod
    def from_dict(cls, config_dict: Mapping[str, Any]) -> "TrackerConfig":
        """
        Create configuration from dictionary.

        Raises:
            ConfigurationError: If a section has unknown keys or invalid values
        """
        try:
            return cls(
                rpc=RpcConfig(**(config_dict.get("rpc") or {})),
                tracking=TrackingConfig(**(config_dict.get("tracking") or {})),
                logging=LoggingConfig(**(config_dict.get("logging") or {})),
            )
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration structure: {e}") from e

    def with_overrides(
        self,
        rpc_url: str | None = None,
        target_address: str | None = None,
        limit: int | None = None,
        env: Mapping[str, str] | None = None,
    ) -> "TrackerConfig":
        """
        Return a copy with environment variables and explicit values applied.

        Explicit arguments win over environment variables, which win over
        values already in the config.
        """
        env = os.environ if env is None else env

        endpoint = rpc_url or env.get(RPC_URL_ENV) or self.rpc.endpoint
        target = target_address or env.get(TARGET_ADDRESS_ENV) or self.tracking.target_address

        return replace(
            self,
            rpc=replace(self.rpc, endpoint=endpoint),
            tracking=TrackingConfig(
                target_address=target,
                limit=limit if limit is not None else self.tracking.limit,
            ),
        )

    def require_target(self) -> str:
        """Return the checksummed target address or fail with a hint."""
        if not self.tracking.target_address:
            raise ConfigurationError(
                f"No target contract address. Set {TARGET_ADDRESS_ENV}, pass "
                f"--target, or set tracking.target_address in the config file"
            )
        return self.tracking.target_address

    def to_dict(self) -> dict[str, Any]:
        return {
            "rpc": {
                "endpoint": self.rpc.endpoint,
                "timeout": self.rpc.timeout,
                "poll_interval": self.rpc.poll_interval,
            },
            "tracking": {
                "target_address": self.tracking.target_address,
                "limit": self.tracking.limit,
            },
            "logging": {
                "level": self.logging.level,
                "format": self.logging.format,
            },
        }
