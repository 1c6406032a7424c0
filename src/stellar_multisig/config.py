"""
Coordinator configuration.

Network selection, fee policy and the polling budget used by the
submission coordinator.
"""

from __future__ import annotations
import os
from dataclasses import dataclass, replace
from typing import Dict, Mapping, Optional

from .runtime.errors import ConfigurationError


TESTNET_PASSPHRASE = "Test SDF Network ; September 2015"
PUBLIC_PASSPHRASE = "Public Global Stellar Network ; September 2015"

NETWORKS: Dict[str, str] = {
    "testnet": TESTNET_PASSPHRASE,
    "public": PUBLIC_PASSPHRASE,
    "mainnet": PUBLIC_PASSPHRASE,
}

# Protocol floor, in stroops per operation
MIN_BASE_FEE = 100

ENV_PREFIX = "STELLAR_MULTISIG_"


@dataclass(frozen=True)
class CoordinatorConfig:
    """Configuration for the multisig coordinator."""

    network_passphrase: str = TESTNET_PASSPHRASE
    base_fee: int = MIN_BASE_FEE
    min_fee: int = MIN_BASE_FEE
    fee_multiplier: int = 2
    default_timeout_seconds: int = 300
    poll_interval: float = 1.0
    max_poll_attempts: int = 30

    def __post_init__(self):
        if not self.network_passphrase:
            raise ConfigurationError("network_passphrase must not be empty")
        if self.min_fee < MIN_BASE_FEE:
            raise ConfigurationError(f"min_fee must be at least {MIN_BASE_FEE}",
                                     {"min_fee": self.min_fee})
        if self.base_fee < 1 or self.fee_multiplier < 1:
            raise ConfigurationError("base_fee and fee_multiplier must be positive")
        if self.default_timeout_seconds <= 0:
            raise ConfigurationError("default_timeout_seconds must be positive")
        if self.poll_interval < 0:
            raise ConfigurationError("poll_interval must not be negative")
        if self.max_poll_attempts < 1:
            raise ConfigurationError("max_poll_attempts must be at least 1")

    def fee_per_operation(self, network_base_fee: Optional[int] = None) -> int:
        """
        Recommended per-operation fee.

        Pads the network base fee by `fee_multiplier` to ride out congestion,
        never going below the protocol floor.
        """
        base = network_base_fee if network_base_fee is not None else self.base_fee
        return max(base * self.fee_multiplier, self.min_fee)

    def fee_for(self, operation_count: int, network_base_fee: Optional[int] = None) -> int:
        return self.fee_per_operation(network_base_fee) * max(operation_count, 1)

    def with_overrides(self, **overrides) -> CoordinatorConfig:
        return replace(self, **overrides)

    @classmethod
    def for_network(cls, network: str, **overrides) -> CoordinatorConfig:
        """
        Create configuration for a named network.

        Args:
            network: "testnet", "public" or "mainnet"
            **overrides: Field overrides

        Returns:
            Configuration instance
        """
        passphrase = NETWORKS.get(network.lower())
        if passphrase is None:
            raise ConfigurationError(f"Unknown network: {network}",
                                     {"known": sorted(NETWORKS)})
        return cls(network_passphrase=passphrase, **overrides)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> CoordinatorConfig:
        """
        Build configuration from STELLAR_MULTISIG_* environment variables.

        Unset variables keep their defaults.
        """
        env = os.environ if environ is None else environ
        overrides = {}
        numeric = {
            "BASE_FEE": ("base_fee", int),
            "TIMEOUT": ("default_timeout_seconds", int),
            "POLL_INTERVAL": ("poll_interval", float),
            "MAX_POLL_ATTEMPTS": ("max_poll_attempts", int),
        }
        for suffix, (field_name, kind) in numeric.items():
            raw = env.get(ENV_PREFIX + suffix)
            if raw is None or raw == "":
                continue
            try:
                overrides[field_name] = kind(raw)
            except ValueError as e:
                raise ConfigurationError(f"Invalid value for {ENV_PREFIX + suffix}: {raw!r}", cause=e) from e

        passphrase = env.get(ENV_PREFIX + "PASSPHRASE")
        if passphrase:
            return cls(network_passphrase=passphrase, **overrides)
        return cls.for_network(env.get(ENV_PREFIX + "NETWORK", "testnet"), **overrides)


__all__ = [
    "TESTNET_PASSPHRASE",
    "PUBLIC_PASSPHRASE",
    "NETWORKS",
    "MIN_BASE_FEE",
    "CoordinatorConfig",
]
