"""
Network domain models.

These models describe the blockchain networks that providers operate
against and the connection settings an agent is configured with.
"""
from enum import Enum
from typing import Dict, Optional, Union

from pydantic import BaseModel, Field, field_validator


class NetworkName(str, Enum):
    """Well-known network identifiers."""
    ETHEREUM = "ethereum"
    BNB = "bnb"
    SOLANA = "solana"
    POLYGON = "polygon"
    ARBITRUM = "arbitrum"
    OPTIMISM = "optimism"
    BASE = "base"
    SEPOLIA = "sepolia"
    SOLANA_DEVNET = "solana-devnet"


class NetworkType(str, Enum):
    """Family of chain a network belongs to."""
    EVM = "evm"
    SOLANA = "solana"


class NativeCurrency(BaseModel):
    """Native currency of an EVM network."""
    name: str
    symbol: str
    decimals: int = Field(18, ge=0)


class BaseNetworkConfig(BaseModel):
    """Connection settings shared by every network type."""
    rpc_url: str = Field(..., description="JSON-RPC endpoint")
    name: str = Field(..., description="Human readable network name")
    block_explorer_url: Optional[str] = None

    @field_validator("rpc_url", "name")
    @classmethod
    def not_empty(cls, v: str) -> str:
        """Validate that string fields are not empty."""
        if not v.strip():
            raise ValueError("Field cannot be empty")
        return v


class EVMNetworkConfig(BaseNetworkConfig):
    """Connection settings for an EVM chain."""
    chain_id: int
    native_currency: NativeCurrency


class SolanaNetworkConfig(BaseNetworkConfig):
    """Connection settings for a Solana cluster."""


class NetworkConfig(BaseModel):
    """A network entry: its type plus type-specific settings."""
    type: NetworkType
    config: Union[EVMNetworkConfig, SolanaNetworkConfig]


class NetworksConfig(BaseModel):
    """All networks an agent may operate against, keyed by name."""
    networks: Dict[str, NetworkConfig] = Field(default_factory=dict)


def network_value(network: Union[str, NetworkName]) -> str:
    """Return the plain string form of a network identifier."""
    if isinstance(network, NetworkName):
        return network.value
    return str(network)
