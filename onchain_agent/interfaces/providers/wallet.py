from abc import abstractmethod
from typing import List, Optional

from pydantic import BaseModel, Field

from onchain_agent.interfaces.providers.network import NetworkProvider


class WalletBalance(BaseModel):
    """Balance of a single asset held by a wallet."""
    symbol: str
    balance: str
    decimals: int
    name: Optional[str] = None
    usd_value: Optional[float] = None
    address: Optional[str] = None


class WalletInfo(BaseModel):
    """Everything a provider knows about a wallet on one network."""
    address: Optional[str] = None
    native_balance: Optional[WalletBalance] = None
    tokens: List[WalletBalance] = Field(default_factory=list)
    total_usd_value: Optional[float] = None


class WalletProvider(NetworkProvider):
    """Interface for providers that report wallet balances."""

    @abstractmethod
    async def get_wallet_info(self, address: str, network: str) -> WalletInfo:
        """Get balances for an address on a network."""
        pass
