from abc import abstractmethod
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from onchain_agent.interfaces.providers.network import NetworkProvider


class Token(BaseModel):
    """Token metadata as reported by a swap provider."""
    address: str
    symbol: str
    decimals: int = Field(..., ge=0)


class SwapParams(BaseModel):
    """Parameters of a requested swap."""
    network: str
    from_token: str
    to_token: str
    amount: str
    type: Literal["input", "output"] = "input"
    slippage: float = Field(0.5, ge=0)


class SwapQuote(BaseModel):
    """A provider's offer for a swap."""
    network: str
    quote_id: str
    from_token: Token
    to_token: Token
    from_amount: str
    to_amount: str
    price_impact: float = 0
    route: List[str] = Field(default_factory=list)
    estimated_gas: Optional[str] = None
    type: Literal["input", "output"] = "input"
    slippage: float = 0.5


class SwapProvider(NetworkProvider):
    """Interface for DEX aggregators and exchanges."""

    @abstractmethod
    async def get_quote(self, params: SwapParams, wallet_address: str) -> SwapQuote:
        """Get a quote for swapping tokens."""
        pass
