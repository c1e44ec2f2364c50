"""
Swap quote tool.

Collects quotes from the provider the caller asked for, or from every swap
provider serving the network when none was named or the named one cannot
quote, and reports the best one. Building and
signing the swap transaction is left to the caller.
"""
import asyncio
import json
import logging
from decimal import Decimal, InvalidOperation
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, Field

from onchain_agent.domains.errors import (
    ErrorStep,
    ProviderNotFoundError,
    ToolExecutionError,
)
from onchain_agent.domains.execution import ToolProgress
from onchain_agent.interfaces.plugins.plugins import ProgressSink
from onchain_agent.interfaces.providers.swap import SwapParams, SwapProvider, SwapQuote
from onchain_agent.plugins.tools.base_tool import BaseTool

logger = logging.getLogger(__name__)

DEFAULT_SLIPPAGE = 0.5


class SwapQuoteInput(BaseModel):
    from_token: str = Field(..., description="The address of the token to spend")
    to_token: str = Field(..., description="The address of the token to receive")
    amount: str = Field(..., description="The amount of tokens to swap")
    amount_type: Literal["input", "output"] = Field(
        "input", description="Whether the amount is input (spend) or output (receive)"
    )
    network: Optional[str] = Field(
        None, description="The network to swap on. Omit to use the default network"
    )
    provider: Optional[str] = Field(
        None,
        description="The DEX provider to use. If not specified, the best rate is found",
    )
    slippage: Optional[float] = Field(
        None, ge=0, description="Maximum slippage percentage allowed"
    )
    wallet_address: str = Field("", description="Address the swap is quoted for")


def _amount(value: str) -> Optional[Decimal]:
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return None
    return None if amount.is_nan() else amount


def pick_best_quote(
    candidates: List[Tuple[SwapProvider, SwapQuote]], amount_type: str
) -> Tuple[SwapProvider, SwapQuote]:
    """Highest output for exact-input swaps, lowest input for exact-output.

    Ties go to the earlier candidate; unparsable amounts never win.
    """

    def score(candidate: Tuple[SwapProvider, SwapQuote]) -> Optional[Decimal]:
        quote = candidate[1]
        if amount_type == "input":
            return _amount(quote.to_amount)
        amount = _amount(quote.from_amount)
        return None if amount is None else -amount

    best, best_score = candidates[0], score(candidates[0])
    for current in candidates[1:]:
        current_score = score(current)
        if current_score is None:
            continue
        if best_score is None or current_score > best_score:
            best, best_score = current, current_score
    return best


class SwapQuoteTool(BaseTool):
    """Finds the best swap quote across DEX providers."""

    input_model = SwapQuoteInput

    def __init__(self, default_slippage: float = DEFAULT_SLIPPAGE, **kwargs):
        super().__init__(
            name="swap_quote",
            description=(
                "Quote an exchange of one token for another across the registered "
                "DEX providers. The amount is either what the user spends (input) "
                "or what they receive (output)."
            ),
            **kwargs,
        )
        self.default_slippage = default_slippage

    def _preferred(
        self, network: str, name: str, providers: List[SwapProvider]
    ) -> Optional[SwapProvider]:
        try:
            provider = self.registry.get_provider(name)
        except ProviderNotFoundError as e:
            logger.warning(f"Preferred provider unavailable: {e}")
            return None
        if provider not in providers:
            logger.warning(f"Preferred provider {name} does not support network {network}")
            return None
        return provider

    async def _collect(
        self,
        providers: List[SwapProvider],
        params: SwapParams,
        wallet_address: str,
    ) -> List[Tuple[SwapProvider, SwapQuote]]:
        results = await asyncio.gather(
            *(self._quote(p, params, wallet_address) for p in providers)
        )
        return [r for r in results if r is not None]

    async def _quote(
        self, provider: SwapProvider, params: SwapParams, wallet_address: str
    ) -> Optional[Tuple[SwapProvider, SwapQuote]]:
        try:
            logger.info(f"Getting quote from {provider.get_name()}")
            return provider, await provider.get_quote(params, wallet_address)
        except Exception as e:
            logger.warning(f"Failed to get quote from {provider.get_name()}: {e}")
            return None

    async def run(self, args: SwapQuoteInput, progress: ProgressSink) -> str:
        network = self.resolve_network(args.network)
        if not network:
            raise ToolExecutionError(
                ErrorStep.NETWORK_VALIDATION,
                "No network specified and no default network configured",
            )
        providers = self.require_providers(network)

        params = SwapParams(
            network=network,
            from_token=args.from_token,
            to_token=args.to_token,
            amount=args.amount,
            type=args.amount_type,
            slippage=self.default_slippage if args.slippage is None else args.slippage,
        )
        candidates: List[Tuple[SwapProvider, SwapQuote]] = []
        if args.provider is not None:
            preferred = self._preferred(network, args.provider, providers)
            if preferred is not None:
                candidates = await self._collect([preferred], params, args.wallet_address)
            if not candidates:
                logger.warning(
                    f"No quote from preferred provider {args.provider}; "
                    "falling back to every provider"
                )

        if not candidates:
            await progress(
                ToolProgress(
                    progress=10,
                    message=f"Requesting quotes from {len(providers)} provider(s) on {network}",
                )
            )
            candidates = await self._collect(providers, params, args.wallet_address)
        if not candidates:
            raise ToolExecutionError(
                ErrorStep.PRICE_RETRIEVAL,
                "No valid quotes found",
                {"network": network, "providers": [p.get_name() for p in providers]},
            )

        provider, quote = pick_best_quote(candidates, args.amount_type)
        await progress(
            ToolProgress(progress=100, message=f"Best quote from {provider.get_name()}")
        )
        return json.dumps(
            {
                "status": "success",
                "provider": provider.get_name(),
                "quote": quote.model_dump(mode="json"),
            }
        )
