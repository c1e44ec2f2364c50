"""
Tests for the swap plugin and its quote tool.
"""
import json
from unittest.mock import AsyncMock

import pytest

from onchain_agent.domains.errors import (
    ErrorStep,
    NoProviderAvailableError,
    ToolExecutionError,
)
from onchain_agent.interfaces.providers.swap import SwapParams, SwapProvider, SwapQuote, Token
from onchain_agent.plugins.swap import SwapPlugin, SwapQuoteTool
from onchain_agent.plugins.swap.quote_tool import pick_best_quote

USDT = Token(address="0x55d398326f99059ff775485246999027b3197955", symbol="USDT", decimals=18)
WBNB = Token(address="0xbb4cdb9cbd36b01bd1cbaebf2de08d9173bc095c", symbol="WBNB", decimals=18)


def _quote(from_amount="1", to_amount="1", network="bnb", quote_id="q"):
    return SwapQuote(
        network=network,
        quote_id=quote_id,
        from_token=WBNB,
        to_token=USDT,
        from_amount=from_amount,
        to_amount=to_amount,
    )


class StaticSwapProvider(SwapProvider):
    """Swap provider answering with a fixed quote."""

    def __init__(self, name, networks, quote=None, error=None):
        self._name = name
        self._networks = networks
        self.quote = quote
        self.error = error
        self.requests = []

    def get_name(self):
        return self._name

    def get_supported_networks(self):
        return list(self._networks)

    async def get_quote(self, params, wallet_address):
        self.requests.append((params, wallet_address))
        if self.error is not None:
            raise self.error
        return self.quote


async def _plugin(providers, networks=("bnb",), **config):
    plugin = SwapPlugin()
    await plugin.initialize(
        {"providers": providers, "supported_networks": list(networks), **config}
    )
    return plugin


def _input(**overrides):
    args = {
        "from_token": WBNB.address,
        "to_token": USDT.address,
        "amount": "1",
        "network": "bnb",
    }
    args.update(overrides)
    return args


class TestPickBestQuote:
    """Best quote selection."""

    def test_input_swap_prefers_highest_output(self):
        low = (object(), _quote(to_amount="590"))
        high = (object(), _quote(to_amount="600"))
        assert pick_best_quote([low, high], "input") is high

    def test_output_swap_prefers_lowest_input(self):
        cheap = (object(), _quote(from_amount="1.01"))
        dear = (object(), _quote(from_amount="1.05"))
        assert pick_best_quote([dear, cheap], "output") is cheap

    def test_ties_go_to_first(self):
        first = (object(), _quote(to_amount="600"))
        second = (object(), _quote(to_amount="600.0"))
        assert pick_best_quote([first, second], "input") is first

    def test_unparsable_amounts_never_win(self):
        broken = (object(), _quote(to_amount="n/a"))
        nan = (object(), _quote(to_amount="NaN"))
        valid = (object(), _quote(to_amount="1"))
        assert pick_best_quote([broken, nan, valid], "input") is valid

    def test_amounts_compare_exactly(self):
        small = (object(), _quote(to_amount="100000000000000000000001"))
        large = (object(), _quote(to_amount="100000000000000000000002"))
        assert pick_best_quote([small, large], "input") is large


class TestSwapPlugin:
    """Plugin wiring."""

    @pytest.mark.asyncio
    async def test_exposes_quote_tool(self):
        plugin = await _plugin([], default_slippage=1.0)
        tools = plugin.get_tools()
        assert plugin.name == "swap"
        assert len(tools) == 1
        assert isinstance(tools[0], SwapQuoteTool)
        assert tools[0].default_slippage == 1.0


class TestSwapQuoteTool:
    """Quote tool behaviour."""

    @pytest.mark.asyncio
    async def test_best_quote_across_providers(self):
        pancake = StaticSwapProvider("pancakeswap", ["bnb"], _quote(to_amount="590"))
        kyber = StaticSwapProvider("kyber", ["bnb"], _quote(to_amount="600"))
        plugin = await _plugin([pancake, kyber])
        progress = AsyncMock()

        result = json.loads(await plugin.get_tools()[0].invoke(_input(), progress))

        assert result["status"] == "success"
        assert result["provider"] == "kyber"
        assert result["quote"]["to_amount"] == "600"
        assert [c.args[0].progress for c in progress.await_args_list] == [10, 100]

    @pytest.mark.asyncio
    async def test_request_parameters(self):
        provider = StaticSwapProvider("p", ["bnb"], _quote())
        plugin = await _plugin([provider], default_slippage=1.5)

        await plugin.get_tools()[0].invoke(
            _input(amount="5", amount_type="output", wallet_address="0xwallet")
        )

        params, wallet = provider.requests[0]
        assert isinstance(params, SwapParams)
        assert params.amount == "5"
        assert params.type == "output"
        assert params.slippage == 1.5
        assert wallet == "0xwallet"

    @pytest.mark.asyncio
    async def test_explicit_slippage_wins(self):
        provider = StaticSwapProvider("p", ["bnb"], _quote())
        plugin = await _plugin([provider], default_slippage=1.5)
        await plugin.get_tools()[0].invoke(_input(slippage=0))
        assert provider.requests[0][0].slippage == 0

    @pytest.mark.asyncio
    async def test_preferred_provider(self):
        pancake = StaticSwapProvider("pancakeswap", ["bnb"], _quote(to_amount="590"))
        kyber = StaticSwapProvider("kyber", ["bnb"], _quote(to_amount="600"))
        plugin = await _plugin([pancake, kyber])

        result = json.loads(
            await plugin.get_tools()[0].invoke(_input(provider="pancakeswap"))
        )

        assert result["provider"] == "pancakeswap"
        assert kyber.requests == []

    @pytest.mark.asyncio
    async def test_unknown_preferred_provider_falls_back(self):
        plugin = await _plugin([StaticSwapProvider("kyber", ["bnb"], _quote())])
        result = json.loads(
            await plugin.get_tools()[0].invoke(_input(provider="uniswap"))
        )
        assert result["provider"] == "kyber"

    @pytest.mark.asyncio
    async def test_preferred_provider_on_wrong_network_falls_back(self):
        jupiter = StaticSwapProvider("jupiter", ["solana"], _quote())
        kyber = StaticSwapProvider("kyber", ["bnb"], _quote())
        plugin = await _plugin([jupiter, kyber], networks=("bnb", "solana"))

        result = json.loads(
            await plugin.get_tools()[0].invoke(_input(provider="jupiter"))
        )

        assert result["provider"] == "kyber"
        assert jupiter.requests == []

    @pytest.mark.asyncio
    async def test_failing_preferred_provider_falls_back_to_best_quote(self):
        pancake = StaticSwapProvider(
            "pancakeswap", ["bnb"], error=RuntimeError("pool paused")
        )
        kyber = StaticSwapProvider("kyber", ["bnb"], _quote(to_amount="600"))
        uniswap = StaticSwapProvider("uniswap", ["bnb"], _quote(to_amount="610"))
        plugin = await _plugin([pancake, kyber, uniswap])
        progress = AsyncMock()

        result = json.loads(
            await plugin.get_tools()[0].invoke(_input(provider="pancakeswap"), progress)
        )

        assert result["provider"] == "uniswap"
        assert len(kyber.requests) == 1
        assert [c.args[0].progress for c in progress.await_args_list] == [10, 100]

    @pytest.mark.asyncio
    async def test_failing_provider_is_skipped(self):
        broken = StaticSwapProvider("broken", ["bnb"], error=RuntimeError("timeout"))
        kyber = StaticSwapProvider("kyber", ["bnb"], _quote(to_amount="600"))
        plugin = await _plugin([broken, kyber])

        result = json.loads(await plugin.get_tools()[0].invoke(_input()))

        assert result["provider"] == "kyber"

    @pytest.mark.asyncio
    async def test_all_providers_failing(self):
        broken = StaticSwapProvider("broken", ["bnb"], error=RuntimeError("timeout"))
        plugin = await _plugin([broken])
        with pytest.raises(ToolExecutionError) as excinfo:
            await plugin.get_tools()[0].invoke(_input())
        assert excinfo.value.step == ErrorStep.PRICE_RETRIEVAL

    @pytest.mark.asyncio
    async def test_default_network_is_used(self):
        provider = StaticSwapProvider("p", ["bnb"], _quote())
        plugin = await _plugin([provider], default_network="bnb")
        await plugin.get_tools()[0].invoke(_input(network=None))
        assert provider.requests[0][0].network == "bnb"

    @pytest.mark.asyncio
    async def test_no_network_at_all(self):
        plugin = await _plugin([StaticSwapProvider("p", ["bnb"], _quote())])
        with pytest.raises(ToolExecutionError) as excinfo:
            await plugin.get_tools()[0].invoke(_input(network=None))
        assert excinfo.value.step == ErrorStep.NETWORK_VALIDATION

    @pytest.mark.asyncio
    async def test_network_without_provider(self):
        plugin = await _plugin(
            [StaticSwapProvider("p", ["bnb"], _quote())], networks=("bnb", "solana")
        )
        with pytest.raises(NoProviderAvailableError) as excinfo:
            await plugin.get_tools()[0].invoke(_input(network="solana"))
        assert excinfo.value.plugin == "swap"
