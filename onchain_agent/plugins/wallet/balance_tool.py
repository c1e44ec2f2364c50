"""
Wallet balance tool.

Queries every wallet provider serving a network, in registration order,
and merges what they report.
"""
import json
import logging
import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from onchain_agent.domains.errors import (
    ErrorStep,
    NoProviderAvailableError,
    ToolExecutionError,
)
from onchain_agent.domains.execution import ToolProgress
from onchain_agent.domains.networks import NetworkName
from onchain_agent.interfaces.plugins.plugins import ProgressSink
from onchain_agent.plugins.tools.base_tool import BaseTool

logger = logging.getLogger(__name__)

EVM_ADDRESS = re.compile(r"^0x[a-fA-F0-9]{40}$")
SOLANA_ADDRESS = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")
SOLANA_NETWORKS = {NetworkName.SOLANA.value, NetworkName.SOLANA_DEVNET.value}
# Native assets are reported even with a dust balance
NATIVE_SYMBOLS = {"BNB", "ETH", "SOL", "POL", "MATIC"}
DUST_THRESHOLD = 0.00001


def merge_objects(first: Dict[str, Any], second: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge two dicts; non-null values in second win."""
    result = dict(first)
    for key, value in second.items():
        if value is None:
            continue
        current = result.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            result[key] = merge_objects(current, value)
        else:
            result[key] = value
    return result


def is_valid_address(address: str, network: str) -> bool:
    if network in SOLANA_NETWORKS:
        return bool(SOLANA_ADDRESS.match(address))
    if network in {n.value for n in NetworkName}:
        return bool(EVM_ADDRESS.match(address))
    # Unknown networks are not validated
    return True


def _is_dust(token: Dict[str, Any]) -> bool:
    if str(token.get("symbol", "")).upper() in NATIVE_SYMBOLS:
        return False
    try:
        return float(token.get("balance", 0)) <= DUST_THRESHOLD
    except (TypeError, ValueError):
        return False


class WalletBalanceInput(BaseModel):
    address: str = Field(..., description="The wallet address to query")
    network: Optional[str] = Field(
        None,
        description="The network to query. Omit to query every supported network",
    )


class GetWalletBalanceTool(BaseTool):
    """Reports token and native balances of a wallet."""

    input_model = WalletBalanceInput

    def __init__(self, **kwargs):
        super().__init__(
            name="get_wallet_balance",
            description=(
                "Get detailed information about tokens and native currencies in a "
                "wallet, including balances, token addresses, symbols and decimals. "
                "Use this tool to check what a wallet holds."
            ),
            **kwargs,
        )

    def _networks_for(self, args: WalletBalanceInput) -> List[str]:
        if args.network:
            # Fails fast for an explicitly requested network
            self.require_providers(args.network)
            return [args.network]
        networks = sorted(self.registry.get_supported_networks())
        if not networks:
            raise NoProviderAvailableError(
                self.default_network or "any", plugin=self.plugin_name
            )
        return networks

    async def _query_network(self, address: str, network: str) -> Optional[Dict[str, Any]]:
        merged: Dict[str, Any] = {}
        errors: Dict[str, str] = {}
        for provider in self.registry.get_providers_for_network(network):
            try:
                info = await provider.get_wallet_info(address, network)
                merged = merge_objects(
                    merged, info.model_dump(exclude_unset=True, exclude_none=True)
                )
            except Exception as e:
                errors[provider.get_name()] = str(e)
                logger.warning(f"Provider {provider.get_name()} failed on {network}: {e}")

        if merged.get("tokens"):
            merged["tokens"] = [t for t in merged["tokens"] if not _is_dust(t)]
        if not merged.get("tokens") and not merged.get("native_balance"):
            return None
        entry = {"data": merged, "address": address}
        if errors:
            entry["errors"] = errors
        return entry

    async def run(self, args: WalletBalanceInput, progress: ProgressSink) -> str:
        networks = self._networks_for(args)
        results: Dict[str, Any] = {}

        for i, network in enumerate(networks, start=1):
            if not is_valid_address(args.address, network):
                logger.warning(
                    f"Invalid address format for network {network}: {args.address}"
                )
                continue
            entry = await self._query_network(args.address, network)
            if entry is not None:
                results[network] = entry
            await progress(
                ToolProgress(
                    progress=i * 100 / len(networks),
                    message=f"Retrieved wallet information on {network}",
                )
            )

        if not results:
            raise ToolExecutionError(
                ErrorStep.DATA_RETRIEVAL,
                "Failed to get wallet information for any network.",
                {"address": args.address, "networks": networks},
            )
        return json.dumps({"status": "success", "results": results})
