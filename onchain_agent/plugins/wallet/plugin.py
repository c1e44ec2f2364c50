from typing import List

from onchain_agent.interfaces.plugins.plugins import Tool
from onchain_agent.plugins.base import BasePlugin, PluginConfig
from onchain_agent.plugins.wallet.balance_tool import GetWalletBalanceTool


class WalletPlugin(BasePlugin):
    """Wallet balance queries across wallet providers."""

    @property
    def description(self) -> str:
        return "Query wallet balances through registered wallet providers"

    def get_name(self) -> str:
        return "wallet"

    def _create_tools(self, config: PluginConfig) -> List[Tool]:
        return [
            GetWalletBalanceTool(
                registry=self.registry,
                default_network=config.default_network,
                plugin_name=self.get_name(),
            )
        ]
