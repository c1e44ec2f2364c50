from typing import List

from pydantic import Field

from onchain_agent.interfaces.plugins.plugins import Tool
from onchain_agent.plugins.base import BasePlugin, PluginConfig
from onchain_agent.plugins.swap.quote_tool import DEFAULT_SLIPPAGE, SwapQuoteTool


class SwapPluginConfig(PluginConfig):
    default_slippage: float = Field(DEFAULT_SLIPPAGE, ge=0)


class SwapPlugin(BasePlugin):
    """Token swap quotes across DEX providers."""

    config_model = SwapPluginConfig

    @property
    def description(self) -> str:
        return "Find the best swap quote across registered DEX providers"

    def get_name(self) -> str:
        return "swap"

    def _create_tools(self, config: SwapPluginConfig) -> List[Tool]:
        return [
            SwapQuoteTool(
                default_slippage=config.default_slippage,
                registry=self.registry,
                default_network=config.default_network,
                plugin_name=self.get_name(),
            )
        ]
