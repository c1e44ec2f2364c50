"""
Swap plugin: best-quote selection across DEX providers.
"""

from onchain_agent.plugins.swap.plugin import SwapPlugin, SwapPluginConfig
from onchain_agent.plugins.swap.quote_tool import SwapQuoteTool

__all__ = ["SwapPlugin", "SwapPluginConfig", "SwapQuoteTool"]
