"""
Wallet plugin: balance queries backed by wallet providers.
"""

from onchain_agent.plugins.wallet.balance_tool import GetWalletBalanceTool
from onchain_agent.plugins.wallet.plugin import WalletPlugin

__all__ = ["GetWalletBalanceTool", "WalletPlugin"]
