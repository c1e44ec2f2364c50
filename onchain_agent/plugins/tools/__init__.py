"""
Tools for the Onchain Agent system.

This package contains the BaseTool class that plugin tools extend.
"""

from onchain_agent.plugins.tools.base_tool import *
