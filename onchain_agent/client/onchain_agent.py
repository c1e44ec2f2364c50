"""
Simplified client interface for interacting with the Onchain Agent system.

This module provides a clean API for end users to interact with
the agent system without dealing with internal implementation details.
"""

import json
from typing import Any, Dict, List, Optional

from onchain_agent.factories.agent_factory import OnchainAgentFactory
from onchain_agent.interfaces.plugins.plugins import (
    Plugin,
    ProgressSink,
    noop_progress,
)
from onchain_agent.interfaces.services.callbacks import CallbackLike


class OnchainAgent:
    """Simplified client interface for interacting with the agent system."""

    def __init__(self, config_path: str = None, config: Dict[str, Any] = None):
        """Initialize the agent system from config file or dictionary.

        Args:
            config_path: Path to a JSON configuration file
            config: Configuration dictionary
        """
        if not config and not config_path:
            raise ValueError("Either config or config_path must be provided")

        if config_path:
            with open(config_path, "r") as f:
                config = json.load(f)

        self.config = config
        self.agent, self.plugin_manager = OnchainAgentFactory.create_from_config(config)
        self._plugins_loaded = False

    async def setup(self) -> List[str]:
        """Load the plugins named in the configuration (all when unspecified)."""
        if self._plugins_loaded:
            return [p.name for p in self.agent.get_plugins()]
        loaded = await self.plugin_manager.load_plugins(self.config.get("plugins"))
        self._plugins_loaded = True
        return loaded

    async def register_plugin(
        self, plugin: Plugin, config: Optional[Dict[str, Any]] = None
    ) -> bool:
        """Initialize and register a plugin built in code."""
        return await self.plugin_manager.register_plugin(plugin, config)

    def register_callback(self, callback: CallbackLike) -> None:
        self.agent.register_callback(callback)

    def unregister_callback(self, callback: CallbackLike) -> None:
        self.agent.unregister_callback(callback)

    def list_tools(self) -> List[Dict[str, Any]]:
        return self.agent.get_tool_schemas()

    async def process(self, message: str, progress: ProgressSink = noop_progress) -> Any:
        """Route a natural-language request to a tool and return its result."""
        await self.setup()
        return await self.agent.process(message, progress)

    async def execute_tool(
        self,
        tool_name: str,
        arguments: Optional[Dict[str, Any]] = None,
        progress: ProgressSink = noop_progress,
    ) -> Any:
        await self.setup()
        return await self.agent.execute_tool(tool_name, arguments, progress)

    async def close(self) -> None:
        await self.plugin_manager.cleanup()
