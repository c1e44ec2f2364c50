"""
Plugin manager for the Onchain Agent system.

This module implements the concrete PluginManager that discovers,
initializes and registers plugins with an agent.
"""

import importlib.metadata
import logging
from typing import Any, Dict, List, Optional

from onchain_agent.interfaces.plugins.plugins import (
    Plugin,
    PluginManager as PluginManagerInterface,
)
from onchain_agent.interfaces.providers.network import NetworkProvider
from onchain_agent.services.agent import Agent
from onchain_agent.services.settings import Settings

# Setup logger for this module
logger = logging.getLogger(__name__)

PLUGIN_ENTRY_POINT_GROUP = "onchain_agent.plugins"
PROVIDER_ENTRY_POINT_GROUP = "onchain_agent.providers"


class PluginManager(PluginManagerInterface):
    """Manager for discovering and loading plugins."""

    def __init__(
        self,
        agent: Agent,
        config: Optional[Dict[str, Dict[str, Any]]] = None,
        settings: Optional[Settings] = None,
    ):
        """Initialize with the agent plugins are registered to.

        Args:
            agent: Agent receiving the plugins' tools
            config: Per-plugin configuration keyed by plugin name
            settings: Configuration store handed to provider factories
        """
        self.agent = agent
        self.config = config or {}
        self.settings = settings
        self._plugins: Dict[str, Plugin] = {}
        self._loaded_entry_points = set()

    async def register_plugin(
        self, plugin: Plugin, config: Optional[Dict[str, Any]] = None
    ) -> bool:
        """Initialize a plugin and expose its tools through the agent.

        Args:
            plugin: The plugin to register
            config: Plugin configuration; defaults to the manager's entry for it

        Returns:
            True if registration succeeded, False otherwise
        """
        if config is None:
            config = self._plugin_config(plugin.name)
        try:
            await plugin.initialize(config)
            self.agent.register_plugin(plugin)
            self._plugins[plugin.name] = plugin
            logger.info(f"Successfully registered plugin {plugin.name}")
            return True
        except Exception as e:
            logger.error(f"Error registering plugin {plugin.name}: {e}")
            self._plugins.pop(plugin.name, None)
            return False

    def _plugin_config(self, name: str) -> Dict[str, Any]:
        config = dict(self.config.get(name, {}))
        provider_names = config.get("providers", [])
        if provider_names and all(isinstance(p, str) for p in provider_names):
            config["providers"] = self._load_providers(provider_names)
        return config

    def _load_providers(self, names: List[str]) -> List[NetworkProvider]:
        """Instantiate providers from the provider entry-point group, keeping order."""
        factories = {
            ep.name: ep
            for ep in importlib.metadata.entry_points(group=PROVIDER_ENTRY_POINT_GROUP)
        }
        providers = []
        for name in names:
            entry_point = factories.get(name)
            if entry_point is None:
                logger.warning(f"No provider entry point named {name}")
                continue
            try:
                providers.append(entry_point.load()(self.settings))
            except Exception as e:
                logger.error(f"Error loading provider {name}: {e}")
        return providers

    async def load_plugins(self, names: Optional[List[str]] = None) -> List[str]:
        """Load plugins from entry points.

        Args:
            names: Only load these entry points; None loads every one

        Returns:
            List of loaded plugin names
        """
        loaded_plugins = []

        for entry_point in importlib.metadata.entry_points(group=PLUGIN_ENTRY_POINT_GROUP):
            if names is not None and entry_point.name not in names:
                continue
            entry_point_id = f"{entry_point.name}:{entry_point.value}"
            if entry_point_id in self._loaded_entry_points:
                logger.info(f"Skipping already loaded plugin: {entry_point.name}")
                continue

            try:
                logger.info(f"Found plugin entry point: {entry_point.name}")
                self._loaded_entry_points.add(entry_point_id)
                plugin_factory = entry_point.load()
                plugin = plugin_factory()

                if await self.register_plugin(plugin):
                    loaded_plugins.append(entry_point.name)

            except Exception as e:
                logger.error(f"Error loading plugin {entry_point.name}: {e}")

        return loaded_plugins

    def get_plugin(self, name: str) -> Optional[Plugin]:
        return self._plugins.get(name)

    def list_plugins(self) -> List[Dict[str, Any]]:
        """List all registered plugins with their details."""
        return [
            {
                "name": plugin.name,
                "description": plugin.description,
                "networks": sorted(plugin.get_supported_networks()),
                "tools": [tool.name for tool in plugin.get_tools()],
            }
            for plugin in self._plugins.values()
        ]

    async def cleanup(self) -> None:
        """Clean up every registered plugin."""
        for name, plugin in self._plugins.items():
            try:
                await plugin.cleanup()
            except Exception as e:
                logger.error(f"Error cleaning up plugin {name}: {e}")
