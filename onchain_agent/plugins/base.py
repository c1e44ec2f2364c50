"""
Base plugin for the Onchain Agent system.

A plugin owns a ProviderRegistry restricted to its configured networks
and the tools built on top of it.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Set, Union

from pydantic import BaseModel, Field

from onchain_agent.domains.errors import NetworkNotSupportedError
from onchain_agent.domains.networks import network_value
from onchain_agent.interfaces.plugins.plugins import Plugin, Tool
from onchain_agent.interfaces.providers.network import NetworkProvider
from onchain_agent.plugins.registry import ProviderRegistry

# Setup logger for this module
logger = logging.getLogger(__name__)


class PluginConfig(BaseModel):
    """Configuration accepted by BasePlugin.initialize."""

    model_config = {"arbitrary_types_allowed": True}

    default_network: Optional[str] = None
    providers: List[Any] = Field(default_factory=list)
    supported_networks: List[str] = Field(default_factory=list)


class BasePlugin(Plugin):
    """Plugin backed by a provider registry.

    Subclasses implement _create_tools() and may extend PluginConfig.
    """

    config_model = PluginConfig

    def __init__(self):
        self.config: Optional[PluginConfig] = None
        self.registry = ProviderRegistry(supported_networks=[])
        self.tools: List[Tool] = []
        self.agent = None

    @property
    def name(self) -> str:
        return self.get_name()

    def get_name(self) -> str:
        # Override in subclasses
        raise NotImplementedError("Plugin must implement get_name")

    async def initialize(self, config: Union[PluginConfig, Dict[str, Any], None] = None) -> None:
        """Build the registry and tools from configuration.

        Calling it again discards the previous registry and tools.
        """
        if config is None:
            config = self.config_model()
        elif isinstance(config, dict):
            config = self.config_model(**config)
        self.config = config

        networks = [network_value(n) for n in config.supported_networks]
        if config.default_network and network_value(config.default_network) not in networks:
            raise NetworkNotSupportedError(network_value(config.default_network))

        self.registry = ProviderRegistry(supported_networks=networks)
        self.tools = self._create_tools(config)
        for provider in config.providers:
            self.register_provider(provider)

        supported = self.get_supported_networks()
        missing = [n for n in networks if n not in supported]
        if missing:
            logger.warning(
                f"Plugin {self.name} has no provider for: {', '.join(missing)}"
            )
        logger.info(
            f"Initialized plugin {self.name} with providers "
            f"{self.registry.get_provider_names()} on {sorted(supported)}"
        )

    def _create_tools(self, config: PluginConfig) -> List[Tool]:
        return []

    def register_provider(self, provider: NetworkProvider) -> None:
        """Register a provider with the plugin's registry."""
        self.registry.register_provider(provider)

    def get_provider(self, name: str) -> NetworkProvider:
        return self.registry.get_provider(name)

    def get_providers(self) -> List[NetworkProvider]:
        return self.registry.get_all_providers()

    def get_providers_for_network(self, network: str) -> List[NetworkProvider]:
        return self.registry.get_providers_for_network(network)

    def get_supported_networks(self) -> Set[str]:
        return self.registry.get_supported_networks()

    def get_default_network(self) -> Optional[str]:
        if self.config is None or not self.config.default_network:
            return None
        return network_value(self.config.default_network)

    def get_tools(self) -> List[Tool]:
        return list(self.tools)

    async def register(self, agent) -> None:
        """Hand this plugin's tools to an agent."""
        self.agent = agent
        agent.register_plugin(self)

    async def cleanup(self) -> None:
        """Release provider resources."""
        providers = [p for p in self.get_providers() if hasattr(p, "cleanup")]
        results = await asyncio.gather(
            *(provider.cleanup() for provider in providers),
            return_exceptions=True,
        )
        for provider, result in zip(providers, results):
            if isinstance(result, Exception):
                logger.error(
                    f"Error cleaning up provider {provider.get_name()}: {result}"
                )
