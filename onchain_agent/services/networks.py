"""
Network catalogue for the Onchain Agent system.

Holds the configured networks and answers lookups about them. Creating
RPC clients for these networks is left to providers.
"""
import logging
from typing import Any, Dict, List, Union

from onchain_agent.domains.errors import NetworkNotSupportedError
from onchain_agent.domains.networks import (
    NetworkConfig,
    NetworkName,
    NetworksConfig,
    NetworkType,
    network_value,
)

logger = logging.getLogger(__name__)


class NetworkService:
    """Lookup service over the configured networks."""

    def __init__(self, config: Union[NetworksConfig, Dict[str, Any]]):
        if isinstance(config, dict):
            # Accept both {"networks": {...}} and a bare mapping of networks
            config = NetworksConfig(**(config if "networks" in config else {"networks": config}))
        if not config.networks:
            raise ValueError("No networks configured")
        self._config = config
        logger.info(f"Configured networks: {', '.join(config.networks)}")

    def get_config(self, name: Union[str, NetworkName]) -> NetworkConfig:
        """Get the configuration of a network.

        Raises:
            NetworkNotSupportedError: if the network is not configured
        """
        key = network_value(name)
        config = self._config.networks.get(key)
        if config is None:
            raise NetworkNotSupportedError(key)
        return config

    def get_networks(self) -> List[str]:
        return list(self._config.networks.keys())

    def is_supported(self, name: Union[str, NetworkName]) -> bool:
        return network_value(name) in self._config.networks

    def get_network_type(self, name: Union[str, NetworkName]) -> NetworkType:
        return self.get_config(name).type
