"""
Provider registry for the Onchain Agent system.

This module implements the per-plugin ProviderRegistry that maps provider
names to instances and indexes them by the networks they can serve.
"""

import logging
from typing import Dict, Iterable, List, Optional, Set

from onchain_agent.domains.errors import ProviderNotFoundError
from onchain_agent.domains.networks import network_value
from onchain_agent.interfaces.providers.network import NetworkProvider

# Setup logger for this module
logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Instance-based registry of providers and their network index.

    When a network filter is set, a provider only lands in the buckets of
    the networks it shares with the filter, and a provider sharing none is
    left out of the index entirely. Buckets keep registration order, so
    the first registered provider is the first candidate.
    """

    def __init__(self, supported_networks: Optional[Iterable[str]] = None):
        """Initialize an empty registry.

        Args:
            supported_networks: Network filter; None accepts every network
        """
        self._providers: Dict[str, NetworkProvider] = {}  # name -> provider
        self._network_index: Dict[str, List[NetworkProvider]] = {}
        self._filter: Optional[Set[str]] = (
            None
            if supported_networks is None
            else {network_value(n) for n in supported_networks}
        )

    @property
    def network_filter(self) -> Optional[Set[str]]:
        return None if self._filter is None else set(self._filter)

    def _provider_networks(self, provider: NetworkProvider) -> List[str]:
        networks = []
        for network in provider.get_supported_networks():
            value = network_value(network)
            if value not in networks:
                networks.append(value)
        return networks

    def _rebuild_index(self) -> None:
        index: Dict[str, List[NetworkProvider]] = {}
        for provider in self._providers.values():
            for network in self._provider_networks(provider):
                if self._filter is not None and network not in self._filter:
                    continue
                index.setdefault(network, []).append(provider)
        self._network_index = index

    def register_provider(self, provider: NetworkProvider) -> None:
        """Register a provider, replacing any provider with the same name."""
        name = provider.get_name()
        replaced = name in self._providers
        self._providers[name] = provider
        self._rebuild_index()

        networks = self._provider_networks(provider)
        if self._filter is not None and not self._filter.intersection(networks):
            logger.warning(
                f"Provider {name} supports none of the configured networks "
                f"({', '.join(sorted(self._filter))}); it will not be used"
            )
        if replaced:
            logger.info(f"Replaced provider: {name}")
        else:
            logger.info(f"Registered provider: {name} for {', '.join(networks)}")

    def get_provider(self, name: str) -> NetworkProvider:
        """Get a provider by name.

        Raises:
            ProviderNotFoundError: if no provider has that name
        """
        provider = self._providers.get(name)
        if provider is None:
            raise ProviderNotFoundError(name, available=self.get_provider_names())
        return provider

    def has_provider(self, name: str) -> bool:
        return name in self._providers

    def remove_provider(self, name: str) -> None:
        """Remove a provider; unknown names are ignored."""
        if self._providers.pop(name, None) is not None:
            self._rebuild_index()
            logger.info(f"Removed provider: {name}")

    def get_provider_names(self) -> List[str]:
        """List provider names in registration order."""
        return list(self._providers.keys())

    def get_all_providers(self) -> List[NetworkProvider]:
        return list(self._providers.values())

    def get_providers_for_network(self, network: str) -> List[NetworkProvider]:
        """Get every provider able to serve a network, in registration order."""
        return list(self._network_index.get(network_value(network), []))

    def get_supported_networks(self) -> Set[str]:
        """Networks served by at least one provider, within the filter."""
        return {network for network, bucket in self._network_index.items() if bucket}

    def clear(self) -> None:
        self._providers.clear()
        self._network_index.clear()

    def __len__(self) -> int:
        return len(self._providers)
