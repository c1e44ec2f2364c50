"""
Tests for the ProviderRegistry.

This module tests the name lookup, the network index and the network
filter of the per-plugin provider registry.
"""
import logging

import pytest

from onchain_agent.domains.errors import ProviderNotFoundError
from onchain_agent.domains.networks import NetworkName
from onchain_agent.plugins.registry import ProviderRegistry


@pytest.fixture
def registry():
    """Registry filtered to bnb."""
    return ProviderRegistry(supported_networks=["bnb"])


class TestNetworkIndex:
    """Network index behaviour."""

    def test_filter_intersection(self, registry, make_provider):
        p1 = make_provider("p1", ["bnb"])
        p2 = make_provider("p2", ["bnb", "solana"])
        registry.register_provider(p1)
        registry.register_provider(p2)

        assert registry.get_providers_for_network("bnb") == [p1, p2]
        assert registry.get_providers_for_network("solana") == []
        assert registry.get_supported_networks() == {"bnb"}

    def test_registration_order_is_preserved(self, make_provider):
        registry = ProviderRegistry(["bnb", "ethereum"])
        providers = [make_provider(f"p{i}", ["bnb", "ethereum"]) for i in range(5)]
        for provider in providers:
            registry.register_provider(provider)
        assert registry.get_providers_for_network("bnb") == providers
        assert registry.get_providers_for_network("ethereum") == providers

    def test_provider_outside_filter_is_not_indexed(self, registry, make_provider, caplog):
        outsider = make_provider("outsider", ["solana"])
        with caplog.at_level(logging.WARNING, logger="onchain_agent.plugins.registry"):
            registry.register_provider(outsider)

        assert registry.has_provider("outsider")
        assert registry.get_supported_networks() == set()
        assert any("outsider" in r.getMessage() for r in caplog.records)

    def test_empty_filter_indexes_nothing(self, make_provider):
        registry = ProviderRegistry([])
        registry.register_provider(make_provider("p1", ["bnb"]))
        assert registry.get_supported_networks() == set()
        assert registry.get_provider("p1").get_name() == "p1"

    def test_no_filter_indexes_everything(self, make_provider):
        registry = ProviderRegistry()
        registry.register_provider(make_provider("p1", ["bnb", "solana"]))
        assert registry.network_filter is None
        assert registry.get_supported_networks() == {"bnb", "solana"}

    def test_accepts_network_enum(self, make_provider):
        registry = ProviderRegistry([NetworkName.BNB])
        p1 = make_provider("p1", [NetworkName.BNB])
        registry.register_provider(p1)
        assert registry.get_providers_for_network("bnb") == [p1]
        assert registry.get_providers_for_network(NetworkName.BNB) == [p1]

    def test_duplicate_networks_are_indexed_once(self, registry, make_provider):
        p1 = make_provider("p1", ["bnb", "bnb"])
        registry.register_provider(p1)
        assert registry.get_providers_for_network("bnb") == [p1]

    def test_returned_bucket_is_a_copy(self, registry, make_provider):
        registry.register_provider(make_provider("p1", ["bnb"]))
        registry.get_providers_for_network("bnb").clear()
        assert len(registry.get_providers_for_network("bnb")) == 1

    def test_unknown_network_gives_empty_list(self, registry):
        assert registry.get_providers_for_network("unknown") == []


class TestNameLookup:
    """Name lookup and replacement."""

    def test_get_provider(self, registry, make_provider):
        p1 = make_provider("p1", ["bnb"])
        registry.register_provider(p1)
        assert registry.get_provider("p1") is p1

    def test_unknown_provider_raises(self, registry, make_provider):
        registry.register_provider(make_provider("p1", ["bnb"]))
        with pytest.raises(ProviderNotFoundError) as excinfo:
            registry.get_provider("missing")
        assert str(excinfo.value).startswith("Provider missing not found")
        assert excinfo.value.available == ["p1"]
        assert isinstance(excinfo.value, LookupError)

    def test_replacement_keeps_position(self, make_provider):
        registry = ProviderRegistry(["bnb"])
        first = make_provider("a", ["bnb"])
        second = make_provider("b", ["bnb"])
        replacement = make_provider("a", ["bnb"])
        registry.register_provider(first)
        registry.register_provider(second)
        registry.register_provider(replacement)

        assert registry.get_provider("a") is replacement
        assert registry.get_providers_for_network("bnb") == [replacement, second]
        assert len(registry) == 2

    def test_replacement_drops_stale_networks(self, make_provider):
        registry = ProviderRegistry(["bnb", "ethereum"])
        registry.register_provider(make_provider("a", ["bnb", "ethereum"]))
        registry.register_provider(make_provider("a", ["bnb"]))
        assert registry.get_providers_for_network("ethereum") == []

    def test_remove_provider_reindexes(self, registry, make_provider):
        p1 = make_provider("p1", ["bnb"])
        p2 = make_provider("p2", ["bnb"])
        registry.register_provider(p1)
        registry.register_provider(p2)

        registry.remove_provider("p1")
        registry.remove_provider("unknown")

        assert registry.get_providers_for_network("bnb") == [p2]
        assert registry.get_provider_names() == ["p2"]

    def test_clear(self, registry, make_provider):
        registry.register_provider(make_provider("p1", ["bnb"]))
        registry.clear()
        assert len(registry) == 0
        assert registry.get_supported_networks() == set()
        assert registry.network_filter == {"bnb"}
