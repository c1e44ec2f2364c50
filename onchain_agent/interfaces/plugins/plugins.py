"""
Plugin system interfaces.

These interfaces define the contracts for the plugin system,
enabling extensibility through tools, plugins and their providers.
"""
from abc import ABC, abstractmethod
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    List,
    Optional,
    Set,
    Type,
    Union,
)

from pydantic import BaseModel

from onchain_agent.domains.execution import ToolProgress
from onchain_agent.interfaces.providers.network import NetworkProvider


ProgressSink = Callable[[ToolProgress], Awaitable[None]]


async def noop_progress(progress: ToolProgress) -> None:
    """Progress sink used when the caller is not interested in progress."""
    return None


class Tool(ABC):
    """Interface for tools that can be used by agents."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the name of the tool."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Get the description of the tool."""
        pass

    @property
    @abstractmethod
    def schema(self) -> Type[BaseModel]:
        """Get the pydantic model validating the tool input."""
        pass

    def get_schema(self) -> Dict[str, Any]:
        """Get the JSON schema for the tool parameters."""
        return self.schema.model_json_schema()

    @abstractmethod
    async def invoke(
        self,
        input: Union[BaseModel, Dict[str, Any]],
        progress: ProgressSink = noop_progress,
    ) -> Any:
        """Execute the tool, reporting progress through the sink."""
        pass


class Plugin(ABC):
    """Interface for plugins: a bundle of tools backed by providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the name of the plugin."""
        pass

    @property
    def description(self) -> str:
        """Get the description of the plugin."""
        return ""

    @abstractmethod
    async def initialize(self, config: Union[BaseModel, Dict[str, Any]]) -> None:
        """Initialize the plugin's provider registry and tools."""
        pass

    @abstractmethod
    def get_tools(self) -> List[Tool]:
        """Get all tools provided by this plugin."""
        pass

    @abstractmethod
    def get_supported_networks(self) -> Set[str]:
        """Get the networks this plugin can serve."""
        pass

    @abstractmethod
    def get_providers_for_network(self, network: str) -> List[NetworkProvider]:
        """Get the ordered candidate providers for a network."""
        pass

    async def cleanup(self) -> None:
        """Clean up any resources when the plugin is unregistered."""
        return None


class PluginManager(ABC):
    """Interface for the plugin manager."""

    @abstractmethod
    async def register_plugin(
        self, plugin: Plugin, config: Optional[Dict[str, Any]] = None
    ) -> bool:
        """Initialize a plugin and expose its tools."""
        pass

    @abstractmethod
    async def load_plugins(self) -> List[str]:
        """Discover and register installed plugins."""
        pass

    @abstractmethod
    def get_plugin(self, name: str) -> Optional[Plugin]:
        """Get a plugin by name."""
        pass

    @abstractmethod
    def list_plugins(self) -> List[Dict[str, Any]]:
        """List all registered plugins with their details."""
        pass
