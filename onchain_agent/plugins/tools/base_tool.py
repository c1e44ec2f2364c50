"""
BaseTool implementation for the Onchain Agent system.

This module provides the base class for tools backed by a plugin's
provider registry. Subclasses declare an input model and implement run().
"""
import logging
from typing import Any, Dict, List, Optional, Type, Union

from pydantic import BaseModel

from onchain_agent.domains.errors import NoProviderAvailableError
from onchain_agent.interfaces.plugins.plugins import ProgressSink, Tool, noop_progress
from onchain_agent.interfaces.providers.network import NetworkProvider
from onchain_agent.plugins.registry import ProviderRegistry

logger = logging.getLogger(__name__)


class BaseTool(Tool):
    """Base class for tools that resolve providers through a registry."""

    input_model: Type[BaseModel] = BaseModel

    def __init__(
        self,
        name: str,
        description: str,
        registry: Optional[ProviderRegistry] = None,
        default_network: Optional[str] = None,
        plugin_name: Optional[str] = None,
    ):
        """Initialize the tool with name, description and provider registry."""
        self._name = name
        self._description = description
        self.registry = registry or ProviderRegistry()
        self.default_network = default_network
        self.plugin_name = plugin_name

    @property
    def name(self) -> str:
        """Get the name of the tool."""
        return self._name

    @property
    def description(self) -> str:
        """Get the description, followed by any provider-specific guidance."""
        prompts = self.provider_prompts()
        if not prompts:
            return self._description
        return (
            self._description
            + "\n\nProvider-specific information:\n"
            + "\n".join(prompts)
        )

    @property
    def schema(self) -> Type[BaseModel]:
        return self.input_model

    def provider_prompts(self) -> List[str]:
        prompts = []
        for provider in self.registry.get_all_providers():
            prompt = provider.get_prompt()
            if prompt:
                prompts.append(f"{provider.get_name()}: {prompt}")
        return prompts

    def require_providers(self, network: str) -> List[NetworkProvider]:
        """Get the candidate providers for a network, failing when there are none.

        Raises:
            NoProviderAvailableError: if no registered provider serves the network
        """
        providers = self.registry.get_providers_for_network(network)
        if not providers:
            raise NoProviderAvailableError(network, plugin=self.plugin_name)
        return providers

    def resolve_network(self, network: Optional[str]) -> Optional[str]:
        """Use the requested network, falling back to the plugin default."""
        return network or self.default_network

    def validate_input(self, input: Union[BaseModel, Dict[str, Any]]) -> BaseModel:
        if isinstance(input, self.input_model):
            return input
        if isinstance(input, BaseModel):
            input = input.model_dump()
        return self.input_model.model_validate(input or {})

    async def invoke(
        self,
        input: Union[BaseModel, Dict[str, Any]],
        progress: ProgressSink = noop_progress,
    ) -> Any:
        """Validate the input and run the tool."""
        args = self.validate_input(input)
        logger.debug(f"Running tool {self.name} with {args!r}")
        return await self.run(args, progress)

    async def run(self, args: BaseModel, progress: ProgressSink) -> Any:
        """Execute the tool with validated arguments."""
        # Override in subclasses
        raise NotImplementedError("Tool must implement run method")
