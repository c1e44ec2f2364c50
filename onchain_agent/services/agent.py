"""
Agent service implementation.

This service holds the tools exposed by registered plugins, routes
natural-language requests to one of them through the LLM provider, and
executes tools through the callback manager so every run is reported.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from onchain_agent.domains.errors import AgentConfigurationError, ToolNotFoundError
from onchain_agent.interfaces.plugins.plugins import (
    Plugin,
    ProgressSink,
    Tool,
    noop_progress,
)
from onchain_agent.interfaces.providers.llm import LLMProvider
from onchain_agent.interfaces.services.callbacks import CallbackLike
from onchain_agent.services.callbacks import CallbackManager, WrappedTool
from onchain_agent.services.networks import NetworkService
from onchain_agent.services.settings import Settings

# Setup logger for this module
logger = logging.getLogger(__name__)

NO_TOOL = "none"


class ToolCall(BaseModel):
    """Tool selection returned by the LLM."""

    model_config = {"extra": "forbid"}

    tool_name: str = Field(
        ..., description=f"Name of the tool to call, or '{NO_TOOL}' to answer directly"
    )
    arguments: str = Field(..., description="JSON object with the tool arguments")


class Agent:
    """Orchestrates plugins, tools and tool execution callbacks."""

    def __init__(
        self,
        llm_provider: Optional[LLMProvider] = None,
        callback_manager: Optional[CallbackManager] = None,
        settings: Optional[Settings] = None,
        network_service: Optional[NetworkService] = None,
        model: Optional[str] = None,
    ):
        """Initialize the agent.

        Args:
            llm_provider: Provider used to turn messages into tool calls
            callback_manager: Manager notified of tool lifecycle events
            settings: Configuration store shared with plugins
            network_service: Networks the agent may operate on
            model: Optional model override passed to the LLM provider
        """
        self.llm_provider = llm_provider
        self.callback_manager = callback_manager or CallbackManager()
        self.settings = settings
        self.network_service = network_service
        self.model = model
        self._plugins: Dict[str, Plugin] = {}
        self._tools: Dict[str, WrappedTool] = {}

    def register_plugin(self, plugin: Plugin) -> None:
        """Expose every tool of an initialized plugin."""
        self._plugins[plugin.name] = plugin
        for tool in plugin.get_tools():
            self.register_tool(tool)
        logger.info(
            f"Registered plugin {plugin.name} with tools: "
            f"{[t.name for t in plugin.get_tools()]}"
        )

    def get_plugin(self, name: str) -> Optional[Plugin]:
        return self._plugins.get(name)

    def get_plugins(self) -> List[Plugin]:
        return list(self._plugins.values())

    def register_tool(self, tool: Tool) -> WrappedTool:
        """Wrap a tool with lifecycle callbacks and expose it by name."""
        if tool.name in self._tools:
            logger.warning(f"Tool {tool.name} is already registered; replacing it")
        wrapped = self.callback_manager.wrap_tool(tool)
        self._tools[tool.name] = wrapped
        return wrapped

    def get_tool(self, name: str) -> WrappedTool:
        """Get a registered tool.

        Raises:
            ToolNotFoundError: if no tool has that name
        """
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFoundError(name)
        return tool

    def get_tools(self) -> List[WrappedTool]:
        return list(self._tools.values())

    def get_tool_schemas(self) -> List[Dict[str, Any]]:
        """Describe every tool for the LLM."""
        return [
            {
                "name": tool.name,
                "description": tool.description,
                "parameters": tool.get_schema(),
            }
            for tool in self._tools.values()
        ]

    def get_networks(self) -> List[str]:
        if self.network_service is not None:
            return self.network_service.get_networks()
        networks = set()
        for plugin in self._plugins.values():
            networks.update(plugin.get_supported_networks())
        return sorted(networks)

    def register_callback(self, callback: CallbackLike) -> None:
        self.callback_manager.register(callback)

    def unregister_callback(self, callback: CallbackLike) -> None:
        self.callback_manager.unregister(callback)

    async def execute_tool(
        self,
        tool_name: str,
        arguments: Union[BaseModel, Dict[str, Any], None] = None,
        progress: ProgressSink = noop_progress,
    ) -> Any:
        """Validate arguments against the tool schema and run the tool.

        Validation errors and tool errors propagate unchanged.
        """
        tool = self.get_tool(tool_name)
        if isinstance(arguments, tool.schema):
            validated = arguments
        else:
            if isinstance(arguments, BaseModel):
                arguments = arguments.model_dump()
            validated = tool.schema.model_validate(arguments or {})
        logger.info(f"Executing tool '{tool_name}' with params: {validated!r}")
        return await tool.invoke(validated, progress)

    def _system_prompt(self) -> str:
        tools = json.dumps(self.get_tool_schemas(), indent=2)
        networks = ", ".join(self.get_networks()) or "none"
        return (
            "You are a blockchain agent that fulfils requests by calling tools.\n"
            f"Available networks: {networks}.\n"
            f"Available tools:\n{tools}\n"
            "Pick the single tool that fulfils the request and provide its "
            "arguments as a JSON object. If no tool applies, use "
            f"'{NO_TOOL}' as the tool name."
        )

    async def select_tool(self, message: str) -> ToolCall:
        """Ask the LLM which tool should handle a message.

        Raises:
            AgentConfigurationError: if no LLM provider is configured
            ToolNotFoundError: if the LLM names a tool that is not registered
        """
        if self.llm_provider is None:
            raise AgentConfigurationError("An LLM provider is required to process messages")
        call = await self.llm_provider.parse_structured_output(
            prompt=message,
            system_prompt=self._system_prompt(),
            model_class=ToolCall,
            model=self.model,
        )
        if call.tool_name != NO_TOOL and call.tool_name not in self._tools:
            logger.warning(f"LLM selected unknown tool '{call.tool_name}'")
            raise ToolNotFoundError(call.tool_name)
        return call

    async def process(
        self, message: str, progress: ProgressSink = noop_progress
    ) -> Any:
        """Resolve a natural-language request to a tool call and run it."""
        call = await self.select_tool(message)
        if call.tool_name == NO_TOOL:
            logger.info("No tool selected; answering directly")
            return await self.llm_provider.generate_text(
                prompt=message,
                system_prompt=self._system_prompt(),
                model=self.model,
            )
        try:
            arguments = json.loads(call.arguments or "{}")
        except ValueError as e:
            raise AgentConfigurationError(
                f"LLM returned invalid arguments for {call.tool_name}: {e}"
            ) from e
        return await self.execute_tool(call.tool_name, arguments, progress)

    async def cleanup(self) -> None:
        for plugin in self._plugins.values():
            await plugin.cleanup()
