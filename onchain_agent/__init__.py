"""
Onchain Agent - A pluggable toolkit for running blockchain tools by intent.

This package provides plugins backed by network-aware provider registries,
tool execution telemetry through callbacks, and a layered settings store.
"""

# Client interface (main entry point)
from onchain_agent.client.onchain_agent import OnchainAgent

# Factory for creating agent systems
from onchain_agent.factories.agent_factory import OnchainAgentFactory

# Core services
from onchain_agent.services.agent import Agent
from onchain_agent.services.callbacks import CallbackManager, WrappedTool
from onchain_agent.services.settings import (
    Settings,
    SettingsOptions,
    get_settings,
    reset_settings,
)

# Plugins, tools and providers
from onchain_agent.plugins.base import BasePlugin, PluginConfig
from onchain_agent.plugins.manager import PluginManager
from onchain_agent.plugins.registry import ProviderRegistry
from onchain_agent.plugins.tools.base_tool import BaseTool
from onchain_agent.interfaces.plugins.plugins import Plugin, Tool, noop_progress
from onchain_agent.interfaces.providers.network import NetworkProvider
from onchain_agent.interfaces.services.callbacks import ToolExecutionCallback

# Domain types and errors
from onchain_agent.domains.execution import (
    ToolExecutionData,
    ToolExecutionState,
    ToolProgress,
)
from onchain_agent.domains.errors import (
    MissingConfigError,
    NoProviderAvailableError,
    ObserverNotificationError,
    OnchainAgentError,
    ProviderNotFoundError,
    ToolNotFoundError,
)

# Package metadata
__all__ = [
    # Main client interfaces
    "OnchainAgent",
    # Factories
    "OnchainAgentFactory",
    # Services
    "Agent",
    "CallbackManager",
    "WrappedTool",
    "Settings",
    "SettingsOptions",
    "get_settings",
    "reset_settings",
    # Plugins
    "BasePlugin",
    "PluginConfig",
    "PluginManager",
    "ProviderRegistry",
    "BaseTool",
    "Plugin",
    "Tool",
    "noop_progress",
    "NetworkProvider",
    "ToolExecutionCallback",
    # Domain
    "ToolExecutionData",
    "ToolExecutionState",
    "ToolProgress",
    "MissingConfigError",
    "NoProviderAvailableError",
    "ObserverNotificationError",
    "OnchainAgentError",
    "ProviderNotFoundError",
    "ToolNotFoundError",
]
