"""
Factory for creating and wiring components of the Onchain Agent system.

This module handles the creation and dependency injection for the
settings store, LLM adapter, agent, and plugin manager.
"""

import logging
from typing import Any, Dict, Tuple

from onchain_agent.adapters.openai_adapter import OpenAIAdapter
from onchain_agent.plugins.manager import PluginManager
from onchain_agent.services.agent import Agent
from onchain_agent.services.callbacks import CallbackManager
from onchain_agent.services.networks import NetworkService
from onchain_agent.services.settings import Settings, SettingsOptions

# Setup logger for this module
logger = logging.getLogger(__name__)


class OnchainAgentFactory:
    """Factory for creating and wiring components of the Onchain Agent system."""

    @staticmethod
    def create_settings(config: Dict[str, Any]) -> Settings:
        """Build the configuration store from the 'settings' section."""
        return Settings(SettingsOptions(**config.get("settings", {})))

    @staticmethod
    def create_from_config(config: Dict[str, Any]) -> Tuple[Agent, PluginManager]:
        """Create the agent and its plugin manager from configuration.

        Args:
            config: Configuration dictionary

        Returns:
            The agent and a plugin manager bound to it
        """
        settings = OnchainAgentFactory.create_settings(config)

        llm_adapter = None
        openai_config = config.get("openai", {})
        api_key = openai_config.get("api_key") or settings.get("OPENAI_API_KEY")
        llm_model = openai_config.get("model") or settings.get("OPENAI_MODEL")
        if api_key:
            logfire_key = None
            if "logfire" in config:
                if "api_key" not in config["logfire"]:
                    raise ValueError("Pydantic Logfire API key is required.")
                logfire_key = config["logfire"]["api_key"]
            llm_adapter = OpenAIAdapter(
                api_key=api_key, model=llm_model, logfire_api_key=logfire_key
            )
            logger.info(f"Using OpenAI as LLM provider with model: {llm_adapter.text_model}")
        else:
            logger.warning("No OpenAI API key configured; natural-language routing is disabled")

        network_service = None
        if config.get("networks"):
            network_service = NetworkService(config["networks"])

        agent = Agent(
            llm_provider=llm_adapter,
            callback_manager=CallbackManager(),
            settings=settings,
            network_service=network_service,
            model=llm_model,
        )
        plugin_manager = PluginManager(
            agent=agent,
            config=config.get("plugin_config", {}),
            settings=settings,
        )
        return agent, plugin_manager
