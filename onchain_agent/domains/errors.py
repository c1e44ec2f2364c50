"""
Error taxonomy for the Onchain Agent system.

Configuration and registry errors are raised synchronously to the caller.
Tool errors raised inside a tool pass through the execution wrapper
unchanged; ObserverNotificationError never leaves the callback manager.
"""
import json
import logging
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ErrorStep(str, Enum):
    """Stage of a tool run at which an error occurred."""
    NETWORK_VALIDATION = "network_validation"
    WALLET_ACCESS = "wallet_access"
    PROVIDER_AVAILABILITY = "provider_availability"
    DATA_RETRIEVAL = "data_retrieval"
    TOKEN_NOT_FOUND = "token_not_found"
    PRICE_RETRIEVAL = "price_retrieval"
    PROVIDER_VALIDATION = "provider_validation"
    INITIALIZATION = "initialization"
    EXECUTION = "execution"
    TOOL_EXECUTION = "tool_execution"
    UNKNOWN = "unknown"


class StructuredError(BaseModel):
    """Machine-readable description of a tool failure."""
    step: ErrorStep = ErrorStep.UNKNOWN
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class OnchainAgentError(Exception):
    """Base class for errors raised by the toolkit itself."""


class MissingConfigError(OnchainAgentError, KeyError):
    """A required configuration key is not set."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f'Required configuration key "{key}" is not set')

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class ProviderNotFoundError(OnchainAgentError, LookupError):
    """No provider is registered under the requested name."""

    def __init__(self, name: str, available: Optional[list] = None):
        self.name = name
        self.available = list(available or [])
        message = f"Provider {name} not found"
        if self.available:
            message += f". Available providers: {', '.join(self.available)}"
        super().__init__(message)


class NoProviderAvailableError(OnchainAgentError):
    """A network has zero effective providers at the time a tool needs one."""

    def __init__(self, network: str, plugin: Optional[str] = None):
        self.network = network
        self.plugin = plugin
        scope = f" in plugin {plugin}" if plugin else ""
        super().__init__(f"No providers available for network {network}{scope}")


class ObserverNotificationError(OnchainAgentError):
    """An observer failed while handling a tool execution event."""

    def __init__(self, observer: Any, event_state: str, cause: BaseException):
        self.observer = observer
        self.event_state = event_state
        self.cause = cause
        super().__init__(
            f"Callback {observer!r} failed on {event_state} event: {cause}"
        )


class ToolNotFoundError(OnchainAgentError, LookupError):
    """No tool is registered under the requested name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Tool {name} not found")


class NetworkNotSupportedError(OnchainAgentError, ValueError):
    """A network is not part of the configured set."""

    def __init__(self, network: str):
        self.network = network
        super().__init__(f"Network {network} is not supported")


class AgentConfigurationError(OnchainAgentError):
    """The agent is missing a collaborator required for an operation."""


class ToolExecutionError(OnchainAgentError):
    """A tool could not complete; carries a structured description."""

    def __init__(
        self,
        step: ErrorStep,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.structured = StructuredError(
            step=step, message=message, details=details or {}
        )
        super().__init__(message)

    @property
    def step(self) -> ErrorStep:
        return self.structured.step


def to_structured_error(error: Any) -> StructuredError:
    """Normalize any raised value into a StructuredError."""
    if isinstance(error, ToolExecutionError):
        return error.structured
    if isinstance(error, StructuredError):
        return error
    if isinstance(error, BaseException):
        return StructuredError(
            step=ErrorStep.EXECUTION,
            message=str(error),
            details={"error": str(error), "type": type(error).__name__},
        )
    return StructuredError(
        step=ErrorStep.UNKNOWN, message=str(error), details={"error": str(error)}
    )


def log_structured_error(
    logger: logging.Logger, source: str, error: Any, level: int = logging.ERROR
) -> StructuredError:
    """Log an error as a single JSON line and return its structured form."""
    structured = to_structured_error(error)
    logger.log(level, f"{source}: {json.dumps(structured.model_dump(mode='json'))}")
    return structured
