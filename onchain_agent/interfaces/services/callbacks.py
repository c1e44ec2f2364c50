from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional, Union

from onchain_agent.domains.execution import ToolExecutionData


class ToolExecutionCallback(ABC):
    """Observer notified on every tool lifecycle event."""

    @abstractmethod
    def on_tool_execution(self, data: ToolExecutionData) -> Optional[Awaitable[None]]:
        """Handle a lifecycle event. May be a coroutine function."""
        pass


CallbackLike = Union[
    ToolExecutionCallback,
    Callable[[ToolExecutionData], Optional[Awaitable[None]]],
]
