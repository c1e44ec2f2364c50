"""
Tool execution domain models.

These models carry the lifecycle telemetry emitted while a tool runs.
Records are ephemeral: they are delivered to observers and dropped.
"""
import time
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class ToolExecutionState(str, Enum):
    """Lifecycle state of a single tool invocation."""
    STARTED = "started"
    IN_PROCESS = "in_process"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (ToolExecutionState.COMPLETED, ToolExecutionState.FAILED)


class ToolProgress(BaseModel):
    """Progress report emitted by a running tool."""
    progress: float = Field(0, ge=0, le=100, description="Percent complete")
    message: Optional[str] = None
    data: Optional[Any] = None


class ToolExecutionData(BaseModel):
    """Event delivered to tool execution callbacks."""

    model_config = {"arbitrary_types_allowed": True}

    id: str = Field(..., description="Execution id shared by all events of one invocation")
    tool_name: str
    input: Any = None
    state: ToolExecutionState
    message: str
    timestamp: int = Field(..., description="Epoch milliseconds")
    data: Optional[Any] = None
    error: Optional[BaseException] = None
    execution_time_ms: Optional[float] = Field(
        None, ge=0, description="Only set on COMPLETED and FAILED events"
    )


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)
