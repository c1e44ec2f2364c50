"""
Tool execution callbacks for the Onchain Agent system.

The CallbackManager fans lifecycle events out to registered observers and
wraps tools so that every invocation reports STARTED, IN_PROCESS,
COMPLETED and FAILED events. Telemetry never changes what the caller of
a wrapped tool sees: the return value and any raised error are passed
through untouched.
"""

import asyncio
import inspect
import json
import logging
import time
import uuid
from typing import Any, Dict, List, Optional, Type, Union

from pydantic import BaseModel

from onchain_agent.domains.errors import ObserverNotificationError
from onchain_agent.domains.execution import (
    ToolExecutionData,
    ToolExecutionState,
    ToolProgress,
    now_ms,
)
from onchain_agent.interfaces.plugins.plugins import ProgressSink, Tool, noop_progress
from onchain_agent.interfaces.services.callbacks import (
    CallbackLike,
    ToolExecutionCallback,
)

# Setup logger for this module
logger = logging.getLogger(__name__)


class CallbackManager:
    """Holds tool execution observers and notifies them of events."""

    def __init__(self, callbacks: Optional[List[CallbackLike]] = None):
        self._callbacks: List[CallbackLike] = []
        for callback in callbacks or []:
            self.register(callback)

    @property
    def callbacks(self) -> List[CallbackLike]:
        return list(self._callbacks)

    def register(self, callback: CallbackLike) -> None:
        """Register an observer. Registering the same observer twice is a no-op."""
        if not isinstance(callback, ToolExecutionCallback) and not callable(callback):
            raise TypeError(
                "Callback must implement on_tool_execution or be callable"
            )
        if any(existing is callback for existing in self._callbacks):
            return
        self._callbacks.append(callback)

    def unregister(self, callback: CallbackLike) -> None:
        """Remove an observer; unknown observers are ignored."""
        self._callbacks = [cb for cb in self._callbacks if cb is not callback]

    async def _notify_one(self, callback: CallbackLike, data: ToolExecutionData) -> None:
        try:
            if isinstance(callback, ToolExecutionCallback):
                result = callback.on_tool_execution(data)
            else:
                result = callback(data)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            error = ObserverNotificationError(callback, data.state.value, e)
            logger.error(f"Error in tool execution callback: {error}", exc_info=e)

    async def notify_all(self, data: ToolExecutionData) -> None:
        """Deliver an event to every observer concurrently and wait for all."""
        # Snapshot so observers can (un)register while being notified
        callbacks = list(self._callbacks)
        if not callbacks:
            return
        await asyncio.gather(*(self._notify_one(cb, data) for cb in callbacks))

    def wrap_tool(self, tool: Tool) -> "WrappedTool":
        """Wrap a tool so its invocations report lifecycle events."""
        if isinstance(tool, WrappedTool) and tool.manager is self:
            return tool
        return WrappedTool(tool, self)


def _parse_output(output: Any) -> Any:
    """Best-effort JSON decoding of a tool result, for event payloads only."""
    if not isinstance(output, (str, bytes, bytearray)):
        return output
    try:
        return json.loads(output)
    except (TypeError, ValueError, RecursionError) as e:
        logger.debug(f"Tool output is not JSON, reporting raw output: {e}")
        return output


class WrappedTool(Tool):
    """A tool whose invocations are reported to a CallbackManager."""

    def __init__(self, tool: Tool, manager: CallbackManager):
        self.tool = tool
        self.manager = manager

    @property
    def name(self) -> str:
        return self.tool.name

    @property
    def description(self) -> str:
        return self.tool.description

    @property
    def schema(self) -> Type[BaseModel]:
        return self.tool.schema

    def get_schema(self) -> Dict[str, Any]:
        return self.tool.get_schema()

    def _event(
        self,
        execution_id: str,
        input: Any,
        state: ToolExecutionState,
        message: str,
        **fields: Any,
    ) -> ToolExecutionData:
        return ToolExecutionData(
            id=execution_id,
            tool_name=self.name,
            input=input,
            state=state,
            message=message,
            timestamp=now_ms(),
            **fields,
        )

    async def invoke(
        self,
        input: Union[BaseModel, Dict[str, Any]],
        progress: ProgressSink = noop_progress,
    ) -> Any:
        execution_id = str(uuid.uuid4())
        tool_name = self.name
        finished = False
        started = time.monotonic()

        await self.manager.notify_all(
            self._event(
                execution_id,
                input,
                ToolExecutionState.STARTED,
                f"Tool {tool_name} execution started",
            )
        )

        async def report_progress(update: ToolProgress) -> None:
            if finished:
                logger.warning(
                    f"Dropping progress from {tool_name} ({execution_id}) "
                    "reported after completion"
                )
                return
            message = update.message or f"Tool {tool_name} in progress: {update.progress:g}%"
            await self.manager.notify_all(
                self._event(
                    execution_id,
                    input,
                    ToolExecutionState.IN_PROCESS,
                    message,
                    data=update,
                )
            )
            await progress(update)

        try:
            output = await self.tool.invoke(input, report_progress)
        except (Exception, asyncio.CancelledError) as error:
            finished = True
            elapsed_ms = (time.monotonic() - started) * 1000
            await self.manager.notify_all(
                self._event(
                    execution_id,
                    input,
                    ToolExecutionState.FAILED,
                    f"Tool {tool_name} execution failed",
                    error=error,
                    execution_time_ms=elapsed_ms,
                )
            )
            raise

        finished = True
        elapsed_ms = (time.monotonic() - started) * 1000
        await self.manager.notify_all(
            self._event(
                execution_id,
                input,
                ToolExecutionState.COMPLETED,
                f"Tool {tool_name} execution completed successfully",
                data=_parse_output(output),
                execution_time_ms=elapsed_ms,
            )
        )
        return output
