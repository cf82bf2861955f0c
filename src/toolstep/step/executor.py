"""
Suspendable executor: runs a tool's execute routine inside a telemetry span.

A tool pauses itself by returning ``options.suspend(payload)``; the executor
turns that value into a checkpoint labelled with the tool call id.
"""

from __future__ import annotations

import asyncio
import contextlib
import inspect
from collections.abc import Awaitable
from typing import Any

from opentelemetry.trace import Status, StatusCode

from ..adapters.stream import SuspendedPayload, ToolCallSuspendedChunk
from ..domain.models import StepSuspended, SuspendCheckpoint, ToolCallRequest
from ..domain.tools import InputAvailable, SuspendRequest, ToolDefinition, ToolExecutionOptions
from ..errors import ToolAbortedError
from ..logging import get_logger
from ..ports import SpanPort
from ..telemetry import TOOL_CALL_OPERATION, assemble_operation_name, get_tracer, to_attribute
from .context import StepContext
from .persistence import flush_messages_before_suspension

logger = get_logger(__name__)

ATTR_TOOL_NAME = "toolstep.tool_call.tool_name"
ATTR_TOOL_CALL_ID = "toolstep.tool_call.tool_call_id"
ATTR_ARGS = "toolstep.tool_call.args"
ATTR_RESULT = "toolstep.tool_call.result"
ATTR_PROVIDER_EXECUTED = "toolstep.tool_call.provider_executed"
ATTR_SUSPENDED = "toolstep.tool_call.suspended"


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


async def _run_until_aborted(
    awaitable: Awaitable[Any],
    abort_signal: asyncio.Event,
    request: ToolCallRequest,
) -> Any:
    task = asyncio.ensure_future(awaitable)
    aborted = asyncio.ensure_future(abort_signal.wait())
    try:
        await asyncio.wait({task, aborted}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        # The caller went away; the tool must not outlive it.
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        raise
    finally:
        aborted.cancel()
    if task.done():
        return task.result()

    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await task
    raise ToolAbortedError(request.tool_name, request.tool_call_id)


class ToolCallExecutor:
    def __init__(self, context: StepContext) -> None:
        self.context = context

    def start_span(self, request: ToolCallRequest) -> SpanPort:
        telemetry = self.context.telemetry
        tracer = get_tracer(is_enabled=telemetry.is_enabled, tracer=telemetry.tracer)
        span = tracer.start_span(TOOL_CALL_OPERATION)
        span.set_attributes(
            {
                **assemble_operation_name(
                    operation_id=TOOL_CALL_OPERATION,
                    function_id=telemetry.function_id,
                ),
                ATTR_TOOL_NAME: request.tool_name,
                ATTR_TOOL_CALL_ID: request.tool_call_id,
                ATTR_ARGS: to_attribute(request.args),
            }
        )
        return span

    def record_provider_executed(self, request: ToolCallRequest) -> None:
        span = self.start_span(request)
        span.set_attributes({ATTR_PROVIDER_EXECUTED: True})
        if request.output is not None:
            span.set_attributes({ATTR_RESULT: to_attribute(request.output)})
        span.end()

    @staticmethod
    def record_success(span: SpanPort, result: Any) -> None:
        span.set_attributes({ATTR_RESULT: to_attribute(result)})
        span.end()

    @staticmethod
    def record_suspended(span: SpanPort, kind: str) -> None:
        span.set_attributes({ATTR_SUSPENDED: kind})
        span.end()

    @staticmethod
    def record_failure(span: SpanPort, exc: BaseException) -> None:
        span.set_status(Status(StatusCode.ERROR, str(exc)))
        span.record_exception(exc)
        span.end()

    async def notify_input_available(
        self, tool: ToolDefinition, request: ToolCallRequest
    ) -> None:
        if tool.on_input_available is None:
            return
        try:
            await _maybe_await(
                tool.on_input_available(
                    InputAvailable(
                        tool_call_id=request.tool_call_id,
                        input=dict(request.args),
                        messages=self.context.message_list.input_model_messages(),
                        abort_signal=self.context.abort_signal,
                    )
                )
            )
        except Exception:
            logger.exception("on_input_available_failed")

    async def invoke(
        self, tool: ToolDefinition, request: ToolCallRequest, resume_data: Any = None
    ) -> Any:
        """Call ``tool.execute``; returns its result or a SuspendRequest."""
        options = ToolExecutionOptions(
            tool_call_id=request.tool_call_id,
            messages=self.context.message_list.input_model_messages(),
            abort_signal=self.context.abort_signal,
            writer=self.context.writer,
            tracing_context=self.context.tracing_context,
            resume_data=resume_data,
        )
        abort_signal = self.context.abort_signal
        if abort_signal is not None and abort_signal.is_set():
            raise ToolAbortedError(request.tool_name, request.tool_call_id)

        outcome = tool.execute(dict(request.args), options)
        if not inspect.isawaitable(outcome):
            return outcome
        if abort_signal is None:
            return await outcome
        return await _run_until_aborted(outcome, abort_signal, request)

    async def suspend(
        self, request: ToolCallRequest, suspend_request: SuspendRequest
    ) -> StepSuspended:
        context = self.context
        context.writer.write(
            ToolCallSuspendedChunk(
                runId=context.run_id,
                payload=SuspendedPayload(
                    toolCallId=request.tool_call_id,
                    toolName=request.tool_name,
                    suspendPayload=suspend_request.payload,
                ),
            )
        )
        async with context.persistence.lock:
            await flush_messages_before_suspension(context)

        logger.info("tool_call_suspended_by_tool")
        return StepSuspended(
            checkpoint=SuspendCheckpoint(
                tool_call_suspended=suspend_request.payload,
                stream_state=context.stream_state.serialize(),
            ),
            resume_label=request.tool_call_id,
        )
