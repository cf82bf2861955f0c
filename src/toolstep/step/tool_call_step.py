"""
Tool-call step: fulfils one requested tool call.

Flow: provider-executed short-circuit → tool resolution → input-available
hook → passive pass-through → approval gate → execution. The step returns a
``ToolCallOutput`` (result or error), the unchanged request for passive
tools, or ``StepSuspended`` when it must wait for resume input.
"""

from __future__ import annotations

from typing import Any

from structlog.contextvars import bound_contextvars

from ..domain.models import (
    NOT_APPROVED_RESULT,
    StepSuspended,
    SuspendCheckpoint,
    SuspendKind,
    ToolCallError,
    ToolCallOutput,
    ToolCallRequest,
)
from ..domain.tools import SuspendRequest, ToolDefinition, ToolRegistry
from ..logging import get_logger
from .approval import approval_required, request_approval, resolve_approval
from .context import StepContext
from .executor import ToolCallExecutor
from .resolver import resolve_tool, tool_not_found_result

logger = get_logger(__name__)

StepResult = ToolCallRequest | StepSuspended


class ToolCallStep:
    def __init__(self, *, tools: ToolRegistry | None, context: StepContext) -> None:
        self.tools = tools or {}
        self.context = context
        self.executor = ToolCallExecutor(context)

    async def run(
        self,
        request: ToolCallRequest,
        *,
        resume_data: Any = None,
        checkpoint: SuspendCheckpoint | None = None,
    ) -> StepResult:
        with bound_contextvars(
            run_id=self.context.run_id,
            tool_call_id=request.tool_call_id,
            tool_name=request.tool_name,
        ):
            return await self._run(request, resume_data, checkpoint)

    async def _run(
        self,
        request: ToolCallRequest,
        resume_data: Any,
        checkpoint: SuspendCheckpoint | None,
    ) -> StepResult:
        if request.provider_executed:
            self.executor.record_provider_executed(request)
            return ToolCallOutput.from_request(request, result=request.output)

        tool = resolve_tool(self.tools, request.tool_name)
        if tool is None:
            logger.warning("tool_not_found")
            return ToolCallOutput.from_request(
                request, result=tool_not_found_result(request.tool_name)
            )

        await self.executor.notify_input_available(tool, request)

        if tool.is_passive:
            return request

        resume_kind = self._resume_kind(tool, resume_data, checkpoint)
        span = self.executor.start_span(request)
        try:
            if resume_kind == "approval":
                # An approval checkpoint is answered whatever the current policy is.
                if not await resolve_approval(self.context, request, resume_data):
                    self.executor.record_success(span, NOT_APPROVED_RESULT)
                    return ToolCallOutput.from_request(request, result=NOT_APPROVED_RESULT)
            elif resume_kind is None and approval_required(self.context, tool):
                suspended = await request_approval(self.context, request)
                self.executor.record_suspended(span, "approval")
                return suspended

            result = await self.executor.invoke(tool, request, resume_data)
            if isinstance(result, SuspendRequest):
                suspended = await self.executor.suspend(request, result)
                self.executor.record_suspended(span, "tool")
                return suspended

            self.executor.record_success(span, result)
            return ToolCallOutput.from_request(request, result=result)
        except Exception as exc:
            logger.warning("tool_call_failed", error=str(exc), exc_info=True)
            self.executor.record_failure(span, exc)
            return ToolCallOutput.from_request(
                request, error=ToolCallError.from_exception(exc)
            )

    def _resume_kind(
        self,
        tool: ToolDefinition,
        resume_data: Any,
        checkpoint: SuspendCheckpoint | None,
    ) -> SuspendKind | None:
        if checkpoint is not None:
            return checkpoint.kind
        if resume_data is None:
            return None
        return "approval" if approval_required(self.context, tool) else "tool"
