"""
Approval gate: suspends a tool call until it is approved or declined.

    Idle ──(approval not required)──────────────────────────▶ Proceed
    Idle ──▶ ApprovalRequired ──(suspend)──▶ AwaitingResume
    AwaitingResume ──(approved)──▶ Proceed
    AwaitingResume ──(declined)──▶ Rejected

While awaiting resume, the pending request is recorded in the metadata of
the assistant message that carries the tool call so a client reloading the
thread can still render it.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import ValidationError

from ..adapters.stream import ApprovalPayload, ToolCallApprovalChunk
from ..domain.messages import Message, PendingApproval
from ..domain.models import (
    ApprovalRequestPayload,
    ApprovalResume,
    StepSuspended,
    SuspendCheckpoint,
    ToolCallRequest,
)
from ..domain.tools import ToolDefinition
from ..logging import get_logger
from .context import StepContext
from .persistence import flush_messages_before_suspension, flush_metadata_change

logger = get_logger(__name__)


class ApprovalState(str, Enum):
    IDLE = "idle"
    APPROVAL_REQUIRED = "approval_required"
    AWAITING_RESUME = "awaiting_resume"
    APPROVED = "approved"
    DECLINED = "declined"


def approval_required(context: StepContext, tool: ToolDefinition) -> bool:
    return bool(context.require_tool_approval or tool.require_approval)


def _last_assistant_message(messages: list[Message]) -> Message | None:
    return next((message for message in reversed(messages) if message.role == "assistant"), None)


def add_tool_approval_metadata(context: StepContext, request: ToolCallRequest) -> Message | None:
    message = _last_assistant_message(context.message_list.response_messages())
    if message is None:
        logger.warning(
            "approval_metadata_target_missing", tool_call_id=request.tool_call_id
        )
        return None
    message.add_pending_approval(
        request.tool_call_id,
        PendingApproval(
            tool_name=request.tool_name,
            args=dict(request.args),
            run_id=context.run_id,
        ),
    )
    return message


def remove_tool_approval_metadata(context: StepContext, tool_call_id: str) -> Message | None:
    # Persistence may have happened since suspension, so look at every message.
    for message in reversed(context.message_list.all_messages()):
        if message.remove_pending_approval(tool_call_id):
            return message
    return None


def parse_approval(resume_data: Any) -> bool:
    if isinstance(resume_data, bool):
        return resume_data
    try:
        return ApprovalResume.model_validate(resume_data).approved
    except ValidationError:
        logger.warning("approval_resume_data_invalid", resume_data=repr(resume_data))
        return False


async def request_approval(context: StepContext, request: ToolCallRequest) -> StepSuspended:
    """Emit the approval event, record the pending approval and suspend."""
    logger.info("tool_call_approval_required", state=ApprovalState.APPROVAL_REQUIRED.value)
    payload = ApprovalRequestPayload(
        tool_call_id=request.tool_call_id,
        tool_name=request.tool_name,
        args=dict(request.args),
    )
    context.writer.write(
        ToolCallApprovalChunk(
            runId=context.run_id,
            payload=ApprovalPayload(
                toolCallId=request.tool_call_id,
                toolName=request.tool_name,
                args=dict(request.args),
            ),
        )
    )

    async with context.persistence.lock:
        add_tool_approval_metadata(context, request)
        await flush_messages_before_suspension(context)

    logger.info("tool_call_suspended", state=ApprovalState.AWAITING_RESUME.value)
    return StepSuspended(
        checkpoint=SuspendCheckpoint(
            require_tool_approval=payload,
            stream_state=context.stream_state.serialize(),
        ),
        resume_label=request.tool_call_id,
    )


async def resolve_approval(
    context: StepContext, request: ToolCallRequest, resume_data: Any
) -> bool:
    """Clear the pending approval and report whether the call may proceed."""
    async with context.persistence.lock:
        if remove_tool_approval_metadata(context, request.tool_call_id) is not None:
            await flush_metadata_change(context)

    approved = parse_approval(resume_data)
    state = ApprovalState.APPROVED if approved else ApprovalState.DECLINED
    logger.info("tool_call_approval_resolved", state=state.value)
    return approved
