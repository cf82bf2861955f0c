"""
FastAPI application hosting the tool-call step with suspend/resume.
"""

from __future__ import annotations

import asyncio
import uuid
from collections import defaultdict
from collections.abc import AsyncIterator
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse
from pydantic import Field
from structlog.contextvars import bound_contextvars

from .adapters.stream import (
    CollectingWriter,
    DoneStreamChunk,
    ErrorObj,
    ErrorStreamChunk,
    StepSuspendedChunk,
    ToolResultChunk,
    encode_chunk,
    encode_done,
)
from .domain.messages import Message, WireModel
from .domain.models import (
    PendingCheckpoint,
    StepSuspended,
    ToolCallOutput,
    ToolCallRequest,
)
from .logging import configure_logging, get_logger
from .settings import get_settings
from .step import PersistenceContext, StepContext, StreamState, TelemetrySettings, ToolCallStep
from .step.tool_call_step import StepResult
from .store import InMemoryMemory, InMemoryMessageList, SaveQueueManager, get_run_store
from .tools import build_tools

settings = get_settings()
configure_logging()
logger = get_logger(__name__)

app = FastAPI(
    title="toolstep",
    description="Tool-call execution step with approval and suspend/resume",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# In-process storage; swap via settings when a durable backend exists.
store = get_run_store()
memory = InMemoryMemory()
save_queue = SaveQueueManager(memory)
# Metadata edits on one thread are serialised across requests.
thread_locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)


class ToolCallBody(WireModel):
    run_id: str | None = None
    thread_id: str | None = None
    resource_id: str = "default"
    tool_call: ToolCallRequest
    messages: list[Message] = Field(default_factory=list)
    require_tool_approval: bool | None = None
    stream_state: dict[str, Any] = Field(default_factory=dict)


class ContinuationBody(WireModel):
    run_id: str
    tool_call_id: str
    resume_data: Any = None
    resource_id: str = "default"
    require_tool_approval: bool | None = None


def _sse_headers() -> dict[str, str]:
    """Standard SSE response headers."""
    return {
        "Content-Type": "text/event-stream",
        "Cache-Control": "no-cache",
        "Connection": "keep-alive",
    }


async def _load_message_list(thread_id: str) -> InMemoryMessageList:
    return InMemoryMessageList(await memory.recall(thread_id), source="memory")


def _build_step(
    *,
    run_id: str,
    thread_id: str,
    resource_id: str,
    message_list: InMemoryMessageList,
    writer: CollectingWriter,
    stream_state: StreamState,
    require_tool_approval: bool | None,
) -> ToolCallStep:
    context = StepContext(
        run_id=run_id,
        message_list=message_list,
        writer=writer,
        stream_state=stream_state,
        persistence=PersistenceContext(
            save_queue=save_queue,
            memory=memory,
            thread_id=thread_id,
            resource_id=resource_id,
            lock=thread_locks[thread_id],
        ),
        telemetry=TelemetrySettings(
            is_enabled=settings.telemetry_enabled,
            function_id=settings.telemetry_function_id,
        ),
        require_tool_approval=(
            settings.require_tool_approval
            if require_tool_approval is None
            else require_tool_approval
        ),
    )
    return ToolCallStep(tools=build_tools(run_id), context=context)


def _record_outcome(run_id: str, request: ToolCallRequest, outcome: StepResult) -> None:
    if not isinstance(outcome, StepSuspended):
        return
    pending = PendingCheckpoint(
        kind=outcome.checkpoint.kind,
        request=request,
        checkpoint=outcome.checkpoint,
    )
    if pending.kind == "approval":
        store.add_pending_approval(run_id, pending)
    else:
        store.add_pending_suspension(run_id, pending)


async def _encode_outcome(
    run_id: str, writer: CollectingWriter, outcome: StepResult
) -> AsyncIterator[bytes]:
    for chunk in writer.chunks:
        yield encode_chunk(chunk).encode("utf-8")

    if isinstance(outcome, StepSuspended):
        yield encode_chunk(
            StepSuspendedChunk(
                runId=run_id,
                resumeLabel=outcome.resume_label,
                payload=outcome.checkpoint.to_wire(),
            )
        ).encode("utf-8")
        finish_reason = "suspended"
    else:
        yield encode_chunk(
            ToolResultChunk(runId=run_id, payload=outcome.to_wire())
        ).encode("utf-8")
        if not isinstance(outcome, ToolCallOutput):
            # Passive tool: the caller fulfils it.
            finish_reason = "tool-calls"
        elif outcome.failed:
            yield encode_chunk(
                ErrorStreamChunk(
                    runId=run_id,
                    error=ErrorObj(message=outcome.error.message, code=outcome.error.name),
                )
            ).encode("utf-8")
            finish_reason = "error"
        else:
            finish_reason = "stop"

    yield encode_chunk(DoneStreamChunk(runId=run_id, finishReason=finish_reason)).encode(
        "utf-8"
    )
    yield encode_done().encode("utf-8")


@app.post("/api/tool-calls")
async def run_tool_call(body: ToolCallBody) -> StreamingResponse:
    run_id = body.run_id or uuid.uuid4().hex
    thread_id = body.thread_id or run_id
    store.set_thread_id(run_id, thread_id)

    async def stream() -> AsyncIterator[bytes]:
        with bound_contextvars(run_id=run_id):
            message_list = await _load_message_list(thread_id)
            for message in body.messages:
                message_list.add(message, "response")

            writer = CollectingWriter()
            step = _build_step(
                run_id=run_id,
                thread_id=thread_id,
                resource_id=body.resource_id,
                message_list=message_list,
                writer=writer,
                stream_state=StreamState.deserialize(body.stream_state),
                require_tool_approval=body.require_tool_approval,
            )
            outcome = await step.run(body.tool_call)
            _record_outcome(run_id, body.tool_call, outcome)
            async for data in _encode_outcome(run_id, writer, outcome):
                yield data

    return StreamingResponse(stream(), headers=_sse_headers())


@app.post("/api/continuation")
async def continuation(body: ContinuationBody) -> StreamingResponse:
    pending = store.pop_pending(body.run_id, body.tool_call_id)
    if pending is None:
        raise HTTPException(status_code=404, detail="No pending tool call to resume")
    state = store.get_or_create(body.run_id)
    thread_id = state.thread_id or body.run_id

    async def stream() -> AsyncIterator[bytes]:
        with bound_contextvars(run_id=body.run_id):
            writer = CollectingWriter()
            step = _build_step(
                run_id=body.run_id,
                thread_id=thread_id,
                resource_id=body.resource_id,
                message_list=await _load_message_list(thread_id),
                writer=writer,
                stream_state=StreamState.deserialize(pending.checkpoint.stream_state),
                require_tool_approval=body.require_tool_approval,
            )
            outcome = await step.run(
                pending.request,
                resume_data=body.resume_data,
                checkpoint=pending.checkpoint,
            )
            _record_outcome(body.run_id, pending.request, outcome)
            async for data in _encode_outcome(body.run_id, writer, outcome):
                yield data

    return StreamingResponse(stream(), headers=_sse_headers())


@app.get("/api/runs/{run_id}/pending")
async def list_pending(run_id: str) -> dict:
    return {
        "runId": run_id,
        "pending": [
            {
                "kind": pending.kind,
                "toolCall": pending.request.to_wire(),
                "checkpoint": pending.checkpoint.to_wire(),
                "createdAt": pending.created_at.isoformat(),
            }
            for pending in store.list_pending(run_id)
        ],
    }


@app.get("/api/threads/{thread_id}/messages")
async def thread_messages(thread_id: str) -> dict:
    messages = await memory.recall(thread_id)
    return {"threadId": thread_id, "messages": [message.to_wire() for message in messages]}


@app.get("/health")
async def health() -> dict:
    """Health check endpoint."""
    return {"status": "ok", "app": settings.app_name}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
