"""
Step event chunks and SSE helpers.
"""

from __future__ import annotations

import json
import time
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

StreamChunkType = Literal[
    "tool-call-approval",
    "tool-call-suspended",
    "tool-output",
    "tool-result",
    "step-suspended",
    "error",
    "done",
]


class ChunkFrom(str, Enum):
    AGENT = "AGENT"
    USER = "USER"
    SYSTEM = "SYSTEM"


class BaseStreamChunk(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: StreamChunkType
    runId: str
    from_: ChunkFrom = Field(default=ChunkFrom.AGENT, alias="from")
    timestamp: int = Field(default_factory=lambda: now_ms())


class ApprovalPayload(BaseModel):
    toolCallId: str
    toolName: str
    args: dict[str, Any]


class ToolCallApprovalChunk(BaseStreamChunk):
    type: Literal["tool-call-approval"] = "tool-call-approval"
    payload: ApprovalPayload


class SuspendedPayload(BaseModel):
    toolCallId: str
    toolName: str
    suspendPayload: Any = None


class ToolCallSuspendedChunk(BaseStreamChunk):
    type: Literal["tool-call-suspended"] = "tool-call-suspended"
    payload: SuspendedPayload


class ToolOutputChunk(BaseStreamChunk):
    """Data written by a tool through its writer while it runs."""

    type: Literal["tool-output"] = "tool-output"
    toolCallId: str
    payload: Any = None


class ToolResultChunk(BaseStreamChunk):
    type: Literal["tool-result"] = "tool-result"
    payload: dict[str, Any]


class StepSuspendedChunk(BaseStreamChunk):
    type: Literal["step-suspended"] = "step-suspended"
    resumeLabel: str
    payload: dict[str, Any]


class ErrorObj(BaseModel):
    message: str
    code: str | None = None


class ErrorStreamChunk(BaseStreamChunk):
    type: Literal["error"] = "error"
    error: ErrorObj


class DoneStreamChunk(BaseStreamChunk):
    type: Literal["done"] = "done"
    finishReason: Literal["stop", "tool-calls", "suspended", "error"]


StreamChunk = (
    ToolCallApprovalChunk
    | ToolCallSuspendedChunk
    | ToolOutputChunk
    | ToolResultChunk
    | StepSuspendedChunk
    | ErrorStreamChunk
    | DoneStreamChunk
)


class CollectingWriter:
    """Event writer that keeps every chunk in order."""

    def __init__(self) -> None:
        self.chunks: list[BaseStreamChunk] = []

    def write(self, event: BaseStreamChunk) -> None:
        self.chunks.append(event)

    def of_type(self, chunk_type: str) -> list[BaseStreamChunk]:
        return [chunk for chunk in self.chunks if chunk.type == chunk_type]


def now_ms() -> int:
    return int(time.time() * 1000)


def encode_chunk(chunk: StreamChunk) -> str:
    payload = json.dumps(chunk.model_dump(mode="json", by_alias=True), ensure_ascii=False)
    return f"data: {payload}\n\n"


def encode_done() -> str:
    return "data: [DONE]\n\n"
