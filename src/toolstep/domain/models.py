"""Domain models for tool-call requests, step outcomes and run state."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

from pydantic import ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from .messages import WireModel

SuspendKind = Literal["approval", "tool"]

NOT_APPROVED_RESULT = "Tool call was not approved by the user"


class ToolCallRequest(WireModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    tool_call_id: str
    tool_name: str
    args: dict[str, Any] = Field(default_factory=dict)
    provider_executed: bool = False
    output: Any = None


class ToolCallError(WireModel):
    name: str
    message: str

    @classmethod
    def from_exception(cls, exc: BaseException) -> ToolCallError:
        return cls(name=type(exc).__name__, message=str(exc))


class ToolCallOutput(ToolCallRequest):
    result: Any = None
    error: ToolCallError | None = None

    @classmethod
    def from_request(cls, request: ToolCallRequest, **kwargs: Any) -> ToolCallOutput:
        data = request.model_dump(include=set(ToolCallRequest.model_fields))
        data.update(kwargs)
        return cls(**data)

    @property
    def failed(self) -> bool:
        return self.error is not None


class ApprovalRequestPayload(WireModel):
    tool_call_id: str
    tool_name: str
    args: dict[str, Any] = Field(default_factory=dict)


class SuspendCheckpoint(WireModel):
    """Everything needed to resume a suspended step besides stored history."""

    require_tool_approval: ApprovalRequestPayload | None = None
    tool_call_suspended: Any = None
    stream_state: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _one_reason(self) -> SuspendCheckpoint:
        if self.require_tool_approval is not None and self.tool_call_suspended is not None:
            raise ValueError("checkpoint must carry a single suspension reason")
        return self

    @property
    def kind(self) -> SuspendKind:
        return "approval" if self.require_tool_approval is not None else "tool"


class StepSuspended(WireModel):
    checkpoint: SuspendCheckpoint
    resume_label: str


class ApprovalResume(WireModel):
    approved: bool = False


@dataclass
class PendingCheckpoint:
    kind: SuspendKind
    request: ToolCallRequest
    checkpoint: SuspendCheckpoint
    created_at: datetime = field(default_factory=datetime.now)


@dataclass
class RunState:
    run_id: str
    thread_id: str | None = None
    pending_approvals: dict[str, PendingCheckpoint] = field(default_factory=dict)
    pending_suspensions: dict[str, PendingCheckpoint] = field(default_factory=dict)
