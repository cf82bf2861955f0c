"""Stored conversation messages.

Messages are append-only once persisted. The single sanctioned in-place edit
is the ``pendingToolApprovals`` entry of an assistant message's metadata,
which goes through :meth:`Message.add_pending_approval` and
:meth:`Message.remove_pending_approval`.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for records that cross a storage or network boundary."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


MessageRole = Literal["system", "user", "assistant", "tool"]
ToolInvocationState = Literal["partial-call", "call", "result"]


class ToolInvocation(WireModel):
    state: ToolInvocationState
    tool_call_id: str
    tool_name: str
    args: dict[str, Any] = Field(default_factory=dict)
    result: Any = None


class TextPart(WireModel):
    type: Literal["text"] = "text"
    text: str


class ReasoningPart(WireModel):
    type: Literal["reasoning"] = "reasoning"
    text: str
    provider_metadata: dict[str, Any] | None = None


class ToolInvocationPart(WireModel):
    type: Literal["tool-invocation"] = "tool-invocation"
    tool_invocation: ToolInvocation


MessagePart = Annotated[
    Union[TextPart, ReasoningPart, ToolInvocationPart],
    Field(discriminator="type"),
]


class PendingApproval(WireModel):
    tool_name: str
    args: dict[str, Any] = Field(default_factory=dict)
    type: Literal["approval"] = "approval"
    run_id: str


class MessageMetadata(WireModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )

    pending_tool_approvals: dict[str, PendingApproval] | None = None


def _new_message_id() -> str:
    return f"msg_{uuid.uuid4().hex}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Message(WireModel):
    id: str = Field(default_factory=_new_message_id)
    role: MessageRole
    parts: list[MessagePart] = Field(default_factory=list)
    # Legacy flat list written by older clients; read by the args reconciler.
    tool_invocations: list[ToolInvocation] | None = None
    metadata: MessageMetadata | None = None
    thread_id: str | None = None
    created_at: datetime = Field(default_factory=_utcnow)

    @classmethod
    def text(cls, role: MessageRole, text: str, **kwargs: Any) -> Message:
        return cls(role=role, parts=[TextPart(text=text)], **kwargs)

    def text_content(self) -> str:
        return "".join(part.text for part in self.parts if isinstance(part, TextPart))

    def iter_tool_invocations(self) -> list[ToolInvocation]:
        return [
            part.tool_invocation
            for part in self.parts
            if isinstance(part, ToolInvocationPart)
        ]

    def pending_approval(self, tool_call_id: str) -> PendingApproval | None:
        if self.metadata is None or not self.metadata.pending_tool_approvals:
            return None
        return self.metadata.pending_tool_approvals.get(tool_call_id)

    def add_pending_approval(self, tool_call_id: str, record: PendingApproval) -> None:
        if self.metadata is None:
            self.metadata = MessageMetadata()
        if self.metadata.pending_tool_approvals is None:
            self.metadata.pending_tool_approvals = {}
        self.metadata.pending_tool_approvals[tool_call_id] = record

    def remove_pending_approval(self, tool_call_id: str) -> bool:
        """Drop the record for ``tool_call_id``; an emptied map is removed too."""
        if self.pending_approval(tool_call_id) is None:
            return False
        approvals = self.metadata.pending_tool_approvals
        del approvals[tool_call_id]
        if not approvals:
            self.metadata.pending_tool_approvals = None
        return True
