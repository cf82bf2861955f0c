from .messages import (
    Message,
    MessageMetadata,
    PendingApproval,
    ReasoningPart,
    TextPart,
    ToolInvocation,
    ToolInvocationPart,
)
from .models import (
    NOT_APPROVED_RESULT,
    ApprovalRequestPayload,
    ApprovalResume,
    PendingCheckpoint,
    RunState,
    StepSuspended,
    SuspendCheckpoint,
    ToolCallError,
    ToolCallOutput,
    ToolCallRequest,
)
from .tools import (
    InputAvailable,
    SuspendRequest,
    ToolDefinition,
    ToolExecutionOptions,
    ToolRegistry,
)

__all__ = [
    "ApprovalRequestPayload",
    "ApprovalResume",
    "InputAvailable",
    "Message",
    "MessageMetadata",
    "NOT_APPROVED_RESULT",
    "PendingApproval",
    "PendingCheckpoint",
    "ReasoningPart",
    "RunState",
    "StepSuspended",
    "SuspendCheckpoint",
    "SuspendRequest",
    "TextPart",
    "ToolCallError",
    "ToolCallOutput",
    "ToolCallRequest",
    "ToolDefinition",
    "ToolExecutionOptions",
    "ToolInvocation",
    "ToolInvocationPart",
    "ToolRegistry",
]
