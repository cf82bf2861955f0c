"""Tool-call execution step with approval gating and suspend/resume."""

from .domain import (
    Message,
    StepSuspended,
    SuspendCheckpoint,
    ToolCallOutput,
    ToolCallRequest,
    ToolDefinition,
)
from .errors import ToolStepError
from .step import StepContext, ToolCallStep

__all__ = [
    "Message",
    "StepContext",
    "StepSuspended",
    "SuspendCheckpoint",
    "ToolCallOutput",
    "ToolCallRequest",
    "ToolCallStep",
    "ToolDefinition",
    "ToolStepError",
]
