from .context import PersistenceContext, StepContext, StreamState, TelemetrySettings
from .resolver import resolve_tool
from .tool_call_step import StepResult, ToolCallStep

__all__ = [
    "PersistenceContext",
    "StepContext",
    "StepResult",
    "StreamState",
    "TelemetrySettings",
    "ToolCallStep",
    "resolve_tool",
]
