"""Tool definitions and the options handed to a tool at execution time."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..ports import EventWriterPort


@dataclass(frozen=True)
class SuspendRequest:
    """Returned by a tool's execute routine to pause until resumed."""

    payload: Any = None


@dataclass
class InputAvailable:
    tool_call_id: str
    input: dict[str, Any]
    messages: list[dict[str, Any]]
    abort_signal: asyncio.Event | None = None


@dataclass
class ToolExecutionOptions:
    tool_call_id: str
    messages: list[dict[str, Any]]
    abort_signal: asyncio.Event | None = None
    writer: EventWriterPort | None = None
    tracing_context: Any = None
    resume_data: Any = None

    @property
    def resuming(self) -> bool:
        return self.resume_data is not None

    def suspend(self, payload: Any = None) -> SuspendRequest:
        return SuspendRequest(payload=payload)


ExecuteFn = Callable[[dict[str, Any], ToolExecutionOptions], Any]
InputAvailableFn = Callable[[InputAvailable], Any]


@dataclass
class ToolDefinition:
    id: str | None = None
    description: str = ""
    execute: ExecuteFn | None = None
    on_input_available: InputAvailableFn | None = None
    require_approval: bool = False

    @property
    def is_passive(self) -> bool:
        return self.execute is None


ToolRegistry = Mapping[str, ToolDefinition]
