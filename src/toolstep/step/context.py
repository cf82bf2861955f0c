"""Per-run collaborators handed to the tool-call step."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

from ..ports import (
    EventWriterPort,
    MemoryPort,
    MessageListPort,
    SaveQueuePort,
    StreamStatePort,
    TracerPort,
)


@dataclass
class StreamState(StreamStatePort):
    """Serializable snapshot of in-flight run state carried by checkpoints."""

    values: dict[str, Any] = field(default_factory=dict)

    def serialize(self) -> dict[str, Any]:
        return dict(self.values)

    @classmethod
    def deserialize(cls, data: dict[str, Any] | None) -> StreamState:
        return cls(values=dict(data or {}))


@dataclass
class PersistenceContext:
    """Storage handles for durable flushes; the lock guards metadata edits."""

    save_queue: SaveQueuePort | None = None
    memory: MemoryPort | None = None
    thread_id: str | None = None
    resource_id: str | None = None
    memory_config: dict[str, Any] | None = None
    thread_exists: bool = False
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    @property
    def can_flush(self) -> bool:
        return self.save_queue is not None and self.thread_id is not None


@dataclass
class TelemetrySettings:
    is_enabled: bool = False
    tracer: TracerPort | None = None
    function_id: str | None = None


@dataclass
class StepContext:
    run_id: str
    message_list: MessageListPort
    writer: EventWriterPort
    stream_state: StreamStatePort = field(default_factory=StreamState)
    persistence: PersistenceContext = field(default_factory=PersistenceContext)
    telemetry: TelemetrySettings = field(default_factory=TelemetrySettings)
    require_tool_approval: bool = False
    abort_signal: asyncio.Event | None = None
    tracing_context: Any = None
