from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import pytest

from toolstep.adapters.stream import CollectingWriter
from toolstep.domain.messages import Message, ToolInvocation, ToolInvocationPart
from toolstep.step import PersistenceContext, StepContext, StreamState, TelemetrySettings
from toolstep.store import InMemoryMemory, InMemoryMessageList, SaveQueueManager


@dataclass
class FakeSpan:
    name: str
    attributes: dict[str, Any] = field(default_factory=dict)
    status: Any = None
    exceptions: list[BaseException] = field(default_factory=list)
    ended: bool = False

    def set_attributes(self, attributes: Mapping[str, Any]) -> None:
        self.attributes.update(attributes)

    def set_status(self, status: Any, description: str | None = None) -> None:
        self.status = status

    def record_exception(self, exception: BaseException) -> None:
        self.exceptions.append(exception)

    def end(self) -> None:
        self.ended = True


class FakeTracer:
    def __init__(self) -> None:
        self.spans: list[FakeSpan] = []

    def start_span(self, name: str) -> FakeSpan:
        span = FakeSpan(name=name)
        self.spans.append(span)
        return span


class FailingSaveQueue:
    def __init__(self) -> None:
        self.calls = 0

    async def flush(self, message_list, thread_id, memory_config=None) -> None:  # type: ignore[no-untyped-def]
        self.calls += 1
        raise RuntimeError("storage unavailable")


def tool_call_message(
    tool_call_id: str,
    *,
    args: dict[str, Any] | None = None,
    state: str = "call",
    result: Any = None,
    tool_name: str = "test_tool",
    **kwargs: Any,
) -> Message:
    return Message(
        role="assistant",
        parts=[
            ToolInvocationPart(
                tool_invocation=ToolInvocation(
                    state=state,
                    tool_call_id=tool_call_id,
                    tool_name=tool_name,
                    args=args or {},
                    result=result,
                )
            )
        ],
        **kwargs,
    )


@pytest.fixture
def tracer() -> FakeTracer:
    return FakeTracer()


@pytest.fixture
def writer() -> CollectingWriter:
    return CollectingWriter()


@pytest.fixture
def memory() -> InMemoryMemory:
    return InMemoryMemory()


@pytest.fixture
def save_queue(memory: InMemoryMemory) -> SaveQueueManager:
    return SaveQueueManager(memory)


@pytest.fixture
def message_list() -> InMemoryMessageList:
    messages = InMemoryMessageList([Message.text("user", "Hello!")], source="input")
    messages.add(tool_call_message("call-1", args={"greeting": "Hi"}), "response")
    return messages


@pytest.fixture
def make_context(
    tracer: FakeTracer,
    writer: CollectingWriter,
    memory: InMemoryMemory,
    save_queue: SaveQueueManager,
    message_list: InMemoryMessageList,
):
    def _make(**overrides: Any) -> StepContext:
        persistence = overrides.pop(
            "persistence",
            PersistenceContext(
                save_queue=save_queue,
                memory=memory,
                thread_id="thread-1",
                resource_id="user-1",
            ),
        )
        return StepContext(
            run_id=overrides.pop("run_id", "run-1"),
            message_list=overrides.pop("message_list", message_list),
            writer=overrides.pop("writer", writer),
            stream_state=overrides.pop("stream_state", StreamState({"step": 1})),
            persistence=persistence,
            telemetry=TelemetrySettings(is_enabled=True, tracer=tracer),
            **overrides,
        )

    return _make
