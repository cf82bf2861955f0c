"""Stored messages to model-ready message dicts."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ..domain.messages import (
    Message,
    ReasoningPart,
    TextPart,
    ToolInvocation,
    ToolInvocationPart,
)
from .args import find_tool_call_args
from .provider_compat import get_openai_reasoning_item_id


def _reasoning_part(part: ReasoningPart) -> dict[str, Any]:
    payload: dict[str, Any] = {"type": "reasoning", "text": part.text}
    if part.provider_metadata:
        payload["providerMetadata"] = part.provider_metadata
    return payload


def _tool_result(invocation: ToolInvocation) -> dict[str, Any]:
    return {
        "type": "tool-result",
        "toolCallId": invocation.tool_call_id,
        "toolName": invocation.tool_name,
        "output": invocation.result,
    }


def _legacy_invocations(message: Message) -> list[ToolInvocation]:
    """Invocations kept only in the flat ``toolInvocations`` list."""
    in_parts = {invocation.tool_call_id for invocation in message.iter_tool_invocations()}
    return [
        invocation
        for invocation in message.tool_invocations or ()
        if invocation.tool_call_id not in in_parts
    ]


def to_model_messages(messages: Sequence[Message]) -> list[dict[str, Any]]:
    """Convert stored messages into the shape sent to a model.

    A tool call stored as a call message followed by a result message yields
    one ``tool-call`` part (args recovered by toolCallId) and one
    ``tool-result`` part in a following ``tool`` message. Calls found only in
    the legacy ``toolInvocations`` list are converted the same way.
    """
    model_messages: list[dict[str, Any]] = []
    emitted_calls: set[str] = set()
    seen_reasoning_items: set[str] = set()

    def add_invocation(
        invocation: ToolInvocation,
        content: list[dict[str, Any]],
        results: list[dict[str, Any]],
    ) -> None:
        if invocation.tool_call_id not in emitted_calls:
            emitted_calls.add(invocation.tool_call_id)
            content.append(
                {
                    "type": "tool-call",
                    "toolCallId": invocation.tool_call_id,
                    "toolName": invocation.tool_name,
                    "input": invocation.args
                    or find_tool_call_args(messages, invocation.tool_call_id),
                }
            )
        if invocation.state == "result":
            results.append(_tool_result(invocation))

    for message in messages:
        if message.role in ("system", "user"):
            model_messages.append({"role": message.role, "content": message.text_content()})
            continue

        if message.role == "tool":
            invocations = [*message.iter_tool_invocations(), *_legacy_invocations(message)]
            tool_results = [
                _tool_result(invocation)
                for invocation in invocations
                if invocation.state == "result"
            ]
            if tool_results:
                model_messages.append({"role": "tool", "content": tool_results})
            continue

        content: list[dict[str, Any]] = []
        results: list[dict[str, Any]] = []
        for part in message.parts:
            if isinstance(part, TextPart):
                if part.text:
                    content.append({"type": "text", "text": part.text})
            elif isinstance(part, ReasoningPart):
                payload = _reasoning_part(part)
                item_id = get_openai_reasoning_item_id(payload)
                if item_id is not None:
                    if item_id in seen_reasoning_items:
                        continue
                    seen_reasoning_items.add(item_id)
                content.append(payload)
            elif isinstance(part, ToolInvocationPart):
                add_invocation(part.tool_invocation, content, results)
        for invocation in _legacy_invocations(message):
            add_invocation(invocation, content, results)

        if content:
            model_messages.append({"role": "assistant", "content": content})
        if results:
            model_messages.append({"role": "tool", "content": results})

    return model_messages
