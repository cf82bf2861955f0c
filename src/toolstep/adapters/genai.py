"""Model-ready message dicts to google-genai content for Gemini."""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from google.genai import types

from ..messages.provider_compat import ensure_gemini_compatible_messages


def _text_of(content: Any) -> str:
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(
            part.get("text", "")
            for part in content
            if isinstance(part, dict) and part.get("type") == "text"
        )
    return ""


def _function_response_payload(output: Any) -> dict[str, Any]:
    if isinstance(output, dict):
        return output
    if isinstance(output, str):
        return {"output": output}
    return {"output": json.loads(json.dumps(output, default=str))}


def _assistant_parts(content: Any) -> list[types.Part]:
    if isinstance(content, str):
        return [types.Part(text=content)] if content else []

    parts: list[types.Part] = []
    for part in content or []:
        if not isinstance(part, dict):
            continue
        part_type = part.get("type")
        if part_type == "text" and part.get("text"):
            parts.append(types.Part(text=part["text"]))
        elif part_type == "tool-call":
            parts.append(
                types.Part(
                    function_call=types.FunctionCall(
                        id=part.get("toolCallId"),
                        name=part.get("toolName"),
                        args=part.get("input") or {},
                    )
                )
            )
    return parts


def _tool_parts(content: Any) -> list[types.Part]:
    return [
        types.Part(
            function_response=types.FunctionResponse(
                id=part.get("toolCallId"),
                name=part.get("toolName"),
                response=_function_response_payload(part.get("output")),
            )
        )
        for part in content or []
        if isinstance(part, dict) and part.get("type") == "tool-result"
    ]


def to_genai_contents(
    messages: Sequence[dict[str, Any]],
) -> tuple[str | None, list[types.Content]]:
    """Return ``(system_instruction, contents)`` for a Gemini request.

    System messages are folded into the instruction; the remaining sequence
    is fixed up so it starts with a user turn.
    """
    messages = ensure_gemini_compatible_messages(messages)

    system_texts: list[str] = []
    contents: list[types.Content] = []
    for message in messages:
        role = message.get("role")
        content = message.get("content")
        if role == "system":
            text = _text_of(content)
            if text:
                system_texts.append(text)
        elif role == "user":
            contents.append(
                types.Content(role="user", parts=[types.Part(text=_text_of(content))])
            )
        elif role == "assistant":
            parts = _assistant_parts(content)
            if parts:
                contents.append(types.Content(role="model", parts=parts))
        elif role == "tool":
            parts = _tool_parts(content)
            if parts:
                contents.append(types.Content(role="user", parts=parts))

    system_instruction = "\n\n".join(system_texts) if system_texts else None
    return system_instruction, contents
