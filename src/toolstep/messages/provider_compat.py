"""
Per-provider fixups for the model-message sequence sent to an LLM.

These functions work on model-ready message dicts and always return new
lists; stored history is never touched.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Any

from ..domain.messages import Message
from ..errors import ErrorCategory, ErrorDomain, ToolStepError
from .args import find_tool_call_args

PLACEHOLDER_USER_CONTENT = "."


class Provider(str, Enum):
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"


# Gemini


def ensure_gemini_compatible_messages(
    messages: Sequence[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Make the first non-system message a user message.

    Raises ToolStepError when there is no user or assistant message at all.
    """
    result = list(messages)
    first_index = next(
        (index for index, message in enumerate(result) if message.get("role") != "system"),
        None,
    )
    if first_index is None:
        raise ToolStepError(
            id="NO_USER_OR_ASSISTANT_MESSAGES",
            domain=ErrorDomain.AGENT,
            category=ErrorCategory.USER,
            text=(
                "This request does not contain any user or assistant messages. "
                "At least one user or assistant message is required to generate "
                "a response."
            ),
        )
    if result[first_index].get("role") == "assistant":
        result.insert(first_index, {"role": "user", "content": PLACEHOLDER_USER_CONTENT})
    return result


# Anthropic


def _enrich_tool_results_with_input(
    message: dict[str, Any], stored_messages: Sequence[Message]
) -> dict[str, Any]:
    content = message.get("content")
    if message.get("role") != "tool" or not isinstance(content, list):
        return message

    parts: list[Any] = []
    for part in content:
        if isinstance(part, dict) and part.get("type") == "tool-result":
            part = {
                **part,
                "input": find_tool_call_args(stored_messages, part.get("toolCallId", "")),
            }
        parts.append(part)
    return {**message, "content": parts}


def ensure_anthropic_compatible_messages(
    messages: Sequence[dict[str, Any]], stored_messages: Sequence[Message]
) -> list[dict[str, Any]]:
    """Give every tool-result part the ``input`` of its originating call."""
    return [_enrich_tool_results_with_input(message, stored_messages) for message in messages]


# OpenAI


def has_openai_reasoning_item_id(part: Any) -> bool:
    if not isinstance(part, dict):
        return False
    metadata = part.get("providerMetadata")
    if not isinstance(metadata, dict):
        return False
    openai = metadata.get("openai")
    if not isinstance(openai, dict):
        return False
    return isinstance(openai.get("itemId"), str)


def get_openai_reasoning_item_id(part: Any) -> str | None:
    if not has_openai_reasoning_item_id(part):
        return None
    return part["providerMetadata"]["openai"]["itemId"]


def apply_provider_compat(
    messages: Sequence[dict[str, Any]],
    stored_messages: Sequence[Message],
    provider: Provider | str | None,
) -> list[dict[str, Any]]:
    try:
        resolved = Provider(provider) if provider is not None else None
    except ValueError:
        resolved = None

    if resolved is Provider.GEMINI:
        return ensure_gemini_compatible_messages(messages)
    if resolved is Provider.ANTHROPIC:
        return ensure_anthropic_compatible_messages(messages, stored_messages)
    return list(messages)
