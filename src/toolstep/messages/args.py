"""Recover a tool call's original arguments from conversation history."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ..domain.messages import Message, ToolInvocation
from ..logging import get_logger

logger = get_logger(__name__)


def _non_empty_args(invocation: ToolInvocation | None) -> dict[str, Any] | None:
    if invocation is None:
        return None
    args = invocation.args or {}
    if isinstance(args, dict) and args:
        return args
    return None


def find_tool_call_args(
    messages: Sequence[Message], tool_call_id: str
) -> dict[str, Any]:
    """Return the args recorded for ``tool_call_id``, or ``{}`` when unknown.

    A call and its result may be stored as separate assistant messages with
    the result carrying empty args, so an empty match keeps the scan going.
    Messages are scanned newest first; structured parts are checked before
    the legacy ``tool_invocations`` list of the same message.
    """
    for message in reversed(messages):
        if message.role != "assistant":
            continue

        part_match = next(
            (
                invocation
                for invocation in message.iter_tool_invocations()
                if invocation.tool_call_id == tool_call_id
            ),
            None,
        )
        args = _non_empty_args(part_match)
        if args is not None:
            return args

        if message.tool_invocations:
            legacy_match = next(
                (
                    invocation
                    for invocation in message.tool_invocations
                    if invocation.tool_call_id == tool_call_id
                ),
                None,
            )
            args = _non_empty_args(legacy_match)
            if args is not None:
                return args

    logger.debug("tool_call_args_not_found", tool_call_id=tool_call_id)
    return {}
