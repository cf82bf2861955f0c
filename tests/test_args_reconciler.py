"""Tests for messages/args.py."""

from __future__ import annotations

from toolstep.domain.messages import Message, ToolInvocation
from toolstep.messages.args import find_tool_call_args

from .conftest import tool_call_message


def test_recovers_args_when_call_and_result_are_split_across_messages() -> None:
    messages = [
        tool_call_message("c1", args={"foo": "bar"}),
        tool_call_message("c1", args={}, state="result", result={"success": True}),
    ]

    assert find_tool_call_args(messages, "c1") == {"foo": "bar"}


def test_most_recent_non_empty_args_win() -> None:
    messages = [
        tool_call_message("c1", args={"attempt": 1}),
        tool_call_message("c1", args={"attempt": 2}),
    ]

    assert find_tool_call_args(messages, "c1") == {"attempt": 2}


def test_ignores_non_assistant_messages() -> None:
    user = tool_call_message("c1", args={"foo": "bar"}).model_copy(update={"role": "user"})

    assert find_tool_call_args([user], "c1") == {}


def test_reads_legacy_tool_invocations_list() -> None:
    message = Message(
        role="assistant",
        tool_invocations=[
            ToolInvocation(
                state="call", tool_call_id="c2", tool_name="legacy", args={"q": 1}
            )
        ],
    )

    assert find_tool_call_args([message], "c2") == {"q": 1}


def test_part_with_empty_args_falls_back_to_legacy_list_of_same_message() -> None:
    message = tool_call_message("c3", args={})
    message.tool_invocations = [
        ToolInvocation(state="call", tool_call_id="c3", tool_name="t", args={"x": "y"})
    ]

    assert find_tool_call_args([message], "c3") == {"x": "y"}


def test_unknown_tool_call_returns_empty_mapping() -> None:
    messages = [tool_call_message("c1", args={"foo": "bar"})]

    assert find_tool_call_args(messages, "missing") == {}
    assert find_tool_call_args([], "c1") == {}
