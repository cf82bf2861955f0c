"""Tests for the FastAPI host in main.py."""

from __future__ import annotations

import json
import uuid
from typing import Any

import pytest
from fastapi.testclient import TestClient

from toolstep import main


@pytest.fixture
def client() -> TestClient:
    return TestClient(main.app)


def _events(response: Any) -> list[dict[str, Any]]:
    events = []
    for line in response.text.splitlines():
        if not line.startswith("data: "):
            continue
        data = line[len("data: ") :]
        if data == "[DONE]":
            continue
        events.append(json.loads(data))
    return events


def _assistant_call(tool_call_id: str, tool_name: str, args: dict[str, Any]) -> dict[str, Any]:
    return {
        "role": "assistant",
        "parts": [
            {
                "type": "tool-invocation",
                "toolInvocation": {
                    "state": "call",
                    "toolCallId": tool_call_id,
                    "toolName": tool_name,
                    "args": args,
                },
            }
        ],
    }


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_executes_server_tool(client: TestClient) -> None:
    response = client.post(
        "/api/tool-calls",
        json={
            "toolCall": {
                "toolCallId": "c-time",
                "toolName": "get_server_time",
                "args": {"timezone": "UTC"},
            }
        },
    )

    events = _events(response)
    result = next(e for e in events if e["type"] == "tool-result")
    assert result["payload"]["toolCallId"] == "c-time"
    assert result["payload"]["result"]["timezone"] == "UTC"
    assert events[-1]["type"] == "done"
    assert events[-1]["finishReason"] == "stop"


def test_passive_client_tool_hands_control_back(client: TestClient) -> None:
    response = client.post(
        "/api/tool-calls",
        json={
            "toolCall": {
                "toolCallId": "c-confirm",
                "toolName": "getUserConfirmation",
                "args": {"prompt": "Your name?"},
            }
        },
    )

    events = _events(response)
    result = next(e for e in events if e["type"] == "tool-result")
    assert "result" not in result["payload"]
    assert events[-1]["finishReason"] == "tool-calls"


def test_approval_round_trip(client: TestClient) -> None:
    run_id = uuid.uuid4().hex
    args = {"userName": "Alice", "greeting": "Hello"}
    response = client.post(
        "/api/tool-calls",
        json={
            "runId": run_id,
            "toolCall": {"toolCallId": "c-greet", "toolName": "log_greeting", "args": args},
            "messages": [_assistant_call("c-greet", "log_greeting", args)],
        },
    )

    events = _events(response)
    assert [e["type"] for e in events] == ["tool-call-approval", "step-suspended", "done"]
    assert events[0]["from"] == "AGENT"
    assert events[1]["resumeLabel"] == "c-greet"

    pending = client.get(f"/api/runs/{run_id}/pending").json()["pending"]
    assert [p["kind"] for p in pending] == ["approval"]

    stored = client.get(f"/api/threads/{run_id}/messages").json()["messages"]
    assert "c-greet" in stored[-1]["metadata"]["pendingToolApprovals"]

    resumed = client.post(
        "/api/continuation",
        json={"runId": run_id, "toolCallId": "c-greet", "resumeData": {"approved": True}},
    )

    result = next(e for e in _events(resumed) if e["type"] == "tool-result")
    assert result["payload"]["result"] == {"logged": True, "logMessage": "Hello, Alice!"}
    assert client.get(f"/api/runs/{run_id}/pending").json()["pending"] == []
    stored = client.get(f"/api/threads/{run_id}/messages").json()["messages"]
    assert "pendingToolApprovals" not in stored[-1].get("metadata", {})


def test_tool_suspension_round_trip(client: TestClient) -> None:
    run_id = uuid.uuid4().hex
    response = client.post(
        "/api/tool-calls",
        json={
            "runId": run_id,
            "toolCall": {
                "toolCallId": "c-feedback",
                "toolName": "collect_feedback",
                "args": {"question": "How was it?"},
            },
        },
    )

    events = _events(response)
    suspended = next(e for e in events if e["type"] == "tool-call-suspended")
    assert suspended["payload"]["suspendPayload"] == {"question": "How was it?"}

    resumed = client.post(
        "/api/continuation",
        json={"runId": run_id, "toolCallId": "c-feedback", "resumeData": "Great"},
    )

    events = _events(resumed)
    assert any(e["type"] == "tool-output" for e in events)
    result = next(e for e in events if e["type"] == "tool-result")
    assert result["payload"]["result"] == {"feedback": "Great"}


def test_continuation_without_pending_call_is_404(client: TestClient) -> None:
    response = client.post(
        "/api/continuation",
        json={"runId": "unknown", "toolCallId": "nope", "resumeData": {"approved": True}},
    )

    assert response.status_code == 404


def test_declined_run_policy_approval_does_not_execute(client: TestClient) -> None:
    run_id = uuid.uuid4().hex
    response = client.post(
        "/api/tool-calls",
        json={
            "runId": run_id,
            "requireToolApproval": True,
            "toolCall": {"toolCallId": "c-time", "toolName": "get_server_time", "args": {}},
            "messages": [_assistant_call("c-time", "get_server_time", {})],
        },
    )
    assert _events(response)[-1]["finishReason"] == "suspended"

    resumed = client.post(
        "/api/continuation",
        json={"runId": run_id, "toolCallId": "c-time", "resumeData": {"approved": False}},
    )

    events = _events(resumed)
    result = next(e for e in events if e["type"] == "tool-result")
    assert result["payload"]["result"] == "Tool call was not approved by the user"
    assert events[-1]["finishReason"] == "stop"
    stored = client.get(f"/api/threads/{run_id}/messages").json()["messages"]
    assert "pendingToolApprovals" not in stored[-1].get("metadata", {})


def test_failed_tool_emits_error_chunk(client: TestClient) -> None:
    response = client.post(
        "/api/tool-calls",
        json={
            "toolCall": {
                "toolCallId": "c-bad-zone",
                "toolName": "get_server_time",
                "args": {"timezone": "Nowhere/Atlantis"},
            }
        },
    )

    events = _events(response)
    assert [e["type"] for e in events] == ["tool-result", "error", "done"]
    assert events[0]["payload"]["error"]["name"] == "ValueError"
    assert events[1]["error"] == {
        "message": "Unknown timezone: Nowhere/Atlantis",
        "code": "ValueError",
    }
    assert events[-1]["finishReason"] == "error"


def test_steps_on_one_thread_share_a_lock() -> None:
    def build(run_id: str, thread_id: str) -> Any:
        return main._build_step(
            run_id=run_id,
            thread_id=thread_id,
            resource_id="default",
            message_list=main.InMemoryMessageList(),
            writer=main.CollectingWriter(),
            stream_state=main.StreamState(),
            require_tool_approval=None,
        )

    first = build("run-a", "shared-thread")
    second = build("run-b", "shared-thread")
    other = build("run-c", "other-thread")

    assert first.context.persistence.lock is second.context.persistence.lock
    assert first.context.persistence.lock is not other.context.persistence.lock
