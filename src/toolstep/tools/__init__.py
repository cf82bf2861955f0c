from __future__ import annotations

from ..domain.tools import ToolDefinition
from .client import build_feedback_tool, build_user_confirmation_tool
from .server import build_log_greeting_tool, build_server_time_tool


def build_tools(run_id: str) -> dict[str, ToolDefinition]:
    return {
        "get_server_time": build_server_time_tool(),
        "log_greeting": build_log_greeting_tool(),
        "get_user_confirmation": build_user_confirmation_tool(),
        "collect_feedback": build_feedback_tool(run_id),
    }
