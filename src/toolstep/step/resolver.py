"""Tool lookup by registry key, then by declared id."""

from __future__ import annotations

from ..domain.tools import ToolDefinition, ToolRegistry


def resolve_tool(tools: ToolRegistry | None, tool_name: str) -> ToolDefinition | None:
    if not tools:
        return None
    tool = tools.get(tool_name)
    if tool is not None:
        return tool
    return next((candidate for candidate in tools.values() if candidate.id == tool_name), None)


def tool_not_found_result(tool_name: str) -> str:
    return f"Tool {tool_name} not found"
