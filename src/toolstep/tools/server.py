from __future__ import annotations

from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..domain.tools import ToolDefinition, ToolExecutionOptions
from ..logging import get_logger

logger = get_logger(__name__)


def build_server_time_tool() -> ToolDefinition:
    async def get_server_time(
        args: dict[str, Any], options: ToolExecutionOptions
    ) -> dict[str, str]:
        timezone = args.get("timezone") or "UTC"
        try:
            now = datetime.now(ZoneInfo(timezone))
        except ZoneInfoNotFoundError as exc:
            raise ValueError(f"Unknown timezone: {timezone}") from exc
        return {"time": now.isoformat(timespec="seconds"), "timezone": timezone}

    return ToolDefinition(
        id="getServerTime",
        description="Gets the current server time.",
        execute=get_server_time,
    )


def build_log_greeting_tool() -> ToolDefinition:
    async def log_greeting(
        args: dict[str, Any], options: ToolExecutionOptions
    ) -> dict[str, Any]:
        """Log a greeting on the server. Runs only after approval."""
        message = f"{args.get('greeting', 'Hello')}, {args.get('userName', 'there')}!"
        logger.info("greeting_logged", greeting=message)
        return {"logged": True, "logMessage": message}

    return ToolDefinition(
        id="logGreeting",
        description="Logs a greeting message to the server.",
        execute=log_greeting,
        require_approval=True,
    )
