"""Exception hierarchy for toolstep.

    ToolStepError(id, domain, category)
    └── ToolAbortedError

Only usage/domain errors raised by the message normalizer escape the step.
Tool failures are converted into structured results by the executor.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorDomain(str, Enum):
    AGENT = "AGENT"
    TOOL = "TOOL"
    STORAGE = "STORAGE"


class ErrorCategory(str, Enum):
    USER = "USER"
    SYSTEM = "SYSTEM"
    THIRD_PARTY = "THIRD_PARTY"


class ToolStepError(Exception):
    """Classified error carrying a stable id, domain and category."""

    def __init__(
        self,
        *,
        id: str,
        domain: ErrorDomain,
        category: ErrorCategory,
        text: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.id = id
        self.domain = domain
        self.category = category
        self.details = details or {}
        super().__init__(text)


class ToolAbortedError(ToolStepError):
    """Tool execution was cancelled through the abort signal."""

    def __init__(self, tool_name: str, tool_call_id: str) -> None:
        super().__init__(
            id="TOOL_CALL_ABORTED",
            domain=ErrorDomain.TOOL,
            category=ErrorCategory.USER,
            text=f"Tool {tool_name} was aborted",
            details={"toolName": tool_name, "toolCallId": tool_call_id},
        )
