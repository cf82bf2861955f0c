from __future__ import annotations

from typing import Any

from ..adapters.stream import ToolOutputChunk
from ..domain.tools import InputAvailable, ToolDefinition, ToolExecutionOptions
from ..logging import get_logger

logger = get_logger(__name__)


def build_user_confirmation_tool() -> ToolDefinition:
    """
    Ask the user to confirm their name (executed on the client side).

    The step only observes the input; the client sends the result back as a
    tool message on the next request.
    """

    def on_input_available(event: InputAvailable) -> None:
        logger.info("client_tool_input_available", prompt=event.input.get("prompt"))

    return ToolDefinition(
        id="getUserConfirmation",
        description="Asks the user to confirm their name.",
        on_input_available=on_input_available,
    )


def build_feedback_tool(run_id: str) -> ToolDefinition:
    async def collect_feedback(
        args: dict[str, Any], options: ToolExecutionOptions
    ) -> Any:
        """Pause until the user submits feedback, then echo it back."""
        if not options.resuming:
            return options.suspend({"question": args.get("question", "Any feedback?")})

        if options.writer is not None:
            options.writer.write(
                ToolOutputChunk(
                    runId=run_id,
                    toolCallId=options.tool_call_id,
                    payload={"received": True},
                )
            )
        return {"feedback": options.resume_data}

    return ToolDefinition(
        id="collectFeedback",
        description="Asks the user for free-form feedback and waits for it.",
        execute=collect_feedback,
    )
