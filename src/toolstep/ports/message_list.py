"""
Port definition for the conversation history seen by the step.
"""

from __future__ import annotations

from typing import Any, Literal, Protocol

from ..domain.messages import Message

MessageSource = Literal["memory", "input", "response"]


class MessageListPort(Protocol):
    def all_messages(self) -> list[Message]:
        """Every message, persisted or not, oldest first."""
        ...

    def response_messages(self) -> list[Message]:
        """Messages produced during the current run."""
        ...

    def input_model_messages(self) -> list[dict[str, Any]]:
        """Input messages in model-ready form."""
        ...

    def add(self, message: Message, source: MessageSource) -> None: ...


__all__ = ["MessageListPort", "MessageSource"]
