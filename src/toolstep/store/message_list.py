"""In-memory message list with source-filtered views."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from ..domain.messages import Message
from ..messages.convert import to_model_messages
from ..messages.provider_compat import Provider, apply_provider_compat
from ..ports import MessageListPort, MessageSource


class InMemoryMessageList(MessageListPort):
    def __init__(
        self, messages: Iterable[Message] = (), source: MessageSource = "memory"
    ) -> None:
        self._entries: list[tuple[Message, MessageSource]] = []
        for message in messages:
            self.add(message, source)

    def add(self, message: Message, source: MessageSource) -> None:
        for index, (existing, _) in enumerate(self._entries):
            if existing.id == message.id:
                self._entries[index] = (message, source)
                return
        self._entries.append((message, source))

    def all_messages(self) -> list[Message]:
        return [message for message, _ in self._entries]

    def response_messages(self) -> list[Message]:
        return [message for message, source in self._entries if source == "response"]

    def input_messages(self) -> list[Message]:
        return [message for message, source in self._entries if source != "response"]

    def input_model_messages(self) -> list[dict[str, Any]]:
        return to_model_messages(self.input_messages())

    def model_messages(self, provider: Provider | str | None = None) -> list[dict[str, Any]]:
        """All messages in model-ready form, fixed up for ``provider``."""
        stored = self.all_messages()
        return apply_provider_compat(to_model_messages(stored), stored, provider)
