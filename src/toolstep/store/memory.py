"""
In-memory thread/message storage and the save queue that flushes into it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ..domain.messages import Message
from ..logging import get_logger
from ..ports import MemoryPort, MessageListPort, SaveQueuePort

logger = get_logger(__name__)


@dataclass
class StoredThread:
    id: str
    resource_id: str
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=datetime.now)


class InMemoryMemory(MemoryPort):
    def __init__(self) -> None:
        self._threads: dict[str, StoredThread] = {}
        self._messages: dict[str, dict[str, Message]] = {}

    async def get_thread_by_id(self, thread_id: str) -> StoredThread | None:
        return self._threads.get(thread_id)

    async def create_thread(
        self,
        thread_id: str,
        resource_id: str,
        memory_config: dict[str, Any] | None = None,
    ) -> StoredThread:
        thread = StoredThread(
            id=thread_id, resource_id=resource_id, metadata=dict(memory_config or {})
        )
        self._threads[thread_id] = thread
        self._messages.setdefault(thread_id, {})
        return thread

    async def save_messages(self, thread_id: str, messages: list[Message]) -> None:
        if thread_id not in self._threads:
            raise KeyError(f"Thread {thread_id} does not exist")
        stored = self._messages.setdefault(thread_id, {})
        for message in messages:
            # Stored copies are detached from the live message objects.
            stored[message.id] = message.model_copy(
                deep=True, update={"thread_id": thread_id}
            )

    async def recall(self, thread_id: str) -> list[Message]:
        stored = self._messages.get(thread_id, {})
        ordered = sorted(stored.values(), key=lambda message: message.created_at)
        return [message.model_copy(deep=True) for message in ordered]


class SaveQueueManager(SaveQueuePort):
    def __init__(self, memory: InMemoryMemory) -> None:
        self.memory = memory
        self.flush_count = 0

    async def flush(
        self,
        message_list: MessageListPort,
        thread_id: str,
        memory_config: dict[str, Any] | None = None,
    ) -> None:
        messages = [
            message for message in message_list.all_messages() if message.role != "system"
        ]
        await self.memory.save_messages(thread_id, messages)
        self.flush_count += 1
        logger.debug("messages_flushed", thread_id=thread_id, count=len(messages))
