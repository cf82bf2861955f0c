"""
Port definitions for message persistence and thread storage.
"""

from __future__ import annotations

from typing import Any, Protocol

from .message_list import MessageListPort


class Thread(Protocol):
    id: str
    resource_id: str


class SaveQueuePort(Protocol):
    async def flush(
        self,
        message_list: MessageListPort,
        thread_id: str,
        memory_config: dict[str, Any] | None = None,
    ) -> None: ...


class MemoryPort(Protocol):
    async def get_thread_by_id(self, thread_id: str) -> Thread | None: ...

    async def create_thread(
        self,
        thread_id: str,
        resource_id: str,
        memory_config: dict[str, Any] | None = None,
    ) -> Thread: ...


__all__ = ["MemoryPort", "SaveQueuePort", "Thread"]
