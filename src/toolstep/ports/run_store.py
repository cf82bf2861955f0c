"""
Port definition for run state storage.
"""

from __future__ import annotations

from typing import Protocol

from ..domain.models import PendingCheckpoint, RunState


class RunStorePort(Protocol):
    def get_or_create(self, run_id: str) -> RunState: ...

    def get(self, run_id: str) -> RunState | None: ...

    def set_thread_id(self, run_id: str, thread_id: str) -> None: ...

    def add_pending_approval(self, run_id: str, pending: PendingCheckpoint) -> None: ...

    def add_pending_suspension(
        self, run_id: str, pending: PendingCheckpoint
    ) -> None: ...

    def get_pending(self, run_id: str, tool_call_id: str) -> PendingCheckpoint | None: ...

    def pop_pending(self, run_id: str, tool_call_id: str) -> PendingCheckpoint | None: ...

    def list_pending(self, run_id: str) -> list[PendingCheckpoint]: ...

    def has_pending(self, run_id: str) -> bool: ...


__all__ = ["PendingCheckpoint", "RunState", "RunStorePort"]
