"""
Run store backends and factory.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import lru_cache

from ..domain.models import PendingCheckpoint, RunState
from ..errors import ErrorCategory, ErrorDomain, ToolStepError
from ..ports import RunStorePort
from ..settings import get_settings


class InMemoryRunStore(RunStorePort):
    def __init__(self) -> None:
        self._runs: dict[str, RunState] = {}

    def get_or_create(self, run_id: str) -> RunState:
        state = self._runs.get(run_id)
        if state is None:
            state = RunState(run_id=run_id)
            self._runs[run_id] = state
        return state

    def get(self, run_id: str) -> RunState | None:
        return self._runs.get(run_id)

    def set_thread_id(self, run_id: str, thread_id: str) -> None:
        state = self.get_or_create(run_id)
        state.thread_id = thread_id

    def add_pending_approval(self, run_id: str, pending: PendingCheckpoint) -> None:
        state = self.get_or_create(run_id)
        state.pending_approvals[pending.request.tool_call_id] = pending

    def add_pending_suspension(self, run_id: str, pending: PendingCheckpoint) -> None:
        state = self.get_or_create(run_id)
        state.pending_suspensions[pending.request.tool_call_id] = pending

    def get_pending(self, run_id: str, tool_call_id: str) -> PendingCheckpoint | None:
        state = self.get(run_id)
        if state is None:
            return None
        return state.pending_approvals.get(tool_call_id) or state.pending_suspensions.get(
            tool_call_id
        )

    def pop_pending(self, run_id: str, tool_call_id: str) -> PendingCheckpoint | None:
        state = self.get(run_id)
        if state is None:
            return None
        pending = state.pending_approvals.pop(tool_call_id, None)
        if pending is None:
            pending = state.pending_suspensions.pop(tool_call_id, None)
        return pending

    def list_pending(self, run_id: str) -> list[PendingCheckpoint]:
        state = self.get(run_id)
        if state is None:
            return []
        return [*state.pending_approvals.values(), *state.pending_suspensions.values()]

    def has_pending(self, run_id: str) -> bool:
        state = self.get(run_id)
        if state is None:
            return False
        return bool(state.pending_approvals or state.pending_suspensions)


RUN_STORE_BACKENDS: dict[str, Callable[[], RunStorePort]] = {
    "memory": InMemoryRunStore,
}


def get_run_store(backend: str | None = None) -> RunStorePort:
    """Shared run store for ``backend`` (default: ``settings.run_store_backend``)."""
    return _run_store_for(backend or get_settings().run_store_backend)


@lru_cache
def _run_store_for(backend: str) -> RunStorePort:
    factory = RUN_STORE_BACKENDS.get(backend)
    if factory is None:
        raise ToolStepError(
            id="RUN_STORE_BACKEND_UNSUPPORTED",
            domain=ErrorDomain.STORAGE,
            category=ErrorCategory.USER,
            text=f"Unsupported run store backend: {backend}",
            details={"supported": sorted(RUN_STORE_BACKENDS)},
        )
    return factory()
