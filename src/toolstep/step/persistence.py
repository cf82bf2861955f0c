"""Durable flush performed before a step hands control back."""

from __future__ import annotations

from ..logging import get_logger
from .context import StepContext

logger = get_logger(__name__)


async def flush_messages_before_suspension(context: StepContext) -> None:
    """Persist pending messages, creating the thread first if needed.

    Callers hold ``context.persistence.lock``. Failures are logged, never raised.
    """
    persistence = context.persistence
    if not persistence.can_flush:
        return

    try:
        if (
            persistence.memory is not None
            and not persistence.thread_exists
            and persistence.resource_id
        ):
            thread = await persistence.memory.get_thread_by_id(persistence.thread_id)
            if thread is None:
                await persistence.memory.create_thread(
                    persistence.thread_id,
                    persistence.resource_id,
                    persistence.memory_config,
                )
            persistence.thread_exists = True

        await persistence.save_queue.flush(
            context.message_list, persistence.thread_id, persistence.memory_config
        )
    except Exception:
        logger.exception(
            "flush_before_suspension_failed", thread_id=persistence.thread_id
        )


async def flush_metadata_change(context: StepContext) -> None:
    """Persist an approval metadata edit. Callers hold the persistence lock."""
    persistence = context.persistence
    if not persistence.can_flush:
        return
    try:
        await persistence.save_queue.flush(
            context.message_list, persistence.thread_id, persistence.memory_config
        )
    except Exception:
        logger.exception(
            "approval_metadata_flush_failed", thread_id=persistence.thread_id
        )
