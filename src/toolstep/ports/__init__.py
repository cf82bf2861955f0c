from .message_list import MessageListPort, MessageSource
from .persistence import MemoryPort, SaveQueuePort, Thread
from .run_store import PendingCheckpoint, RunState, RunStorePort
from .telemetry import EventWriterPort, SpanPort, StreamStatePort, TracerPort

__all__ = [
    "EventWriterPort",
    "MemoryPort",
    "MessageListPort",
    "MessageSource",
    "PendingCheckpoint",
    "RunState",
    "RunStorePort",
    "SaveQueuePort",
    "SpanPort",
    "StreamStatePort",
    "Thread",
    "TracerPort",
]
