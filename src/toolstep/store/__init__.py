from .memory import InMemoryMemory, SaveQueueManager, StoredThread
from .message_list import InMemoryMessageList
from .run_store import InMemoryRunStore, get_run_store

__all__ = [
    "InMemoryMemory",
    "InMemoryMessageList",
    "InMemoryRunStore",
    "SaveQueueManager",
    "StoredThread",
    "get_run_store",
]
