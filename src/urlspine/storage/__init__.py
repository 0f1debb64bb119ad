"""History store implementations.

All stores auto-create their schema on initialize().

Quick Start:
    from urlspine.storage import SQLiteHistoryStore

    store = SQLiteHistoryStore("history.db")
    await store.initialize()
"""

from urlspine.storage.factory import create_history_store
from urlspine.storage.memory import MemoryHistoryStore
from urlspine.storage.sqlite import SQLiteHistoryStore

__all__ = [
    "MemoryHistoryStore",
    "SQLiteHistoryStore",
    "create_history_store",
]
