"""Storage factory - build a history store from settings.

Usage:
    from urlspine.core.config import get_settings
    from urlspine.storage import create_history_store

    # Local file (default)
    store = create_history_store(get_settings(database_path="history.db"))

    # Memory (for testing)
    store = create_history_store(get_settings(storage_backend="memory"))

    await store.initialize()  # Auto-creates schema
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from urlspine.core.exceptions import ConfigurationError
from urlspine.storage.memory import MemoryHistoryStore
from urlspine.storage.sqlite import SQLiteHistoryStore

if TYPE_CHECKING:
    from urlspine.core.config import Settings
    from urlspine.protocols.history import HistoryStore


def create_history_store(settings: Settings) -> HistoryStore:
    """Create an uninitialized history store for ``settings.storage_backend``.

    Raises:
        ConfigurationError: If the backend is not known.

    Example:
        >>> from urlspine.core.config import get_settings
        >>> from urlspine.storage.factory import create_history_store
        >>> type(create_history_store(get_settings(storage_backend="memory"))).__name__
        'MemoryHistoryStore'
    """
    backend = settings.storage_backend
    if backend == "sqlite":
        return SQLiteHistoryStore(settings.database_path, timeout=settings.database_timeout)
    if backend == "memory":
        return MemoryHistoryStore()
    raise ConfigurationError(f"Unknown storage backend: {backend}")
