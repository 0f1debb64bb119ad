"""In-memory history store.

Provides a complete in-memory implementation of HistoryStore with the same
semantics as the SQLite store, useful for testing and for hosts that do not
need the log to survive a restart.

Example:
    >>> from urlspine.storage.memory import MemoryHistoryStore
    >>> store = MemoryHistoryStore()
    >>> # MemoryHistoryStore implements HistoryStore protocol
    >>> hasattr(store, 'observe')
    True

Note:
    All methods are async. Use within async context or with asyncio.run().
"""

from __future__ import annotations

import asyncio

from urlspine.core.exceptions import StorageError
from urlspine.models.sighting import PriorSighting, SightingEvent


class MemoryHistoryStore:
    """Sightings held in an append-only list.

    An ``asyncio.Lock`` makes :meth:`observe` atomic for coroutines sharing
    the store. Data is lost when the process exits.

    Example:
        >>> from urlspine.storage.memory import MemoryHistoryStore
        >>> s = MemoryHistoryStore()
        >>> s._initialized
        False
    """

    def __init__(self) -> None:
        self._events: list[SightingEvent] = []
        self._next_id = 1
        self._lock = asyncio.Lock()
        self._initialized = False

    async def initialize(self) -> None:
        """No-op for memory storage."""
        self._initialized = True

    async def close(self) -> None:
        """Clear all data."""
        self._events.clear()
        self._next_id = 1
        self._initialized = False

    def _check(self) -> None:
        if not self._initialized:
            raise StorageError("History store not initialized. Call initialize() first.")

    async def most_recent_and_count(self, url: str, dst: str) -> PriorSighting:
        self._check()
        async with self._lock:
            return self._lookup(url, dst)

    async def append(self, event: SightingEvent) -> int:
        self._check()
        async with self._lock:
            return self._insert(event)

    async def observe(self, event: SightingEvent) -> PriorSighting:
        self._check()
        async with self._lock:
            prior = self._lookup(event.url, event.dst)
            self._insert(event)
        return prior

    async def recent_distinct(self, limit: int) -> list[SightingEvent]:
        self._check()
        latest: dict[str, SightingEvent] = {}
        for event in self._events:
            latest[event.url] = event
        ordered = sorted(latest.values(), key=lambda e: e.id or 0, reverse=True)
        return ordered[: max(limit, 0)]

    async def count(self, url: str | None = None, dst: str | None = None) -> int:
        self._check()
        return sum(
            1
            for e in self._events
            if (url is None or e.url == url) and (dst is None or e.dst == dst)
        )

    def _lookup(self, url: str, dst: str) -> PriorSighting:
        matches = [e for e in self._events if e.url == url and e.dst == dst]
        if not matches:
            return PriorSighting.none()
        return PriorSighting(event=matches[-1], count=len(matches))

    def _insert(self, event: SightingEvent) -> int:
        event_id = self._next_id
        self._next_id += 1
        self._events.append(event.with_id(event_id))
        return event_id
