"""History store protocol.

Defines the interface for the append-only sighting log.

Example:
    >>> from urlspine.protocols.history import HistoryStore
    >>> hasattr(HistoryStore, "observe")
    True
    >>> hasattr(HistoryStore, "recent_distinct")
    True
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from urlspine.models.sighting import PriorSighting, SightingEvent


@runtime_checkable
class HistoryStore(Protocol):
    """Append-only log of URL sightings.

    Every public operation runs in its own transaction. Rows are never
    updated or deleted.

    See Also:
        urlspine.storage.sqlite.SQLiteHistoryStore: Durable implementation
        urlspine.storage.memory.MemoryHistoryStore: In-memory implementation
    """

    async def initialize(self) -> None:
        """Open the store and create the schema if needed."""
        ...

    async def close(self) -> None:
        """Release the underlying handle."""
        ...

    async def most_recent_and_count(self, url: str, dst: str) -> PriorSighting:
        """Latest sighting of the pair and the number of sightings so far."""
        ...

    async def append(self, event: SightingEvent) -> int:
        """Record a sighting. Returns the assigned id."""
        ...

    async def observe(self, event: SightingEvent) -> PriorSighting:
        """Look up the pair, then append ``event``, atomically.

        The returned state reflects the log before ``event`` was added.
        """
        ...

    async def recent_distinct(self, limit: int) -> list[SightingEvent]:
        """Most recent sighting per distinct URL, newest first."""
        ...

    async def count(self, url: str | None = None, dst: str | None = None) -> int:
        """Number of rows, optionally filtered by url and/or destination."""
        ...
