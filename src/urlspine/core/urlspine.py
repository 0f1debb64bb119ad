"""UrlSpine - the feature as seen by a chat host.

The UrlSpine class owns one history store, the dedup engine and the query
service that share it, and an event bus for ``UrlObserved`` events. A host
calls :meth:`UrlSpine.on_message` for every message and
:meth:`UrlSpine.on_command` for every command.

Example:
    >>> from urlspine import MemoryHistoryStore, MemoryNotifier, UrlSpine
    >>> spine = UrlSpine(store=MemoryHistoryStore(), notifier=MemoryNotifier())
    >>> # async with spine:
    >>> #     await spine.on_message(message)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from urlspine.bus.memory import MemoryEventBus
from urlspine.core.config import Settings, get_settings
from urlspine.dedup import Clock, DedupEngine, Observation, utc_now
from urlspine.query import QueryService
from urlspine.storage.factory import create_history_store

if TYPE_CHECKING:
    from urlspine.models.events import CommandEvent, MessageEvent, Notice
    from urlspine.protocols.history import HistoryStore
    from urlspine.protocols.notification import Notifier

logger = logging.getLogger(__name__)


class UrlSpine:
    """Duplicate-URL feature: store lifecycle plus host event entry points.

    Args:
        notifier: Where notices go.
        store: History store; built from ``settings`` when omitted.
        settings: Configuration (default: environment via ``get_settings()``).
        bus: Event bus for ``UrlObserved``; a new one when omitted.
        clock: Source of "now" for sightings.

    Example:
        >>> import asyncio
        >>> from urlspine.core.urlspine import UrlSpine
        >>> from urlspine.notifier.memory import MemoryNotifier
        >>> from urlspine.storage.memory import MemoryHistoryStore
        >>> async def example():
        ...     async with UrlSpine(MemoryNotifier(), store=MemoryHistoryStore()) as spine:
        ...         return spine.info()["initialized"]
        >>> asyncio.run(example())
        True
    """

    def __init__(
        self,
        notifier: Notifier,
        *,
        store: HistoryStore | None = None,
        settings: Settings | None = None,
        bus: MemoryEventBus | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self._settings = settings or get_settings()
        self._store = store if store is not None else create_history_store(self._settings)
        self._notifier = notifier
        self._bus = bus or MemoryEventBus()
        self._engine = DedupEngine(
            self._store,
            notifier,
            bus=self._bus,
            clock=clock,
            assume_scheme=self._settings.assume_scheme,
        )
        self._query = QueryService(
            self._store,
            name=self._settings.command_name,
            prefix=self._settings.command_prefix,
            limit=self._settings.history_limit,
            tz=self._settings.tzinfo,
        )
        self._initialized = False

    @property
    def store(self) -> HistoryStore:
        """Get the history store."""
        return self._store

    @property
    def bus(self) -> MemoryEventBus:
        """Get the event bus."""
        return self._bus

    @property
    def engine(self) -> DedupEngine:
        return self._engine

    @property
    def query(self) -> QueryService:
        return self._query

    async def on_message(self, message: MessageEvent) -> list[Observation]:
        """Handle a message-delivered event."""
        return await self._engine.observe(message)

    async def on_command(self, command: CommandEvent) -> list[Notice]:
        """Handle a command-delivered event.

        Commands for other names are ignored. Replies are sent through the
        notifier and also returned; a failed send is logged and the
        remaining replies are still sent.
        """
        if command.command != self._query.name:
            return []
        notices = await self._query.handle(command)
        for notice in notices:
            try:
                await self._notifier.send(notice)
            except Exception:
                logger.exception("Failed to send reply to %s", notice.destination)
        return notices

    async def initialize(self) -> None:
        """Open the store and the notifier.

        Raises:
            StorageError: If the store cannot be opened or migrated.
        """
        if self._initialized:
            return

        await self._store.initialize()
        await self._notifier.initialize()
        self._initialized = True

    async def close(self) -> None:
        """Wait for outstanding notices, then release everything."""
        await self._engine.flush()
        self._bus.close()
        await self._notifier.close()
        await self._store.close()
        self._initialized = False

    async def __aenter__(self) -> UrlSpine:
        """Async context manager entry."""
        await self.initialize()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()

    def info(self) -> dict[str, Any]:
        """Get orchestrator metadata."""
        return {
            "store": type(self._store).__name__,
            "command": self._query.name,
            "subscribers": self._bus.subscriber_count,
            "pending_notices": self._engine.pending_notices,
            "initialized": self._initialized,
        }
