"""In-memory event bus for ``UrlObserved`` events.

Every parsed URL is broadcast to subscribers independently of the duplicate
notice, so other features (link previews, post lookups) can react to it.

Example:
    >>> from urlspine.bus.memory import MemoryEventBus
    >>> bus = MemoryEventBus()
    >>> sub = bus.subscribe()
    >>> bus.subscriber_count
    1
"""

from __future__ import annotations

import asyncio

from urlspine.models.events import UrlObserved


class Subscription:
    """One subscriber's queue of events.

    Iterate with ``async for``; iteration ends when the subscription or the
    bus is closed.

    Example:
        >>> import asyncio
        >>> from urlspine.bus.memory import MemoryEventBus
        >>> async def example():
        ...     bus = MemoryEventBus()
        ...     sub = bus.subscribe()
        ...     bus.close()
        ...     return [event async for event in sub]
        >>> asyncio.run(example())
        []
    """

    def __init__(self, bus: MemoryEventBus, maxsize: int) -> None:
        self._bus = bus
        self._queue: asyncio.Queue[UrlObserved | None] = asyncio.Queue(maxsize=maxsize)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def pending(self) -> int:
        """Number of events waiting to be read."""
        return self._queue.qsize()

    async def get(self) -> UrlObserved | None:
        """Next event, or None once the subscription has been closed."""
        if self._closed and self._queue.empty():
            return None
        return await self._queue.get()

    def close(self) -> None:
        """Stop receiving events and wake any waiting reader."""
        if self._closed:
            return
        self._closed = True
        self._bus._unsubscribe(self)
        self._deliver(None)

    def _deliver(self, event: UrlObserved | None) -> None:
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            # Drop oldest event if full
            try:
                self._queue.get_nowait()
                self._queue.put_nowait(event)
            except asyncio.QueueEmpty:
                pass

    def __aiter__(self) -> Subscription:
        return self

    async def __anext__(self) -> UrlObserved:
        event = await self.get()
        if event is None:
            raise StopAsyncIteration
        return event


class MemoryEventBus:
    """Typed publish/subscribe for :class:`UrlObserved`.

    Publishing never blocks the message path: each subscriber has its own
    bounded queue and loses its oldest event when full.

    Best for: Single-process hosts, testing.
    """

    def __init__(self, max_queue_size: int = 1000) -> None:
        """Initialize the bus.

        Args:
            max_queue_size: Maximum pending events per subscriber.
        """
        self._max_size = max_queue_size
        self._subscribers: list[Subscription] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, maxsize: int | None = None) -> Subscription:
        """Register a new subscriber. Events published from now on reach it."""
        subscription = Subscription(self, maxsize or self._max_size)
        self._subscribers.append(subscription)
        return subscription

    def publish(self, event: UrlObserved) -> int:
        """Deliver ``event`` to every subscriber. Returns how many got it.

        Example:
            >>> from urllib.parse import urlsplit
            >>> from urlspine.bus.memory import MemoryEventBus
            >>> from urlspine.models.events import Source, UrlObserved
            >>> bus = MemoryEventBus()
            >>> sub = bus.subscribe()
            >>> bus.publish(UrlObserved(
            ...     source=Source("bob"), destination="#x",
            ...     url="http://a.io/", parts=urlsplit("http://a.io/"),
            ... ))
            1
            >>> sub.pending()
            1
        """
        for subscription in list(self._subscribers):
            subscription._deliver(event)
        return len(self._subscribers)

    def close(self) -> None:
        """End every subscription."""
        for subscription in list(self._subscribers):
            subscription.close()
        self._subscribers.clear()

    def _unsubscribe(self, subscription: Subscription) -> None:
        if subscription in self._subscribers:
            self._subscribers.remove(subscription)
