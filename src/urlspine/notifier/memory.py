"""In-memory notifier that keeps every notice it is given."""

from __future__ import annotations

from urlspine.models.events import Notice


class MemoryNotifier:
    """Collects notices in a list, in send order.

    Best for: Testing, hosts that poll for outgoing notices.

    Example:
        >>> import asyncio
        >>> from urlspine.models.events import Notice
        >>> from urlspine.notifier.memory import MemoryNotifier
        >>> n = MemoryNotifier()
        >>> asyncio.run(n.send(Notice("#x", "hi")))
        True
        >>> n.texts("#x")
        ['hi']
    """

    def __init__(self) -> None:
        self.notices: list[Notice] = []

    async def initialize(self) -> None:
        pass

    async def close(self) -> None:
        pass

    async def send(self, notice: Notice) -> bool:
        self.notices.append(notice)
        return True

    def texts(self, destination: str | None = None) -> list[str]:
        """Notice texts, optionally only those for one destination."""
        return [
            n.text for n in self.notices if destination is None or n.destination == destination
        ]

    def clear(self) -> None:
        self.notices.clear()
