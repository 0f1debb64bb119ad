"""Duplicate URL detection for incoming chat messages.

For every URL in a message the engine records a sighting and, when the same
URL was already seen in the same destination, sends a notice saying who
posted it, how long ago, and how many times:

    URL 'http://example.com/' was last seen 3 hours ago by alice (2 total)

The count is the number of sightings *before* the current one.

Example:
    >>> from urlspine.dedup import DedupEngine
    >>> from urlspine.notifier.memory import MemoryNotifier
    >>> from urlspine.storage.memory import MemoryHistoryStore
    >>> engine = DedupEngine(MemoryHistoryStore(), MemoryNotifier())
    >>> # observations = await engine.observe(message)
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from urlspine.core.exceptions import StorageError
from urlspine.extract.urls import iter_urls
from urlspine.humanize import humanize
from urlspine.models.events import MessageEvent, Notice, UrlObserved
from urlspine.models.sighting import PriorSighting, SightingEvent

if TYPE_CHECKING:
    from urlspine.bus.memory import MemoryEventBus
    from urlspine.protocols.history import HistoryStore
    from urlspine.protocols.notification import Notifier

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class Observation:
    """Outcome of one URL found in a message.

    ``event`` is None when the sighting could not be stored; ``notice`` is
    None when the URL had not been seen before in that destination.
    """

    url: str
    event: SightingEvent | None
    prior: PriorSighting
    notice: Notice | None = None

    @property
    def lost(self) -> bool:
        return self.event is None


def format_notice(url: str, prior: PriorSighting, now: datetime) -> str:
    """Text of the duplicate notice for ``url``.

    Example:
        >>> from datetime import UTC, datetime, timedelta
        >>> from urlspine.dedup import format_notice
        >>> from urlspine.models.sighting import PriorSighting, SightingEvent
        >>> then = datetime(2024, 1, 1, tzinfo=UTC)
        >>> prior = PriorSighting(
        ...     event=SightingEvent(url="http://a.io/", nick="alice", src="alice!a@h",
        ...                         dst="#x", timestamp=then),
        ...     count=2,
        ... )
        >>> format_notice("http://a.io/", prior, then + timedelta(hours=3))
        "URL 'http://a.io/' was last seen 3 hours ago by alice (2 total)"
    """
    if prior.event is None:
        raise ValueError("format_notice needs a prior sighting")
    elapsed = humanize(now - prior.event.timestamp)
    return (
        f"URL '{url}' was last seen {elapsed} ago "
        f"by {prior.event.display_name} ({prior.count} total)"
    )


class DedupEngine:
    """Extracts URLs from messages, logs each sighting, reports repeats.

    Args:
        store: History store shared with the query service.
        notifier: Where duplicate notices go.
        bus: Optional bus receiving a ``UrlObserved`` per parsed URL.
        clock: Source of "now" (default: current UTC time).
        assume_scheme: Scheme for schemeless candidates, see
            :func:`urlspine.extract.urls.parse_candidate`.
    """

    def __init__(
        self,
        store: HistoryStore,
        notifier: Notifier,
        *,
        bus: MemoryEventBus | None = None,
        clock: Clock = utc_now,
        assume_scheme: str | None = None,
    ) -> None:
        self._store = store
        self._notifier = notifier
        self._bus = bus
        self._clock = clock
        self._assume_scheme = assume_scheme
        self._pending: set[asyncio.Task[bool]] = set()

    @property
    def pending_notices(self) -> int:
        return len(self._pending)

    async def observe(self, message: MessageEvent) -> list[Observation]:
        """Process every URL in ``message``, in order of appearance."""
        observations = []
        for url, parts in iter_urls(message.text, assume_scheme=self._assume_scheme):
            if self._bus is not None:
                self._bus.publish(
                    UrlObserved(
                        source=message.source,
                        destination=message.destination,
                        url=url,
                        parts=parts,
                        session=message.session,
                    )
                )
            observations.append(await self._observe_url(message, url))
        return observations

    async def _observe_url(self, message: MessageEvent, url: str) -> Observation:
        event = SightingEvent(
            url=url,
            nick=message.source.nick,
            src=message.source.raw,
            dst=message.destination,
            timestamp=self._clock(),
        )
        try:
            prior = await self._store.observe(event)
        except StorageError as e:
            logger.error("Sighting of %s in %s lost: %s", url, message.destination, e)
            return Observation(url=url, event=None, prior=PriorSighting.none())

        if not prior.seen_before:
            return Observation(url=url, event=event, prior=prior)

        notice = Notice(
            destination=message.destination,
            text=format_notice(url, prior, self._clock()),
        )
        self._dispatch(notice)
        return Observation(url=url, event=event, prior=prior, notice=notice)

    def _dispatch(self, notice: Notice) -> None:
        task = asyncio.create_task(self._send(notice))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _send(self, notice: Notice) -> bool:
        try:
            return await self._notifier.send(notice)
        except Exception:
            logger.exception("Failed to send notice to %s", notice.destination)
            return False

    async def flush(self) -> None:
        """Wait for notices that are still being sent."""
        if self._pending:
            await asyncio.gather(*list(self._pending))
