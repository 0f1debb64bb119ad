"""The ``urls`` command: list the most recently seen URLs.

Querying is only answered in private; in a channel the command gets a
fixed rejection notice instead.

Example:
    >>> from urlspine.query import QueryService
    >>> from urlspine.storage.memory import MemoryHistoryStore
    >>> service = QueryService(MemoryHistoryStore())
    >>> service.usage()
    ['urls: usage: !urls', 'urls: Prints the last 5 URLs seen in all channels']
"""

from __future__ import annotations

import logging
from datetime import UTC, tzinfo
from typing import TYPE_CHECKING

from urlspine.core.exceptions import StorageError
from urlspine.models.events import CommandEvent, Notice
from urlspine.models.sighting import SightingEvent

if TYPE_CHECKING:
    from urlspine.protocols.history import HistoryStore

logger = logging.getLogger(__name__)

NO_MORE = "(no more URLs)"
TIME_FORMAT = "%m-%d %H:%M:%S"


def format_line(event: SightingEvent, tz: tzinfo = UTC) -> str:
    """One listing line: ``MM-DD HH:MM:SS: <dst>: <url> by <nick-or-raw>``.

    Example:
        >>> from datetime import UTC, datetime
        >>> from urlspine.models.sighting import SightingEvent
        >>> from urlspine.query import format_line
        >>> format_line(SightingEvent(
        ...     url="http://a.io/", nick=None, src="bob!b@h", dst="#x",
        ...     timestamp=datetime(2024, 3, 9, 14, 5, 7, tzinfo=UTC),
        ... ))
        '03-09 14:05:07: #x: http://a.io/ by bob!b@h'
    """
    stamp = event.timestamp.astimezone(tz).strftime(TIME_FORMAT)
    return f"{stamp}: {event.dst}: {event.url} by {event.display_name}"


class QueryService:
    """Answers history queries over the shared store.

    Args:
        store: History store shared with the dedup engine.
        name: Command name, used as the prefix of every reply.
        prefix: Command prefix shown in the usage text.
        limit: Default number of URLs to list.
        tz: Timezone used to render timestamps.
    """

    def __init__(
        self,
        store: HistoryStore,
        *,
        name: str = "urls",
        prefix: str = "!",
        limit: int = 5,
        tz: tzinfo = UTC,
    ) -> None:
        self._store = store
        self._name = name
        self._prefix = prefix
        self._limit = limit
        self._tz = tz

    @property
    def name(self) -> str:
        return self._name

    def usage(self) -> list[str]:
        return [
            f"{self._name}: usage: {self._prefix}{self._name}",
            f"{self._name}: Prints the last {self._limit} URLs seen in all channels",
        ]

    def rejection(self) -> str:
        return f"{self._name}: URL querying must be done over private messages"

    async def list_recent(self, limit: int | None = None) -> list[str]:
        """Up to ``limit`` lines, newest first, one per distinct URL.

        A trailing ``(no more URLs)`` line is added when the history holds
        fewer than ``limit`` distinct URLs.

        Raises:
            StorageError: If the store could not be read.
        """
        limit = self._limit if limit is None else limit
        events = await self._store.recent_distinct(limit)
        lines = [format_line(event, self._tz) for event in events]
        if len(lines) < limit:
            lines.append(NO_MORE)
        return lines

    async def handle(self, command: CommandEvent) -> list[Notice]:
        """Replies to one command invocation, all for its destination."""
        dst = command.destination
        if not command.is_private:
            return [Notice(dst, self.rejection())]

        if command.argument.strip() == "help":
            return [Notice(dst, line) for line in self.usage()]

        try:
            lines = await self.list_recent()
        except StorageError as e:
            logger.error("%s query failed: %s", self._name, e)
            return [Notice(dst, f"{self._name}: Internal error occurred")]
        return [Notice(dst, line) for line in lines]
