"""Event payloads exchanged with the chat host.

The host delivers :class:`MessageEvent` and :class:`CommandEvent`;
urlspine produces :class:`UrlObserved` (on the event bus) and
:class:`Notice` (through a notifier).

Example:
    >>> from urlspine.models.events import MessageEvent, Source
    >>> msg = MessageEvent(
    ...     source=Source.parse("alice!a@example.org"),
    ...     destination="#python",
    ...     text="see http://example.com",
    ... )
    >>> msg.source.nick
    'alice'
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from urllib.parse import SplitResult


@dataclass(frozen=True)
class Source:
    """Originating identity of a line.

    Example:
        >>> from urlspine.models.events import Source
        >>> Source.parse("bob!~b@host.example").nick
        'bob'
        >>> Source.parse("irc.example.net").nick is None
        True
    """

    raw: str
    nick: str | None = None

    @classmethod
    def parse(cls, raw: str) -> Source:
        """Build a source from a ``nick!user@host`` prefix."""
        nick, sep, _ = raw.partition("!")
        return cls(raw=raw, nick=nick if sep and nick else None)


@dataclass(frozen=True)
class MessageEvent:
    """A chat message delivered to a destination."""

    source: Source
    destination: str
    text: str
    session: Any = None


@dataclass(frozen=True)
class CommandEvent:
    """A command invocation delivered by the host's dispatcher."""

    source: Source
    command: str
    argument: str
    destination: str
    is_private: bool
    session: Any = None


@dataclass(frozen=True)
class UrlObserved:
    """A URL parsed out of a message, broadcast to bus subscribers."""

    source: Source
    destination: str
    url: str
    parts: SplitResult
    session: Any = None


@dataclass(frozen=True)
class Notice:
    """An outgoing, non-persisted notice for one destination."""

    destination: str
    text: str
