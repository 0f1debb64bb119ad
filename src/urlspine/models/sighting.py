"""Sighting model - one observed occurrence of a URL.

A sighting is written once per matched URL per incoming message and never
changes afterwards. Duplicate identity is the ``(url, dst)`` pair: the same
URL posted to two destinations is tracked independently.

Example:
    >>> from datetime import UTC, datetime
    >>> from urlspine.models.sighting import SightingEvent
    >>> s = SightingEvent(
    ...     url="http://example.com/",
    ...     nick="alice",
    ...     src="alice!a@example.org",
    ...     dst="#python",
    ...     timestamp=datetime(2024, 1, 1, tzinfo=UTC),
    ... )
    >>> s.display_name
    'alice'
    >>> s.id is None
    True
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from pydantic import ConfigDict, Field, field_validator

from urlspine.models.base import UrlSpineModel


class SightingEvent(UrlSpineModel):
    """One row of the append-only ``seen`` log.

    Example:
        >>> from urlspine.models.sighting import SightingEvent
        >>> s = SightingEvent(url="http://a.io/", nick="", src="bob!b@host", dst="#x")
        >>> s.display_name
        'bob!b@host'
    """

    model_config = ConfigDict(frozen=True)

    id: int | None = Field(default=None, description="Assigned by the store")
    url: str = Field(..., min_length=1, description="Normalized URL")
    nick: str | None = Field(default=None, description="Actor nickname, may be empty")
    src: str = Field(..., min_length=1, description="Raw source identity")
    dst: str = Field(..., min_length=1, description="Channel or target")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="When the URL was seen",
    )

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @property
    def display_name(self) -> str:
        """Nick when set, otherwise the raw source."""
        return self.nick or self.src

    def with_id(self, event_id: int) -> SightingEvent:
        """Copy of this event carrying the store-assigned id."""
        return self.model_copy(update={"id": event_id})


@dataclass(frozen=True)
class PriorSighting:
    """State of the log for a ``(url, dst)`` pair before a new sighting.

    Example:
        >>> from urlspine.models.sighting import PriorSighting
        >>> PriorSighting.none().seen_before
        False
    """

    event: SightingEvent | None
    count: int = 0

    @property
    def seen_before(self) -> bool:
        return self.event is not None

    @classmethod
    def none(cls) -> PriorSighting:
        return cls(event=None, count=0)
