"""Notification protocol.

Defines the interface for delivering outgoing notices to the chat host.

Example:
    >>> from urlspine.models.events import Notice
    >>> n = Notice(destination="#python", text="hello")
    >>> n.destination
    '#python'
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from urlspine.models.events import Notice


@runtime_checkable
class Notifier(Protocol):
    """Notice delivery backend protocol."""

    async def send(self, notice: Notice) -> bool:
        """Send a notice. Returns True if it was delivered."""
        ...

    async def initialize(self) -> None:
        """Initialize notifier."""
        ...

    async def close(self) -> None:
        """Clean up resources."""
        ...
