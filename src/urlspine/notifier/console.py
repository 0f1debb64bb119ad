"""Console notifier implementation.

Prints notices to a stream, useful for the CLI, testing and development.

Example:
    >>> from urlspine.notifier.console import ConsoleNotifier
    >>> notifier = ConsoleNotifier()
    >>> # ConsoleNotifier implements Notifier protocol
    >>> hasattr(notifier, 'send')
    True
"""

from __future__ import annotations

import sys
from typing import TextIO

from urlspine.models.events import Notice


class ConsoleNotifier:
    """Console notifier that writes one line per notice.

    Best for: Testing, development, CLI applications.

    Example:
        >>> import asyncio
        >>> import io
        >>> from urlspine.models.events import Notice
        >>> from urlspine.notifier.console import ConsoleNotifier
        >>> out = io.StringIO()
        >>> asyncio.run(ConsoleNotifier(stream=out).send(Notice("#x", "hi")))
        True
        >>> out.getvalue()
        '-> #x: hi\\n'
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        show_destination: bool = True,
    ) -> None:
        """Initialize console notifier.

        Args:
            stream: Output stream (default sys.stdout).
            show_destination: Prefix each line with its destination.
        """
        self._stream = stream or sys.stdout
        self._show_destination = show_destination
        self._initialized = False

    async def initialize(self) -> None:
        """Initialize notifier (no-op for console)."""
        self._initialized = True

    async def close(self) -> None:
        """Clean up resources (no-op for console)."""
        self._initialized = False

    async def send(self, notice: Notice) -> bool:
        """Write a notice to the stream.

        Returns:
            True once the line has been written.
        """
        self._stream.write(self._format(notice) + "\n")
        self._stream.flush()
        return True

    def _format(self, notice: Notice) -> str:
        """Format notice for display.

        Example:
            >>> from urlspine.models.events import Notice
            >>> from urlspine.notifier.console import ConsoleNotifier
            >>> ConsoleNotifier(show_destination=False)._format(Notice("#x", "hi"))
            'hi'
        """
        if self._show_destination:
            return f"-> {notice.destination}: {notice.text}"
        return notice.text
