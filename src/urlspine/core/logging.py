"""Logging setup for command-line use.

Library modules only create loggers with ``logging.getLogger(__name__)``;
installing handlers is left to the application. The CLI calls
:func:`configure_logging` once at startup.

Example:
    >>> import logging
    >>> from urlspine.core.logging import configure_logging
    >>> configure_logging("WARNING", "plain")
    >>> logging.getLogger("urlspine").getEffectiveLevel() == logging.WARNING
    True
"""

from __future__ import annotations

import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

PLAIN_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: str | int = "INFO", fmt: str = "rich") -> None:
    """Install a single handler on the ``urlspine`` logger.

    Args:
        level: Level name or number.
        fmt: ``"rich"`` for a RichHandler on stderr, ``"plain"`` for a
            timestamped stream handler.
    """
    logger = logging.getLogger("urlspine")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler: logging.Handler
    if fmt == "rich":
        handler = RichHandler(console=Console(stderr=True), show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))

    logger.addHandler(handler)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
