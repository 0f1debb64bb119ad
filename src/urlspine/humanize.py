"""Coarse, human-friendly elapsed-time phrases.

Only the largest whole unit is reported, truncated rather than rounded:

Example:
    >>> from datetime import timedelta
    >>> from urlspine.humanize import humanize
    >>> humanize(timedelta(seconds=45))
    '45 seconds'
    >>> humanize(timedelta(seconds=90))
    '1 minute'
    >>> humanize(timedelta(hours=2))
    '2 hours'
    >>> humanize(timedelta(seconds=90000))
    '1 day'
"""

from __future__ import annotations

from datetime import timedelta


def humanize(delta: timedelta) -> str:
    """Express ``delta`` in whole days, hours, minutes or seconds.

    Days are checked before hours before minutes before seconds; the first
    unit with a value of at least one wins. Negative durations count as zero.
    """
    seconds = max(int(delta.total_seconds()), 0)
    hours = seconds // 3600
    if hours >= 24:
        return pluralize(hours // 24, "day")
    if hours >= 1:
        return pluralize(hours, "hour")
    minutes = seconds // 60
    if minutes >= 1:
        return pluralize(minutes, "minute")
    return pluralize(seconds, "second")


def pluralize(count: int, unit: str) -> str:
    """Attach ``unit`` to ``count``, plural only when count is above one.

    Example:
        >>> from urlspine.humanize import pluralize
        >>> pluralize(0, "second"), pluralize(1, "day"), pluralize(2, "day")
        ('0 second', '1 day', '2 days')
    """
    if count > 1:
        return f"{count} {unit}s"
    return f"{count} {unit}"
