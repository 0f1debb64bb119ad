"""Protocol definitions - all extension points."""

from urlspine.protocols.history import HistoryStore
from urlspine.protocols.notification import Notifier

__all__ = [
    # Storage
    "HistoryStore",
    # Notification
    "Notifier",
]
