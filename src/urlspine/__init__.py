"""
urlspine - Duplicate URL detection for chat channels.

urlspine watches chat messages for URLs, records every sighting in an
append-only SQLite log, and tells the channel when a URL was already posted
there: by whom, how long ago, and how many times.

Key Features:
- Robust URL extraction from noisy text
- Race-safe lookup-then-append against a persistent store
- Per-destination duplicate tracking
- "Last N URLs" history command, private messages only
- Typed event bus for other features interested in posted URLs

Quick Start:
    >>> from urlspine import MemoryNotifier, SQLiteHistoryStore, UrlSpine
    >>> async with UrlSpine(MemoryNotifier(), store=SQLiteHistoryStore("history.db")) as spine:
    ...     await spine.on_message(message)
"""

from urlspine.bus.memory import MemoryEventBus, Subscription
from urlspine.core.config import Settings, get_settings
from urlspine.core.exceptions import ConfigurationError, StorageError, UrlSpineError
from urlspine.core.urlspine import UrlSpine
from urlspine.dedup import DedupEngine, Observation, format_notice
from urlspine.extract.urls import extract_urls, iter_urls, parse_candidate
from urlspine.humanize import humanize, pluralize
from urlspine.models.events import CommandEvent, MessageEvent, Notice, Source, UrlObserved
from urlspine.models.sighting import PriorSighting, SightingEvent
from urlspine.notifier.console import ConsoleNotifier
from urlspine.notifier.memory import MemoryNotifier
from urlspine.protocols.history import HistoryStore
from urlspine.protocols.notification import Notifier
from urlspine.query import QueryService
from urlspine.storage.memory import MemoryHistoryStore
from urlspine.storage.sqlite import SQLiteHistoryStore

__version__ = "0.1.0"

__all__ = [
    # Orchestrator
    "UrlSpine",
    # Components
    "DedupEngine",
    "Observation",
    "QueryService",
    "extract_urls",
    "format_notice",
    "humanize",
    "iter_urls",
    "parse_candidate",
    "pluralize",
    # Storage
    "HistoryStore",
    "MemoryHistoryStore",
    "SQLiteHistoryStore",
    # Models
    "CommandEvent",
    "MessageEvent",
    "Notice",
    "PriorSighting",
    "SightingEvent",
    "Source",
    "UrlObserved",
    # Notification
    "ConsoleNotifier",
    "MemoryNotifier",
    "Notifier",
    # Events
    "MemoryEventBus",
    "Subscription",
    # Configuration
    "ConfigurationError",
    "Settings",
    "StorageError",
    "UrlSpineError",
    "get_settings",
]
