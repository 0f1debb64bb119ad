"""Notifier backends."""

from urlspine.notifier.console import ConsoleNotifier
from urlspine.notifier.memory import MemoryNotifier

__all__ = ["ConsoleNotifier", "MemoryNotifier"]
