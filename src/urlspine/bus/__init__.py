"""Event bus backends."""

from urlspine.bus.memory import MemoryEventBus, Subscription

__all__ = ["MemoryEventBus", "Subscription"]
