"""Models for urlspine."""

from urlspine.models.base import UrlSpineModel
from urlspine.models.events import CommandEvent, MessageEvent, Notice, Source, UrlObserved
from urlspine.models.sighting import PriorSighting, SightingEvent

__all__ = [
    # Base
    "UrlSpineModel",
    # Sightings
    "PriorSighting",
    "SightingEvent",
    # Host events
    "CommandEvent",
    "MessageEvent",
    "Notice",
    "Source",
    "UrlObserved",
]
