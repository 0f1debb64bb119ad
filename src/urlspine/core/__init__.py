"""Core configuration and orchestration."""

from urlspine.core.config import Settings, get_settings
from urlspine.core.exceptions import ConfigurationError, StorageError, UrlSpineError
from urlspine.core.urlspine import UrlSpine

__all__ = [
    # Orchestrator
    "UrlSpine",
    # Configuration
    "Settings",
    "get_settings",
    # Errors
    "ConfigurationError",
    "StorageError",
    "UrlSpineError",
]
