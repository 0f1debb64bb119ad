"""Custom exceptions.

urlspine uses a small hierarchy of exceptions so hosts can catch everything
the feature raises with a single ``except UrlSpineError``:

Example:
    >>> from urlspine.core.exceptions import StorageError, UrlSpineError
    >>> isinstance(StorageError("db error"), UrlSpineError)
    True
    >>> try:
    ...     raise StorageError("history.db is locked")
    ... except UrlSpineError as e:
    ...     print(f"Caught: {type(e).__name__}")
    Caught: StorageError
"""

from __future__ import annotations


class UrlSpineError(Exception):
    """Base exception for urlspine.

    Example:
        >>> from urlspine.core.exceptions import UrlSpineError
        >>> e = UrlSpineError("something went wrong")
        >>> str(e)
        'something went wrong'
    """


class StorageError(UrlSpineError):
    """History store operation failed.

    Raised when the store cannot be opened or migrated, when it is used
    before ``initialize()``, and when a sighting could not be appended.

    Example:
        >>> from urlspine.core.exceptions import StorageError
        >>> raise StorageError("connection lost")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        StorageError: connection lost
    """


class ConfigurationError(UrlSpineError):
    """Configuration is invalid.

    Example:
        >>> from urlspine.core.exceptions import ConfigurationError
        >>> raise ConfigurationError("unknown backend")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ConfigurationError: unknown backend
    """
