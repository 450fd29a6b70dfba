r"""Parameter validation utilities for client configuration.

This module provides validation functions for configuration parameters
to ensure they meet the required constraints before being used to build
clients and queues.
"""

from __future__ import annotations

__all__ = [
    "validate_base_url",
    "validate_encoding",
    "validate_max_queue_size",
    "validate_timeout",
]

import codecs
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


def validate_timeout(timeout: float | httpx.Timeout) -> None:
    """Validate timeout parameter.

    Args:
        timeout: Maximum seconds to wait for server responses.
            Must be > 0 if provided as a numeric value.

    Raises:
        ValueError: If timeout is a numeric value <= 0.

    Example:
        ```pycon
        >>> from arequest.core.validation import validate_timeout
        >>> validate_timeout(10.0)
        >>> validate_timeout(30)
        >>> validate_timeout(0)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: timeout must be > 0, got 0

        ```
    """
    if isinstance(timeout, (int, float)) and timeout <= 0:
        msg = f"timeout must be > 0, got {timeout}"
        raise ValueError(msg)


def validate_max_queue_size(max_queue_size: int) -> None:
    """Validate the capacity of an operation queue.

    Args:
        max_queue_size: Maximum number of pending operations.
            Must be >= 0. A value of 0 means unbounded.

    Raises:
        ValueError: If max_queue_size is negative.

    Example:
        ```pycon
        >>> from arequest.core.validation import validate_max_queue_size
        >>> validate_max_queue_size(0)
        >>> validate_max_queue_size(100)
        >>> validate_max_queue_size(-1)  # doctest: +SKIP

        ```
    """
    if max_queue_size < 0:
        msg = f"max_queue_size must be >= 0, got {max_queue_size}"
        raise ValueError(msg)


def validate_base_url(base_url: str) -> str:
    """Validate a base URL and normalize its trailing slash.

    Args:
        base_url: The URL all request paths are relative to.

    Returns:
        The base URL, ending with ``/``.

    Raises:
        ValueError: If base_url is empty.

    Example:
        ```pycon
        >>> from arequest.core.validation import validate_base_url
        >>> validate_base_url("https://httpbin.org")
        'https://httpbin.org/'
        >>> validate_base_url("https://httpbin.org/")
        'https://httpbin.org/'

        ```
    """
    if not base_url:
        msg = "base_url cannot be empty"
        raise ValueError(msg)
    if not base_url.endswith("/"):
        base_url = f"{base_url}/"
    return base_url


def validate_encoding(encoding: str) -> None:
    """Validate a character encoding name.

    Args:
        encoding: The name of a codec known to Python (e.g. ``"utf-8"``).

    Raises:
        ValueError: If no codec is registered under that name.

    Example:
        ```pycon
        >>> from arequest.core.validation import validate_encoding
        >>> validate_encoding("utf-8")
        >>> validate_encoding("latin-1")
        >>> validate_encoding("unknown")  # doctest: +SKIP

        ```
    """
    try:
        codecs.lookup(encoding)
    except LookupError as exc:
        msg = f"string_encoding must be a known codec, got {encoding!r}"
        raise ValueError(msg) from exc
